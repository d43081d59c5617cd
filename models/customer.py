from models import db
from datetime import datetime


def compose_address(home=None, road=None, block=None, town=None):
    """تركيب العنوان من أجزائه (منزل، طريق، مجمع، مدينة)"""
    parts = []
    if home:
        parts.append(f'House {home}')
    if road:
        parts.append(f'Road {road}')
    if block:
        parts.append(f'Block {block}')
    if town:
        parts.append(town)
    return ', '.join(parts)


class Customer(db.Model):
    __tablename__ = 'customers'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32), nullable=False, index=True)
    address = db.Column(db.Text, nullable=False)
    home = db.Column(db.String(64), nullable=True)
    road = db.Column(db.String(64), nullable=True)
    block = db.Column(db.String(64), nullable=True)
    town = db.Column(db.String(128), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # حذف العميل يحذف طلباته (ON DELETE CASCADE في قاعدة البيانات)
    orders = db.relationship('Order', backref='customer', cascade='all, delete-orphan', passive_deletes=True)

    def __repr__(self):
        return f'<Customer {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'address': self.address or compose_address(self.home, self.road, self.block, self.town),
            'home': self.home,
            'road': self.road,
            'block': self.block,
            'town': self.town,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
