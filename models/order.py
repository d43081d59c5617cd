from models import db
from datetime import datetime

ORDER_STATUSES = ('processing', 'ready', 'delivered', 'picked-up')
DELIVERY_TYPES = ('delivery', 'pickup')
DELIVERY_AREAS = ('sitra', 'muharraq', 'other')


class Order(db.Model):
    __tablename__ = 'orders'
    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True)
    # لقطة من عناصر الطلب: product_id, variant_id, quantity, price
    items = db.Column(db.JSON, nullable=False, default=list)
    delivery_fee = db.Column(db.Numeric(10, 3), nullable=False, default=0)
    total = db.Column(db.Numeric(10, 3), nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default='processing', index=True)
    delivery_type = db.Column(db.String(20), nullable=False, default='delivery')
    delivery_area = db.Column(db.String(20), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("status IN ('processing', 'ready', 'delivered', 'picked-up')", name='ck_orders_status'),
        db.CheckConstraint("delivery_type IN ('delivery', 'pickup')", name='ck_orders_delivery_type'),
    )

    def __repr__(self):
        return f'<Order {self.id}>'

    @property
    def items_subtotal(self):
        from services.pricing import items_subtotal
        return items_subtotal(self.items or [])

    def to_dict(self, include_customer=True):
        data = {
            'id': self.id,
            'customer_id': self.customer_id,
            'items': [
                {
                    'product_id': item['product_id'],
                    'variant_id': item.get('variant_id'),
                    'quantity': item['quantity'],
                    'price': float(item['price']),
                }
                for item in (self.items or [])
            ],
            'delivery_fee': float(self.delivery_fee or 0),
            'total': float(self.total or 0),
            'status': self.status,
            'delivery_type': self.delivery_type,
            'delivery_area': self.delivery_area,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_customer and self.customer is not None:
            data['customer'] = self.customer.to_dict()
        return data
