from models import db
from datetime import datetime

EVENT_TYPES = ('page_view', 'order_placed', 'customer_created', 'product_viewed', 'error')


class AnalyticsEvent(db.Model):
    __tablename__ = 'analytics_events'
    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(32), nullable=False, index=True)
    page = db.Column(db.String(255), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    ip = db.Column(db.String(64), nullable=True)
    order_id = db.Column(db.Integer, nullable=True)
    customer_id = db.Column(db.Integer, nullable=True)
    product_id = db.Column(db.Integer, nullable=True)
    error = db.Column(db.String(500), nullable=True)
    revenue = db.Column(db.Numeric(10, 3), nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'page': self.page,
            'order_id': self.order_id,
            'customer_id': self.customer_id,
            'product_id': self.product_id,
            'error': self.error,
            'revenue': float(self.revenue) if self.revenue is not None else None,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }
