from models import db
from datetime import datetime

LOG_LEVELS = ('info', 'warning', 'error', 'debug')
LOG_CATEGORIES = ('system', 'user', 'order', 'product', 'customer', 'analytics', 'security')


# سجل النظام المعروض في لوحة التحكم
class SystemLog(db.Model):
    __tablename__ = 'system_logs'
    id = db.Column(db.Integer, primary_key=True)
    level = db.Column(db.String(10), nullable=False, default='info', index=True)
    category = db.Column(db.String(20), nullable=False, default='system', index=True)
    message = db.Column(db.String(500), nullable=False)
    details = db.Column(db.JSON, nullable=True)
    user_id = db.Column(db.String(64), nullable=True)
    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': self.created_at.isoformat() if self.created_at else None,
            'level': self.level,
            'category': self.category,
            'message': self.message,
            'details': self.details,
            'user_id': self.user_id,
            'ip': self.ip,
            'user_agent': self.user_agent,
        }
