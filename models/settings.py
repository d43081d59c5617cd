from decimal import Decimal
from flask import current_app
from models import db
from datetime import datetime

MONEY_SETTINGS = (
    'delivery_fee',
    'free_delivery_minimum',
    'delivery_area_sitra',
    'delivery_area_muharraq',
    'delivery_area_other',
)

TEXT_SETTINGS = (
    'store_name',
    'store_name_ar',
    'currency',
    'delivery_area_sitra_name_ar',
    'delivery_area_sitra_name_en',
    'delivery_area_muharraq_name_ar',
    'delivery_area_muharraq_name_en',
    'delivery_area_other_name_ar',
    'delivery_area_other_name_en',
)


# إعدادات المتجر: صف واحد تملكه الخادم، ومنه تُقرأ رسوم التوصيل
class StoreSettings(db.Model):
    __tablename__ = 'store_settings'
    id = db.Column(db.Integer, primary_key=True)
    store_name = db.Column(db.String(128), nullable=False)
    store_name_ar = db.Column(db.String(128), nullable=True)
    currency = db.Column(db.String(8), nullable=False, default='BHD')

    delivery_fee = db.Column(db.Numeric(10, 3), nullable=False)
    free_delivery_minimum = db.Column(db.Numeric(10, 3), nullable=False)
    delivery_area_sitra = db.Column(db.Numeric(10, 3), nullable=False)
    delivery_area_muharraq = db.Column(db.Numeric(10, 3), nullable=False)
    delivery_area_other = db.Column(db.Numeric(10, 3), nullable=False)

    delivery_area_sitra_name_ar = db.Column(db.String(128), nullable=True)
    delivery_area_sitra_name_en = db.Column(db.String(128), nullable=True)
    delivery_area_muharraq_name_ar = db.Column(db.String(128), nullable=True)
    delivery_area_muharraq_name_en = db.Column(db.String(128), nullable=True)
    delivery_area_other_name_ar = db.Column(db.String(128), nullable=True)
    delivery_area_other_name_en = db.Column(db.String(128), nullable=True)

    version = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def get_current(cls):
        """الإعدادات الحالية، وتُنشأ من القيم الافتراضية عند أول استخدام"""
        settings = cls.query.order_by(cls.id).first()
        if settings is None:
            defaults = current_app.config['DEFAULT_STORE_SETTINGS']
            settings = cls()
            for key in TEXT_SETTINGS:
                setattr(settings, key, defaults.get(key))
            for key in MONEY_SETTINGS:
                setattr(settings, key, Decimal(defaults[key]))
            db.session.add(settings)
            db.session.commit()
        return settings

    def to_dict(self):
        data = {key: getattr(self, key) for key in TEXT_SETTINGS}
        for key in MONEY_SETTINGS:
            data[key] = float(getattr(self, key))
        data['version'] = self.version
        data['updated_at'] = self.updated_at.isoformat() if self.updated_at else None
        return data
