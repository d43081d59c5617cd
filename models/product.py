from models import db
from datetime import datetime

NO_VARIANT = 'no-variant'


# نموذج المنتج
class Product(db.Model):
    __tablename__ = 'products'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    name_ar = db.Column(db.String(200), nullable=True)
    description = db.Column(db.Text, nullable=False, default='')
    description_ar = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 3), nullable=False, default=0)
    images = db.Column(db.JSON, nullable=False, default=list)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True)
    total_stock = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # المتغيرات مملوكة للمنتج بالكامل وتُحذف معه
    variants = db.relationship('ProductVariant', backref='product', cascade='all, delete-orphan',
                               order_by='ProductVariant.position', passive_deletes=True)

    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_products_price'),
        db.CheckConstraint('total_stock >= 0', name='ck_products_total_stock'),
    )

    def __repr__(self):
        return f'<Product {self.name}>'

    def find_variant(self, variant_id):
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def recalculate_total_stock(self):
        """إعادة حساب المخزون الكلي من مخزون المتغيرات إن وجدت"""
        if self.variants:
            self.total_stock = sum(v.stock for v in self.variants)
        return self.total_stock

    def available_stock(self, variant_id=None):
        if variant_id and variant_id != NO_VARIANT:
            variant = self.find_variant(variant_id)
            return variant.stock if variant else 0
        return self.total_stock or 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'name_ar': self.name_ar,
            'description': self.description,
            'description_ar': self.description_ar,
            'price': float(self.price) if self.price is not None else 0.0,
            'images': list(self.images or []),
            'variants': [v.to_dict() for v in self.variants],
            'category_id': self.category_id,
            'total_stock': self.total_stock,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


# متغير المنتج (لون، مقاس ...) بمخزون مستقل
class ProductVariant(db.Model):
    __tablename__ = 'product_variants'
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True)
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    image = db.Column(db.String(500), nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.CheckConstraint('stock >= 0', name='ck_product_variants_stock'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'stock': self.stock,
            'image': self.image or '',
        }
