"""Product and category storage.

Whenever a product has variants its ``total_stock`` is the sum of the
variant stocks; every writer in this module re-establishes that before
committing.
"""
import uuid

from flask_babel import gettext as _

from sqlalchemy import update

from models import db
from models.category import Category
from models.product import Product, ProductVariant, NO_VARIANT
from services import commit, get_row
from services.errors import ValidationError, InvalidReference, NotFound
from services.pricing import to_money, to_int

STOCK_ALIASES = ('total_stock', 'stock', 'totalStock')


# ---------------------------------------------------------------- categories

def list_categories():
    return Category.query.order_by(Category.created_at.desc(), Category.id.desc()).all()


def get_category(category_id):
    category = get_row(Category, category_id)
    if category is None:
        raise NotFound(_('Category not found'))
    return category


def _check_category_name(name, exclude_id=None):
    query = Category.query.filter(Category.name == name)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first() is not None:
        raise ValidationError(_('Category name is already in use'))


def create_category(data):
    name = (data.get('name') or '').strip()
    if not name:
        raise ValidationError(_('Category name is required'))
    _check_category_name(name)
    category = Category(name=name, name_ar=(data.get('name_ar') or '').strip() or None)
    db.session.add(category)
    commit()
    return category


def update_category(category_id, data):
    category = get_category(category_id)
    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError(_('Category name is required'))
        _check_category_name(name, exclude_id=category.id)
        category.name = name
    if 'name_ar' in data:
        category.name_ar = (data.get('name_ar') or '').strip() or None
    commit()
    return category


def delete_category(category_id):
    """Delete a category, detaching (never deleting) its products."""
    category = get_category(category_id)
    Product.query.filter(Product.category_id == category.id) \
        .update({Product.category_id: None}, synchronize_session='fetch')
    db.session.delete(category)
    commit()


# ------------------------------------------------------------------ products

def list_products(category_id=None):
    query = Product.query
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)
    return query.order_by(Product.created_at.desc(), Product.id.desc()).all()


def get_product(product_id):
    product = get_row(Product, product_id)
    if product is None:
        raise NotFound(_('Product not found'))
    return product


def _resolve_category(value):
    # "" من نموذج الواجهة يعني بدون صنف
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    category_id = to_int(value, 'category_id')
    if get_row(Category, category_id) is None:
        raise InvalidReference(_('Invalid category selected. Please choose a valid category or leave it empty.'))
    return category_id


def _stock_from_aliases(data):
    for key in STOCK_ALIASES:
        if data.get(key) not in (None, ''):
            stock = to_int(data[key], key)
            if stock < 0:
                raise ValidationError(_('Stock cannot be negative'))
            return stock
    return None


def _parse_price(value):
    price = to_money(value, 'price')
    if price < 0:
        raise ValidationError(_('Invalid price value. Price must be a positive number.'))
    return price


def _parse_images(value):
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
        raise ValidationError(_('Images must be a list of URLs'))
    return [url for url in value if url.strip()]


def _apply_variants(product, raw_variants):
    if not isinstance(raw_variants, list):
        raise ValidationError(_('Variants must be a list'))
    existing = {v.id: v for v in product.variants}
    variants = []
    seen = set()
    for position, raw in enumerate(raw_variants):
        if not isinstance(raw, dict):
            raise ValidationError(_('Variants must be a list'))
        name = (raw.get('name') or '').strip()
        if not name:
            raise ValidationError(_('Variant name is required'))
        stock = to_int(raw.get('stock') if raw.get('stock') not in (None, '') else 0, 'stock')
        if stock < 0:
            raise ValidationError(_('Stock cannot be negative'))
        variant_id = str(raw.get('id') or uuid.uuid4().hex[:12])
        if variant_id == NO_VARIANT or variant_id in seen:
            raise ValidationError(_('Duplicate variant id %(id)s', id=variant_id))
        seen.add(variant_id)

        variant = existing.get(variant_id) or ProductVariant(id=variant_id)
        variant.name = name
        variant.stock = stock
        variant.image = raw.get('image') or None
        variant.position = position
        variants.append(variant)
    product.variants = variants


def create_product(data):
    name = (data.get('name') or '').strip()
    if not name:
        raise ValidationError(_('Name and price are required'))
    if data.get('price') in (None, ''):
        raise ValidationError(_('Name and price are required'))

    product = Product(
        name=name,
        name_ar=(data.get('name_ar') or '').strip() or None,
        description=(data.get('description') or '').strip(),
        description_ar=(data.get('description_ar') or '').strip() or None,
        price=_parse_price(data.get('price')),
        images=_parse_images(data.get('images')),
        category_id=_resolve_category(data.get('category_id')),
    )
    _apply_variants(product, data.get('variants') or [])
    if product.variants:
        product.recalculate_total_stock()
    else:
        product.total_stock = _stock_from_aliases(data) or 0

    db.session.add(product)
    commit()
    return product


def update_product(product_id, data):
    product = get_product(product_id)

    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError(_('Product name cannot be empty'))
        product.name = name
    for key in ('name_ar', 'description_ar'):
        if key in data:
            setattr(product, key, (data.get(key) or '').strip() or None)
    if 'description' in data:
        product.description = (data.get('description') or '').strip()
    if 'price' in data:
        product.price = _parse_price(data.get('price'))
    if 'images' in data:
        product.images = _parse_images(data.get('images'))
    if 'category_id' in data:
        product.category_id = _resolve_category(data.get('category_id'))

    if data.get('variants') is not None:
        _apply_variants(product, data['variants'])
    stock = _stock_from_aliases(data)
    if product.variants:
        product.recalculate_total_stock()
    elif stock is not None:
        product.total_stock = stock

    commit()
    return product


def delete_product(product_id):
    product = get_product(product_id)
    db.session.delete(product)
    commit()


def update_product_stock(product_id, variants=None, total_stock=None):
    """Set absolute stock levels (restocking from the back office).

    ``variants`` is a list of ``{id, stock}``; only the listed variants change.
    A product that has variants never takes ``total_stock`` directly.
    """
    product = get_product(product_id)
    if variants:
        for raw in variants:
            variant = product.find_variant(str(raw.get('id')))
            if variant is None:
                raise InvalidReference(_('Variant %(variant)s not found for product %(product)s',
                                         variant=raw.get('id'), product=product.name))
            stock = to_int(raw.get('stock'), 'stock')
            if stock < 0:
                raise ValidationError(_('Stock cannot be negative'))
            variant.stock = stock
        product.recalculate_total_stock()
    elif total_stock is not None:
        if product.variants:
            raise ValidationError(_('Stock of a product with variants is set per variant'))
        stock = to_int(total_stock, 'total_stock')
        if stock < 0:
            raise ValidationError(_('Stock cannot be negative'))
        product.total_stock = stock
    commit()
    return product


def decrement_stock(product, variant_id, quantity):
    """Conditionally take ``quantity`` units out of stock.

    Runs ``stock = stock - quantity WHERE stock >= quantity`` so two writers
    can never both take the last units. Returns False when the row no longer
    has enough stock. Does not commit.
    """
    if variant_id:
        result = db.session.execute(
            update(ProductVariant)
            .where(ProductVariant.product_id == product.id,
                   ProductVariant.id == variant_id,
                   ProductVariant.stock >= quantity)
            .values(stock=ProductVariant.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        db.session.execute(
            update(Product)
            .where(Product.id == product.id)
            .values(total_stock=Product.total_stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return True

    result = db.session.execute(
        update(Product)
        .where(Product.id == product.id, Product.total_stock >= quantity)
        .values(total_stock=Product.total_stock - quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
