"""Order placement.

Everything is validated before anything is written: an empty cart, a bad
quantity, an unknown product or variant, or missing stock rejects the whole
request with no side effects. The customer insert, the order insert and the
stock decrements are then committed together in one transaction.
"""
from collections import namedtuple, defaultdict

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.product import Product, NO_VARIANT
from services import get_row, system_log
from services.analytics import build_event
from services.catalog import decrement_stock
from services.customers import build_customer
from services.errors import ValidationError, InvalidReference, InsufficientStock, StorageError
from services.orders import build_order, check_delivery, current_pricing
from services.pricing import to_int

CartLine = namedtuple('CartLine', 'product_id variant_id quantity client_price')


def _read_cart(raw_items):
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError(_('Order items are required and must be a non-empty array'))
    lines = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise ValidationError(_('Each item must have a product and a quantity'))
        product_id = raw.get('product_id', raw.get('productId'))
        if product_id in (None, ''):
            raise ValidationError(_('Each item must have a product and a quantity'))
        quantity = to_int(raw.get('quantity'), 'quantity')
        if quantity <= 0:
            raise ValidationError(_('Item quantity must be greater than 0'))
        variant_id = raw.get('variant_id', raw.get('variantId'))
        if variant_id in (None, '', NO_VARIANT):
            variant_id = None
        lines.append(CartLine(to_int(product_id, 'product_id'),
                              str(variant_id) if variant_id is not None else None,
                              quantity, raw.get('price')))
    return lines


def _load_products(lines):
    products = {}
    for line in lines:
        if line.product_id not in products:
            product = get_row(Product, line.product_id)
            if product is None:
                raise InvalidReference(_('Product %(id)s not found', id=line.product_id))
            products[line.product_id] = product
    return products


def _resolve_variants(lines, products):
    variants = []
    for line in lines:
        product = products[line.product_id]
        if line.variant_id is None:
            # بدون اختيار متغير لا يمكن خصم المخزون من منتج له متغيرات
            if product.variants:
                raise ValidationError(_('Please choose an option for %(product)s', product=product.name))
            variants.append(None)
            continue
        variant = product.find_variant(line.variant_id)
        if variant is None:
            raise InvalidReference(_('Variant %(variant)s not found for product %(product)s',
                                     variant=line.variant_id, product=product.name))
        variants.append(variant)
    return variants


def _check_stock(lines, products, variants):
    requested = defaultdict(int)
    for line, variant in zip(lines, variants):
        product = products[line.product_id]
        requested[(product.id, line.variant_id)] += line.quantity
        wanted = requested[(product.id, line.variant_id)]
        available = variant.stock if variant is not None else (product.total_stock or 0)
        if available < wanted:
            raise InsufficientStock(product, variant, available, wanted)


def _snapshots(lines, products):
    items = []
    for line in lines:
        price = products[line.product_id].price
        if line.client_price not in (None, '') and str(line.client_price) != str(price):
            current_app.logger.debug('Cart price %s for product %s replaced by catalog price %s',
                                     line.client_price, line.product_id, price)
        items.append({
            'product_id': line.product_id,
            'variant_id': line.variant_id,
            'quantity': line.quantity,
            'price': str(price),
        })
    return items


def place_order(payload, pricing=None):
    """Validate a cart, price it on the server and persist the order.

    ``payload`` holds ``customer`` (a new customer is always created),
    ``items``, ``delivery_type``, ``delivery_area`` and ``notes``. Any
    ``total`` or item ``price`` and any ``customer_id`` sent by the caller
    are ignored; attaching orders to an existing customer is a back-office
    operation.
    """
    if not isinstance(payload, dict):
        raise ValidationError(_('Order items are required and must be a non-empty array'))

    lines = _read_cart(payload.get('items'))
    delivery_type, delivery_area = check_delivery(
        payload.get('delivery_type', payload.get('deliveryType')),
        payload.get('delivery_area', payload.get('deliveryArea')),
    )
    customer = build_customer(payload.get('customer'))

    products = _load_products(lines)
    variants = _resolve_variants(lines, products)
    try:
        _check_stock(lines, products, variants)
    except InsufficientStock as e:
        system_log.record('warning', 'order', 'Order rejected: insufficient stock', e.payload)
        raise

    pricing = pricing or current_pricing()
    items = _snapshots(lines, products)
    order = build_order(customer, items, delivery_type, delivery_area,
                        notes=str(payload.get('notes') or '').strip(), pricing=pricing)

    try:
        db.session.add(order)
        db.session.flush()
        for line, variant in zip(lines, variants):
            if not decrement_stock(products[line.product_id], line.variant_id, line.quantity):
                # سبقنا طلب آخر على نفس المخزون
                db.session.rollback()
                product = get_row(Product, line.product_id)
                variant = product.find_variant(line.variant_id) if line.variant_id else None
                raise InsufficientStock(product, variant, product.available_stock(line.variant_id), line.quantity)
        db.session.add(build_event('order_placed', order_id=order.id, customer_id=order.customer_id,
                                   revenue=order.total))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StorageError(cause=e)

    system_log.record('info', 'order', 'New order created',
                      {'order_id': order.id, 'total': str(order.total), 'pricing_version': pricing.version})
    return order
