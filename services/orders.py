from datetime import datetime

from flask_babel import gettext as _
from sqlalchemy import func
from sqlalchemy.orm import joinedload

from models import db
from models.customer import Customer
from models.order import Order, ORDER_STATUSES, DELIVERY_TYPES, DELIVERY_AREAS
from models.product import Product, NO_VARIANT
from models.settings import StoreSettings
from services import commit, get_row
from services.errors import ValidationError, InvalidReference, NotFound
from services.pricing import DeliveryPricing, to_int, to_money


def current_pricing():
    return DeliveryPricing.from_settings(StoreSettings.get_current())


def list_orders(status=None):
    query = Order.query.options(joinedload(Order.customer))
    if status:
        query = query.filter(Order.status == status)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(order_id):
    order = get_row(Order, order_id)
    if order is None:
        raise NotFound(_('Order not found'))
    return order


def check_status(status):
    if status not in ORDER_STATUSES:
        raise ValidationError(_('Invalid order status'))
    return status


def check_delivery(delivery_type, delivery_area):
    """Validate delivery options; the area only applies to deliveries."""
    delivery_type = delivery_type or 'delivery'
    if delivery_type not in DELIVERY_TYPES:
        raise ValidationError(_('Invalid delivery type'))
    if delivery_type == 'pickup' or not delivery_area:
        return delivery_type, None
    if delivery_area not in DELIVERY_AREAS:
        raise ValidationError(_('Invalid delivery area'))
    return delivery_type, delivery_area


def build_order(customer, items, delivery_type, delivery_area, notes=None, pricing=None):
    """Price ``items`` (snapshots carrying their own price) and return an unsaved Order."""
    pricing = pricing or current_pricing()
    subtotal, fee, total = pricing.price_order(items, delivery_type, delivery_area)
    return Order(
        customer=customer,
        items=items,
        delivery_fee=fee,
        total=total,
        status='processing',
        delivery_type=delivery_type,
        delivery_area=delivery_area,
        notes=notes or None,
    )


def _snapshot_items(raw_items):
    """Turn edited order lines into snapshots; missing prices use the catalog price."""
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError(_('Order items are required and must be a non-empty array'))
    snapshots = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise ValidationError(_('Each item must have a product and a quantity'))
        product_id = to_int(raw.get('product_id', raw.get('productId')), 'product_id')
        quantity = to_int(raw.get('quantity'), 'quantity')
        if quantity <= 0:
            raise ValidationError(_('Item quantity must be greater than 0'))
        product = get_row(Product, product_id)
        if product is None:
            raise InvalidReference(_('Product %(id)s not found', id=product_id))
        variant_id = raw.get('variant_id', raw.get('variantId'))
        if variant_id in ('', NO_VARIANT):
            variant_id = None
        if variant_id is not None and product.find_variant(str(variant_id)) is None:
            raise InvalidReference(_('Variant %(variant)s not found for product %(product)s',
                                     variant=variant_id, product=product.name))
        price = raw.get('price')
        price = to_money(price) if price not in (None, '') else to_money(product.price)
        if price < 0:
            raise ValidationError(_('Item price cannot be negative'))
        snapshots.append({
            'product_id': product_id,
            'variant_id': str(variant_id) if variant_id is not None else None,
            'quantity': quantity,
            'price': str(price),
        })
    return snapshots


def create_order(data, pricing=None):
    """Store an order for an existing customer from the back office.

    Item prices come from the draft (or the catalog when missing) and the
    total is computed here; stock is not touched.
    """
    customer_id = to_int(data.get('customer_id', data.get('customerId')), 'customer_id')
    customer = get_row(Customer, customer_id)
    if customer is None:
        raise InvalidReference(_('Customer not found'))
    items = _snapshot_items(data.get('items'))
    delivery_type, delivery_area = check_delivery(
        data.get('delivery_type', data.get('deliveryType')),
        data.get('delivery_area', data.get('deliveryArea')),
    )
    order = build_order(customer, items, delivery_type, delivery_area,
                        notes=(data.get('notes') or '').strip(), pricing=pricing)
    if data.get('status'):
        order.status = check_status(data['status'])
    db.session.add(order)
    commit()
    return order


def update_order(order_id, data, pricing=None):
    """Apply an administrative patch.

    ``total`` in the patch is ignored; it is recomputed from the items and
    delivery options whenever any of them change.
    """
    order = get_order(order_id)
    reprice = False

    if 'status' in data:
        order.status = check_status(data['status'])
    if 'customer_id' in data or 'customerId' in data:
        customer_id = to_int(data.get('customer_id', data.get('customerId')), 'customer_id')
        if get_row(Customer, customer_id) is None:
            raise InvalidReference(_('Customer not found'))
        order.customer_id = customer_id
    if 'notes' in data:
        order.notes = (data.get('notes') or '').strip() or None

    keys = ('delivery_type', 'deliveryType', 'delivery_area', 'deliveryArea')
    if any(key in data for key in keys):
        delivery_type = data.get('delivery_type', data.get('deliveryType', order.delivery_type))
        delivery_area = data.get('delivery_area', data.get('deliveryArea', order.delivery_area))
        order.delivery_type, order.delivery_area = check_delivery(delivery_type, delivery_area)
        reprice = True
    if 'items' in data:
        order.items = _snapshot_items(data['items'])
        reprice = True

    if reprice:
        pricing = pricing or current_pricing()
        subtotal, order.delivery_fee, order.total = pricing.price_order(
            order.items, order.delivery_type, order.delivery_area)
    commit()
    return order


def delete_order(order_id):
    order = get_order(order_id)
    db.session.delete(order)
    commit()


def order_stats():
    now = datetime.utcnow()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    month_start = today.replace(day=1)

    def count_and_revenue(*filters):
        count, revenue = db.session.query(func.count(Order.id), func.coalesce(func.sum(Order.total), 0)) \
            .filter(*filters).one()
        return count, float(revenue or 0)

    total_orders, total_revenue = count_and_revenue()
    orders_today, revenue_today = count_and_revenue(Order.created_at >= today)
    orders_month, revenue_month = count_and_revenue(Order.created_at >= month_start)
    by_status = dict.fromkeys(ORDER_STATUSES, 0)
    for status, count in db.session.query(Order.status, func.count(Order.id)).group_by(Order.status):
        by_status[status] = count

    return {
        'total_orders': total_orders,
        'total_revenue': total_revenue,
        'orders_today': orders_today,
        'revenue_today': revenue_today,
        'orders_this_month': orders_month,
        'revenue_this_month': revenue_month,
        'by_status': by_status,
    }
