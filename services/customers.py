from flask_babel import gettext as _

from models import db
from models.customer import Customer, compose_address
from services import commit, get_row
from services.analytics import build_event
from services.errors import ValidationError, NotFound

ADDRESS_PARTS = ('home', 'road', 'block', 'town')


def _clean(value):
    if value is None:
        return None
    return str(value).strip() or None


def list_customers(q=None, sort='created_at'):
    customers = Customer.query
    if q:
        customers = customers.filter((Customer.name.contains(q)) | (Customer.phone.contains(q)))
    if sort == 'name':
        customers = customers.order_by(Customer.name)
    elif sort == 'phone':
        customers = customers.order_by(Customer.phone)
    else:
        customers = customers.order_by(Customer.created_at.desc(), Customer.id.desc())
    return customers.all()


def get_customer(customer_id):
    customer = get_row(Customer, customer_id)
    if customer is None:
        raise NotFound(_('Customer not found'))
    return customer


def build_customer(data):
    """Validate a customer draft and return an unsaved Customer."""
    if not isinstance(data, dict):
        raise ValidationError(_('Name, phone, and address are required'))
    parts = {key: _clean(data.get(key)) for key in ADDRESS_PARTS}
    address = _clean(data.get('address')) or compose_address(**parts) or None
    name = _clean(data.get('name'))
    phone = _clean(data.get('phone'))
    if not name or not phone or not address:
        raise ValidationError(_('Name, phone, and address are required'))
    return Customer(name=name, phone=phone, address=address, **parts)


def create_customer(data):
    customer = build_customer(data)
    db.session.add(customer)
    db.session.flush()
    db.session.add(build_event('customer_created', customer_id=customer.id))
    commit()
    return customer


def update_customer(customer_id, data):
    customer = get_customer(customer_id)
    for key in ('name', 'phone', 'address'):
        if key in data:
            value = _clean(data.get(key))
            if not value:
                raise ValidationError(_('Name, phone, and address are required'))
            setattr(customer, key, value)
    for key in ADDRESS_PARTS:
        if key in data:
            setattr(customer, key, _clean(data.get(key)))
    commit()
    return customer


def delete_customer(customer_id):
    """Delete a customer; the database cascades the delete to its orders."""
    customer = get_customer(customer_id)
    db.session.delete(customer)
    commit()
