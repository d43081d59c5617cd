"""Money parsing and order pricing.

All amounts are ``Decimal`` values quantized to three places (fils).
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from flask_babel import gettext as _

from services.errors import ValidationError

MONEY_QUANTUM = Decimal('0.001')
ZERO = Decimal('0.000')


def to_money(value, field_name='price'):
    if value is None or isinstance(value, bool) or value == '':
        raise ValidationError(_('%(field)s must be a number', field=field_name))
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(_('%(field)s must be a number', field=field_name))
    if not amount.is_finite():
        raise ValidationError(_('%(field)s must be a number', field=field_name))
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def to_int(value, field_name='quantity'):
    if value is None or isinstance(value, bool) or value == '':
        raise ValidationError(_('%(field)s must be a whole number', field=field_name))
    if isinstance(value, int):
        return value
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(_('%(field)s must be a whole number', field=field_name))
    if not number.is_finite() or number != number.to_integral_value():
        raise ValidationError(_('%(field)s must be a whole number', field=field_name))
    return int(number)


def items_subtotal(items):
    """Σ price × quantity over order item snapshots."""
    subtotal = ZERO
    for item in items:
        subtotal += to_money(item['price']) * int(item['quantity'])
    return subtotal.quantize(MONEY_QUANTUM)


@dataclass(frozen=True)
class DeliveryPricing:
    free_delivery_minimum: Decimal
    default_fee: Decimal
    fee_by_area: dict = field(default_factory=dict)
    version: int = 1

    @classmethod
    def from_settings(cls, settings):
        return cls(
            free_delivery_minimum=to_money(settings.free_delivery_minimum),
            default_fee=to_money(settings.delivery_fee),
            fee_by_area={
                'sitra': to_money(settings.delivery_area_sitra),
                'muharraq': to_money(settings.delivery_area_muharraq),
                'other': to_money(settings.delivery_area_other),
            },
            version=settings.version,
        )

    def delivery_fee(self, delivery_type, delivery_area, subtotal):
        if delivery_type != 'delivery':
            return ZERO
        if subtotal >= self.free_delivery_minimum:
            return ZERO
        if delivery_area in self.fee_by_area:
            return self.fee_by_area[delivery_area]
        return self.default_fee

    def price_order(self, items, delivery_type, delivery_area):
        """Return ``(subtotal, delivery_fee, total)`` for item snapshots."""
        subtotal = items_subtotal(items)
        fee = self.delivery_fee(delivery_type, delivery_area, subtotal)
        return subtotal, fee, (subtotal + fee).quantize(MONEY_QUANTUM)
