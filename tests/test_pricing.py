from decimal import Decimal

import pytest

from services.errors import ValidationError
from services.pricing import DeliveryPricing, items_subtotal, to_int, to_money


@pytest.fixture
def pricing():
    return DeliveryPricing(
        free_delivery_minimum=Decimal('20.000'),
        default_fee=Decimal('1.500'),
        fee_by_area={'sitra': Decimal('1.000'), 'muharraq': Decimal('1.500'), 'other': Decimal('2.000')},
    )


def _items(subtotal):
    return [{'product_id': 1, 'variant_id': None, 'quantity': 1, 'price': subtotal}]


def test_sitra_delivery_below_threshold(pricing):
    subtotal, fee, total = pricing.price_order(_items('15.000'), 'delivery', 'sitra')
    assert subtotal == Decimal('15.000')
    assert fee == Decimal('1.000')
    assert total == Decimal('16.000')


def test_free_delivery_at_threshold(pricing):
    assert pricing.price_order(_items('25.000'), 'delivery', 'sitra')[1:] == (Decimal('0.000'), Decimal('25.000'))
    assert pricing.delivery_fee('delivery', 'other', Decimal('20.000')) == Decimal('0.000')


def test_pickup_is_free(pricing):
    assert pricing.delivery_fee('pickup', None, Decimal('1.000')) == Decimal('0.000')


@pytest.mark.parametrize('area, fee', [('muharraq', '1.500'), ('other', '2.000'), (None, '1.500')])
def test_area_fees_and_default(pricing, area, fee):
    assert pricing.delivery_fee('delivery', area, Decimal('5.000')) == Decimal(fee)


def test_subtotal_multiplies_quantity():
    items = [
        {'product_id': 1, 'quantity': 3, 'price': '10.000'},
        {'product_id': 2, 'quantity': 2, 'price': '0.250'},
    ]
    assert items_subtotal(items) == Decimal('30.500')


def test_money_is_quantized_to_fils():
    assert to_money('1.2345') == Decimal('1.235')
    assert to_money(2) == Decimal('2.000')


@pytest.mark.parametrize('value', ['abc', '', None, 'NaN', True])
def test_malformed_money_is_rejected(app_ctx, value):
    with pytest.raises(ValidationError):
        to_money(value)


@pytest.mark.parametrize('value', ['1.5', 'x', None])
def test_malformed_integer_is_rejected(app_ctx, value):
    with pytest.raises(ValidationError):
        to_int(value)


def test_integer_strings_are_accepted():
    assert to_int('7') == 7
    assert to_int('3.0') == 3
