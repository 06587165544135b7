from decimal import Decimal

import pytest

from storefront.errors import ValidationError
from storefront.payments import to_minor_units, from_minor_units, to_line_items, cart_total
from storefront.payments.models import CartItem


def test_to_minor_units_is_exact_for_common_prices():
    assert to_minor_units(19.99) == 1999
    assert to_minor_units("19.99") == 1999
    assert to_minor_units(Decimal("10.00")) == 1000
    assert to_minor_units(0) == 0
    # 0.29 * 100 vaut 28.999999999999996 en flottant: pas de troncature
    assert to_minor_units(0.29) == 29
    assert to_minor_units(4.35) == 435


def test_to_minor_units_rounds_half_up():
    assert to_minor_units("1.005") == 101
    assert to_minor_units("1.004") == 100
    assert to_minor_units(Decimal("2.675")) == 268


@pytest.mark.parametrize("bad", [-1, "-0.01", "abc", "NaN", "Infinity", None, True])
def test_to_minor_units_rejects_invalid(bad):
    with pytest.raises(ValidationError):
        to_minor_units(bad)


def test_from_minor_units():
    assert from_minor_units(1999) == Decimal("19.99")
    assert from_minor_units(5997) == Decimal("59.97")
    with pytest.raises(ValueError):
        from_minor_units("1999")


def test_to_line_items_builds_price_data_in_cart_order():
    cart = [
        CartItem(title="Widget", price=19.99, quantity=3, image="https://img.test/w.png"),
        CartItem(title="Gadget", unitPrice="5", quantity=1),
    ]
    line_items = to_line_items(cart, "usd")
    assert line_items == [
        {
            "quantity": 3,
            "price_data": {
                "currency": "usd",
                "unit_amount": 1999,
                "product_data": {"name": "Widget", "images": ["https://img.test/w.png"]},
            },
        },
        {
            "quantity": 1,
            "price_data": {"currency": "usd", "unit_amount": 500, "product_data": {"name": "Gadget"}},
        },
    ]


def test_to_line_items_empty_cart_raises():
    with pytest.raises(ValidationError):
        to_line_items([], "usd")


def test_to_line_items_rejects_non_positive_quantity():
    # model_construct contourne la validation pydantic pour atteindre le contrôle métier
    item = CartItem.model_construct(title="Widget", unit_price=Decimal("1"), quantity=0, image_url=None)
    with pytest.raises(ValidationError):
        to_line_items([item], "usd")


def test_cart_total_matches_processor_amounts():
    cart = [CartItem(title="Widget", price=19.99, quantity=3)]
    assert cart_total(cart) == Decimal("59.97")
