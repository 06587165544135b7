import pytest
import stripe

from storefront.errors import CheckoutInitiationFailed, ValidationError
from storefront.payments.models import CartItem
from storefront.payments.service import initiate_checkout

URLS = {"success_url": "https://shop.test/success", "cancel_url": "https://shop.test/cancel"}


def test_initiate_checkout_submits_minor_units(monkeypatch):
    captured = {}

    def fake_create_session(**kwargs):
        captured.update(kwargs)
        return {"id": "cs_test_1", "url": "https://checkout.stripe.test/cs_test_1", "object": "checkout.session"}

    monkeypatch.setattr("storefront.payments.service.stripe_client.create_session", fake_create_session)

    cart = [CartItem(title="Widget", price=19.99, quantity=3)]
    session = initiate_checkout(cart=cart, customer_email="a@b.com", **URLS)

    assert session == {"id": "cs_test_1", "url": "https://checkout.stripe.test/cs_test_1"}
    assert captured["mode"] == "payment"
    assert captured["customer_email"] == "a@b.com"
    assert captured["success_url"] == URLS["success_url"]
    assert captured["cancel_url"] == URLS["cancel_url"]
    assert captured["line_items"] == [
        {"quantity": 3, "price_data": {"currency": "usd", "unit_amount": 1999, "product_data": {"name": "Widget"}}}
    ]


def test_invalid_cart_never_reaches_stripe(monkeypatch):
    monkeypatch.setattr(
        "storefront.payments.service.stripe_client.create_session",
        lambda **kw: pytest.fail("Stripe must not be called"),
    )
    with pytest.raises(ValidationError):
        initiate_checkout(cart=[], customer_email="a@b.com", **URLS)


@pytest.mark.parametrize(
    "error",
    [
        stripe.InvalidRequestError("Invalid currency: xyz", param="currency"),
        stripe.APIConnectionError("Request timed out"),
    ],
)
def test_stripe_failure_surfaces_checkout_initiation_failed(monkeypatch, error):
    def failing(**kwargs):
        raise error

    monkeypatch.setattr("storefront.payments.service.stripe_client.create_session", failing)
    cart = [CartItem(title="Widget", price=10, quantity=1)]

    with pytest.raises(CheckoutInitiationFailed) as exc:
        initiate_checkout(cart=cart, customer_email="a@b.com", **URLS)
    assert exc.value.status_code == 502
    assert "Unable to create checkout session" in exc.value.detail
