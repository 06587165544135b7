from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.auth.service import issue_token
from storefront.orders import repository
from storefront.orders.models import Order, OrderLine

T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _seed(storage, session_id, email, hours=0):
    order = Order(
        order_id=f"ord_{session_id}",
        customer_email=email,
        line_items=[OrderLine(title="Widget", unit_price=Decimal("10.00"), quantity=1)],
        total_amount=Decimal("10.00"),
        payment_status="paid",
        created_at=T0 + timedelta(hours=hours),
        source_session_id=session_id,
    )
    repository.insert_order_if_absent(storage, order.to_row())


def test_orders_requires_token(client):
    assert client.get("/api/v1/orders").status_code == 401


def test_orders_empty_list(client, auth_headers):
    r = client.get("/api/v1/orders", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == []


def test_orders_are_scoped_to_token_email_most_recent_first(client, storage, auth_headers):
    _seed(storage, "sess_1", "a@b.com", hours=0)
    _seed(storage, "sess_2", "a@b.com", hours=5)
    _seed(storage, "sess_3", "z@y.com", hours=9)

    r = client.get("/api/v1/orders", headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert [o["source_session_id"] for o in body] == ["sess_2", "sess_1"]
    assert body[0]["order_id"] == "ord_sess_2"
    assert body[0]["total_amount"] == "10.00"

    other = {"Authorization": f"Bearer {issue_token({'email': 'z@y.com'})}"}
    assert [o["source_session_id"] for o in client.get("/api/v1/orders", headers=other).json()] == ["sess_3"]


def test_orders_storage_failure_is_503():
    from fastapi.testclient import TestClient
    from storefront.app_setup.factory import create_app
    from fakes import FakeSupabase

    headers = {"Authorization": f"Bearer {issue_token({'email': 'a@b.com'})}"}
    with TestClient(create_app(storage=FakeSupabase(fail_on={"orders.select"}))) as client:
        r = client.get("/api/v1/orders", headers=headers)
    assert r.status_code == 503
