import os

os.environ["DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS"] = "1"

import pytest
from typing import Dict, Generator
from fastapi.testclient import TestClient

from fakes import FakeSupabase
from storefront import config
from storefront.app_setup.factory import create_app
from storefront.auth.service import issue_token

WEBHOOK_SECRET = "whsec_test_secret"
JWT_SECRET = "test-jwt-secret"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("integration/"):
            item.add_marker(pytest.mark.integration)
        elif "/tests/functional/" in nodeid or nodeid.startswith("functional/"):
            item.add_marker(pytest.mark.functional)

@pytest.fixture(autouse=True)
def _secrets(monkeypatch):
    """Secrets déterministes: jamais ceux d'un éventuel .env local."""
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_dummy")
    monkeypatch.setattr(config, "JWT_SECRET", JWT_SECRET)
    monkeypatch.setattr(config, "CHECKOUT_CURRENCY", "usd")
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)

@pytest.fixture()
def storage() -> FakeSupabase:
    return FakeSupabase()

@pytest.fixture()
def app(storage):
    return create_app(storage=storage)

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture()
def token() -> str:
    return issue_token({"email": "a@b.com"})

@pytest.fixture()
def auth_headers(token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
