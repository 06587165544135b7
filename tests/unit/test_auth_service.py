from datetime import datetime, timedelta, timezone

import jwt
import pytest

from storefront.auth.models import UNAUTHENTICATED, INVALID_TOKEN
from storefront.auth.service import issue_token, verify_token, register_or_login
from storefront.errors import ValidationError
from fakes import FakeSupabase

JWT_SECRET = "test-jwt-secret"


def test_issue_then_verify_returns_email():
    token = issue_token({"email": "a@b.com"})
    check = verify_token(token)
    assert check.success is True
    assert check.email == "a@b.com"
    assert check.error is None


def test_token_expires_after_seven_days():
    token = issue_token({"email": "a@b.com"})
    claims = jwt.decode(token, JWT_SECRET, algorithms=["HS256"])
    exp = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    delta = exp - datetime.now(timezone.utc)
    assert timedelta(days=6, hours=23) < delta <= timedelta(days=7)


def test_issue_token_requires_email():
    with pytest.raises(ValidationError):
        issue_token({"name": "no email"})


@pytest.mark.parametrize("missing", [None, "", "   "])
def test_verify_missing_token_is_unauthenticated(missing):
    check = verify_token(missing)
    assert check.success is False
    assert check.error == UNAUTHENTICATED
    assert check.is_unauthenticated


def test_verify_wrong_signature_is_invalid():
    forged = jwt.encode(
        {"email": "a@b.com", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "another-secret",
        algorithm="HS256",
    )
    check = verify_token(forged)
    assert check.success is False
    assert check.error == INVALID_TOKEN


def test_verify_expired_token_is_invalid():
    expired = jwt.encode(
        {"email": "a@b.com", "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
        JWT_SECRET,
        algorithm="HS256",
    )
    assert verify_token(expired).error == INVALID_TOKEN


def test_verify_token_without_email_claim_is_invalid():
    no_email = jwt.encode(
        {"sub": "123", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        JWT_SECRET,
        algorithm="HS256",
    )
    assert verify_token(no_email).error == INVALID_TOKEN


@pytest.mark.parametrize("garbage", ["not-a-jwt", "a.b.c", "Bearer x", "\x00\x01"])
def test_verify_malformed_input_never_raises(garbage):
    check = verify_token(garbage)
    assert check.success is False
    assert check.error == INVALID_TOKEN


def test_register_or_login_creates_once():
    storage = FakeSupabase()
    first = register_or_login(storage, {"email": "a@b.com", "name": "A"})
    second = register_or_login(storage, {"email": "a@b.com", "name": "A"})
    assert first["created"] is True
    assert second["created"] is False
    assert verify_token(second["token"]).email == "a@b.com"
    assert len(storage.rows("users")) == 1
