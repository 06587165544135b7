from fastapi import FastAPI, Depends
from fastapi.testclient import TestClient

from storefront.auth.service import issue_token
from storefront.utils.security import get_current_user, require_user


def _make_app(calls):
    app = FastAPI()

    def downstream():
        # Simule l'I/O de la route protégée
        calls.append("io")
        return True

    @app.get("/me")
    def me(user=Depends(require_user), _io=Depends(downstream)):
        return user

    return app


def test_bearer_token_success():
    calls = []
    client = TestClient(_make_app(calls))
    r = client.get("/me", headers={"Authorization": f"Bearer {issue_token({'email': 'a@b.com'})}"})
    assert r.status_code == 200
    assert r.json() == {"email": "a@b.com"}
    assert calls == ["io"]


def test_missing_token_is_rejected_before_io():
    calls = []
    client = TestClient(_make_app(calls))
    r = client.get("/me")
    assert r.status_code == 401
    assert "missing" in r.json()["detail"]
    assert calls == []


def test_invalid_token_is_rejected_before_io():
    calls = []
    client = TestClient(_make_app(calls))
    r = client.get("/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token."
    assert calls == []


def test_non_bearer_scheme_counts_as_missing():
    calls = []
    client = TestClient(_make_app(calls))
    r = client.get("/me", headers={"Authorization": "Basic abc"})
    assert r.status_code == 401
    assert "missing" in r.json()["detail"]


def test_get_current_user_is_the_underlying_dependency():
    app = FastAPI()

    @app.get("/raw")
    def raw(user=Depends(get_current_user)):
        return user

    client = TestClient(app)
    assert client.get("/raw").status_code == 401
