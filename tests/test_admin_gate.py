from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from models.admin_user import Role
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, JWT_SECRET
from utils.decorators import authorize, bearer_token
from utils.exceptions import Forbidden, Unauthorized
from utils.security import create_access_token

GATED_ENDPOINTS = [
    ("get", "/api/auth/me"),
    ("get", "/api/admin-deals"),
    ("post", "/api/admin-deals"),
    ("put", "/api/admin-deals"),
    ("patch", "/api/admin-deals"),
    ("delete", "/api/admin-deals"),
    ("put", "/api/admin-site-settings"),
    ("patch", "/api/admin-site-settings"),
    ("get", "/api/admin-early-access"),
    ("get", "/api/admin-storage-settings"),
    ("put", "/api/admin-storage-settings"),
    ("get", "/api/admin-db-status"),
]


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic abc", "bearer abc"])
def test_bearer_token_rejects_malformed_headers(header) -> None:
    assert bearer_token(header) is None


def test_bearer_token_extracts_token() -> None:
    assert bearer_token("Bearer abc.def") == "abc.def"


def test_authorize_returns_claims_for_admin(app) -> None:
    token = create_access_token(subject="user-1", role=Role.ADMIN, email="a@example.com")

    claims = authorize(f"Bearer {token}")

    assert claims.subject == "user-1"
    assert claims.role is Role.ADMIN


def test_authorize_missing_header_is_unauthorized(app) -> None:
    with pytest.raises(Unauthorized):
        authorize(None)


def test_authorize_invalid_token_is_unauthorized(app) -> None:
    with pytest.raises(Unauthorized) as excinfo:
        authorize("Bearer not-a-token")
    assert excinfo.value.status_code == 401


def test_authorize_non_admin_role_is_forbidden(app) -> None:
    token = create_access_token(subject="user-2", role="customer")

    with pytest.raises(Forbidden):
        authorize(f"Bearer {token}")


def test_login_then_gated_endpoint_scenario(client, admin) -> None:
    login = client.post("/api/auth/login", json={"identifier": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert login.status_code == 200
    access = login.get_json()["accessToken"]

    ok = client.get("/api/auth/me", headers={"Authorization": f"Bearer {access}"})
    assert ok.status_code == 200
    assert ok.get_json()["claims"] == {"subject": admin.id, "email": ADMIN_EMAIL, "role": "admin"}

    assert client.get("/api/auth/me").status_code == 401

    customer = create_access_token(subject=admin.id, role="customer")
    forbidden = client.get("/api/auth/me", headers={"Authorization": f"Bearer {customer}"})
    assert forbidden.status_code == 403
    assert forbidden.get_json()["error"] == "FORBIDDEN"


def test_expired_access_token_is_unauthorized(client, admin) -> None:
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode(
        {"sub": admin.id, "role": "admin", "type": "access", "exp": int(past.timestamp())},
        JWT_SECRET,
        algorithm="HS256",
    )

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401
    assert res.get_json()["message"] == "Unauthorized"


@pytest.mark.parametrize("method, path", GATED_ENDPOINTS)
def test_every_admin_endpoint_requires_a_token(client, method, path) -> None:
    res = getattr(client, method)(path, json={})

    assert res.status_code == 401


@pytest.mark.parametrize("method, path", GATED_ENDPOINTS)
def test_every_admin_endpoint_requires_admin_role(client, method, path) -> None:
    token = create_access_token(subject="user-2", role="customer")

    res = getattr(client, method)(path, json={}, headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 403
