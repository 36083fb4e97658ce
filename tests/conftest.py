from __future__ import annotations

import pytest
from argon2 import PasswordHasher

from api import create_app
from models import storage
from models.credential_store import CredentialStore
from utils import security, sessions

JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes!"
BOOTSTRAP_TOKEN = "bootstrap-shared-secret"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "longenough1"


@pytest.fixture(autouse=True)
def fast_hasher(monkeypatch: pytest.MonkeyPatch) -> None:
    """Cheap argon2 parameters; the production defaults are deliberately slow."""
    monkeypatch.setattr(security, "ph", PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    for key in ("JWT_SECRET", "ADMIN_BOOTSTRAP_TOKEN", "DATABASE_URL"):
        monkeypatch.delenv(key, raising=False)
    app = create_app(
        "testing",
        overrides={
            "JWT_SECRET": JWT_SECRET,
            "ADMIN_BOOTSTRAP_TOKEN": BOOTSTRAP_TOKEN,
            "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
        },
    )
    with app.app_context():
        yield app
    storage.close()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app) -> CredentialStore:
    return CredentialStore()


@pytest.fixture()
def admin(store):
    return store.create_account(ADMIN_EMAIL, security.hash_password(ADMIN_PASSWORD))


@pytest.fixture()
def tokens(admin) -> sessions.TokenPair:
    return sessions.login(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture()
def auth_headers(tokens) -> dict:
    return {"Authorization": f"Bearer {tokens.access_token}"}
