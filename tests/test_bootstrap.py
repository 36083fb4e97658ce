from __future__ import annotations

import threading

import pytest

from models import storage
from models.admin_user import AdminUser
from tests.conftest import BOOTSTRAP_TOKEN
from utils import sessions
from utils.exceptions import Conflict, InvalidBootstrapToken, InvalidInput
from utils.security import hash_password


def _bootstrap(client, **overrides):
    body = {"token": BOOTSTRAP_TOKEN, "identifier": "owner@example.com", "password": "longenough1"}
    body.update(overrides)
    return client.post("/api/bootstrap-admin", json=body)


def test_bootstrap_creates_first_admin_who_can_log_in(client) -> None:
    res = _bootstrap(client)

    assert res.status_code == 200
    assert res.get_json() == {"ok": True}
    login = client.post("/api/auth/login", json={"identifier": "owner@example.com", "password": "longenough1"})
    assert login.status_code == 200


def test_bootstrap_succeeds_exactly_once(client) -> None:
    assert _bootstrap(client).status_code == 200

    second = _bootstrap(client, identifier="someone-else@example.com", password="another-pass")

    assert second.status_code == 409
    assert storage.count(AdminUser) == 1


def test_bootstrap_refused_when_provisioned_admin_exists(client, admin) -> None:
    assert _bootstrap(client).status_code == 409


def test_bootstrap_missing_token_is_bad_request(client) -> None:
    res = _bootstrap(client, token="")

    assert res.status_code == 400
    assert res.get_json()["message"] == "Missing token"


def test_bootstrap_wrong_secret_is_forbidden(client) -> None:
    res = _bootstrap(client, token="not-the-secret")

    assert res.status_code == 403
    assert storage.count(AdminUser) == 0


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"identifier": "not-an-email"}, "Invalid email"),
        ({"identifier": ""}, "Invalid email"),
        ({"identifier": "owner@@example.com"}, "Invalid email"),
        ({"password": "short"}, "Password must be 8+ chars"),
    ],
)
def test_bootstrap_validates_identity(client, overrides, message) -> None:
    res = _bootstrap(client, **overrides)

    assert res.status_code == 400
    assert res.get_json()["message"] == message


def test_conflict_is_reported_before_input_validation(app, admin) -> None:
    with pytest.raises(Conflict):
        sessions.bootstrap(BOOTSTRAP_TOKEN, "not-an-email", "x")


def test_secret_is_checked_before_anything_else(app, admin) -> None:
    with pytest.raises(InvalidBootstrapToken):
        sessions.bootstrap("wrong", "owner@example.com", "longenough1")
    with pytest.raises(InvalidInput):
        sessions.bootstrap("   ", "owner@example.com", "longenough1")


def test_bootstrap_slot_is_unique_at_the_store(store) -> None:
    store.create_account("first@example.com", hash_password("longenough1"), bootstrap=True)

    with pytest.raises(Conflict):
        store.create_account("second@example.com", hash_password("longenough1"), bootstrap=True)
    assert storage.count(AdminUser) == 1


def test_concurrent_bootstrap_creates_one_account(app) -> None:
    attempts = 5
    barrier = threading.Barrier(attempts)
    outcomes: list[str] = []
    lock = threading.Lock()

    def attempt(n: int) -> None:
        with app.app_context():
            barrier.wait()
            try:
                sessions.bootstrap(BOOTSTRAP_TOKEN, f"owner{n}@example.com", "longenough1")
                result = "created"
            except Conflict:
                result = "conflict"
            finally:
                storage.close()
            with lock:
                outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(n,)) for n in range(attempts)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict"] * (attempts - 1) + ["created"]
    assert storage.count(AdminUser) == 1
