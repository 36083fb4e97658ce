from __future__ import annotations

import os
import stat

import pytest

from client import ClientConfig, create_client
from client.backends import FunctionsBackend, ServerBackend, create_backend
from client.session import ClientSession, FileTokenStore, MemoryTokenStore, TokenPair, TokenStore


def test_file_store_survives_new_session_and_clears(tmp_path) -> None:
    path = tmp_path / "nested" / "session.json"
    ClientSession(FileTokenStore(path)).update(TokenPair("a", "r"))

    restored = ClientSession(FileTokenStore(path))
    assert restored.access_token == "a"
    assert restored.refresh_token == "r"
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    restored.clear()
    assert not path.exists()
    assert ClientSession(FileTokenStore(path)).is_authenticated is False


def test_file_store_ignores_corrupt_file(tmp_path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert FileTokenStore(path).load() is None


@pytest.mark.parametrize("content", ["[]", "\"x\"", "42", "null"])
def test_file_store_ignores_json_that_is_not_an_object(tmp_path, content) -> None:
    path = tmp_path / "session.json"
    path.write_text(content)

    session = ClientSession(FileTokenStore(path))

    assert session.is_authenticated is False


def test_token_store_requires_every_operation() -> None:
    class LoadOnly(TokenStore):
        def load(self):
            return None

    with pytest.raises(TypeError):
        LoadOnly()


def test_sessions_are_independent() -> None:
    one, two = ClientSession(MemoryTokenStore()), ClientSession(MemoryTokenStore())
    one.update(TokenPair("a", "r"))

    assert two.access_token is None


def test_server_backend_urls() -> None:
    backend = ServerBackend("https://api.sold.bd/")

    assert backend.url_for("admin-deals") == "https://api.sold.bd/api/admin-deals"
    assert backend.refresh_url == "https://api.sold.bd/api/auth/refresh"


def test_server_backend_accepts_absolute_refresh_url() -> None:
    backend = ServerBackend("https://api.sold.bd", refresh_path="https://auth.sold.bd/refresh")

    assert backend.refresh_url == "https://auth.sold.bd/refresh"


def test_create_backend_selects_implementation() -> None:
    assert isinstance(create_backend("server", "http://x"), ServerBackend)
    functions = create_backend("functions", "http://x", api_key="k")
    assert isinstance(functions, FunctionsBackend)
    assert functions.url_for("deals") == "http://x/functions/v1/deals"


@pytest.mark.parametrize("mode, kwargs", [("carrier-pigeon", {}), ("functions", {})])
def test_create_backend_rejects_bad_configuration(mode, kwargs) -> None:
    with pytest.raises(ValueError):
        create_backend(mode, "http://x", **kwargs)


def test_create_backend_requires_base_url() -> None:
    with pytest.raises(ValueError):
        create_backend("server", "  ")


def test_client_config_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("SOLDBD_API_MODE", "functions")
    monkeypatch.setenv("SOLDBD_API_BASE_URL", "https://project.example.co")
    monkeypatch.setenv("SOLDBD_API_KEY", "anon")
    monkeypatch.setenv("SOLDBD_TOKEN_FILE", str(tmp_path / "t.json"))

    config = ClientConfig.from_env()
    with create_client(config) as api:
        assert isinstance(api.backend, FunctionsBackend)
        assert isinstance(api.session.store, FileTokenStore)


def test_client_config_defaults_to_local_server(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("SOLDBD_API_MODE", "SOLDBD_API_BASE_URL", "SOLDBD_API_KEY", "SOLDBD_TOKEN_FILE"):
        monkeypatch.delenv(key, raising=False)

    config = ClientConfig.from_env()

    assert config.mode == "server"
    assert config.base_url == "http://localhost:3001"
