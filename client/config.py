"""
Client configuration from the environment.

SOLDBD_API_MODE       server (default) or functions
SOLDBD_API_BASE_URL   e.g. https://api.sold.bd; localhost falls back to http://localhost:3001
SOLDBD_API_KEY        public API key, functions mode only
SOLDBD_REFRESH_PATH   refresh endpoint path or absolute URL, server mode only
SOLDBD_TOKEN_FILE     where the session is persisted; in-memory when unset
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from client.backends import create_backend
from client.session import ClientSession, FileTokenStore, MemoryTokenStore
from client.transport import DEFAULT_RETRIES, SessionTransportClient

LOCAL_BASE_URL = "http://localhost:3001"


@dataclass
class ClientConfig:
    mode: str = "server"
    base_url: str = LOCAL_BASE_URL
    api_key: Optional[str] = None
    refresh_path: Optional[str] = None
    token_file: Optional[str] = None
    retries: int = DEFAULT_RETRIES
    timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "ClientConfig":
        load_dotenv()
        return cls(
            mode=os.getenv("SOLDBD_API_MODE", "server"),
            base_url=os.getenv("SOLDBD_API_BASE_URL", "").strip() or LOCAL_BASE_URL,
            api_key=os.getenv("SOLDBD_API_KEY") or None,
            refresh_path=os.getenv("SOLDBD_REFRESH_PATH") or None,
            token_file=os.getenv("SOLDBD_TOKEN_FILE") or None,
        )


def create_client(config: ClientConfig | None = None, **kwargs) -> SessionTransportClient:
    """Build a transport client with the backend selected by config.mode."""
    config = config or ClientConfig.from_env()
    backend = create_backend(config.mode, config.base_url, api_key=config.api_key,
                             refresh_path=config.refresh_path)
    store = FileTokenStore(config.token_file) if config.token_file else MemoryTokenStore()
    return SessionTransportClient(
        backend,
        session=ClientSession(store),
        retries=config.retries,
        timeout_seconds=config.timeout_seconds,
        **kwargs,
    )
