"""Python client for the sold.bd API with silent access-token refresh."""
from client.backends import AuthBackend, FunctionsBackend, ServerBackend, create_backend
from client.config import ClientConfig, create_client
from client.exceptions import ApiError
from client.session import ClientSession, FileTokenStore, MemoryTokenStore, TokenPair, TokenStore
from client.transport import SessionTransportClient

__all__ = [
    "ApiError",
    "AuthBackend",
    "ClientConfig",
    "ClientSession",
    "FileTokenStore",
    "FunctionsBackend",
    "MemoryTokenStore",
    "ServerBackend",
    "SessionTransportClient",
    "TokenPair",
    "TokenStore",
    "create_backend",
    "create_client",
]
