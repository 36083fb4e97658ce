"""
Interchangeable API back ends behind one client contract.

ServerBackend talks to this repository's Flask API (JWT access tokens plus
rotating refresh tokens). FunctionsBackend talks to a hosted auth/functions
platform (`/functions/v1/<name>`, `/auth/v1/token`). The transport client only
uses the AuthBackend interface, so the choice is made once, at construction.
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from client.exceptions import ApiError, DEFAULT_MESSAGE
from client.session import TokenPair

logger = logging.getLogger(__name__)

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def _join(base: str, path: str) -> str:
    if _ABSOLUTE_URL.match(path):
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


def parse_body(response: httpx.Response) -> Any:
    """JSON body, the raw text if it is not JSON, or None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def error_message(response: httpx.Response, body: Any = None) -> str:
    """Server-provided message when present, else the reason phrase, else a generic one."""
    if isinstance(body, dict):
        for key in ("message", "error", "error_description", "msg"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return response.reason_phrase or DEFAULT_MESSAGE


class AuthBackend(ABC):
    name = "abstract"

    def __init__(self, base_url: str):
        base_url = (base_url or "").strip().rstrip("/")
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url

    @abstractmethod
    def url_for(self, endpoint: str) -> str:
        """Absolute URL of an API endpoint such as 'admin-deals'."""

    def default_headers(self) -> dict:
        return {}

    def call(self, http: httpx.Client, method: str, endpoint: str,
             headers: Optional[dict] = None, body: Any = None) -> httpx.Response:
        """One HTTP attempt; network errors propagate as httpx exceptions."""
        merged = {**self.default_headers(), **(headers or {})}
        return http.request(method, self.url_for(endpoint), headers=merged, json=body)

    @abstractmethod
    def login(self, http: httpx.Client, identifier: str, password: str) -> TokenPair:
        """Exchange credentials for a token pair; raises ApiError on rejection."""

    @abstractmethod
    def refresh(self, http: httpx.Client, refresh_token: str) -> Optional[TokenPair]:
        """New token pair, or None if the back end refused the refresh token."""


class ServerBackend(AuthBackend):
    name = "server"

    ACCESS_FIELD = "accessToken"
    REFRESH_FIELD = "refreshToken"
    LOGIN_FIELD = "identifier"

    def __init__(self, base_url: str, prefix: str = "/api", refresh_path: str = "/api/auth/refresh",
                 login_path: str = "/api/auth/login"):
        super().__init__(base_url)
        self.prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""
        self.refresh_url = _join(self.base_url, refresh_path)
        self.login_url = _join(self.base_url, login_path)

    def url_for(self, endpoint):
        return f"{self.base_url}{self.prefix}/{endpoint.lstrip('/')}"

    def _pair_from(self, body: Any, previous_refresh: Optional[str] = None) -> Optional[TokenPair]:
        if not isinstance(body, dict):
            return None
        access = body.get(self.ACCESS_FIELD)
        if not isinstance(access, str) or not access:
            return None
        refresh = body.get(self.REFRESH_FIELD)
        if not isinstance(refresh, str) or not refresh:
            # a back end that does not rotate keeps the old refresh token valid
            refresh = previous_refresh
        if not refresh:
            return None
        return TokenPair(access_token=access, refresh_token=refresh)

    def login(self, http, identifier, password):
        response = http.post(self.login_url, headers=self.default_headers(),
                             json={self.LOGIN_FIELD: identifier, "password": password})
        body = parse_body(response)
        pair = self._pair_from(body) if response.is_success else None
        if pair is None:
            raise ApiError(error_message(response, body), response.status_code, body)
        return pair

    def refresh(self, http, refresh_token):
        response = http.post(self.refresh_url, headers=self.default_headers(),
                             json={self.REFRESH_FIELD: refresh_token})
        if not response.is_success:
            logger.info("Refresh refused by %s backend (status %s)", self.name, response.status_code)
            return None
        return self._pair_from(parse_body(response), previous_refresh=refresh_token)


class FunctionsBackend(ServerBackend):
    """Hosted platform: edge functions plus a password/refresh-token grant endpoint."""
    name = "functions"

    ACCESS_FIELD = "access_token"
    REFRESH_FIELD = "refresh_token"
    LOGIN_FIELD = "email"

    def __init__(self, base_url: str, api_key: str):
        super().__init__(base_url, prefix="/functions/v1",
                         refresh_path="/auth/v1/token?grant_type=refresh_token",
                         login_path="/auth/v1/token?grant_type=password")
        if not api_key:
            raise ValueError("api_key is required for the functions backend")
        self.api_key = api_key

    def default_headers(self):
        return {"apikey": self.api_key}


BACKENDS = {
    ServerBackend.name: ServerBackend,
    FunctionsBackend.name: FunctionsBackend,
}


def create_backend(mode: str, base_url: str, api_key: Optional[str] = None,
                   refresh_path: Optional[str] = None) -> AuthBackend:
    mode = (mode or ServerBackend.name).strip().lower()
    if mode == FunctionsBackend.name:
        return FunctionsBackend(base_url, api_key=api_key or "")
    if mode == ServerBackend.name:
        if refresh_path:
            return ServerBackend(base_url, refresh_path=refresh_path)
        return ServerBackend(base_url)
    raise ValueError(f"Unknown API mode {mode!r}; expected one of {sorted(BACKENDS)}")
