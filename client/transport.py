"""
Session transport client.

Attaches the session's bearer token to every call, retries network failures
and 5xx responses a bounded number of times, and on a 401 performs a single
silent refresh followed by a single retry of the original request. A second
401 (or a failed refresh) is surfaced to the caller; refreshes never loop.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from client.backends import AuthBackend, error_message, parse_body
from client.exceptions import ApiError
from client.session import ClientSession, TokenPair

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 2


class SessionTransportClient:

    def __init__(
        self,
        backend: AuthBackend,
        session: ClientSession | None = None,
        http_client: httpx.Client | None = None,
        retries: int = DEFAULT_RETRIES,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.backend = backend
        self.session = session or ClientSession()
        self.retries = retries
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout_seconds)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _headers(self, extra: Optional[dict], access_token: Optional[str]) -> dict:
        headers = dict(extra or {})
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _send(self, method: str, endpoint: str, body: Any, headers: dict, retries: int) -> httpx.Response:
        """
        Up to retries + 1 attempts. Network errors and 5xx are retried immediately;
        the last network error is re-raised, the last 5xx is returned.
        """
        attempt = 0
        while True:
            try:
                response = self.backend.call(self._client, method, endpoint, headers=headers, body=body)
            except httpx.TransportError as exc:
                if attempt >= retries:
                    raise
                logger.warning("%s %s failed (%s); retrying", method, endpoint, exc.__class__.__name__)
            else:
                if response.status_code < 500 or attempt >= retries:
                    return response
                logger.warning("%s %s returned %s; retrying", method, endpoint, response.status_code)
            attempt += 1

    def _refresh(self) -> Optional[TokenPair]:
        refresh_token = self.session.refresh_token
        if not refresh_token:
            return None
        try:
            pair = self.backend.refresh(self._client, refresh_token)
        except httpx.HTTPError as exc:
            logger.warning("Token refresh failed: %s", exc.__class__.__name__)
            return None
        if pair is None:
            return None
        self.session.update(pair)
        logger.debug("Session tokens refreshed")
        return pair

    def call(self, endpoint: str, method: str = "POST", body: Any = None,
             headers: Optional[dict] = None) -> Any:
        """
        Perform an API call and return the decoded response body.
        Raises ApiError for any failure, including network errors.
        """
        method = method.upper()
        try:
            response = self._send(method, endpoint, body,
                                  self._headers(headers, self.session.access_token), self.retries)
            if response.status_code == 401:
                pair = self._refresh()
                if pair is not None:
                    # exactly one more attempt with the new token
                    response = self._send(method, endpoint, body,
                                          self._headers(headers, pair.access_token), 0)
        except httpx.HTTPError as exc:
            raise ApiError(f"Network error: {exc.__class__.__name__}") from exc
        except OSError as exc:
            raise ApiError(f"Could not store session tokens: {exc}") from exc

        payload = parse_body(response)
        if not response.is_success:
            raise ApiError(error_message(response, payload), response.status_code, payload)
        return payload

    def login(self, identifier: str, password: str) -> TokenPair:
        """Sign in and keep the returned pair in the session."""
        try:
            pair = self.backend.login(self._client, identifier, password)
        except httpx.HTTPError as exc:
            raise ApiError(f"Network error: {exc.__class__.__name__}") from exc
        try:
            self.session.update(pair)
        except OSError as exc:
            raise ApiError(f"Could not store session tokens: {exc}") from exc
        return pair

    def sign_out(self) -> None:
        try:
            self.session.clear()
        except OSError as exc:
            raise ApiError(f"Could not clear session tokens: {exc}") from exc

    def bootstrap_admin(self, token: str, identifier: str, password: str) -> Any:
        return self.call("bootstrap-admin", body={
            "token": token,
            "identifier": identifier,
            "password": password,
        })
