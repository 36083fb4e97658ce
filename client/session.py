"""
Client-side session state: the current access/refresh token pair.

A ClientSession is an explicit object owned by a transport client, so several
independent sessions can live in one process. Persistence is delegated to a
TokenStore; FileTokenStore keeps the pair across restarts until sign-out.
"""
from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

ACCESS_KEY = "soldbd:accessToken"
REFRESH_KEY = "soldbd:refreshToken"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenStore(ABC):
    """Where a session's tokens are kept between calls."""

    @abstractmethod
    def load(self) -> Optional[TokenPair]:
        """The stored pair, or None when there is nothing usable."""

    @abstractmethod
    def save(self, pair: TokenPair) -> None:
        """Persist pair, replacing whatever was stored."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored pair."""


class MemoryTokenStore(TokenStore):

    def __init__(self, pair: Optional[TokenPair] = None):
        self._pair = pair

    def load(self):
        return self._pair

    def save(self, pair):
        self._pair = pair

    def clear(self):
        self._pair = None


class FileTokenStore(TokenStore):
    """JSON file with owner-only permissions."""

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def load(self):
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring token file %s: expected a JSON object", self.path)
            return None
        access, refresh = data.get(ACCESS_KEY), data.get(REFRESH_KEY)
        if not isinstance(access, str) or not isinstance(refresh, str):
            return None
        return TokenPair(access_token=access, refresh_token=refresh)

    def save(self, pair):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump({ACCESS_KEY: pair.access_token, REFRESH_KEY: pair.refresh_token}, fh)
        os.replace(tmp, self.path)

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


class ClientSession:

    def __init__(self, store: Optional[TokenStore] = None):
        self.store = store or MemoryTokenStore()
        self._pair = self.store.load()

    @property
    def access_token(self) -> Optional[str]:
        return self._pair.access_token if self._pair else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._pair.refresh_token if self._pair else None

    @property
    def is_authenticated(self) -> bool:
        return self._pair is not None

    def update(self, pair: TokenPair) -> None:
        self._pair = pair
        self.store.save(pair)

    def clear(self) -> None:
        self._pair = None
        self.store.clear()
