from __future__ import annotations

from typing import Any, Optional

DEFAULT_MESSAGE = "Request failed"


class ApiError(Exception):
    """
    A failed API call. status_code is None when the server was never reached.
    """

    def __init__(self, message: str = DEFAULT_MESSAGE, status_code: Optional[int] = None,
                 payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __repr__(self):
        return f"ApiError(status_code={self.status_code!r}, message={self.message!r})"
