from __future__ import annotations
from functools import wraps
import logging

from flask import request, g

from models.admin_user import Role
from utils.exceptions import Forbidden, InvalidToken, Unauthorized
from utils.security import AccessTokenClaims, verify_access_token

logger = logging.getLogger(__name__)


def bearer_token(header: str | None) -> str | None:
    """Token part of an 'Authorization: Bearer <token>' header, or None."""
    if not header or not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None


def authorize(header: str | None) -> AccessTokenClaims:
    """
    Admin gate: verify the bearer token and require the admin role.
    401 for a missing/invalid token, 403 for a valid token without the role.
    """
    token = bearer_token(header)
    if token is None:
        raise Unauthorized("Missing or invalid Authorization header")
    try:
        claims = verify_access_token(token)
    except InvalidToken as err:
        logger.info("Bearer token rejected: %s", err.reason)
        raise Unauthorized()
    if claims.role is not Role.ADMIN:
        raise Forbidden()
    return claims


def admin_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_claims = authorize(request.headers.get("Authorization"))
            return fn(*args, **kwargs)

        return wrapper

    return decorator
