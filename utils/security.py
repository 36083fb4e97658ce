"""
security helpers:
- Argon2 hashing via argon2-cffi, used for passwords and refresh tokens alike
- Access token creation/verification via PyJWT (HS256 by default)
- Opaque refresh token generation
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from flask import current_app

from models.admin_user import Role
from utils.exceptions import ConfigurationError, InvalidToken

ph = PasswordHasher()

REFRESH_TOKEN_BYTES = 48


@dataclass(frozen=True)
class AccessTokenClaims:
    subject: str
    role: Optional[Role]
    email: Optional[str] = None


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def new_refresh_token() -> str:
    """48 random bytes, URL-safe base64. Carries no claims."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


# Refresh tokens get the same slow salted hash as passwords so a dump of
# auth_refresh_tokens cannot be turned back into usable tokens.
hash_refresh_token = hash_password


def verify_refresh_token(token: str, token_hash: str) -> bool:
    return verify_password(token, token_hash)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _signing_secret() -> str:
    secret = current_app.config.get("JWT_SECRET")
    if not secret:
        raise ConfigurationError("Missing required configuration: JWT_SECRET")
    return secret


def create_access_token(subject: str, role, email: str | None = None) -> str:
    """
    Signed access token for subject/role, expiring after ACCESS_TOKEN_EXPIRES.
    role may be a Role or a plain string.
    """
    now = _now()
    exp = now + current_app.config["ACCESS_TOKEN_EXPIRES"]
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "soldbd-api"),
        "sub": str(subject),
        "role": role.value if isinstance(role, Role) else str(role),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "type": "access",
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, _signing_secret(), algorithm=current_app.config["JWT_ALGORITHM"])


def verify_access_token(token: str) -> AccessTokenClaims:
    """
    Decode and validate an access token. Raises InvalidToken on a bad signature,
    a malformed or expired token, or a token that is not an access token.
    """
    try:
        decoded = jwt.decode(
            token,
            _signing_secret(),
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken(reason="expired")
    except jwt.InvalidTokenError as exc:
        raise InvalidToken(reason=f"invalid: {exc}")

    if decoded.get("type") != "access":
        raise InvalidToken(reason="wrong_type")
    return AccessTokenClaims(
        subject=decoded["sub"],
        role=Role.parse(decoded.get("role")),
        email=decoded.get("email"),
    )
