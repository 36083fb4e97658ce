"""
Session lifecycle: login, refresh-token rotation, revocation and the
one-time admin bootstrap.

Callers get generic errors (see utils.exceptions); the specific reason for an
authentication failure is only written to the log. Raw refresh tokens are
returned to the caller and never logged or stored.
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from flask import current_app
from marshmallow import ValidationError, validate

from models.base_model import utcnow
from models.credential_store import CredentialStore
from utils.exceptions import (
    Conflict,
    InvalidBootstrapToken,
    InvalidCredentials,
    InvalidInput,
    InvalidRefreshToken,
)
from utils.security import (
    create_access_token,
    hash_password,
    hash_refresh_token,
    new_refresh_token,
    verify_password,
    verify_refresh_token,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

_email_validator = validate.Email()


def is_valid_email(value: str) -> bool:
    try:
        _email_validator(value)
    except ValidationError:
        return False
    return True


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str

    def to_dict(self) -> dict:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


def _issue_pair(store: CredentialStore, user, rotate_from: str | None = None) -> TokenPair:
    raw = new_refresh_token()
    expires_at = utcnow() + current_app.config["REFRESH_TOKEN_EXPIRES"]
    if rotate_from is None:
        store.insert_refresh_record(user.id, hash_refresh_token(raw), expires_at)
    else:
        store.rotate_refresh_record(rotate_from, user.id, hash_refresh_token(raw), expires_at)
    access = create_access_token(subject=user.id, role=user.role, email=user.email)
    return TokenPair(access_token=access, refresh_token=raw)


def login(identifier: str, password: str, store: CredentialStore | None = None) -> TokenPair:
    store = store or CredentialStore()
    user = store.find_account_by_identifier(identifier)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rejected (%s)", "unknown account" if user is None else "bad password")
        raise InvalidCredentials()

    pair = _issue_pair(store, user)
    logger.info("Login succeeded for account %s", user.id)
    return pair


def _match_refresh_record(store: CredentialStore, presented: str):
    for record in store.find_unexpired_refresh_records():
        if verify_refresh_token(presented, record.token_hash):
            return record
    return None


def refresh(presented: str, store: CredentialStore | None = None) -> TokenPair:
    """
    Redeem a refresh token for a new access/refresh pair. The presented token
    is consumed whether or not the caller ever sees the new pair.
    """
    store = store or CredentialStore()
    record = _match_refresh_record(store, presented)
    if record is None:
        logger.info("Refresh rejected: no_match")
        raise InvalidRefreshToken(reason="no_match")

    # a losing rotation rolls back and expires loaded rows, including this one
    record_id = record.id
    user = store.get_account(record.user_id)
    if user is None:
        store.delete_refresh_record(record_id)
        logger.warning("Refresh rejected: account_missing for record %s", record_id)
        raise InvalidRefreshToken(reason="account_missing")

    try:
        pair = _issue_pair(store, user, rotate_from=record_id)
    except InvalidRefreshToken as err:
        logger.warning("Refresh rejected: %s for record %s", err.reason, record_id)
        raise
    logger.info("Refresh token rotated for account %s", user.id)
    return pair


def revoke(presented: str, store: CredentialStore | None = None) -> bool:
    """Delete the record matching presented; False if nothing matched."""
    store = store or CredentialStore()
    record = _match_refresh_record(store, presented)
    if record is None:
        return False
    return store.delete_refresh_record(record.id)


def bootstrap(shared_secret: str, identifier: str, password: str,
              store: CredentialStore | None = None):
    """
    Create the first admin account. Usable exactly once: after any account
    exists every call fails with Conflict.
    """
    store = store or CredentialStore()
    provided = (shared_secret or "").strip()
    if not provided:
        raise InvalidInput("Missing token")
    expected = current_app.config["ADMIN_BOOTSTRAP_TOKEN"]
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning("Bootstrap rejected: wrong shared secret")
        raise InvalidBootstrapToken()

    if store.exists_any_account():
        raise Conflict("Admin already exists")

    email = (identifier or "").strip().lower()
    if not is_valid_email(email):
        raise InvalidInput("Invalid email")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(f"Password must be {MIN_PASSWORD_LENGTH}+ chars")

    user = store.create_account(email, hash_password(password), bootstrap=True)
    logger.info("Bootstrap created admin account %s", user.id)
    return user
