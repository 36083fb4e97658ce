"""
Credential store: admin accounts and refresh-token records.

All queries go through the shared DBStorage session. The two operations with
read-then-write semantics are made atomic at the database:
- create_account(bootstrap=True) relies on the unique bootstrap_slot column,
  so only one bootstrap insert can ever commit;
- rotate_refresh_record deletes the redeemed row with a conditional DELETE and
  only inserts the replacement if that DELETE removed exactly one row.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models import storage
from models.admin_user import AdminUser, Role
from models.base_model import utcnow
from models.refresh_token import RefreshToken
from utils.exceptions import Conflict, InvalidRefreshToken

logger = logging.getLogger(__name__)

BOOTSTRAP_SLOT = 1


class CredentialStore:

    def __init__(self, db=None):
        self.db = db or storage

    @property
    def session(self):
        return self.db.get_session()

    # accounts

    def find_account_by_identifier(self, identifier: str) -> Optional[AdminUser]:
        ident = (identifier or "").strip().lower()
        if not ident:
            return None
        return (
            self.session.query(AdminUser)
            .filter(func.lower(AdminUser.email) == ident)
            .first()
        )

    def get_account(self, account_id: str) -> Optional[AdminUser]:
        return self.db.get(AdminUser, account_id)

    def exists_any_account(self) -> bool:
        return self.session.query(AdminUser.id).first() is not None

    def create_account(self, email: str, password_hash: str, bootstrap: bool = False) -> AdminUser:
        """Insert an admin account; Conflict if the email or the bootstrap slot is taken."""
        user = AdminUser(
            email=email.strip().lower(),
            password_hash=password_hash,
            role=Role.ADMIN,
            bootstrap_slot=BOOTSTRAP_SLOT if bootstrap else None,
        )
        self.db.new(user)
        try:
            self.db.save()
        except IntegrityError:
            if bootstrap:
                raise Conflict("Admin already exists")
            raise Conflict("Email already registered")
        return user

    # refresh tokens

    def find_unexpired_refresh_records(self, now: datetime | None = None) -> List[RefreshToken]:
        """Every record still inside its lifetime, newest first."""
        now = now or utcnow()
        return (
            self.session.query(RefreshToken)
            .filter(RefreshToken.expires_at > now)
            .order_by(RefreshToken.created_at.desc())
            .all()
        )

    def insert_refresh_record(self, user_id: str, token_hash: str, expires_at: datetime) -> RefreshToken:
        self._purge_expired(user_id)
        record = RefreshToken(user_id=user_id, token_hash=token_hash, expires_at=expires_at)
        self.db.new(record)
        self.db.save()
        return record

    def _purge_expired(self, user_id: str, now: datetime | None = None) -> int:
        """Drop the account's lapsed records; committed with the caller's write."""
        return (
            self.session.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.expires_at <= (now or utcnow()))
            .delete(synchronize_session=False)
        )

    def _delete_by_id(self, record_id: str) -> int:
        return (
            self.session.query(RefreshToken)
            .filter(RefreshToken.id == record_id)
            .delete(synchronize_session=False)
        )

    def delete_refresh_record(self, record_id: str) -> bool:
        """Delete one record; True only if this call removed it."""
        deleted = self._delete_by_id(record_id)
        self.db.save()
        return deleted == 1

    def rotate_refresh_record(self, old_id: str, user_id: str, new_hash: str,
                              expires_at: datetime) -> RefreshToken:
        """
        Replace a redeemed record with a new one in a single commit.
        Raises InvalidRefreshToken if another request already removed old_id.
        """
        if self._delete_by_id(old_id) != 1:
            self.db.rollback()
            raise InvalidRefreshToken(reason="already_rotated")
        self._purge_expired(user_id)
        record = RefreshToken(user_id=user_id, token_hash=new_hash, expires_at=expires_at)
        self.db.new(record)
        # save() rolls back on failure, which also restores the old row
        self.db.save()
        return record
