#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the sold.bd API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at stored as naive UTC
- to_dict() that formats timestamps and removes SA internals
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current time as naive UTC; every timestamp column uses this convention."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"

    def to_dict(self) -> dict:
        """
        Plain dict of column values; timestamps formatted with TIME_FMT and
        password/token hashes removed.
        """
        d = {k: v for k, v in self.__dict__.items() if k != "_sa_instance_state"}
        for key in ("created_at", "updated_at"):
            if isinstance(d.get(key), datetime):
                d[key] = d[key].strftime(TIME_FMT)
        d.pop("password_hash", None)
        d.pop("token_hash", None)
        d["__class__"] = self.__class__.__name__
        return d
