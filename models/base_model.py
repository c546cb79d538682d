#!/usr/bin/env python3
"""
Shared SQLAlchemy base for the Blog API models.

- UUID primary key (String(36)) generated client-side
- created_at / updated_at timestamps (timezone-aware, microsecond precision
  so that rows created within the same second keep their insertion order)
- save() that goes through the shared DBStorage
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py.
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_id(value) -> bool:
    """True when `value` is a canonical UUID string as produced by _uuid_str."""
    if not isinstance(value, str):
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except ValueError:
        return False


class BaseModel:
    """
    Base mixin for all persistent models.

    Provides id, created_at, updated_at, plus save() wired to DBStorage.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        Timestamps are filled on insert unless passed explicitly (e.g., in tests).
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if caller passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        """Human-friendly representation including id and fields."""
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"

    def save(self):
        """Touch updated_at and persist the instance through DBStorage."""
        self.updated_at = _utcnow()
        models.storage.new(self)
        models.storage.save()

