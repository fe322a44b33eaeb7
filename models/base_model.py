#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Starter API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps
- SoftDeleteMixin: a deleted_at marker plus helpers to set it

Notes:
- Timestamps get a Python-side default as well as a server default so they are
  readable right after flush without another round trip.
- SoftDelete: put the mixin FIRST in the model's inheritance list.
  Example:
    class User(SoftDeleteMixin, BaseModel, Base): ...
"""

from __future__ import annotations

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from utils.clock import as_utc, utcnow

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
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


class SoftDeleteMixin:
    """
    Adds a deleted_at timestamp. Rows with deleted_at set are hidden by
    models.soft_delete.SoftDeleteFilter.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self, when=None):
        """Set deleted_at without committing; the caller owns the session."""
        if self.deleted_at is None:
            self.deleted_at = as_utc(when) or utcnow()
