"""
dashfs Database Base — SQLAlchemy declarative base and audit mixin.

Provides:
- Base: declarative base for all dashfs models
- AuditMixin: created_by, created_time, updated_by, updated_time
- utcnow(): the single clock used for every persisted timestamp
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all dashfs models."""
    pass


class AuditMixin:
    """Adds created_by/created_time and updated_by/updated_time columns.

    Actors are principal strings asserted by the authentication layer.
    """
    created_by = Column(String(128), nullable=False)
    created_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_by = Column(String(128), nullable=False)
    updated_time = Column(DateTime(timezone=True), default=utcnow, nullable=False)
