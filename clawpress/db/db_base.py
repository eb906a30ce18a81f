"""
Timestamp helpers and column mixins shared by the host store models.

SQLite hands back naive datetimes even for ``timezone=True`` columns, so
anything read from the stores goes through ``as_utc`` before it is compared.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String


def utc_now():
    return datetime.now(UTC)


def as_utc(value):
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class TimestampMixin:
    """Registration and last-change times for user rows."""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)


class UUIDMixin:
    """String uuid primary key, the form credentials are addressed by."""

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
