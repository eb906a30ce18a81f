"""
Short-lived flash state used to carry messages across a redirect.

Just the data structure - no business logic or class methods.
"""

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.dialects.postgresql import JSONB

from .db_base import utc_now
from .db_config import Base


class FlashEntry(Base):
    """Key/value entry with an explicit expiry."""

    __tablename__ = "flash_state"

    key = Column(String(191), primary_key=True)
    value = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
