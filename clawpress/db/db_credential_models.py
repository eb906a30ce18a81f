"""
Application password model owned by the host credential store.

Just the data structure - no business logic or class methods.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from .db_base import UUIDMixin, utc_now
from .db_config import Base


class ApplicationPassword(Base, UUIDMixin):
    """Per-user secondary secret - only the hash is stored."""

    __tablename__ = "application_passwords"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    app_id = Column(String(100), nullable=True)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    last_ip = Column(String(45), nullable=True)

    # One credential per (user, name); doubles as the reserved-name lookup index
    __table_args__ = (Index("ix_app_password_lookup", "user_id", "name", unique=True),)
