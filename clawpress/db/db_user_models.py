"""
User directory model.

Just the data structure - no business logic or class methods.
"""

from sqlalchemy import Column, Integer, String

from .db_base import TimestampMixin
from .db_config import Base


class User(Base, TimestampMixin):
    """Site user - just data, no logic."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_login = Column(String(60), nullable=False, unique=True, index=True)
    user_email = Column(String(100), nullable=False, default="")
    display_name = Column(String(250), nullable=False, default="")
    role = Column(String(50), nullable=False, default="subscriber")
