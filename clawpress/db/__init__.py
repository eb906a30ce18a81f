"""
SQLAlchemy models for the host stores ClawPress consumes.

This module provides a common entry point for all models.
"""

from .db_base import TimestampMixin, UUIDMixin, as_utc, utc_now
from .db_config import (
    Base,
    DatabaseManager,
    get_db_manager,
    import_all_models,
    initialize_db,
    set_db_manager,
)
from .db_content_models import ContentItem, ContentMeta
from .db_credential_models import ApplicationPassword
from .db_flash_models import FlashEntry
from .db_user_models import User

__all__ = [
    # Base definitions
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "as_utc",
    "utc_now",
    # Engine and sessions
    "DatabaseManager",
    "get_db_manager",
    "import_all_models",
    "initialize_db",
    "set_db_manager",
    # Models
    "ApplicationPassword",
    "ContentItem",
    "ContentMeta",
    "FlashEntry",
    "User",
]
