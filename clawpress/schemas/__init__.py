"""Pydantic schemas for ClawPress."""

from .admin_schemas import ActionResult, AjaxResponse, PageView, RosterEntry, RosterView
from .content_schemas import (
    AttachmentCreate,
    ContentCreate,
    ContentRead,
    RecentPost,
    UsageStats,
)
from .credential_schemas import (
    ApplicationPasswordCreate,
    ApplicationPasswordRead,
    ConnectionInfo,
    CreatedApplicationPassword,
)
from .user_schemas import UserCreate, UserRead

__all__ = [
    "ActionResult",
    "AjaxResponse",
    "ApplicationPasswordCreate",
    "ApplicationPasswordRead",
    "AttachmentCreate",
    "ConnectionInfo",
    "ContentCreate",
    "ContentRead",
    "CreatedApplicationPassword",
    "PageView",
    "RecentPost",
    "RosterEntry",
    "RosterView",
    "UsageStats",
    "UserCreate",
    "UserRead",
]
