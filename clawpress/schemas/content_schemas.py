"""
Pydantic schemas for content items and usage statistics.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import ContentType, PostStatus
from ..db.db_base import as_utc


class ContentCreate(BaseModel):
    """Data for inserting a post or page."""

    model_config = ConfigDict(use_enum_values=True)

    post_author: int = Field(..., gt=0)
    post_title: str = ""
    post_type: ContentType = ContentType.POST
    post_status: PostStatus = PostStatus.PUBLISH
    post_date: Optional[datetime] = None


class AttachmentCreate(BaseModel):
    """Data for inserting a media attachment."""

    model_config = ConfigDict(use_enum_values=True)

    post_author: int = Field(..., gt=0)
    post_title: str = ""
    post_mime_type: str = "application/octet-stream"
    post_date: Optional[datetime] = None


class ContentRead(BaseModel):
    """Content item as seen by listeners and callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    post_author: int
    post_type: str
    post_title: str
    post_status: str
    post_date: datetime
    post_mime_type: Optional[str] = None

    @field_validator("post_date")
    @classmethod
    def ensure_utc(cls, v):
        return as_utc(v)


class RecentPost(BaseModel):
    """One row of the recency list shown in the connected view."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    post_title: str
    post_date: datetime
    post_status: str
    post_type: str

    @field_validator("post_date")
    @classmethod
    def ensure_utc(cls, v):
        return as_utc(v)


class UsageStats(BaseModel):
    """Per-user aggregate of attributed content."""

    post_count: int = 0
    media_count: int = 0
    recent_posts: List[RecentPost] = Field(default_factory=list)
