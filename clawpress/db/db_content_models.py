"""
Content store models: content items and their key/value metadata.

Just the data structure - no business logic or class methods.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from .db_base import utc_now
from .db_config import Base


class ContentItem(Base):
    """Post, page or attachment."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_author = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    post_type = Column(String(20), nullable=False, default="post")
    post_title = Column(Text, nullable=False, default="")
    post_status = Column(String(20), nullable=False, default="publish")
    post_date = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    post_mime_type = Column(String(100), nullable=True)

    meta = relationship(
        "ContentMeta",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("ix_posts_author_type", "post_author", "post_type", "post_status"),)


class ContentMeta(Base):
    """Arbitrary key/value metadata attached to a content item."""

    __tablename__ = "postmeta"

    meta_id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    meta_key = Column(String(255), nullable=False, index=True)
    meta_value = Column(Text, nullable=True)

    item = relationship("ContentItem", back_populates="meta")

    __table_args__ = (Index("ix_postmeta_post_key", "post_id", "meta_key"),)
