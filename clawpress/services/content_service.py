"""
Host content store: posts, pages, attachments and their metadata.

Inserts commit first and then synchronously notify the listeners registered
for the matching ContentEvent. Post/page listeners receive the new item,
attachment listeners receive the new item's id. A listener that raises is
logged and skipped; the insert still returns normally.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..constants import ContentEvent, ContentType, PostStatus
from ..context.operation_context import operation
from ..db.db_content_models import ContentItem, ContentMeta
from ..exceptions import HostStorageError, not_found
from ..schemas.content_schemas import AttachmentCreate, ContentCreate, ContentRead
from ..utils.crud_helpers import create_record, delete_record, delete_where, get_record
from .base_service import SessionManagedService

Listener = Callable[[Any], None]


class ContentService(SessionManagedService):
    """Content store with a post-commit listener registry."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._listeners: Dict[ContentEvent, List[Listener]] = defaultdict(list)

    # ==================== LISTENERS ====================

    def subscribe(self, event: ContentEvent, listener: Listener) -> None:
        """Register a listener for a post-commit content event."""
        if listener not in self._listeners[event]:
            self._listeners[event].append(listener)

    def unsubscribe(self, event: ContentEvent, listener: Listener) -> None:
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def listeners(self, event: ContentEvent) -> List[Listener]:
        return list(self._listeners[event])

    def _notify(self, event: ContentEvent, payload: Any) -> None:
        # Runs after commit; one failing listener does not stop the others
        for listener in self.listeners(event):
            try:
                listener(payload)
            except Exception:
                self.logger.exception(
                    "Content listener failed",
                    extra={
                        "event": event.value,
                        "content_listener": getattr(listener, "__qualname__", repr(listener)),
                    },
                )

    # ==================== ITEMS ====================

    @operation()
    def insert_post(self, post_data: ContentCreate) -> ContentRead:
        """
        Insert a post or page and notify POST_INSERTED listeners.

        Raises:
            ValueError: If asked to insert an attachment
            HostStorageError: If the store fails
        """
        if post_data.post_type == ContentType.ATTACHMENT.value:
            raise ValueError("Use insert_attachment for attachments")

        data = post_data.model_dump(exclude_none=True)
        item = create_record(self.session, ContentItem, data)
        post = ContentRead.model_validate(item)

        self.logger.debug("Content inserted", extra={"post_id": post.id, "post_type": post.post_type})
        self._notify(ContentEvent.POST_INSERTED, post)
        return post

    @operation()
    def insert_attachment(self, attachment_data: AttachmentCreate) -> int:
        """
        Insert a media attachment and notify ATTACHMENT_INSERTED listeners.

        Returns:
            The new attachment id
        """
        data = attachment_data.model_dump(exclude_none=True)
        data["post_type"] = ContentType.ATTACHMENT.value
        data["post_status"] = PostStatus.INHERIT.value
        item = create_record(self.session, ContentItem, data)
        attachment_id = item.id

        self.logger.debug("Attachment inserted", extra={"post_id": attachment_id})
        self._notify(ContentEvent.ATTACHMENT_INSERTED, attachment_id)
        return attachment_id

    def get_post(self, post_id: int) -> Optional[ContentRead]:
        item = get_record(self.session, ContentItem, {"id": post_id})
        return ContentRead.model_validate(item) if item else None

    def _require_item(self, post_id: int) -> ContentItem:
        item = get_record(self.session, ContentItem, {"id": post_id})
        if item is None:
            raise not_found("ContentItem", post_id=post_id)
        return item

    @operation()
    def trash_post(self, post_id: int) -> ContentRead:
        """Soft-delete an item by moving it to the trash."""
        item = self._require_item(post_id)
        item.post_status = PostStatus.TRASH.value
        self._commit("trash ContentItem")
        return ContentRead.model_validate(item)

    @operation()
    def delete_post(self, post_id: int) -> None:
        """Permanently delete an item together with its metadata."""
        delete_record(self.session, self._require_item(post_id))

    # ==================== METADATA ====================

    def get_post_meta(self, post_id: int, meta_key: str) -> Optional[str]:
        meta = get_record(self.session, ContentMeta, {"post_id": post_id, "meta_key": meta_key})
        return meta.meta_value if meta else None

    def get_post_meta_rows(self, post_id: int, meta_key: str) -> List[ContentMeta]:
        return (
            self.session.query(ContentMeta)
            .filter(ContentMeta.post_id == post_id, ContentMeta.meta_key == meta_key)
            .all()
        )

    def update_post_meta(self, post_id: int, meta_key: str, meta_value: Any) -> None:
        """Set a meta value, replacing an existing value for the same key."""
        self._require_item(post_id)
        meta = get_record(self.session, ContentMeta, {"post_id": post_id, "meta_key": meta_key})
        if meta is None:
            create_record(
                self.session,
                ContentMeta,
                {"post_id": post_id, "meta_key": meta_key, "meta_value": str(meta_value)},
            )
            return
        meta.meta_value = str(meta_value)
        self._commit("update ContentMeta")

    def delete_post_meta(self, post_id: int, meta_key: str) -> int:
        return delete_where(
            self.session,
            ContentMeta,
            ContentMeta.post_id == post_id,
            ContentMeta.meta_key == meta_key,
        )

    @operation()
    def delete_meta_by_key(self, meta_key: str) -> int:
        """Remove a meta key from every item. Returns the number of rows removed."""
        deleted = delete_where(self.session, ContentMeta, ContentMeta.meta_key == meta_key)
        self.logger.info("Meta key removed", extra={"meta_key": meta_key, "deleted": deleted})
        return deleted

    def _commit(self, what: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise HostStorageError(f"Failed to {what}: {str(e)}", cause=e)
