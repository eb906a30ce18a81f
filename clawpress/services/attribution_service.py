"""
Request attribution: tag content created through the integration credential.

A request is attributed to the integration when it is a content-API request,
is authenticated, carries an application password uuid, and that application
password carries the reserved name. Attributed post/page and attachment
inserts get a meta row keyed by the configured meta key holding the unix time
of tagging. Stats over those tags are recomputed on every call.
"""

import time
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..constants import ContentEvent, ContentType, PostStatus
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_content_models import ContentItem, ContentMeta
from ..exceptions import HostStorageError
from ..schemas.content_schemas import ContentRead, RecentPost, UsageStats
from .application_password_service import ApplicationPasswordService
from .base_service import SessionManagedService
from .content_service import ContentService

_CACHE_KEY = "clawpress.is_integration_request"

POST_TYPES = (ContentType.POST.value, ContentType.PAGE.value)


class AttributionService(SessionManagedService):
    """Attribution predicate, tagging listeners and usage stats."""

    def __init__(
        self,
        app_passwords: ApplicationPasswordService,
        content: ContentService,
        **kwargs,
    ):
        kwargs.setdefault("session", content.session)
        super().__init__(**kwargs)
        self.app_passwords = app_passwords
        self.content = content

    @property
    def meta_key(self) -> str:
        return self.config.integration.meta_key

    def register(self) -> None:
        """Subscribe the tagging hooks to the content store."""
        self.content.subscribe(ContentEvent.POST_INSERTED, self.maybe_tag_post)
        self.content.subscribe(ContentEvent.ATTACHMENT_INSERTED, self.maybe_tag_attachment)

    def unregister(self) -> None:
        self.content.unsubscribe(ContentEvent.POST_INSERTED, self.maybe_tag_post)
        self.content.unsubscribe(ContentEvent.ATTACHMENT_INSERTED, self.maybe_tag_attachment)

    # ==================== PREDICATE ====================

    def is_integration_request(self) -> bool:
        """
        Whether the current request was authenticated with the integration credential.

        Never raises; any missing piece or lookup failure yields False. The
        answer is cached for the rest of the request.
        """
        if RequestContext.has_cached(_CACHE_KEY):
            return RequestContext.get_cached(_CACHE_KEY)

        result = self._check_integration_request()
        RequestContext.set_cached(_CACHE_KEY, result)
        return result

    def _check_integration_request(self) -> bool:
        if not RequestContext.is_rest_request():
            return False

        user_id = RequestContext.get_current_user_id()
        if not user_id:
            return False

        app_password_uuid = RequestContext.get_authenticated_app_password()
        if not app_password_uuid:
            return False

        try:
            credential = self.app_passwords.get_user_application_password(
                user_id, app_password_uuid
            )
        except HostStorageError:
            return False

        if credential is None:
            return False
        return credential.name == self.config.integration.app_password_name

    # ==================== TAGGING HOOKS ====================

    def maybe_tag_post(self, post: ContentRead) -> bool:
        """POST_INSERTED listener. Returns True when the post was tagged."""
        return self._maybe_tag(post.id)

    def maybe_tag_attachment(self, attachment_id: int) -> bool:
        """ATTACHMENT_INSERTED listener. Returns True when the attachment was tagged."""
        return self._maybe_tag(attachment_id)

    def _maybe_tag(self, post_id: int) -> bool:
        if not self.is_integration_request():
            return False

        self.content.update_post_meta(post_id, self.meta_key, int(time.time()))
        self.logger.info(
            "Content attributed to integration",
            extra={"post_id": post_id, "user_id": RequestContext.get_current_user_id()},
        )
        return True

    def get_tag(self, post_id: int) -> Optional[int]:
        """Tag timestamp of an item, or None if untagged."""
        value = self.content.get_post_meta(post_id, self.meta_key)
        return int(value) if value is not None else None

    # ==================== STATS ====================

    @operation()
    def get_stats(self, user_id: int) -> UsageStats:
        """
        Aggregate attributed content for a user.

        Returns:
            Count of tagged posts/pages (trash excluded), count of tagged
            attachments and the most recent tagged posts/pages, newest first
        """
        tagged = (
            self.session.query(ContentItem)
            .join(ContentMeta, ContentMeta.post_id == ContentItem.id)
            .filter(ContentItem.post_author == user_id, ContentMeta.meta_key == self.meta_key)
        )
        posts = tagged.filter(
            ContentItem.post_type.in_(POST_TYPES),
            ContentItem.post_status != PostStatus.TRASH.value,
        )
        media = tagged.filter(ContentItem.post_type == ContentType.ATTACHMENT.value)

        try:
            post_count = posts.with_entities(func.count(ContentItem.id)).scalar() or 0
            media_count = media.with_entities(func.count(ContentItem.id)).scalar() or 0
            recent = (
                posts.order_by(ContentItem.post_date.desc(), ContentItem.id.desc())
                .limit(self.config.integration.recent_posts_limit)
                .all()
            )
        except SQLAlchemyError as e:
            raise HostStorageError("Failed to aggregate usage stats", cause=e, user_id=user_id)

        return UsageStats(
            post_count=post_count,
            media_count=media_count,
            recent_posts=[RecentPost.model_validate(item) for item in recent],
        )
