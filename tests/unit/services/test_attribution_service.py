"""Tests for request attribution, tagging and usage stats."""

from datetime import timedelta
from unittest.mock import patch

import pytest

from clawpress.context.request_context import RequestContext, request_context
from clawpress.db import utc_now
from clawpress.exceptions import HostStorageError
from clawpress.schemas.content_schemas import AttachmentCreate, ContentCreate
from tests.fixtures.factories import ApplicationPasswordFactory, ContentItemFactory

META_KEY = "_clawpress_created"


@pytest.fixture
def openclaw_credential(author_user):
    return ApplicationPasswordFactory(user=author_user, name="OpenClaw", app_id="clawpress")


@pytest.fixture
def other_credential(author_user):
    return ApplicationPasswordFactory(user=author_user, name="Mobile App")


class TestIsIntegrationRequest:
    def test_true_for_reserved_name_over_rest(
        self, attribution_service, author_user, openclaw_credential
    ):
        with request_context(author_user.id, openclaw_credential.id, rest_request=True):
            assert attribution_service.is_integration_request() is True

    def test_false_outside_rest(self, attribution_service, author_user, openclaw_credential):
        with request_context(author_user.id, openclaw_credential.id, rest_request=False):
            assert attribution_service.is_integration_request() is False

    def test_false_without_user(self, attribution_service, openclaw_credential):
        with request_context(app_password_uuid=openclaw_credential.id, rest_request=True):
            assert attribution_service.is_integration_request() is False

    def test_false_for_cookie_auth(self, attribution_service, author_user):
        with request_context(author_user.id, rest_request=True):
            assert attribution_service.is_integration_request() is False

    def test_false_for_other_credential(self, attribution_service, author_user, other_credential):
        with request_context(author_user.id, other_credential.id, rest_request=True):
            assert attribution_service.is_integration_request() is False

    def test_false_for_credential_of_another_user(
        self, attribution_service, admin_user, openclaw_credential
    ):
        with request_context(admin_user.id, openclaw_credential.id, rest_request=True):
            assert attribution_service.is_integration_request() is False

    def test_false_when_store_fails(self, attribution_service, author_user, openclaw_credential):
        with request_context(author_user.id, openclaw_credential.id, rest_request=True):
            with patch.object(
                attribution_service.app_passwords,
                "get_user_application_password",
                side_effect=HostStorageError("down"),
            ):
                assert attribution_service.is_integration_request() is False

    def test_answer_is_cached_per_request(
        self, attribution_service, author_user, openclaw_credential
    ):
        with request_context(author_user.id, openclaw_credential.id, rest_request=True):
            with patch.object(
                attribution_service.app_passwords,
                "get_user_application_password",
                wraps=attribution_service.app_passwords.get_user_application_password,
            ) as lookup:
                assert attribution_service.is_integration_request() is True
                assert attribution_service.is_integration_request() is True

        assert lookup.call_count == 1


class TestTagging:
    def test_post_created_by_integration_is_tagged(
        self, attribution_service, content_service, author_user, openclaw_credential
    ):
        with request_context(author_user.id, openclaw_credential.id, rest_request=True):
            started = RequestContext.get_started_at()
            post = content_service.insert_post(ContentCreate(post_author=author_user.id))

        rows = content_service.get_post_meta_rows(post.id, META_KEY)
        assert len(rows) == 1
        assert int(rows[0].meta_value) >= started
        assert attribution_service.get_tag(post.id) == int(rows[0].meta_value)

    def test_tag_not_earlier_than_fractional_request_start(
        self, attribution_service, content_service, author_user, openclaw_credential
    ):
        with patch("time.time", return_value=1700000000.7):
            with request_context(author_user.id, openclaw_credential.id, rest_request=True):
                started = RequestContext.get_started_at()
                post = content_service.insert_post(ContentCreate(post_author=author_user.id))

        tag = attribution_service.get_tag(post.id)
        assert tag == 1700000000
        assert tag >= started

    def test_page_is_tagged(
        self, attribution_service, content_service, author_user, openclaw_credential
    ):
        with request_context(author_user.id, openclaw_credential.id, rest_request=True):
            page = content_service.insert_post(
                ContentCreate(post_author=author_user.id, post_type="page")
            )

        assert attribution_service.get_tag(page.id) is not None

    def test_attachment_created_by_integration_is_tagged(
        self, attribution_service, content_service, author_user, openclaw_credential
    ):
        with request_context(author_user.id, openclaw_credential.id, rest_request=True):
            attachment_id = content_service.insert_attachment(
                AttachmentCreate(post_author=author_user.id, post_mime_type="image/png")
            )

        assert attribution_service.get_tag(attachment_id) is not None

    def test_other_credential_is_not_tagged(
        self, attribution_service, content_service, author_user, other_credential
    ):
        with request_context(author_user.id, other_credential.id, rest_request=True):
            post = content_service.insert_post(ContentCreate(post_author=author_user.id))
            attachment_id = content_service.insert_attachment(
                AttachmentCreate(post_author=author_user.id)
            )

        assert attribution_service.get_tag(post.id) is None
        assert attribution_service.get_tag(attachment_id) is None

    def test_dashboard_request_is_not_tagged(
        self, attribution_service, content_service, author_user
    ):
        with request_context(author_user.id):
            post = content_service.insert_post(ContentCreate(post_author=author_user.id))

        assert content_service.get_post_meta_rows(post.id, META_KEY) == []

    def test_unregister_stops_tagging(
        self, attribution_service, content_service, author_user, openclaw_credential
    ):
        attribution_service.unregister()

        with request_context(author_user.id, openclaw_credential.id, rest_request=True):
            post = content_service.insert_post(ContentCreate(post_author=author_user.id))

        assert attribution_service.get_tag(post.id) is None


class TestStats:
    def _tag(self, content_service, item):
        content_service.update_post_meta(item.id, META_KEY, 1700000000)

    def test_counts_and_recent_posts(self, attribution_service, content_service, author_user):
        now = utc_now()
        older = ContentItemFactory(author=author_user, post_date=now - timedelta(days=2))
        newer = ContentItemFactory(
            author=author_user, post_type="page", post_date=now - timedelta(days=1)
        )
        trashed = ContentItemFactory(author=author_user, post_status="trash", post_date=now)
        media = [
            ContentItemFactory(author=author_user, post_type="attachment", post_status="inherit")
            for _ in range(2)
        ]
        untagged = ContentItemFactory(author=author_user)

        for item in [older, newer, trashed, *media]:
            self._tag(content_service, item)

        stats = attribution_service.get_stats(author_user.id)

        assert stats.post_count == 2
        assert stats.media_count == 2
        assert [p.id for p in stats.recent_posts] == [newer.id, older.id]
        assert untagged.id not in [p.id for p in stats.recent_posts]

    def test_only_the_users_content(
        self, attribution_service, content_service, author_user, admin_user
    ):
        self._tag(content_service, ContentItemFactory(author=admin_user))

        stats = attribution_service.get_stats(author_user.id)

        assert stats.post_count == 0
        assert stats.media_count == 0
        assert stats.recent_posts == []

    def test_recent_posts_are_limited(self, attribution_service, content_service, author_user):
        for _ in range(7):
            self._tag(content_service, ContentItemFactory(author=author_user))

        stats = attribution_service.get_stats(author_user.id)

        assert stats.post_count == 7
        assert len(stats.recent_posts) == 5

    def test_stats_follow_tag_removal(self, attribution_service, content_service, author_user):
        item = ContentItemFactory(author=author_user)
        self._tag(content_service, item)
        assert attribution_service.get_stats(author_user.id).post_count == 1

        content_service.delete_post(item.id)
        assert attribution_service.get_stats(author_user.id).post_count == 0
