"""Tests for plugin bootstrap and uninstall."""

from clawpress import ClawPressPlugin, __version__
from clawpress.context.request_context import request_context
from clawpress.schemas.content_schemas import ContentCreate
from tests.fixtures.factories import ApplicationPasswordFactory, ContentItemFactory


class TestClawPressPlugin:
    def test_version(self):
        assert __version__ == "0.2.1"

    def test_services_share_one_session(self, db_session):
        plugin = ClawPressPlugin(session=db_session)

        sessions = {
            plugin.users.session,
            plugin.content.session,
            plugin.flash.session,
            plugin.app_passwords.session,
            plugin.integration.session,
            plugin.attribution.session,
            plugin.admin.session,
        }
        assert sessions == {db_session}

    def test_tracker_is_wired_to_content_store(self, db_session, author_user):
        plugin = ClawPressPlugin(session=db_session)
        credential = ApplicationPasswordFactory(user=author_user, name="OpenClaw")

        with request_context(author_user.id, credential.id, rest_request=True):
            post = plugin.content.insert_post(ContentCreate(post_author=author_user.id))

        assert plugin.attribution.get_tag(post.id) is not None

    def test_full_flow_through_authentication(self, db_session, admin_user):
        plugin = ClawPressPlugin(session=db_session)

        with request_context(user_id=admin_user.id):
            created = plugin.integration.create_password()

        with request_context(rest_request=True):
            plugin.app_passwords.authenticate("admin", created.password)
            post = plugin.content.insert_post(ContentCreate(post_author=admin_user.id))

        assert plugin.attribution.get_stats(admin_user.id).post_count == 1
        assert plugin.attribution.get_tag(post.id) is not None

    def test_uninstall_removes_tags_and_flash_but_keeps_credentials(
        self, db_session, author_user
    ):
        plugin = ClawPressPlugin(session=db_session)
        ApplicationPasswordFactory(user=author_user, name="OpenClaw")
        item = ContentItemFactory(author=author_user)
        plugin.content.update_post_meta(item.id, "_clawpress_created", 1700000000)
        plugin.content.update_post_meta(item.id, "_thumbnail_id", 3)
        plugin.flash.set(f"clawpress_error_{author_user.id}", "oops", 60)
        plugin.flash.set("unrelated", "keep", 60)

        plugin.uninstall()

        assert plugin.attribution.get_tag(item.id) is None
        assert plugin.content.get_post_meta(item.id, "_thumbnail_id") == "3"
        assert plugin.flash.get(f"clawpress_error_{author_user.id}") is None
        assert plugin.flash.get("unrelated") == "keep"
        assert plugin.integration.get_existing_password(author_user.id) is not None

    def test_owns_session_from_global_manager(self, db_session):
        with ClawPressPlugin() as plugin:
            assert plugin.users.list_users() == []
