"""
Plugin bootstrap: wire the services over one session and hook the tracker
into the content store.
"""

from typing import Optional

from sqlalchemy.orm import Session

from .config import AppConfig, get_config
from .context.operation_context import operation
from .db.db_config import get_db_manager
from .services.admin_service import AdminService
from .services.application_password_service import ApplicationPasswordService
from .services.attribution_service import AttributionService
from .services.content_service import ContentService
from .services.flash_service import FlashService
from .services.integration_service import IntegrationService
from .services.user_service import UserService
from .utils.logger import get_logger


class ClawPressPlugin:
    """
    The assembled plugin.

    All services share a single session. When no session is given the plugin
    opens one from the global database manager and closes it in ``close``.
    """

    def __init__(self, session: Optional[Session] = None, config: Optional[AppConfig] = None):
        if session is None:
            session = get_db_manager().get_session()
            self._owns_session = True
        else:
            self._owns_session = False

        self.session = session
        self.config = config or get_config()
        self.logger = get_logger()

        shared = {"session": session, "config": self.config}
        self.users = UserService(**shared)
        self.content = ContentService(**shared)
        self.flash = FlashService(**shared)
        self.app_passwords = ApplicationPasswordService(**shared)
        self.integration = IntegrationService(self.app_passwords, self.users, **shared)
        self.attribution = AttributionService(self.app_passwords, self.content, **shared)
        self.admin = AdminService(
            self.integration, self.attribution, self.flash, self.users, **shared
        )

        self.attribution.register()

    @operation()
    def uninstall(self) -> None:
        """
        Remove every attribution tag and every pending flash entry.

        Credentials are left in place; users revoke them from their profile.
        """
        tags = self.content.delete_meta_by_key(self.config.integration.meta_key)
        flashes = self.flash.purge(self.config.integration.flash_prefix)
        self.attribution.unregister()
        self.logger.info(
            "ClawPress uninstalled", extra={"tags_removed": tags, "flash_removed": flashes}
        )

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.session.rollback()
        self.close()
