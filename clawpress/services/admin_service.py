"""
Admin surface: the settings view, the roster view and the two actions.

Create runs as a form post that redirects back to the settings page, passing
either an error message or the one-time connection info through the flash
store. Revoke runs as an AJAX call returning a structured success/failure body.
Both check a capability and a CSRF nonce before touching anything.
"""

from typing import Optional

from ..constants import NonceAction, PageState
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..exceptions import BaseError, UnauthenticatedError, permission_denied
from ..schemas.admin_schemas import (
    ActionResult,
    AjaxResponse,
    PageView,
    RosterEntry,
    RosterView,
)
from ..schemas.credential_schemas import ConnectionInfo
from ..utils.json_utils import pretty_dumps
from ..utils.nonce_utils import create_nonce, verify_nonce
from .attribution_service import AttributionService
from .base_service import SessionManagedService
from .flash_service import FlashService
from .integration_service import IntegrationService
from .user_service import UserService


class AdminService(SessionManagedService):
    """Presentation glue over the integration operations."""

    def __init__(
        self,
        integration: IntegrationService,
        attribution: AttributionService,
        flash: FlashService,
        users: UserService,
        **kwargs,
    ):
        kwargs.setdefault("session", integration.session)
        super().__init__(**kwargs)
        self.integration = integration
        self.attribution = attribution
        self.flash = flash
        self.users = users

    # ==================== FLASH KEYS ====================

    def _error_key(self, user_id: int) -> str:
        return f"{self.config.integration.flash_prefix}error_{user_id}"

    def _created_key(self, user_id: int) -> str:
        return f"{self.config.integration.flash_prefix}created_{user_id}"

    # ==================== GUARDS ====================

    def _require_capability(self, capability: str, action: str) -> int:
        user_id = RequestContext.get_current_user_id()
        if not self.users.user_can(user_id, capability):
            raise permission_denied(action, "clawpress", user_id=user_id, capability=capability)
        return user_id

    def _require_nonce(self, nonce: Optional[str], action: NonceAction, user_id: int) -> None:
        if not verify_nonce(nonce, action.value, user_id):
            raise UnauthenticatedError(action=action.value, user_id=user_id)

    # ==================== ACTIONS ====================

    @operation()
    def handle_create(self, nonce: Optional[str]) -> ActionResult:
        """
        Form-flow create.

        Raises:
            PermissionDeniedError: If the user cannot manage the connection
            UnauthenticatedError: If the nonce does not verify
        """
        user_id = self._require_capability(
            self.config.security.required_capability, NonceAction.CREATE.value
        )
        self._require_nonce(nonce, NonceAction.CREATE, user_id)

        page_url = self.config.integration.admin_page_url

        try:
            created = self.integration.create_password()
        except BaseError as e:
            self.flash.set(
                self._error_key(user_id), e.message, self.config.integration.error_ttl_seconds
            )
            return ActionResult(success=False, redirect_url=page_url)

        info = self.integration.get_connection_info(created.password)
        self.flash.set(
            self._created_key(user_id),
            info.model_dump(),
            self.config.integration.created_ttl_seconds,
        )
        return ActionResult(success=True, redirect_url=f"{page_url}&created=1")

    @operation()
    def handle_revoke_ajax(self, nonce: Optional[str]) -> AjaxResponse:
        """AJAX revoke. Every failure comes back as a structured response."""
        try:
            user_id = self._require_capability(
                self.config.security.required_capability, NonceAction.REVOKE.value
            )
            self._require_nonce(nonce, NonceAction.REVOKE, user_id)
            self.integration.revoke_password()
        except BaseError as e:
            return AjaxResponse(success=False, data=e.message)

        return AjaxResponse(success=True, data="OpenClaw connection revoked successfully.")

    # ==================== VIEWS ====================

    @operation()
    def render_page(self, created: bool = False) -> Optional[PageView]:
        """
        Build the settings view for the current user.

        Pending error and just-created flash entries are consumed here, so the
        plaintext secret is rendered at most once.

        Returns:
            The view, or None when the user may not see the page
        """
        user_id = RequestContext.get_current_user_id()
        if not self.users.user_can(user_id, self.config.security.required_capability):
            return None

        error_message = self.flash.pop(self._error_key(user_id))

        created_info = None
        if created:
            created_info = self.flash.pop(self._created_key(user_id))

        view = PageView(
            state=PageState.DISCONNECTED,
            error_message=error_message,
            create_nonce=create_nonce(NonceAction.CREATE.value, user_id),
            revoke_nonce=create_nonce(NonceAction.REVOKE.value, user_id),
        )

        if created_info:
            info = ConnectionInfo.model_validate(created_info)
            view.state = PageState.JUST_CREATED
            view.connection_info = info
            view.connection_json = pretty_dumps(info.model_dump())
            return view

        existing = self.integration.get_existing_password()
        if existing is not None:
            view.state = PageState.CONNECTED
            view.credential = existing
            view.stats = self.attribution.get_stats(user_id)

        return view

    @operation()
    def render_roster(self) -> RosterView:
        """
        Site-wide list of users holding an active integration credential.

        Raises:
            PermissionDeniedError: If the user cannot list users
        """
        self._require_capability(self.config.security.roster_capability, "view_roster")

        credentials = self.integration.app_passwords.list_application_passwords_by_name(
            self.integration.app_password_name
        )

        entries = []
        for credential in credentials:
            user = self.users.get_user(credential.user_id)
            if user is None:
                continue
            entries.append(
                RosterEntry(
                    user_id=user.id,
                    user_login=user.user_login,
                    display_name=user.display_name or user.user_login,
                    credential=credential,
                    stats=self.attribution.get_stats(user.id),
                )
            )

        return RosterView(entries=entries)
