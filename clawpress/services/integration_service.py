"""
Lifecycle of the integration credential for the current user.

Thin delegation over the host credential store: create, revoke and look up
the one application password carrying the reserved name.
"""

from typing import Optional

from ..context.operation_context import operation
from ..context.request_context import RequestContext, user_required
from ..exceptions import AlreadyExistsError, CredentialNotFoundError
from ..schemas.credential_schemas import (
    ApplicationPasswordCreate,
    ApplicationPasswordRead,
    ConnectionInfo,
    CreatedApplicationPassword,
)
from ..utils.password_utils import chunk_password
from .application_password_service import ApplicationPasswordService
from .base_service import SessionManagedService
from .user_service import UserService


class IntegrationService(SessionManagedService):
    """Create, revoke and look up the integration credential."""

    def __init__(
        self,
        app_passwords: ApplicationPasswordService,
        users: UserService,
        **kwargs,
    ):
        kwargs.setdefault("session", app_passwords.session)
        super().__init__(**kwargs)
        self.app_passwords = app_passwords
        self.users = users

    @property
    def app_password_name(self) -> str:
        return self.config.integration.app_password_name

    @operation()
    @user_required
    def create_password(self) -> CreatedApplicationPassword:
        """
        Create the integration credential for the current user.

        Returns:
            The chunked one-time secret with the record's uuid and creation time

        Raises:
            AlreadyExistsError: If the user already holds one
            HostStorageError: If the credential store fails
        """
        user_id = RequestContext.get_current_user_id()

        if self.get_existing_password() is not None:
            raise AlreadyExistsError(
                "An OpenClaw Application Password already exists. "
                "Revoke it first before creating a new one.",
                user_id=user_id,
            )

        try:
            password, record = self.app_passwords.create_new_application_password(
                user_id,
                ApplicationPasswordCreate(
                    name=self.app_password_name, app_id=self.config.integration.app_id
                ),
            )
        except AlreadyExistsError as e:
            # Lost a race with a concurrent create for the same user
            raise AlreadyExistsError(
                "An OpenClaw Application Password already exists. "
                "Revoke it first before creating a new one.",
                user_id=user_id,
                cause=e,
            )

        return CreatedApplicationPassword(
            password=chunk_password(password),
            uuid=record.uuid,
            created=record.created,
        )

    @operation()
    @user_required
    def revoke_password(self) -> None:
        """
        Revoke the current user's integration credential.

        Raises:
            CredentialNotFoundError: If the user holds none
            HostStorageError: If the credential store fails
        """
        user_id = RequestContext.get_current_user_id()
        existing = self.get_existing_password()

        if existing is None:
            raise CredentialNotFoundError(
                "No OpenClaw Application Password found to revoke.",
                user_id=user_id,
            )

        self.app_passwords.delete_application_password(user_id, existing.uuid)

    def get_existing_password(
        self, user_id: Optional[int] = None
    ) -> Optional[ApplicationPasswordRead]:
        """The integration credential of a user (the current one by default), if any."""
        user_id = user_id or RequestContext.get_current_user_id()
        if not user_id:
            return None
        return self.app_passwords.get_user_application_password_by_name(
            user_id, self.app_password_name
        )

    @user_required
    def get_connection_info(self, password: str) -> ConnectionInfo:
        """Bundle the site URL, login and secret the agent needs to connect."""
        user = self.users.require_user(RequestContext.get_current_user_id())
        return ConnectionInfo(
            site_url=self.config.integration.site_url,
            username=user.user_login,
            password=password,
        )
