"""
Host credential store for application passwords.

Application passwords are per-user secondary secrets usable for API
authentication. The store generates the secret, keeps only its bcrypt hash,
and validates presented secrets. Names are unique per user, which makes
create-if-absent atomic at the database level.
"""

from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_base import utc_now
from ..db.db_credential_models import ApplicationPassword
from ..db.db_user_models import User
from ..exceptions import (
    AlreadyExistsError,
    CredentialNotFoundError,
    ErrorCode,
    HostStorageError,
    RepositoryError,
    UnauthenticatedError,
)
from ..schemas.credential_schemas import ApplicationPasswordCreate, ApplicationPasswordRead
from ..utils.crud_helpers import create_record, delete_record, get_record, list_records
from ..utils.password_utils import (
    generate_password,
    hash_password,
    normalize_password,
    verify_password,
)
from .base_service import SessionManagedService


class ApplicationPasswordService(SessionManagedService):
    """
    Credential store operations:
    - create a named credential and hand back its one-time plaintext
    - list, look up and delete a user's credentials
    - authenticate a request with login + secret
    """

    @operation()
    def create_new_application_password(
        self, user_id: int, password_data: ApplicationPasswordCreate
    ) -> Tuple[str, ApplicationPasswordRead]:
        """
        Create a new application password for a user.

        Args:
            user_id: Owner of the credential
            password_data: Name and app id

        Returns:
            Tuple of (plaintext secret, stored record)

        Raises:
            AlreadyExistsError: If the user already has a credential with this name
            HostStorageError: If the store fails
        """
        password = generate_password(self.config.security.password_length)

        try:
            record = create_record(
                self.session,
                ApplicationPassword,
                {
                    "user_id": user_id,
                    "name": password_data.name,
                    "app_id": password_data.app_id,
                    "password_hash": hash_password(password),
                },
            )
        except RepositoryError as e:
            if e.error_code == ErrorCode.DUPLICATE:
                raise AlreadyExistsError(
                    "Each application name should be unique.",
                    user_id=user_id,
                    name=password_data.name,
                    cause=e,
                )
            raise

        self.logger.info(
            "Application password created",
            extra={"user_id": user_id, "uuid": record.id, "app_id": password_data.app_id},
        )
        return password, ApplicationPasswordRead.model_validate(record)

    def get_user_application_passwords(self, user_id: int) -> List[ApplicationPasswordRead]:
        """All credentials held by a user, oldest first."""
        records = list_records(
            self.session, ApplicationPassword, {"user_id": user_id}, order_by="created_at"
        )
        return [ApplicationPasswordRead.model_validate(r) for r in records]

    def get_user_application_password(
        self, user_id: int, uuid: str
    ) -> Optional[ApplicationPasswordRead]:
        record = get_record(self.session, ApplicationPassword, {"user_id": user_id, "id": uuid})
        return ApplicationPasswordRead.model_validate(record) if record else None

    def get_user_application_password_by_name(
        self, user_id: int, name: str
    ) -> Optional[ApplicationPasswordRead]:
        """Indexed lookup of a user's credential by its name."""
        record = get_record(self.session, ApplicationPassword, {"user_id": user_id, "name": name})
        return ApplicationPasswordRead.model_validate(record) if record else None

    def get_application_password(self, uuid: str) -> Optional[ApplicationPasswordRead]:
        record = get_record(self.session, ApplicationPassword, {"id": uuid})
        return ApplicationPasswordRead.model_validate(record) if record else None

    def list_application_passwords_by_name(self, name: str) -> List[ApplicationPasswordRead]:
        """Every credential carrying the given name, across all users."""
        records = list_records(
            self.session, ApplicationPassword, {"name": name}, order_by="user_id"
        )
        return [ApplicationPasswordRead.model_validate(r) for r in records]

    @operation()
    def delete_application_password(self, user_id: int, uuid: str) -> None:
        """
        Delete one of a user's credentials.

        Raises:
            CredentialNotFoundError: If the user holds no credential with this uuid
            HostStorageError: If the store fails
        """
        record = get_record(self.session, ApplicationPassword, {"user_id": user_id, "id": uuid})
        if record is None:
            raise CredentialNotFoundError(
                "Could not find an application password with that id.",
                user_id=user_id,
                uuid=uuid,
            )

        delete_record(self.session, record)
        self.logger.info("Application password deleted", extra={"user_id": user_id, "uuid": uuid})

    @operation()
    def authenticate(
        self, user_login: str, password: str, ip_address: Optional[str] = None
    ) -> ApplicationPasswordRead:
        """
        Authenticate the current request with a login and application password.

        On success the user and the matching credential are bound to the
        request context and the credential's last-used data is recorded.

        Raises:
            UnauthenticatedError: If the login is unknown or no credential matches
        """
        user = get_record(self.session, User, {"user_login": user_login})
        if user is None:
            raise UnauthenticatedError("Unknown username.", user_login=user_login)

        candidate = normalize_password(password)
        records = list_records(self.session, ApplicationPassword, {"user_id": user.id})

        for record in records:
            if verify_password(candidate, record.password_hash):
                record.last_used_at = utc_now()
                record.last_ip = ip_address
                try:
                    self.session.commit()
                except SQLAlchemyError as e:
                    self.session.rollback()
                    raise HostStorageError("Failed to record credential use", cause=e)

                RequestContext.set_current_user(user.id)
                RequestContext.set_authenticated_app_password(record.id)

                self.logger.info(
                    "Request authenticated with application password",
                    extra={"user_id": user.id, "uuid": record.id},
                )
                return ApplicationPasswordRead.model_validate(record)

        raise UnauthenticatedError(
            "The provided password is an invalid application password.",
            user_login=user_login,
        )
