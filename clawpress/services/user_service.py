"""
User directory: the host's users and their capabilities.
"""

from typing import List, Optional

from ..constants import ROLE_CAPABILITIES, Capability, UserRole
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_user_models import User
from ..exceptions import AlreadyExistsError, ErrorCode, RepositoryError, not_found
from ..schemas.user_schemas import UserCreate, UserRead
from ..utils.crud_helpers import create_record, get_record, list_records
from .base_service import SessionManagedService


class UserService(SessionManagedService):
    """Read and register users, answer capability checks."""

    @operation()
    def create_user(self, user_data: UserCreate) -> UserRead:
        """
        Register a user.

        Raises:
            AlreadyExistsError: If the login is taken
        """
        try:
            user = create_record(self.session, User, user_data.model_dump())
        except RepositoryError as e:
            if e.error_code == ErrorCode.DUPLICATE:
                raise AlreadyExistsError(
                    f"User login already exists: {user_data.user_login}",
                    user_login=user_data.user_login,
                    cause=e,
                )
            raise
        return UserRead.model_validate(user)

    def get_user(self, user_id: int) -> Optional[UserRead]:
        user = get_record(self.session, User, {"id": user_id})
        return UserRead.model_validate(user) if user else None

    def get_user_by_login(self, user_login: str) -> Optional[UserRead]:
        user = get_record(self.session, User, {"user_login": user_login})
        return UserRead.model_validate(user) if user else None

    def require_user(self, user_id: int) -> UserRead:
        """
        Get a user that must exist.

        Raises:
            RepositoryError: NOT_FOUND if there is no such user
        """
        user = self.get_user(user_id)
        if user is None:
            raise not_found("User", user_id=user_id)
        return user

    def list_users(self) -> List[UserRead]:
        return [UserRead.model_validate(u) for u in list_records(self.session, User, order_by="id")]

    def user_can(self, user_id: Optional[int], capability: str) -> bool:
        """Whether the user's role grants the capability. Unknown users can do nothing."""
        if not user_id:
            return False
        user = self.get_user(user_id)
        if user is None:
            return False
        try:
            role = UserRole(user.role)
            granted = ROLE_CAPABILITIES[role]
            return Capability(capability) in granted
        except ValueError:
            return False

    def current_user_can(self, capability: str) -> bool:
        return self.user_can(RequestContext.get_current_user_id(), capability)

    def get_current_user(self) -> Optional[UserRead]:
        user_id = RequestContext.get_current_user_id()
        return self.get_user(user_id) if user_id else None
