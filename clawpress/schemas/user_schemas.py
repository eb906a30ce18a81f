"""
Pydantic schemas for site users.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import UserRole


class UserCreate(BaseModel):
    """Data for registering a user."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    user_login: str = Field(..., min_length=1, max_length=60)
    user_email: str = ""
    display_name: str = ""
    role: UserRole = UserRole.SUBSCRIBER

    @field_validator("user_login")
    @classmethod
    def validate_user_login(cls, v):
        """Logins cannot contain whitespace."""
        if any(c.isspace() for c in v):
            raise ValueError("user_login cannot contain whitespace")
        return v


class UserRead(BaseModel):
    """User as exposed by the directory."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_login: str
    user_email: str
    display_name: str
    role: str
