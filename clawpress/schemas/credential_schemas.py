"""
Pydantic schemas for application passwords and the integration credential.

Read schemas never carry the password hash; the plaintext secret only ever
appears in CreatedApplicationPassword and ConnectionInfo, which are handed
back once and never stored by ClawPress.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..db.db_base import as_utc


class ApplicationPasswordCreate(BaseModel):
    """Arguments for creating a new application password."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str = Field(..., min_length=1, max_length=200, description="Human-readable name")
    app_id: Optional[str] = Field(None, max_length=100, description="Issuing application id")


class ApplicationPasswordRead(BaseModel):
    """Credential record as exposed by the host store."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    uuid: str = Field(..., validation_alias="id")
    user_id: int
    name: str
    app_id: Optional[str] = None
    created: datetime = Field(..., validation_alias="created_at")
    last_used: Optional[datetime] = Field(None, validation_alias="last_used_at")
    last_ip: Optional[str] = None

    @field_validator("created", "last_used")
    @classmethod
    def ensure_utc(cls, v):
        return as_utc(v)


class CreatedApplicationPassword(BaseModel):
    """Result of a successful create: one-time secret plus identifying metadata."""

    password: str = Field(..., min_length=1, description="Chunked plaintext secret")
    uuid: str
    created: datetime


class ConnectionInfo(BaseModel):
    """Everything the agent needs to connect, shown once after creation."""

    site_url: str
    username: str
    password: str

    @field_validator("site_url")
    @classmethod
    def validate_site_url(cls, v):
        """Site URL always ends with a slash."""
        return v if v.endswith("/") else f"{v}/"
