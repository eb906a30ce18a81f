"""
View models handed to the presentation layer.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..constants import PageState
from .content_schemas import UsageStats
from .credential_schemas import ApplicationPasswordRead, ConnectionInfo


class PageView(BaseModel):
    """Everything needed to render the per-user settings view."""

    state: PageState
    error_message: Optional[str] = None
    connection_info: Optional[ConnectionInfo] = None
    connection_json: Optional[str] = None
    credential: Optional[ApplicationPasswordRead] = None
    stats: Optional[UsageStats] = None
    create_nonce: Optional[str] = None
    revoke_nonce: Optional[str] = None

    @property
    def last_used_label(self) -> Optional[str]:
        """Last use of the connected credential for display, "Never" if unused."""
        if self.credential is None:
            return None
        if self.credential.last_used is None:
            return "Never"
        return self.credential.last_used.strftime("%Y-%m-%d %H:%M:%S")


class ActionResult(BaseModel):
    """Outcome of the form-flow create action: where to send the browser."""

    success: bool
    redirect_url: str


class AjaxResponse(BaseModel):
    """Structured success/failure body for the AJAX revoke action."""

    success: bool
    data: Any = None


class RosterEntry(BaseModel):
    """One user holding an active integration credential."""

    user_id: int
    user_login: str
    display_name: str
    credential: ApplicationPasswordRead
    stats: UsageStats


class RosterView(BaseModel):
    """Site-wide list of connected users."""

    entries: List[RosterEntry] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.entries)
