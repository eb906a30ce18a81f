"""Service layer for business logic."""

from .admin_service import AdminService
from .application_password_service import ApplicationPasswordService
from .attribution_service import AttributionService
from .base_service import SessionManagedService
from .content_service import ContentService
from .flash_service import FlashService
from .integration_service import IntegrationService
from .user_service import UserService

__all__ = [
    "AdminService",
    "ApplicationPasswordService",
    "AttributionService",
    "SessionManagedService",
    "ContentService",
    "FlashService",
    "IntegrationService",
    "UserService",
]
