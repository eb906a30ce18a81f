"""
Unit test conftest.py - Component-specific fixtures.

Services are wired over the per-test session exactly as the plugin wires
them, so tests exercise real stores instead of mocks.
"""

import pytest

from clawpress.services.admin_service import AdminService
from clawpress.services.application_password_service import ApplicationPasswordService
from clawpress.services.attribution_service import AttributionService
from clawpress.services.content_service import ContentService
from clawpress.services.flash_service import FlashService
from clawpress.services.integration_service import IntegrationService
from clawpress.services.user_service import UserService

# ==================== SERVICE FIXTURES ====================


@pytest.fixture(scope="function")
def user_service(db_session):
    """User directory with test session."""
    return UserService(session=db_session)


@pytest.fixture(scope="function")
def app_password_service(db_session):
    """Credential store with test session."""
    return ApplicationPasswordService(session=db_session)


@pytest.fixture(scope="function")
def content_service(db_session):
    """Content store with test session."""
    return ContentService(session=db_session)


@pytest.fixture(scope="function")
def flash_service(db_session):
    """Flash store with test session."""
    return FlashService(session=db_session)


@pytest.fixture(scope="function")
def integration_service(app_password_service, user_service):
    """Integration lifecycle over the shared session."""
    return IntegrationService(app_password_service, user_service)


@pytest.fixture(scope="function")
def attribution_service(app_password_service, content_service):
    """Tracker registered on the content store."""
    service = AttributionService(app_password_service, content_service)
    service.register()
    return service


@pytest.fixture(scope="function")
def admin_service(integration_service, attribution_service, flash_service, user_service):
    """Admin surface over the shared session."""
    return AdminService(integration_service, attribution_service, flash_service, user_service)
