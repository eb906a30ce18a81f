"""
Test fixtures for ClawPress.

This module provides shared test fixtures including database setup,
request context cleanup and common test users.
"""

import pytest
from sqlalchemy.orm import Session

from clawpress.config import DatabaseConfig, reset_config
from clawpress.context.request_context import RequestContext
from clawpress.db import DatabaseManager, import_all_models
from clawpress.db.db_config import Base, initialize_db, set_db_manager
from clawpress.exceptions import clear_correlation_id
from clawpress.utils.logger import reset_logging
from tests.fixtures.factories import UserFactory


@pytest.fixture(scope="session")
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(connection_string="sqlite:///:memory:", echo=False)


@pytest.fixture(scope="session")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Create and initialize database manager with all models."""
    import_all_models()

    manager = initialize_db(db_config)

    yield manager

    manager.close()
    set_db_manager(None)


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Create a database session for each test.

    Tables are created before and dropped after every test so each test
    starts from an empty site.
    """
    session = db_manager.get_session()

    Base.metadata.create_all(db_manager.engine)

    yield session

    session.rollback()
    db_manager.scoped_session.remove()

    Base.metadata.drop_all(db_manager.engine)


@pytest.fixture(autouse=True)
def clean_request_state():
    """Every test starts and ends outside of a request with default config."""
    RequestContext.end()
    clear_correlation_id()
    reset_config()
    reset_logging()
    yield
    RequestContext.end()
    clear_correlation_id()
    reset_config()
    reset_logging()


@pytest.fixture
def admin_user(db_session):
    """Administrator able to manage the connection and view the roster."""
    return UserFactory(user_login="admin", role="administrator", display_name="Site Admin")


@pytest.fixture
def author_user(db_session):
    """Author without the manage capability."""
    return UserFactory(user_login="author", role="author", display_name="Ann Author")
