"""
Engine and session wiring for the host stores.

The database manager is built from ``AppConfig.database``: the URL picks the
backend, SQLite gets foreign keys switched on per connection and a single
shared connection when it lives in memory, everything else gets the
configured pool.
"""

from typing import Any, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import DatabaseConfig, get_config
from ..exceptions import ErrorCode, ServiceError
from ..utils.logger import get_logger

# Base class for all SQLAlchemy models
Base: Any = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Owns the engine and the thread-scoped session registry."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.url = make_url(config.connection_string)
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine)
        self.scoped_session = scoped_session(self.session_factory)

    @property
    def backend(self) -> str:
        return self.url.get_backend_name()

    def _create_engine(self):
        if self.backend != "sqlite":
            return create_engine(
                self.url,
                echo=self.config.echo,
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
                pool_timeout=self.config.pool_timeout,
            )

        engine_kwargs: dict = {
            "echo": self.config.echo,
            "connect_args": {"check_same_thread": False},
        }
        if self.url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
        engine = create_engine(self.url, **engine_kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        return self.scoped_session()

    def close(self) -> None:
        self.scoped_session.remove()
        self.engine.dispose()


def import_all_models():
    """Import all models to ensure they're registered with SQLAlchemy metadata."""
    from sqlalchemy.orm import configure_mappers

    from .db_user_models import User  # noqa
    from .db_credential_models import ApplicationPassword  # noqa
    from .db_content_models import ContentItem, ContentMeta  # noqa
    from .db_flash_models import FlashEntry  # noqa

    configure_mappers()


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """
    Get the global database manager instance.

    Raises:
        ServiceError: If no database manager has been initialized
    """
    if _db_manager is None:
        raise ServiceError(
            "Database manager not initialized. Call initialize_db() first.",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            operation="get_db_manager",
        )
    return _db_manager


def set_db_manager(manager: Optional[DatabaseManager]) -> None:
    """Swap the global manager; tests use this to restore the previous one."""
    global _db_manager
    _db_manager = manager


def initialize_db(config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """
    Build the global database manager and create any missing tables.

    Args:
        config: Connection settings. Defaults to ``get_config().database``.
    """
    global _db_manager

    if config is None:
        config = get_config().database

    manager = DatabaseManager(config)
    get_logger().info(
        "Initializing database",
        extra={"backend": manager.backend, "url": manager.url.render_as_string(hide_password=True)},
    )

    import_all_models()
    manager.create_tables()

    _db_manager = manager
    return manager
