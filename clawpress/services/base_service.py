"""
Base service implementation with session ownership shared by all services.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..config import AppConfig, get_config
from ..db.db_config import get_db_manager
from ..utils.logger import ContextAwareLogger, get_logger


class SessionManagedService:
    """
    Service that owns or borrows a database session.

    When no session is given the service opens one from the global database
    manager and is responsible for closing it. Services wired together for a
    single request share one borrowed session.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        config: Optional[AppConfig] = None,
        logger: Optional[ContextAwareLogger] = None,
    ):
        """
        Initialize service with its own or a borrowed session.

        Args:
            session: Optional existing session (for request wiring or testing)
            config: Optional configuration, defaults to the global one
            logger: Optional logger instance
        """
        if session is not None:
            self.session = session
            self._owns_session = False
        else:
            self.session = get_db_manager().get_session()
            self._owns_session = True

        self.config = config or get_config()
        self.logger = logger or get_logger()

    def close(self):
        """Close the session if we own it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self):
        """Support for 'with' statement."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Auto-close session on exit."""
        if exc_type:
            self.session.rollback()
        self.close()
