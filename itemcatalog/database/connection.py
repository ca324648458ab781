"""Database connection management for the relational catalog backend."""

import logging
from contextlib import contextmanager
from typing import Generator, Protocol

from sqlalchemy import event, create_engine, Engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from .models import Base
from .migrations import setup_migrations

logger = logging.getLogger(__name__)


class DatabaseSettings(Protocol):
    """Protocol for database settings."""

    database_url: str
    db_pool_size: int
    db_pool_overflow: int
    log_level: str


class DatabaseManager:
    """Manages database connections and sessions.

    One manager is created at process start and passed to the stores that
    need it; ``close()`` disposes the engine at shutdown.
    """

    def __init__(self, settings: DatabaseSettings):
        self.settings = settings
        self.engine: Engine | None = None
        self.session_factory: sessionmaker[Session] | None = None

    def initialize(self) -> None:
        """Initialize the database connection and create tables."""
        logger.info(f"Connecting to database: {self._get_log_safe_url()}")

        self.engine = create_engine(
            self.settings.database_url,
            pool_pre_ping=True,  # Verify connections before use
            echo=self.settings.log_level == "DEBUG",  # Log SQL queries in debug mode
            **self._pool_options(),
        )

        @event.listens_for(self.engine, "connect")
        def receive_connect(dbapi_connection, connection_record):
            logger.debug("Database connection established")

        self.session_factory = sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
        )

        # Migrations upgrade tables left by older schemas before create_all
        # fills in anything that does not exist yet
        logger.info("Running database migrations")
        migration_manager = setup_migrations(self.engine)
        migration_manager.apply_migrations()
        logger.info(
            f"Database schema at version: {migration_manager.get_current_version()}"
        )

        Base.metadata.create_all(self.engine)
        logger.info("Database tables created/verified")

    def _pool_options(self) -> dict:
        """Pool sizing arguments, skipped for in-memory SQLite which has no queue pool."""
        url = make_url(self.settings.database_url)
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            return {}
        return {
            "pool_size": self.settings.db_pool_size,
            "max_overflow": self.settings.db_pool_overflow,
        }

    def close(self) -> None:
        """Close the database connection."""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connections closed")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session that commits on success and rolls back on error."""
        if not self.session_factory:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        else:
            session.commit()
        finally:
            session.close()

    def health_check(self) -> bool:
        """Check if the database connection is healthy."""
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def _get_log_safe_url(self) -> str:
        """Get database URL with password masked for logging."""
        return make_url(self.settings.database_url).render_as_string(hide_password=True)
