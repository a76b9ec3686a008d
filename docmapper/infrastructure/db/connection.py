# ==============================================
# docmapper/infrastructure/db/connection.py
# ==============================================
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from docmapper.core.config import DatabaseSettings, get_settings
from docmapper.core.exceptions import DatabaseError
from docmapper.utils.logger import get_logger

# Registers every table with SQLModel.metadata
from docmapper import models  # noqa: F401

logger = get_logger(__name__)


class DatabaseManager:
    """
    Database connection manager.
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self.settings = settings or get_settings().database
        self._engine: Optional[Engine] = None

    def _get_database_config(self) -> dict:
        """Get engine configuration based on URL."""
        config = {
            "echo": self.settings.echo,
            "pool_pre_ping": True,
        }

        if self.settings.url.startswith("sqlite"):
            config["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.settings.url or self.settings.url in ("sqlite://", "sqlite:///"):
                # One shared connection, otherwise every session sees an empty database
                config["poolclass"] = StaticPool

        return config

    def _create_engine(self) -> Engine:
        try:
            engine = create_engine(self.settings.url, **self._get_database_config())
            logger.info(f"Database engine created: {engine.url.render_as_string(hide_password=True)}")
            return engine

        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Failed to create database engine: {e}")
            raise DatabaseError(f"Database engine creation failed: {e}", operation="create_engine")

    def get_engine(self) -> Engine:
        """Get or create database engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def session_factory(self) -> Session:
        """New session; objects stay readable after commit."""
        return Session(self.get_engine(), expire_on_commit=False)

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Get database session with automatic commit, rollback and cleanup."""
        session = self.session_factory()

        try:
            yield session
            session.commit()

        except SQLAlchemyError as e:
            logger.error(f"Database session error: {e}")
            session.rollback()
            raise DatabaseError(f"Database operation failed: {e}")

        except Exception:
            session.rollback()
            raise

        finally:
            session.close()

    def create_tables(self) -> None:
        """Create all database tables."""
        logger.info("Creating database tables...")
        try:
            SQLModel.metadata.create_all(bind=self.get_engine())
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")
            raise DatabaseError(f"Database table creation failed: {e}", operation="create_tables")
        logger.info("Database tables created successfully")

    def drop_tables(self) -> None:
        """Drop all database tables."""
        logger.warning("Dropping all database tables...")
        try:
            SQLModel.metadata.drop_all(bind=self.get_engine())
        except SQLAlchemyError as e:
            logger.error(f"Failed to drop database tables: {e}")
            raise DatabaseError(f"Database table drop failed: {e}", operation="drop_tables")

    def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            with self.get_engine().connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
