from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from lifting.config.settings import settings
from lifting.db.models import Base

# Lazy initialization to avoid import-time database connections
_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:
    """Enable foreign key constraints in SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _get_engine() -> Engine:
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")

        is_sqlite = "sqlite" in settings.database_url.lower()
        connect_args = {"check_same_thread": False} if is_sqlite else {"connect_timeout": 10}

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,
            pool_pre_ping=True,
        )
        if is_sqlite:
            event.listen(_engine, "connect", _set_sqlite_pragma)
        logger.info("Database engine initialized")
    return _engine


def get_engine() -> Engine:
    """Get or create the database engine (public API)."""
    return _get_engine()


def _get_session_local() -> sessionmaker[Session]:
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def init_db() -> None:
    """Create all tables on the configured database."""
    Base.metadata.create_all(bind=_get_engine())
    logger.info("Database schema created", tables=sorted(Base.metadata.tables))


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager.

    Commits when the block exits normally. Any exception rolls the session
    back and is re-raised unchanged, so domain errors (not found, invalid
    transition, conflict) reach the caller with their original type.
    """
    logger.debug("Creating new database session")
    session = _get_session_local()()
    try:
        yield session
        # Service calls flush as they go, so dirty/new can be empty with work pending
        session.commit()
        logger.debug("Database session committed successfully")
    except Exception as e:
        logger.debug(f"Rolling back database session: {type(e).__name__}: {e}")
        session.rollback()
        raise
    finally:
        session.close()
        logger.debug("Database session closed")
