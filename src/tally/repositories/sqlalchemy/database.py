"""Database connection and session management."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from sqlalchemy import create_engine, event, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from tally.config.settings import get_settings
from tally.core.exceptions import StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()

# Module-level database state (can be reconfigured at runtime)
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _install_sqlite_hooks(engine: Engine) -> None:
    """
    Make SQLite enforce foreign keys and run DDL inside real transactions.

    pysqlite does not emit BEGIN before DDL statements, so a CREATE TABLE
    would otherwise commit on its own. The driver's transaction handling is
    switched off and SQLAlchemy emits BEGIN itself.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_db_engine(database_url: str, **kwargs: Any) -> Engine:
    """Create an engine with the SQLite connection setup applied."""
    connect_args = kwargs.pop("connect_args", {})
    connect_args.setdefault("check_same_thread", False)  # SQLite-specific
    engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=False,
        **kwargs,
    )
    _install_sqlite_hooks(engine)
    return engine


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_db_engine(settings.get_database_url())
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def get_session() -> Session:
    """Get a new database session."""
    SessionLocal = get_session_factory()
    return SessionLocal()


def init_db() -> int:
    """Bring the configured database to the latest schema version."""
    from tally.repositories.sqlalchemy.migrations import run_migrations

    return run_migrations(get_engine())


def init_db_with_path(db_path: Path) -> int:
    """Point the module at a database file and migrate it."""
    global _engine, _SessionLocal

    db_path.parent.mkdir(parents=True, exist_ok=True)
    _engine = create_db_engine(f"sqlite:///{db_path}")
    _SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=_engine,
    )
    return init_db()


def reset_database() -> None:
    """Reset database state (for reconfiguration)."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()

    _engine = None
    _SessionLocal = None


@contextmanager
def write_transaction(db: Session, action: str) -> Iterator[Session]:
    """
    Run the block as a single unit of work and commit it.

    Any failure rolls the session back. Database errors are re-raised as
    StorageError; application errors propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to %s: %s", action, exc)
        raise StorageError(f"Failed to {action}: {exc.__class__.__name__}") from exc
    except Exception:
        db.rollback()
        raise


@contextmanager
def read_transaction(db: Session) -> Iterator[Session]:
    """
    Run read-only queries and end the transaction they opened.

    SQLite holds a shared lock for as long as a transaction is open, which
    blocks writers in other processes. Rows must be converted before the
    block exits since the rollback expires them.
    """
    try:
        yield db
    finally:
        db.rollback()
