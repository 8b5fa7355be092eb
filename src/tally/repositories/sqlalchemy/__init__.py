"""SQLAlchemy repository implementations."""

from tally.repositories.sqlalchemy.database import (
    create_db_engine,
    get_engine,
    get_session_factory,
    get_session,
    init_db,
    init_db_with_path,
    reset_database,
    read_transaction,
    write_transaction,
    Base,
)
from tally.repositories.sqlalchemy.migrations import (
    Migration,
    MIGRATIONS,
    get_schema_version,
    latest_version,
    run_migrations,
)
from tally.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from tally.repositories.sqlalchemy.balance_repo import SqlAlchemyBalanceRepository
from tally.repositories.sqlalchemy.milestone_repo import SqlAlchemyMilestoneRepository

__all__ = [
    "create_db_engine",
    "get_engine",
    "get_session_factory",
    "get_session",
    "init_db",
    "init_db_with_path",
    "reset_database",
    "read_transaction",
    "write_transaction",
    "Base",
    "Migration",
    "MIGRATIONS",
    "get_schema_version",
    "latest_version",
    "run_migrations",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyBalanceRepository",
    "SqlAlchemyMilestoneRepository",
]
