"""
Versioned schema migrations.

Steps are applied in ascending version order, each exactly once. A step and
the bookkeeping row recording it are committed together, so a store is never
marked at a version whose step did not complete.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Connection, Engine, text
from sqlalchemy.exc import SQLAlchemyError

from tally.core.dates import utc_now
from tally.core.exceptions import MigrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """One additive schema step."""

    version: int
    description: str
    statements: tuple[str, ...]


_VERSION_TABLE_DDL = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version INTEGER PRIMARY KEY NOT NULL,
        description TEXT NOT NULL,
        applied_at TEXT NOT NULL
    )
"""

MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        description="create_accounts_table",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS accounts (
                id TEXT PRIMARY KEY NOT NULL,
                name TEXT NOT NULL CHECK(length(trim(name)) > 0),
                account_type TEXT NOT NULL CHECK(account_type IN (
                    'property', 'pension', 'investment', 'savings',
                    'mortgage', 'loan', 'credit_card'
                )),
                category TEXT NOT NULL CHECK(category IN ('asset', 'liability')),
                institution TEXT,
                description TEXT,
                currency TEXT NOT NULL DEFAULT 'GBP',
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at TEXT NOT NULL DEFAULT (datetime('now')),
                CHECK(
                    (category = 'asset'
                        AND account_type IN ('property', 'pension', 'investment', 'savings'))
                    OR (category = 'liability'
                        AND account_type IN ('mortgage', 'loan', 'credit_card'))
                )
            )
            """,
        ),
    ),
    Migration(
        version=2,
        description="create_balance_entries_table",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS balance_entries (
                id TEXT PRIMARY KEY NOT NULL,
                account_id TEXT NOT NULL REFERENCES accounts(id) ON DELETE CASCADE,
                date TEXT NOT NULL,
                balance REAL NOT NULL,
                notes TEXT,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                UNIQUE(account_id, date)
            )
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_balance_entries_account_date
            ON balance_entries(account_id, date)
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_balance_entries_date
            ON balance_entries(date)
            """,
        ),
    ),
    Migration(
        version=3,
        description="create_milestones_table",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS milestones (
                id TEXT PRIMARY KEY NOT NULL,
                date TEXT NOT NULL,
                label TEXT NOT NULL CHECK(length(trim(label)) > 0),
                account_id TEXT REFERENCES accounts(id) ON DELETE SET NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """,
            """
            CREATE INDEX IF NOT EXISTS idx_milestones_date
            ON milestones(date)
            """,
        ),
    ),
)


def latest_version(migrations: Sequence[Migration] = MIGRATIONS) -> int:
    return migrations[-1].version if migrations else 0


def _check_sequence(migrations: Sequence[Migration]) -> None:
    for expected, migration in enumerate(migrations, start=1):
        if migration.version != expected:
            raise MigrationError(
                f"Migration list is out of order: expected version {expected}, "
                f"found {migration.version} ({migration.description})"
            )


def _current_version(conn: Connection) -> int:
    conn.exec_driver_sql(_VERSION_TABLE_DDL)
    version = conn.execute(text("SELECT MAX(version) FROM schema_migrations")).scalar()
    return int(version or 0)


def get_schema_version(engine: Engine) -> int:
    """Return the version the store is at (0 when uninitialized)."""
    try:
        with engine.begin() as conn:
            return _current_version(conn)
    except SQLAlchemyError as exc:
        raise MigrationError(f"Could not read schema version: {exc}") from exc


def run_migrations(engine: Engine, migrations: Sequence[Migration] = MIGRATIONS) -> int:
    """
    Apply every pending migration and return the resulting version.

    Raises MigrationError if the list is malformed, if the store is newer
    than the code, or if a step fails. A failed step is rolled back together
    with its version record and nothing after it is attempted.
    """
    _check_sequence(migrations)
    current = get_schema_version(engine)
    target = latest_version(migrations)

    if current > target:
        raise MigrationError(
            f"Database schema version {current} is newer than this application ({target})"
        )
    if current == target:
        logger.debug("Schema is current at version %d", current)
        return current

    for migration in migrations:
        if migration.version <= current:
            continue
        try:
            with engine.begin() as conn:
                for statement in migration.statements:
                    conn.exec_driver_sql(statement)
                conn.execute(
                    text(
                        "INSERT INTO schema_migrations (version, description, applied_at) "
                        "VALUES (:version, :description, :applied_at)"
                    ),
                    {
                        "version": migration.version,
                        "description": migration.description,
                        "applied_at": utc_now().isoformat(sep=" "),
                    },
                )
        except SQLAlchemyError as exc:
            logger.critical(
                "Migration %d (%s) failed: %s",
                migration.version,
                migration.description,
                exc,
            )
            raise MigrationError(
                f"Migration {migration.version} ({migration.description}) failed: {exc}"
            ) from exc
        current = migration.version
        logger.info("Applied migration %d: %s", migration.version, migration.description)

    return current
