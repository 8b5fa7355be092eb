"""
Integration tests for AppContext startup against a real database file.
"""

import pytest
from sqlalchemy import text

from tally import app_context as app_context_module
from tally.app_context import AppContext
from tally.config.settings import Settings, reset_settings
from tally.core.exceptions import MigrationError
from tally.repositories.sqlalchemy import create_db_engine, reset_database
from tally.services import AccountCreate


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, data_dir=tmp_path)


@pytest.fixture(autouse=True)
def clean_globals():
    yield
    reset_database()
    reset_settings()


class TestStartup:
    """Initializing the application context."""

    def test_initialize_migrates_and_reports_location(self, settings, tmp_path):
        context = AppContext(settings)

        context.initialize()

        assert context.is_initialized
        assert context.schema_version == 3
        assert context.database_path == tmp_path / "tally.db"
        assert context.database_path.exists()
        context.close()

    def test_data_dir_override(self, settings, tmp_path):
        other = tmp_path / "elsewhere"
        context = AppContext(settings)

        context.initialize(data_dir=other)

        assert context.database_path == other / "tally.db"
        context.close()

    def test_database_url_decides_storage_location(self, tmp_path):
        """
        GIVEN settings with both a data directory and a database URL
        WHEN the context is initialized
        THEN the database is created at the URL's file and reported as such
        """
        custom = tmp_path / "elsewhere" / "custom.db"
        settings = Settings(
            _env_file=None,
            data_dir=tmp_path / "data",
            database_url=f"sqlite:///{custom}",
        )
        context = AppContext(settings)

        context.initialize()
        context.accounts.create(AccountCreate(name="ISA", account_type="savings"))

        assert context.database_path == custom
        assert custom.exists()
        assert not (tmp_path / "data" / "tally.db").exists()
        context.close()

    def test_services_require_initialize(self, settings):
        context = AppContext(settings)

        with pytest.raises(RuntimeError):
            context.accounts.list_accounts()
        with pytest.raises(RuntimeError):
            context.database_path

    def test_data_survives_restart(self, settings):
        """
        GIVEN an account and snapshot written through one context
        WHEN a new context is started on the same data directory
        THEN the data is still there and no migration is re-applied
        """
        first = AppContext(settings)
        first.initialize()
        account = first.accounts.create(AccountCreate(name="ISA", account_type="savings"))
        first.ledger.record_snapshot(account.account_id, "2024-01-01", 2500)
        first.close()

        second = AppContext(settings)
        second.initialize()

        assert second.schema_version == 3
        assert [a.name for a in second.accounts.list_accounts()] == ["ISA"]
        assert second.net_worth.net_worth_as_of("2024-01-31").net_worth == 2500
        second.close()

    def test_migration_failure_aborts_startup(self, settings, monkeypatch):
        """
        GIVEN the store cannot be migrated
        WHEN the context is initialized
        THEN MigrationError propagates and the context stays uninitialized
        """

        def failing_init(db_path):
            raise MigrationError("Migration 2 (create_balance_entries_table) failed: disk I/O error")

        monkeypatch.setattr(app_context_module, "init_db_with_path", failing_init)
        context = AppContext(settings)

        with pytest.raises(MigrationError):
            context.initialize()

        assert not context.is_initialized
        with pytest.raises(RuntimeError):
            context.ledger

    def test_reads_do_not_block_other_writers(self, settings):
        """
        GIVEN a context that has just answered a net worth query
        WHEN another connection writes to the same database file
        THEN the write is not blocked and the context sees the new data
        """
        context = AppContext(settings)
        context.initialize()
        account = context.accounts.create(AccountCreate(name="ISA", account_type="savings"))
        context.ledger.record_snapshot(account.account_id, "2024-01-01", 2500)
        assert context.net_worth.net_worth_as_of("2024-01-31").net_worth == 2500

        other = create_db_engine(
            f"sqlite:///{context.database_path}", connect_args={"timeout": 0.1}
        )
        try:
            with other.begin() as conn:
                conn.execute(
                    text("UPDATE accounts SET name = 'Stocks ISA' WHERE id = :id"),
                    {"id": account.account_id},
                )
        finally:
            other.dispose()

        assert context.accounts.get(account.account_id).name == "Stocks ISA"
        context.close()
