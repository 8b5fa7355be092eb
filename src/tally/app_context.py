"""Application context for in-process service management.

Provides a centralized way to access all services. The desktop shell calls
into this layer directly; there is no HTTP surface.
"""

import logging
from pathlib import Path
from typing import Optional

from tally.config.settings import Settings, set_settings, get_settings
from tally.repositories.sqlalchemy.database import (
    init_db_with_path,
    reset_database,
    get_session,
)
from tally.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyBalanceRepository,
    SqlAlchemyMilestoneRepository,
)
from tally.services import (
    AccountService,
    LedgerService,
    MilestoneService,
    NetWorthService,
)

logger = logging.getLogger(__name__)


class AppContext:
    """
    Application context providing in-process access to all services.

    ``initialize`` must complete before any service is used: it resolves the
    storage location and migrates the database. A migration failure is
    raised from ``initialize`` and leaves the context uninitialized.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self._session = None
        self._initialized = False
        self._database_path: Optional[Path] = None
        self._schema_version = 0

        # Service instances (lazy initialized)
        self._account_service: Optional[AccountService] = None
        self._ledger_service: Optional[LedgerService] = None
        self._milestone_service: Optional[MilestoneService] = None
        self._net_worth_service: Optional[NetWorthService] = None

    def initialize(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize or reinitialize the application.

        Args:
            data_dir: Data directory override. Uses the configured one if not provided;
                when given it also replaces any configured database_url.
        """
        settings = self._settings or get_settings()
        if data_dir:
            settings = settings.model_copy(update={"data_dir": data_dir, "database_url": None})
        self._settings = settings
        set_settings(settings)

        self.close()
        reset_database()
        self._initialized = False
        self._reset_services()

        db_path = settings.get_database_path()
        self._schema_version = init_db_with_path(db_path)
        self._database_path = db_path
        logger.info("Database ready at %s (schema v%d)", db_path, self._schema_version)

        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        """Check if context is initialized."""
        return self._initialized

    @property
    def database_path(self) -> Path:
        """The active storage location."""
        self._require_initialized()
        return self._database_path

    @property
    def schema_version(self) -> int:
        return self._schema_version

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("AppContext.initialize() must be called first")

    def _get_session(self):
        """Get or create database session."""
        self._require_initialized()
        if self._session is None:
            self._session = get_session()
        return self._session

    def _reset_services(self) -> None:
        self._account_service = None
        self._ledger_service = None
        self._milestone_service = None
        self._net_worth_service = None

    # Repository accessors
    def _get_account_repo(self) -> SqlAlchemyAccountRepository:
        return SqlAlchemyAccountRepository(self._get_session())

    def _get_balance_repo(self) -> SqlAlchemyBalanceRepository:
        return SqlAlchemyBalanceRepository(self._get_session())

    def _get_milestone_repo(self) -> SqlAlchemyMilestoneRepository:
        return SqlAlchemyMilestoneRepository(self._get_session())

    # Service accessors
    @property
    def accounts(self) -> AccountService:
        """Get the AccountService instance."""
        if self._account_service is None:
            self._account_service = AccountService(
                account_repo=self._get_account_repo(),
                base_currency=self._settings.base_currency,
            )
        return self._account_service

    @property
    def ledger(self) -> LedgerService:
        """Get the LedgerService instance."""
        if self._ledger_service is None:
            self._ledger_service = LedgerService(
                account_repo=self._get_account_repo(),
                balance_repo=self._get_balance_repo(),
            )
        return self._ledger_service

    @property
    def milestones(self) -> MilestoneService:
        """Get the MilestoneService instance."""
        if self._milestone_service is None:
            self._milestone_service = MilestoneService(
                account_repo=self._get_account_repo(),
                milestone_repo=self._get_milestone_repo(),
            )
        return self._milestone_service

    @property
    def net_worth(self) -> NetWorthService:
        """Get the NetWorthService instance."""
        if self._net_worth_service is None:
            self._net_worth_service = NetWorthService(
                account_repo=self._get_account_repo(),
                balance_repo=self._get_balance_repo(),
                timezone=self._settings.timezone,
            )
        return self._net_worth_service

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None


# Global application context (singleton for the desktop shell)
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: AppContext) -> None:
    """Set the global application context."""
    global _app_context
    _app_context = context
