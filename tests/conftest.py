"""
Pytest configuration and fixtures for the net worth tracker tests.

This module provides:
- In-memory SQLite database fixtures, migrated by the real migration engine
- Repository and service fixtures
- Factory helpers for accounts and balance snapshots
- A fixed "today" for deterministic derived views
"""

import uuid
from datetime import date
from typing import Callable, Optional

import pytest
from sqlalchemy import StaticPool
from sqlalchemy.orm import sessionmaker, Session

from tally.config.settings import reset_settings
from tally.domain.models import Account, AccountType, BalanceEntry
from tally.repositories.sqlalchemy import (
    create_db_engine,
    reset_database,
    run_migrations,
    SqlAlchemyAccountRepository,
    SqlAlchemyBalanceRepository,
    SqlAlchemyMilestoneRepository,
)
from tally.services import (
    AccountService,
    AccountCreate,
    LedgerService,
    MilestoneService,
    NetWorthService,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


@pytest.fixture
def fixed_today() -> date:
    """Fixed 'today' for deterministic tests."""
    return date(2024, 6, 15)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create a migrated, shared in-memory SQLite engine."""
    reset_settings()
    reset_database()

    engine = create_db_engine(
        "sqlite:///:memory:",
        poolclass=StaticPool,
    )
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def account_repo(test_session) -> SqlAlchemyAccountRepository:
    """Provide test AccountRepository."""
    return SqlAlchemyAccountRepository(test_session)


@pytest.fixture
def balance_repo(test_session) -> SqlAlchemyBalanceRepository:
    """Provide test BalanceRepository."""
    return SqlAlchemyBalanceRepository(test_session)


@pytest.fixture
def milestone_repo(test_session) -> SqlAlchemyMilestoneRepository:
    """Provide test MilestoneRepository."""
    return SqlAlchemyMilestoneRepository(test_session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def account_service(account_repo) -> AccountService:
    """Provide test AccountService."""
    return AccountService(account_repo=account_repo, base_currency="GBP")


@pytest.fixture
def ledger_service(account_repo, balance_repo) -> LedgerService:
    """Provide test LedgerService."""
    return LedgerService(account_repo=account_repo, balance_repo=balance_repo)


@pytest.fixture
def milestone_service(account_repo, milestone_repo) -> MilestoneService:
    """Provide test MilestoneService."""
    return MilestoneService(account_repo=account_repo, milestone_repo=milestone_repo)


@pytest.fixture
def net_worth_service(account_repo, balance_repo, fixed_today) -> NetWorthService:
    """Provide test NetWorthService whose 'today' is fixed."""
    return NetWorthService(
        account_repo=account_repo,
        balance_repo=balance_repo,
        clock=lambda: fixed_today,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def account_factory(account_service) -> Callable[..., Account]:
    """Factory for creating test accounts."""

    def _create_account(
        name: Optional[str] = None,
        account_type: AccountType = AccountType.SAVINGS,
        institution: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> Account:
        if name is None:
            name = f"Test Account {uuid.uuid4().hex[:8]}"
        return account_service.create(
            AccountCreate(
                name=name,
                account_type=account_type,
                institution=institution,
                currency=currency,
            )
        )

    return _create_account


@pytest.fixture
def snapshot_factory(ledger_service) -> Callable[..., BalanceEntry]:
    """Factory for recording balance snapshots."""

    def _record(
        account: Account,
        on: str,
        balance: float,
        notes: Optional[str] = None,
    ) -> BalanceEntry:
        return ledger_service.record_snapshot(account.account_id, on, balance, notes)

    return _record


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def savings_and_loan(account_factory, snapshot_factory) -> tuple[Account, Account]:
    """
    Savings account A and loan account B.

    A: 1000 on 2024-01-01, 1200 on 2024-03-01.
    B: 500 on 2024-02-01.
    """
    savings = account_factory(name="Savings A", account_type=AccountType.SAVINGS)
    loan = account_factory(name="Loan B", account_type=AccountType.LOAN)
    snapshot_factory(savings, "2024-01-01", 1000)
    snapshot_factory(savings, "2024-03-01", 1200)
    snapshot_factory(loan, "2024-02-01", 500)
    return savings, loan
