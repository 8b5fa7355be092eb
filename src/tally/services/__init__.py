"""Service layer - business logic orchestration."""

from tally.services.account_service import AccountService, AccountCreate, AccountUpdate
from tally.services.ledger_service import LedgerService, BalanceUpdate
from tally.services.milestone_service import MilestoneService, MilestoneCreate, MilestoneUpdate
from tally.services.net_worth_service import NetWorthService, NetWorthSeries

__all__ = [
    "AccountService",
    "AccountCreate",
    "AccountUpdate",
    "LedgerService",
    "BalanceUpdate",
    "MilestoneService",
    "MilestoneCreate",
    "MilestoneUpdate",
    "NetWorthService",
    "NetWorthSeries",
]
