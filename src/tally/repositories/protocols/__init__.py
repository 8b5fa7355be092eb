"""Repository protocol definitions (interfaces)."""

from tally.repositories.protocols.account_repo import AccountRepository
from tally.repositories.protocols.balance_repo import BalanceRepository
from tally.repositories.protocols.milestone_repo import MilestoneRepository

__all__ = [
    "AccountRepository",
    "BalanceRepository",
    "MilestoneRepository",
]
