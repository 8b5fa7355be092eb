"""Repository layer - data access abstractions and implementations."""

from tally.repositories.protocols import (
    AccountRepository,
    BalanceRepository,
    MilestoneRepository,
)

__all__ = [
    "AccountRepository",
    "BalanceRepository",
    "MilestoneRepository",
]
