"""Domain layer - pure business models with no external dependencies."""

from tally.domain.models import (
    Account,
    BalanceEntry,
    Milestone,
    AccountCategory,
    AccountType,
    Granularity,
    category_for,
)

__all__ = [
    "Account",
    "BalanceEntry",
    "Milestone",
    "AccountCategory",
    "AccountType",
    "Granularity",
    "category_for",
]
