"""Domain models package."""

from tally.domain.models.enums import (
    AccountCategory,
    AccountType,
    Granularity,
    ACCOUNT_TYPE_LABELS,
    category_for,
    types_in,
)
from tally.domain.models.account import Account
from tally.domain.models.balance import BalanceEntry
from tally.domain.models.milestone import Milestone

__all__ = [
    "AccountCategory",
    "AccountType",
    "Granularity",
    "ACCOUNT_TYPE_LABELS",
    "category_for",
    "types_in",
    "Account",
    "BalanceEntry",
    "Milestone",
]
