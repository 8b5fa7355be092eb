"""Account domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from tally.domain.models.enums import AccountCategory, AccountType, category_for


@dataclass
class Account:
    """
    A tracked asset or liability.

    ``category`` is not a field: it is always derived from ``account_type``,
    so the two can never disagree.
    """

    account_id: str
    name: str
    account_type: AccountType
    currency: str = "GBP"
    institution: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.account_type, str):
            self.account_type = AccountType(self.account_type)

    @property
    def category(self) -> AccountCategory:
        return category_for(self.account_type)

    @property
    def is_liability(self) -> bool:
        return self.category == AccountCategory.LIABILITY
