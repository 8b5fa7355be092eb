"""Balance snapshot domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass
class BalanceEntry:
    """
    Value of one account as of one calendar date.

    (account_id, date) is the entry's identity; only balance and notes
    may change after creation.
    """

    entry_id: str
    account_id: str
    date: date
    balance: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.date, str):
            self.date = date.fromisoformat(self.date)
