"""View models for balance and net worth outputs."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from tally.domain.models import Account, BalanceEntry


@dataclass
class CurrentBalanceView:
    """
    Latest known balance of an account.

    ``balance`` and ``as_of`` are None when nothing has been recorded yet,
    which is different from a recorded balance of zero.
    """

    account_id: str
    balance: Optional[float] = None
    as_of: Optional[date] = None
    entry_id: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.as_of is not None


@dataclass
class AccountBalanceView:
    """An account paired with its most recent snapshot."""

    account: Account
    latest: Optional[BalanceEntry] = None

    @property
    def current_balance(self) -> Optional[float]:
        return self.latest.balance if self.latest else None

    @property
    def balance_date(self) -> Optional[date]:
        return self.latest.date if self.latest else None


@dataclass
class NetWorthView:
    """Net worth at a single date."""

    as_of: date
    net_worth: float = 0.0
    assets: float = 0.0
    liabilities: float = 0.0
    included_account_ids: list[str] = field(default_factory=list)
    # Active accounts with no snapshot on or before as_of
    excluded_account_ids: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.excluded_account_ids


@dataclass
class NetWorthStats:
    """Headline statistics over the net worth history."""

    current_net_worth: float = 0.0
    ytd_change: float = 0.0
    ytd_change_percent: float = 0.0
    one_year_return: float = 0.0
    one_year_return_percent: float = 0.0
    monthly_avg_change: float = 0.0
    all_time_high: float = 0.0
    all_time_high_date: Optional[date] = None
