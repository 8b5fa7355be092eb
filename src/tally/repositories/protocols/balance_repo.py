"""Balance entry repository protocol."""

from datetime import date
from typing import Protocol, Optional

from tally.domain.models import BalanceEntry


class BalanceRepository(Protocol):
    """Interface for balance snapshot data access."""

    def create(self, entry: BalanceEntry) -> BalanceEntry:
        """Insert a new entry."""
        ...

    def upsert(self, entry: BalanceEntry) -> BalanceEntry:
        """Insert, or overwrite balance/notes of the entry for (account_id, date)."""
        ...

    def get_by_id(self, entry_id: str) -> Optional[BalanceEntry]:
        """Retrieve entry by ID."""
        ...

    def get_by_account_date(self, account_id: str, on: date) -> Optional[BalanceEntry]:
        """Retrieve the entry for an account on an exact date."""
        ...

    def update(self, entry: BalanceEntry) -> BalanceEntry:
        """Update balance and notes of an existing entry."""
        ...

    def delete(self, entry_id: str) -> bool:
        """Delete an entry."""
        ...

    def list_by_account(
        self,
        account_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[BalanceEntry]:
        """List entries for an account, ordered by date ascending."""
        ...

    def latest_on_or_before(self, account_id: str, as_of: date) -> Optional[BalanceEntry]:
        """Return the entry with the greatest date <= as_of."""
        ...

    def latest_for_account(self, account_id: str) -> Optional[BalanceEntry]:
        """Return the most recent entry regardless of date."""
        ...

    def distinct_dates(
        self,
        account_ids: list[str],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[date]:
        """Distinct snapshot dates across the given accounts, ascending."""
        ...
