"""Ledger service for balance snapshots."""

import logging
import math
import uuid
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Optional, Union

from tally.core.dates import DateLike, parse_iso_date, utc_now
from tally.core.exceptions import ValidationError, NotFoundError, ConflictError
from tally.domain.models import BalanceEntry
from tally.repositories.protocols import AccountRepository, BalanceRepository

logger = logging.getLogger(__name__)

Number = Union[float, int, Decimal]


@dataclass
class BalanceUpdate:
    """
    Partial update data for correcting a snapshot.

    Date and account are the entry's identity and cannot be changed;
    an empty notes string clears the notes.
    """

    balance: Optional[Number] = None
    notes: Optional[str] = None


class LedgerService:
    """
    Service for the balance ledger.

    Holds at most one snapshot per (account, date). Recording a snapshot
    for a pair that already has one corrects it in place.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        balance_repo: BalanceRepository,
    ):
        self._account_repo = account_repo
        self._balance_repo = balance_repo

    def record_snapshot(
        self,
        account_id: str,
        on: DateLike,
        balance: Number,
        notes: Optional[str] = None,
    ) -> BalanceEntry:
        """
        Record the balance of an account on a date (upsert).

        If an entry for (account_id, date) exists its balance and notes are
        overwritten; otherwise a new entry is created.
        """
        entry = self._new_entry(account_id, on, balance, notes)
        recorded = self._balance_repo.upsert(entry)
        logger.debug(
            "Recorded balance %s for account %s on %s",
            recorded.balance,
            account_id,
            recorded.date,
        )
        return recorded

    def insert_snapshot(
        self,
        account_id: str,
        on: DateLike,
        balance: Number,
        notes: Optional[str] = None,
    ) -> BalanceEntry:
        """
        Record a snapshot, refusing to touch an existing one.

        Raises:
            ConflictError: an entry for (account_id, date) already exists.
        """
        entry = self._new_entry(account_id, on, balance, notes)
        if self._balance_repo.get_by_account_date(account_id, entry.date):
            raise ConflictError(
                f"Balance for account {account_id} on {entry.date.isoformat()} already exists"
            )
        return self._balance_repo.create(entry)

    def get(self, entry_id: str) -> BalanceEntry:
        """Get a balance entry by ID."""
        entry = self._balance_repo.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("BalanceEntry", entry_id)
        return entry

    def update(self, entry_id: str, patch: BalanceUpdate) -> BalanceEntry:
        """Correct the balance and/or notes of an entry."""
        entry = self.get(entry_id)

        if patch.balance is not None:
            entry.balance = self._validate_balance(patch.balance)
        if patch.notes is not None:
            entry.notes = self._clean_notes(patch.notes)

        return self._balance_repo.update(entry)

    def delete(self, entry_id: str) -> None:
        """Delete a single balance entry."""
        if not self._balance_repo.delete(entry_id):
            raise NotFoundError("BalanceEntry", entry_id)

    def list_for_account(
        self,
        account_id: str,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> list[BalanceEntry]:
        """List an account's entries within an optional inclusive range, oldest first."""
        self._require_account(account_id)
        start_date = parse_iso_date(start, "start") if start is not None else None
        end_date = parse_iso_date(end, "end") if end is not None else None
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start must not be after end")
        return self._balance_repo.list_by_account(account_id, start_date, end_date)

    def latest_before(self, account_id: str, as_of: DateLike) -> Optional[BalanceEntry]:
        """Return the entry with the greatest date on or before ``as_of``, if any."""
        as_of_date = parse_iso_date(as_of, "as_of")
        return self._balance_repo.latest_on_or_before(account_id, as_of_date)

    def _new_entry(
        self,
        account_id: str,
        on: DateLike,
        balance: Number,
        notes: Optional[str],
    ) -> BalanceEntry:
        snapshot_date = parse_iso_date(on)
        value = self._validate_balance(balance)
        self._require_account(account_id)
        return BalanceEntry(
            entry_id=str(uuid.uuid4()),
            account_id=account_id,
            date=snapshot_date,
            balance=value,
            notes=self._clean_notes(notes),
            created_at=utc_now(),
        )

    def _require_account(self, account_id: str) -> None:
        if not self._account_repo.get_by_id(account_id):
            raise NotFoundError("Account", account_id)

    @staticmethod
    def _clean_notes(notes: Optional[str]) -> Optional[str]:
        if notes is None:
            return None
        if not isinstance(notes, str):
            raise ValidationError(f"notes must be text, got {notes!r}")
        return notes.strip() or None

    @staticmethod
    def _validate_balance(balance: Number) -> float:
        if isinstance(balance, bool) or not isinstance(balance, (Real, Decimal)):
            raise ValidationError(f"balance must be a number, got {balance!r}")
        if isinstance(balance, Decimal) and not balance.is_finite():
            raise ValidationError(f"balance must be finite, got {balance!r}")
        try:
            value = float(balance)
        except (ValueError, OverflowError) as exc:
            raise ValidationError(f"balance is not representable, got {balance!r}") from exc
        if not math.isfinite(value):
            raise ValidationError(f"balance must be finite, got {balance!r}")
        return value
