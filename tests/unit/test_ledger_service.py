"""
Unit tests for LedgerService.

Tests cover:
- Recording snapshots (upsert per account and date)
- Insert-only recording and conflicts
- Corrections of balance/notes
- Validation errors
- Range listing and latest-on-or-before lookups
"""

import math
from datetime import date
from decimal import Decimal

import pytest

from tally.core.exceptions import ValidationError, NotFoundError, ConflictError
from tally.services import LedgerService, BalanceUpdate


# =============================================================================
# RECORD SNAPSHOT TESTS
# =============================================================================


class TestRecordSnapshot:
    """Tests for recording balance snapshots."""

    def test_record_creates_entry(self, account_factory, ledger_service: LedgerService):
        """
        GIVEN an account with no balances
        WHEN I record a snapshot
        THEN a single entry exists with the given values
        """
        account = account_factory()

        entry = ledger_service.record_snapshot(account.account_id, "2024-01-31", 1500.25, "Statement")

        assert entry.entry_id
        assert entry.account_id == account.account_id
        assert entry.date == date(2024, 1, 31)
        assert entry.balance == 1500.25
        assert entry.notes == "Statement"
        assert entry.created_at is not None

    def test_record_twice_same_date_keeps_one_row(self, account_factory, ledger_service):
        """
        GIVEN a snapshot for (account, date)
        WHEN I record another snapshot for the same pair
        THEN exactly one entry exists, holding the second value
        AND it keeps the original id and created_at
        """
        account = account_factory()
        first = ledger_service.record_snapshot(account.account_id, "2024-01-31", 100, "first")

        second = ledger_service.record_snapshot(account.account_id, "2024-01-31", 250, "second")

        entries = ledger_service.list_for_account(account.account_id)
        assert len(entries) == 1
        assert entries[0].balance == 250
        assert entries[0].notes == "second"
        assert second.entry_id == first.entry_id
        assert second.created_at == first.created_at

    def test_record_accepts_date_object_and_decimal(self, account_factory, ledger_service):
        account = account_factory()

        entry = ledger_service.record_snapshot(account.account_id, date(2024, 2, 1), Decimal("99.50"))

        assert entry.date == date(2024, 2, 1)
        assert entry.balance == 99.5

    def test_record_negative_balance(self, account_factory, ledger_service):
        account = account_factory()

        entry = ledger_service.record_snapshot(account.account_id, "2024-02-01", -42.0)

        assert entry.balance == -42.0

    def test_record_unknown_account(self, ledger_service: LedgerService):
        with pytest.raises(NotFoundError) as exc_info:
            ledger_service.record_snapshot("missing", "2024-01-01", 1)

        assert "Account" in exc_info.value.message

    @pytest.mark.parametrize("bad_date", ["2024-02-30", "31/01/2024", "", "2024-01-01T00:00:00"])
    def test_record_rejects_bad_date(self, account_factory, ledger_service, bad_date):
        account = account_factory()

        with pytest.raises(ValidationError):
            ledger_service.record_snapshot(account.account_id, bad_date, 1)

    @pytest.mark.parametrize(
        "bad_balance",
        [
            math.inf,
            -math.inf,
            math.nan,
            Decimal("NaN"),
            Decimal("sNaN"),
            Decimal("Infinity"),
            Decimal("-Infinity"),
            Decimal("1e400"),
            10**400,
            "100",
            None,
            True,
        ],
    )
    def test_record_rejects_bad_balance(self, account_factory, ledger_service, bad_balance):
        """
        GIVEN a non-finite or non-numeric balance
        WHEN I record it
        THEN ValidationError is raised and nothing is stored
        """
        account = account_factory()

        with pytest.raises(ValidationError):
            ledger_service.record_snapshot(account.account_id, "2024-01-01", bad_balance)

        assert ledger_service.list_for_account(account.account_id) == []


# =============================================================================
# INSERT-ONLY TESTS
# =============================================================================


class TestInsertSnapshot:
    """Tests for insert-only recording."""

    def test_insert_new_pair(self, account_factory, ledger_service):
        account = account_factory()

        entry = ledger_service.insert_snapshot(account.account_id, "2024-01-01", 10)

        assert entry.balance == 10

    def test_insert_existing_pair_conflicts(self, account_factory, ledger_service):
        """
        GIVEN an entry for (account, date)
        WHEN I insert-only another for the same pair
        THEN ConflictError is raised and the original value is kept
        """
        account = account_factory()
        ledger_service.insert_snapshot(account.account_id, "2024-01-01", 10)

        with pytest.raises(ConflictError) as exc_info:
            ledger_service.insert_snapshot(account.account_id, "2024-01-01", 20)

        assert exc_info.value.code == "CONFLICT"
        entries = ledger_service.list_for_account(account.account_id)
        assert [e.balance for e in entries] == [10]

    def test_same_date_different_accounts(self, account_factory, ledger_service):
        a = account_factory()
        b = account_factory()

        ledger_service.insert_snapshot(a.account_id, "2024-01-01", 1)
        ledger_service.insert_snapshot(b.account_id, "2024-01-01", 2)

        assert ledger_service.latest_before(a.account_id, "2024-01-01").balance == 1
        assert ledger_service.latest_before(b.account_id, "2024-01-01").balance == 2


# =============================================================================
# UPDATE / DELETE TESTS
# =============================================================================


class TestCorrectAndDelete:
    """Tests for correcting and removing entries by id."""

    def test_update_balance_only(self, account_factory, ledger_service, snapshot_factory):
        account = account_factory()
        entry = snapshot_factory(account, "2024-01-01", 100, "opening")

        updated = ledger_service.update(entry.entry_id, BalanceUpdate(balance=120))

        assert updated.balance == 120
        assert updated.notes == "opening"
        assert updated.date == entry.date
        assert updated.account_id == entry.account_id

    def test_update_clears_notes(self, account_factory, ledger_service, snapshot_factory):
        account = account_factory()
        entry = snapshot_factory(account, "2024-01-01", 100, "typo")

        updated = ledger_service.update(entry.entry_id, BalanceUpdate(notes=""))

        assert updated.notes is None
        assert updated.balance == 100

    def test_rejects_non_text_notes(self, account_factory, ledger_service, snapshot_factory):
        account = account_factory()
        entry = snapshot_factory(account, "2024-01-01", 100, "kept")

        with pytest.raises(ValidationError):
            ledger_service.record_snapshot(account.account_id, "2024-02-01", 1, notes=5)
        with pytest.raises(ValidationError):
            ledger_service.update(entry.entry_id, BalanceUpdate(notes=5))

        assert ledger_service.get(entry.entry_id).notes == "kept"

    def test_update_rejects_non_finite(self, account_factory, ledger_service, snapshot_factory):
        account = account_factory()
        entry = snapshot_factory(account, "2024-01-01", 100)

        with pytest.raises(ValidationError):
            ledger_service.update(entry.entry_id, BalanceUpdate(balance=math.inf))

        assert ledger_service.get(entry.entry_id).balance == 100

    def test_update_unknown_entry(self, ledger_service: LedgerService):
        with pytest.raises(NotFoundError):
            ledger_service.update("missing", BalanceUpdate(balance=1))

    def test_delete_entry(self, account_factory, ledger_service, snapshot_factory):
        account = account_factory()
        keep = snapshot_factory(account, "2024-01-01", 100)
        drop = snapshot_factory(account, "2024-02-01", 200)

        ledger_service.delete(drop.entry_id)

        assert ledger_service.list_for_account(account.account_id) == [keep]
        with pytest.raises(NotFoundError):
            ledger_service.get(drop.entry_id)

    def test_delete_unknown_entry(self, ledger_service: LedgerService):
        with pytest.raises(NotFoundError):
            ledger_service.delete("missing")


# =============================================================================
# QUERY TESTS
# =============================================================================


class TestQueries:
    """Tests for range listing and latest-before lookups."""

    def test_list_is_ascending_regardless_of_insert_order(
        self, account_factory, ledger_service, snapshot_factory
    ):
        account = account_factory()
        for on in ["2024-03-01", "2024-01-01", "2024-02-01"]:
            snapshot_factory(account, on, 1)

        dates = [e.date.isoformat() for e in ledger_service.list_for_account(account.account_id)]

        assert dates == ["2024-01-01", "2024-02-01", "2024-03-01"]

    def test_list_range_is_inclusive(self, account_factory, ledger_service, snapshot_factory):
        account = account_factory()
        for month in range(1, 7):
            snapshot_factory(account, f"2024-0{month}-01", month)

        entries = ledger_service.list_for_account(account.account_id, "2024-02-01", "2024-04-01")

        assert [e.balance for e in entries] == [2, 3, 4]

    def test_list_open_ended_range(self, account_factory, ledger_service, snapshot_factory):
        account = account_factory()
        for month in range(1, 4):
            snapshot_factory(account, f"2024-0{month}-01", month)

        assert [e.balance for e in ledger_service.list_for_account(account.account_id, start="2024-02-15")] == [3]
        assert [e.balance for e in ledger_service.list_for_account(account.account_id, end="2024-02-15")] == [1, 2]

    def test_list_rejects_inverted_range(self, account_factory, ledger_service):
        account = account_factory()

        with pytest.raises(ValidationError):
            ledger_service.list_for_account(account.account_id, "2024-05-01", "2024-01-01")

    def test_list_unknown_account(self, ledger_service: LedgerService):
        with pytest.raises(NotFoundError):
            ledger_service.list_for_account("missing")

    def test_latest_before_none_when_no_earlier_entry(
        self, account_factory, ledger_service, snapshot_factory
    ):
        account = account_factory()
        snapshot_factory(account, "2024-03-01", 100)

        assert ledger_service.latest_before(account.account_id, "2024-02-29") is None

    def test_latest_before_out_of_order_inserts(
        self, account_factory, ledger_service, snapshot_factory
    ):
        """
        GIVEN entries inserted out of chronological order
        WHEN I ask for the latest on or before a date
        THEN the entry with the greatest date <= that date is returned
        """
        account = account_factory()
        snapshot_factory(account, "2024-05-01", 500)
        snapshot_factory(account, "2024-01-01", 100)
        snapshot_factory(account, "2024-03-01", 300)
        snapshot_factory(account, "2024-02-01", 200)

        assert ledger_service.latest_before(account.account_id, "2024-03-15").balance == 300
        assert ledger_service.latest_before(account.account_id, "2024-03-01").balance == 300
        assert ledger_service.latest_before(account.account_id, "2024-02-29").balance == 200
        assert ledger_service.latest_before(account.account_id, date(2030, 1, 1)).balance == 500

    def test_latest_before_rejects_bad_date(self, account_factory, ledger_service):
        account = account_factory()

        with pytest.raises(ValidationError):
            ledger_service.latest_before(account.account_id, "March")
