"""SQLAlchemy implementation of BalanceRepository."""

from datetime import date
from typing import Optional

from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from tally.core.dates import to_iso
from tally.domain.models import BalanceEntry
from tally.repositories.sqlalchemy.database import read_transaction, write_transaction
from tally.repositories.sqlalchemy.orm_models import BalanceEntryORM


class SqlAlchemyBalanceRepository:
    """SQLAlchemy-backed balance snapshot repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, entry: BalanceEntry) -> BalanceEntry:
        """Insert a new entry."""
        orm_entry = self._to_orm(entry)
        with write_transaction(self._db, f"record balance {entry.account_id}@{entry.date}"):
            self._db.add(orm_entry)
        with read_transaction(self._db):
            self._db.refresh(orm_entry)
            return self._to_domain(orm_entry)

    def upsert(self, entry: BalanceEntry) -> BalanceEntry:
        """
        Insert the entry, or overwrite balance/notes of the existing one.

        On conflict the stored row keeps its own id and created_at.
        """
        stmt = sqlite_insert(BalanceEntryORM).values(
            id=entry.entry_id,
            account_id=entry.account_id,
            date=to_iso(entry.date),
            balance=entry.balance,
            notes=entry.notes,
            created_at=entry.created_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["account_id", "date"],
            set_={"balance": stmt.excluded.balance, "notes": stmt.excluded.notes},
        )
        with write_transaction(self._db, f"record balance {entry.account_id}@{entry.date}"):
            self._db.execute(stmt)
        return self.get_by_account_date(entry.account_id, entry.date)

    def get_by_id(self, entry_id: str) -> Optional[BalanceEntry]:
        """Retrieve entry by ID."""
        with read_transaction(self._db):
            orm_entry = self._db.query(BalanceEntryORM).filter(
                BalanceEntryORM.id == entry_id
            ).first()
            return self._to_domain(orm_entry) if orm_entry else None

    def get_by_account_date(self, account_id: str, on: date) -> Optional[BalanceEntry]:
        """Retrieve the entry for an account on an exact date."""
        with read_transaction(self._db):
            orm_entry = self._db.query(BalanceEntryORM).filter(
                BalanceEntryORM.account_id == account_id,
                BalanceEntryORM.date == to_iso(on),
            ).first()
            return self._to_domain(orm_entry) if orm_entry else None

    def update(self, entry: BalanceEntry) -> BalanceEntry:
        """Update balance and notes of an existing entry."""
        with write_transaction(self._db, f"update balance entry {entry.entry_id}"):
            orm_entry = self._db.query(BalanceEntryORM).filter(
                BalanceEntryORM.id == entry.entry_id
            ).first()
            if not orm_entry:
                raise ValueError(f"Balance entry not found: {entry.entry_id}")
            orm_entry.balance = entry.balance
            orm_entry.notes = entry.notes
        with read_transaction(self._db):
            self._db.refresh(orm_entry)
            return self._to_domain(orm_entry)

    def delete(self, entry_id: str) -> bool:
        """Delete an entry."""
        with write_transaction(self._db, f"delete balance entry {entry_id}"):
            deleted = self._db.query(BalanceEntryORM).filter(
                BalanceEntryORM.id == entry_id
            ).delete(synchronize_session=False)
        return deleted > 0

    def list_by_account(
        self,
        account_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[BalanceEntry]:
        """List entries for an account within inclusive bounds, oldest first."""
        query = self._db.query(BalanceEntryORM).filter(
            BalanceEntryORM.account_id == account_id
        )
        if start:
            query = query.filter(BalanceEntryORM.date >= to_iso(start))
        if end:
            query = query.filter(BalanceEntryORM.date <= to_iso(end))
        query = query.order_by(BalanceEntryORM.date)
        with read_transaction(self._db):
            return [self._to_domain(e) for e in query.all()]

    def latest_on_or_before(self, account_id: str, as_of: date) -> Optional[BalanceEntry]:
        """Return the entry with the greatest date <= as_of."""
        query = (
            self._db.query(BalanceEntryORM)
            .filter(
                BalanceEntryORM.account_id == account_id,
                BalanceEntryORM.date <= to_iso(as_of),
            )
            .order_by(BalanceEntryORM.date.desc())
        )
        with read_transaction(self._db):
            orm_entry = query.first()
            return self._to_domain(orm_entry) if orm_entry else None

    def latest_for_account(self, account_id: str) -> Optional[BalanceEntry]:
        """Return the most recent entry regardless of date."""
        query = (
            self._db.query(BalanceEntryORM)
            .filter(BalanceEntryORM.account_id == account_id)
            .order_by(BalanceEntryORM.date.desc())
        )
        with read_transaction(self._db):
            orm_entry = query.first()
            return self._to_domain(orm_entry) if orm_entry else None

    def distinct_dates(
        self,
        account_ids: list[str],
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[date]:
        """Distinct snapshot dates across the given accounts, ascending."""
        if not account_ids:
            return []
        query = self._db.query(BalanceEntryORM.date).filter(
            BalanceEntryORM.account_id.in_(account_ids)
        )
        if start:
            query = query.filter(BalanceEntryORM.date >= to_iso(start))
        if end:
            query = query.filter(BalanceEntryORM.date <= to_iso(end))
        with read_transaction(self._db):
            rows = query.distinct().order_by(BalanceEntryORM.date).all()
        return [date.fromisoformat(row[0]) for row in rows]

    @staticmethod
    def _to_orm(entry: BalanceEntry) -> BalanceEntryORM:
        """Convert domain model to ORM model."""
        return BalanceEntryORM(
            id=entry.entry_id,
            account_id=entry.account_id,
            date=to_iso(entry.date),
            balance=entry.balance,
            notes=entry.notes,
            created_at=entry.created_at,
        )

    @staticmethod
    def _to_domain(orm: BalanceEntryORM) -> BalanceEntry:
        """Convert ORM model to domain model."""
        return BalanceEntry(
            entry_id=orm.id,
            account_id=orm.account_id,
            date=date.fromisoformat(orm.date),
            balance=float(orm.balance),
            notes=orm.notes,
            created_at=orm.created_at,
        )
