"""SQLAlchemy implementation of MilestoneRepository."""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from tally.core.dates import to_iso
from tally.domain.models import Milestone
from tally.repositories.sqlalchemy.database import read_transaction, write_transaction
from tally.repositories.sqlalchemy.orm_models import MilestoneORM


class SqlAlchemyMilestoneRepository:
    """SQLAlchemy-backed milestone repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, milestone: Milestone) -> Milestone:
        """Persist a new milestone."""
        orm_milestone = MilestoneORM(
            id=milestone.milestone_id,
            date=to_iso(milestone.date),
            label=milestone.label,
            account_id=milestone.account_id,
            created_at=milestone.created_at,
        )
        with write_transaction(self._db, f"create milestone {milestone.milestone_id}"):
            self._db.add(orm_milestone)
        with read_transaction(self._db):
            self._db.refresh(orm_milestone)
            return self._to_domain(orm_milestone)

    def get_by_id(self, milestone_id: str) -> Optional[Milestone]:
        """Retrieve milestone by ID."""
        with read_transaction(self._db):
            orm_milestone = self._db.query(MilestoneORM).filter(
                MilestoneORM.id == milestone_id
            ).first()
            return self._to_domain(orm_milestone) if orm_milestone else None

    def update(self, milestone: Milestone) -> Milestone:
        """Update an existing milestone."""
        with write_transaction(self._db, f"update milestone {milestone.milestone_id}"):
            orm_milestone = self._db.query(MilestoneORM).filter(
                MilestoneORM.id == milestone.milestone_id
            ).first()
            if not orm_milestone:
                raise ValueError(f"Milestone not found: {milestone.milestone_id}")
            orm_milestone.date = to_iso(milestone.date)
            orm_milestone.label = milestone.label
            orm_milestone.account_id = milestone.account_id
        with read_transaction(self._db):
            self._db.refresh(orm_milestone)
            return self._to_domain(orm_milestone)

    def delete(self, milestone_id: str) -> bool:
        """Delete a milestone."""
        with write_transaction(self._db, f"delete milestone {milestone_id}"):
            deleted = self._db.query(MilestoneORM).filter(
                MilestoneORM.id == milestone_id
            ).delete(synchronize_session=False)
        return deleted > 0

    def query(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        account_id: Optional[str] = None,
    ) -> list[Milestone]:
        """List milestones within inclusive date bounds, oldest first."""
        query = self._db.query(MilestoneORM)
        if start:
            query = query.filter(MilestoneORM.date >= to_iso(start))
        if end:
            query = query.filter(MilestoneORM.date <= to_iso(end))
        if account_id:
            query = query.filter(MilestoneORM.account_id == account_id)
        query = query.order_by(MilestoneORM.date, MilestoneORM.created_at)
        with read_transaction(self._db):
            return [self._to_domain(m) for m in query.all()]

    @staticmethod
    def _to_domain(orm: MilestoneORM) -> Milestone:
        """Convert ORM model to domain model."""
        return Milestone(
            milestone_id=orm.id,
            date=date.fromisoformat(orm.date),
            label=orm.label,
            account_id=orm.account_id,
            created_at=orm.created_at,
        )
