"""Milestone service."""

import uuid
from dataclasses import dataclass
from typing import Optional

from tally.core.dates import DateLike, parse_iso_date, utc_now
from tally.core.exceptions import ValidationError, NotFoundError
from tally.domain.models import Milestone
from tally.repositories.protocols import AccountRepository, MilestoneRepository


@dataclass
class MilestoneCreate:
    """Input data for creating a milestone."""

    date: DateLike
    label: str
    account_id: Optional[str] = None


@dataclass
class MilestoneUpdate:
    """Partial update data; set ``clear_account`` to unlink the account."""

    date: Optional[DateLike] = None
    label: Optional[str] = None
    account_id: Optional[str] = None
    clear_account: bool = False


class MilestoneService:
    """Service for dated, labelled markers on the net worth timeline."""

    def __init__(
        self,
        account_repo: AccountRepository,
        milestone_repo: MilestoneRepository,
    ):
        self._account_repo = account_repo
        self._milestone_repo = milestone_repo

    def create(self, data: MilestoneCreate) -> Milestone:
        milestone = Milestone(
            milestone_id=str(uuid.uuid4()),
            date=parse_iso_date(data.date),
            label=self._validate_label(data.label),
            account_id=self._validate_account(data.account_id),
            created_at=utc_now(),
        )
        return self._milestone_repo.create(milestone)

    def get(self, milestone_id: str) -> Milestone:
        milestone = self._milestone_repo.get_by_id(milestone_id)
        if not milestone:
            raise NotFoundError("Milestone", milestone_id)
        return milestone

    def update(self, milestone_id: str, patch: MilestoneUpdate) -> Milestone:
        milestone = self.get(milestone_id)

        if patch.clear_account and patch.account_id is not None:
            raise ValidationError("Cannot both link and unlink an account")
        if patch.date is not None:
            milestone.date = parse_iso_date(patch.date)
        if patch.label is not None:
            milestone.label = self._validate_label(patch.label)
        if patch.account_id is not None:
            milestone.account_id = self._validate_account(patch.account_id)
        if patch.clear_account:
            milestone.account_id = None

        return self._milestone_repo.update(milestone)

    def delete(self, milestone_id: str) -> None:
        if not self._milestone_repo.delete(milestone_id):
            raise NotFoundError("Milestone", milestone_id)

    def list_milestones(
        self,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
        account_id: Optional[str] = None,
    ) -> list[Milestone]:
        """List milestones in an optional inclusive date range, oldest first."""
        start_date = parse_iso_date(start, "start") if start is not None else None
        end_date = parse_iso_date(end, "end") if end is not None else None
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start must not be after end")
        return self._milestone_repo.query(start_date, end_date, account_id)

    @staticmethod
    def _validate_label(label: Optional[str]) -> str:
        if not isinstance(label, str) or not label.strip():
            raise ValidationError("Milestone label is required")
        return label.strip()

    def _validate_account(self, account_id: Optional[str]) -> Optional[str]:
        if account_id is None:
            return None
        if not self._account_repo.get_by_id(account_id):
            raise NotFoundError("Account", account_id)
        return account_id
