"""Milestone repository protocol."""

from datetime import date
from typing import Protocol, Optional

from tally.domain.models import Milestone


class MilestoneRepository(Protocol):
    """Interface for milestone data access."""

    def create(self, milestone: Milestone) -> Milestone:
        """Persist a new milestone."""
        ...

    def get_by_id(self, milestone_id: str) -> Optional[Milestone]:
        """Retrieve milestone by ID."""
        ...

    def update(self, milestone: Milestone) -> Milestone:
        """Update an existing milestone."""
        ...

    def delete(self, milestone_id: str) -> bool:
        """Delete a milestone."""
        ...

    def query(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        account_id: Optional[str] = None,
    ) -> list[Milestone]:
        """List milestones ordered by date ascending."""
        ...
