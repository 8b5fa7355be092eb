"""Milestone domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass
class Milestone:
    """Labelled marker on the timeline, optionally tied to an account."""

    milestone_id: str
    date: date
    label: str
    account_id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.date, str):
            self.date = date.fromisoformat(self.date)
