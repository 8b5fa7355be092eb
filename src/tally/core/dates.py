"""Date and time utilities.

Balance snapshots and milestones are keyed by calendar date (no time
component, stored as ``YYYY-MM-DD``). Record timestamps are naive UTC.
"""

import re
from datetime import date, datetime
from typing import Union

import pytz
from dateutil.relativedelta import relativedelta

from tally.core.exceptions import ValidationError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[date, str]


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(pytz.UTC).replace(tzinfo=None)


def today_in(tz_name: str) -> date:
    """Return today's calendar date in the given timezone."""
    return datetime.now(pytz.timezone(tz_name)).date()


def parse_iso_date(value: DateLike, field_name: str = "date") -> date:
    """
    Parse a calendar date.

    Accepts a ``date`` (but not a ``datetime``) or a strict ``YYYY-MM-DD``
    string. Anything else raises ValidationError.
    """
    if isinstance(value, datetime):
        raise ValidationError(f"{field_name} must be a calendar date without a time component")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value.strip()):
        raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD), got {value!r}")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError(f"{field_name} is not a valid calendar date: {value!r}") from exc


def to_iso(value: date) -> str:
    """Format a date for storage."""
    return value.isoformat()


def month_end(value: date) -> date:
    """Return the last day of the month containing ``value``."""
    return value + relativedelta(day=31)


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day."""
    return value + relativedelta(months=months)
