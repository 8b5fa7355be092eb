"""Core utilities and shared functionality."""

from tally.core.dates import (
    utc_now,
    today_in,
    parse_iso_date,
    to_iso,
    month_end,
    add_months,
)
from tally.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    ConflictError,
    StorageError,
    MigrationError,
)

__all__ = [
    "utc_now",
    "today_in",
    "parse_iso_date",
    "to_iso",
    "month_end",
    "add_months",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
    "MigrationError",
]
