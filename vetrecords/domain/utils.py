"""Domain Utilities - Time and text helpers shared by the detail variants.

All clinical timestamps are timezone-aware UTC values; calendar dates
(diagnosis, treatment, follow-up) are UTC dates.
"""

from datetime import date, datetime, timezone
from typing import Iterable, Optional


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def today() -> date:
    """Return the current UTC calendar date."""
    return utcnow().date()


def is_blank(value: Optional[str]) -> bool:
    """Check whether a text value is missing or whitespace only.

    Parameters:
        value: Text to check

    Returns:
        bool: True if value is None, empty, or only whitespace
    """
    return value is None or not value.strip()


def first_blank_index(values: Optional[Iterable[Optional[str]]]) -> Optional[int]:
    """Return the index of the first blank entry, or None if all are filled."""
    if values is None:
        return None
    for index, value in enumerate(values):
        if is_blank(value):
            return index
    return None
