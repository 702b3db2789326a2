"""
Calendar date helpers.

Every date used as a map key or query bound goes through ``normalize_date`` so
values carrying a time-of-day or UTC offset never shift to a neighbouring day.
"""
import re
from datetime import date, datetime, timedelta
from typing import List, Union

from app.core.exceptions import ValidationError

DATE_PATTERN = re.compile(r'^(\d{4}-\d{2}-\d{2})')
DAYS_IN_WEEK = 7

DateLike = Union[str, date, datetime]


def normalize_date(value: DateLike, field_name: str = "date") -> str:
    """
    Reduce a date, datetime or ISO string to its bare ``YYYY-MM-DD`` form.

    Raises:
        ValidationError: If the value does not start with a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    match = DATE_PATTERN.match(value or "")
    if not match:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format")

    try:
        return date.fromisoformat(match.group(1)).isoformat()
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid calendar date")


def parse_date(value: DateLike, field_name: str = "date") -> date:
    return date.fromisoformat(normalize_date(value, field_name))


def week_dates(week_start: DateLike) -> List[date]:
    """The seven consecutive dates starting at ``week_start``."""
    start = parse_date(week_start, "start_date")
    return [start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]
