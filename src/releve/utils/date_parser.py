"""Date parsing utilities."""

import re
from datetime import date, timezone

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta


_ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_FR_DATE_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_date(date_str: str) -> date:
    """Parse a statement date into a calendar date.

    Only two shapes are accepted:
    - ISO strings starting with "YYYY-MM-DD" (a time part is allowed;
      offsets are converted to UTC before the day is taken)
    - "DD/MM/YYYY"

    Naive values are read as UTC, so the calendar day never shifts with the
    local timezone.

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string has another shape or is not a real date
    """
    s = (date_str or "").strip()

    if _ISO_PREFIX_RE.match(s):
        try:
            dt = isoparse(s)
            if dt.tzinfo is not None:
                dt = dt.astimezone(timezone.utc)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid date: {date_str}") from e
        return dt.date()

    m = _FR_DATE_RE.match(s)
    if m is None:
        raise ValueError(f"Invalid date: {date_str}")

    day, month, year = (int(part) for part in m.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


def month_range(month: str) -> tuple[date, date]:
    """Get the bounds of a "YYYY-MM" month.

    Args:
        month: Month string, e.g. "2024-03"

    Returns:
        Tuple of (first day, first day of next month); the end is exclusive

    Raises:
        ValueError: If month string is not a valid "YYYY-MM" value
    """
    m = _MONTH_RE.match((month or "").strip())
    if m is None or not 1 <= int(m.group(2)) <= 12:
        raise ValueError(f"Invalid month '{month}'. Expected format: YYYY-MM")

    start = date(int(m.group(1)), int(m.group(2)), 1)
    return (start, start + relativedelta(months=1))
