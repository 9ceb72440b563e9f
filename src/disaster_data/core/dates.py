"""
Date parsing shared by the normalizer and the ingestion adapters.

All returned datetimes are timezone-aware UTC. Naive inputs are read as
UTC, so a bare year 1990 becomes 1990-01-01T00:00:00Z everywhere.
An unparseable date is None, never "now".
"""

import re
from datetime import date, datetime, timezone
from typing import Any

_ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ].*)?$")
_YEAR_PATTERN = re.compile(r"^\d{4}$")
_DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DAY_MONTH_YEAR_PATTERN = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_iso(text: str) -> datetime | None:
    if not _ISO_PATTERN.match(text):
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def parse_date(value: Any) -> datetime | None:
    """
    Parse a date cell.

    Tried in order:
        1. ISO-8601 date or datetime ("2020-03-05", "2020-03-05T10:00:00Z")
        2. a bare four-digit year, read as January 1st
        3. D/M/YYYY or D-M-YYYY

    Args:
        value: String, date, datetime or number.

    Returns:
        UTC datetime, or None when nothing matches.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    text = str(value).strip()
    if not text:
        return None

    parsed = _parse_iso(text)
    if parsed is not None:
        return parsed

    if _YEAR_PATTERN.match(text):
        try:
            return datetime(int(text), 1, 1, tzinfo=timezone.utc)
        except ValueError:
            return None

    match = _DAY_MONTH_YEAR_PATTERN.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            return None

    return None


def parse_upper_bound(value: Any) -> datetime | None:
    """
    Parse an inclusive upper date bound.

    A bare year covers the whole year and a date without a time covers
    the whole day: "2011" ends at 2011-12-31T23:59:59.999999Z.
    """
    parsed = parse_date(value)
    if parsed is None or isinstance(value, datetime):
        return parsed

    text = value.isoformat() if isinstance(value, date) else str(value).strip()
    if _YEAR_PATTERN.match(text):
        parsed = parsed.replace(month=12, day=31)
    elif not (_DATE_ONLY_PATTERN.match(text) or _DAY_MONTH_YEAR_PATTERN.match(text)):
        return parsed
    return parsed.replace(hour=23, minute=59, second=59, microsecond=999999)


def _component(value: Any) -> int | None:
    """Read a year/month/day cell as an int (None when blank or invalid)."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ("nan", "none"):
        return None
    try:
        return int(float(text))
    except (TypeError, ValueError, OverflowError):
        return None


def construct_date(year: Any, month: Any = None, day: Any = None) -> datetime | None:
    """
    Build a date from separate year/month/day cells.

    Months are 1-based as in EMDAT exports. A missing (or zero) month
    means January and a missing day means the 1st. Impossible dates
    such as February 30th give None.
    """
    y = _component(year)
    if not y:
        return None

    m = _component(month)
    d = _component(day)
    if not m or m < 1:
        m = 1
    if not d or d < 1:
        d = 1

    try:
        return datetime(y, m, d, tzinfo=timezone.utc)
    except ValueError:
        return None
