"""
app/parsers/date_parser.py

Lenient calendar-date parsing shared by profiling and normalization.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from app.domain.dataset import RawScalar

DATE_SHAPE_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}$|^\d{1,2}/\d{1,2}/\d{4}$|^\d{1,2}-\d{1,2}-\d{4}$"
)

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def parse_calendar_date(value: RawScalar) -> date | None:
    """
    Parse a raw cell into a calendar date, or return None.

    Numbers are never treated as dates.
    """

    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(normalized).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def looks_like_date(value: RawScalar) -> bool:
    """
    True when *value* is text with a recognised date shape or parses as a date.
    """

    if not isinstance(value, str):
        return False
    return bool(DATE_SHAPE_RE.match(value.strip())) or parse_calendar_date(value) is not None
