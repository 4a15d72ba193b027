"""Date parsing utilities."""

import re
from datetime import date
from typing import Optional

from dateutil import parser as date_parser

_NUMERIC_DATE = re.compile(r"^(\d{1,4})\s*[/.-]\s*(\d{1,2})\s*[/.-]\s*(\d{1,4})$")


def try_parse_date(date_str: str | None) -> Optional[date]:
    """Parse a date string, returning None when it cannot be understood.

    Numeric dates separated by "/", "-" or "." are resolved by where the
    four-digit year sits:
    - "15/01/2024", "15-01-2024", "15.01.2024" -> day/month/year
    - "2024/01/15", "2024-01-15" -> year/month/day

    Everything else (two-digit years, timestamps, "Jan 15 2024") goes through
    dateutil, reading ambiguous numbers day first unless the text leads with
    a year.

    Args:
        date_str: Raw date string

    Returns:
        Date object or None
    """
    if date_str is None:
        return None
    date_str = str(date_str).strip()
    if not date_str:
        return None

    match = _NUMERIC_DATE.match(date_str)
    if match:
        first, month, last = match.groups()
        try:
            if _is_full_year(last):
                return date(int(last), int(month), int(first))
            if _is_full_year(first):
                return date(int(first), int(month), int(last))
        except ValueError:
            return None

    try:
        return date_parser.parse(date_str, dayfirst=not _is_full_year(date_str[:4])).date()
    except (ValueError, OverflowError, TypeError):
        return None


def parse_date(date_str: str | None) -> date:
    """Parse a date string, falling back to today.

    The fallback is lossy; use ``try_parse_date`` when the caller needs to
    know a substitution happened.
    """
    parsed = try_parse_date(date_str)
    if parsed is None:
        return date.today()
    return parsed


def _is_full_year(part: str) -> bool:
    return len(part) == 4 and part.isdigit() and int(part) > 1900
