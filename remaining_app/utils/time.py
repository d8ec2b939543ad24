"""
Calendar utilities for period and ledger date handling.

This module centralizes month arithmetic and date parsing so that every
component agrees on month lengths, leap years and accepted date formats.
"""

import calendar
import re
from datetime import date, datetime
from typing import Optional, Union

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SLASH_DATE = re.compile(r"^\d{4}/\d{2}/\d{2}$")


def today(reference: Optional[date] = None) -> date:
    """
    Get the evaluation date, preferring an explicit reference date.

    Args:
        reference: Optional date supplied by the caller

    Returns:
        The reference date, falling back to the local wall-clock date
    """
    if reference is not None:
        return reference

    return date.today()


def first_day_of_month(day: date) -> date:
    """Return the first day of the month containing ``day``."""
    return day.replace(day=1)


def last_day_of_month(day: date) -> date:
    """
    Return the last calendar day of the month containing ``day``.

    Handles 28, 29, 30 and 31 day months alike, December 9999 included.
    """
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def month_index(day: date) -> int:
    """Number of months elapsed since year 0 for ``day``."""
    return day.year * 12 + (day.month - 1)


def parse_date(value: Union[str, date]) -> date:
    """
    Parse a date from the vault formats.

    Args:
        value: ``YYYY-MM-DD`` or ``YYYY/MM/DD`` string, or a date

    Returns:
        Parsed date

    Raises:
        ValueError: If the value is not a supported date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if _ISO_DATE.match(text):
        return datetime.strptime(text, "%Y-%m-%d").date()
    if _SLASH_DATE.match(text):
        return datetime.strptime(text, "%Y/%m/%d").date()

    raise ValueError(f"Unsupported date format: {value!r}, expected YYYY-MM-DD or YYYY/MM/DD")


def format_date(day: date) -> str:
    """Format a date as ISO8601 for display and serialization."""
    return day.isoformat()
