"""Date parsing utilities."""

import calendar
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2025-10-31", "31 Oct 2025", "October 31, 2025"
    - Relative dates: "today", "yesterday", "tomorrow"
    - Month boundaries: "this month", "last month", "end of month",
      "end of last month"

    Day-first input ("31/10/2025") is read the Indian way.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "end of month": today + relativedelta(day=31),
        "end of last month": today.replace(day=1) - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        # ISO dates are unambiguous; everything else is day first
        dayfirst = not (len(date_str) >= 5 and date_str[4] == "-")
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> int:
    """Parse a month given as a number (1-12) or an English name.

    Raises:
        ValueError: If the value is not a month
    """
    value = month_str.strip().lower()
    if value.isdigit():
        month = int(value)
        if 1 <= month <= 12:
            return month
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    for number in range(1, 13):
        if value in (calendar.month_name[number].lower(), calendar.month_abbr[number].lower()):
            return number
    raise ValueError(f"Unknown month '{month_str}'")


def resolve_period(
    year: Optional[int], month: Optional[str], all_months: bool, today: Optional[date] = None
) -> tuple[int, Optional[int]]:
    """Turn CLI period options into (year, month); month None means the whole year.

    Without options the current month is used.
    """
    today = today or date.today()
    if all_months:
        if month is not None:
            raise ValueError("--month and --all-months cannot be combined")
        return year or today.year, None
    if month is None:
        return year or today.year, (today.month if year is None else None)
    return year or today.year, parse_month(month)
