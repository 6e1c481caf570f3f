"""Date parsing and calendar arithmetic shared by every engine module.

Two wire formats are in play:
  - ``YYYY-MM-DD`` for deposit form inputs (strict, no single-digit parts)
  - ``DD-MM-YYYY`` for NAV points and investment records from the NAV provider

Tenure addition is calendar-aware (``relativedelta`` clamps to month end),
never fixed 30/31-day arithmetic.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

from fintools.errors import InvalidInputError

ISO_DATE_FORMAT = "%Y-%m-%d"
NAV_DATE_FORMAT = "%d-%m-%Y"

_ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_NAV_PATTERN = re.compile(r"^\d{2}-\d{2}-\d{4}$")


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    Raises
    ------
    InvalidInputError
        If the string does not match the format or names an impossible date.
    """
    if not isinstance(value, str) or not _ISO_PATTERN.match(value.strip()):
        raise InvalidInputError(f"Invalid date {value!r}: expected YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), ISO_DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date {value!r}: {exc}") from exc


def parse_nav_date(value: str) -> date:
    """Parse a strict ``DD-MM-YYYY`` string (NAV provider format)."""
    if not isinstance(value, str) or not _NAV_PATTERN.match(value.strip()):
        raise InvalidInputError(f"Invalid date {value!r}: expected DD-MM-YYYY")
    try:
        return datetime.strptime(value.strip(), NAV_DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date {value!r}: {exc}") from exc


def format_nav_date(value: date) -> str:
    return value.strftime(NAV_DATE_FORMAT)


def coerce_date(value: date | datetime | str) -> date:
    """Accept a date, a datetime, or a string in either wire format."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _NAV_PATTERN.match(text):
            return parse_nav_date(text)
        return parse_iso_date(text)
    raise InvalidInputError(f"Unsupported date value: {value!r}")


def add_tenure(start: date, years: int = 0, months: int = 0, days: int = 0) -> date:
    """Add years, then months, then days, clamping to month end at each step.

    Feb 29 + 1 year lands on Feb 28; Jan 31 + 1 month lands on the last day
    of February.
    """
    end = start + relativedelta(years=years)
    end = end + relativedelta(months=months)
    return end + relativedelta(days=days)


def monthly_date(start: date, months_ahead: int, day_of_month: int) -> date:
    """The ``day_of_month`` of the month ``months_ahead`` after ``start``.

    Days past the end of the target month clamp to its last day
    (SIP day 31 falls on Feb 28/29).
    """
    return start + relativedelta(months=months_ahead, day=day_of_month)
