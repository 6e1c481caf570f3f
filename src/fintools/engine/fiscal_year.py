"""Indian fiscal-year utilities.

FY 2023-24 runs from 1 April 2023 to 31 March 2024.  An FY is identified by
the calendar year it starts in (``fy_start_year``), labelled either short
(``2023-24``) or for display (``FY 2023-24``).
"""

from __future__ import annotations

import re
from datetime import date

from fintools.errors import InvalidInputError
from fintools.models.results import FiscalYearPeriod

FY_START_MONTH = 4

_FY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def fy_start_year(d: date) -> int:
    """Calendar year in which the FY containing ``d`` starts."""
    return d.year if d.month >= FY_START_MONTH else d.year - 1


def fy_start_date(year: int) -> date:
    return date(year, FY_START_MONTH, 1)


def fy_end_date(year: int) -> date:
    return date(year + 1, 3, 31)


def fiscal_year(d: date) -> str:
    """Short FY label for a date, e.g. ``2023-24``."""
    year = fy_start_year(d)
    return f"{year}-{(year + 1) % 100:02d}"


def fy_label(year: int) -> str:
    """Display label for an FY start year, e.g. ``FY 2023-24``."""
    return f"FY {year}-{(year + 1) % 100:02d}"


def parse_fiscal_year(fy: str) -> int:
    """Start year of a short FY label (``2023-24`` → 2023)."""
    match = _FY_PATTERN.match(fy.strip()) if isinstance(fy, str) else None
    if not match:
        raise InvalidInputError(f"Invalid fiscal year {fy!r}: expected YYYY-YY")
    year = int(match.group(1))
    if int(match.group(2)) != (year + 1) % 100:
        raise InvalidInputError(f"Invalid fiscal year {fy!r}: years are not consecutive")
    return year


def fy_sub_intervals(start: date, end: date) -> list[tuple[int, date, date]]:
    """Split ``[start, end]`` into per-FY ``(fy_start_year, period_start, period_end)``.

    Each interval ends on 31 March (or ``end``) and the next begins on 1 April,
    so a day count over an interval excludes the FY rollover day.  Intervals
    of zero length are dropped; the result is in ascending FY order.
    """
    intervals: list[tuple[int, date, date]] = []
    if end < start:
        return intervals
    for year in range(fy_start_year(start), fy_start_year(end) + 1):
        period_start = max(start, fy_start_date(year))
        period_end = min(end, fy_end_date(year))
        if period_start >= period_end:
            continue
        intervals.append((year, period_start, period_end))
    return intervals


def fiscal_years_in_range(start: date, as_of: date) -> list[FiscalYearPeriod]:
    """Every FY from the one containing ``start`` through the one containing ``as_of``.

    The first period starts at ``start`` and the last ends at ``as_of``.
    """
    periods: list[FiscalYearPeriod] = []
    last_year = fy_start_year(as_of)
    for year in range(fy_start_year(start), last_year + 1):
        periods.append(FiscalYearPeriod(
            fy=f"{year}-{(year + 1) % 100:02d}",
            start_date=max(start, fy_start_date(year)),
            end_date=as_of if year == last_year else fy_end_date(year),
        ))
    return periods


def is_date_in_fy(d: date, fy: str) -> bool:
    year = parse_fiscal_year(fy)
    return fy_start_date(year) <= d <= fy_end_date(year)


def effective_end_date_for_fy(fy: str, as_of: date) -> date:
    """``as_of`` for the FY containing it, otherwise the FY's 31 March."""
    year = parse_fiscal_year(fy)
    if year == fy_start_year(as_of):
        return as_of
    return fy_end_date(year)
