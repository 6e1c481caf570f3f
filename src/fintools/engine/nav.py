"""NAV series handling and the NAV lookup policy.

Every function below expects a series sorted ascending by date with one
point per date; ``normalize_nav_series`` produces one from raw input.

Lookup policy for a cash flow on date D:
  1. the point dated exactly D
  2. else the earliest point after D (next trading day settles the order)
  3. else the latest point (D is beyond the series)
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from typing import Any

from fintools.dates import parse_nav_date
from fintools.errors import InvalidInputError
from fintools.models.results import NAVPoint

logger = logging.getLogger(__name__)


def _parse_price(value: Any) -> float | None:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


def parse_nav_series(raw: Iterable[Mapping[str, Any]]) -> list[NAVPoint]:
    """Convert provider rows ``{"date": "DD-MM-YYYY", "nav": "12.3456"}`` to a clean series.

    Rows with an unparseable date are dropped.  An unparseable or non-finite
    price becomes 0, which the valuation module treats as "no units".
    """
    points: list[NAVPoint] = []
    dropped = 0
    for row in raw:
        try:
            nav_date = parse_nav_date(str(row.get("date", "")))
        except InvalidInputError:
            dropped += 1
            continue
        price_value = row.get("nav", row.get("price"))
        price = _parse_price(price_value)
        if price is None:
            logger.warning("NAV on %s has invalid price %r; using 0", nav_date, price_value)
            price = 0.0
        points.append(NAVPoint(date=nav_date, price=price))
    if dropped:
        logger.warning("Dropped %d NAV rows with unparseable dates", dropped)
    return normalize_nav_series(points)


def normalize_nav_series(points: Iterable[NAVPoint]) -> list[NAVPoint]:
    """Sort ascending by date, keeping the first point seen for each date."""
    by_date: dict[date, NAVPoint] = {}
    for point in points:
        by_date.setdefault(point.date, point)
    return sorted(by_date.values(), key=lambda p: p.date)


def merge_nav_series(*series: Sequence[NAVPoint]) -> list[NAVPoint]:
    """Union of several series into one timeline; earlier arguments win on date clashes."""
    return normalize_nav_series(p for s in series for p in s)


def latest_nav(series: Sequence[NAVPoint]) -> NAVPoint | None:
    return series[-1] if series else None


def find_nav(series: Sequence[NAVPoint], target: date) -> NAVPoint | None:
    """Apply the lookup policy.  Returns None only for an empty series."""
    if not series:
        return None
    i = bisect_left(series, target, key=lambda p: p.date)
    if i < len(series):
        # Either the exact match or the earliest point after target
        return series[i]
    return series[-1]


def nav_on(series: Sequence[NAVPoint], target: date) -> float:
    """Price applicable on ``target``; 0.0 when there is no data."""
    point = find_nav(series, target)
    return point.price if point is not None else 0.0


def filter_nav_from(series: Sequence[NAVPoint], start: date) -> list[NAVPoint]:
    return [p for p in series if p.date >= start]


def is_nav_stale(series: Sequence[NAVPoint], as_of: date, max_age_days: int = 3) -> bool:
    """True when the latest point is more than ``max_age_days`` before ``as_of``."""
    latest = latest_nav(series)
    if latest is None:
        return True
    return latest.date < as_of - timedelta(days=max_age_days)
