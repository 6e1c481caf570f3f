"""Trailing point-to-point returns and summary statistics for a scheme's NAV history."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date, timedelta

import numpy as np

from fintools.engine.nav import filter_nav_from
from fintools.models.results import NAVPoint, NavStatistics, TimeframeReturn

TIMEFRAMES: tuple[tuple[str, int], ...] = (
    ("1M", 30),
    ("3M", 90),
    ("6M", 180),
    ("1Y", 365),
    ("3Y", 1095),
    ("5Y", 1825),
    ("10Y", 3650),
)

DAYS_PER_YEAR = 365


def nav_at_or_before(series: Sequence[NAVPoint], target: date) -> NAVPoint | None:
    """Latest point dated on or before ``target``."""
    found = None
    for point in series:
        if point.date > target:
            break
        found = point
    return found


def timeframe_return(
    series: Sequence[NAVPoint],
    label: str,
    days: int,
    current_nav: float,
    as_of: date,
) -> TimeframeReturn:
    start_point = nav_at_or_before(series, as_of - timedelta(days=days))
    if start_point is None or start_point.price <= 0:
        return TimeframeReturn(timeframe_label=label, days=days)

    start_nav = start_point.price
    absolute = current_nav - start_nav
    cagr = ((current_nav / start_nav) ** (DAYS_PER_YEAR / days) - 1) * 100
    return TimeframeReturn(
        timeframe_label=label,
        days=days,
        start_nav=start_nav,
        end_nav=current_nav,
        absolute_return=absolute,
        percentage_return=absolute / start_nav * 100,
        cagr=cagr if math.isfinite(cagr) else 0.0,
        is_available=True,
    )


def calculate_scheme_returns(
    series: Sequence[NAVPoint],
    current_nav: float,
    as_of: date,
    timeframes: Sequence[tuple[str, int]] = TIMEFRAMES,
) -> dict[str, TimeframeReturn]:
    """Return for every timeframe, keyed by label.

    A timeframe is unavailable when the series has no point on or before
    ``as_of − days``.
    """
    return {
        label: timeframe_return(series, label, days, current_nav, as_of)
        for label, days in timeframes
    }


def nav_statistics(
    series: Sequence[NAVPoint],
    since: date | None = None,
) -> NavStatistics | None:
    """Min, max, mean and start-to-end change over the series (or from ``since``)."""
    window = filter_nav_from(series, since) if since is not None else list(series)
    if not window:
        return None

    prices = np.array([p.price for p in window], dtype=float)
    start_nav = float(prices[0])
    end_nav = float(prices[-1])
    return NavStatistics(
        min_nav=float(prices.min()),
        max_nav=float(prices.max()),
        avg_nav=float(prices.mean()),
        start_nav=start_nav,
        end_nav=end_nav,
        change_pct=(end_nav - start_nav) / start_nav * 100 if start_nav > 0 else 0.0,
        start_date=window[0].date,
        end_date=window[-1].date,
    )
