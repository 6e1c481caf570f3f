"""Return metrics — gain, CAGR, XIRR and one-day change for funds and portfolios.

All metrics are recomputed from investments and NAV history on every call;
nothing is cached, so identical inputs give identical outputs.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import date

from fintools.config.engine import DEFAULT_ENGINE_CONFIG, EngineConfig
from fintools.config.investment import FundHoldings, Investment
from fintools.engine.nav import latest_nav, merge_nav_series
from fintools.engine.valuation import (
    aggregate_valuations,
    earliest_investment_date,
    generate_installments,
    value_of_all,
)
from fintools.finance.xirr import solve_xirr
from fintools.models.results import CashFlow, NAVPoint, OneDayChange, ReturnMetrics, XIRRSolution

logger = logging.getLogger(__name__)


def _pct(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    result = numerator / denominator * 100
    return result if math.isfinite(result) else 0.0


# ═══════════════════════════════════════════════════════════════════════════
# Building blocks
# ═══════════════════════════════════════════════════════════════════════════

def build_cash_flows(
    investments: Iterable[Investment],
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[CashFlow]:
    """Executed installments as outflows plus the current value as a final inflow.

    Returns an empty list when there are no investments or no NAV data.
    """
    investments = list(investments)
    if not investments or not nav_series:
        return []

    flows = [
        CashFlow(date=row.date, amount=-row.net_amount)
        for row in generate_installments(investments, nav_series, as_of, config)
        if not row.cancelled
    ]
    current_value = value_of_all(investments, nav_series, as_of, config).current_value
    flows.append(CashFlow(date=as_of, amount=current_value))
    flows.sort(key=lambda cf: cf.date)
    return flows


def compute_xirr(
    investments: Iterable[Investment],
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> XIRRSolution:
    return solve_xirr(build_cash_flows(investments, nav_series, as_of, config), config)


def compute_cagr(
    total_invested: float,
    current_value: float,
    start: date | None,
    end: date | None,
    days_per_year: float = 365.25,
) -> float:
    """Compound annual growth rate in percent.

    Zero when either date is missing, the period is not positive, or nothing
    was invested.
    """
    if start is None or end is None or total_invested <= 0:
        return 0.0
    years = (end - start).days / days_per_year
    if years <= 0:
        return 0.0
    cagr = ((current_value / total_invested) ** (1 / years) - 1) * 100
    return cagr if math.isfinite(cagr) else 0.0


def cagr_for_investments(
    investments: Sequence[Investment],
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> float:
    """CAGR from the earliest investment start to the latest NAV date."""
    latest = latest_nav(nav_series)
    if not investments or latest is None:
        return 0.0
    valuation = value_of_all(investments, nav_series, as_of, config)
    return compute_cagr(
        valuation.invested_amount,
        valuation.current_value,
        earliest_investment_date(investments),
        latest.date,
        config.xirr_days_per_year,
    )


def _last_two_prices(nav_series: Sequence[NAVPoint]) -> tuple[float, float] | None:
    if len(nav_series) < 2:
        return None
    return nav_series[-1].price, nav_series[-2].price


def compute_one_day_change(units: float, nav_series: Sequence[NAVPoint]) -> OneDayChange:
    """Value change between the last two NAV points for ``units`` held."""
    prices = _last_two_prices(nav_series)
    if prices is None or units <= 0:
        return OneDayChange()
    today, yesterday = prices
    change = units * (today - yesterday)
    return OneDayChange(absolute_change=change, percentage_change=_pct(change, units * yesterday))


# ═══════════════════════════════════════════════════════════════════════════
# Fund and portfolio metrics
# ═══════════════════════════════════════════════════════════════════════════

def compute_metrics(
    investments: Iterable[Investment],
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ReturnMetrics:
    """Performance of the investments in one fund against that fund's NAV series."""
    investments = list(investments)
    if not investments:
        return ReturnMetrics()

    valuation = value_of_all(investments, nav_series, as_of, config)
    solution = compute_xirr(investments, nav_series, as_of, config)
    gain = valuation.current_value - valuation.invested_amount

    return ReturnMetrics(
        total_invested=valuation.invested_amount,
        total_current_value=valuation.current_value,
        absolute_gain=gain,
        percentage_return=_pct(gain, valuation.invested_amount),
        xirr=solution.rate,
        cagr=cagr_for_investments(investments, nav_series, as_of, config),
        one_day_change=compute_one_day_change(valuation.units, nav_series),
        units=valuation.units,
        xirr_solution=solution,
    )


def compute_portfolio_metrics(
    funds: Iterable[FundHoldings],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ReturnMetrics:
    """Performance across funds.

    Totals and the one-day change are summed fund by fund, each against its
    own series.  CAGR and XIRR run over all investments against the merged
    NAV timeline of every fund, which prices each purchase with whichever
    fund's NAV owns that date.  Funds without NAV data are left out.
    """
    priced = [f for f in funds if f.nav_series and f.investments]
    if not priced:
        return ReturnMetrics()

    valuations = []
    day_change = 0.0
    yesterday_value = 0.0
    for fund in priced:
        valuation = value_of_all(fund.investments, fund.nav_series, as_of, config)
        valuations.append(valuation)
        prices = _last_two_prices(fund.nav_series)
        if prices is not None and valuation.units > 0:
            today, yesterday = prices
            day_change += valuation.units * (today - yesterday)
            yesterday_value += valuation.units * yesterday
    totals = aggregate_valuations(valuations)

    merged = merge_nav_series(*(f.nav_series for f in priced))
    all_investments = [inv for f in priced for inv in f.investments]
    if len(priced) > 1:
        logger.debug(
            "Portfolio CAGR/XIRR over merged NAV timeline of %d funds (%d points)",
            len(priced), len(merged),
        )
    solution = compute_xirr(all_investments, merged, as_of, config)
    gain = totals.current_value - totals.invested_amount

    return ReturnMetrics(
        total_invested=totals.invested_amount,
        total_current_value=totals.current_value,
        absolute_gain=gain,
        percentage_return=_pct(gain, totals.invested_amount),
        xirr=solution.rate,
        cagr=cagr_for_investments(all_investments, merged, as_of, config),
        one_day_change=OneDayChange(
            absolute_change=day_change,
            percentage_change=_pct(day_change, yesterday_value),
        ),
        units=totals.units,
        xirr_solution=solution,
    )
