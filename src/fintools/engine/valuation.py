"""NAV-indexed valuation — units, invested capital and current value.

Rules applied to every purchase, lump sum or SIP:
  1. Stamp duty (0.005%) is deducted before units are allotted.
  2. The NAV comes from ``fintools.engine.nav.find_nav``.
  3. Only purchases dated strictly before ``as_of`` count; a purchase dated
     ``as_of`` or later has not executed yet.

SIP schedule: the first installment falls on the start date, later ones on
``sip_monthly_date`` of each following month (clamped to month end), until
the SIP end date or ``as_of``, whichever is earlier.  Amount modifications
apply to installments on or after their effective date; skipped dates
accrue nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from dateutil.relativedelta import relativedelta

from fintools.config.engine import DEFAULT_ENGINE_CONFIG, EngineConfig
from fintools.config.investment import Investment
from fintools.dates import monthly_date
from fintools.engine.nav import latest_nav, nav_on
from fintools.models.results import Installment, NAVPoint, UnitPurchase, ValuationResult

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Unit purchase
# ═══════════════════════════════════════════════════════════════════════════

def split_stamp_duty(
    gross_amount: float,
    rate: float = DEFAULT_ENGINE_CONFIG.stamp_duty_rate,
) -> tuple[float, float]:
    """Return ``(net_amount, stamp_duty)`` for a gross purchase amount."""
    stamp_duty = max(0.0, gross_amount * rate)
    return gross_amount - stamp_duty, stamp_duty


def purchase_units(
    gross_amount: float,
    nav: float,
    rate: float = DEFAULT_ENGINE_CONFIG.stamp_duty_rate,
) -> UnitPurchase:
    """Units allotted for ``gross_amount`` at ``nav``.  A non-positive NAV allots nothing."""
    net_amount, stamp_duty = split_stamp_duty(gross_amount, rate)
    return UnitPurchase(
        gross_amount=gross_amount,
        stamp_duty=stamp_duty,
        net_amount=net_amount,
        nav=nav,
        units=net_amount / nav if nav > 0 else 0.0,
    )


# ═══════════════════════════════════════════════════════════════════════════
# SIP schedule
# ═══════════════════════════════════════════════════════════════════════════

def sip_schedule(investment: Investment, as_of: date) -> list[date]:
    """All installment dates up to the earlier of the SIP end date and ``as_of`` (inclusive)."""
    end = as_of
    if investment.sip_end_date is not None:
        end = min(investment.sip_end_date, as_of)

    start = investment.start_date
    dates: list[date] = []
    if start <= end:
        dates.append(start)

    k = 1
    next_date = monthly_date(start, k, investment.sip_monthly_date)
    while next_date <= end:
        dates.append(next_date)
        k += 1
        next_date = monthly_date(start, k, investment.sip_monthly_date)
    return dates


def sip_amount_on(investment: Investment, on: date) -> float:
    """Installment amount in force on ``on``: the latest modification effective by then."""
    amount = investment.base_sip_amount
    for modification in sorted(investment.sip_amount_modifications, key=lambda m: m.effective_date):
        if modification.effective_date <= on:
            amount = modification.amount
    return amount


# ═══════════════════════════════════════════════════════════════════════════
# Installments
# ═══════════════════════════════════════════════════════════════════════════

def investment_installments(
    investment: Investment,
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[Installment]:
    """Executed installments of one investment, skipped SIP dates included as cancelled rows."""
    rate = config.stamp_duty_rate

    if not investment.is_sip:
        if investment.start_date >= as_of:
            return []
        purchase = purchase_units(investment.amount, nav_on(nav_series, investment.start_date), rate)
        return [_installment(investment, "lumpsum", investment.start_date, purchase)]

    skipped = set(investment.skipped_dates)
    rows: list[Installment] = []
    for sip_date in sip_schedule(investment, as_of):
        if sip_date >= as_of:
            continue
        if sip_date in skipped:
            rows.append(Installment(
                investment_id=investment.id,
                installment_type="sip-installment",
                date=sip_date,
                gross_amount=0.0,
                nav=nav_on(nav_series, sip_date),
                stamp_duty=0.0,
                net_amount=0.0,
                units=0.0,
                cancelled=True,
            ))
            continue
        purchase = purchase_units(sip_amount_on(investment, sip_date), nav_on(nav_series, sip_date), rate)
        rows.append(_installment(investment, "sip-installment", sip_date, purchase))
    return rows


def _installment(investment: Investment, kind: str, on: date, purchase: UnitPurchase) -> Installment:
    return Installment(
        investment_id=investment.id,
        installment_type=kind,
        date=on,
        gross_amount=purchase.gross_amount,
        nav=purchase.nav,
        stamp_duty=purchase.stamp_duty,
        net_amount=purchase.net_amount,
        units=purchase.units,
    )


def generate_installments(
    investments: Iterable[Investment],
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[Installment]:
    """Installment ledger across investments, ordered by date."""
    rows = [
        row
        for investment in investments
        for row in investment_installments(investment, nav_series, as_of, config)
    ]
    rows.sort(key=lambda r: r.date)
    return rows


# ═══════════════════════════════════════════════════════════════════════════
# Valuation
# ═══════════════════════════════════════════════════════════════════════════

def value_of(
    investment: Investment,
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ValuationResult:
    """Units held, current value (at the latest NAV) and net invested amount.

    An empty series is the normal "no data yet" state and values to zero.
    """
    latest = latest_nav(nav_series)
    if latest is None:
        return ValuationResult()

    units = 0.0
    invested = 0.0
    for row in investment_installments(investment, nav_series, as_of, config):
        if row.cancelled:
            continue
        units += row.units
        invested += row.net_amount

    logger.debug("Valued %s: %.4f units, invested %.2f", investment.id, units, invested)
    return ValuationResult(
        units=units,
        current_value=units * latest.price if latest.price > 0 else 0.0,
        invested_amount=invested,
    )


def aggregate_valuations(results: Iterable[ValuationResult]) -> ValuationResult:
    units = 0.0
    current_value = 0.0
    invested = 0.0
    for r in results:
        units += r.units
        current_value += r.current_value
        invested += r.invested_amount
    return ValuationResult(units=units, current_value=current_value, invested_amount=invested)


def value_of_all(
    investments: Iterable[Investment],
    nav_series: Sequence[NAVPoint],
    as_of: date,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ValuationResult:
    """Sum of ``value_of`` over several investments in the same fund."""
    return aggregate_valuations(value_of(inv, nav_series, as_of, config) for inv in investments)


# ═══════════════════════════════════════════════════════════════════════════
# Holding period helpers
# ═══════════════════════════════════════════════════════════════════════════

def earliest_investment_date(investments: Iterable[Investment]) -> date | None:
    return min((inv.start_date for inv in investments), default=None)


def investment_duration(investments: Sequence[Investment], as_of: date) -> str:
    """Holding period label: ``"7 months"``, ``"2 years"`` or ``"2 years 3 months"``."""
    earliest = earliest_investment_date(investments)
    if earliest is None or earliest >= as_of:
        return "0 months"

    delta = relativedelta(as_of, earliest)
    total_months = delta.years * 12 + delta.months
    if total_months < 12:
        return f"{total_months} month{'s' if total_months != 1 else ''}"

    years, months = divmod(total_months, 12)
    label = f"{years} year{'s' if years != 1 else ''}"
    if months:
        label += f" {months} month{'s' if months != 1 else ''}"
    return label
