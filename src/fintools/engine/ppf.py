"""PPF projection — 15 fiscal years of simple annual interest, credited yearly.

Per FY:
  interest = opening × rate
           + Σ contribution × rate × (days until next 1 April) / 365
  closing  = opening + contributions + interest
"""

from __future__ import annotations

import logging
from datetime import date

from fintools.config.ppf import PPF_MATURITY_YEARS, PPFContribution, PPFPlan
from fintools.engine.fiscal_year import fy_end_date, fy_label, fy_start_date
from fintools.models.results import FiscalYearSegment, PPFSummary

logger = logging.getLogger(__name__)

DAYS_IN_FY = 365


def pro_rata_interest(amount: float, rate_pct: float, deposited_on: date, fy_year: int) -> float:
    """Interest on one contribution for the rest of its FY.

    Contributions dated before the FY start earn the full year.
    """
    if deposited_on < fy_start_date(fy_year):
        return amount * (rate_pct / 100)
    next_fy_start = fy_start_date(fy_year + 1)
    days_remaining = max(0, (next_fy_start - deposited_on).days)
    return amount * (rate_pct / 100) * days_remaining / DAYS_IN_FY


def _contribution_date(contribution: PPFContribution, fy_year: int) -> date:
    return contribution.date or fy_start_date(fy_year)


def calculate_ppf(plan: PPFPlan) -> PPFSummary:
    """Project a PPF account over its 15-year maturity period."""
    by_year = {y.year: y for y in plan.years}
    end_year = plan.start_year + PPF_MATURITY_YEARS - 1

    balance = 0.0
    total_invested = 0.0
    total_interest = 0.0
    segments: list[FiscalYearSegment] = []

    for year in range(plan.start_year, end_year + 1):
        entry = by_year.get(year)
        contributions = entry.contributions if entry else []
        rate = plan.default_interest_rate
        if entry is not None and entry.interest_rate is not None:
            rate = entry.interest_rate

        opening = balance
        interest = opening * (rate / 100) if opening > 0 else 0.0
        deposited = sum(c.amount for c in contributions)
        for c in contributions:
            interest += pro_rata_interest(c.amount, rate, _contribution_date(c, year), year)

        balance = opening + deposited + interest
        total_invested += deposited
        total_interest += interest
        segments.append(FiscalYearSegment(
            fy_label=fy_label(year),
            fy_start_year=year,
            period_start=fy_start_date(year),
            period_end=fy_end_date(year),
            opening_balance=opening,
            contribution=deposited,
            interest=interest,
            closing_balance=balance,
        ))

    absolute_return = balance - total_invested
    logger.debug("PPF FY%d–FY%d: invested %.2f, maturity %.2f",
                 plan.start_year, end_year, total_invested, balance)
    return PPFSummary(
        total_invested=total_invested,
        total_interest=total_interest,
        maturity_amount=balance,
        absolute_return=absolute_return,
        absolute_return_pct=(absolute_return / total_invested * 100) if total_invested > 0 else 0.0,
        segments=segments,
    )
