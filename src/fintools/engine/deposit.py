"""Deposit projection — FD and RD growth split by Indian fiscal year.

For each FY sub-interval of the deposit's life:

  A = P · (1 + r/n)^(n·t)     t = whole days in the interval / 365

The opening balance of a segment is the closing balance of the previous one,
so compounding carries across FY boundaries.  Segment interest is
``closing − opening − contribution``, floored at zero.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fintools.config.deposit import (
    COMPOUNDING_PERIODS_PER_YEAR,
    DepositTerms,
    RecurringDepositTerms,
)
from fintools.config.engine import DEFAULT_ENGINE_CONFIG, EngineConfig
from fintools.dates import add_tenure, parse_iso_date
from fintools.engine.fiscal_year import fy_label, fy_sub_intervals
from fintools.errors import InvalidInputError
from fintools.models.results import DepositSummary, FiscalYearSegment

logger = logging.getLogger(__name__)

TermsT = TypeVar("TermsT", bound=BaseModel)


def parse_deposit_terms(raw: Mapping[str, Any], model: type[TermsT] = DepositTerms) -> TermsT:
    """Build deposit terms from raw form fields.

    Unparseable numbers (e.g. a tenure of ``"two"``) and malformed dates
    raise ``InvalidInputError``; nothing is coerced to a default.
    """
    try:
        terms = model.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid deposit terms: {exc}") from exc
    parse_iso_date(terms.start_date)
    return terms


def compounded_amount(
    principal: float,
    annual_rate: float,
    start: date,
    end: date,
    periods_per_year: int,
    days_per_year: float = 365.0,
) -> float:
    """Grow ``principal`` from ``start`` to ``end`` at ``annual_rate`` (a fraction)."""
    years = (end - start).days / days_per_year
    if years <= 0:
        return principal
    rate_per_period = annual_rate / periods_per_year
    return principal * (1 + rate_per_period) ** (years * periods_per_year)


def _maturity_date(terms: DepositTerms | RecurringDepositTerms) -> tuple[date, date]:
    start = parse_iso_date(terms.start_date)
    end = add_tenure(start, terms.tenure_years, terms.tenure_months, terms.tenure_days)
    return start, end


def project_deposit(
    terms: DepositTerms,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> DepositSummary:
    """Project a fixed deposit to maturity.

    Raises
    ------
    InvalidInputError
        If ``terms.start_date`` is not a valid ``YYYY-MM-DD`` date.
    """
    start, end = _maturity_date(terms)
    rate = terms.rate / 100
    n = COMPOUNDING_PERIODS_PER_YEAR[terms.compounding]

    balance = terms.principal
    segments: list[FiscalYearSegment] = []
    for year, period_start, period_end in fy_sub_intervals(start, end):
        closing = compounded_amount(
            balance, rate, period_start, period_end, n, config.deposit_days_per_year,
        )
        segments.append(FiscalYearSegment(
            fy_label=fy_label(year),
            fy_start_year=year,
            period_start=period_start,
            period_end=period_end,
            opening_balance=balance,
            interest=max(0.0, closing - balance),
            closing_balance=closing,
        ))
        balance = closing

    logger.debug(
        "FD %s → %s: %d segments, maturity %.2f", start, end, len(segments), balance,
    )
    return DepositSummary(
        total_invested=terms.principal,
        total_interest=balance - terms.principal,
        maturity_amount=balance,
        maturity_date=end,
        segments=segments,
    )


def recurring_installment_dates(start: date, end: date) -> list[date]:
    """Installment on ``start`` and on the same day of every later month before ``end``."""
    dates: list[date] = []
    k = 0
    while True:
        d = add_tenure(start, months=k)
        if d >= end:
            break
        dates.append(d)
        k += 1
    return dates


def project_recurring_deposit(
    terms: RecurringDepositTerms,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> DepositSummary:
    """Project a recurring deposit to maturity.

    Each installment compounds from its own deposit date.  An installment
    dated inside an FY rollover gap (or on a zero-length first interval)
    starts growing at the next segment's start.
    """
    start, end = _maturity_date(terms)
    rate = terms.rate / 100
    n = COMPOUNDING_PERIODS_PER_YEAR[terms.compounding]
    days = config.deposit_days_per_year
    amount = terms.monthly_installment

    pending = recurring_installment_dates(start, end)
    balance = 0.0
    segments: list[FiscalYearSegment] = []
    for year, period_start, period_end in fy_sub_intervals(start, end):
        closing = compounded_amount(balance, rate, period_start, period_end, n, days)
        contribution = 0.0
        while pending and pending[0] <= period_end:
            deposit_date = max(pending.pop(0), period_start)
            closing += compounded_amount(amount, rate, deposit_date, period_end, n, days)
            contribution += amount
        segments.append(FiscalYearSegment(
            fy_label=fy_label(year),
            fy_start_year=year,
            period_start=period_start,
            period_end=period_end,
            opening_balance=balance,
            contribution=contribution,
            interest=max(0.0, closing - balance - contribution),
            closing_balance=closing,
        ))
        balance = closing

    total_invested = sum(s.contribution for s in segments)
    logger.debug(
        "RD %s → %s: %.2f deposited, maturity %.2f", start, end, total_invested, balance,
    )
    return DepositSummary(
        total_invested=total_invested,
        total_interest=balance - total_invested,
        maturity_amount=balance,
        maturity_date=end,
        segments=segments,
    )
