"""Result types — the contract between engine, metrics solver, and host.

Every model here is a pure, recomputable snapshot.  Nothing is cached by the
engine; hosts serialise these with ``model_dump()`` / ``model_dump_json()``.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════
# Fiscal-year segmentation (deposits + PPF)
# ═══════════════════════════════════════════════════════════════════════════

class FiscalYearPeriod(BaseModel):
    """The slice of one Indian fiscal year (Apr 1 – Mar 31) covered by a range."""

    model_config = ConfigDict(frozen=True)

    fy: str
    """Short label, e.g. ``2023-24``."""

    start_date: datetime.date
    """FY start, or the range start for the first FY."""

    end_date: datetime.date
    """FY end, or the range end for the last FY."""


class FiscalYearSegment(BaseModel):
    """One fiscal year of a deposit's life.  Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    fy_label: str
    """Display label, e.g. ``FY 2023-24``."""

    fy_start_year: int
    """Calendar year in which the FY starts (2023 for FY 2023-24)."""

    period_start: datetime.date
    period_end: datetime.date

    opening_balance: float
    """Closing balance of the previous segment (principal for the first)."""

    contribution: float = 0.0
    """Amount deposited during this FY (RD installments, PPF deposits). 0 for FD."""

    interest: float
    """Interest accrued in this FY. Floored at zero."""

    closing_balance: float


class DepositSummary(BaseModel):
    """Projection of a fixed or recurring deposit to maturity."""

    total_invested: float
    """Principal (FD) or sum of all installments (RD)."""

    total_interest: float
    """maturity_amount − total_invested."""

    maturity_amount: float
    maturity_date: datetime.date
    segments: list[FiscalYearSegment]


class PPFSummary(BaseModel):
    """15-year PPF account projection."""

    total_invested: float
    total_interest: float
    maturity_amount: float
    absolute_return: float
    absolute_return_pct: float
    segments: list[FiscalYearSegment]


# ═══════════════════════════════════════════════════════════════════════════
# NAV-indexed valuation
# ═══════════════════════════════════════════════════════════════════════════

class NAVPoint(BaseModel):
    """A fund's per-unit price on one date."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    price: float


class UnitPurchase(BaseModel):
    """Result of buying at one NAV after stamp duty."""

    model_config = ConfigDict(frozen=True)

    gross_amount: float
    stamp_duty: float
    net_amount: float
    """gross_amount − stamp_duty."""

    nav: float
    units: float
    """net_amount / nav, or 0 when nav ≤ 0."""


class Installment(BaseModel):
    """One concrete, dated purchase derived from an Investment."""

    model_config = ConfigDict(frozen=True)

    investment_id: str
    installment_type: Literal["lumpsum", "sip-installment"]
    date: datetime.date
    gross_amount: float
    nav: float
    stamp_duty: float
    net_amount: float
    units: float
    cancelled: bool = False
    """True for SIP dates the user skipped. Cancelled rows carry zero units."""


class ValuationResult(BaseModel):
    """Holdings of one Investment (or a sum of several) at the latest NAV."""

    model_config = ConfigDict(frozen=True)

    units: float = 0.0
    current_value: float = 0.0
    invested_amount: float = 0.0
    """Net of stamp duty."""


# ═══════════════════════════════════════════════════════════════════════════
# Return metrics
# ═══════════════════════════════════════════════════════════════════════════

class CashFlow(BaseModel):
    """Signed, dated cash flow. Purchases are negative, the final valuation positive."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    amount: float


class XIRRSolution(BaseModel):
    """Newton-Raphson outcome, including diagnostics for callers that need them."""

    model_config = ConfigDict(frozen=True)

    rate: float = 0.0
    """Annualised rate in percent (12.5 = 12.5%)."""

    converged: bool = False
    """True when |NPV| fell below tolerance. False for early exits and iteration cap."""

    iterations: int = 0
    residual: float = 0.0
    """NPV at the returned rate (last evaluated)."""


class OneDayChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    absolute_change: float = 0.0
    percentage_change: float = 0.0


class ReturnMetrics(BaseModel):
    """Aggregate performance snapshot for one fund or a whole portfolio."""

    model_config = ConfigDict(frozen=True)

    total_invested: float = 0.0
    total_current_value: float = 0.0
    absolute_gain: float = 0.0
    percentage_return: float = 0.0
    xirr: float = 0.0
    """Percent."""

    cagr: float = 0.0
    """Percent."""

    one_day_change: OneDayChange = Field(default_factory=OneDayChange)
    units: float = 0.0
    xirr_solution: XIRRSolution = Field(default_factory=XIRRSolution)


# ═══════════════════════════════════════════════════════════════════════════
# Scheme-level statistics
# ═══════════════════════════════════════════════════════════════════════════

class TimeframeReturn(BaseModel):
    """Point-to-point NAV return over one trailing timeframe."""

    timeframe_label: str
    days: int
    start_nav: float = 0.0
    end_nav: float = 0.0
    absolute_return: float = 0.0
    percentage_return: float = 0.0
    cagr: float = 0.0
    is_available: bool = False
    """False when the series does not reach back far enough."""


class NavStatistics(BaseModel):
    """Summary statistics over a NAV window."""

    min_nav: float
    max_nav: float
    avg_nav: float
    start_nav: float
    end_nav: float
    change_pct: float
    start_date: datetime.date
    end_date: datetime.date
