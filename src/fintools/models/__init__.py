"""Result models — engine output contracts."""

from fintools.models.results import (
    CashFlow,
    DepositSummary,
    FiscalYearPeriod,
    FiscalYearSegment,
    Installment,
    NAVPoint,
    NavStatistics,
    OneDayChange,
    PPFSummary,
    ReturnMetrics,
    TimeframeReturn,
    UnitPurchase,
    ValuationResult,
    XIRRSolution,
)
from fintools.models.scheme import SchemeDetails, SchemeMeta

__all__ = [
    "CashFlow",
    "DepositSummary",
    "FiscalYearPeriod",
    "FiscalYearSegment",
    "Installment",
    "NAVPoint",
    "NavStatistics",
    "OneDayChange",
    "PPFSummary",
    "ReturnMetrics",
    "TimeframeReturn",
    "UnitPurchase",
    "ValuationResult",
    "XIRRSolution",
    "SchemeDetails",
    "SchemeMeta",
]
