"""FastAPI server — HTTP access to deposit projection, fund valuation and metrics.

Run with:
    uvicorn fintools.api.server:app --reload --port 8000

Or:
    python -m fintools.api.server

Endpoints:
    GET  /health             — liveness check
    POST /deposits/fd        — fixed deposit projection by fiscal year
    POST /deposits/rd        — recurring deposit projection by fiscal year
    POST /ppf                — 15-year PPF projection
    POST /funds/valuation    — units, value and installment ledger for one fund
    POST /funds/metrics      — gain, CAGR, XIRR and one-day change for one fund
    POST /portfolio/metrics  — the same metrics across several funds
    POST /schemes/returns    — trailing timeframe returns and NAV statistics
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fintools.config.deposit import DepositTerms, RecurringDepositTerms
from fintools.config.engine import DEFAULT_ENGINE_CONFIG
from fintools.config.investment import FundHoldings, Investment
from fintools.config.ppf import PPFPlan
from fintools.engine.deposit import parse_deposit_terms, project_deposit, project_recurring_deposit
from fintools.engine.nav import is_nav_stale, latest_nav, normalize_nav_series
from fintools.engine.ppf import calculate_ppf
from fintools.engine.valuation import generate_installments, investment_duration, value_of_all
from fintools.errors import InvalidInputError
from fintools.finance.metrics import compute_metrics, compute_portfolio_metrics
from fintools.finance.timeframes import calculate_scheme_returns, nav_statistics
from fintools.models.results import (
    DepositSummary,
    Installment,
    NAVPoint,
    NavStatistics,
    PPFSummary,
    ReturnMetrics,
    TimeframeReturn,
    ValuationResult,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="fintools Returns Engine API",
    version="1.0",
    description=(
        "Deposit projection by Indian fiscal year, NAV-indexed mutual fund "
        "valuation, and XIRR/CAGR return metrics."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class DepositRequest(BaseModel):
    """Request body for /deposits/fd and /deposits/rd."""
    terms: dict[str, Any] = Field(
        description="Deposit form fields. Example: "
                    "{'start_date': '2023-04-01', 'principal': 100000, 'rate': 6, 'compounding': 'annually'}",
    )


class FundRequest(BaseModel):
    """Request body for the single-fund endpoints."""
    investments: list[Investment] = Field(default_factory=list)
    nav_series: list[NAVPoint] = Field(
        default_factory=list,
        description="NAV history of the fund. Any order; duplicates keep the first point.",
    )
    as_of: datetime.date | None = Field(default=None, description="Valuation date. Defaults to today.")


class PortfolioRequest(BaseModel):
    """Request body for /portfolio/metrics."""
    funds: list[FundHoldings] = Field(default_factory=list)
    as_of: datetime.date | None = None


class SchemeReturnsRequest(BaseModel):
    """Request body for /schemes/returns."""
    nav_series: list[NAVPoint]
    as_of: datetime.date | None = None


class ValuationResponse(BaseModel):
    """Response from /funds/valuation."""
    valuation: ValuationResult
    installments: list[Installment]
    duration: str
    nav_stale: bool


class SchemeReturnsResponse(BaseModel):
    """Response from /schemes/returns."""
    returns: dict[str, TimeframeReturn]
    statistics: NavStatistics | None = None


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _as_of(value: datetime.date | None) -> datetime.date:
    return value if value is not None else datetime.date.today()


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.post("/deposits/fd", response_model=DepositSummary)
def deposit_fd(req: DepositRequest):
    """Project a fixed deposit to maturity, split by fiscal year.

    Malformed dates or tenure fields return 422.
    """
    return project_deposit(parse_deposit_terms(req.terms, DepositTerms))


@app.post("/deposits/rd", response_model=DepositSummary)
def deposit_rd(req: DepositRequest):
    """Project a recurring deposit to maturity, split by fiscal year."""
    return project_recurring_deposit(parse_deposit_terms(req.terms, RecurringDepositTerms))


@app.post("/ppf", response_model=PPFSummary)
def ppf_projection(plan: PPFPlan):
    return calculate_ppf(plan)


@app.post("/funds/valuation", response_model=ValuationResponse)
def fund_valuation(req: FundRequest):
    """Units held, current value and the dated installment ledger."""
    as_of = _as_of(req.as_of)
    series = normalize_nav_series(req.nav_series)
    return ValuationResponse(
        valuation=value_of_all(req.investments, series, as_of),
        installments=generate_installments(req.investments, series, as_of),
        duration=investment_duration(req.investments, as_of),
        nav_stale=is_nav_stale(series, as_of, DEFAULT_ENGINE_CONFIG.nav_stale_after_days),
    )


@app.post("/funds/metrics", response_model=ReturnMetrics)
def fund_metrics(req: FundRequest):
    return compute_metrics(req.investments, normalize_nav_series(req.nav_series), _as_of(req.as_of))


@app.post("/portfolio/metrics", response_model=ReturnMetrics)
def portfolio_metrics(req: PortfolioRequest):
    """Metrics across funds. Each fund carries its own NAV series."""
    funds = [
        fund.model_copy(update={"nav_series": tuple(normalize_nav_series(fund.nav_series))})
        for fund in req.funds
    ]
    return compute_portfolio_metrics(funds, _as_of(req.as_of))


@app.post("/schemes/returns", response_model=SchemeReturnsResponse)
def scheme_returns(req: SchemeReturnsRequest):
    """Trailing 1M–10Y point-to-point returns from the latest NAV."""
    series = normalize_nav_series(req.nav_series)
    latest = latest_nav(series)
    current_nav = latest.price if latest is not None else 0.0
    return SchemeReturnsResponse(
        returns=calculate_scheme_returns(series, current_nav, _as_of(req.as_of)),
        statistics=nav_statistics(series),
    )


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "fintools.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
