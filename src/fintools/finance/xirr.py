"""XIRR — annualised return of irregularly dated cash flows.

Solves for r in

  Σ CF_i · (1 + r)^(−t_i) = 0        t_i = (date_i − date_0) / 365.25

by Newton-Raphson with the analytic derivative

  dNPV/dr = Σ −t_i · CF_i · (1 + r)^(−t_i − 1)

A step that would land on or below r = −100% is replaced by a step halfway
from the current rate towards −100%, so losses over short horizons still
converge.  Best effort: when the iteration cap is hit, the derivative
vanishes, or an iterate is not finite, the last rate is returned with
``converged=False``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from fintools.config.engine import DEFAULT_ENGINE_CONFIG, EngineConfig
from fintools.models.results import CashFlow, XIRRSolution

logger = logging.getLogger(__name__)


def year_offsets(cash_flows: Sequence[CashFlow], days_per_year: float = 365.25) -> np.ndarray:
    """Years from the first flow to each flow."""
    base = cash_flows[0].date
    return np.array([(cf.date - base).days / days_per_year for cf in cash_flows], dtype=float)


def npv_at(rate: float, years: np.ndarray, amounts: np.ndarray) -> tuple[float, float]:
    """NPV and dNPV/dr at ``rate`` (a fraction)."""
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        discount = (1.0 + rate) ** (-years)
        npv = float(np.sum(amounts * discount))
        derivative = float(np.sum(-years * amounts * discount / (1.0 + rate)))
    return npv, derivative


def solve_xirr(
    cash_flows: Sequence[CashFlow],
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> XIRRSolution:
    """Solve XIRR for signed cash flows.  Fewer than two flows → rate 0."""
    if len(cash_flows) < 2:
        return XIRRSolution()

    solver = config.solver
    flows = sorted(cash_flows, key=lambda cf: cf.date)
    years = year_offsets(flows, config.xirr_days_per_year)
    amounts = np.array([cf.amount for cf in flows], dtype=float)

    rate = solver.initial_guess
    npv = 0.0
    iterations = 0
    for iterations in range(1, solver.max_iterations + 1):
        npv, derivative = npv_at(rate, years, amounts)
        if abs(npv) < solver.tolerance:
            return XIRRSolution(rate=rate * 100, converged=True, iterations=iterations, residual=npv)
        if abs(derivative) < solver.min_derivative:
            logger.debug("XIRR derivative vanished at r=%.6f after %d iterations", rate, iterations)
            break
        next_rate = rate - npv / derivative
        if not math.isfinite(next_rate):
            logger.debug("XIRR iterate not finite at r=%.6f after %d iterations", rate, iterations)
            break
        if next_rate <= -1.0:
            next_rate = (rate - 1.0) / 2
        rate = next_rate
    else:
        logger.debug("XIRR hit the %d-iteration cap at r=%.6f", solver.max_iterations, rate)

    return XIRRSolution(
        rate=rate * 100,
        converged=False,
        iterations=iterations,
        residual=npv if math.isfinite(npv) else 0.0,
    )
