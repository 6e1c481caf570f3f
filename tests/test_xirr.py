"""Tests for the XIRR Newton-Raphson solver."""

from __future__ import annotations

from datetime import date

import numpy as np
import pytest

from fintools.config import EngineConfig, SolverConfig
from fintools.finance.xirr import npv_at, solve_xirr, year_offsets
from fintools.models import CashFlow


def _doubling_flows() -> list[CashFlow]:
    return [
        CashFlow(date=date(2022, 1, 1), amount=-9_999.5),
        CashFlow(date=date(2024, 1, 1), amount=19_999.0),
    ]


class TestSolveXirr:
    def test_doubling_over_two_years(self):
        t = 730 / 365.25
        expected = (2 ** (1 / t) - 1) * 100
        solution = solve_xirr(_doubling_flows())
        assert solution.converged
        assert solution.rate == pytest.approx(expected, rel=1e-3)
        assert abs(solution.residual) < 1e-6

    def test_order_independent(self):
        flows = _doubling_flows()
        assert solve_xirr(list(reversed(flows))) == solve_xirr(flows)

    def test_fewer_than_two_flows(self):
        solution = solve_xirr([CashFlow(date=date(2024, 1, 1), amount=-100)])
        assert solution.rate == 0
        assert not solution.converged
        assert solution.iterations == 0

    def test_no_sign_change_does_not_converge(self):
        flows = [
            CashFlow(date=date(2023, 1, 1), amount=-100),
            CashFlow(date=date(2024, 1, 1), amount=-100),
        ]
        assert not solve_xirr(flows).converged

    def test_iteration_cap(self):
        config = EngineConfig(solver=SolverConfig(max_iterations=1))
        solution = solve_xirr(_doubling_flows(), config)
        assert not solution.converged
        assert solution.iterations == 1

    def test_short_horizon_loss(self):
        flows = [
            CashFlow(date=date(2024, 1, 1), amount=-1_000),
            CashFlow(date=date(2024, 1, 11), amount=950),
        ]
        solution = solve_xirr(flows)
        assert solution.converged
        assert solution.rate < 0
        assert solution.rate == pytest.approx((0.95 ** (365.25 / 10) - 1) * 100, rel=1e-3)

    def test_break_even_is_zero(self):
        flows = [
            CashFlow(date=date(2023, 1, 1), amount=-1_000),
            CashFlow(date=date(2024, 1, 1), amount=1_000),
        ]
        assert solve_xirr(flows).rate == pytest.approx(0, abs=1e-6)


class TestNpv:
    def test_offsets_from_first_flow(self):
        years = year_offsets(_doubling_flows())
        assert years[0] == 0
        assert years[1] == pytest.approx(730 / 365.25)

    def test_npv_at_zero_rate_is_sum(self):
        amounts = np.array([-100.0, 60.0, 60.0])
        years = np.array([0.0, 1.0, 2.0])
        npv, derivative = npv_at(0.0, years, amounts)
        assert npv == pytest.approx(20.0)
        assert derivative == pytest.approx(-(60.0 + 120.0))
