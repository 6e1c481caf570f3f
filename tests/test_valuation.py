"""Tests for NAV-indexed valuation — stamp duty, SIP schedules, units and value."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from fintools.config import EngineConfig, Investment, SIPAmountModification
from fintools.engine.valuation import (
    generate_installments,
    investment_duration,
    purchase_units,
    sip_schedule,
    split_stamp_duty,
    value_of,
    value_of_all,
)
from fintools.models import NAVPoint


def _flat_series(*dates: date, price: float = 10.0) -> list[NAVPoint]:
    return [NAVPoint(date=d, price=price) for d in dates]


def _sip(**overrides) -> Investment:
    fields = dict(
        id="sip-x", scheme_code=1, investment_type="sip",
        start_date=date(2024, 1, 1), sip_amount=1_000, sip_monthly_date=1,
    )
    fields.update(overrides)
    return Investment(**fields)


# ═══════════════════════════════════════════════════════════════════════════
# Stamp duty and unit purchase
# ═══════════════════════════════════════════════════════════════════════════


class TestStampDuty:
    def test_split(self):
        net, duty = split_stamp_duty(10_000)
        assert duty == pytest.approx(0.5)
        assert net == pytest.approx(9_999.5)

    @pytest.mark.parametrize("gross", [0, 1, 999.99, 1_000_000])
    def test_conservation(self, gross):
        net, duty = split_stamp_duty(gross)
        assert net + duty == pytest.approx(gross, abs=1e-9)

    def test_custom_rate(self):
        assert split_stamp_duty(1_000, rate=0.001) == pytest.approx((999.0, 1.0))

    def test_zero_nav_allots_no_units(self):
        purchase = purchase_units(1_000, 0.0)
        assert purchase.units == 0
        assert purchase.net_amount == pytest.approx(999.95)


# ═══════════════════════════════════════════════════════════════════════════
# SIP schedule
# ═══════════════════════════════════════════════════════════════════════════


class TestSipSchedule:
    def test_monthly_dates_up_to_as_of(self, sip_investment, sip_as_of):
        assert sip_schedule(sip_investment, sip_as_of) == [date(2024, 1, 1), date(2024, 2, 1)]

    def test_day_clamps_to_month_end(self):
        sip = _sip(start_date=date(2024, 1, 31), sip_monthly_date=31)
        assert sip_schedule(sip, date(2024, 4, 15)) == [
            date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31),
        ]

    def test_first_installment_on_start_date(self):
        sip = _sip(start_date=date(2024, 1, 20), sip_monthly_date=5)
        assert sip_schedule(sip, date(2024, 3, 10)) == [
            date(2024, 1, 20), date(2024, 2, 5), date(2024, 3, 5),
        ]

    def test_end_date_stops_schedule(self):
        sip = _sip(sip_end_date=date(2024, 2, 15))
        assert sip_schedule(sip, date(2024, 6, 1)) == [date(2024, 1, 1), date(2024, 2, 1)]


# ═══════════════════════════════════════════════════════════════════════════
# Valuation
# ═══════════════════════════════════════════════════════════════════════════


class TestValueOf:
    def test_sip_two_installments(self, sip_investment, sip_nav_series, sip_as_of):
        result = value_of(sip_investment, sip_nav_series, sip_as_of)
        assert result.units == pytest.approx(99.995 + 49.9975)
        assert result.current_value == pytest.approx(result.units * 20)
        assert result.invested_amount == pytest.approx(2 * 999.95)

    def test_installment_ledger(self, sip_investment, sip_nav_series, sip_as_of):
        rows = generate_installments([sip_investment], sip_nav_series, sip_as_of)
        assert [r.date for r in rows] == [date(2024, 1, 1), date(2024, 2, 1)]
        assert [r.nav for r in rows] == [10.0, 20.0]
        assert rows[0].units == pytest.approx(99.995)
        assert rows[1].units == pytest.approx(49.9975)
        assert all(r.installment_type == "sip-installment" for r in rows)

    def test_installment_on_as_of_is_excluded(self, sip_investment, sip_nav_series):
        rows = generate_installments([sip_investment], sip_nav_series, date(2024, 2, 1))
        assert [r.date for r in rows] == [date(2024, 1, 1)]

    def test_future_lumpsum_excluded(self, sip_nav_series):
        lumpsum = Investment(id="ls", scheme_code=1, start_date=date(2024, 3, 1), amount=5_000)
        result = value_of(lumpsum, sip_nav_series, date(2024, 3, 1))
        assert result.units == 0
        assert result.invested_amount == 0

    def test_lumpsum_dated_tomorrow_excluded(self, sip_nav_series):
        as_of = date(2024, 3, 1)
        lumpsum = Investment(id="ls", scheme_code=1, start_date=as_of + timedelta(days=1), amount=5_000)
        assert generate_installments([lumpsum], sip_nav_series, as_of) == []
        result = value_of(lumpsum, sip_nav_series, as_of)
        assert (result.units, result.current_value, result.invested_amount) == (0, 0, 0)

    def test_lumpsum(self, doubling_lumpsum, doubling_series, doubling_as_of):
        result = value_of(doubling_lumpsum, doubling_series, doubling_as_of)
        assert result.units == pytest.approx(999.95)
        assert result.current_value == pytest.approx(19_999)

    def test_empty_series_values_to_zero(self, sip_investment, sip_as_of):
        result = value_of(sip_investment, [], sip_as_of)
        assert (result.units, result.current_value, result.invested_amount) == (0, 0, 0)

    def test_zero_nav_point_allots_nothing(self, sip_investment, sip_as_of):
        series = [NAVPoint(date=date(2024, 1, 1), price=0.0), NAVPoint(date=date(2024, 2, 1), price=20.0)]
        result = value_of(sip_investment, series, sip_as_of)
        assert result.units == pytest.approx(49.9975)

    def test_amount_modification(self):
        sip = _sip(sip_amount_modifications=(
            SIPAmountModification(effective_date=date(2024, 2, 1), amount=2_000),
        ))
        series = _flat_series(date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1))
        rows = generate_installments([sip], series, date(2024, 3, 15))
        assert [r.gross_amount for r in rows] == [1_000, 2_000, 2_000]

    def test_base_amount_falls_back_to_amount(self):
        sip = _sip(sip_amount=None, amount=500)
        rows = generate_installments([sip], _flat_series(date(2024, 1, 1)), date(2024, 1, 2))
        assert rows[0].gross_amount == 500

    def test_skipped_date_is_cancelled(self):
        sip = _sip(skipped_dates=(date(2024, 2, 1),))
        series = _flat_series(date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1))
        rows = generate_installments([sip], series, date(2024, 3, 15))
        assert [r.cancelled for r in rows] == [False, True, False]
        assert rows[1].units == 0
        assert value_of(sip, series, date(2024, 3, 15)).units == pytest.approx(2 * 99.995)

    def test_custom_stamp_duty(self, doubling_lumpsum, doubling_series, doubling_as_of):
        config = EngineConfig(stamp_duty_rate=0)
        result = value_of(doubling_lumpsum, doubling_series, doubling_as_of, config)
        assert result.units == pytest.approx(1_000)

    def test_value_of_all_sums(self, sip_investment, sip_nav_series, sip_as_of):
        single = value_of(sip_investment, sip_nav_series, sip_as_of)
        combined = value_of_all([sip_investment, sip_investment], sip_nav_series, sip_as_of)
        assert combined.units == pytest.approx(2 * single.units)
        assert combined.current_value == pytest.approx(2 * single.current_value)


class TestInvestmentDuration:
    @pytest.mark.parametrize("as_of,expected", [
        (date(2024, 8, 1), "7 months"),
        (date(2024, 2, 1), "1 month"),
        (date(2026, 1, 1), "2 years"),
        (date(2026, 4, 15), "2 years 3 months"),
    ])
    def test_labels(self, sip_investment, as_of, expected):
        assert investment_duration([sip_investment], as_of) == expected

    def test_no_investments(self):
        assert investment_duration([], date(2024, 1, 1)) == "0 months"
