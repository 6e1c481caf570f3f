"""Tests for NAV series parsing and the lookup policy."""

from __future__ import annotations

from datetime import date

import pytest

from fintools.engine.nav import (
    filter_nav_from,
    find_nav,
    is_nav_stale,
    merge_nav_series,
    nav_on,
    normalize_nav_series,
    parse_nav_series,
)
from fintools.models import NAVPoint


@pytest.fixture
def series() -> list[NAVPoint]:
    return [
        NAVPoint(date=date(2024, 1, 1), price=10.0),
        NAVPoint(date=date(2024, 1, 3), price=11.0),
        NAVPoint(date=date(2024, 1, 5), price=12.0),
    ]


class TestFindNav:
    def test_exact_match(self, series):
        assert find_nav(series, date(2024, 1, 3)).price == 11.0

    def test_gap_uses_next_point(self, series):
        assert find_nav(series, date(2024, 1, 2)).price == 11.0

    def test_before_series_uses_first_point(self, series):
        assert find_nav(series, date(2023, 12, 1)).price == 10.0

    def test_after_series_uses_latest_point(self, series):
        assert find_nav(series, date(2024, 1, 10)).price == 12.0

    def test_empty_series(self):
        assert find_nav([], date(2024, 1, 1)) is None
        assert nav_on([], date(2024, 1, 1)) == 0.0


class TestParseNavSeries:
    def test_provider_rows(self):
        rows = [
            {"date": "05-01-2024", "nav": "12.5"},
            {"date": "not-a-date", "nav": "1.0"},
            {"date": "03-01-2024", "nav": "N/A"},
            {"date": "01-01-2024", "nav": "10"},
        ]
        points = parse_nav_series(rows)
        assert [p.date for p in points] == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 5)]
        assert [p.price for p in points] == [10.0, 0.0, 12.5]

    def test_duplicate_dates_keep_first(self):
        rows = [{"date": "01-01-2024", "nav": "10"}, {"date": "01-01-2024", "nav": "99"}]
        assert [p.price for p in parse_nav_series(rows)] == [10.0]


class TestSeriesOperations:
    def test_normalize_sorts(self, series):
        assert normalize_nav_series(reversed(series)) == series

    def test_merge_earlier_series_wins(self, series):
        other = [
            NAVPoint(date=date(2024, 1, 3), price=500.0),
            NAVPoint(date=date(2024, 1, 4), price=501.0),
        ]
        merged = merge_nav_series(series, other)
        assert [p.price for p in merged] == [10.0, 11.0, 501.0, 12.0]

    def test_filter_from(self, series):
        assert len(filter_nav_from(series, date(2024, 1, 3))) == 2


class TestStaleness:
    def test_within_three_days_is_fresh(self, series):
        assert not is_nav_stale(series, date(2024, 1, 8))

    def test_older_is_stale(self, series):
        assert is_nav_stale(series, date(2024, 1, 9))

    def test_empty_is_stale(self):
        assert is_nav_stale([], date(2024, 1, 1))
