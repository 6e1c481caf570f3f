"""Shared test fixtures — sample investments and NAV histories."""

from __future__ import annotations

from datetime import date

import pytest

from fintools.config import DepositTerms, Investment
from fintools.models import NAVPoint


@pytest.fixture
def fd_terms() -> DepositTerms:
    """₹1,00,000 at 6% compounded annually for one year from 1 April 2023."""
    return DepositTerms(
        start_date="2023-04-01",
        principal=100_000,
        rate=6.0,
        compounding="annually",
        tenure_years=1,
    )


@pytest.fixture
def sip_nav_series() -> list[NAVPoint]:
    return [
        NAVPoint(date=date(2024, 1, 1), price=10.0),
        NAVPoint(date=date(2024, 2, 1), price=20.0),
    ]


@pytest.fixture
def sip_investment() -> Investment:
    return Investment(
        id="sip-1",
        scheme_code=119551,
        investment_type="sip",
        start_date="01-01-2024",
        sip_amount=1000,
        sip_monthly_date=1,
    )


@pytest.fixture
def sip_as_of() -> date:
    return date(2024, 2, 15)


@pytest.fixture
def doubling_as_of() -> date:
    return date(2024, 1, 1)


@pytest.fixture
def doubling_series() -> list[NAVPoint]:
    """NAV doubles from 10 to 20 over the two years before 1 Jan 2024."""
    return [
        NAVPoint(date=date(2022, 1, 1), price=10.0),
        NAVPoint(date=date(2023, 12, 31), price=20.0),
    ]


@pytest.fixture
def doubling_lumpsum() -> Investment:
    return Investment(
        id="ls-1",
        scheme_code=120503,
        investment_type="lumpsum",
        start_date=date(2022, 1, 1),
        amount=10_000,
    )
