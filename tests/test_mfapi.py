"""Tests for the mfapi.in client (HTTP mocked)."""

from __future__ import annotations

from datetime import date

import pytest
import requests

from fintools.errors import NAVProviderError
from fintools.providers.mfapi import API_BASE, MFAPIClient


class _FakeResponse:
    def __init__(self, payload, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


HISTORY_PAYLOAD = {
    "meta": {
        "fund_house": "Example Mutual Fund",
        "scheme_type": "Open Ended Schemes",
        "scheme_category": "Equity Scheme - Large Cap Fund",
        "scheme_code": 119551,
        "scheme_name": "Example Bluechip Fund - Direct Plan - Growth",
        "isin_growth": "INF000000001",
        "unknown_upstream_key": "dropped",
    },
    "data": [
        {"date": "02-01-2024", "nav": "11.00"},
        {"date": "01-01-2024", "nav": "10.00"},
    ],
    "status": "SUCCESS",
}


@pytest.fixture
def calls(monkeypatch):
    """Record requests.get calls and answer from a url → payload map."""
    recorded = []
    responses = {}

    def fake_get(url, params=None, timeout=None):
        recorded.append((url, params, timeout))
        payload = responses.get(url)
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            return _FakeResponse({}, status_code=404)
        return _FakeResponse(payload)

    monkeypatch.setattr(requests, "get", fake_get)
    return recorded, responses


class TestHistory:
    def test_fetch_history_ascending(self, calls):
        recorded, responses = calls
        responses[f"{API_BASE}/mf/119551"] = HISTORY_PAYLOAD

        meta, series = MFAPIClient().fetch_history(119551, as_of=date(2024, 1, 10), days=30)

        assert meta.scheme_code == 119551
        assert meta.fund_house == "Example Mutual Fund"
        assert [p.price for p in series] == [10.0, 11.0]
        assert recorded[0][1] == {"startDate": "2023-12-11", "endDate": "2024-01-10"}
        assert recorded[0][2] == 10

    def test_fetch_latest(self, calls):
        _, responses = calls
        responses[f"{API_BASE}/mf/119551/latest"] = {**HISTORY_PAYLOAD, "data": HISTORY_PAYLOAD["data"][:1]}
        meta, latest = MFAPIClient().fetch_latest(119551)
        assert latest.date == date(2024, 1, 2)
        assert meta.isin_growth == "INF000000001"

    def test_http_error_raises(self, calls):
        with pytest.raises(NAVProviderError):
            MFAPIClient().fetch_history(1, as_of=date(2024, 1, 1))

    def test_connection_error_raises(self, calls):
        _, responses = calls
        responses[f"{API_BASE}/mf/1"] = requests.ConnectionError("down")
        with pytest.raises(NAVProviderError):
            MFAPIClient().fetch_history(1, as_of=date(2024, 1, 1))


class TestSearchAndDetails:
    def test_search_camel_case_rows(self, calls):
        recorded, responses = calls
        responses[f"{API_BASE}/mf/search"] = [
            {"schemeCode": 119551, "schemeName": "Example Bluechip Fund"},
        ]
        results = MFAPIClient().search("bluechip")
        assert results[0].scheme_code == 119551
        assert results[0].scheme_name == "Example Bluechip Fund"
        assert recorded[0][1] == {"q": "bluechip"}

    def test_details_scaled_aum(self, calls):
        _, responses = calls
        client = MFAPIClient()
        responses[f"{client.details_url}INF000000001"] = [
            {"code": "EX-GR", "expense_ratio": 0.65, "aum": 12_345, "fund_manager": "A. Manager"},
        ]
        details = client.fetch_details("INF000000001")
        assert details.aum == pytest.approx(1_234.5)
        assert details.expense_ratio == 0.65

    def test_details_string_aum_is_scaled(self, calls):
        _, responses = calls
        client = MFAPIClient()
        responses[f"{client.details_url}INF000000002"] = [{"code": "EX-GR", "aum": "12345.0"}]
        assert client.fetch_details("INF000000002").aum == pytest.approx(1_234.5)

    def test_details_unparseable_aum_is_none(self, calls):
        _, responses = calls
        client = MFAPIClient()
        responses[f"{client.details_url}INF000000003"] = [{"code": "EX-GR", "aum": "n/a"}]
        assert client.fetch_details("INF000000003") is None

    def test_details_missing_is_none(self, calls):
        assert MFAPIClient().fetch_details("INF404") is None

    def test_list_latest(self, calls):
        recorded, responses = calls
        responses[f"{API_BASE}/mf/latest"] = [{"schemeCode": 1, "schemeName": "A"}]
        assert [m.scheme_code for m in MFAPIClient().list_latest(limit=5)] == [1]
        assert recorded[0][1] == {"limit": 5, "offset": 0}
