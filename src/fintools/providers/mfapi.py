"""mfapi.in client — scheme search, metadata and NAV history.

The API returns NAV rows newest first as ``{"date": "DD-MM-YYYY",
"nav": "123.4567"}``; ``parse_nav_series`` turns them into an ascending
series.  Extended scheme facts come from a separate Kuvera mirror keyed by
ISIN and are best effort.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

import requests
from pydantic import ValidationError

from fintools.engine.nav import parse_nav_series
from fintools.errors import NAVProviderError
from fintools.models.results import NAVPoint
from fintools.models.scheme import SchemeDetails, SchemeMeta

logger = logging.getLogger(__name__)

API_BASE = "https://api.mfapi.in"
DETAILS_API_BASE = "https://mf.captnemo.in/kuvera/"
DEFAULT_HISTORY_DAYS = 3650


class MFAPIClient:
    def __init__(
        self,
        base_url: str = API_BASE,
        details_url: str = DETAILS_API_BASE,
        timeout: float = 10,
    ):
        self.base_url = base_url.rstrip("/")
        self.details_url = details_url
        self.timeout = timeout

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        try:
            resp = requests.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as err:
            logger.warning("NAV provider request failed for %s: %s", url, err)
            raise NAVProviderError(f"Request to {url} failed: {err}") from err
        except ValueError as err:
            raise NAVProviderError(f"Malformed JSON from {url}") from err

    def search(self, query: str) -> list[SchemeMeta]:
        rows = self._get_json(f"{self.base_url}/mf/search", {"q": query})
        return [SchemeMeta.model_validate(row) for row in rows or []]

    def list_latest(self, limit: int = 100, offset: int = 0) -> list[SchemeMeta]:
        rows = self._get_json(f"{self.base_url}/mf/latest", {"limit": limit, "offset": offset})
        return [SchemeMeta.model_validate(row) for row in rows or []]

    def fetch_latest(self, scheme_code: int) -> tuple[SchemeMeta, NAVPoint | None]:
        """Scheme metadata and its most recent NAV point."""
        payload = self._get_json(f"{self.base_url}/mf/{scheme_code}/latest")
        meta, series = self._parse_history(scheme_code, payload)
        return meta, (series[-1] if series else None)

    def fetch_history(
        self,
        scheme_code: int,
        as_of: date,
        days: int = DEFAULT_HISTORY_DAYS,
    ) -> tuple[SchemeMeta, list[NAVPoint]]:
        """NAV history for the ``days`` up to ``as_of``, ascending by date."""
        params = {
            "startDate": (as_of - timedelta(days=days)).isoformat(),
            "endDate": as_of.isoformat(),
        }
        payload = self._get_json(f"{self.base_url}/mf/{scheme_code}", params)
        meta, series = self._parse_history(scheme_code, payload)
        logger.debug("Fetched %d NAV points for scheme %d", len(series), scheme_code)
        return meta, series

    def fetch_details(self, isin: str) -> SchemeDetails | None:
        """Extended facts for an ISIN, or None when the mirror has nothing usable."""
        try:
            rows = self._get_json(f"{self.details_url}{isin}")
        except NAVProviderError:
            return None
        if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
            logger.debug("No scheme details for %s", isin)
            return None
        try:
            details = SchemeDetails.model_validate(rows[0])
        except ValidationError as err:
            logger.warning("Unusable scheme details for %s: %s", isin, err)
            return None
        # Scaled to ₹ crore
        if details.aum:
            details = details.model_copy(update={"aum": details.aum / 10})
        return details

    @staticmethod
    def _parse_history(scheme_code: int, payload: Any) -> tuple[SchemeMeta, list[NAVPoint]]:
        if not isinstance(payload, dict):
            raise NAVProviderError(f"Unexpected payload for scheme {scheme_code}")
        meta_raw = payload.get("meta") or {"scheme_code": scheme_code}
        meta = SchemeMeta.model_validate(meta_raw)
        return meta, parse_nav_series(payload.get("data") or [])
