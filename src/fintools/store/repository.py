"""Investment store — the user's declared investments and their edits.

The engine never mutates investments.  Edits (SIP amount changes, cancel,
skip) produce new frozen ``Investment`` records, and readers receive an
immutable ``PortfolioSnapshot`` so a valuation can never observe a
half-applied edit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from fintools.config.investment import Investment, SIPAmountModification
from fintools.dates import coerce_date
from fintools.errors import InvalidInputError, InvestmentNotFoundError

logger = logging.getLogger(__name__)


class PortfolioSnapshot(BaseModel):
    """Point-in-time, read-only view of every stored investment."""

    model_config = ConfigDict(frozen=True)

    investments: tuple[Investment, ...] = ()

    def __len__(self) -> int:
        return len(self.investments)

    @property
    def scheme_codes(self) -> list[int]:
        """Distinct scheme codes, in first-seen order."""
        return list(dict.fromkeys(inv.scheme_code for inv in self.investments))

    def for_scheme(self, scheme_code: int) -> list[Investment]:
        return [inv for inv in self.investments if inv.scheme_code == scheme_code]

    def by_scheme(self) -> dict[int, list[Investment]]:
        return {code: self.for_scheme(code) for code in self.scheme_codes}


class InvestmentRepository(Protocol):
    """Persistence boundary for investments."""

    def get(self, investment_id: str) -> Investment:
        ...

    def list(self) -> PortfolioSnapshot:
        ...

    def add(self, investment: Investment) -> Investment:
        ...

    def update(self, investment_id: str, **changes: Any) -> Investment:
        ...

    def remove(self, investment_id: str) -> None:
        ...

    def modify_sip_amount(self, investment_id: str, effective_date: date, amount: float) -> Investment:
        ...

    def cancel_sip(self, investment_id: str, end_date: date) -> Investment:
        ...

    def skip_installment(self, investment_id: str, installment_date: date) -> Investment:
        ...


class InMemoryInvestmentRepository:
    """Dict-backed repository, keyed by investment id in insertion order."""

    def __init__(self, investments: Iterable[Investment] = ()):
        self._items: dict[str, Investment] = {}
        for investment in investments:
            self.add(investment)

    def get(self, investment_id: str) -> Investment:
        try:
            return self._items[investment_id]
        except KeyError:
            raise InvestmentNotFoundError(investment_id) from None

    def list(self) -> PortfolioSnapshot:
        return PortfolioSnapshot(investments=tuple(self._items.values()))

    def add(self, investment: Investment) -> Investment:
        if investment.id in self._items:
            raise InvalidInputError(f"Investment {investment.id!r} already exists")
        self._items[investment.id] = investment
        logger.debug("Added investment %s (scheme %d)", investment.id, investment.scheme_code)
        return investment

    def update(self, investment_id: str, **changes: Any) -> Investment:
        """Replace fields of an investment; the result is re-validated."""
        current = self.get(investment_id)
        if "id" in changes and changes["id"] != investment_id:
            raise InvalidInputError("Investment id cannot be changed")
        updated = Investment.model_validate({**current.model_dump(), **changes})
        self._items[investment_id] = updated
        return updated

    def remove(self, investment_id: str) -> None:
        self.get(investment_id)
        del self._items[investment_id]
        logger.debug("Removed investment %s", investment_id)

    # --- SIP edits ---

    def _sip(self, investment_id: str) -> Investment:
        investment = self.get(investment_id)
        if not investment.is_sip:
            raise InvalidInputError(f"Investment {investment_id!r} is not a SIP")
        return investment

    def modify_sip_amount(self, investment_id: str, effective_date: date, amount: float) -> Investment:
        """Change the installment amount from ``effective_date`` onwards."""
        investment = self._sip(investment_id)
        modification = SIPAmountModification(effective_date=effective_date, amount=amount)
        modifications = tuple(sorted(
            (*investment.sip_amount_modifications, modification),
            key=lambda m: m.effective_date,
        ))
        logger.info("SIP %s amount → %.2f from %s", investment_id, amount, modification.effective_date)
        return self.update(investment_id, sip_amount_modifications=modifications)

    def cancel_sip(self, investment_id: str, end_date: date) -> Investment:
        """Stop a SIP; no installments are generated after ``end_date``."""
        self._sip(investment_id)
        logger.info("SIP %s cancelled as of %s", investment_id, end_date)
        return self.update(investment_id, sip_end_date=coerce_date(end_date))

    def skip_installment(self, investment_id: str, installment_date: date) -> Investment:
        """Mark one scheduled installment as skipped.  Idempotent."""
        investment = self._sip(investment_id)
        skipped_on = coerce_date(installment_date)
        if skipped_on in investment.skipped_dates:
            return investment
        skipped = tuple(sorted((*investment.skipped_dates, skipped_on)))
        logger.info("SIP %s installment on %s skipped", investment_id, skipped_on)
        return self.update(investment_id, skipped_dates=skipped)
