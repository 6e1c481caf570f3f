"""Mutual fund investment records — lump sums and SIPs.

Investments are the source of truth for every valuation: installments,
units and returns are always re-derived from them.  Records are frozen;
use ``fintools.store.repository`` operations to obtain modified copies.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fintools.dates import coerce_date
from fintools.models.results import NAVPoint


class SIPAmountModification(BaseModel):
    """A change of SIP amount applying to installments on/after ``effective_date``."""

    model_config = ConfigDict(frozen=True)

    effective_date: date
    amount: float = Field(ge=0)

    @field_validator("effective_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> date:
        return coerce_date(value)


class Investment(BaseModel):
    """One user-declared cash-flow intent against a mutual fund scheme."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable identifier within the repository")
    scheme_code: int = Field(description="Upstream scheme identifier")
    investment_type: Literal["lumpsum", "sip"] = "lumpsum"
    start_date: date = Field(description="Lump-sum date, or first SIP installment date")
    amount: float = Field(
        default=0.0, ge=0,
        description="Lump-sum amount. For SIPs, used as the base installment "
                    "when sip_amount is not set.",
    )

    # --- SIP only ---
    sip_amount: float | None = Field(default=None, ge=0, description="Base monthly installment")
    sip_monthly_date: int = Field(
        default=1, ge=1, le=31,
        description="Day of month for installments after the first. "
                    "Clamped to month end in shorter months.",
    )
    sip_end_date: date | None = Field(
        default=None,
        description="Set when the SIP is cancelled. None = active.",
    )
    sip_amount_modifications: tuple[SIPAmountModification, ...] = ()
    skipped_dates: tuple[date, ...] = Field(
        default=(),
        description="Installment dates the user explicitly skipped.",
    )

    @field_validator("start_date", "sip_end_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> date | None:
        if value is None:
            return None
        return coerce_date(value)

    @field_validator("skipped_dates", mode="before")
    @classmethod
    def _parse_skipped(cls, value: Any) -> tuple[date, ...]:
        return tuple(coerce_date(v) for v in (value or ()))

    @model_validator(mode="after")
    def _check_sip_window(self) -> Investment:
        if self.sip_end_date is not None and self.sip_end_date < self.start_date:
            raise ValueError("sip_end_date must not precede start_date")
        return self

    @property
    def is_sip(self) -> bool:
        return self.investment_type == "sip"

    @property
    def base_sip_amount(self) -> float:
        return self.sip_amount if self.sip_amount is not None else self.amount


class FundHoldings(BaseModel):
    """All investments in one scheme together with that scheme's NAV history."""

    model_config = ConfigDict(frozen=True)

    scheme_code: int
    investments: tuple[Investment, ...] = ()
    nav_series: tuple[NAVPoint, ...] = Field(
        default=(),
        description="Ascending by date, one point per date.",
    )
