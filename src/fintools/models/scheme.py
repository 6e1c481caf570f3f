"""Scheme metadata records from the upstream NAV/scheme API.

Upstream payloads are duck-typed JSON blobs with dozens of optional keys.
These models pin the subset the engine and hosts rely on; every other key is
dropped at parse time (``extra="ignore"``).  Bump ``SCHEME_SCHEMA_VERSION``
when a field is added or changes meaning.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

SCHEME_SCHEMA_VERSION = 1


class SchemeMeta(BaseModel):
    """Identity of a scheme, as returned alongside its NAV history."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    scheme_code: int = Field(validation_alias=AliasChoices("scheme_code", "schemeCode"))
    scheme_name: str = Field(
        default="", validation_alias=AliasChoices("scheme_name", "schemeName"),
    )
    fund_house: str | None = Field(
        default=None, validation_alias=AliasChoices("fund_house", "fundHouse"),
    )
    scheme_type: str | None = Field(
        default=None, validation_alias=AliasChoices("scheme_type", "schemeType"),
    )
    scheme_category: str | None = Field(
        default=None, validation_alias=AliasChoices("scheme_category", "schemeCategory"),
    )
    isin_growth: str | None = Field(
        default=None, validation_alias=AliasChoices("isin_growth", "isinGrowth"),
    )
    isin_div_reinvestment: str | None = Field(
        default=None,
        validation_alias=AliasChoices("isin_div_reinvestment", "isinDivReinvestment"),
    )
    schema_version: int = SCHEME_SCHEMA_VERSION


class SchemeDetails(BaseModel):
    """Extended scheme facts (plan limits, costs, ratings).

    All fields are optional: providers omit them freely.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    code: str | None = None
    name: str | None = None
    category: str | None = None
    plan: str | None = None
    fund_manager: str | None = Field(
        default=None, validation_alias=AliasChoices("fund_manager", "fundManager"),
    )
    expense_ratio: float | None = Field(
        default=None, validation_alias=AliasChoices("expense_ratio", "expenseRatio"),
    )
    aum: float | None = None
    """Assets under management, ₹ crore."""

    lump_min: float | None = Field(default=None, validation_alias=AliasChoices("lump_min", "lumpMin"))
    sip_min: float | None = Field(default=None, validation_alias=AliasChoices("sip_min", "sipMin"))
    lock_in_period: int | None = Field(
        default=None, validation_alias=AliasChoices("lock_in_period", "lockInPeriod"),
    )
    crisil_rating: str | None = Field(
        default=None, validation_alias=AliasChoices("crisil_rating", "crisilRating"),
    )
    volatility: float | None = None
    schema_version: int = SCHEME_SCHEMA_VERSION
