"""Deposit inputs — fixed deposit (FD) and recurring deposit (RD) terms."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CompoundingFrequency = Literal["monthly", "quarterly", "halfYearly", "annually"]

COMPOUNDING_PERIODS_PER_YEAR: dict[str, int] = {
    "monthly": 12,
    "quarterly": 4,
    "halfYearly": 2,
    "annually": 1,
}


class DepositTerms(BaseModel):
    """Fixed deposit: one principal, compounded until maturity.

    ``start_date`` stays a string so that a malformed date surfaces as an
    ``InvalidInputError`` from the projection call rather than at construction.
    """

    model_config = ConfigDict(frozen=True)

    start_date: str = Field(description="Deposit date, strict YYYY-MM-DD")
    principal: float = Field(default=100_000.0, ge=0, description="Amount deposited (₹)")
    rate: float = Field(default=6.5, ge=0, description="Annual nominal rate in percent (6.5 = 6.5%)")
    compounding: CompoundingFrequency = Field(
        default="quarterly",
        description="Compounding frequency. monthly=12, quarterly=4, halfYearly=2, annually=1 "
                    "periods per year.",
    )
    tenure_years: int = Field(default=1, ge=0)
    tenure_months: int = Field(default=0, ge=0)
    tenure_days: int = Field(default=0, ge=0)
    payout_type: Literal["maturity", "quarterly", "monthly"] = Field(
        default="maturity",
        description="Interest payout option. Informational only; the projection "
                    "always reports the cumulative (reinvested) balance.",
    )


class RecurringDepositTerms(BaseModel):
    """Recurring deposit: a fixed installment every month until maturity."""

    model_config = ConfigDict(frozen=True)

    start_date: str = Field(description="First installment date, strict YYYY-MM-DD")
    monthly_installment: float = Field(default=10_000.0, ge=0, description="Monthly deposit (₹)")
    rate: float = Field(default=6.5, ge=0, description="Annual nominal rate in percent")
    compounding: CompoundingFrequency = Field(
        default="quarterly",
        description="Indian bank RDs compound quarterly by default.",
    )
    tenure_years: int = Field(default=3, ge=0)
    tenure_months: int = Field(default=0, ge=0)
    tenure_days: int = Field(default=0, ge=0)
