"""Public Provident Fund (PPF) inputs."""

import datetime

from pydantic import BaseModel, ConfigDict, Field

PPF_MATURITY_YEARS = 15


class PPFContribution(BaseModel):
    """A single deposit into the PPF account."""

    model_config = ConfigDict(frozen=True)

    amount: float = Field(ge=0, description="Deposit amount (₹)")
    date: datetime.date | None = Field(
        default=None,
        description="Deposit date. None = April 1st of the fiscal year.",
    )


class PPFYear(BaseModel):
    """Contributions and optional rate override for one fiscal year."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(description="Fiscal year start (2023 = FY 2023-24)")
    contributions: list[PPFContribution] = Field(default_factory=list)
    interest_rate: float | None = Field(
        default=None, ge=0,
        description="Annual rate in percent for this FY. None = plan default.",
    )


class PPFPlan(BaseModel):
    """A full 15-year PPF account plan."""

    model_config = ConfigDict(frozen=True)

    start_year: int = Field(description="Fiscal year the account was opened in")
    default_interest_rate: float = Field(default=7.1, ge=0, description="Annual rate in percent")
    years: list[PPFYear] = Field(default_factory=list)
