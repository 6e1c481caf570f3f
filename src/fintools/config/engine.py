"""Engine-wide numeric conventions — stamp duty, day-count bases, solver limits."""

from pydantic import BaseModel, ConfigDict, Field


class SolverConfig(BaseModel):
    """Newton-Raphson settings for the XIRR solver."""

    model_config = ConfigDict(frozen=True)

    initial_guess: float = Field(default=0.1, gt=-1.0, description="Starting annual rate (0.1 = 10%)")
    max_iterations: int = Field(default=100, ge=1, le=10_000)
    tolerance: float = Field(
        default=1e-6, gt=0,
        description="Converged when |NPV| falls below this (currency units).",
    )
    min_derivative: float = Field(
        default=1e-10, gt=0,
        description="Stop early when |dNPV/dr| falls below this; the last rate is returned.",
    )


class EngineConfig(BaseModel):
    """Conventions applied by the valuation module and metrics solver.

    Defaults reflect Indian mutual fund rules; every engine entry point takes
    an optional config so tests and hosts can override them.
    """

    model_config = ConfigDict(frozen=True)

    stamp_duty_rate: float = Field(
        default=0.00005, ge=0, lt=1.0,
        description="Fraction levied on every purchase before units are allotted "
                    "(0.00005 = 0.005%).",
    )
    xirr_days_per_year: float = Field(
        default=365.25, gt=0,
        description="Day basis for XIRR and CAGR year fractions.",
    )
    deposit_days_per_year: float = Field(
        default=365.0, gt=0,
        description="Day basis for deposit compounding periods.",
    )
    nav_stale_after_days: int = Field(
        default=3, ge=0,
        description="A NAV series whose latest point is older than this is stale.",
    )
    solver: SolverConfig = Field(default_factory=SolverConfig)


DEFAULT_ENGINE_CONFIG = EngineConfig()
