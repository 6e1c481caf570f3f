"""Configuration models — engine inputs."""

from fintools.config.deposit import (
    COMPOUNDING_PERIODS_PER_YEAR,
    CompoundingFrequency,
    DepositTerms,
    RecurringDepositTerms,
)
from fintools.config.engine import DEFAULT_ENGINE_CONFIG, EngineConfig, SolverConfig
from fintools.config.investment import FundHoldings, Investment, SIPAmountModification
from fintools.config.ppf import PPF_MATURITY_YEARS, PPFContribution, PPFPlan, PPFYear

__all__ = [
    "COMPOUNDING_PERIODS_PER_YEAR",
    "CompoundingFrequency",
    "DepositTerms",
    "RecurringDepositTerms",
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "SolverConfig",
    "FundHoldings",
    "Investment",
    "SIPAmountModification",
    "PPF_MATURITY_YEARS",
    "PPFContribution",
    "PPFPlan",
    "PPFYear",
]
