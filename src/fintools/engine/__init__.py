"""Engine — deposit projection, NAV lookup, and NAV-indexed valuation."""

from fintools.engine.deposit import (
    compounded_amount,
    parse_deposit_terms,
    project_deposit,
    project_recurring_deposit,
)
from fintools.engine.ppf import calculate_ppf
from fintools.engine.nav import (
    find_nav,
    is_nav_stale,
    latest_nav,
    merge_nav_series,
    normalize_nav_series,
    parse_nav_series,
)
from fintools.engine.valuation import (
    generate_installments,
    purchase_units,
    sip_schedule,
    split_stamp_duty,
    value_of,
    value_of_all,
)

__all__ = [
    "compounded_amount",
    "parse_deposit_terms",
    "project_deposit",
    "project_recurring_deposit",
    "calculate_ppf",
    "find_nav",
    "is_nav_stale",
    "latest_nav",
    "merge_nav_series",
    "normalize_nav_series",
    "parse_nav_series",
    "generate_installments",
    "purchase_units",
    "sip_schedule",
    "split_stamp_duty",
    "value_of",
    "value_of_all",
]
