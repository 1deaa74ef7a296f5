"""Statutory contribution and aggregation calculators."""

from payroll_statutory.calculators.aggregation import aggregate_entries
from payroll_statutory.calculators.contributions import (
    ContributionCalculator,
    find_basic_component,
)
from payroll_statutory.calculators.financial_year import (
    FinancialYear,
    InvalidFinancialYearError,
)

__all__ = [
    "aggregate_entries",
    "ContributionCalculator",
    "find_basic_component",
    "FinancialYear",
    "InvalidFinancialYearError",
]
