"""Statutory payroll services."""

from payroll_statutory.services.annual_aggregator import (
    AggregatePersistenceError,
    AnnualAggregationError,
    AnnualAggregatorService,
    NoEntriesError,
    NoLockedRunsError,
)
from payroll_statutory.services.export_service import (
    ExportService,
    PayrollRunNotFoundError,
    PayrollRunNotLockedError,
)
from payroll_statutory.services.repository import PayrollRepository

__all__ = [
    "AggregatePersistenceError",
    "AnnualAggregationError",
    "AnnualAggregatorService",
    "NoEntriesError",
    "NoLockedRunsError",
    "ExportService",
    "PayrollRunNotFoundError",
    "PayrollRunNotLockedError",
    "PayrollRepository",
]
