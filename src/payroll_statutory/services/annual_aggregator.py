"""Annual (Form 16) salary and TDS aggregation with keyed upserts."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_statutory.calculators.aggregation import aggregate_entries
from payroll_statutory.calculators.financial_year import FinancialYear
from payroll_statutory.calculators.types import (
    PayrollEntrySnapshot,
    UpsertBatchResult,
    UpsertOutcome,
)
from payroll_statutory.models import FORM16_CONFLICT_KEYS
from payroll_statutory.services.repository import PayrollRepository

logger = logging.getLogger(__name__)


class AnnualAggregationError(Exception):
    """Base class for annual aggregation failures."""


class NoLockedRunsError(AnnualAggregationError):
    """Raised when the financial year has no locked payroll runs."""

    def __init__(self, organization_id: UUID, financial_year: str):
        self.organization_id = organization_id
        self.financial_year = financial_year
        super().__init__("No locked payroll runs found for this FY")


class NoEntriesError(AnnualAggregationError):
    """Raised when the locked runs of the financial year have no entries."""

    def __init__(self, organization_id: UUID, financial_year: str, run_ids: list[UUID]):
        self.organization_id = organization_id
        self.financial_year = financial_year
        self.run_ids = run_ids
        super().__init__("No entries found")


class AggregatePersistenceError(AnnualAggregationError):
    """Raised when an upsert fails part-way through a batch.

    `result` holds the outcomes up to and including the failed record;
    records before it are committed, none after it were attempted.
    """

    def __init__(self, result: UpsertBatchResult, profile_id: UUID):
        self.result = result
        self.profile_id = profile_id
        super().__init__(
            f"Failed to persist Form 16 record for profile {profile_id} "
            f"after {result.generated} succeeded"
        )


class AnnualAggregatorService:
    """Generates per-employee annual totals for one organization and year.

    Key invariants:
    1. Precondition failures (no runs, no entries) raise before any write
    2. One record per (profile, organization, financial year); re-running
       replaces the totals
    3. Records are upserted one at a time, each committed before the next;
       a failure stops the loop and the whole batch is safe to retry
    """

    def __init__(
        self,
        session: AsyncSession,
        repository: PayrollRepository | None = None,
    ):
        self.session = session
        self.repository = repository or PayrollRepository(session)

    async def generate(
        self,
        organization_id: UUID,
        financial_year: str | FinancialYear,
        generated_by: UUID | None = None,
        now: datetime | None = None,
    ) -> UpsertBatchResult:
        """Aggregate locked entries of the year and upsert Form 16 records.

        Raises:
            InvalidFinancialYearError: If the label is malformed
            NoLockedRunsError: If no locked runs fall in the year
            NoEntriesError: If the locked runs have no entries
            AggregatePersistenceError: If an upsert fails
        """
        fy = (
            financial_year
            if isinstance(financial_year, FinancialYear)
            else FinancialYear.parse(financial_year)
        )

        runs = await self.repository.fetch_locked_runs(
            organization_id, fy.period_from, fy.period_to
        )
        if not runs:
            raise NoLockedRunsError(organization_id, fy.label)

        run_ids = [run.id for run in runs]
        entries = await self.repository.fetch_entries(run_ids)
        if not entries:
            raise NoEntriesError(organization_id, fy.label, run_ids)

        records = aggregate_entries(
            (PayrollEntrySnapshot.from_model(e) for e in entries),
            organization_id=organization_id,
            financial_year=fy.label,
            generated_at=now,
        )
        logger.info(
            "Aggregated %d entries from %d locked runs into %d Form 16 records (org=%s, fy=%s)",
            len(entries),
            len(runs),
            len(records),
            organization_id,
            fy.label,
        )

        result = UpsertBatchResult(organization_id=organization_id, financial_year=fy.label)
        for record in records:
            try:
                await self.repository.upsert_form16(
                    record, FORM16_CONFLICT_KEYS, generated_by=generated_by
                )
                await self.session.commit()
            except Exception as exc:
                await self.session.rollback()
                logger.exception(
                    "Form 16 upsert failed for profile %s (org=%s, fy=%s)",
                    record.profile_id,
                    organization_id,
                    fy.label,
                )
                result.outcomes.append(UpsertOutcome(record=record, succeeded=False, error=str(exc)))
                raise AggregatePersistenceError(result, record.profile_id) from exc
            result.outcomes.append(UpsertOutcome(record=record, succeeded=True))

        logger.info("Persisted %d Form 16 records (org=%s, fy=%s)", result.generated, organization_id, fy.label)
        return result
