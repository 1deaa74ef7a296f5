"""Annual salary and TDS aggregation across payroll runs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from payroll_statutory.calculators.types import AggregateRecord, PayrollEntrySnapshot


@dataclass
class _RunningTotal:
    salary: Decimal = Decimal("0")
    tds: Decimal = Decimal("0")


def aggregate_entries(
    entries: Iterable[PayrollEntrySnapshot],
    organization_id: UUID,
    financial_year: str,
    generated_at: datetime | None = None,
) -> list[AggregateRecord]:
    """Group entries by employee and sum gross earnings and TDS.

    Entries are expected to be pre-filtered to one organization and one
    financial year. Absent TDS counts as zero. All records in the batch
    share one generation timestamp.
    """
    stamp = generated_at or datetime.now(timezone.utc)

    totals: dict[UUID, _RunningTotal] = {}
    for entry in entries:
        running = totals.setdefault(entry.profile_id, _RunningTotal())
        running.salary += entry.gross_earnings
        running.tds += entry.tds_amount if entry.tds_amount is not None else Decimal("0")

    return [
        AggregateRecord(
            profile_id=profile_id,
            organization_id=organization_id,
            financial_year=financial_year,
            total_salary=running.salary,
            total_tds=running.tds,
            generated_at=stamp,
        )
        for profile_id, running in totals.items()
    ]
