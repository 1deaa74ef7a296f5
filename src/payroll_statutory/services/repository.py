"""Data access for payroll runs, entries and Form 16 records."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from payroll_statutory.calculators.types import AggregateRecord
from payroll_statutory.models import (
    FORM16_CONFLICT_KEYS,
    Form16Record,
    PayrollEntry,
    PayrollRun,
    Profile,
)

LOCKED_STATUS = "locked"

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UnsupportedDialectError(Exception):
    """Raised when the bound database has no ON CONFLICT upsert support."""

    def __init__(self, dialect_name: str):
        self.dialect_name = dialect_name
        super().__init__(f"Upsert is not supported for dialect '{dialect_name}'")


class PayrollRepository:
    """Queries and writes used by the export and aggregation services.

    Reads are scoped to locked runs. Writes are a single keyed upsert into
    form16_records; transaction boundaries belong to the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch_run(self, run_id: UUID) -> PayrollRun | None:
        return await self.session.get(PayrollRun, run_id)

    async def fetch_locked_runs(
        self,
        organization_id: UUID,
        period_from: str,
        period_to: str,
    ) -> list[PayrollRun]:
        """Locked runs whose pay period lies in [period_from, period_to]."""
        result = await self.session.execute(
            select(PayrollRun)
            .where(
                PayrollRun.organization_id == organization_id,
                PayrollRun.status == LOCKED_STATUS,
                PayrollRun.pay_period >= period_from,
                PayrollRun.pay_period <= period_to,
            )
            .order_by(PayrollRun.pay_period)
        )
        return list(result.scalars().all())

    async def fetch_entries(self, run_ids: Sequence[UUID]) -> list[PayrollEntry]:
        """All entries owned by the given runs, with their profile loaded."""
        if not run_ids:
            return []

        result = await self.session.execute(
            select(PayrollEntry)
            .outerjoin(Profile, PayrollEntry.profile_id == Profile.id)
            .where(PayrollEntry.payroll_run_id.in_(list(run_ids)))
            .options(selectinload(PayrollEntry.profile))
            .order_by(func.coalesce(Profile.full_name, ""), PayrollEntry.id)
        )
        return list(result.scalars().all())

    async def upsert_form16(
        self,
        record: AggregateRecord,
        conflict_keys: Sequence[str] = FORM16_CONFLICT_KEYS,
        generated_by: UUID | None = None,
    ) -> None:
        """Insert the record, or replace totals on the existing keyed row."""
        dialect_name = self.session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect_name)
        if insert is None:
            raise UnsupportedDialectError(dialect_name)

        values: dict[str, Any] = record.to_row()
        values["generated_by"] = generated_by

        stmt = insert(Form16Record).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_keys),
            set_={
                "total_salary": stmt.excluded.total_salary,
                "total_tds": stmt.excluded.total_tds,
                "generated_at": stmt.excluded.generated_at,
                "generated_by": stmt.excluded.generated_by,
                "updated_at": func.now(),
            },
        )
        await self.session.execute(stmt)

    async def get_form16_records(
        self,
        organization_id: UUID,
        financial_year: str,
    ) -> list[Form16Record]:
        result = await self.session.execute(
            select(Form16Record)
            .where(
                Form16Record.organization_id == organization_id,
                Form16Record.financial_year == financial_year,
            )
            .order_by(Form16Record.profile_id)
        )
        return list(result.scalars().all())
