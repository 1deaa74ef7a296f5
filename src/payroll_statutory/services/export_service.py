"""Per-run export service (PF ECR, bank transfer, payroll master)."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_statutory.calculators.types import PayrollEntrySnapshot
from payroll_statutory.exports.formatter import ExportFile, ExportFormatter, ExportProfile
from payroll_statutory.services.repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollRunNotFoundError(Exception):
    """Raised when the requested payroll run does not exist for the organization."""

    def __init__(self, run_id: UUID):
        self.run_id = run_id
        super().__init__(f"Payroll run {run_id} not found")


class PayrollRunNotLockedError(Exception):
    """Raised when exporting a run whose entries are not yet final."""

    def __init__(self, run_id: UUID, status: str):
        self.run_id = run_id
        self.status = status
        super().__init__(
            f"Cannot export payroll run {run_id} in status '{status}'; run must be locked"
        )


class ExportService:
    """Loads a locked payroll run and renders it through ExportFormatter."""

    def __init__(
        self,
        session: AsyncSession,
        repository: PayrollRepository | None = None,
    ):
        self.session = session
        self.repository = repository or PayrollRepository(session)

    async def export_run(
        self,
        run_id: UUID,
        profile: ExportProfile | str,
        organization_id: UUID | None = None,
        bank_format: str | None = None,
    ) -> ExportFile:
        """Render one locked run in the requested export layout.

        Raises:
            UnknownExportProfileError: If the profile name is not recognised
            PayrollRunNotFoundError: If the run does not exist (or belongs to
                another organization when organization_id is given)
            PayrollRunNotLockedError: If the run is not locked
        """
        resolved = ExportFormatter.resolve_profile(profile)

        run = await self.repository.fetch_run(run_id)
        if run is None or (organization_id is not None and run.organization_id != organization_id):
            raise PayrollRunNotFoundError(run_id)
        if not run.is_locked:
            raise PayrollRunNotLockedError(run_id, run.status)

        entries = await self.repository.fetch_entries([run.id])
        snapshots = [PayrollEntrySnapshot.from_model(e) for e in entries]

        export = ExportFormatter.export(
            snapshots,
            resolved,
            pay_period=run.pay_period,
            bank_format=bank_format,
        )
        logger.info(
            "Rendered %s export for payroll run %s (%d entries)",
            resolved.value,
            run_id,
            len(snapshots),
        )
        return export
