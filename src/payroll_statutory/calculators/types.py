"""Type definitions for the statutory computation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from payroll_statutory.models import PayrollEntry


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a stored numeric value to Decimal.

    None, unparseable and non-finite values (NaN, Infinity) all map to None
    so callers fall back to their defaults.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


@dataclass(frozen=True)
class EarningComponent:
    """One named line of an entry's earnings breakdown."""

    name: str
    monthly_amount: Decimal | None = None
    annual_amount: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EarningComponent:
        """Build from a stored breakdown item (`{name, annual, monthly}`)."""
        return cls(
            name=str(data.get("name") or ""),
            monthly_amount=to_decimal(data.get("monthly")),
            annual_amount=to_decimal(data.get("annual")),
        )


@dataclass(frozen=True)
class ProfileSnapshot:
    """The owning employee's display fields."""

    full_name: str = ""
    department: str = ""
    job_title: str = ""


@dataclass(frozen=True)
class PayrollEntrySnapshot:
    """Read-only view of one payroll entry, detached from the ORM."""

    entry_id: UUID
    payroll_run_id: UUID
    profile_id: UUID
    gross_earnings: Decimal
    net_pay: Decimal = Decimal("0")
    total_deductions: Decimal = Decimal("0")
    annual_ctc: Decimal = Decimal("0")
    earnings_breakdown: tuple[EarningComponent, ...] = ()

    # Optional precomputed statutory figures
    pf_employee: Decimal | None = None
    pf_employer: Decimal | None = None
    esi_employee: Decimal | None = None
    tds_amount: Decimal | None = None

    lwp_days: int = 0
    working_days: int = 0
    paid_days: int = 0

    profile: ProfileSnapshot | None = None

    @classmethod
    def from_model(cls, entry: PayrollEntry) -> PayrollEntrySnapshot:
        """Build a snapshot from an ORM entry (profile must be loaded)."""
        profile = None
        if entry.profile is not None:
            profile = ProfileSnapshot(
                full_name=entry.profile.full_name or "",
                department=entry.profile.department or "",
                job_title=entry.profile.job_title or "",
            )

        breakdown = tuple(
            EarningComponent.from_dict(item)
            for item in (entry.earnings_breakdown or [])
            if isinstance(item, dict)
        )

        return cls(
            entry_id=entry.id,
            payroll_run_id=entry.payroll_run_id,
            profile_id=entry.profile_id,
            gross_earnings=to_decimal(entry.gross_earnings) or Decimal("0"),
            net_pay=to_decimal(entry.net_pay) or Decimal("0"),
            total_deductions=to_decimal(entry.total_deductions) or Decimal("0"),
            annual_ctc=to_decimal(entry.annual_ctc) or Decimal("0"),
            earnings_breakdown=breakdown,
            pf_employee=to_decimal(entry.pf_employee),
            pf_employer=to_decimal(entry.pf_employer),
            esi_employee=to_decimal(entry.esi_employee),
            tds_amount=to_decimal(entry.tds_amount),
            lwp_days=entry.lwp_days or 0,
            working_days=entry.working_days or 0,
            paid_days=entry.paid_days or 0,
            profile=profile,
        )


@dataclass(frozen=True)
class ContributionBreakdown:
    """Wage bases and contributions for one PF deposit (ECR) row."""

    basic_monthly: Decimal
    epf_wages: Decimal
    eps_wages: Decimal
    pf_employee_contribution: Decimal
    pension_employer_contribution: Decimal
    pf_employer_contribution: Decimal
    insurance_contribution: Decimal

    @property
    def edli_wages(self) -> Decimal:
        """EDLI wages follow the EPS wage base."""
        return self.eps_wages


@dataclass(frozen=True)
class AggregateRecord:
    """Annual salary and TDS totals for one employee."""

    profile_id: UUID
    organization_id: UUID
    financial_year: str
    total_salary: Decimal
    total_tds: Decimal
    generated_at: datetime

    def to_row(self) -> dict[str, Any]:
        """Column values for the form16_records upsert."""
        return {
            "profile_id": self.profile_id,
            "organization_id": self.organization_id,
            "financial_year": self.financial_year,
            "total_salary": self.total_salary,
            "total_tds": self.total_tds,
            "generated_at": self.generated_at,
        }


@dataclass
class UpsertOutcome:
    """Result of persisting a single aggregate record."""

    record: AggregateRecord
    succeeded: bool
    error: str | None = None


@dataclass
class UpsertBatchResult:
    """Ordered per-record results of a sequential upsert batch."""

    organization_id: UUID
    financial_year: str
    outcomes: list[UpsertOutcome] = field(default_factory=list)

    @property
    def generated(self) -> int:
        """Number of records written successfully."""
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> list[UpsertOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def is_complete(self) -> bool:
        return not self.failed
