"""Profile, payroll run and payroll entry models.

These tables are owned by the surrounding payroll administration system;
this package only reads them.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll_statutory.models.base import Base, JSONType, TimestampMixin


class Profile(Base, TimestampMixin):
    """Employee profile (name and placement)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    organization_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    job_title: Mapped[str | None] = mapped_column(String, nullable=True)


class PayrollRun(Base, TimestampMixin):
    """One payroll batch for an organization and pay period."""

    __tablename__ = "payroll_runs"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    organization_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    pay_period: Mapped[str] = mapped_column(String, nullable=False)  # 'YYYY-MM'
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    total_gross: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    total_net: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    employee_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    generated_by: Mapped[UUID | None] = mapped_column(nullable=True)
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    locked_by: Mapped[UUID | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("organization_id", "pay_period", name="payroll_runs_org_period_unique"),
        CheckConstraint(
            "status IN ('draft', 'processing', 'completed', 'locked')",
            name="payroll_runs_status_check",
        ),
    )

    # Relationships
    entries: Mapped[list[PayrollEntry]] = relationship(back_populates="payroll_run")

    @property
    def is_locked(self) -> bool:
        return self.status == "locked"


class PayrollEntry(Base, TimestampMixin):
    """One employee's computed result within a payroll run."""

    __tablename__ = "payroll_entries"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_run_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_runs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    profile_id: Mapped[UUID] = mapped_column(ForeignKey("profiles.id"), nullable=False)
    organization_id: Mapped[UUID] = mapped_column(nullable=False)

    annual_ctc: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    gross_earnings: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    net_pay: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)

    # Statutory figures; NULL when not computed upstream
    pf_employee: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    pf_employer: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    esi_employee: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)
    tds_amount: Mapped[Decimal | None] = mapped_column(Numeric, nullable=True)

    lwp_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lwp_deduction: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    working_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paid_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # [{"name": ..., "annual": ..., "monthly": ...}, ...]
    earnings_breakdown: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list
    )
    deductions_breakdown: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="computed")

    __table_args__ = (
        UniqueConstraint("payroll_run_id", "profile_id", name="payroll_entries_run_profile_unique"),
    )

    # Relationships
    payroll_run: Mapped[PayrollRun] = relationship(back_populates="entries")
    profile: Mapped[Profile | None] = relationship()
