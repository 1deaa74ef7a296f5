"""Annual (Form 16) salary and TDS aggregate records."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_statutory.models.base import Base, TimestampMixin

# Natural key; re-generation for the same year replaces the row
FORM16_CONFLICT_KEYS: tuple[str, ...] = ("profile_id", "organization_id", "financial_year")


class Form16Record(Base, TimestampMixin):
    """Per-employee annual totals for one organization and financial year."""

    __tablename__ = "form16_records"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    profile_id: Mapped[UUID] = mapped_column(ForeignKey("profiles.id"), nullable=False)
    organization_id: Mapped[UUID] = mapped_column(nullable=False)
    financial_year: Mapped[str] = mapped_column(String, nullable=False)
    total_salary: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    total_tds: Mapped[Decimal] = mapped_column(Numeric, nullable=False, default=0)
    form16_pdf_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    generated_by: Mapped[UUID | None] = mapped_column(nullable=True)
    employer_tan: Mapped[str | None] = mapped_column(String, nullable=True)
    employer_pan: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_pan: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint(*FORM16_CONFLICT_KEYS, name="form16_records_natural_key"),
    )
