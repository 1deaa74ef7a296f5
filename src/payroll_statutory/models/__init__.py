"""SQLAlchemy ORM models."""

from payroll_statutory.models.base import Base, TimestampMixin
from payroll_statutory.models.form16 import FORM16_CONFLICT_KEYS, Form16Record
from payroll_statutory.models.payroll import PayrollEntry, PayrollRun, Profile

__all__ = [
    "Base",
    "TimestampMixin",
    "Profile",
    "PayrollRun",
    "PayrollEntry",
    "Form16Record",
    "FORM16_CONFLICT_KEYS",
]
