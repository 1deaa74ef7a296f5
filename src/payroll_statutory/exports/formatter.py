"""Fixed-column delimited exports of payroll entries.

Column names, column order and the placeholder values are consumed
positionally by banks and the EPFO portal and must not change.

Cells are joined with the delimiter as-is: no quoting or escaping pass is
applied, so a name containing a comma shifts the remaining columns.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from payroll_statutory.calculators.contributions import ContributionCalculator
from payroll_statutory.calculators.types import PayrollEntrySnapshot, ProfileSnapshot

DELIMITER = ","
LINE_SEPARATOR = "\n"

DEFAULT_BANK_FORMAT = "generic_neft"
REMARKS_PREFIX = "Salary "
RUN_REFERENCE_LENGTH = 8


class ExportProfile(str, Enum):
    """Supported export layouts."""

    PF_ECR = "pf_ecr"
    BANK_TRANSFER = "bank_transfer"
    PAYROLL_MASTER = "payroll_master"


class UnknownExportProfileError(ValueError):
    """Raised when an export profile name is not recognised."""

    def __init__(self, name: str):
        self.name = name
        allowed = ", ".join(p.value for p in ExportProfile)
        super().__init__(f"Unknown export profile '{name}' (expected one of: {allowed})")


PF_ECR_HEADERS: tuple[str, ...] = (
    "UAN",
    "Member Name",
    "Gross Wages",
    "EPF Wages",
    "EPS Wages",
    "EDLI Wages",
    "EPF Contribution (EE)",
    "EPS Contribution (ER)",
    "EPF Contribution (ER)",
    "EDLI Contribution",
    "NCP Days",
    "Refund of Advances",
)

BANK_TRANSFER_HEADERS: tuple[str, ...] = (
    "Beneficiary Name",
    "Account Number",
    "IFSC Code",
    "Amount",
    "Remarks",
)

PAYROLL_MASTER_HEADERS: tuple[str, ...] = (
    "Employee Name",
    "Department",
    "Job Title",
    "Annual CTC",
    "Gross Earnings",
    "PF (Employee)",
    "PF (Employer)",
    "TDS",
    "ESI (Employee)",
    "Total Deductions",
    "LWP Days",
    "Working Days",
    "Paid Days",
    "Net Pay",
)


@dataclass(frozen=True)
class ExportFile:
    """Rendered export content plus a suggested download name."""

    filename: str
    content: str
    media_type: str = "text/csv"


def format_cell(value: Any) -> str:
    """Render one cell with default string conversion.

    None renders empty. Decimals render in plain notation without
    insignificant trailing zeros, so 50000.00 renders as "50000".
    """
    if value is None:
        return ""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return str(int(value))
        return format(value.normalize(), "f")
    return str(value)


def _profile(entry: PayrollEntrySnapshot) -> ProfileSnapshot:
    return entry.profile or ProfileSnapshot()


def _or_zero(value: Decimal | None) -> Decimal:
    return value if value is not None else Decimal("0")


def pf_ecr_row(entry: PayrollEntrySnapshot) -> list[Any]:
    """ECR row; UAN and refund of advances are not sourced upstream."""
    c = ContributionCalculator.for_entry(entry)
    return [
        "",
        _profile(entry).full_name,
        entry.gross_earnings,
        c.epf_wages,
        c.eps_wages,
        c.edli_wages,
        c.pf_employee_contribution,
        c.pension_employer_contribution,
        c.pf_employer_contribution,
        c.insurance_contribution,
        entry.lwp_days,
        0,
    ]


def bank_transfer_row(entry: PayrollEntrySnapshot) -> list[Any]:
    """NEFT row; account number and IFSC are left blank for the bank sheet."""
    run_reference = str(entry.payroll_run_id)[:RUN_REFERENCE_LENGTH] if entry.payroll_run_id else ""
    return [
        _profile(entry).full_name,
        "",
        "",
        entry.net_pay,
        f"{REMARKS_PREFIX}{run_reference}",
    ]


def payroll_master_row(entry: PayrollEntrySnapshot) -> list[Any]:
    profile = _profile(entry)
    return [
        profile.full_name,
        profile.department,
        profile.job_title,
        entry.annual_ctc,
        entry.gross_earnings,
        _or_zero(entry.pf_employee),
        _or_zero(entry.pf_employer),
        _or_zero(entry.tds_amount),
        _or_zero(entry.esi_employee),
        entry.total_deductions,
        entry.lwp_days,
        entry.working_days,
        entry.paid_days,
        entry.net_pay,
    ]


RowBuilder = Callable[[PayrollEntrySnapshot], list[Any]]

_LAYOUTS: dict[ExportProfile, tuple[tuple[str, ...], RowBuilder]] = {
    ExportProfile.PF_ECR: (PF_ECR_HEADERS, pf_ecr_row),
    ExportProfile.BANK_TRANSFER: (BANK_TRANSFER_HEADERS, bank_transfer_row),
    ExportProfile.PAYROLL_MASTER: (PAYROLL_MASTER_HEADERS, payroll_master_row),
}


class ExportFormatter:
    """Renders payroll entries into one of the fixed export layouts.

    Output is the comma-joined header line followed by one comma-joined
    line per entry, in input order, separated by a single newline with no
    trailing newline. An empty entry sequence yields the header only.
    """

    @staticmethod
    def resolve_profile(profile: ExportProfile | str) -> ExportProfile:
        """Look up a profile by enum member or name."""
        if isinstance(profile, ExportProfile):
            return profile
        try:
            return ExportProfile(profile)
        except ValueError:
            raise UnknownExportProfileError(str(profile)) from None

    @staticmethod
    def headers(profile: ExportProfile | str) -> tuple[str, ...]:
        return _LAYOUTS[ExportFormatter.resolve_profile(profile)][0]

    @staticmethod
    def rows(
        entries: Sequence[PayrollEntrySnapshot],
        profile: ExportProfile | str,
    ) -> list[list[Any]]:
        """Build the raw (unrendered) rows for each entry."""
        builder = _LAYOUTS[ExportFormatter.resolve_profile(profile)][1]
        return [builder(entry) for entry in entries]

    @staticmethod
    def render(
        entries: Sequence[PayrollEntrySnapshot],
        profile: ExportProfile | str,
    ) -> str:
        """Render the full delimited table as a string."""
        lines = [DELIMITER.join(ExportFormatter.headers(profile))]
        for row in ExportFormatter.rows(entries, profile):
            lines.append(DELIMITER.join(format_cell(cell) for cell in row))
        return LINE_SEPARATOR.join(lines)

    @staticmethod
    def suggested_filename(
        profile: ExportProfile | str,
        pay_period: str | None = None,
        bank_format: str | None = None,
    ) -> str:
        resolved = ExportFormatter.resolve_profile(profile)
        if resolved is ExportProfile.PF_ECR:
            return "PF_ECR_Export.csv"
        if resolved is ExportProfile.BANK_TRANSFER:
            return f"Bank_Transfer_{bank_format or DEFAULT_BANK_FORMAT}.csv"
        return f"Payroll_Master_{pay_period or ''}.csv"

    @staticmethod
    def export(
        entries: Sequence[PayrollEntrySnapshot],
        profile: ExportProfile | str,
        pay_period: str | None = None,
        bank_format: str | None = None,
    ) -> ExportFile:
        """Render entries and pair the content with its suggested filename."""
        return ExportFile(
            filename=ExportFormatter.suggested_filename(profile, pay_period, bank_format),
            content=ExportFormatter.render(entries, profile),
        )
