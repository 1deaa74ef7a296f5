"""Indian financial year (April to March) windows."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

_LABEL_PATTERN = re.compile(r"^(\d{4})-(\d{4})$")

FY_START_MONTH = 4


class InvalidFinancialYearError(ValueError):
    """Raised when a financial year label is malformed."""

    def __init__(self, label: str, reason: str | None = None):
        self.label = label
        self.reason = reason
        msg = f"Invalid financial year '{label}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


@dataclass(frozen=True)
class FinancialYear:
    """A financial year running April 1 of start_year to March 31 of the next."""

    start_year: int

    @classmethod
    def parse(cls, label: str) -> FinancialYear:
        """Parse a "YYYY-YYYY" label, e.g. "2023-2024"."""
        match = _LABEL_PATTERN.match(label.strip()) if label else None
        if match is None:
            raise InvalidFinancialYearError(label, "expected format YYYY-YYYY")

        start, end = int(match.group(1)), int(match.group(2))
        if end != start + 1:
            raise InvalidFinancialYearError(label, "years must be consecutive")
        return cls(start_year=start)

    @classmethod
    def for_date(cls, day: date) -> FinancialYear:
        """Return the financial year containing the given date."""
        if day.month >= FY_START_MONTH:
            return cls(start_year=day.year)
        return cls(start_year=day.year - 1)

    @property
    def end_year(self) -> int:
        return self.start_year + 1

    @property
    def label(self) -> str:
        return f"{self.start_year}-{self.end_year}"

    @property
    def start_date(self) -> date:
        return date(self.start_year, FY_START_MONTH, 1)

    @property
    def end_date(self) -> date:
        return date(self.end_year, 3, 31)

    @property
    def period_from(self) -> str:
        """Inclusive lower pay-period bound ('YYYY-MM')."""
        return f"{self.start_year}-04"

    @property
    def period_to(self) -> str:
        """Inclusive upper pay-period bound ('YYYY-MM')."""
        return f"{self.end_year}-03"

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def __str__(self) -> str:
        return self.label
