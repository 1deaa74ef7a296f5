"""Provident Fund (ECR) wage base and contribution calculation."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from payroll_statutory.calculators.types import (
    ContributionBreakdown,
    EarningComponent,
    PayrollEntrySnapshot,
)

BASIC_COMPONENT_TOKEN = "basic"


def find_basic_component(
    components: Iterable[EarningComponent],
) -> EarningComponent | None:
    """Return the first breakdown component whose name contains "basic".

    Match is a case-insensitive substring match on the component name.
    """
    for component in components:
        if BASIC_COMPONENT_TOKEN in component.name.lower():
            return component
    return None


class ContributionCalculator:
    """Derives EPF/EPS/EDLI wage bases and contributions for one entry.

    Rules:
    - Basic pay: monthly amount of the first "basic" component; when absent
      (or it has no monthly amount), 40% of gross earnings
    - EPF and EPS wages are capped at the statutory wage ceiling
    - EPF (EE) uses the precomputed employee PF when present, else 12%
    - EPS (ER) 8.33%, EPF (ER) 3.67%, EDLI 0.5%

    Rounding:
    - Every derived amount rounds to whole rupees, half-up
    """

    WAGE_CEILING = Decimal("15000")
    BASIC_FALLBACK_RATE = Decimal("0.4")

    PF_EMPLOYEE_RATE = Decimal("0.12")
    PENSION_EMPLOYER_RATE = Decimal("0.0833")
    PF_EMPLOYER_RATE = Decimal("0.0367")
    INSURANCE_RATE = Decimal("0.005")

    WHOLE_UNIT = Decimal("1")

    @staticmethod
    def round_to_rupee(amount: Decimal) -> Decimal:
        """Round amount to a whole currency unit (half-up)."""
        return amount.quantize(ContributionCalculator.WHOLE_UNIT, rounding=ROUND_HALF_UP)

    @classmethod
    def basic_monthly(
        cls,
        gross_earnings: Decimal,
        earnings_breakdown: Iterable[EarningComponent],
    ) -> Decimal:
        component = find_basic_component(earnings_breakdown)
        if component is not None and component.monthly_amount is not None:
            return component.monthly_amount
        return cls.round_to_rupee(gross_earnings * cls.BASIC_FALLBACK_RATE)

    @classmethod
    def calculate(
        cls,
        gross_earnings: Decimal,
        earnings_breakdown: Iterable[EarningComponent] = (),
        pf_employee: Decimal | None = None,
    ) -> ContributionBreakdown:
        """Calculate the ECR figures from raw inputs."""
        basic = cls.basic_monthly(gross_earnings, earnings_breakdown)
        epf_wages = min(basic, cls.WAGE_CEILING)
        eps_wages = min(epf_wages, cls.WAGE_CEILING)

        if pf_employee is not None:
            pf_ee = pf_employee
        else:
            pf_ee = cls.round_to_rupee(epf_wages * cls.PF_EMPLOYEE_RATE)

        return ContributionBreakdown(
            basic_monthly=basic,
            epf_wages=epf_wages,
            eps_wages=eps_wages,
            pf_employee_contribution=pf_ee,
            pension_employer_contribution=cls.round_to_rupee(
                eps_wages * cls.PENSION_EMPLOYER_RATE
            ),
            pf_employer_contribution=cls.round_to_rupee(epf_wages * cls.PF_EMPLOYER_RATE),
            insurance_contribution=cls.round_to_rupee(eps_wages * cls.INSURANCE_RATE),
        )

    @classmethod
    def for_entry(cls, entry: PayrollEntrySnapshot) -> ContributionBreakdown:
        """Calculate the ECR figures for a payroll entry."""
        return cls.calculate(
            gross_earnings=entry.gross_earnings,
            earnings_breakdown=entry.earnings_breakdown,
            pf_employee=entry.pf_employee,
        )
