"""Tests for PF (ECR) contribution calculation."""

from decimal import Decimal

import pytest

from payroll_statutory.calculators.contributions import (
    ContributionCalculator,
    find_basic_component,
)
from payroll_statutory.calculators.types import EarningComponent

from tests.factories import make_snapshot


def components(*pairs):
    return [EarningComponent(name=n, monthly_amount=Decimal(str(a))) for n, a in pairs]


class TestBasicComponentLookup:
    """Test lookup of the basic pay component."""

    def test_case_insensitive_substring_match(self):
        """Any name containing "basic" in any case matches."""
        for name in ("Basic", "BASIC PAY", "basic salary", "Monthly Basic"):
            found = find_basic_component(components(("HRA", 1), (name, 2)))
            assert found is not None
            assert found.name == name

    def test_first_match_wins(self):
        """The first matching component is used."""
        found = find_basic_component(components(("Basic Pay", 100), ("Basic Arrears", 200)))
        assert found.monthly_amount == Decimal("100")

    def test_no_match(self):
        assert find_basic_component(components(("HRA", 1), ("Conveyance", 2))) is None
        assert find_basic_component([]) is None


class TestBasicMonthly:
    """Test basic pay derivation and fallback."""

    def test_uses_component_regardless_of_order(self):
        """Basic amount does not depend on the position of other components."""
        ordered = components(("Basic Pay", 21000), ("HRA", 8000), ("LTA", 2000))
        shuffled = components(("LTA", 2000), ("HRA", 8000), ("Basic Pay", 21000))

        for breakdown in (ordered, shuffled):
            assert ContributionCalculator.basic_monthly(Decimal("50000"), breakdown) == Decimal("21000")

    def test_fallback_is_forty_percent_of_gross(self):
        """Without a basic component, 40% of gross (rounded) is used."""
        assert ContributionCalculator.basic_monthly(Decimal("50000"), []) == Decimal("20000")
        assert ContributionCalculator.basic_monthly(Decimal("12345"), []) == Decimal("4938")

    def test_fallback_when_component_has_no_amount(self):
        """A basic component without a monthly amount falls back to gross."""
        breakdown = [EarningComponent(name="Basic", monthly_amount=None)]
        assert ContributionCalculator.basic_monthly(Decimal("30000"), breakdown) == Decimal("12000")

    def test_fallback_rounds_half_up(self):
        # 40% of 10001.25 = 4000.5
        assert ContributionCalculator.basic_monthly(Decimal("10001.25"), []) == Decimal("4001")

    def test_non_finite_component_amount_falls_back(self):
        """A stored NaN or Infinity basic amount is treated as missing."""
        for bad in ("NaN", "Infinity", "-inf", Decimal("NaN")):
            breakdown = [EarningComponent.from_dict({"name": "Basic", "monthly": bad})]
            assert breakdown[0].monthly_amount is None
            assert ContributionCalculator.basic_monthly(Decimal("30000"), breakdown) == Decimal("12000")


class TestWageCeiling:
    """Test the EPF wage ceiling."""

    @pytest.mark.parametrize(
        "basic,expected",
        [
            ("0", "0"),
            ("9000", "9000"),
            ("15000", "15000"),
            ("15001", "15000"),
            ("80000", "15000"),
        ],
    )
    def test_epf_wages_capped(self, basic, expected):
        result = ContributionCalculator.calculate(
            Decimal("100000"), components(("Basic", basic))
        )
        assert result.epf_wages == Decimal(expected)
        assert result.epf_wages <= ContributionCalculator.WAGE_CEILING
        assert result.eps_wages == result.epf_wages
        assert result.edli_wages == result.eps_wages


class TestContributions:
    """Test contribution amounts."""

    def test_worked_example(self, basic_pay_entry):
        """Gross 50000 with basic 20000 and no precomputed PF."""
        result = ContributionCalculator.for_entry(basic_pay_entry)

        assert result.basic_monthly == Decimal("20000")
        assert result.epf_wages == Decimal("15000")
        assert result.eps_wages == Decimal("15000")
        assert result.pf_employee_contribution == Decimal("1800")
        assert result.pension_employer_contribution == Decimal("1250")
        assert result.pf_employer_contribution == Decimal("551")
        assert result.insurance_contribution == Decimal("75")

    def test_precomputed_pf_employee_is_used(self):
        """A precomputed employee PF overrides the 12% formula."""
        entry = make_snapshot(
            gross="50000",
            breakdown=[("Basic", "20000")],
            pf_employee=Decimal("1500"),
        )
        result = ContributionCalculator.for_entry(entry)
        assert result.pf_employee_contribution == Decimal("1500")

    def test_precomputed_zero_pf_is_not_replaced(self):
        """Zero is a present value, not an absent one."""
        result = ContributionCalculator.calculate(
            Decimal("50000"), components(("Basic", 20000)), pf_employee=Decimal("0")
        )
        assert result.pf_employee_contribution == Decimal("0")

    def test_below_ceiling(self):
        """Contributions on an uncapped basic of 10000."""
        result = ContributionCalculator.calculate(Decimal("25000"), components(("Basic", 10000)))

        assert result.epf_wages == Decimal("10000")
        assert result.pf_employee_contribution == Decimal("1200")
        assert result.pension_employer_contribution == Decimal("833")
        assert result.pf_employer_contribution == Decimal("367")
        assert result.insurance_contribution == Decimal("50")

    def test_empty_breakdown_zero_gross(self):
        """All figures resolve to zero, never None."""
        result = ContributionCalculator.calculate(Decimal("0"))

        for value in (
            result.basic_monthly,
            result.epf_wages,
            result.eps_wages,
            result.pf_employee_contribution,
            result.pension_employer_contribution,
            result.pf_employer_contribution,
            result.insurance_contribution,
        ):
            assert value == Decimal("0")

    def test_round_to_rupee_half_up(self):
        """Rounding is half-up, not banker's rounding."""
        assert ContributionCalculator.round_to_rupee(Decimal("550.5")) == Decimal("551")
        assert ContributionCalculator.round_to_rupee(Decimal("1249.5")) == Decimal("1250")
        assert ContributionCalculator.round_to_rupee(Decimal("74.49")) == Decimal("74")
