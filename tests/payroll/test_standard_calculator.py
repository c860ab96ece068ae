from decimal import Decimal

import pytest

from hr_payroll.common.money import round2
from hr_payroll.core.exceptions import ValidationError
from hr_payroll.payroll.calculator.standard_calculator import (
    StandardSalaryCalculator,
    calculate_salary_components,
)


def test_breakdown_for_50000():
    c = calculate_salary_components(50000)

    assert c.basic_salary == Decimal("25000.00")
    assert c.hra == Decimal("12500.00")
    assert c.standard_allowance == Decimal("4167.00")
    assert c.performance_bonus == Decimal("4165.00")
    assert c.lta == Decimal("4165.00")
    assert c.fixed_allowance == Decimal("3.00")
    assert c.pf_employee == c.pf_employer == Decimal("3000.00")
    assert c.professional_tax == Decimal("200.00")
    assert c.yearly_wage == Decimal("600000.00")
    assert c.earnings_total == Decimal("50000.00")
    assert not c.is_prorated


@pytest.mark.parametrize("wage", [50000, 60000, "75000.55", 123456.78, 1000000])
def test_earnings_add_up_to_wage_and_fixed_allowance_is_non_negative(wage):
    c = calculate_salary_components(wage)

    assert abs(c.earnings_total - Decimal(str(wage))) <= 1
    assert c.fixed_allowance >= 0


def test_yearly_wage_uses_full_wage_even_when_prorated():
    c = calculate_salary_components(60000, 10, 30)

    assert c.yearly_wage == Decimal("720000.00")
    assert c.applicable_wage == Decimal("20000.00")


def test_full_month_proration_matches_unprorated():
    full = calculate_salary_components(80000)
    prorated = calculate_salary_components(80000, 31, 31)

    assert abs(prorated.standard_allowance - full.standard_allowance) <= Decimal("0.01")
    assert abs(prorated.fixed_allowance - full.fixed_allowance) <= Decimal("0.01")
    assert prorated.basic_salary == full.basic_salary


def test_half_month_proration():
    c = calculate_salary_components(62000, Decimal("15.5"), 31)

    assert c.applicable_wage == Decimal("31000.00")
    assert c.basic_salary == Decimal("15500.00")
    assert c.hra == Decimal("7750.00")
    assert c.standard_allowance == Decimal("2083.50")
    assert c.performance_bonus == Decimal("2582.30")
    assert c.lta == Decimal("2582.30")
    assert c.fixed_allowance == Decimal("501.90")
    assert c.pf_employee == Decimal("1860.00")
    # never pro-rated
    assert c.professional_tax == Decimal("200.00")


def test_wage_too_low_for_fixed_components_is_rejected():
    with pytest.raises(ValidationError, match="Fixed allowance"):
        calculate_salary_components(30000)


def test_wage_too_low_is_rejected_when_prorated_too():
    with pytest.raises(ValidationError, match="Fixed allowance"):
        calculate_salary_components(30000, 14, 28)


def test_cent_rounding_on_prorated_components_does_not_reject_a_valid_wage():
    # 49964 is just above the lowest accepted wage
    full = calculate_salary_components(Decimal("49964"))
    assert full.fixed_allowance == Decimal("0.20")

    c = calculate_salary_components(Decimal("49964"), Decimal("0.5"), 28)

    assert c.fixed_allowance == Decimal("0.00")
    assert c.applicable_wage == Decimal("892.21")
    assert abs(c.earnings_total - c.applicable_wage) <= 1


@pytest.mark.parametrize("wage", [0, -100, "abc"])
def test_non_positive_wage_is_rejected(wage):
    with pytest.raises(ValidationError):
        calculate_salary_components(wage)


@pytest.mark.parametrize(
    "payable,total",
    [(10, None), (None, 30), (31, 30), (-1, 30), (0, 0)],
)
def test_invalid_proration_arguments(payable, total):
    with pytest.raises(ValidationError):
        StandardSalaryCalculator().calculate(60000, payable, total)


def test_round2_rounds_half_away_from_zero():
    assert round2("2.675") == Decimal("2.68")
    assert round2("-2.675") == Decimal("-2.68")
    assert round2(0.125) == Decimal("0.13")
    assert round2(4165.0000000000005) == Decimal("4165.00")
