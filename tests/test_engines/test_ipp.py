"""Tests for Individual Pension Plan contributions and pension adjustments."""

from decimal import Decimal

import pytest

from ccpc.engines.ipp import (
    ADMIN_COSTS,
    IPPMember,
    annual_benefit_accrual,
    calculate_current_service_cost,
    calculate_ipp_year,
    calculate_pension_adjustment,
    max_benefit_per_year,
    present_value_factor,
)

ZERO = Decimal("0")


class TestBenefitAccrual:
    def test_two_percent_of_earnings(self):
        assert annual_benefit_accrual(Decimal("100000"), 2025) == Decimal("2000")

    def test_capped_at_defined_benefit_limit(self):
        assert annual_benefit_accrual(Decimal("300000"), 2025) == Decimal("3610.67")

    def test_limit_for_years_past_the_table(self):
        assert max_benefit_per_year(2026) == Decimal("3725.00")
        assert max_benefit_per_year(2031) == Decimal("3725.00")


class TestPensionAdjustment:
    @pytest.mark.parametrize(
        "salary,expected",
        [
            ("100000", "17400"),
            ("71300", "12234"),
            ("250000", "31896.03"),
            ("3000", "0"),
            ("0", "0"),
        ],
    )
    def test_pension_adjustment(self, salary, expected):
        assert calculate_pension_adjustment(Decimal(salary), 2025) == Decimal(expected)


class TestCurrentServiceCost:
    def test_older_members_cost_more(self):
        young = calculate_current_service_cost(IPPMember(age=35), Decimal("150000"), 2025)
        older = calculate_current_service_cost(IPPMember(age=55), Decimal("150000"), 2025)
        assert older > young > ZERO

    def test_higher_salary_costs_more_until_the_cap(self):
        member = IPPMember(age=50)
        low = calculate_current_service_cost(member, Decimal("80000"), 2025)
        high = calculate_current_service_cost(member, Decimal("200000"), 2025)
        capped = calculate_current_service_cost(member, Decimal("400000"), 2025)
        assert low < high == capped

    def test_no_discounting_past_retirement_age(self):
        assert present_value_factor(70) == present_value_factor(65)
        # 25-year annuity at 5.25%
        assert Decimal("13.7") < present_value_factor(65) < Decimal("13.8")


class TestIPPYear:
    def test_first_plan_year_includes_setup(self, on_2025):
        result = calculate_ipp_year(
            IPPMember(age=45, first_plan_year=True), Decimal("100000"), on_2025
        )
        assert result.admin_costs == Decimal("4500")
        assert result.total_deductible == result.contribution + Decimal("4500")
        assert result.pension_adjustment == Decimal("17400")

    def test_later_years_annual_costs_only(self, on_2025):
        result = calculate_ipp_year(IPPMember(age=46), Decimal("100000"), on_2025)
        assert result.admin_costs == ADMIN_COSTS.annual_actuarial + ADMIN_COSTS.annual_admin

    def test_projected_pension_counts_service(self, on_2025):
        result = calculate_ipp_year(
            IPPMember(age=50, years_of_service=9), Decimal("100000"), on_2025
        )
        assert result.projected_annual_pension == Decimal("20000")

    def test_tax_savings_at_small_business_rate(self, on_2025):
        result = calculate_ipp_year(IPPMember(age=50), Decimal("120000"), on_2025)
        assert result.corporate_tax_savings == result.contribution * Decimal("0.122")
