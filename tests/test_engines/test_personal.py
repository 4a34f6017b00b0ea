"""Tests for personal tax on a combined salary and dividend return."""

from decimal import Decimal

import pytest

from ccpc.engines.personal import PersonalTaxCalculator
from ccpc.engines.tax_years import get_tax_year_data
from ccpc.models.enums import DividendType

ZERO = Decimal("0")


@pytest.fixture
def ontario(on_2025):
    return PersonalTaxCalculator(on_2025)


@pytest.fixture
def british_columbia():
    return PersonalTaxCalculator(get_tax_year_data(2025, "BC"))


class TestCompute:
    def test_no_income_no_tax(self, ontario):
        result = ontario.compute(ZERO)
        assert result.total_tax == ZERO
        assert result.taxable_income == ZERO

    def test_income_below_basic_personal_amount(self, ontario):
        result = ontario.compute(Decimal("10000"))
        assert result.federal_tax == ZERO
        assert result.provincial_tax == ZERO

    def test_federal_tax_on_salary(self, ontario):
        result = ontario.compute(Decimal("100000"))
        # brackets applied to 100000 - 15705
        assert result.federal_tax == Decimal("13837.975")

    def test_basic_personal_amount_deducted_before_brackets(self, ontario):
        result = ontario.compute(Decimal("150000"))
        # 57375 * 14.5% + 57375 * 20.5% + (134295 - 114750) * 26%
        assert result.federal_tax == Decimal("25162.950")
        assert result.taxable_income == Decimal("150000")

    def test_provincial_basic_personal_amount(self, ontario):
        result = ontario.compute(Decimal("100000"))
        # 51446 * 5.05% + (87601 - 51446) * 9.15%, plus surtax on the excess over 5710
        assert result.provincial_surtax == Decimal("39.2411")
        assert result.provincial_tax == Decimal("5945.4466")

    def test_taxable_income_includes_gross_up(self, ontario):
        result = ontario.compute(Decimal("50000"), Decimal("10000"), Decimal("10000"))
        assert result.taxable_income == Decimal("50000") + Decimal("13800") + Decimal("11500")

    def test_dividend_credits_are_non_refundable(self, ontario):
        result = ontario.compute(ZERO, eligible_dividends=Decimal("30000"))
        assert result.federal_dividend_credit > ZERO
        assert result.federal_tax == ZERO

    def test_rrsp_deduction_reduces_tax(self, ontario):
        without = ontario.compute(Decimal("120000"))
        with_rrsp = ontario.compute(Decimal("120000"), rrsp_deduction=Decimal("20000"))
        assert with_rrsp.total_tax < without.total_tax
        assert with_rrsp.taxable_income == Decimal("100000")

    def test_total_includes_health_premium(self, ontario):
        result = ontario.compute(Decimal("100000"))
        assert result.health_premium == Decimal("900")
        assert result.total_tax == result.federal_tax + result.provincial_tax + Decimal("900")

    def test_no_surtax_or_premium_in_bc(self, british_columbia):
        result = british_columbia.compute(Decimal("300000"))
        assert result.provincial_surtax == ZERO
        assert result.health_premium == ZERO

    def test_tax_non_decreasing_in_salary(self, ontario):
        previous = ZERO
        for salary in range(0, 400001, 10000):
            tax = ontario.compute(Decimal(salary)).total_tax
            assert tax >= previous
            previous = tax


class TestSurtaxAndHealthPremium:
    def test_ontario_surtax(self, ontario):
        # (10000 - 5710) * 20% + (10000 - 7307) * 36%
        assert ontario.compute_surtax(Decimal("10000")) == Decimal("1827.48")

    def test_surtax_below_threshold(self, ontario):
        assert ontario.compute_surtax(Decimal("5000")) == ZERO

    @pytest.mark.parametrize(
        "income,expected",
        [
            ("15000", "0"),
            ("20000", "0"),
            ("25000", "300"),
            ("30000", "450"),
            ("40000", "750"),
            ("100000", "900"),
            ("500000", "900"),
        ],
    )
    def test_health_premium_schedule(self, ontario, income, expected):
        assert ontario.compute_health_premium(Decimal(income)) == Decimal(expected)


class TestEffectiveDividendRate:
    def test_capital_dividends_tax_free(self, ontario):
        assert ontario.effective_dividend_rate(DividendType.CAPITAL, Decimal("300000")) == ZERO

    def test_eligible_taxed_below_non_eligible(self, ontario):
        eligible = ontario.effective_dividend_rate(DividendType.ELIGIBLE, Decimal("300000"))
        non_eligible = ontario.effective_dividend_rate(DividendType.NON_ELIGIBLE, Decimal("300000"))
        assert ZERO < eligible < non_eligible < Decimal("1")

    def test_rate_floored_at_zero(self, ontario):
        assert ontario.effective_dividend_rate(DividendType.ELIGIBLE, Decimal("1000")) == ZERO
