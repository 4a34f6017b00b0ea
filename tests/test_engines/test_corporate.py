"""Tests for investment returns, passive income grind and corporate tax."""

from decimal import Decimal

import pytest

from ccpc.engines.corporate import (
    calculate_active_business_tax,
    calculate_investment_returns,
    calculate_investment_tax,
    calculate_passive_income_grind,
    compose_return,
)

ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def canadian_equity():
    return compose_return(Decimal("0.10"), Decimal("100"), ZERO, ZERO, ZERO)


class TestComposeReturn:
    def test_components_sum_to_total(self):
        composition = compose_return(
            Decimal("0.0431"), Decimal("33.34"), Decimal("33.33"), Decimal("33.33"), ZERO
        )
        total = (
            composition.canadian_dividend_rate
            + composition.foreign_dividend_rate
            + composition.interest_rate
            + composition.capital_gain_rate
        )
        assert total == Decimal("0.0431")

    def test_all_canadian_equity(self, canadian_equity):
        assert canadian_equity.canadian_dividend_rate == Decimal("0.024")
        assert canadian_equity.foreign_dividend_rate == ZERO
        assert canadian_equity.capital_gain_rate == Decimal("0.076")

    def test_fixed_income_earns_interest(self):
        composition = compose_return(Decimal("0.04"), ZERO, ZERO, ZERO, Decimal("100"))
        assert composition.interest_rate == Decimal("0.04")
        assert composition.capital_gain_rate == ZERO


class TestInvestmentReturns:
    def test_notional_additions(self, canadian_equity, on_2025):
        returns = calculate_investment_returns(
            Decimal("100000"), Decimal("0.10"), canadian_equity, on_2025
        )
        assert returns.total_return == Decimal("10000")
        assert returns.canadian_dividends == Decimal("2400")
        assert returns.realized_capital_gain == Decimal("3800")
        assert returns.taxable_capital_gain == Decimal("1900")
        assert returns.cda_increase == Decimal("1900")
        assert returns.erdtoh_increase == Decimal("919.92")
        assert returns.nrdtoh_increase == Decimal("582.73")
        assert returns.grip_increase == Decimal("2400")

    def test_zero_balance_earns_nothing(self, canadian_equity, on_2025):
        returns = calculate_investment_returns(ZERO, Decimal("0.10"), canadian_equity, on_2025)
        assert returns.total_return == ZERO
        assert returns.cda_increase == ZERO

    def test_zero_return(self, on_2025):
        composition = compose_return(ZERO, ZERO, ZERO, ZERO, Decimal("100"))
        returns = calculate_investment_returns(Decimal("100000"), ZERO, composition, on_2025)
        assert returns.total_return == ZERO
        assert returns.taxable_investment_income == ZERO

    def test_capital_loss_creates_no_cda(self, on_2025):
        composition = compose_return(Decimal("-0.10"), Decimal("100"), ZERO, ZERO, ZERO)
        returns = calculate_investment_returns(
            Decimal("100000"), Decimal("-0.10"), composition, on_2025
        )
        assert returns.total_return == Decimal("-10000")
        assert returns.cda_increase == ZERO
        assert returns.taxable_capital_gain == ZERO
        assert returns.nrdtoh_increase == ZERO


class TestInvestmentTax:
    def test_part_i_and_part_iv(self, canadian_equity, on_2025):
        returns = calculate_investment_returns(
            Decimal("100000"), Decimal("0.10"), canadian_equity, on_2025
        )
        tax = calculate_investment_tax(returns, on_2025)
        # 1900 taxable capital gain at Ontario's 50.17%
        assert tax.part_i_tax == Decimal("953.23")
        assert tax.refundable_part_i == Decimal("582.73")
        assert tax.part_iv_tax == Decimal("919.92")
        assert tax.total == Decimal("1873.15")
        assert tax.non_refundable == Decimal("370.50")


class TestPassiveIncomeGrind:
    def test_no_grind_below_threshold(self, on_2025):
        grind = calculate_passive_income_grind(Decimal("50000"), Decimal("400000"), on_2025)
        assert grind.reduced_sbd_limit == Decimal("500000")
        assert grind.sbd_reduction == ZERO
        assert grind.is_fully_ground is False

    def test_partial_grind(self, on_2025):
        grind = calculate_passive_income_grind(Decimal("60000"), Decimal("50000"), on_2025)
        assert grind.sbd_reduction == Decimal("50000")
        assert grind.reduced_sbd_limit == Decimal("450000")
        assert grind.grind_percentage == Decimal("10")
        assert grind.additional_tax_from_grind == ZERO

    def test_fully_ground_at_150k(self, on_2025):
        grind = calculate_passive_income_grind(Decimal("150000"), Decimal("50000"), on_2025)
        assert grind.is_fully_ground is True
        assert grind.reduced_sbd_limit == ZERO
        assert grind.grind_percentage == Decimal("100")
        # 50,000 of active income moves from 12.2% to 26.5%
        assert grind.additional_tax_from_grind == Decimal("7150")

    def test_reduction_never_exceeds_limit(self, on_2025):
        grind = calculate_passive_income_grind(Decimal("1000000"), ZERO, on_2025)
        assert grind.sbd_reduction == Decimal("500000")


class TestActiveBusinessTax:
    def test_small_business_rate(self, on_2025):
        assert calculate_active_business_tax(
            Decimal("100000"), Decimal("500000"), on_2025
        ) == Decimal("12200")

    def test_general_rate_above_limit(self, on_2025):
        assert calculate_active_business_tax(
            Decimal("600000"), Decimal("500000"), on_2025
        ) == Decimal("87500")

    def test_negative_income_is_zero(self, on_2025):
        assert calculate_active_business_tax(Decimal("-5000"), Decimal("500000"), on_2025) == ZERO

    def test_non_decreasing_in_income(self, on_2025):
        previous = ZERO
        for income in range(0, 1000001, 50000):
            tax = calculate_active_business_tax(Decimal(income), Decimal("300000"), on_2025)
            assert tax >= previous
            previous = tax
