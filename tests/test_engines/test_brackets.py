"""Tests for the marginal-bracket tax calculator."""

from decimal import Decimal

import pytest

from ccpc.engines.brackets import calculate_tax_by_brackets, marginal_rate_at
from ccpc.engines.tax_years import get_tax_year_data
from ccpc.models.tax_year import TaxBracket

SIMPLE = (
    TaxBracket(threshold=Decimal("0"), rate=Decimal("0.10")),
    TaxBracket(threshold=Decimal("10000"), rate=Decimal("0.20")),
    TaxBracket(threshold=Decimal("20000"), rate=Decimal("0.30")),
)


class TestCalculateTaxByBrackets:
    def test_zero_income(self):
        assert calculate_tax_by_brackets(Decimal("0"), SIMPLE) == Decimal("0")

    def test_within_first_bracket(self):
        assert calculate_tax_by_brackets(Decimal("5000"), SIMPLE) == Decimal("500")

    def test_spans_two_brackets(self):
        assert calculate_tax_by_brackets(Decimal("15000"), SIMPLE) == Decimal("2000")

    def test_top_bracket_unbounded(self):
        assert calculate_tax_by_brackets(Decimal("25000"), SIMPLE) == Decimal("4500")

    def test_negative_income_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            calculate_tax_by_brackets(Decimal("-1"), SIMPLE)

    def test_continuous_at_thresholds(self):
        for bracket in SIMPLE[1:]:
            at = calculate_tax_by_brackets(bracket.threshold, SIMPLE)
            just_above = calculate_tax_by_brackets(bracket.threshold + Decimal("0.01"), SIMPLE)
            assert Decimal("0") <= just_above - at <= Decimal("0.01")

    def test_monotonic_on_real_schedule(self):
        brackets = get_tax_year_data(2025, "ON").federal_brackets
        previous = Decimal("0")
        for income in range(0, 400001, 2500):
            tax = calculate_tax_by_brackets(Decimal(income), brackets)
            assert tax >= previous
            previous = tax

    def test_known_federal_value(self):
        brackets = get_tax_year_data(2025, "ON").federal_brackets
        # 57375 * 14.5% + (100000 - 57375) * 20.5%
        assert calculate_tax_by_brackets(Decimal("100000"), brackets) == Decimal("17057.5")


class TestMarginalRate:
    def test_rate_in_middle_bracket(self):
        assert marginal_rate_at(Decimal("15000"), SIMPLE) == Decimal("0.20")

    def test_rate_at_threshold_is_lower_bracket(self):
        assert marginal_rate_at(Decimal("10000"), SIMPLE) == Decimal("0.10")

    def test_rate_at_zero(self):
        assert marginal_rate_at(Decimal("0"), SIMPLE) == Decimal("0.10")
