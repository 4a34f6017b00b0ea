"""Personal income tax on a unified salary + dividend return.

Implements:
  - Federal and provincial bracket tax on salary plus grossed-up dividends
  - Basic personal amount deducted from taxable income before the brackets
  - Federal and provincial dividend tax credits (non-refundable)
  - Provincial surtax on provincial tax (Ontario, PEI)
  - Ontario Health Premium on actual (not grossed-up) income
  - Effective dividend tax rates used to size dividend payouts
"""

from decimal import Decimal

from ccpc.engines.brackets import calculate_tax_by_brackets, marginal_rate_at
from ccpc.engines.tax_tables import HEALTH_PREMIUM_EXEMPT_INCOME
from ccpc.models.enums import DividendType
from ccpc.models.results import PersonalTaxResult
from ccpc.models.tax_year import TaxYearData

ZERO = Decimal("0")
ONE = Decimal("1")


class PersonalTaxCalculator:
    """Computes personal tax for one tax year and province."""

    def __init__(self, tax_data: TaxYearData) -> None:
        self.tax_data = tax_data

    def compute(
        self,
        salary: Decimal,
        eligible_dividends: Decimal = ZERO,
        non_eligible_dividends: Decimal = ZERO,
        rrsp_deduction: Decimal = ZERO,
    ) -> PersonalTaxResult:
        """Tax on salary plus taxable dividends. Capital dividends are excluded by the caller."""
        td = self.tax_data
        salary = max(salary, ZERO)
        eligible_dividends = max(eligible_dividends, ZERO)
        non_eligible_dividends = max(non_eligible_dividends, ZERO)

        grossed_eligible = eligible_dividends * (ONE + td.dividends.eligible_gross_up)
        grossed_non_eligible = non_eligible_dividends * (ONE + td.dividends.non_eligible_gross_up)
        taxable_income = salary + grossed_eligible + grossed_non_eligible - max(rrsp_deduction, ZERO)
        if taxable_income <= ZERO:
            return PersonalTaxResult()

        # --- Federal ---
        federal_dtc = (
            grossed_eligible * td.dividends.eligible_federal_credit
            + grossed_non_eligible * td.dividends.non_eligible_federal_credit
        )
        federal_tax = max(
            calculate_tax_by_brackets(
                max(taxable_income - td.federal_basic_personal_amount, ZERO), td.federal_brackets
            )
            - federal_dtc,
            ZERO,
        )

        # --- Provincial ---
        provincial_dtc = (
            grossed_eligible * td.dividends.eligible_provincial_credit
            + grossed_non_eligible * td.dividends.non_eligible_provincial_credit
        )
        provincial_basic = max(
            calculate_tax_by_brackets(
                max(taxable_income - td.provincial_basic_personal_amount, ZERO),
                td.provincial_brackets,
            )
            - provincial_dtc,
            ZERO,
        )
        surtax = self.compute_surtax(provincial_basic)

        # --- Health premium (actual income) ---
        actual_income = salary + eligible_dividends + non_eligible_dividends - max(rrsp_deduction, ZERO)
        health_premium = self.compute_health_premium(actual_income)

        return PersonalTaxResult(
            taxable_income=taxable_income,
            federal_tax=federal_tax,
            provincial_tax=provincial_basic + surtax,
            provincial_surtax=surtax,
            health_premium=health_premium,
            federal_dividend_credit=federal_dtc,
            provincial_dividend_credit=provincial_dtc,
        )

    def compute_surtax(self, provincial_tax: Decimal) -> Decimal:
        surtax = ZERO
        for tier in self.tax_data.provincial_surtax:
            if provincial_tax > tier.threshold:
                surtax += (provincial_tax - tier.threshold) * tier.rate
        return surtax

    def compute_health_premium(self, income: Decimal) -> Decimal:
        schedule = self.tax_data.health_premium
        if not schedule or income <= HEALTH_PREMIUM_EXEMPT_INCOME:
            return ZERO
        bracket = None
        for candidate in schedule:
            if income > candidate.threshold:
                bracket = candidate
        if bracket is None:
            return ZERO
        return min(bracket.base + (income - bracket.threshold) * bracket.rate, bracket.max_premium)

    def effective_dividend_rate(
        self, dividend_type: DividendType, estimated_income: Decimal
    ) -> Decimal:
        """Marginal personal tax per dollar of cash dividend at ``estimated_income``.

        (1 + gross-up) * (federal + provincial marginal rate) minus the combined
        dividend tax credit on the grossed-up amount, floored at zero.
        """
        td = self.tax_data
        if dividend_type == DividendType.CAPITAL:
            return ZERO
        if dividend_type == DividendType.ELIGIBLE:
            gross_up = td.dividends.eligible_gross_up
            credit = td.dividends.eligible_federal_credit + td.dividends.eligible_provincial_credit
        else:
            gross_up = td.dividends.non_eligible_gross_up
            credit = (
                td.dividends.non_eligible_federal_credit
                + td.dividends.non_eligible_provincial_credit
            )
        marginal = marginal_rate_at(estimated_income, td.federal_brackets) + marginal_rate_at(
            estimated_income, td.provincial_brackets
        )
        return max((ONE + gross_up) * (marginal - credit), ZERO)
