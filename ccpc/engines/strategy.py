"""Compensation strategy resolver.

Decides, for one projection year, how much salary to pay and which dividends
to declare to meet the year's after-tax income need:

  Dynamic         notional-account dividends first (no retained-earnings
                  fallback), salary for any remaining shortfall
  Fixed(amount)   the fixed salary (inflated with spending needs), then
                  dividends for any shortfall, retained earnings allowed
  DividendsOnly   no salary, dividends in depletion order, then non-eligible
                  dividends from retained earnings
"""

import logging
from decimal import Decimal
from typing import assert_never

from pydantic import BaseModel, Field

from ccpc.engines.corporate import calculate_active_business_tax
from ccpc.engines.ipp import IPPMember, calculate_ipp_year
from ccpc.engines.notional import NotionalLedger
from ccpc.engines.payroll import calculate_employer_health_tax, calculate_payroll
from ccpc.engines.personal import PersonalTaxCalculator
from ccpc.models.enums import NotionalAccount
from ccpc.models.inputs import (
    CompensationStrategy,
    DividendsOnlyStrategy,
    DynamicStrategy,
    FixedSalaryStrategy,
)
from ccpc.models.results import DividendFunding, IPPYearResult, PayrollDeductions
from ccpc.models.tax_year import TaxYearData

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
SHORTFALL_TOLERANCE = Decimal("1")
SOLVER_TOLERANCE = Decimal("1")
SOLVER_MAX_ITERATIONS = 20
SOLVER_INITIAL_GROSS_UP = Decimal("1.5")
SOLVER_STEP = Decimal("1.4")
AFFORDABILITY_MAX_ITERATIONS = 10


class SalaryPayment(BaseModel):
    """Salary paid in a year and the corporate settlement of active income."""

    requested: Decimal = ZERO
    salary: Decimal = ZERO
    payroll: PayrollDeductions = Field(default_factory=PayrollDeductions)
    employer_health_tax: Decimal = ZERO
    ipp: IPPYearResult | None = None
    ipp_deduction: Decimal = ZERO
    active_business_income: Decimal = ZERO
    taxable_business_income: Decimal = ZERO
    active_tax: Decimal = ZERO

    @property
    def employer_cost(self) -> Decimal:
        return self.payroll.employer_total


class CompensationDecision(BaseModel):
    salary_payment: SalaryPayment
    dividends: DividendFunding


class SalaryPayer:
    """Settles one year's active business income against salary.

    Adds the year's active income to corporate cash, pays salary, employer
    payroll costs, employer health tax and any IPP funding, then active-business
    tax on what is left. Salary is reduced if the corporation cannot afford it.
    """

    def __init__(
        self,
        ledger: NotionalLedger,
        tax_data: TaxYearData,
        active_business_income: Decimal,
        small_business_limit: Decimal,
        ipp_member: IPPMember | None = None,
    ) -> None:
        self.ledger = ledger
        self.tax_data = tax_data
        self.active_business_income = max(active_business_income, ZERO)
        self.small_business_limit = small_business_limit
        self.ipp_member = ipp_member
        self.payment: SalaryPayment | None = None

    def _employer_extra(self, salary: Decimal) -> Decimal:
        payroll = calculate_payroll(salary, self.tax_data)
        health_tax = calculate_employer_health_tax(
            salary, self.tax_data.province, self.tax_data.year
        )
        return payroll.employer_total + health_tax

    def affordable_salary(self, requested: Decimal, available: Decimal) -> Decimal:
        salary = max(requested, ZERO)
        for _ in range(AFFORDABILITY_MAX_ITERATIONS):
            extra = self._employer_extra(salary)
            if salary + extra <= available:
                return salary
            salary = max(min(salary, available - extra), ZERO)
        return salary

    def pay(self, requested: Decimal) -> SalaryPayment:
        if self.payment is not None:
            raise RuntimeError("Active business income already settled for this year")

        ledger = self.ledger
        ledger.add(NotionalAccount.CORPORATE_INVESTMENTS, self.active_business_income)
        salary = self.affordable_salary(requested, ledger.cash)

        payroll = calculate_payroll(salary, self.tax_data)
        health_tax = calculate_employer_health_tax(
            salary, self.tax_data.province, self.tax_data.year
        )
        ledger.use(
            NotionalAccount.CORPORATE_INVESTMENTS, salary + payroll.employer_total + health_tax
        )

        # IPP funding is only drawn from what cash remains.
        ipp = None
        ipp_deduction = ZERO
        if self.ipp_member is not None and salary > ZERO:
            ipp = calculate_ipp_year(self.ipp_member, salary, self.tax_data)
            ipp_deduction = ledger.use(NotionalAccount.CORPORATE_INVESTMENTS, ipp.total_deductible)

        taxable_business_income = max(
            self.active_business_income
            - salary
            - payroll.employer_total
            - health_tax
            - ipp_deduction,
            ZERO,
        )
        active_tax = calculate_active_business_tax(
            taxable_business_income, self.small_business_limit, self.tax_data
        )
        ledger.use(NotionalAccount.CORPORATE_INVESTMENTS, active_tax)

        self.payment = SalaryPayment(
            requested=max(requested, ZERO),
            salary=salary,
            payroll=payroll,
            employer_health_tax=health_tax,
            ipp=ipp,
            ipp_deduction=ipp_deduction,
            active_business_income=self.active_business_income,
            taxable_business_income=taxable_business_income,
            active_tax=active_tax,
        )
        return self.payment


class StrategyResolver:
    """Applies a compensation strategy to one year's ledger."""

    def __init__(self, tax_data: TaxYearData) -> None:
        self.tax_data = tax_data
        self.calculator = PersonalTaxCalculator(tax_data)
        self.warnings: list[str] = []

    def salary_after_tax(self, salary: Decimal, dividends: DividendFunding | None = None) -> Decimal:
        """Cash kept from ``salary`` after the extra personal tax and employee payroll it causes."""
        eligible = dividends.eligible_dividends if dividends else ZERO
        non_eligible = dividends.non_eligible_dividends if dividends else ZERO
        base = self.calculator.compute(ZERO, eligible, non_eligible).total_tax
        with_salary = self.calculator.compute(salary, eligible, non_eligible).total_tax
        payroll = calculate_payroll(salary, self.tax_data)
        return salary - (with_salary - base) - payroll.employee_total

    def solve_required_salary(
        self, target_after_tax: Decimal, dividends: DividendFunding | None = None
    ) -> Decimal:
        """Gross salary netting ``target_after_tax``; bounded fixed-point iteration.

        Returns the last estimate if the iteration cap is reached.
        """
        if target_after_tax <= ZERO:
            return ZERO
        salary = target_after_tax * SOLVER_INITIAL_GROSS_UP
        for _ in range(SOLVER_MAX_ITERATIONS):
            diff = target_after_tax - self.salary_after_tax(salary, dividends)
            if abs(diff) < SOLVER_TOLERANCE:
                break
            salary = max(salary + diff * SOLVER_STEP, ZERO)
        return salary

    def resolve(
        self,
        strategy: CompensationStrategy,
        required_after_tax: Decimal,
        ledger: NotionalLedger,
        payer: SalaryPayer,
        eligible_rate: Decimal,
        non_eligible_rate: Decimal,
        salary_factor: Decimal = Decimal("1"),
    ) -> CompensationDecision:
        refund_rate = self.tax_data.corporate.dividend_refund_rate
        required_after_tax = max(required_after_tax, ZERO)

        match strategy:
            case FixedSalaryStrategy(amount=amount):
                payment = payer.pay(max(amount, ZERO) * salary_factor)
                shortfall = max(required_after_tax - self.salary_after_tax(payment.salary), ZERO)
                dividends = ledger.pay_dividends(
                    shortfall,
                    eligible_rate,
                    non_eligible_rate,
                    refund_rate,
                    use_retained_earnings=True,
                )
            case DividendsOnlyStrategy():
                dividends = ledger.pay_dividends(
                    required_after_tax,
                    eligible_rate,
                    non_eligible_rate,
                    refund_rate,
                    use_retained_earnings=True,
                )
                payment = payer.pay(ZERO)
            case DynamicStrategy():
                dividends = ledger.pay_dividends(
                    required_after_tax,
                    eligible_rate,
                    non_eligible_rate,
                    refund_rate,
                    use_retained_earnings=False,
                )
                shortfall = required_after_tax - dividends.after_tax_income
                target = ZERO
                if shortfall > SHORTFALL_TOLERANCE:
                    target = self.solve_required_salary(shortfall, dividends)
                payment = payer.pay(target)
            case _:
                assert_never(strategy)

        if payment.salary < payment.requested:
            self.warnings.append(
                f"{self.tax_data.year}: salary reduced from {payment.requested:,.2f} to "
                f"{payment.salary:,.2f}; corporate cash insufficient"
            )
            logger.debug("Salary capped at %s (requested %s)", payment.salary, payment.requested)

        return CompensationDecision(salary_payment=payment, dividends=dividends)
