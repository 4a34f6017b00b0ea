"""Yearly projection orchestrator and summary aggregator.

One run threads a single ``NotionalLedger`` through ``planning_horizon``
years, strictly in order. Each year:

  1. resolve TaxYearData for the calendar year
  2. compute the investment return on the prior year-end corporate balance
  3. credit notional additions and pay investment-income tax
  4. apply the compensation strategy (dividends and salary) to the income need
  5. compute payroll, IPP funding, personal tax and corporate tax
  6. emit a YearlyResult
  7. carry balances and RRSP/TFSA room forward, less any pension adjustment

Runs share no mutable state; ``calculate_projection`` is deterministic.
"""

import logging
from decimal import Decimal

from ccpc.engines.corporate import (
    calculate_investment_returns,
    calculate_investment_tax,
    calculate_passive_income_grind,
    compose_return,
    reduced_small_business_limit,
)
from ccpc.engines.ipp import IPPMember
from ccpc.engines.notional import NotionalLedger
from ccpc.engines.personal import PersonalTaxCalculator
from ccpc.engines.provinces import resolve_province
from ccpc.engines.strategy import SalaryPayer, StrategyResolver
from ccpc.engines.tax_years import get_tax_year_data, indexation_factor
from ccpc.exceptions import InvalidAllocationError, InvalidHorizonError
from ccpc.models.enums import DividendType
from ccpc.models.inputs import UserInputs
from ccpc.models.results import (
    IPPSummary,
    ProjectionSummary,
    StrategyComparisonResult,
    YearlyResult,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
ALLOCATION_TOLERANCE = Decimal("0.01")
# Personal income used to pick marginal rates for dividend sizing, as a
# multiple of the year's income need.
ESTIMATED_INCOME_MULTIPLIER = Decimal("1.5")
# Share of salary assumed available for an RRSP contribution.
RRSP_SALARY_SHARE = Decimal("0.6")


def check_inputs(inputs: UserInputs) -> None:
    """Raise on configuration defects; everything else is clamped later."""
    resolve_province(inputs.province)
    total = inputs.allocation_total
    if abs(total - HUNDRED) > ALLOCATION_TOLERANCE:
        raise InvalidAllocationError(total)
    if inputs.planning_horizon <= 0:
        raise InvalidHorizonError(inputs.planning_horizon)


class ProjectionEngine:
    """Runs one multi-year projection for a UserInputs value."""

    def __init__(self, inputs: UserInputs) -> None:
        check_inputs(inputs)
        self.inputs = inputs.clamped()
        self.province = resolve_province(self.inputs.province)
        self.warnings: list[str] = []

        self.ledger = NotionalLedger(
            cda=self.inputs.cda_balance,
            erdtoh=self.inputs.erdtoh_balance,
            nrdtoh=self.inputs.nrdtoh_balance,
            grip=self.inputs.grip_balance,
            corporate_investments=self.inputs.corporate_investment_balance,
        )
        self.rrsp_room = self.inputs.rrsp_room
        self.tfsa_room = self.inputs.tfsa_room
        self.composition = compose_return(
            self.inputs.investment_return_rate,
            self.inputs.canadian_equity_percent,
            self.inputs.us_equity_percent,
            self.inputs.international_equity_percent,
            self.inputs.fixed_income_percent,
        )

    def run(self) -> ProjectionSummary:
        results = [self.project_year(i) for i in range(self.inputs.planning_horizon)]
        summary = summarize(results, self.warnings)
        logger.info(
            "Projected %d years for %s (%s): total tax %s, final balance %s",
            len(results),
            self.province,
            self.inputs.salary_strategy,
            f"{summary.total_tax:,.2f}",
            f"{summary.final_corporate_balance:,.2f}",
        )
        return summary

    def ipp_member(self, year_index: int) -> IPPMember | None:
        if not self.inputs.consider_ipp:
            return None
        return IPPMember(
            age=self.inputs.ipp_member_age + year_index,
            years_of_service=self.inputs.ipp_years_of_service + year_index,
            first_plan_year=year_index == 0,
        )

    def project_year(self, year_index: int) -> YearlyResult:
        inputs = self.inputs
        ledger = self.ledger
        year = inputs.starting_year + year_index
        tax_data = get_tax_year_data(year, self.province, inputs.expected_inflation_rate)
        ledger.begin_year()

        spending_factor = (
            indexation_factor(inputs.expected_inflation_rate, year_index)
            if inputs.inflate_spending_needs
            else ONE
        )
        required_income = inputs.required_income * spending_factor

        # --- Investment returns and passive tax ---
        returns = calculate_investment_returns(
            ledger.cash, inputs.investment_return_rate, self.composition, tax_data
        )
        investment_tax = calculate_investment_tax(returns, tax_data)
        passive_tax = ledger.apply_investment_returns(returns, investment_tax.total)
        small_business_limit = reduced_small_business_limit(
            returns.taxable_investment_income, tax_data
        )

        # --- Contributions funded from this year's income ---
        tfsa_contribution = ZERO
        if inputs.maximize_tfsa and self.tfsa_room > ZERO:
            tfsa_contribution = min(tax_data.contributions.tfsa_annual_limit, self.tfsa_room)
        resp_contribution = (
            inputs.resp_contribution_amount * spending_factor if inputs.contribute_to_resp else ZERO
        )
        debt_paydown = inputs.debt_paydown_amount if inputs.pay_down_debt else ZERO
        income_need = required_income + tfsa_contribution + resp_contribution + debt_paydown

        # --- Strategy: salary and dividends ---
        calculator = PersonalTaxCalculator(tax_data)
        estimated_income = required_income * ESTIMATED_INCOME_MULTIPLIER
        eligible_rate = calculator.effective_dividend_rate(DividendType.ELIGIBLE, estimated_income)
        non_eligible_rate = calculator.effective_dividend_rate(
            DividendType.NON_ELIGIBLE, estimated_income
        )
        payer = SalaryPayer(
            ledger,
            tax_data,
            inputs.annual_corporate_retained_earnings,
            small_business_limit,
            self.ipp_member(year_index),
        )
        resolver = StrategyResolver(tax_data)
        decision = resolver.resolve(
            inputs.strategy,
            income_need,
            ledger,
            payer,
            eligible_rate,
            non_eligible_rate,
            salary_factor=spending_factor,
        )
        self.warnings.extend(resolver.warnings)
        payment = decision.salary_payment
        salary = payment.salary
        dividends = decision.dividends
        gross_dividends = dividends.gross_dividends
        grind = calculate_passive_income_grind(
            returns.taxable_investment_income, payment.taxable_business_income, tax_data
        )

        # --- RRSP ---
        rrsp_contribution = ZERO
        if inputs.contribute_to_rrsp:
            rrsp_contribution = max(
                min(
                    self.rrsp_room,
                    tax_data.contributions.rrsp_dollar_limit,
                    dividends.after_tax_income + salary * RRSP_SALARY_SHARE,
                ),
                ZERO,
            )
        rrsp_room_generated = min(
            salary * tax_data.contributions.rrsp_rate, tax_data.contributions.rrsp_dollar_limit
        )

        # --- Personal tax on the unified return ---
        personal = calculator.compute(
            salary,
            dividends.eligible_dividends,
            dividends.non_eligible_dividends,
            rrsp_contribution,
        )
        payroll = payment.payroll
        personal_tax = personal.total_tax

        # --- Corporate tax ---
        active_tax = payment.active_tax
        corporate_tax = active_tax + passive_tax

        after_tax_income = salary + gross_dividends - personal_tax - payroll.employee_total
        compensation = salary + gross_dividends
        after_tax_business_income = payment.taxable_business_income - active_tax
        corporate_share = ZERO
        if after_tax_business_income > ZERO:
            corporate_share = active_tax * min(ONE, gross_dividends / after_tax_business_income)
        effective_rate = (
            (personal_tax + corporate_share) / compensation if compensation > ZERO else ZERO
        )

        if income_need - after_tax_income > HUNDRED:
            self.warnings.append(
                f"{year}: after-tax income {after_tax_income:,.2f} is below the "
                f"need of {income_need:,.2f}"
            )

        # --- Carry room forward ---
        self.rrsp_room += rrsp_room_generated - rrsp_contribution
        if payment.ipp is not None:
            self.rrsp_room = max(self.rrsp_room - payment.ipp.pension_adjustment, ZERO)
        self.tfsa_room += tax_data.contributions.tfsa_annual_limit - tfsa_contribution

        result = YearlyResult(
            year=year,
            year_index=year_index,
            salary=salary,
            dividends=dividends,
            personal_tax=personal_tax,
            federal_tax=personal.federal_tax,
            provincial_tax=personal.provincial_tax,
            provincial_surtax=personal.provincial_surtax,
            health_premium=personal.health_premium,
            corporate_tax=corporate_tax,
            corporate_tax_on_active=active_tax,
            corporate_tax_on_passive=passive_tax,
            rdtoh_refund_received=dividends.rdtoh_refund,
            cpp=payroll.cpp,
            cpp2=payroll.cpp2,
            ei=payroll.ei,
            qpip=payroll.qpip,
            employer_payroll_cost=payroll.employer_total,
            employer_health_tax=payment.employer_health_tax,
            total_tax=personal_tax + corporate_tax + payroll.employee_total,
            after_tax_income=after_tax_income,
            required_income=income_need,
            effective_integrated_rate=effective_rate,
            rrsp_room_generated=rrsp_room_generated,
            rrsp_contribution=rrsp_contribution,
            tfsa_contribution=tfsa_contribution,
            resp_contribution=resp_contribution,
            debt_paydown=debt_paydown,
            notional_accounts=ledger.snapshot(),
            investment_returns=returns,
            passive_income_grind=grind,
            ipp=payment.ipp,
        )
        logger.debug(
            "Year %d: salary=%s dividends=%s personal=%s corporate=%s balance=%s",
            year,
            salary,
            gross_dividends,
            personal_tax,
            corporate_tax,
            ledger.cash,
        )
        return result


def summarize_ipp(results: list[YearlyResult]) -> IPPSummary | None:
    plan_years = [r.ipp for r in results if r.ipp is not None]
    if not plan_years:
        return None
    return IPPSummary(
        total_contributions=sum((p.contribution for p in plan_years), ZERO),
        total_admin_costs=sum((p.admin_costs for p in plan_years), ZERO),
        total_corporate_tax_savings=sum((p.corporate_tax_savings for p in plan_years), ZERO),
        total_pension_adjustments=sum((p.pension_adjustment for p in plan_years), ZERO),
        projected_annual_pension_at_end=plan_years[-1].projected_annual_pension,
    )


def summarize(results: list[YearlyResult], warnings: list[str] | None = None) -> ProjectionSummary:
    """Fold yearly results into totals and effective rates."""
    if not results:
        return ProjectionSummary(warnings=list(warnings or []))

    total_salary = sum((r.salary for r in results), ZERO)
    total_dividends = sum((r.dividends.gross_dividends for r in results), ZERO)
    total_compensation = total_salary + total_dividends
    total_personal = sum((r.personal_tax for r in results), ZERO)
    total_active = sum((r.corporate_tax_on_active for r in results), ZERO)
    total_passive = sum((r.corporate_tax_on_passive for r in results), ZERO)
    total_refund = sum((r.rdtoh_refund_received for r in results), ZERO)
    total_return = sum((r.investment_returns.total_return for r in results), ZERO)
    total_after_tax = sum((r.after_tax_income for r in results), ZERO)
    total_corporate = total_active + total_passive
    total_tax = total_personal + total_corporate

    def ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
        return numerator / denominator if denominator > ZERO else ZERO

    return ProjectionSummary(
        total_compensation=total_compensation,
        total_salary=total_salary,
        total_dividends=total_dividends,
        total_personal_tax=total_personal,
        total_corporate_tax=total_corporate,
        total_corporate_tax_on_active=total_active,
        total_corporate_tax_on_passive=total_passive,
        total_rdtoh_refund=total_refund,
        total_payroll=sum((r.cpp + r.cpp2 + r.ei + r.qpip for r in results), ZERO),
        total_tax=total_tax,
        total_after_tax_income=total_after_tax,
        effective_tax_rate=ratio(total_tax, total_compensation),
        effective_compensation_rate=ratio(total_personal + total_active, total_compensation),
        effective_passive_rate=max(ratio(total_passive - total_refund, total_return), ZERO),
        final_corporate_balance=results[-1].notional_accounts.corporate_investments.balance_end,
        total_rrsp_room_generated=sum((r.rrsp_room_generated for r in results), ZERO),
        total_rrsp_contributions=sum((r.rrsp_contribution for r in results), ZERO),
        total_tfsa_contributions=sum((r.tfsa_contribution for r in results), ZERO),
        average_annual_income=total_compensation / len(results),
        ipp=summarize_ipp(results),
        yearly_results=results,
        warnings=list(warnings or []),
    )


def calculate_projection(inputs: UserInputs) -> ProjectionSummary:
    """Project ``inputs`` year by year and summarize.

    Raises:
        InvalidProvinceError: unrecognized province code.
        InvalidAllocationError: portfolio percentages do not sum to 100.
        InvalidHorizonError: planning horizon is not positive.
    """
    return ProjectionEngine(inputs).run()


def compare_strategies(first: UserInputs, second: UserInputs) -> StrategyComparisonResult:
    """Project two scenarios; differences are ``second`` minus ``first``."""
    a = calculate_projection(first)
    b = calculate_projection(second)
    return StrategyComparisonResult(
        first=a,
        second=b,
        tax_savings=b.total_tax - a.total_tax,
        final_balance_difference=b.final_corporate_balance - a.final_corporate_balance,
        rrsp_room_difference=b.total_rrsp_room_generated - a.total_rrsp_room_generated,
    )
