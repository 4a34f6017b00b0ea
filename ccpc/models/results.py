"""Projection output models."""

from decimal import Decimal

from pydantic import BaseModel, Field

from ccpc.models.enums import NotionalAccount, SalaryStrategy

ZERO = Decimal("0")


class InvestmentReturns(BaseModel):
    """One year of portfolio return on the corporate investment balance."""

    total_return: Decimal = ZERO
    canadian_dividends: Decimal = ZERO
    foreign_income: Decimal = ZERO
    interest_income: Decimal = ZERO
    realized_capital_gain: Decimal = ZERO
    unrealized_capital_gain: Decimal = ZERO
    taxable_capital_gain: Decimal = ZERO
    cda_increase: Decimal = ZERO
    erdtoh_increase: Decimal = ZERO
    nrdtoh_increase: Decimal = ZERO
    grip_increase: Decimal = ZERO

    @property
    def taxable_investment_income(self) -> Decimal:
        return self.foreign_income + self.taxable_capital_gain


class DividendFunding(BaseModel):
    """Dividends paid in a year, by type and funding source."""

    capital_dividends: Decimal = ZERO
    eligible_dividends: Decimal = ZERO
    non_eligible_dividends: Decimal = ZERO
    regular_dividends: Decimal = Field(
        default=ZERO, description="Taxable dividends paid without an RDTOH refund"
    )
    rdtoh_refund: Decimal = ZERO
    after_tax_income: Decimal = Field(
        default=ZERO, description="Estimated after-tax value at effective dividend rates"
    )

    @property
    def gross_dividends(self) -> Decimal:
        return self.capital_dividends + self.eligible_dividends + self.non_eligible_dividends


class AccountMovement(BaseModel):
    """balance_end == balance_start + added - used."""

    balance_start: Decimal = ZERO
    added: Decimal = ZERO
    used: Decimal = ZERO
    balance_end: Decimal = ZERO


class NotionalAccountSnapshot(BaseModel):
    cda: AccountMovement
    erdtoh: AccountMovement
    nrdtoh: AccountMovement
    grip: AccountMovement
    corporate_investments: AccountMovement

    def movement(self, account: NotionalAccount) -> AccountMovement:
        return {
            NotionalAccount.CDA: self.cda,
            NotionalAccount.ERDTOH: self.erdtoh,
            NotionalAccount.NRDTOH: self.nrdtoh,
            NotionalAccount.GRIP: self.grip,
            NotionalAccount.CORPORATE_INVESTMENTS: self.corporate_investments,
        }[account]


class PassiveIncomeGrindInfo(BaseModel):
    total_passive_income: Decimal = ZERO
    reduced_sbd_limit: Decimal = Decimal("500000")
    sbd_reduction: Decimal = ZERO
    additional_tax_from_grind: Decimal = ZERO
    is_fully_ground: bool = False
    grind_percentage: Decimal = ZERO


class PayrollDeductions(BaseModel):
    """Employee and employer payroll amounts for one salary."""

    cpp: Decimal = ZERO
    cpp2: Decimal = ZERO
    ei: Decimal = ZERO
    qpip: Decimal = ZERO
    employer_cpp: Decimal = ZERO
    employer_cpp2: Decimal = ZERO
    employer_ei: Decimal = ZERO
    employer_qpip: Decimal = ZERO

    @property
    def employee_total(self) -> Decimal:
        return self.cpp + self.cpp2 + self.ei + self.qpip

    @property
    def employer_total(self) -> Decimal:
        return self.employer_cpp + self.employer_cpp2 + self.employer_ei + self.employer_qpip


class PersonalTaxResult(BaseModel):
    taxable_income: Decimal = ZERO
    federal_tax: Decimal = ZERO
    provincial_tax: Decimal = Field(default=ZERO, description="After credits, including surtax")
    provincial_surtax: Decimal = ZERO
    health_premium: Decimal = ZERO
    federal_dividend_credit: Decimal = ZERO
    provincial_dividend_credit: Decimal = ZERO

    @property
    def total_tax(self) -> Decimal:
        return self.federal_tax + self.provincial_tax + self.health_premium


class IPPYearResult(BaseModel):
    """One plan year of an Individual Pension Plan."""

    member_age: int
    contribution: Decimal = ZERO
    pension_adjustment: Decimal = Field(
        default=ZERO, description="Deducted from next year's RRSP room"
    )
    admin_costs: Decimal = ZERO
    total_deductible: Decimal = Field(default=ZERO, description="Contribution plus admin costs")
    projected_annual_pension: Decimal = ZERO
    corporate_tax_savings: Decimal = ZERO


class YearlyResult(BaseModel):
    """One projected year. Emitted once and never modified."""

    year: int
    year_index: int
    salary: Decimal = ZERO
    dividends: DividendFunding = Field(default_factory=DividendFunding)
    personal_tax: Decimal = ZERO
    federal_tax: Decimal = ZERO
    provincial_tax: Decimal = ZERO
    provincial_surtax: Decimal = ZERO
    health_premium: Decimal = ZERO
    corporate_tax: Decimal = ZERO
    corporate_tax_on_active: Decimal = ZERO
    corporate_tax_on_passive: Decimal = ZERO
    rdtoh_refund_received: Decimal = ZERO
    cpp: Decimal = ZERO
    cpp2: Decimal = ZERO
    ei: Decimal = ZERO
    qpip: Decimal = ZERO
    employer_payroll_cost: Decimal = ZERO
    employer_health_tax: Decimal = ZERO
    total_tax: Decimal = ZERO
    after_tax_income: Decimal = ZERO
    required_income: Decimal = ZERO
    effective_integrated_rate: Decimal = ZERO
    rrsp_room_generated: Decimal = ZERO
    rrsp_contribution: Decimal = ZERO
    tfsa_contribution: Decimal = ZERO
    resp_contribution: Decimal = ZERO
    debt_paydown: Decimal = ZERO
    notional_accounts: NotionalAccountSnapshot
    investment_returns: InvestmentReturns = Field(default_factory=InvestmentReturns)
    passive_income_grind: PassiveIncomeGrindInfo = Field(default_factory=PassiveIncomeGrindInfo)
    ipp: IPPYearResult | None = None


class IPPSummary(BaseModel):
    total_contributions: Decimal = ZERO
    total_admin_costs: Decimal = ZERO
    total_corporate_tax_savings: Decimal = ZERO
    total_pension_adjustments: Decimal = ZERO
    projected_annual_pension_at_end: Decimal = ZERO


class ProjectionSummary(BaseModel):
    total_compensation: Decimal = ZERO
    total_salary: Decimal = ZERO
    total_dividends: Decimal = ZERO
    total_personal_tax: Decimal = ZERO
    total_corporate_tax: Decimal = ZERO
    total_corporate_tax_on_active: Decimal = ZERO
    total_corporate_tax_on_passive: Decimal = ZERO
    total_rdtoh_refund: Decimal = ZERO
    total_payroll: Decimal = Field(default=ZERO, description="Employee CPP/CPP2/EI/QPIP")
    total_tax: Decimal = Field(default=ZERO, description="Personal plus corporate tax")
    total_after_tax_income: Decimal = ZERO
    effective_tax_rate: Decimal = ZERO
    effective_compensation_rate: Decimal = ZERO
    effective_passive_rate: Decimal = ZERO
    final_corporate_balance: Decimal = ZERO
    total_rrsp_room_generated: Decimal = ZERO
    total_rrsp_contributions: Decimal = ZERO
    total_tfsa_contributions: Decimal = ZERO
    average_annual_income: Decimal = Field(
        default=ZERO, description="Salary plus dividends per year"
    )
    ipp: IPPSummary | None = None
    yearly_results: list[YearlyResult] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class StrategyComparisonResult(BaseModel):
    """Result of ``compare_strategies(a, b)``; differences are b minus a."""

    first: ProjectionSummary
    second: ProjectionSummary
    tax_savings: Decimal
    final_balance_difference: Decimal
    rrsp_room_difference: Decimal


class AfterTaxWealth(BaseModel):
    at_current_rate: Decimal
    at_lower_rate: Decimal
    at_top_rate: Decimal
    current_rate: Decimal
    lower_rate: Decimal
    top_rate: Decimal


class StrategyOutcome(BaseModel):
    id: str
    name: str
    salary_strategy: SalaryStrategy
    summary: ProjectionSummary
    after_tax_wealth: AfterTaxWealth
    tax_difference_vs_best: Decimal = ZERO
    balance_difference_vs_best: Decimal = ZERO


class PresetComparison(BaseModel):
    outcomes: list[StrategyOutcome]
    lowest_tax_id: str
    highest_balance_id: str
    best_overall_id: str
