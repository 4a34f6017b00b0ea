"""Individual Pension Plan (IPP) engine.

An IPP is a defined-benefit plan the corporation sponsors for the owner. The
corporation deducts contributions and administration costs as business
expenses; the member's RRSP room is reduced by the pension adjustment.

Implements:
  - Annual benefit accrual: 2% of pensionable earnings per year of service,
    capped at the CRA defined-benefit limit
  - Current service cost: present value at the member's age of one year's
    accrued benefit (25-year annuity from age 65, 5.25% discount rate)
  - Pension adjustment, 9 x benefit accrual - $600 (T4040)
  - Setup, actuarial and trust administration costs
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from ccpc.engines.tax_tables import IPP_MAX_BENEFIT_PER_YEAR, LATEST_KNOWN_YEAR
from ccpc.models.results import IPPYearResult
from ccpc.models.tax_year import TaxYearData

ZERO = Decimal("0")
ONE = Decimal("1")

BENEFIT_ACCRUAL_RATE = Decimal("0.02")
ACTUARIAL_DISCOUNT_RATE = Decimal("0.0525")
NORMAL_RETIREMENT_AGE = 65
ANNUITY_YEARS = 25

PENSION_ADJUSTMENT_MULTIPLIER = Decimal("9")
PENSION_ADJUSTMENT_OFFSET = Decimal("600")


class IPPAdminCosts(BaseModel):
    model_config = ConfigDict(frozen=True)

    setup: Decimal = Decimal("2500")
    annual_actuarial: Decimal = Decimal("1500")
    annual_admin: Decimal = Decimal("500")
    triennial_valuation: Decimal = Decimal("3000")

    def for_year(self, first_plan_year: bool) -> Decimal:
        """Setup is charged once, in the first plan year."""
        annual = self.annual_actuarial + self.annual_admin
        return annual + self.setup if first_plan_year else annual


ADMIN_COSTS = IPPAdminCosts()


class IPPMember(BaseModel):
    """The plan member as of one projection year."""

    model_config = ConfigDict(frozen=True)

    age: int
    years_of_service: int = 0  # completed before this year
    first_plan_year: bool = False


def max_benefit_per_year(year: int) -> Decimal:
    """CRA defined-benefit limit; years past the table use the latest known limit."""
    return IPP_MAX_BENEFIT_PER_YEAR.get(year, IPP_MAX_BENEFIT_PER_YEAR[LATEST_KNOWN_YEAR])


def annual_benefit_accrual(pensionable_earnings: Decimal, year: int) -> Decimal:
    return min(max(pensionable_earnings, ZERO) * BENEFIT_ACCRUAL_RATE, max_benefit_per_year(year))


def present_value_factor(age: int) -> Decimal:
    """Value at ``age`` of $1/year of pension paid from the normal retirement age."""
    years_to_retirement = max(NORMAL_RETIREMENT_AGE - age, 0)
    growth = ONE + ACTUARIAL_DISCOUNT_RATE
    annuity = (ONE - growth ** -ANNUITY_YEARS) / ACTUARIAL_DISCOUNT_RATE
    return annuity / growth ** years_to_retirement


def calculate_current_service_cost(member: IPPMember, salary: Decimal, year: int) -> Decimal:
    return annual_benefit_accrual(salary, year) * present_value_factor(member.age)


def calculate_pension_adjustment(salary: Decimal, year: int) -> Decimal:
    """RRSP room lost to the year's IPP accrual."""
    accrual = annual_benefit_accrual(salary, year)
    return max(PENSION_ADJUSTMENT_MULTIPLIER * accrual - PENSION_ADJUSTMENT_OFFSET, ZERO)


def calculate_ipp_year(member: IPPMember, salary: Decimal, tax_data: TaxYearData) -> IPPYearResult:
    """Contribution, costs and RRSP impact of one plan year funded by ``salary``.

    Past service is not bought back; only the current year is funded.
    """
    year = tax_data.year
    contribution = calculate_current_service_cost(member, salary, year)
    admin_costs = ADMIN_COSTS.for_year(member.first_plan_year)
    return IPPYearResult(
        member_age=member.age,
        contribution=contribution,
        pension_adjustment=calculate_pension_adjustment(salary, year),
        admin_costs=admin_costs,
        total_deductible=contribution + admin_costs,
        projected_annual_pension=annual_benefit_accrual(salary, year)
        * (member.years_of_service + 1),
        corporate_tax_savings=contribution * tax_data.corporate.small_business_rate,
    )
