"""Corporate tax engine.

Implements:
  - Composition of the annual portfolio return (Canadian dividends, foreign
    dividends, interest, capital gains) from the asset allocation
  - Notional-account additions generated by investment income (CDA, eRDTOH,
    nRDTOH, GRIP)
  - Part I tax on aggregate investment income (refundable portion to nRDTOH)
    and Part IV tax on portfolio dividends (refundable through eRDTOH)
  - Passive income grind of the small business limit, ITA 125(5.1)(b)
  - Active business income tax at the small-business and general rates
"""

from decimal import Decimal

from pydantic import BaseModel

from ccpc.engines.tax_tables import GRIND_RATE, GRIND_THRESHOLD
from ccpc.models.results import InvestmentReturns, PassiveIncomeGrindInfo
from ccpc.models.tax_year import TaxYearData

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Assumed annual dividend yields by equity class.
CANADIAN_DIVIDEND_YIELD = Decimal("0.024")
US_DIVIDEND_YIELD = Decimal("0.015")
INTERNATIONAL_DIVIDEND_YIELD = Decimal("0.020")

# Fraction of accrued capital gains realized each year, and the inclusion rate.
REALIZATION_RATE = Decimal("0.5")
CAPITAL_GAINS_INCLUSION_RATE = Decimal("0.5")


class ReturnComposition(BaseModel):
    """Per-dollar return rates by income character."""

    canadian_dividend_rate: Decimal
    foreign_dividend_rate: Decimal
    interest_rate: Decimal
    capital_gain_rate: Decimal

    @property
    def foreign_income_rate(self) -> Decimal:
        return self.foreign_dividend_rate + self.interest_rate


class InvestmentTax(BaseModel):
    """Corporate tax on one year of investment income."""

    part_i_tax: Decimal = ZERO
    refundable_part_i: Decimal = ZERO
    part_iv_tax: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.part_i_tax + self.part_iv_tax

    @property
    def non_refundable(self) -> Decimal:
        return self.part_i_tax - self.refundable_part_i


def compose_return(
    total_return_rate: Decimal,
    canadian_equity_percent: Decimal,
    us_equity_percent: Decimal,
    international_equity_percent: Decimal,
    fixed_income_percent: Decimal,
) -> ReturnComposition:
    """Split a total return rate into dividend, interest and capital-gain rates."""
    canadian_dividend_rate = canadian_equity_percent / HUNDRED * CANADIAN_DIVIDEND_YIELD
    foreign_dividend_rate = (
        us_equity_percent * US_DIVIDEND_YIELD
        + international_equity_percent * INTERNATIONAL_DIVIDEND_YIELD
    ) / HUNDRED
    interest_rate = fixed_income_percent / HUNDRED * total_return_rate
    capital_gain_rate = (
        total_return_rate - canadian_dividend_rate - foreign_dividend_rate - interest_rate
    )
    return ReturnComposition(
        canadian_dividend_rate=canadian_dividend_rate,
        foreign_dividend_rate=foreign_dividend_rate,
        interest_rate=interest_rate,
        capital_gain_rate=capital_gain_rate,
    )


def calculate_investment_returns(
    balance: Decimal,
    total_return_rate: Decimal,
    composition: ReturnComposition,
    tax_data: TaxYearData,
) -> InvestmentReturns:
    """One year of return on ``balance`` and the notional additions it creates.

    A non-positive balance earns nothing. Capital losses generate no CDA or
    refundable tax and are not carried forward.
    """
    if balance <= ZERO:
        return InvestmentReturns()

    corporate = tax_data.corporate
    total_return = balance * total_return_rate
    canadian_dividends = balance * composition.canadian_dividend_rate
    foreign_income = balance * composition.foreign_income_rate
    interest_income = balance * composition.interest_rate
    capital_gain = balance * composition.capital_gain_rate

    realized = capital_gain * REALIZATION_RATE
    realized_gain = max(realized, ZERO)
    taxable_capital_gain = realized_gain * CAPITAL_GAINS_INCLUSION_RATE

    return InvestmentReturns(
        total_return=total_return,
        canadian_dividends=canadian_dividends,
        foreign_income=foreign_income,
        interest_income=interest_income,
        realized_capital_gain=realized,
        unrealized_capital_gain=capital_gain - realized,
        taxable_capital_gain=taxable_capital_gain,
        cda_increase=realized_gain - taxable_capital_gain,
        erdtoh_increase=canadian_dividends * corporate.part_iv_rate,
        nrdtoh_increase=(taxable_capital_gain + foreign_income) * corporate.refundable_rate,
        grip_increase=canadian_dividends,
    )


def calculate_investment_tax(returns: InvestmentReturns, tax_data: TaxYearData) -> InvestmentTax:
    """Part I tax on aggregate investment income plus Part IV on portfolio dividends."""
    corporate = tax_data.corporate
    taxable = max(returns.taxable_investment_income, ZERO)
    return InvestmentTax(
        part_i_tax=taxable * corporate.investment_income_rate,
        refundable_part_i=returns.nrdtoh_increase,
        part_iv_tax=returns.erdtoh_increase,
    )


def reduced_small_business_limit(
    adjusted_aggregate_investment_income: Decimal, tax_data: TaxYearData
) -> Decimal:
    """Small business limit less $5 per $1 of AAII over $50,000, floored at zero."""
    limit = tax_data.corporate.small_business_limit
    aaii = max(adjusted_aggregate_investment_income, ZERO)
    return limit - min(GRIND_RATE * max(aaii - GRIND_THRESHOLD, ZERO), limit)


def calculate_passive_income_grind(
    adjusted_aggregate_investment_income: Decimal,
    taxable_business_income: Decimal,
    tax_data: TaxYearData,
) -> PassiveIncomeGrindInfo:
    """Grind of the small business limit and the extra tax it causes.

    ``taxable_business_income`` is active income after salary, employer
    payroll costs and other deductible expenses.
    """
    limit = tax_data.corporate.small_business_limit
    aaii = max(adjusted_aggregate_investment_income, ZERO)
    reduced_limit = reduced_small_business_limit(aaii, tax_data)
    reduction = limit - reduced_limit

    # Only income that would have sat between the reduced and full limit loses the SBD.
    lost_sbd_income = max(min(max(taxable_business_income, ZERO), limit) - reduced_limit, ZERO)
    rate_gap = tax_data.corporate.general_rate - tax_data.corporate.small_business_rate

    return PassiveIncomeGrindInfo(
        total_passive_income=aaii,
        reduced_sbd_limit=reduced_limit,
        sbd_reduction=reduction,
        additional_tax_from_grind=lost_sbd_income * rate_gap,
        is_fully_ground=reduced_limit == ZERO,
        grind_percentage=reduction / limit * HUNDRED if limit > ZERO else ZERO,
    )


def calculate_active_business_tax(
    taxable_business_income: Decimal, small_business_limit: Decimal, tax_data: TaxYearData
) -> Decimal:
    """Small-business rate up to the (ground-down) limit, general rate above it."""
    income = max(taxable_business_income, ZERO)
    small_business_portion = min(income, small_business_limit)
    general_portion = income - small_business_portion
    return (
        small_business_portion * tax_data.corporate.small_business_rate
        + general_portion * tax_data.corporate.general_rate
    )
