"""Scenario configuration models."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from ccpc.models.enums import SalaryStrategy

ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Compensation strategy: a closed set of variants, resolved with ``match``.
# ---------------------------------------------------------------------------

class DynamicStrategy(BaseModel):
    """Draw on notional accounts first, pay salary only for the shortfall."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dynamic"] = "dynamic"


class FixedSalaryStrategy(BaseModel):
    """Pay a fixed salary each year, top up with dividends if short."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed"] = "fixed"
    amount: Decimal


class DividendsOnlyStrategy(BaseModel):
    """Never pay salary; fund the whole need with dividends."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dividends-only"] = "dividends-only"


CompensationStrategy = Annotated[
    DynamicStrategy | FixedSalaryStrategy | DividendsOnlyStrategy,
    Field(discriminator="kind"),
]


def make_strategy(
    kind: SalaryStrategy | str, fixed_salary_amount: Decimal | None = None
) -> DynamicStrategy | FixedSalaryStrategy | DividendsOnlyStrategy:
    """Build a strategy variant from its name (as stored by form state)."""
    kind = SalaryStrategy(kind)
    if kind == SalaryStrategy.FIXED:
        return FixedSalaryStrategy(amount=fixed_salary_amount or ZERO)
    if kind == SalaryStrategy.DIVIDENDS_ONLY:
        return DividendsOnlyStrategy()
    return DynamicStrategy()


def _current_year() -> int:
    return date.today().year


# ---------------------------------------------------------------------------
# User inputs
# ---------------------------------------------------------------------------

class UserInputs(BaseModel):
    """One projection scenario. Owned by the caller, never mutated by the engine."""

    province: str = "ON"
    required_income: Decimal = Field(
        default=Decimal("100000"), description="After-tax income needed in year 1"
    )
    planning_horizon: int = 5
    starting_year: int = Field(default_factory=_current_year)
    expected_inflation_rate: Decimal = Decimal("0.02")
    inflate_spending_needs: bool = True

    # Starting balances
    corporate_investment_balance: Decimal = Decimal("500000")
    cda_balance: Decimal = ZERO
    erdtoh_balance: Decimal = ZERO
    nrdtoh_balance: Decimal = ZERO
    grip_balance: Decimal = ZERO
    rrsp_room: Decimal = Field(default=ZERO, description="Unused RRSP room at the start")
    tfsa_room: Decimal = Field(default=ZERO, description="Unused TFSA room at the start")

    # Portfolio
    investment_return_rate: Decimal = Decimal("0.0431")
    canadian_equity_percent: Decimal = Decimal("33.34")
    us_equity_percent: Decimal = Decimal("33.33")
    international_equity_percent: Decimal = Decimal("33.33")
    fixed_income_percent: Decimal = ZERO

    annual_corporate_retained_earnings: Decimal = Field(
        default=Decimal("50000"), description="Pre-tax active business income each year"
    )

    # Contribution elections
    maximize_tfsa: bool = False
    contribute_to_rrsp: bool = False
    contribute_to_resp: bool = False
    resp_contribution_amount: Decimal = ZERO
    pay_down_debt: bool = False
    debt_paydown_amount: Decimal = ZERO

    # Individual Pension Plan
    consider_ipp: bool = False
    ipp_member_age: int = Field(default=45, description="Member age in the first projection year")
    ipp_years_of_service: int = Field(
        default=0, description="Years of service before the first projection year"
    )

    strategy: CompensationStrategy = Field(default_factory=DynamicStrategy)

    @property
    def salary_strategy(self) -> SalaryStrategy:
        return SalaryStrategy(self.strategy.kind)

    @property
    def allocation_total(self) -> Decimal:
        return (
            self.canadian_equity_percent
            + self.us_equity_percent
            + self.international_equity_percent
            + self.fixed_income_percent
        )

    def clamped(self) -> "UserInputs":
        """Return a copy with every monetary and rate input floored at zero.

        The investment return rate may be negative (a losing year) but never
        below -100%.
        """
        updates: dict[str, object] = {}
        for name, value in self:
            if name == "investment_return_rate":
                if value < Decimal("-1"):
                    updates[name] = Decimal("-1")
            elif isinstance(value, Decimal) and value < ZERO:
                updates[name] = ZERO
            elif name == "ipp_years_of_service" and value < 0:
                updates[name] = 0
        if isinstance(self.strategy, FixedSalaryStrategy) and self.strategy.amount < ZERO:
            updates["strategy"] = FixedSalaryStrategy(amount=ZERO)
        return self.model_copy(update=updates) if updates else self
