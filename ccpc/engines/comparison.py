"""Preset strategy comparison and after-tax wealth.

Runs the same scenario under the standard compensation strategies (salary at
the YMPE, dividends only, dynamic) plus the caller's own fixed salary, picks
winners, and values each outcome as after-tax wealth at three withdrawal rates.
"""

from decimal import Decimal

from ccpc.engines.projection import calculate_projection, check_inputs
from ccpc.engines.provinces import get_province_info
from ccpc.engines.tax_years import get_tax_year_data
from ccpc.models.inputs import (
    DividendsOnlyStrategy,
    DynamicStrategy,
    FixedSalaryStrategy,
    UserInputs,
)
from ccpc.models.results import (
    AfterTaxWealth,
    PresetComparison,
    ProjectionSummary,
    StrategyOutcome,
)

ZERO = Decimal("0")
ONE = Decimal("1")

# Share of the final corporate balance assumed to reach the owner after tax.
CORPORATE_BALANCE_AFTER_TAX_SHARE = Decimal("0.6")
LOWER_RATE_REDUCTION = Decimal("0.10")
LOWER_RATE_FLOOR = Decimal("0.20")
TAX_SCORE_WEIGHT = Decimal("0.6")
BALANCE_SCORE_WEIGHT = Decimal("0.4")


def calculate_after_tax_wealth(summary: ProjectionSummary, top_rate: Decimal) -> AfterTaxWealth:
    """Value an outcome with RRSP savings taxed at current, lower and top rates."""
    current_rate = summary.effective_tax_rate
    lower_rate = max(current_rate - LOWER_RATE_REDUCTION, LOWER_RATE_FLOOR)
    kept_income = summary.total_compensation - summary.total_tax
    corporate_value = summary.final_corporate_balance * CORPORATE_BALANCE_AFTER_TAX_SHARE

    def wealth(rate: Decimal) -> Decimal:
        return kept_income + summary.total_rrsp_contributions * (ONE - rate) + corporate_value

    return AfterTaxWealth(
        at_current_rate=wealth(current_rate),
        at_lower_rate=wealth(lower_rate),
        at_top_rate=wealth(top_rate),
        current_rate=current_rate,
        lower_rate=lower_rate,
        top_rate=top_rate,
    )


def preset_scenarios(inputs: UserInputs) -> list[tuple[str, str, UserInputs]]:
    """(id, display name, inputs) for every strategy to compare."""
    ympe = get_tax_year_data(
        inputs.starting_year, inputs.province, inputs.expected_inflation_rate
    ).cpp.max_pensionable_earnings
    scenarios = [
        (
            "salary-at-ympe",
            "Salary at YMPE",
            inputs.model_copy(update={"strategy": FixedSalaryStrategy(amount=ympe)}),
        ),
        (
            "dividends-only",
            "Dividends Only",
            inputs.model_copy(update={"strategy": DividendsOnlyStrategy()}),
        ),
        (
            "dynamic",
            "Dynamic Optimizer",
            inputs.model_copy(update={"strategy": DynamicStrategy()}),
        ),
    ]
    strategy = inputs.strategy
    if isinstance(strategy, FixedSalaryStrategy) and strategy.amount > ZERO and strategy.amount != ympe:
        scenarios.append(("current-setup", f"Your Salary ({strategy.amount:,.0f})", inputs))
    return scenarios


def compare_preset_strategies(inputs: UserInputs) -> PresetComparison:
    check_inputs(inputs)
    top_rate = get_province_info(inputs.province).top_combined_rate

    outcomes = []
    for strategy_id, name, scenario in preset_scenarios(inputs):
        summary = calculate_projection(scenario)
        outcomes.append(
            StrategyOutcome(
                id=strategy_id,
                name=name,
                salary_strategy=scenario.salary_strategy,
                summary=summary,
                after_tax_wealth=calculate_after_tax_wealth(summary, top_rate),
            )
        )

    lowest_tax = min(outcomes, key=lambda o: o.summary.total_tax)
    highest_balance = max(outcomes, key=lambda o: o.summary.final_corporate_balance)

    max_tax = max(o.summary.total_tax for o in outcomes)
    max_balance = max(o.summary.final_corporate_balance for o in outcomes)

    def score(outcome: StrategyOutcome) -> Decimal:
        tax_score = ONE - outcome.summary.total_tax / max_tax if max_tax > ZERO else ONE
        balance_score = (
            outcome.summary.final_corporate_balance / max_balance if max_balance > ZERO else ZERO
        )
        return TAX_SCORE_WEIGHT * tax_score + BALANCE_SCORE_WEIGHT * balance_score

    best = max(outcomes, key=score)
    for outcome in outcomes:
        outcome.tax_difference_vs_best = outcome.summary.total_tax - best.summary.total_tax
        outcome.balance_difference_vs_best = (
            outcome.summary.final_corporate_balance - best.summary.final_corporate_balance
        )

    return PresetComparison(
        outcomes=outcomes,
        lowest_tax_id=lowest_tax.id,
        highest_balance_id=highest_balance.id,
        best_overall_id=best.id,
    )
