"""Monte-Carlo sampler over investment returns.

Each trial draws one log-normal growth factor per projection year around the
base return, clamps each year's return to [-50%, +100%], reduces the path to
its geometric-mean rate, and runs ``calculate_projection`` with that rate.
Statistics use linear interpolation between order statistics and the
population standard deviation.

Two scenarios are compared trial by trial under the same seed, so each pair
of trials sees the same sequence of random draws.
"""

import logging
import math
from decimal import Decimal

import numpy as np
from pydantic import BaseModel, Field

from ccpc.engines.projection import calculate_projection, check_inputs
from ccpc.models.inputs import UserInputs

logger = logging.getLogger(__name__)

MIN_ANNUAL_RETURN = -0.5
MAX_ANNUAL_RETURN = 1.0
PERCENTILES = (10, 25, 50, 75, 90)


class MonteCarloConfig(BaseModel):
    num_simulations: int = Field(default=1000, ge=1)
    volatility: float = Field(default=0.12, ge=0)
    seed: int | None = None


class DistributionStats(BaseModel):
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    mean: float
    std_dev: float
    min: float
    max: float


class BalanceBand(BaseModel):
    year: int
    p10: float
    p50: float
    p90: float


class TrialOutcome(BaseModel):
    effective_return_rate: float
    total_tax: float
    final_corporate_balance: float
    total_after_tax_income: float
    effective_tax_rate: float


class MonteCarloResult(BaseModel):
    num_simulations: int
    base_return_rate: float
    volatility: float
    effective_return_rates: DistributionStats
    total_tax: DistributionStats
    final_corporate_balance: DistributionStats
    total_after_tax_income: DistributionStats
    effective_integrated_rate: DistributionStats
    probability_of_meeting_goal: float = Field(
        description="Share of trials ending at or above the starting corporate balance"
    )
    probability_of_loss: float
    yearly_balances: list[BalanceBand]


class MonteCarloComparison(BaseModel):
    """Paired results; win rates are shares of trials where ``first`` does better."""

    first: MonteCarloResult
    second: MonteCarloResult
    first_wins_on_tax: float
    first_wins_on_balance: float
    first_wins_overall: float = Field(description="Lower tax and higher balance in the same trial")


def sample_effective_return(
    base_rate: float, volatility: float, years: int, rng: np.random.Generator
) -> float:
    """Geometric-mean annual return of one simulated path."""
    log_mean = math.log1p(base_rate) - volatility**2 / 2
    factors = rng.lognormal(mean=log_mean, sigma=volatility, size=years)
    annual = np.clip(factors - 1.0, MIN_ANNUAL_RETURN, MAX_ANNUAL_RETURN)
    return float(np.prod(1.0 + annual) ** (1.0 / years) - 1.0)


def describe(values: list[float] | np.ndarray) -> DistributionStats:
    data = np.asarray(values, dtype=float)
    p10, p25, p50, p75, p90 = np.percentile(data, PERCENTILES, method="linear")
    return DistributionStats(
        p10=float(p10),
        p25=float(p25),
        p50=float(p50),
        p75=float(p75),
        p90=float(p90),
        mean=float(np.mean(data)),
        std_dev=float(np.std(data)),
        min=float(np.min(data)),
        max=float(np.max(data)),
    )


def _balance_bands(
    starting_year: int, horizon: int, start_balance: float, finals: np.ndarray
) -> list[BalanceBand]:
    """Per-year bands by exponential interpolation from start to each trial's final balance."""
    bands = []
    for k in range(1, horizon + 1):
        t = k / horizon
        if start_balance > 0:
            ratio = np.maximum(finals, 0.0) / start_balance
            path = start_balance * np.power(ratio, t)
        else:
            path = finals * t
        p10, p50, p90 = np.percentile(path, (10, 50, 90), method="linear")
        bands.append(
            BalanceBand(year=starting_year + k - 1, p10=float(p10), p50=float(p50), p90=float(p90))
        )
    return bands


def run_trial(inputs: UserInputs, rate: float) -> TrialOutcome:
    """One projection at a sampled effective return rate."""
    trial = inputs.model_copy(update={"investment_return_rate": Decimal(str(round(rate, 10)))})
    summary = calculate_projection(trial)
    return TrialOutcome(
        effective_return_rate=rate,
        total_tax=float(summary.total_tax),
        final_corporate_balance=float(summary.final_corporate_balance),
        total_after_tax_income=float(summary.total_after_tax_income),
        effective_tax_rate=float(summary.effective_tax_rate),
    )


def _simulate(
    inputs: UserInputs, config: MonteCarloConfig
) -> tuple[MonteCarloResult, list[TrialOutcome]]:
    check_inputs(inputs)
    rng = np.random.default_rng(config.seed)
    base_rate = float(inputs.investment_return_rate)
    horizon = inputs.planning_horizon

    trials = [
        run_trial(inputs, sample_effective_return(base_rate, config.volatility, horizon, rng))
        for _ in range(config.num_simulations)
    ]

    start_balance = float(inputs.corporate_investment_balance)
    final_array = np.asarray([t.final_corporate_balance for t in trials])
    logger.info(
        "Monte-Carlo: %d trials, base return %.4f, volatility %.4f",
        config.num_simulations,
        base_rate,
        config.volatility,
    )
    result = MonteCarloResult(
        num_simulations=config.num_simulations,
        base_return_rate=base_rate,
        volatility=config.volatility,
        effective_return_rates=describe([t.effective_return_rate for t in trials]),
        total_tax=describe([t.total_tax for t in trials]),
        final_corporate_balance=describe(final_array),
        total_after_tax_income=describe([t.total_after_tax_income for t in trials]),
        effective_integrated_rate=describe([t.effective_tax_rate for t in trials]),
        probability_of_meeting_goal=float(np.mean(final_array >= start_balance)),
        probability_of_loss=float(np.mean(final_array < start_balance)),
        yearly_balances=_balance_bands(inputs.starting_year, horizon, start_balance, final_array),
    )
    return result, trials


def run_monte_carlo(inputs: UserInputs, config: MonteCarloConfig | None = None) -> MonteCarloResult:
    """Run ``config.num_simulations`` independent projections with resampled returns."""
    result, _ = _simulate(inputs, config or MonteCarloConfig())
    return result


def compare_monte_carlo(
    first: UserInputs, second: UserInputs, config: MonteCarloConfig | None = None
) -> MonteCarloComparison:
    """Simulate both scenarios on the same draws and count per-trial wins for ``first``.

    An unseeded config gets a fresh seed shared by both runs.
    """
    config = config or MonteCarloConfig()
    if config.seed is None:
        config = config.model_copy(update={"seed": int(np.random.SeedSequence().entropy)})

    first_result, first_trials = _simulate(first, config)
    second_result, second_trials = _simulate(second, config)

    tax_wins = balance_wins = overall_wins = 0
    for a, b in zip(first_trials, second_trials):
        tax_win = a.total_tax < b.total_tax
        balance_win = a.final_corporate_balance > b.final_corporate_balance
        tax_wins += tax_win
        balance_wins += balance_win
        overall_wins += tax_win and balance_win

    n = config.num_simulations
    return MonteCarloComparison(
        first=first_result,
        second=second_result,
        first_wins_on_tax=tax_wins / n,
        first_wins_on_balance=balance_wins / n,
        first_wins_overall=overall_wins / n,
    )
