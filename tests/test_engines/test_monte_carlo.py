"""Tests for the Monte-Carlo return sampler."""

import math
from decimal import Decimal

import numpy as np
import pytest

from ccpc.engines.monte_carlo import (
    MAX_ANNUAL_RETURN,
    MIN_ANNUAL_RETURN,
    MonteCarloConfig,
    compare_monte_carlo,
    describe,
    run_monte_carlo,
    sample_effective_return,
)
from ccpc.exceptions import InvalidAllocationError


@pytest.fixture
def short_inputs(base_inputs):
    return base_inputs.model_copy(update={"planning_horizon": 3})


class TestSampling:
    def test_zero_volatility_returns_base_rate(self):
        rng = np.random.default_rng(1)
        rate = sample_effective_return(0.05, 0.0, 5, rng)
        assert rate == pytest.approx(0.05, abs=1e-12)

    def test_rates_within_clamp(self):
        rng = np.random.default_rng(7)
        for _ in range(200):
            rate = sample_effective_return(0.05, 0.8, 5, rng)
            assert MIN_ANNUAL_RETURN <= rate <= MAX_ANNUAL_RETURN


class TestDescribe:
    def test_linear_percentiles(self):
        stats = describe([1.0, 2.0, 3.0, 4.0, 5.0])
        assert stats.p10 == pytest.approx(1.4)
        assert stats.p50 == pytest.approx(3.0)
        assert stats.p90 == pytest.approx(4.6)
        assert stats.mean == pytest.approx(3.0)
        assert stats.std_dev == pytest.approx(math.sqrt(2.0))
        assert stats.min == 1.0
        assert stats.max == 5.0


class TestRunMonteCarlo:
    def test_seeded_runs_reproducible(self, short_inputs):
        config = MonteCarloConfig(num_simulations=10, seed=42)
        assert run_monte_carlo(short_inputs, config) == run_monte_carlo(short_inputs, config)

    def test_percentiles_ordered(self, short_inputs):
        result = run_monte_carlo(short_inputs, MonteCarloConfig(num_simulations=20, seed=3))
        for stats in (result.total_tax, result.final_corporate_balance, result.total_after_tax_income):
            assert stats.min <= stats.p10 <= stats.p25 <= stats.p50 <= stats.p75 <= stats.p90 <= stats.max

    def test_probabilities_complementary(self, short_inputs):
        result = run_monte_carlo(short_inputs, MonteCarloConfig(num_simulations=20, seed=3))
        assert result.probability_of_meeting_goal + result.probability_of_loss == pytest.approx(1.0)
        assert 0.0 <= result.probability_of_meeting_goal <= 1.0

    def test_yearly_bands(self, short_inputs):
        result = run_monte_carlo(short_inputs, MonteCarloConfig(num_simulations=20, seed=3))
        assert [band.year for band in result.yearly_balances] == [2025, 2026, 2027]
        for band in result.yearly_balances:
            assert band.p10 <= band.p50 <= band.p90

    def test_zero_volatility_collapses_distribution(self, short_inputs):
        result = run_monte_carlo(
            short_inputs, MonteCarloConfig(num_simulations=5, volatility=0.0, seed=1)
        )
        assert result.final_corporate_balance.std_dev == pytest.approx(0.0, abs=1e-6)
        assert result.effective_return_rates.mean == pytest.approx(0.0431, abs=1e-9)

    def test_configuration_errors_propagate(self, short_inputs):
        inputs = short_inputs.model_copy(update={"fixed_income_percent": 10})
        with pytest.raises(InvalidAllocationError):
            run_monte_carlo(inputs, MonteCarloConfig(num_simulations=2, seed=1))


class TestCompareMonteCarlo:
    def test_identical_scenarios_never_win(self, short_inputs):
        # Unseeded: both runs must still share draws, so every trial ties.
        comparison = compare_monte_carlo(
            short_inputs, short_inputs, MonteCarloConfig(num_simulations=6)
        )
        assert comparison.first == comparison.second
        assert comparison.first_wins_on_tax == 0.0
        assert comparison.first_wins_on_balance == 0.0
        assert comparison.first_wins_overall == 0.0

    def test_larger_portfolio_wins_on_balance_every_trial(self, short_inputs):
        richer = short_inputs.model_copy(update={"corporate_investment_balance": Decimal("1000000")})
        comparison = compare_monte_carlo(
            richer, short_inputs, MonteCarloConfig(num_simulations=8, seed=11)
        )
        assert comparison.first_wins_on_balance == 1.0
        assert comparison.first_wins_overall <= min(
            comparison.first_wins_on_tax, comparison.first_wins_on_balance
        )

    def test_seeded_comparison_matches_single_runs(self, short_inputs, dividends_only_inputs):
        config = MonteCarloConfig(num_simulations=5, seed=4)
        other = dividends_only_inputs.model_copy(update={"planning_horizon": 3})
        comparison = compare_monte_carlo(short_inputs, other, config)
        assert comparison.first == run_monte_carlo(short_inputs, config)
        assert comparison.second == run_monte_carlo(other, config)
