"""Tax, payroll and projection engines."""

from ccpc.engines.comparison import compare_preset_strategies
from ccpc.engines.monte_carlo import MonteCarloConfig, compare_monte_carlo, run_monte_carlo
from ccpc.engines.notional import NotionalLedger
from ccpc.engines.personal import PersonalTaxCalculator
from ccpc.engines.projection import ProjectionEngine, calculate_projection, compare_strategies
from ccpc.engines.strategy import SalaryPayer, StrategyResolver
from ccpc.engines.tax_years import get_tax_year_data

__all__ = [
    "calculate_projection",
    "compare_monte_carlo",
    "compare_preset_strategies",
    "compare_strategies",
    "get_tax_year_data",
    "MonteCarloConfig",
    "NotionalLedger",
    "PersonalTaxCalculator",
    "ProjectionEngine",
    "run_monte_carlo",
    "SalaryPayer",
    "StrategyResolver",
]
