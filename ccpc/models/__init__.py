"""Data models for the CCPC compensation planner."""

from ccpc.models.enums import DividendType, NotionalAccount, ProvinceCode, SalaryStrategy
from ccpc.models.inputs import (
    CompensationStrategy,
    DividendsOnlyStrategy,
    DynamicStrategy,
    FixedSalaryStrategy,
    UserInputs,
    make_strategy,
)
from ccpc.models.results import (
    AccountMovement,
    AfterTaxWealth,
    DividendFunding,
    InvestmentReturns,
    IPPSummary,
    IPPYearResult,
    NotionalAccountSnapshot,
    PassiveIncomeGrindInfo,
    PayrollDeductions,
    PersonalTaxResult,
    PresetComparison,
    ProjectionSummary,
    StrategyComparisonResult,
    StrategyOutcome,
    YearlyResult,
)
from ccpc.models.tax_year import TaxYearData

__all__ = [
    "AccountMovement",
    "AfterTaxWealth",
    "CompensationStrategy",
    "DividendFunding",
    "DividendsOnlyStrategy",
    "DividendType",
    "DynamicStrategy",
    "FixedSalaryStrategy",
    "InvestmentReturns",
    "IPPSummary",
    "IPPYearResult",
    "make_strategy",
    "NotionalAccount",
    "NotionalAccountSnapshot",
    "PassiveIncomeGrindInfo",
    "PayrollDeductions",
    "PersonalTaxResult",
    "PresetComparison",
    "ProjectionSummary",
    "ProvinceCode",
    "SalaryStrategy",
    "StrategyComparisonResult",
    "StrategyOutcome",
    "TaxYearData",
    "UserInputs",
    "YearlyResult",
]
