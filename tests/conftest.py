"""Shared test fixtures for the CCPC compensation planner."""

from decimal import Decimal

import pytest

from ccpc.engines.tax_years import get_tax_year_data
from ccpc.models.inputs import (
    DividendsOnlyStrategy,
    DynamicStrategy,
    FixedSalaryStrategy,
    UserInputs,
)
from ccpc.models.tax_year import TaxYearData


@pytest.fixture
def on_2025() -> TaxYearData:
    return get_tax_year_data(2025, "ON")


@pytest.fixture
def qc_2025() -> TaxYearData:
    return get_tax_year_data(2025, "QC")


@pytest.fixture
def base_inputs() -> UserInputs:
    return UserInputs(
        province="ON",
        required_income=Decimal("100000"),
        planning_horizon=5,
        starting_year=2025,
        corporate_investment_balance=Decimal("500000"),
        strategy=DynamicStrategy(),
    )


@pytest.fixture
def dividends_only_inputs(base_inputs: UserInputs) -> UserInputs:
    return base_inputs.model_copy(update={"strategy": DividendsOnlyStrategy()})


@pytest.fixture
def fixed_salary_inputs(base_inputs: UserInputs) -> UserInputs:
    return base_inputs.model_copy(
        update={
            "strategy": FixedSalaryStrategy(amount=Decimal("71300")),
            "required_income": Decimal("71300"),
            "planning_horizon": 1,
        }
    )
