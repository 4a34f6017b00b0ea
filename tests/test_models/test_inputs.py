"""Tests for scenario input models."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from ccpc.models.enums import NotionalAccount, SalaryStrategy
from ccpc.models.inputs import (
    DividendsOnlyStrategy,
    DynamicStrategy,
    FixedSalaryStrategy,
    UserInputs,
    make_strategy,
)
from ccpc.models.results import AccountMovement, NotionalAccountSnapshot


class TestUserInputsDefaults:
    def test_defaults(self):
        inputs = UserInputs()
        assert inputs.province == "ON"
        assert inputs.required_income == Decimal("100000")
        assert inputs.planning_horizon == 5
        assert inputs.starting_year == date.today().year
        assert inputs.salary_strategy == SalaryStrategy.DYNAMIC
        assert inputs.allocation_total == Decimal("100")

    def test_from_json_dict(self):
        inputs = UserInputs.model_validate(
            {
                "province": "BC",
                "required_income": "85000",
                "strategy": {"kind": "fixed", "amount": "60000"},
            }
        )
        assert inputs.strategy == FixedSalaryStrategy(amount=Decimal("60000"))
        assert inputs.salary_strategy == SalaryStrategy.FIXED

    def test_unknown_strategy_kind_rejected(self):
        with pytest.raises(ValidationError):
            UserInputs.model_validate({"strategy": {"kind": "bonus"}})


class TestClamped:
    def test_negative_money_floored(self):
        inputs = UserInputs(
            required_income=Decimal("-10"),
            cda_balance=Decimal("-1"),
            rrsp_room=Decimal("-500"),
        ).clamped()
        assert inputs.required_income == Decimal("0")
        assert inputs.cda_balance == Decimal("0")
        assert inputs.rrsp_room == Decimal("0")

    def test_negative_return_allowed_above_minus_one(self):
        assert UserInputs(investment_return_rate=Decimal("-0.2")).clamped().investment_return_rate == Decimal("-0.2")
        assert UserInputs(investment_return_rate=Decimal("-3")).clamped().investment_return_rate == Decimal("-1")

    def test_negative_fixed_salary_floored(self):
        inputs = UserInputs(strategy=FixedSalaryStrategy(amount=Decimal("-100"))).clamped()
        assert inputs.strategy == FixedSalaryStrategy(amount=Decimal("0"))

    def test_negative_ipp_service_floored(self):
        assert UserInputs(ipp_years_of_service=-3).clamped().ipp_years_of_service == 0

    def test_clean_inputs_returned_unchanged(self):
        inputs = UserInputs()
        assert inputs.clamped() is inputs


class TestMakeStrategy:
    def test_variants(self):
        assert make_strategy("dynamic") == DynamicStrategy()
        assert make_strategy(SalaryStrategy.DIVIDENDS_ONLY) == DividendsOnlyStrategy()
        assert make_strategy("fixed", Decimal("50000")) == FixedSalaryStrategy(amount=Decimal("50000"))

    def test_fixed_without_amount(self):
        assert make_strategy("fixed") == FixedSalaryStrategy(amount=Decimal("0"))

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            make_strategy("salary-only")

    def test_strategies_are_frozen(self):
        strategy = FixedSalaryStrategy(amount=Decimal("1"))
        with pytest.raises(ValidationError):
            strategy.amount = Decimal("2")


class TestNotionalAccountSnapshot:
    def test_movement_lookup(self):
        movement = AccountMovement(balance_start=Decimal("10"), added=Decimal("5"), balance_end=Decimal("15"))
        empty = AccountMovement()
        snapshot = NotionalAccountSnapshot(
            cda=movement, erdtoh=empty, nrdtoh=empty, grip=empty, corporate_investments=empty
        )
        assert snapshot.movement(NotionalAccount.CDA) is movement
        assert snapshot.movement(NotionalAccount.GRIP) is empty
