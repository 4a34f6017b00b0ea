"""Scenario input validation for the product surface.

The engine itself only rejects configuration defects (province, allocation,
horizon) and clamps everything else. These checks enforce the tighter ranges
the planner accepts from users.
"""

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel

from ccpc.engines.provinces import resolve_province
from ccpc.exceptions import InputValidationError, UnknownProvinceError
from ccpc.models.inputs import FixedSalaryStrategy, UserInputs

ZERO = Decimal("0")
HUNDRED = Decimal("100")

MAX_REQUIRED_INCOME = Decimal("10000000")
MIN_HORIZON = 3
MAX_HORIZON = 10
MAX_INFLATION_RATE = Decimal("0.10")
MAX_RETURN_RATE = Decimal("0.20")
ALLOCATION_TOLERANCE = Decimal("0.01")
HIGH_INCOME_WARNING = Decimal("1000000")
MIN_IPP_AGE = 18
MAX_IPP_AGE = 71


class Severity(StrEnum):
    ERROR = "ERROR"
    WARNING = "WARNING"


class ValidationIssue(BaseModel):
    field: str
    message: str
    severity: Severity = Severity.ERROR


def validate_inputs(inputs: UserInputs, strict: bool = False) -> list[ValidationIssue]:
    """Check ``inputs`` against the planner's accepted ranges.

    With ``strict=True`` the first error is raised as InputValidationError.
    """
    issues: list[ValidationIssue] = []

    def error(field: str, message: str) -> None:
        issues.append(ValidationIssue(field=field, message=message))

    def warning(field: str, message: str) -> None:
        issues.append(ValidationIssue(field=field, message=message, severity=Severity.WARNING))

    try:
        resolve_province(inputs.province)
    except UnknownProvinceError as e:
        error("province", str(e))

    if inputs.required_income <= ZERO:
        error("required_income", "must be greater than 0")
    elif inputs.required_income > MAX_REQUIRED_INCOME:
        error("required_income", f"must not exceed {MAX_REQUIRED_INCOME:,}")
    elif inputs.required_income > HIGH_INCOME_WARNING:
        warning("required_income", "very high income need; results may be dominated by the top rate")

    if not MIN_HORIZON <= inputs.planning_horizon <= MAX_HORIZON:
        error("planning_horizon", f"must be between {MIN_HORIZON} and {MAX_HORIZON} years")

    if not ZERO <= inputs.expected_inflation_rate <= MAX_INFLATION_RATE:
        error("expected_inflation_rate", "must be between 0% and 10%")

    if not ZERO <= inputs.investment_return_rate <= MAX_RETURN_RATE:
        error("investment_return_rate", "must be between 0% and 20%")

    for field in (
        "canadian_equity_percent",
        "us_equity_percent",
        "international_equity_percent",
        "fixed_income_percent",
    ):
        value = getattr(inputs, field)
        if not ZERO <= value <= HUNDRED:
            error(field, "must be between 0 and 100")
    if abs(inputs.allocation_total - HUNDRED) > ALLOCATION_TOLERANCE:
        error("portfolio", f"allocation must sum to 100%, got {inputs.allocation_total}%")

    for field in (
        "corporate_investment_balance",
        "cda_balance",
        "erdtoh_balance",
        "nrdtoh_balance",
        "grip_balance",
        "rrsp_room",
        "tfsa_room",
        "annual_corporate_retained_earnings",
    ):
        if getattr(inputs, field) < ZERO:
            error(field, "cannot be negative")

    if isinstance(inputs.strategy, FixedSalaryStrategy) and inputs.strategy.amount <= ZERO:
        error("fixed_salary_amount", "fixed salary strategy requires an amount greater than 0")

    if inputs.consider_ipp:
        if not MIN_IPP_AGE <= inputs.ipp_member_age <= MAX_IPP_AGE:
            error("ipp_member_age", f"must be between {MIN_IPP_AGE} and {MAX_IPP_AGE}")
        if inputs.ipp_years_of_service < 0:
            error("ipp_years_of_service", "cannot be negative")

    if inputs.contribute_to_resp and inputs.resp_contribution_amount <= ZERO:
        warning("resp_contribution_amount", "RESP contributions enabled with no amount")
    if inputs.pay_down_debt and inputs.debt_paydown_amount <= ZERO:
        warning("debt_paydown_amount", "debt paydown enabled with no amount")

    if strict:
        for issue in issues:
            if issue.severity == Severity.ERROR:
                raise InputValidationError(issue.field, issue.message)
    return issues
