"""Marginal-bracket tax calculator."""

from collections.abc import Sequence
from decimal import Decimal

from ccpc.models.tax_year import TaxBracket

ZERO = Decimal("0")


def calculate_tax_by_brackets(income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Apply a marginal schedule (first threshold 0, strictly increasing).

    Callers floor negative income at zero before calling; a negative amount
    here is a programming error.
    """
    if income < ZERO:
        raise ValueError(f"Taxable income must be non-negative, got {income}")

    tax = ZERO
    for i, bracket in enumerate(brackets):
        if income <= bracket.threshold:
            break
        next_threshold = brackets[i + 1].threshold if i + 1 < len(brackets) else None
        top = income if next_threshold is None else min(income, next_threshold)
        tax += (top - bracket.threshold) * bracket.rate
        if next_threshold is None or income <= next_threshold:
            break
    return tax


def marginal_rate_at(income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Rate of the highest bracket whose threshold is below ``income``."""
    rate = brackets[0].rate if brackets else ZERO
    for bracket in brackets:
        if income > bracket.threshold:
            rate = bracket.rate
    return rate
