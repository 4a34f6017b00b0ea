"""Custom exceptions for the CCPC compensation planner."""

from decimal import Decimal


class ProjectionError(Exception):
    """Base exception for projection configuration errors."""


class UnknownProvinceError(ProjectionError):
    """Raised when a province or territory code is not one of the 13 supported."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown province code: {code!r}")


# The orchestrator reports the same condition under this name.
InvalidProvinceError = UnknownProvinceError


class InvalidAllocationError(ProjectionError):
    """Raised when portfolio allocation percentages do not sum to 100."""

    def __init__(self, total: Decimal):
        self.total = total
        super().__init__(f"Portfolio allocation must sum to 100%, got {total}%")


class InvalidHorizonError(ProjectionError):
    """Raised when the planning horizon is not a positive number of years."""

    def __init__(self, horizon: int):
        self.horizon = horizon
        super().__init__(f"Planning horizon must be at least 1 year, got {horizon}")


class InputValidationError(ProjectionError):
    """Raised when scenario inputs fail product-surface validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error on '{field}': {message}")
