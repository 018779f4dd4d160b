"""Domain exceptions raised by the expense services."""

from typing import List, NamedTuple, Optional


class Violation(NamedTuple):
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


class ExpenseError(Exception):
    """Base class for errors the API turns into a JSON error envelope."""

    message = "Request failed"

    def __init__(self, message: Optional[str] = None, details: Optional[List[str]] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = list(details or [])


class ValidationError(ExpenseError):
    """One or more fields failed validation; ``violations`` lists all of them."""

    message = "Validation failed"

    def __init__(self, violations: List[Violation]):
        self.violations = list(violations)
        super().__init__(details=[str(v) for v in self.violations])


class NotFoundError(ExpenseError, LookupError):
    message = "Expense not found"


class MoneyError(ValueError):
    pass


class PrecisionError(MoneyError):
    """Amount has more than two fractional digits or is not a number."""


class RangeError(MoneyError):
    """Amount is outside the accepted range."""
