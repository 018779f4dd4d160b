"""
Expense validator.

Checks a candidate expense against every field rule and reports all
violations at once. Pure: no database access, no mutation of the input.
"""

import datetime as dt
import re
from typing import Any, List, Mapping, NamedTuple

from .categories import CATEGORIES, is_category
from .errors import MoneyError, ValidationError, Violation
from .money import to_minor_units


DESCRIPTION_MAX_LENGTH = 500

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ExpenseFields(NamedTuple):
    """Validated, storage-ready values for the mutable expense fields."""

    amount_minor: int
    category: str
    description: str
    date: dt.date


def _check_amount(value: Any, violations: List[Violation]) -> None:
    if value is None:
        violations.append(Violation("amount", "is required"))
        return
    try:
        to_minor_units(value)
    except MoneyError as exc:
        violations.append(Violation("amount", str(exc)))


def _check_category(value: Any, violations: List[Violation]) -> None:
    if value is None or value == "":
        violations.append(Violation("category", "is required"))
    elif not is_category(value):
        violations.append(
            Violation("category", f"must be one of: {', '.join(CATEGORIES)}")
        )


def _check_description(value: Any, violations: List[Violation]) -> None:
    if not isinstance(value, str) or not value.strip():
        violations.append(Violation("description", "is required"))
    elif len(value.strip()) > DESCRIPTION_MAX_LENGTH:
        violations.append(
            Violation("description", f"must be at most {DESCRIPTION_MAX_LENGTH} characters")
        )


def parse_iso_date(value: Any) -> dt.date:
    """Parse a strict ``YYYY-MM-DD`` string; raises ``ValueError`` otherwise."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError("must be in YYYY-MM-DD format")
    try:
        return dt.date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError("is not a valid calendar date") from exc


def _check_date(value: Any, violations: List[Violation]) -> None:
    if value is None or value == "":
        violations.append(Violation("date", "is required"))
        return
    try:
        parse_iso_date(value)
    except ValueError as exc:
        violations.append(Violation("date", str(exc)))


def collect_violations(candidate: Mapping[str, Any]) -> List[Violation]:
    violations: List[Violation] = []
    _check_amount(candidate.get("amount"), violations)
    _check_category(candidate.get("category"), violations)
    _check_description(candidate.get("description"), violations)
    _check_date(candidate.get("date"), violations)
    return violations


def validate_expense(candidate: Mapping[str, Any]) -> ExpenseFields:
    """
    Validate *candidate* and return the normalised fields.

    Raises :class:`~app.core.errors.ValidationError` carrying every
    violated rule when anything is wrong.
    """
    violations = collect_violations(candidate)
    if violations:
        raise ValidationError(violations)
    return ExpenseFields(
        amount_minor=to_minor_units(candidate["amount"]),
        category=candidate["category"],
        description=candidate["description"].strip(),
        date=parse_iso_date(candidate["date"]),
    )
