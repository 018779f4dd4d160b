import datetime as dt

import pytest

from app.core.errors import ValidationError
from app.core.validation import collect_violations, validate_expense


VALID = {
    "amount": 10.50,
    "category": "Food",
    "description": "  Groceries  ",
    "date": "2024-01-10",
}


def _with(**overrides):
    candidate = dict(VALID)
    candidate.update(overrides)
    return candidate


def test_valid_candidate_is_normalised():
    fields = validate_expense(VALID)

    assert fields.amount_minor == 1050
    assert fields.category == "Food"
    assert fields.description == "Groceries"
    assert fields.date == dt.date(2024, 1, 10)


@pytest.mark.parametrize("amount", [0, -5, 10.555, "ten"])
def test_bad_amounts_fail(amount):
    violations = collect_violations(_with(amount=amount))
    assert [v.field for v in violations] == ["amount"]


def test_all_violations_are_reported_together():
    with pytest.raises(ValidationError) as exc_info:
        validate_expense({"amount": -1, "category": "Pets", "description": "   ", "date": "2024-02-30"})

    fields = [v.field for v in exc_info.value.violations]
    assert fields == ["amount", "category", "description", "date"]
    assert len(exc_info.value.details) == 4
    assert exc_info.value.details[0].startswith("amount: ")


def test_missing_fields_are_required():
    violations = collect_violations({})
    assert [str(v) for v in violations] == [
        "amount: is required",
        "category: is required",
        "description: is required",
        "date: is required",
    ]


def test_description_length_is_checked_after_trimming():
    assert collect_violations(_with(description=" " + "x" * 500 + " ")) == []
    violations = collect_violations(_with(description="x" * 501))
    assert [v.field for v in violations] == ["description"]


@pytest.mark.parametrize("value", ["2024/01/10", "10-01-2024", "2024-1-10", "2023-02-29", "2024-13-01", 20240110])
def test_bad_dates_fail(value):
    violations = collect_violations(_with(date=value))
    assert [v.field for v in violations] == ["date"]


def test_leap_day_is_a_real_date():
    assert validate_expense(_with(date="2024-02-29")).date == dt.date(2024, 2, 29)


def test_category_is_case_sensitive():
    violations = collect_violations(_with(category="food"))
    assert violations[0].field == "category"
    assert "must be one of" in violations[0].reason
