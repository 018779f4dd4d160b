from decimal import Decimal

import pytest

from app.core.errors import PrecisionError, RangeError
from app.core.money import MAX_AMOUNT, to_decimal, to_float, to_minor_units


@pytest.mark.parametrize(
    "value, expected",
    [
        (Decimal("100.50"), 10050),
        (Decimal("0.01"), 1),
        ("10.5", 1050),
        (42, 4200),
        (100.5, 10050),
        (19.99, 1999),
        ("10.500", 1050),
    ],
)
def test_to_minor_units(value, expected):
    assert to_minor_units(value) == expected


@pytest.mark.parametrize("value", ["100.50", "0.01", "1", "99999.99", "1234567.89"])
def test_to_decimal_inverts_to_minor_units(value):
    amount = Decimal(value)
    assert to_decimal(to_minor_units(amount)) == amount


@pytest.mark.parametrize("value", [Decimal("10.555"), "0.001", 10.555])
def test_more_than_two_decimals_is_a_precision_error(value):
    with pytest.raises(PrecisionError):
        to_minor_units(value)


@pytest.mark.parametrize("value", [0, "-5", Decimal("-0.01"), MAX_AMOUNT + 1])
def test_out_of_range_amounts(value):
    with pytest.raises(RangeError):
        to_minor_units(value)


@pytest.mark.parametrize("value", ["abc", "", None, True, "NaN", "Infinity"])
def test_non_numbers_are_rejected(value):
    with pytest.raises(PrecisionError):
        to_minor_units(value)


def test_to_decimal_always_has_two_places():
    assert str(to_decimal(10050)) == "100.50"
    assert str(to_decimal(2000)) == "20.00"
    assert to_float(15050) == 150.5
