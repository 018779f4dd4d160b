"""
Money codec.

Amounts are stored as integer minor units (cents, paise) so sums never
drift; :class:`decimal.Decimal` is only used at the API boundary.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from .errors import PrecisionError, RangeError


CENT = Decimal("0.01")
MINOR_PER_UNIT = 100
MAX_AMOUNT = Decimal("1000000000.00")

Number = Union[Decimal, int, float, str]


def parse_decimal(value: Number) -> Decimal:
    """Convert a raw JSON/form value into a finite Decimal.

    Floats go through ``str()`` so ``100.5`` becomes ``Decimal('100.5')``
    rather than its binary expansion.
    """
    if isinstance(value, bool) or value is None:
        raise PrecisionError(f"{value!r} is not a number")
    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise PrecisionError(f"{value!r} is not a number") from exc
    if not parsed.is_finite():
        raise PrecisionError(f"{value!r} is not a finite number")
    return parsed


def to_minor_units(value: Number) -> int:
    """
    Convert a decimal currency amount to integer minor units.

    >>> to_minor_units(Decimal("100.50"))
    10050

    Raises
    ------
    PrecisionError
        More than two fractional digits, or not a number.
    RangeError
        Zero, negative, or above :data:`MAX_AMOUNT`.
    """
    amount = parse_decimal(value)
    if amount <= 0:
        raise RangeError("must be greater than 0")
    if amount > MAX_AMOUNT:
        raise RangeError(f"must not exceed {MAX_AMOUNT}")
    # Bounded above, so quantize cannot overflow the context precision
    if amount != amount.quantize(CENT):
        raise PrecisionError("must have at most 2 decimal places")
    return int(amount * MINOR_PER_UNIT)


def to_decimal(minor: int) -> Decimal:
    """Inverse of :func:`to_minor_units`, always with two decimal places."""
    return (Decimal(minor) / MINOR_PER_UNIT).quantize(CENT)


def to_float(minor: int) -> float:
    """Convert minor units to a float for JSON serialisation."""
    return float(to_decimal(minor))
