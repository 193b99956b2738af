"""Fixed-point money helpers.

All monetary arithmetic in the engine is carried out in integer minor
units (cents/paise). Values are converted back to two-place Decimals
only when a result is handed to a caller.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

TWO_PLACES = Decimal("0.01")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal, going through str for floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to two decimal places, half-up."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_minor_units(value: Number) -> int:
    """Convert an amount to integer minor units, rounding half-up first.

    >>> to_minor_units("12.345")
    1235
    """
    return int(round_money(value).scaleb(2))


def from_minor_units(minor: int) -> Decimal:
    """Convert integer minor units to a two-place Decimal.

    >>> from_minor_units(-1050)
    Decimal('-10.50')
    """
    return Decimal(minor).scaleb(-2).quantize(TWO_PLACES)


def line_amount_minor(quantity: Number, rate: Number) -> int:
    """Row amount (quantity * rate) in minor units, rounded half-up."""
    return to_minor_units(to_decimal(quantity) * to_decimal(rate))


def line_tax_minor(amount_minor: int, tax_rate: Number) -> int:
    """Tax on an already rounded row amount, in minor units, rounded half-up."""
    tax = Decimal(amount_minor) * to_decimal(tax_rate) / HUNDRED
    return int(tax.quantize(ONE, rounding=ROUND_HALF_UP))


def multiply_money(quantity: Number, rate: Number) -> Decimal:
    """quantity * rate as a display amount (used for hours * hourly rate)."""
    return from_minor_units(line_amount_minor(quantity, rate))
