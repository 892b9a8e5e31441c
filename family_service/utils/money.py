"""
Money and percentage arithmetic.

Shares are never rounded up: a value is always floored to the money
quantum so that the sum of allocated shares cannot exceed the estate.
"""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, str, float]

HUNDRED = Decimal('100')
ZERO = Decimal('0')


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal via str() so floats don't leak binary noise"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def floor_money(amount: Decimal, quantum: Decimal = Decimal('0.01')) -> Decimal:
    """Floor an amount to the money quantum (never rounds up)"""
    return amount.quantize(quantum, rounding=ROUND_FLOOR)


def quantize_percentage(value: Decimal, places: int = 4) -> Decimal:
    """Round a percentage to a fixed number of decimal places"""
    exponent = Decimal(1).scaleb(-places)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def percentage_of(part: Decimal, whole: Decimal) -> Decimal:
    """part as a percentage of whole; zero when whole is zero"""
    if whole == ZERO:
        return ZERO
    return part / whole * HUNDRED


def format_kes(amount: Decimal) -> str:
    """Format an amount for messages, e.g. KES 1,250,000.00"""
    return f"KES {amount:,.2f}"
