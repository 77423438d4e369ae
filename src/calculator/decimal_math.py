"""
Decimal Math Utilities for Tax Calculations.

Every amount that flows through the engine is an integer number of
cents. Rates are applied in Decimal and rounded back to a whole cent
with ROUND_HALF_UP, so the same inputs always produce the same outputs.

Why cents?
- Float: 0.1 + 0.2 = 0.30000000000000004
- Cents: 10 + 20 = 30

This matters for:
- Bracket floors that must compare exactly ($11,925.00 is 1192500)
- Phase-outs computed as a rate times an excess
- Explain trees whose parent must equal the arithmetic of its children
"""

from decimal import Decimal, ROUND_HALF_UP, ROUND_CEILING
from typing import Union
import logging

logger = logging.getLogger(__name__)

# Type alias for values that can be converted to Decimal
Numeric = Union[int, float, str, Decimal]

WHOLE_CENT = Decimal("1")
CENTS_PER_DOLLAR = 100


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Args:
        value: Value to convert (int, float, str, or Decimal)

    Returns:
        Decimal representation

    Examples:
        >>> to_decimal(100)
        Decimal('100')
        >>> to_decimal(0.0765)
        Decimal('0.0765')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Convert float to string first to preserve representation
        return Decimal(str(value))
    return Decimal(value)


def round_cents(value: Numeric) -> int:
    """
    Round a fractional cent amount to a whole cent.

    Examples:
        >>> round_cents(Decimal("119250.5"))
        119251
        >>> round_cents(99.4)
        99
    """
    return int(to_decimal(value).quantize(WHOLE_CENT, rounding=ROUND_HALF_UP))


def apply_rate(amount: int, rate: Numeric) -> int:
    """
    Multiply a cent amount by a rate and round once.

    Examples:
        >>> apply_rate(9235000, 0.124)
        1145140
        >>> apply_rate(0, 0.35)
        0
    """
    return round_cents(to_decimal(amount) * to_decimal(rate))


def prorate(amount: int, numerator: int, denominator: int) -> int:
    """
    Scale ``amount`` by ``numerator / denominator``.

    A zero denominator yields 0 rather than a division fault.
    """
    if denominator == 0:
        return 0
    return round_cents(to_decimal(amount) * to_decimal(numerator) / to_decimal(denominator))


def cents(dollar_amount: Numeric) -> int:
    """
    Convert a dollar figure to integer cents.

    Examples:
        >>> cents(11925)
        1192500
        >>> cents("1234.56")
        123456
    """
    return round_cents(to_decimal(dollar_amount) * CENTS_PER_DOLLAR)


def dollars(amount: int) -> Decimal:
    """Convert integer cents back to a Decimal dollar figure."""
    return (to_decimal(amount) / CENTS_PER_DOLLAR).quantize(Decimal("0.01"))


def ceil_div(numerator: int, denominator: int) -> int:
    """
    Count how many whole or partial ``denominator`` steps fit in ``numerator``.

    Used by phase-outs stated as "for each $1,000 or fraction thereof".

    Examples:
        >>> ceil_div(100001, 100000)
        2
        >>> ceil_div(0, 100000)
        0
    """
    if numerator <= 0:
        return 0
    return int((to_decimal(numerator) / to_decimal(denominator)).to_integral_value(rounding=ROUND_CEILING))


def round_up_to(amount: int, step: int) -> int:
    """
    Round a cent amount up to the next multiple of ``step``.

    Examples:
        >>> round_up_to(123401, 1000)
        124000
        >>> round_up_to(124000, 1000)
        124000
    """
    if amount <= 0:
        return 0
    return ceil_div(amount, step) * step


def format_dollars(amount: int) -> str:
    """
    Format cents for display.

    Examples:
        >>> format_dollars(516150)
        '$5,161.50'
        >>> format_dollars(-500)
        '-$5.00'
    """
    formatted = f"{abs(dollars(amount)):,.2f}"
    return f"-${formatted}" if amount < 0 else f"${formatted}"
