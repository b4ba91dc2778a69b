"""
Decimal utilities for rate calculations.

Rates and accumulated products are kept as Decimal so long
multiplicative chains do not pick up binary floating point drift.
"""

from decimal import Decimal, InvalidOperation, getcontext
from typing import Final

from cyclearb.config.constants import PERCENTAGE_PRECISION


ONE: Final[Decimal] = Decimal(1)
HUNDRED: Final[Decimal] = Decimal(100)


def to_rate(value: object) -> Decimal | None:
    """
    Parse a positive, finite exchange rate.

    Floats go through str() so that 0.1 becomes Decimal("0.1"),
    not its binary expansion. Rates whose exponent reaches the context
    limit are rejected, since their inverse would overflow.

    Args:
        value: Decimal, int, float or numeric string.

    Returns:
        The rate, or None if it is not a positive finite number with a
        representable inverse.

    Example:
        >>> to_rate("0.0005")
        Decimal('0.0005')
        >>> to_rate(0) is None
        True
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, Decimal):
        rate = value
    else:
        try:
            rate = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None

    if not rate.is_finite() or rate <= 0:
        return None
    if abs(rate.adjusted()) >= getcontext().Emax:
        return None
    return rate


def invert_rate(rate: Decimal) -> Decimal:
    """
    Rate of the reverse direction of a pair.

    Args:
        rate: Positive forward rate.

    Returns:
        1 / rate in the current decimal context.
    """
    return ONE / rate


def profit_percentage(gross_return: Decimal) -> Decimal:
    """
    Convert a gross return multiplier into a profit percentage.

    Example:
        >>> profit_percentage(Decimal("1.05"))
        Decimal('5.00')
    """
    return (gross_return - ONE) * HUNDRED


def format_profit(profit_pct: Decimal, places: int = PERCENTAGE_PRECISION) -> str:
    """
    Format profit percentage for display.

    Args:
        profit_pct: Profit as percentage.
        places: Decimal places to show.

    Returns:
        Signed string such as "+5.0000%", in scientific notation when
        the value has too many digits to quantize.
    """
    try:
        quantized = profit_pct.quantize(Decimal(1).scaleb(-places))
    except InvalidOperation:
        return f"{profit_pct:+.{places}e}%"
    sign = "+" if quantized >= 0 else ""
    return f"{sign}{quantized}%"
