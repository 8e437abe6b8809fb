"""Integer-exact percentage, fiat, and display helpers for fee quantities."""

from decimal import Decimal
from fractions import Fraction
from typing import Union

from eth_utils import from_wei


def require_amount(name: str, value: object) -> int:
    """Return ``value`` if it is a non-negative integer, else raise ``ValueError``."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer.")
    if value < 0:
        raise ValueError(f"{name} must be non-negative.")
    return value


def percent_of(part: int, whole: int) -> float:
    """Return ``100 * part / whole`` as a float, or ``0.0`` when ``whole`` is zero.

    The ratio is computed exactly on integers and rounded to float once.
    """

    if whole == 0:
        return 0.0
    return float(Fraction(100 * part, whole))


def to_fiat(value_wei: int, price_per_ether: Union[Decimal, int, str]) -> Decimal:
    """Value of ``value_wei`` at a fiat price quoted per whole ether."""

    price = price_per_ether if isinstance(price_per_ether, Decimal) else Decimal(str(price_per_ether))
    return Decimal(from_wei(value_wei, "ether")) * price


def format_decimal(value: Union[Decimal, int]) -> str:
    """Plain positional text for an exact amount, without exponent or trailing zeros."""

    if value == 0:
        return "0"
    return format(Decimal(value).normalize(), "f")


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
