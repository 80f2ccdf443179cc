# paintwall/core/money.py
"""
Money helpers.

Amounts are integer cents everywhere; rates (tax, markup, margins, burden)
are integer basis points where 10000 bps == 100%.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

BPS_DENOMINATOR = 10000

Number = Union[int, float, Decimal, str]


def round_half_up(value: Number) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_bps(cents: Number, bps: int) -> int:
    """Return ``bps`` basis points of ``cents``, rounded half-up to a whole cent."""
    return round_half_up(Decimal(str(cents)) * Decimal(bps) / BPS_DENOMINATOR)


def add_bps(cents: Number, bps: int) -> int:
    """Return ``cents`` increased by ``bps`` basis points (markup / margin / burden)."""
    return round_half_up(Decimal(str(cents)) * (BPS_DENOMINATOR + Decimal(bps)) / BPS_DENOMINATOR)


def to_cents(amount: Number) -> int:
    """Dollars (``"12.345"``, ``12.5``, ``Decimal``) to whole cents."""
    return round_half_up(Decimal(str(amount)) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


def format_cents(cents: int, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    sign = "-" if cents < 0 else ""
    return f"{sign}{symbol}{from_cents(abs(cents)):,.2f}"


def format_bps(bps: int) -> str:
    return f"{Decimal(bps) / 100:.2f}%"
