from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_cents(amount: Decimal) -> Decimal:
    """Round a monetary amount to cents using ROUND_HALF_UP."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_to_fraction(rate: Decimal) -> Decimal:
    """Convert a percentage (``Decimal("12")``) to a fraction (``Decimal("0.12")``)."""
    return rate / HUNDRED
