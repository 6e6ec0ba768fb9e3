"""Money rounding helpers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def round_to_cents(amount: Decimal | int | float | str) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def sum_money(amounts) -> Decimal:
    """Sum an iterable of Decimals, starting from zero."""
    total = ZERO
    for amount in amounts:
        total += amount
    return total
