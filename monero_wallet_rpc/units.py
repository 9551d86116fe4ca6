"""Conversion between decimal XMR amounts and integer atomic units."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# 1 XMR = 10^12 piconero
ATOMIC_UNITS_PER_XMR = 10**12


def to_atomic_units(amount: Decimal | float | int | str) -> int:
    """Convert a decimal XMR amount to an integer count of atomic units.

    Multiplies by 10^12 and rounds to the nearest integer, halves away
    from zero. Floats go through ``str()`` first so ``0.000000000001``
    becomes exactly 1 rather than inheriting binary representation error.

    Raises:
        ValueError: amount is not a finite non-negative number.
    """
    if isinstance(amount, bool):
        raise ValueError(f"amount must be a number, got: {amount!r}")
    try:
        value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    except InvalidOperation as e:
        raise ValueError(f"amount must be a number, got: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"amount must be finite, got: {amount!r}")
    if value < 0:
        raise ValueError(f"amount must be >= 0, got: {amount!r}")
    return int((value * ATOMIC_UNITS_PER_XMR).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_atomic_units(atomic: int) -> Decimal:
    """Convert atomic units back to a decimal XMR amount (for display)."""
    return Decimal(atomic) / ATOMIC_UNITS_PER_XMR
