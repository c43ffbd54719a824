"""
Fixed-point money helpers.

Every monetary field in the engine is an int counted in minor currency
units. These helpers are the only place where user-entered decimal text
meets that representation.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union


def to_minor_units(
    value: Union[Decimal, str, int],
    units_per_major: int = 100,
) -> Optional[int]:
    """
    Convert a major-unit amount to minor units.

    Returns None when the value is not a finite number, so the entry
    validator can report it as an invalid amount.
    """
    if isinstance(value, bool):
        return None
    try:
        amount = Decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None

    scaled = (amount * units_per_major).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(scaled)


def from_minor_units(amount: int, units_per_major: int = 100) -> Decimal:
    """Exact inverse of to_minor_units for display."""
    return Decimal(amount) / Decimal(units_per_major)
