# backend/app/domain/money.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float, str, Decimal]

CENTS_PER_UNIT = 100


def to_cents(amount: Optional[Number]) -> Optional[int]:
    """Whole currency units -> integer minor units. Rounds half up, keeps None."""
    if amount is None:
        return None
    d = Decimal(str(amount)) * CENTS_PER_UNIT
    return int(d.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: Optional[int]) -> Optional[Decimal]:
    if cents is None:
        return None
    return (Decimal(int(cents)) / CENTS_PER_UNIT).quantize(Decimal("0.01"))
