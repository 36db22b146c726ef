"""Currency conversion utilities for EazyQue.

Internal storage unit: paise (smallest INR unit, 100 paise = ₹1).
API / display unit: Rupees (Decimal with two places, e.g. Decimal("1500.00")).

Conversion chain
----------------
Rupees × 100 → Paise (round half-up)
Paise  ÷ 100 → Rupees
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

# ─── constants ───────────────────────────────────────────────────────────────

PAISE_PER_RUPEE: int = 100
ONE_PAISA = Decimal("1")
TWO_PLACES = Decimal("0.01")


# ─── rounding ────────────────────────────────────────────────────────────────


def round_half_up(value: Decimal) -> int:
    """Round a Decimal amount of paise to a whole paisa (half-up)."""
    return int(value.quantize(ONE_PAISA, rounding=ROUND_HALF_UP))


# ─── conversion helpers ───────────────────────────────────────────────────────


def rupees_to_paise(rupees: Union[Decimal, int, str]) -> int:
    """Convert Rupees to paise (round half-up). ₹1 = 100 paise."""
    return round_half_up(Decimal(str(rupees)) * PAISE_PER_RUPEE)


def paise_to_rupees(paise: int) -> Decimal:
    """Convert paise to Rupees with two decimal places. 100 paise = ₹1."""
    return (Decimal(paise) / PAISE_PER_RUPEE).quantize(TWO_PLACES)


def format_inr(paise: int) -> str:
    """Format an amount in the Indian grouping system, e.g. ₹1,23,456.50."""
    sign = "-" if paise < 0 else ""
    rupees, fraction = divmod(abs(paise), PAISE_PER_RUPEE)
    digits = str(rupees)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])
    return f"{sign}₹{digits}.{fraction:02d}"
