from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def percentage(attended: int, total: int, ndigits: int) -> float:
    """attended/total as a percentage rounded half-up; 0 when total is 0."""

    if total <= 0:
        return 0.0
    value = Decimal(attended) * 100 / Decimal(total)
    quantum = Decimal(1).scaleb(-ndigits)
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))
