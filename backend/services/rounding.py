"""Half-up rounding for reported scores.

Built-in round() rounds halves to even (81.25 -> 81.2); reported fit,
combined and percentile scores round halves up (81.25 -> 81.3).
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, ndigits: int = 1) -> float:
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
