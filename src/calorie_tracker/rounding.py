"""Half-up rounding used for every displayed and stored nutrition value."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round ``value`` half-up (towards +inf on ties) to ``digits`` decimals.

    Returns an ``int`` when ``digits`` is 0.
    """
    if digits == 0:
        return math.floor(value + 0.5)
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale
