"""
Numeric helpers shared by the scoring stages.
"""

import math

# Absorbs binary representation error, e.g. 0.35 * 77.5 + ... landing on 75.5999999
_EPSILON = 1e-9


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half up for non-negative scores (75.5 -> 76, 2.345 -> 2.35)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5 + _EPSILON) / factor


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
