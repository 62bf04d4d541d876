"""Small numeric helpers shared by the aggregation modules."""

from __future__ import annotations

import math


def round_half_up(value: float, places: int = 2) -> float:
    """Round ``value`` to ``places`` decimals, halves rounding towards +inf.

    Python's ``round`` uses banker's rounding; ``round_half_up(0.125) == 0.13``.
    """
    scale = 10**places
    return math.floor(value * scale + 0.5) / scale


def percentage(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole`` with two decimals, 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)
