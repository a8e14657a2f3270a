"""
Rating aggregation: arithmetic mean of review ratings, rounded half-up to one decimal.
Recomputed from the full review list every time (no incremental state).
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with halves going up, not to even (4.25 -> 4.3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def mean_rating(ratings: Iterable[float]) -> float:
    """Rounded mean of plain rating values; 0 for an empty input."""
    values = [float(r) for r in ratings]
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), 1)


def average_rating(reviews: Iterable[Mapping[str, Any]]) -> float:
    """Mean of ``review["rating"]`` over review documents."""
    return mean_rating(r["rating"] for r in reviews)
