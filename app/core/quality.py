"""
Quality scale conversion.

The catalog stores `quality_score` on a 0-100 scale; tenant groups show a
1-5 star `quality_rating`. Conversion happens only at these two functions.
"""

import math
from typing import Optional

SCORE_MIN, SCORE_MAX = 0, 100
RATING_MIN, RATING_MAX = 1, 5
POINTS_PER_STAR = 20


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def score_to_rating(score: Optional[float]) -> Optional[int]:
    """0-100 score -> 1-5 rating. None stays None."""
    if score is None:
        return None
    return _clamp(_round_half_up(score / POINTS_PER_STAR), RATING_MIN, RATING_MAX)


def rating_to_score(rating: Optional[float]) -> Optional[int]:
    """1-5 rating -> 0-100 score. None stays None."""
    if rating is None:
        return None
    return _clamp(_round_half_up(rating * POINTS_PER_STAR), SCORE_MIN, SCORE_MAX)
