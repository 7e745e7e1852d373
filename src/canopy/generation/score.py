import math


def sanitize_score(score: float) -> float:
    """Return ``score`` as a finite, non-negative float.

    NaN, infinities, negatives and values that cannot be read as a number all
    collapse to ``0.0`` so the tree falls back to a seed.
    """

    try:
        value = float(score)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0.0:
        return 0.0
    return value
