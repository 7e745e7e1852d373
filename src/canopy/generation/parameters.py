"""Score to generation-parameter mapping.

The mapping is a step function of the sanitized score. The constants are
presentation choices; what matters is that every output stays inside a
fixed range however large the score gets.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from canopy.generation.palette import SEASON_PERIOD, SEASONAL_PALETTES
from canopy.generation.score import sanitize_score

MAX_ITERATIONS = 6
MIN_SEGMENT_LENGTH = 15.0
MAX_SEGMENT_LENGTH = 35.0
MIN_THICKNESS = 3.0
MAX_THICKNESS = 15.0
MAX_LEAF_DENSITY = 80
BASE_ANGLE_DEGREES = 22.5
ANGLE_JITTER_DEGREES = 4.0
LENGTH_DECAY = 0.75
THICKNESS_DECAY = 0.7

# (inclusive upper score bound, iterations)
_ITERATION_BUCKETS: tuple[tuple[float, int], ...] = (
    (25.0, 2),
    (75.0, 3),
    (200.0, 4),
    (500.0, 5),
)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


@dataclass(frozen=True)
class GenerationParameters:
    iteration_count: int
    base_segment_length: float
    length_decay: float
    thickness_decay: float
    base_angle_degrees: float
    angle_jitter_degrees: float
    base_thickness: float
    leaf_density_target: int
    palette_index: int

    @classmethod
    def seed(cls) -> "GenerationParameters":
        """The minimal parameter set: nothing is grown."""

        return cls(
            iteration_count=0,
            base_segment_length=MIN_SEGMENT_LENGTH,
            length_decay=LENGTH_DECAY,
            thickness_decay=THICKNESS_DECAY,
            base_angle_degrees=BASE_ANGLE_DEGREES,
            angle_jitter_degrees=ANGLE_JITTER_DEGREES,
            base_thickness=MIN_THICKNESS,
            leaf_density_target=0,
            palette_index=0,
        )


def iterations_for(score: float) -> int:
    score = sanitize_score(score)
    if score == 0.0:
        return 0
    for upper, iterations in _ITERATION_BUCKETS:
        if score <= upper:
            return iterations
    return min(MAX_ITERATIONS, 5 + int(score // 1000))


def map_score(score: float, *, size_scale: float = 1.0) -> GenerationParameters:
    """Map an activity score to the parameters of one growth event."""

    score = sanitize_score(score)
    size_scale = size_scale if math.isfinite(size_scale) and size_scale > 0 else 1.0
    if score == 0.0:
        return GenerationParameters.seed()

    # scaled to the surface first so small surfaces keep the minimum length
    segment_length = clamp(
        (20.0 + math.sqrt(score) * 0.5) * size_scale,
        MIN_SEGMENT_LENGTH,
        MAX_SEGMENT_LENGTH,
    )
    return GenerationParameters(
        iteration_count=iterations_for(score),
        base_segment_length=segment_length,
        length_decay=LENGTH_DECAY,
        thickness_decay=THICKNESS_DECAY,
        base_angle_degrees=BASE_ANGLE_DEGREES + (score % 100) * 0.1,
        angle_jitter_degrees=ANGLE_JITTER_DEGREES,
        base_thickness=clamp(score / 30.0 + 3.0, MIN_THICKNESS, MAX_THICKNESS),
        leaf_density_target=int(min(score / 10.0, MAX_LEAF_DENSITY)),
        palette_index=int(score // SEASON_PERIOD) % len(SEASONAL_PALETTES),
    )
