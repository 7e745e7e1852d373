from __future__ import annotations

from dataclasses import dataclass

Point = tuple[float, float]

REFERENCE_SURFACE_SIZE = 600.0
GROUND_MARGIN = 30.0


@dataclass(frozen=True)
class SurfaceSize:
    """Abstract drawing area the tree is laid out in (y grows downward)."""

    width: float = REFERENCE_SURFACE_SIZE
    height: float = REFERENCE_SURFACE_SIZE

    @property
    def size_scale(self) -> float:
        return min(self.width, self.height) / REFERENCE_SURFACE_SIZE

    @property
    def root(self) -> Point:
        return (self.width / 2.0, self.height - GROUND_MARGIN)


def lerp(start: Point, end: Point, t: float) -> Point:
    return (
        start[0] + (end[0] - start[0]) * t,
        start[1] + (end[1] - start[1]) * t,
    )
