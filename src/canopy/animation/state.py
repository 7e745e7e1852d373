from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Sequence

import numpy as np

from canopy.animation.particles import Particle
from canopy.generation.turtle import Branch, LeafSite


class GrowthPhase(StrEnum):
    IDLE = "idle"
    REVEALING = "revealing"
    SETTLED = "settled"


@dataclass(frozen=True, eq=False)
class SceneSnapshot:
    """What a renderer needs to draw one frame.

    ``all_branches`` and ``all_leaves`` are the animator's full lists for the
    current run. Only the first ``branch_cursor`` and ``leaf_cursor`` entries
    are revealed, and an entry never changes once it is behind its cursor,
    so snapshots share those lists rather than copying them every frame.
    """

    phase: GrowthPhase
    elapsed_ms: float
    all_branches: Sequence[Branch]
    all_leaves: Sequence[LeafSite]
    branch_cursor: int
    leaf_cursor: int
    particles: tuple[Particle, ...]

    @classmethod
    def empty(cls) -> "SceneSnapshot":
        return cls(
            phase=GrowthPhase.IDLE,
            elapsed_ms=0.0,
            all_branches=(),
            all_leaves=(),
            branch_cursor=0,
            leaf_cursor=0,
            particles=(),
        )

    @property
    def branches(self) -> tuple[Branch, ...]:
        """Revealed branches in emission order."""

        return tuple(self.all_branches[: self.branch_cursor])

    @property
    def leaves(self) -> tuple[LeafSite, ...]:
        return tuple(self.all_leaves[: self.leaf_cursor])

    @property
    def branch_total(self) -> int:
        return len(self.all_branches)

    @property
    def leaf_total(self) -> int:
        return len(self.all_leaves)

    @property
    def progress(self) -> float:
        total = self.branch_total + self.leaf_total
        if total == 0:
            return 1.0 if self.phase is GrowthPhase.SETTLED else 0.0
        return (self.branch_cursor + self.leaf_cursor) / total

    def _key(self) -> tuple[object, ...]:
        return (
            self.phase,
            self.elapsed_ms,
            self.branches,
            self.leaves,
            self.particles,
            self.branch_total,
            self.leaf_total,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SceneSnapshot):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # type: ignore[assignment]

    def segments(self) -> np.ndarray:
        """Revealed branch endpoints as an ``(n, 2, 2)`` float array."""

        branches = self.all_branches[: self.branch_cursor]
        if not branches:
            return np.zeros((0, 2, 2), dtype=float)
        return np.array([(branch.start, branch.end) for branch in branches], dtype=float)

    def thicknesses(self) -> np.ndarray:
        return np.array(
            [branch.display_thickness for branch in self.all_branches[: self.branch_cursor]],
            dtype=float,
        )

    def leaf_positions(self) -> np.ndarray:
        """Revealed leaf centres as an ``(m, 2)`` float array."""

        leaves = self.all_leaves[: self.leaf_cursor]
        if not leaves:
            return np.zeros((0, 2), dtype=float)
        return np.array([leaf.position for leaf in leaves], dtype=float)
