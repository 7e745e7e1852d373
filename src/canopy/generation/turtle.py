"""Turtle interpretation of an expanded L-system word.

``interpret`` walks the word once, keeping one active :class:`TurtleState`
and an explicit stack of saved states. It emits :class:`Branch` records for
``F`` and :class:`LeafSite` records for ``X``; both lists come back in
emission order, which the animator later uses as reveal order.

Coordinates follow screen conventions: y grows downward and a heading of
``-pi / 2`` points straight up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import StrEnum
from random import Random
from typing import Iterable, NamedTuple, Sequence

from canopy.generation.geometry import Point, SurfaceSize, lerp
from canopy.generation.palette import (FLOWER_PETAL_COLOR, branch_color,
                                       leaf_color)
from canopy.generation.parameters import GenerationParameters

UPWARD_HEADING = -math.pi / 2
FLOWER_PROBABILITY = 0.3
SCATTER_PROBABILITY = 0.7
MAX_SCATTER_PER_BRANCH = 3
MIN_DISPLAY_THICKNESS = 1.0


class LeafKind(StrEnum):
    LEAF = "leaf"
    FLOWER = "flower"


@dataclass(frozen=True)
class Branch:
    start: Point
    end: Point
    thickness: float
    level: int
    color_key: str
    revealed: bool = False

    @property
    def length(self) -> float:
        return math.dist(self.start, self.end)

    @property
    def display_thickness(self) -> float:
        return max(MIN_DISPLAY_THICKNESS, self.thickness)

    def point_at(self, t: float) -> Point:
        return lerp(self.start, self.end, min(1.0, max(0.0, t)))


@dataclass(frozen=True)
class LeafSite:
    position: Point
    size: float
    rotation: float
    color_key: str
    kind: LeafKind = LeafKind.LEAF
    revealed: bool = False
    opacity: float = 0.0


@dataclass(frozen=True)
class TurtleState:
    position: Point
    heading: float
    segment_length: float
    thickness: float
    branch_level: int

    @classmethod
    def initial(
        cls, params: GenerationParameters, surface: SurfaceSize
    ) -> "TurtleState":
        return cls(
            position=surface.root,
            heading=UPWARD_HEADING,
            segment_length=params.base_segment_length,
            thickness=params.base_thickness,
            branch_level=0,
        )

    def descend(self, length_decay: float, thickness_decay: float) -> "TurtleState":
        """State for a sub-branch opened by ``[``."""

        return replace(
            self,
            segment_length=self.segment_length * length_decay,
            thickness=self.thickness * thickness_decay,
            branch_level=self.branch_level + 1,
        )


@dataclass(frozen=True)
class JitterBands:
    """Ranges of the random perturbations applied during interpretation.

    ``none()`` keeps every band at zero width, which makes the geometry a
    pure function of the word and parameters.
    """

    angle_jitter_scale: float = 1.0
    turn_scale_low: float = 0.8
    turn_scale_high: float = 1.2
    leaf_offset: float = 5.0
    scatter_offset: float = 6.0

    @classmethod
    def none(cls) -> "JitterBands":
        return cls(
            angle_jitter_scale=0.0,
            turn_scale_low=1.0,
            turn_scale_high=1.0,
            leaf_offset=0.0,
            scatter_offset=0.0,
        )


class Interpretation(NamedTuple):
    branches: tuple[Branch, ...]
    leaves: tuple[LeafSite, ...]


def _jittered(rng: Random, point: Point, spread: float) -> Point:
    return (
        point[0] + rng.uniform(-spread, spread),
        point[1] + rng.uniform(-spread, spread),
    )


def interpret(
    sequence: Iterable[str],
    params: GenerationParameters,
    rng: Random,
    *,
    surface: SurfaceSize | None = None,
    jitter: JitterBands | None = None,
) -> Interpretation:
    surface = surface or SurfaceSize()
    jitter = jitter or JitterBands()

    state = TurtleState.initial(params, surface)
    stack: list[TurtleState] = []
    branches: list[Branch] = []
    leaves: list[LeafSite] = []
    turn = math.radians(params.base_angle_degrees)
    max_offset = params.angle_jitter_degrees * jitter.angle_jitter_scale

    for symbol in sequence:
        if symbol == "F":
            offset = math.radians(rng.uniform(-max_offset, max_offset))
            direction = state.heading + offset
            x, y = state.position
            end = (
                x + state.segment_length * math.cos(direction),
                y + state.segment_length * math.sin(direction),
            )
            branches.append(
                Branch(
                    start=state.position,
                    end=end,
                    thickness=state.thickness,
                    level=state.branch_level,
                    color_key=branch_color(state.branch_level),
                )
            )
            state = replace(state, position=end)
        elif symbol == "X":
            leaves.append(_leaf_at(state.position, rng, params, jitter))
        elif symbol == "+" or symbol == "-":
            scale = rng.uniform(jitter.turn_scale_low, jitter.turn_scale_high)
            sign = 1.0 if symbol == "+" else -1.0
            state = replace(state, heading=state.heading + sign * turn * scale)
        elif symbol == "[":
            stack.append(state)
            state = state.descend(params.length_decay, params.thickness_decay)
        elif symbol == "]":
            if stack:
                state = stack.pop()
        # anything else is a no-op

    return Interpretation(branches=tuple(branches), leaves=tuple(leaves))


def _leaf_at(
    position: Point,
    rng: Random,
    params: GenerationParameters,
    jitter: JitterBands,
) -> LeafSite:
    position = _jittered(rng, position, jitter.leaf_offset)
    size = rng.uniform(2.0, 5.0)
    rotation = rng.uniform(0.0, 2.0 * math.pi)
    if rng.random() < FLOWER_PROBABILITY:
        return LeafSite(
            position=position,
            size=size,
            rotation=rotation,
            color_key=FLOWER_PETAL_COLOR,
            kind=LeafKind.FLOWER,
        )
    return LeafSite(
        position=position,
        size=size,
        rotation=rotation,
        color_key=leaf_color(rng, params.palette_index),
    )


def scatter_leaves(
    branches: Sequence[Branch],
    leaves: Sequence[LeafSite],
    params: GenerationParameters,
    rng: Random,
    *,
    jitter: JitterBands | None = None,
) -> tuple[LeafSite, ...]:
    """Add foliage along non-trunk branches, then cap at the density target.

    Existing leaves keep their place at the front; the cap keeps the first
    ``leaf_density_target`` entries.
    """

    jitter = jitter or JitterBands()
    target = params.leaf_density_target
    if target <= 0:
        return ()

    scattered = list(leaves)
    for branch in branches:
        if branch.level == 0 or rng.random() >= SCATTER_PROBABILITY:
            continue
        count = max(1, int(rng.random() * MAX_SCATTER_PER_BRANCH))
        for _ in range(count):
            anchor = branch.point_at(rng.random())
            scattered.append(
                LeafSite(
                    position=_jittered(rng, anchor, jitter.scatter_offset),
                    size=rng.uniform(1.5, 4.0),
                    rotation=rng.uniform(0.0, 2.0 * math.pi),
                    color_key=leaf_color(rng, params.palette_index),
                )
            )
        if len(scattered) >= target:
            break

    return tuple(scattered[:target])
