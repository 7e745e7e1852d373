from __future__ import annotations

import math
from dataclasses import dataclass

from canopy.utilities.env import Configuration


@dataclass(frozen=True)
class AnimationSettings:
    min_reveal_ms: float = 1500.0
    reveal_ms_per_branch: float = 8.0
    leaf_reveal_fraction: float = 0.7
    settle_tail_ms: float = 1000.0
    frame_interval_ms: float = 16.0
    leaf_reveal_frames: int = 60
    opacity_low: float = 0.7
    opacity_high: float = 1.0
    # share of leaves that must be visible before particles may appear
    mostly_revealed_fraction: float = 0.8

    @classmethod
    def from_env(cls) -> "AnimationSettings":
        return cls(
            min_reveal_ms=float(Configuration.min_reveal_ms()),
            reveal_ms_per_branch=float(Configuration.reveal_ms_per_branch()),
            leaf_reveal_fraction=Configuration.leaf_reveal_fraction(),
            settle_tail_ms=float(Configuration.settle_tail_ms()),
            frame_interval_ms=float(Configuration.frame_interval_ms()),
        )

    def reveal_duration_ms(self, branch_count: int) -> float:
        return max(self.min_reveal_ms, branch_count * self.reveal_ms_per_branch)

    def leaf_start_ms(self, branch_count: int) -> float:
        return self.reveal_duration_ms(branch_count) * self.leaf_reveal_fraction

    def settle_after_ms(self, branch_count: int) -> float:
        return self.reveal_duration_ms(branch_count) + self.settle_tail_ms

    def branch_quota(self, branch_count: int) -> int:
        frames = self.reveal_duration_ms(branch_count) / self.frame_interval_ms
        return max(1, math.ceil(branch_count / frames))

    def leaf_quota(self, leaf_count: int) -> int:
        return max(1, math.ceil(leaf_count / self.leaf_reveal_frames))


@dataclass(frozen=True)
class ParticleSettings:
    spawn_probability: float = 0.03
    score_threshold: float = 100.0
    limit: int = 200
    life_decay: float = 0.005
    frame_interval_ms: float = 16.0

    @classmethod
    def from_env(cls) -> "ParticleSettings":
        return cls(
            spawn_probability=Configuration.particle_spawn_probability(),
            score_threshold=Configuration.particle_score_threshold(),
            limit=Configuration.particle_limit(),
            frame_interval_ms=float(Configuration.frame_interval_ms()),
        )
