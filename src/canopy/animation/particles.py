from __future__ import annotations

import math
from dataclasses import dataclass, replace
from random import Random

from canopy.animation.settings import ParticleSettings
from canopy.generation.geometry import Point, SurfaceSize
from canopy.generation.palette import leaf_color


@dataclass(frozen=True)
class Particle:
    position: Point
    velocity: Point
    size: float
    color_key: str
    life: float
    rotation: float
    rotation_speed: float

    def advanced(self, steps: float, life_decay: float) -> "Particle":
        """Move ``steps`` nominal frames forward."""

        x, y = self.position
        vx, vy = self.velocity
        return replace(
            self,
            position=(x + vx * steps, y + vy * steps),
            rotation=self.rotation + self.rotation_speed * steps,
            life=self.life - life_decay * steps,
        )


class ParticleSystem:
    """Drifting leaf motes that rise from the bottom edge and fade out.

    Velocities and the life decay are expressed per nominal frame; ``tick``
    scales them by how many nominal frames ``dt_ms`` covers.
    """

    def __init__(
        self,
        surface: SurfaceSize,
        rng: Random,
        settings: ParticleSettings | None = None,
        palette_index: int = 0,
    ) -> None:
        self._surface = surface
        self._rng = rng
        self._settings = settings or ParticleSettings()
        self._palette_index = palette_index
        self._particles: list[Particle] = []

    @property
    def particles(self) -> tuple[Particle, ...]:
        return tuple(self._particles)

    def __len__(self) -> int:
        return len(self._particles)

    def use_palette(self, palette_index: int) -> None:
        self._palette_index = palette_index

    def spawn(self) -> Particle:
        rng = self._rng
        particle = Particle(
            position=(rng.uniform(0.0, self._surface.width), self._surface.height),
            velocity=(rng.uniform(-0.25, 0.25), -rng.uniform(0.5, 2.5)),
            size=rng.uniform(1.0, 3.0),
            color_key=leaf_color(rng, self._palette_index),
            life=1.0,
            rotation=rng.uniform(0.0, 2.0 * math.pi),
            rotation_speed=rng.uniform(-0.05, 0.05),
        )
        self._particles.append(particle)
        overflow = len(self._particles) - self._settings.limit
        if overflow > 0:
            del self._particles[:overflow]
        return particle

    def maybe_spawn(self) -> Particle | None:
        if self._rng.random() < self._settings.spawn_probability:
            return self.spawn()
        return None

    def tick(self, dt_ms: float) -> None:
        steps = max(0.0, dt_ms) / self._settings.frame_interval_ms
        survivors: list[Particle] = []
        for particle in self._particles:
            moved = particle.advanced(steps, self._settings.life_decay)
            if moved.life > 0.0:
                survivors.append(moved)
        self._particles = survivors

    def clear(self) -> None:
        self._particles = []
