"""Frame-driven reveal of generated tree geometry.

``GrowthAnimator`` is a small state machine (idle, revealing, settled) that
advances on each :class:`~canopy.runtime.frame_source.FrameTick`. It holds at
most one subscription to the frame source; ``start`` replaces it and
``reset``/``stop`` dispose it, so stale geometry never keeps animating.

Snapshots share the animator's branch and leaf lists (see
:class:`~canopy.animation.state.SceneSnapshot`), so the work done per tick
is bounded by the reveal quotas and the particle limit.

Each start bumps a generation counter that the tick handler is bound to.
A tick that arrives for an older generation (for example when ``reset`` runs
from inside ``on_frame``) is ignored.
"""

from __future__ import annotations

from dataclasses import replace
from random import Random
from typing import Callable, Sequence

import reactivex
from reactivex.disposable import SerialDisposable
from reactivex.subject import Subject

from canopy.animation.particles import Particle, ParticleSystem
from canopy.animation.settings import AnimationSettings, ParticleSettings
from canopy.animation.state import GrowthPhase, SceneSnapshot
from canopy.generation.geometry import SurfaceSize
from canopy.generation.pipeline import GeneratedTree
from canopy.generation.turtle import Branch, LeafSite
from canopy.runtime.frame_source import FrameSource, FrameTick
from canopy.utilities.frame_logging import FrameLogSampler
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

FrameCallback = Callable[[SceneSnapshot], None]

FRAME_LOG_KEY = "growth.frame"


class GrowthAnimator:
    def __init__(
        self,
        frame_source: FrameSource,
        settings: AnimationSettings | None = None,
        particle_settings: ParticleSettings | None = None,
        *,
        surface: SurfaceSize | None = None,
        rng: Random | None = None,
        log_sampler: FrameLogSampler | None = None,
    ) -> None:
        self._frame_source = frame_source
        self._settings = settings or AnimationSettings()
        self._particle_settings = particle_settings or ParticleSettings()
        self._surface = surface or SurfaceSize()
        self._rng = rng or Random()
        self._log_sampler = log_sampler or FrameLogSampler.from_env()
        self._particles = ParticleSystem(
            self._surface, self._rng, self._particle_settings
        )
        self._subscription = SerialDisposable()
        self._snapshots: Subject[SceneSnapshot] = Subject()
        self._generation = 0
        self._clear()

    def _clear(self) -> None:
        self._phase = GrowthPhase.IDLE
        self._branches: list[Branch] = []
        self._leaves: list[LeafSite] = []
        self._branch_cursor = 0
        self._leaf_cursor = 0
        self._started_at_ms = 0.0
        self._last_tick_ms = 0.0
        self._elapsed_ms = 0.0
        self._on_frame: FrameCallback | None = None
        self._particles_enabled = False
        self._particles.clear()
        self._log_sampler.forget(FRAME_LOG_KEY)

    @property
    def phase(self) -> GrowthPhase:
        return self._phase

    @property
    def snapshots(self) -> reactivex.Observable[SceneSnapshot]:
        return self._snapshots

    @property
    def particles(self) -> tuple[Particle, ...]:
        return self._particles.particles

    @property
    def branch_cursor(self) -> int:
        return self._branch_cursor

    @property
    def leaf_cursor(self) -> int:
        return self._leaf_cursor

    def is_settled(self) -> bool:
        return self._phase is GrowthPhase.SETTLED

    def is_active(self) -> bool:
        return self._subscription.disposable is not None

    def start(
        self,
        branches: Sequence[Branch],
        leaves: Sequence[LeafSite],
        on_frame: FrameCallback,
        *,
        palette_index: int = 0,
        particles_enabled: bool = True,
    ) -> None:
        """Begin revealing ``branches`` then ``leaves``, replacing any run in flight."""

        if not callable(on_frame):
            raise TypeError("on_frame must be callable")

        self.reset()
        self._branches = [
            replace(branch, revealed=False) if branch.revealed else branch
            for branch in branches
        ]
        self._leaves = [
            replace(leaf, revealed=False, opacity=0.0) if leaf.revealed else leaf
            for leaf in leaves
        ]
        self._on_frame = on_frame
        self._particles_enabled = particles_enabled
        self._particles.use_palette(palette_index)
        self._phase = GrowthPhase.REVEALING
        self._started_at_ms = self._frame_source.now_ms()
        self._last_tick_ms = self._started_at_ms

        generation = self._generation
        self._subscription.disposable = self._frame_source.ticks.subscribe(
            on_next=lambda tick: self._on_tick(tick, generation)
        )
        logger.info(
            "Growth started: %s branches, %s leaves over %.0f ms.",
            len(self._branches),
            len(self._leaves),
            self._settings.reveal_duration_ms(len(self._branches)),
        )

    def start_tree(self, tree: GeneratedTree, on_frame: FrameCallback) -> None:
        self.start(
            tree.branches,
            tree.leaves,
            on_frame,
            palette_index=tree.parameters.palette_index,
            particles_enabled=tree.score > self._particle_settings.score_threshold,
        )

    def stop(self) -> None:
        """Stop listening for frames; geometry and phase are kept."""

        self._generation += 1
        self._subscription.disposable = None

    def reset(self) -> None:
        """Cancel any run and return to an empty idle state."""

        was_running = self._phase is not GrowthPhase.IDLE
        self.stop()
        self._clear()
        if was_running:
            logger.info("Growth reset to idle.")

    def snapshot(self) -> SceneSnapshot:
        return SceneSnapshot(
            phase=self._phase,
            elapsed_ms=self._elapsed_ms,
            all_branches=self._branches,
            all_leaves=self._leaves,
            branch_cursor=self._branch_cursor,
            leaf_cursor=self._leaf_cursor,
            particles=self._particles.particles,
        )

    def _on_tick(self, tick: FrameTick, generation: int) -> None:
        if generation != self._generation or self._phase is GrowthPhase.IDLE:
            return

        now = tick.timestamp_ms
        dt_ms = max(0.0, now - self._last_tick_ms)
        self._last_tick_ms = now
        self._elapsed_ms = max(0.0, now - self._started_at_ms)

        if self._phase is GrowthPhase.REVEALING:
            self._advance_reveal()

        self._particles.tick(dt_ms)

        snapshot = self.snapshot()
        self._log_sampler.log(
            logger,
            key=FRAME_LOG_KEY,
            frame_index=tick.index,
            phase=self._phase,
            msg="growth.frame %s phase=%s branches=%s/%s leaves=%s/%s particles=%s",
            args=(
                tick.index,
                self._phase,
                self._branch_cursor,
                len(self._branches),
                self._leaf_cursor,
                len(self._leaves),
                len(self._particles),
            ),
        )
        self._snapshots.on_next(snapshot)
        if generation != self._generation or self._on_frame is None:
            return
        self._on_frame(snapshot)

    def _advance_reveal(self) -> None:
        settings = self._settings
        branch_total = len(self._branches)
        elapsed = self._elapsed_ms

        for _ in range(settings.branch_quota(branch_total)):
            if self._branch_cursor >= branch_total:
                break
            index = self._branch_cursor
            self._branches[index] = replace(self._branches[index], revealed=True)
            self._branch_cursor += 1

        if elapsed > settings.leaf_start_ms(branch_total):
            for _ in range(settings.leaf_quota(len(self._leaves))):
                if self._leaf_cursor >= len(self._leaves):
                    break
                index = self._leaf_cursor
                self._leaves[index] = replace(
                    self._leaves[index],
                    revealed=True,
                    opacity=self._rng.uniform(
                        settings.opacity_low, settings.opacity_high
                    ),
                )
                self._leaf_cursor += 1

        if (
            self._particles_enabled
            and elapsed > settings.reveal_duration_ms(branch_total)
            and self._leaves_mostly_revealed()
        ):
            self._particles.maybe_spawn()

        if (
            self._branch_cursor >= branch_total
            and self._leaf_cursor >= len(self._leaves)
            and elapsed >= settings.settle_after_ms(branch_total)
        ):
            self._phase = GrowthPhase.SETTLED
            logger.info(
                "Growth settled after %.0f ms (%s branches, %s leaves).",
                elapsed,
                branch_total,
                len(self._leaves),
            )

    def _leaves_mostly_revealed(self) -> bool:
        if not self._leaves:
            return True
        return (
            self._leaf_cursor / len(self._leaves)
            >= self._settings.mostly_revealed_fraction
        )
