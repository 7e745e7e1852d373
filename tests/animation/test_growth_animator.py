"""Tests for :mod:`canopy.animation.animator`."""

from __future__ import annotations

from random import Random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from canopy.animation.animator import GrowthAnimator
from canopy.animation.settings import AnimationSettings, ParticleSettings
from canopy.animation.state import GrowthPhase, SceneSnapshot
from canopy.generation.pipeline import generate
from canopy.generation.turtle import Branch, LeafSite
from canopy.runtime.frame_source import FrameSource
from canopy.utilities.frame_logging import FrameLogSampler

# 20 branches over 1000 ms at 100 ms frames -> 2 branches per frame;
# leaves start after 500 ms, 2 per frame; settled at 1200 ms.
SETTINGS = AnimationSettings(
    min_reveal_ms=1000.0,
    reveal_ms_per_branch=0.0,
    leaf_reveal_fraction=0.5,
    settle_tail_ms=200.0,
    frame_interval_ms=100.0,
    leaf_reveal_frames=2,
)
FRAME_MS = 100.0

BRANCHES = tuple(
    Branch((0.0, float(-i)), (0.0, float(-i - 1)), 5.0, 0, "hsl(25, 60%, 25%)")
    for i in range(20)
)
LEAVES = tuple(
    LeafSite((float(i), -20.0), 3.0, 0.0, "#4CAF50") for i in range(4)
)


class _Recorder:
    def __init__(self) -> None:
        self.frames: list[SceneSnapshot] = []

    def __call__(self, snapshot: SceneSnapshot) -> None:
        self.frames.append(snapshot)


@pytest.fixture()
def animator(frame_source: FrameSource) -> GrowthAnimator:
    return GrowthAnimator(
        frame_source,
        SETTINGS,
        ParticleSettings(spawn_probability=1.0),
        rng=Random(1),
    )


def _advance(clock, frame_source: FrameSource, frames: int = 1) -> None:
    for _ in range(frames):
        clock.advance(FRAME_MS)
        frame_source.tick()


class TestGrowthAnimatorReveal:
    """Reveal order and timing of branches and leaves."""

    def test_starts_idle_with_empty_scene(self, animator: GrowthAnimator) -> None:
        assert animator.phase is GrowthPhase.IDLE
        assert animator.snapshot() == SceneSnapshot.empty()
        assert not animator.is_active()

    def test_start_moves_to_revealing_without_revealing_anything(
        self, animator: GrowthAnimator
    ) -> None:
        recorder = _Recorder()

        animator.start(BRANCHES, LEAVES, recorder)

        assert animator.phase is GrowthPhase.REVEALING
        assert animator.is_active()
        assert (animator.branch_cursor, animator.leaf_cursor) == (0, 0)
        assert recorder.frames == []

    def test_each_frame_reveals_a_prefix_in_emission_order(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)

        for frame in range(1, 11):
            _advance(clock, frame_source)
            snapshot = recorder.frames[-1]
            assert snapshot.branch_cursor == 2 * frame
            assert [b.start for b in snapshot.branches] == [
                b.start for b in BRANCHES[: 2 * frame]
            ]
            assert all(branch.revealed for branch in snapshot.branches)

    def test_leaves_wait_for_threshold(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)

        _advance(clock, frame_source, 5)
        assert recorder.frames[-1].elapsed_ms == 500.0
        assert animator.leaf_cursor == 0

        _advance(clock, frame_source)
        assert animator.leaf_cursor == 2
        _advance(clock, frame_source)
        assert animator.leaf_cursor == 4

        for leaf in recorder.frames[-1].leaves:
            assert leaf.revealed
            assert 0.7 <= leaf.opacity <= 1.0

    def test_settles_after_everything_is_revealed(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)

        _advance(clock, frame_source, 11)
        assert animator.phase is GrowthPhase.REVEALING
        assert not animator.is_settled()

        _advance(clock, frame_source)
        assert animator.is_settled()
        assert recorder.frames[-1].phase is GrowthPhase.SETTLED
        assert recorder.frames[-1].progress == 1.0

    def test_empty_tree_settles_after_minimum_time(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        animator.start((), (), _Recorder())

        _advance(clock, frame_source, 11)
        assert animator.phase is GrowthPhase.REVEALING
        _advance(clock, frame_source)
        assert animator.is_settled()

    def test_input_geometry_is_not_mutated(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        animator.start(BRANCHES, LEAVES, _Recorder())

        _advance(clock, frame_source, 12)

        assert not any(branch.revealed for branch in BRANCHES)
        assert not any(leaf.revealed for leaf in LEAVES)

    def test_snapshots_are_published(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        published: list[SceneSnapshot] = []
        animator.snapshots.subscribe(published.append)
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)

        _advance(clock, frame_source, 3)

        assert published == recorder.frames

    def test_snapshots_share_geometry_with_later_frames(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)

        _advance(clock, frame_source)
        earlier = recorder.frames[-1]
        _advance(clock, frame_source, 6)
        later = recorder.frames[-1]

        assert later.all_branches is earlier.all_branches
        assert earlier.branch_cursor == 2
        assert earlier.branches == tuple(
            Branch(b.start, b.end, b.thickness, b.level, b.color_key, revealed=True)
            for b in BRANCHES[:2]
        )
        assert earlier.leaves == ()
        assert later.leaf_cursor == 4

    @given(steps=st.lists(st.integers(min_value=0, max_value=400), min_size=1, max_size=40))
    def test_reveal_is_monotonic_prefix(self, steps: list[int]) -> None:
        """Cursors never move backwards and leaves never start early."""

        now = [0.0]
        frame_source = FrameSource(monotonic=lambda: now[0])
        animator = GrowthAnimator(frame_source, SETTINGS, rng=Random(0))
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)

        previous = (0, 0)
        for step in steps:
            now[0] += step
            frame_source.tick()
            snapshot = recorder.frames[-1]
            cursors = (snapshot.branch_cursor, snapshot.leaf_cursor)
            assert cursors[0] >= previous[0] and cursors[1] >= previous[1]
            assert snapshot.branches == tuple(
                Branch(b.start, b.end, b.thickness, b.level, b.color_key, revealed=True)
                for b in BRANCHES[: snapshot.branch_cursor]
            )
            if snapshot.elapsed_ms <= SETTINGS.leaf_start_ms(len(BRANCHES)):
                assert snapshot.leaf_cursor == 0
            previous = cursors


class TestGrowthAnimatorParticles:
    """Particles appear late and keep drifting once settled."""

    def test_particles_spawn_after_full_duration(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        animator.start(BRANCHES, LEAVES, _Recorder())

        _advance(clock, frame_source, 10)
        assert animator.particles == ()

        _advance(clock, frame_source)
        assert len(animator.particles) == 1

    def test_settled_scene_only_animates_existing_particles(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        animator.start(BRANCHES, LEAVES, _Recorder())
        _advance(clock, frame_source, 12)
        assert animator.is_settled()
        before = animator.particles

        _advance(clock, frame_source)

        after = animator.particles
        assert len(after) == len(before) == 2
        assert all(a.position[1] < b.position[1] for a, b in zip(after, before))
        assert all(a.life < b.life for a, b in zip(after, before))

    def test_particles_can_be_disabled(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        animator.start(BRANCHES, LEAVES, _Recorder(), particles_enabled=False)

        _advance(clock, frame_source, 12)

        assert animator.particles == ()

    @pytest.mark.parametrize(("score", "expected"), [(80, False), (150, True)])
    def test_start_tree_gates_particles_on_score(
        self,
        frame_source: FrameSource,
        clock,
        score: float,
        expected: bool,
    ) -> None:
        animator = GrowthAnimator(
            frame_source,
            AnimationSettings(min_reveal_ms=100.0, reveal_ms_per_branch=0.0, frame_interval_ms=100.0),
            ParticleSettings(spawn_probability=1.0, score_threshold=100.0),
            rng=Random(2),
        )
        tree = generate(score, 3)
        animator.start_tree(tree, _Recorder())

        for _ in range(200):
            if animator.is_settled():
                break
            _advance(clock, frame_source)

        assert animator.is_settled()
        assert bool(animator.particles) is expected


class TestGrowthAnimatorCancellation:
    """Only one run is ever live and cancellation is immediate."""

    def test_reset_mid_reveal_returns_to_idle(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)
        _advance(clock, frame_source, 11)
        assert animator.particles

        animator.reset()
        _advance(clock, frame_source, 3)

        assert animator.phase is GrowthPhase.IDLE
        assert animator.snapshot() == SceneSnapshot.empty()
        assert len(recorder.frames) == 11
        assert not animator.is_active()

    def test_restart_after_reset_is_fresh(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        animator.start(BRANCHES, LEAVES, _Recorder())
        _advance(clock, frame_source, 11)
        animator.reset()

        recorder = _Recorder()
        animator.start(BRANCHES[:4], LEAVES, recorder)

        assert animator.phase is GrowthPhase.REVEALING
        assert (animator.branch_cursor, animator.leaf_cursor) == (0, 0)
        assert animator.particles == ()

        _advance(clock, frame_source)
        assert recorder.frames[-1].elapsed_ms == FRAME_MS
        assert recorder.frames[-1].branch_total == 4

    def test_second_start_replaces_first_subscription(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        first = _Recorder()
        second = _Recorder()
        animator.start(BRANCHES, LEAVES, first)
        _advance(clock, frame_source, 2)

        animator.start(BRANCHES, LEAVES, second)
        _advance(clock, frame_source, 2)

        assert len(first.frames) == 2
        assert len(second.frames) == 2
        assert second.frames[-1].branch_cursor == 4

    def test_reset_from_inside_frame_callback(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        calls: list[SceneSnapshot] = []

        def on_frame(snapshot: SceneSnapshot) -> None:
            calls.append(snapshot)
            animator.reset()

        animator.start(BRANCHES, LEAVES, on_frame)
        _advance(clock, frame_source, 3)

        assert len(calls) == 1
        assert animator.phase is GrowthPhase.IDLE

    def test_reset_and_stop_are_idempotent(self, animator: GrowthAnimator) -> None:
        animator.reset()
        animator.reset()
        animator.stop()

        assert animator.phase is GrowthPhase.IDLE

    def test_stop_keeps_scene_but_ignores_frames(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        recorder = _Recorder()
        animator.start(BRANCHES, LEAVES, recorder)
        _advance(clock, frame_source, 3)

        animator.stop()
        _advance(clock, frame_source, 3)

        assert len(recorder.frames) == 3
        assert animator.branch_cursor == 6
        assert animator.phase is GrowthPhase.REVEALING

    def test_on_frame_must_be_callable(self, animator: GrowthAnimator) -> None:
        with pytest.raises(TypeError):
            animator.start(BRANCHES, LEAVES, None)  # type: ignore[arg-type]

        assert animator.phase is GrowthPhase.IDLE

    def test_callback_errors_propagate_to_host(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        def on_frame(_: SceneSnapshot) -> None:
            raise RuntimeError("renderer failed")

        animator.start(BRANCHES, LEAVES, on_frame)

        with pytest.raises(RuntimeError):
            _advance(clock, frame_source)

    def test_snapshots_from_a_cancelled_run_stay_intact(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        first = _Recorder()
        animator.start(BRANCHES, LEAVES, first)
        _advance(clock, frame_source, 3)
        kept = first.frames[-1]

        animator.reset()
        animator.start(BRANCHES[:4], LEAVES, _Recorder())
        _advance(clock, frame_source, 2)

        assert kept.branch_total == 20
        assert kept.branch_cursor == 6
        assert all(branch.revealed for branch in kept.branches)

    def test_particles_spawn_again_after_reset(
        self, animator: GrowthAnimator, clock, frame_source: FrameSource
    ) -> None:
        animator.start(BRANCHES, LEAVES, _Recorder())
        _advance(clock, frame_source, 11)
        assert len(animator.particles) == 1

        animator.reset()
        assert animator.particles == ()

        animator.start(BRANCHES, LEAVES, _Recorder())
        _advance(clock, frame_source, 11)
        assert len(animator.particles) == 1


class _RecordingSampler(FrameLogSampler):
    def __init__(self, every_frames: int) -> None:
        super().__init__(every_frames)
        self.logged: list[tuple[int, GrowthPhase]] = []

    def log(self, logger, **kwargs) -> bool:  # type: ignore[override]
        emitted = super().log(logger, **kwargs)
        if emitted:
            self.logged.append((kwargs["frame_index"], kwargs["phase"]))
        return emitted


class TestGrowthAnimatorFrameLogging:
    """Per-frame progress logging is thinned by frame count and phase."""

    def test_logs_every_interval_and_on_settle(self, clock, frame_source: FrameSource) -> None:
        sampler = _RecordingSampler(every_frames=5)
        animator = GrowthAnimator(frame_source, SETTINGS, rng=Random(1), log_sampler=sampler)
        animator.start(BRANCHES, LEAVES, _Recorder())

        _advance(clock, frame_source, 13)

        assert sampler.logged == [
            (0, GrowthPhase.REVEALING),
            (5, GrowthPhase.REVEALING),
            (10, GrowthPhase.REVEALING),
            (11, GrowthPhase.SETTLED),
        ]

    def test_new_run_logs_its_first_frame(self, clock, frame_source: FrameSource) -> None:
        sampler = _RecordingSampler(every_frames=100)
        animator = GrowthAnimator(frame_source, SETTINGS, rng=Random(1), log_sampler=sampler)
        animator.start(BRANCHES, LEAVES, _Recorder())
        _advance(clock, frame_source, 2)

        animator.start(BRANCHES, LEAVES, _Recorder())
        _advance(clock, frame_source)

        assert [index for index, _ in sampler.logged] == [0, 2]
