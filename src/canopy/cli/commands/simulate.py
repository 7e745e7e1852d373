from __future__ import annotations

from random import Random
from typing import Annotated, Optional

import typer

from canopy.animation.animator import GrowthAnimator
from canopy.animation.state import GrowthPhase, SceneSnapshot
from canopy.generation.grammar import UnknownRuleSetError
from canopy.generation.pipeline import generate
from canopy.runtime.container import build_growth_container
from canopy.runtime.frame_source import FrameSource
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FRAMES = 600
DEFAULT_FRAME_MS = 16.0


class _SyntheticClock:
    def __init__(self, step_ms: float) -> None:
        self._now = 0.0
        self._step_ms = step_ms

    def __call__(self) -> float:
        return self._now

    def advance(self) -> None:
        self._now += self._step_ms


def simulate_command(
    score: Annotated[float, typer.Option("--score", help="Activity score")] = 0.0,
    seed: Annotated[
        Optional[int], typer.Option("--seed", help="Seed for repeatable trees")
    ] = None,
    rule_set: Annotated[
        Optional[str], typer.Option("--rule-set", help="Force a named rule set")
    ] = None,
    frames: Annotated[
        int, typer.Option("--frames", min=1, help="Number of frames to drive")
    ] = DEFAULT_FRAMES,
    frame_ms: Annotated[
        float, typer.Option("--frame-ms", min=1.0, help="Synthetic frame interval")
    ] = DEFAULT_FRAME_MS,
) -> None:
    try:
        tree = generate(score, seed, rule_set=rule_set)
    except UnknownRuleSetError as exc:
        logger.error("%s", exc.args[0])
        raise typer.Exit(code=1)

    clock = _SyntheticClock(frame_ms)
    container = build_growth_container(
        overrides={FrameSource: FrameSource(monotonic=clock), Random: Random(seed)}
    )
    frame_source = container[FrameSource]
    animator = container[GrowthAnimator]

    last_phase = [GrowthPhase.IDLE]

    def on_frame(snapshot: SceneSnapshot) -> None:
        if snapshot.phase is not last_phase[0]:
            typer.echo(f"{snapshot.elapsed_ms:8.0f} ms  {snapshot.phase}")
            last_phase[0] = snapshot.phase

    animator.start_tree(tree, on_frame)
    typer.echo(f"{0:8.0f} ms  {animator.phase}")
    last_phase[0] = animator.phase
    for _ in range(frames):
        clock.advance()
        frame_source.tick()

    final = animator.snapshot()
    animator.stop()
    typer.echo(
        f"branches {final.branch_cursor}/{final.branch_total}, "
        f"leaves {final.leaf_cursor}/{final.leaf_total}, "
        f"particles {len(final.particles)}"
    )
