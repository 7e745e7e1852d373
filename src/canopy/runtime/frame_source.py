from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import reactivex
from reactivex.subject import Subject


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class FrameTick:
    index: int
    timestamp_ms: float


class FrameSource:
    """Per-frame callback stream driven by the host's scheduler.

    The host calls :meth:`tick` once per frame (from its own
    ``requestAnimationFrame``-style hook or game loop); subscribers receive a
    :class:`FrameTick` synchronously on the calling thread.
    """

    def __init__(self, monotonic: Callable[[], float] = monotonic_ms) -> None:
        self._monotonic = monotonic
        self._subject: Subject[FrameTick] = Subject()
        self._index = 0

    @property
    def ticks(self) -> reactivex.Observable[FrameTick]:
        return self._subject

    def now_ms(self) -> float:
        return self._monotonic()

    def tick(self) -> FrameTick:
        frame = FrameTick(index=self._index, timestamp_ms=self._monotonic())
        self._index += 1
        self._subject.on_next(frame)
        return frame

    def run(self, frames: int) -> None:
        for _ in range(frames):
            self.tick()
