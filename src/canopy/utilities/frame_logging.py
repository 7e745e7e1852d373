"""Frame-count sampling for log statements emitted on every tick.

The animator reports its progress from inside the frame loop. A
:class:`FrameLogSampler` lets a keyed statement through on the first frame,
on any frame whose phase differs from the last one logged for that key, and
otherwise once every ``every_frames`` frames. A reveal running at 60 fps
then produces a few lines per second instead of one per tick.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from canopy.utilities.env import Configuration


class _Logged(NamedTuple):
    frame_index: int
    phase: str


class FrameLogSampler:
    def __init__(self, every_frames: int, level: int = logging.DEBUG) -> None:
        if every_frames < 0:
            raise ValueError("every_frames must be >= 0")
        self._every_frames = every_frames
        self._level = level
        self._last: dict[str, _Logged] = {}

    @classmethod
    def from_env(cls) -> "FrameLogSampler":
        return cls(Configuration.log_every_frames())

    @property
    def every_frames(self) -> int:
        return self._every_frames

    def should_log(self, key: str, frame_index: int, phase: str) -> bool:
        """Record and report whether ``key`` is due at ``frame_index``."""

        last = self._last.get(key)
        due = (
            last is None
            or phase != last.phase
            or (
                self._every_frames > 0
                and frame_index - last.frame_index >= self._every_frames
            )
        )
        if due:
            self._last[key] = _Logged(frame_index, phase)
        return due

    def log(
        self,
        logger: logging.Logger,
        *,
        key: str,
        frame_index: int,
        phase: str,
        msg: str,
        args: tuple[object, ...] = (),
    ) -> bool:
        if not self.should_log(key, frame_index, phase):
            return False
        logger.log(self._level, msg, *args)
        return True

    def forget(self, key: str) -> None:
        """Drop the history for ``key`` so its next frame is logged."""

        self._last.pop(key, None)
