from canopy.utilities.env.parsing import _env_int

DEFAULT_LOG_EVERY_FRAMES = 60


class DiagnosticsConfiguration:
    @classmethod
    def log_every_frames(cls) -> int:
        """Frames between sampled per-tick log lines; 0 logs phase changes only."""

        return _env_int(
            "CANOPY_LOG_EVERY_FRAMES", default=DEFAULT_LOG_EVERY_FRAMES, minimum=0
        )
