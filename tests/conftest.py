import os

os.environ.setdefault("CANOPY_LOG_TO_FILE", "0")

import pytest  # noqa: E402
from hypothesis import HealthCheck, settings  # noqa: E402

from canopy.runtime.frame_source import FrameSource  # noqa: E402

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")

CANOPY_ENV_VARS = (
    "CANOPY_SURFACE_WIDTH",
    "CANOPY_SURFACE_HEIGHT",
    "CANOPY_MIN_REVEAL_MS",
    "CANOPY_REVEAL_MS_PER_BRANCH",
    "CANOPY_LEAF_REVEAL_FRACTION",
    "CANOPY_SETTLE_TAIL_MS",
    "CANOPY_FRAME_INTERVAL_MS",
    "CANOPY_PARTICLE_SPAWN_PROBABILITY",
    "CANOPY_PARTICLE_SCORE_THRESHOLD",
    "CANOPY_PARTICLE_LIMIT",
    "CANOPY_RULE_SET",
    "CANOPY_RULE_SET_STRATEGY",
    "CANOPY_LOG_EVERY_FRAMES",
)


class DeterministicClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


@pytest.fixture(autouse=True)
def clean_canopy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shell settings from leaking into tests."""

    for name in CANOPY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield



@pytest.fixture()
def clock() -> DeterministicClock:
    return DeterministicClock()


@pytest.fixture()
def frame_source(clock: DeterministicClock) -> FrameSource:
    return FrameSource(monotonic=clock)
