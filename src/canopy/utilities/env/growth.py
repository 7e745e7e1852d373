import os

from canopy.utilities.env.enums import RuleSetStrategy
from canopy.utilities.env.parsing import _env_float, _env_int

DEFAULT_MIN_REVEAL_MS = 1500
DEFAULT_REVEAL_MS_PER_BRANCH = 8
DEFAULT_LEAF_REVEAL_FRACTION = 0.7
DEFAULT_SETTLE_TAIL_MS = 1000
DEFAULT_FRAME_INTERVAL_MS = 16


class GrowthConfiguration:
    @classmethod
    def min_reveal_ms(cls) -> int:
        return _env_int(
            "CANOPY_MIN_REVEAL_MS", default=DEFAULT_MIN_REVEAL_MS, minimum=1
        )

    @classmethod
    def reveal_ms_per_branch(cls) -> int:
        return _env_int(
            "CANOPY_REVEAL_MS_PER_BRANCH",
            default=DEFAULT_REVEAL_MS_PER_BRANCH,
            minimum=0,
        )

    @classmethod
    def leaf_reveal_fraction(cls) -> float:
        return _env_float(
            "CANOPY_LEAF_REVEAL_FRACTION",
            default=DEFAULT_LEAF_REVEAL_FRACTION,
            minimum=0.0,
            maximum=1.0,
        )

    @classmethod
    def settle_tail_ms(cls) -> int:
        return _env_int(
            "CANOPY_SETTLE_TAIL_MS", default=DEFAULT_SETTLE_TAIL_MS, minimum=0
        )

    @classmethod
    def frame_interval_ms(cls) -> int:
        return _env_int(
            "CANOPY_FRAME_INTERVAL_MS", default=DEFAULT_FRAME_INTERVAL_MS, minimum=1
        )

    @classmethod
    def rule_set_name(cls) -> str | None:
        name = os.environ.get("CANOPY_RULE_SET", "").strip().lower()
        return name or None

    @classmethod
    def rule_set_strategy(cls) -> RuleSetStrategy:
        default = "fixed" if cls.rule_set_name() else "score"
        strategy = os.environ.get("CANOPY_RULE_SET_STRATEGY", default).strip().lower()
        try:
            resolved = RuleSetStrategy(strategy)
        except ValueError as exc:
            raise ValueError(
                "CANOPY_RULE_SET_STRATEGY must be 'score' or 'fixed'"
            ) from exc
        if resolved is RuleSetStrategy.FIXED and cls.rule_set_name() is None:
            raise ValueError(
                "CANOPY_RULE_SET must be set when CANOPY_RULE_SET_STRATEGY is 'fixed'"
            )
        return resolved
