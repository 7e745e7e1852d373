from enum import StrEnum


class RuleSetStrategy(StrEnum):
    SCORE = "score"
    FIXED = "fixed"
