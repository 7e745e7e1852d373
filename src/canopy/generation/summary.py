"""Presentation metadata that travels alongside a generated tree.

Nothing here feeds back into geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping

from canopy.generation.score import sanitize_score

UNKNOWN_LANGUAGE = "Unknown"


class TreeStage(StrEnum):
    SEED = "Seed"
    SPROUT = "Sprout"
    SAPLING = "Sapling"
    MATURE = "Mature Tree"
    ANCIENT = "Ancient Tree"


def stage_for(score: float) -> TreeStage:
    score = sanitize_score(score)
    if score == 0.0:
        return TreeStage.SEED
    if score <= 50:
        return TreeStage.SPROUT
    if score <= 200:
        return TreeStage.SAPLING
    if score <= 500:
        return TreeStage.MATURE
    return TreeStage.ANCIENT


def primary_language(language_stats: Mapping[str, float] | None) -> str:
    """Return the language with the largest share, ties broken by name."""

    if not language_stats:
        return UNKNOWN_LANGUAGE
    return min(language_stats.items(), key=lambda item: (-item[1], item[0]))[0]


@dataclass(frozen=True)
class TreeSummary:
    display_name: str
    score: float
    stage: TreeStage
    primary_language: str

    @classmethod
    def build(
        cls,
        score: float,
        *,
        display_name: str = "",
        language_stats: Mapping[str, float] | None = None,
    ) -> "TreeSummary":
        score = sanitize_score(score)
        return cls(
            display_name=display_name,
            score=score,
            stage=stage_for(score),
            primary_language=primary_language(language_stats),
        )

    def headline(self) -> str:
        name = self.display_name or "This tree"
        return f"{name}: {self.stage} ({self.score:g} points, {self.primary_language})"
