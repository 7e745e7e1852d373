from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random

from canopy.generation.geometry import SurfaceSize
from canopy.generation.grammar import (AXIOM, GrammarRuleSet, expand,
                                       expanded_length, rule_set_named,
                                       select_rule_set)
from canopy.generation.parameters import GenerationParameters, map_score
from canopy.generation.score import sanitize_score
from canopy.generation.turtle import (Branch, JitterBands, LeafSite,
                                      interpret, scatter_leaves)
from canopy.utilities.env import Configuration, RuleSetStrategy
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeneratedTree:
    score: float
    parameters: GenerationParameters
    rule_set: GrammarRuleSet
    branches: tuple[Branch, ...]
    leaves: tuple[LeafSite, ...]

    @property
    def max_level(self) -> int:
        return max((branch.level for branch in self.branches), default=0)


def default_surface() -> SurfaceSize:
    return SurfaceSize(
        width=float(Configuration.surface_width()),
        height=float(Configuration.surface_height()),
    )


def resolve_rule_set(score: float, rule_set: GrammarRuleSet | str | None) -> GrammarRuleSet:
    if isinstance(rule_set, GrammarRuleSet):
        return rule_set
    if rule_set is not None:
        return rule_set_named(rule_set)
    if Configuration.rule_set_strategy() is RuleSetStrategy.FIXED:
        # rule_set_strategy() guarantees a name is configured
        return rule_set_named(Configuration.rule_set_name() or "")
    return select_rule_set(score)


def generate(
    score: float,
    rng_seed: int | None = None,
    *,
    surface: SurfaceSize | None = None,
    rule_set: GrammarRuleSet | str | None = None,
    jitter: JitterBands | None = None,
) -> GeneratedTree:
    """Grow the full tree geometry for ``score``.

    The result depends only on the arguments (and the environment
    configuration); pass ``rng_seed`` for a reproducible tree.
    """

    score = sanitize_score(score)
    surface = surface or default_surface()
    rng = Random(rng_seed)
    params = map_score(score, size_scale=surface.size_scale)
    active = resolve_rule_set(score, rule_set)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Growing score=%s with rule set %s for %s iterations (%s symbols).",
            score,
            active.name,
            params.iteration_count,
            expanded_length(AXIOM, active, params.iteration_count),
        )
    word = expand(AXIOM, active, params.iteration_count)
    branches, leaves = interpret(word, params, rng, surface=surface, jitter=jitter)
    leaves = scatter_leaves(branches, leaves, params, rng, jitter=jitter)
    logger.debug(
        "Generated %s branches and %s leaves.", len(branches), len(leaves)
    )

    return GeneratedTree(
        score=score,
        parameters=params,
        rule_set=active,
        branches=branches,
        leaves=leaves,
    )
