"""Deterministic L-system rewriting.

Every rule maps one symbol to a replacement word. A pass rewrites each symbol
of the current word independently, so the whole pass is a single
``str.translate`` call and the expansion is iterative in ``iterations``.
Symbols without a rule rewrite to themselves.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from canopy.generation.score import sanitize_score

AXIOM = "X"
ALPHABET = frozenset("FX+-[]")
RULE_SET_BUCKET_SIZE = 150


class UnknownRuleSetError(KeyError):
    pass


@dataclass(frozen=True)
class GrammarRuleSet:
    name: str
    rules: Mapping[str, str] = field(hash=False)
    _table: dict[int, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for symbol in self.rules:
            if not isinstance(symbol, str) or len(symbol) != 1:
                raise ValueError(
                    f"rule set {self.name!r}: rule keys must be single symbols, got {symbol!r}"
                )
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))
        object.__setattr__(self, "_table", str.maketrans(dict(self.rules)))

    def rewrite(self, word: str) -> str:
        """Apply one synchronous rewriting pass to ``word``."""

        return word.translate(self._table)

    def is_bracket_balanced(self) -> bool:
        """True when every replacement word closes the brackets it opens."""

        for replacement in self.rules.values():
            depth = 0
            for symbol in replacement:
                if symbol == "[":
                    depth += 1
                elif symbol == "]":
                    depth -= 1
                    if depth < 0:
                        return False
            if depth != 0:
                return False
        return True


def _as_rule_set(rules: GrammarRuleSet | Mapping[str, str]) -> GrammarRuleSet:
    if isinstance(rules, GrammarRuleSet):
        return rules
    return GrammarRuleSet(name="custom", rules=rules)


def expand(
    axiom: str, rules: GrammarRuleSet | Mapping[str, str], iterations: int
) -> str:
    """Rewrite ``axiom`` exactly ``iterations`` times."""

    if iterations < 0:
        raise ValueError("iterations must be >= 0")
    rule_set = _as_rule_set(rules)
    word = axiom
    for _ in range(iterations):
        word = rule_set.rewrite(word)
    return word


def expanded_length(
    axiom: str, rules: GrammarRuleSet | Mapping[str, str], iterations: int
) -> int:
    """Length of ``expand(axiom, rules, iterations)`` without building it."""

    if iterations < 0:
        raise ValueError("iterations must be >= 0")
    rule_set = _as_rule_set(rules)
    counts = Counter(axiom)
    for _ in range(iterations):
        next_counts: Counter[str] = Counter()
        for symbol, count in counts.items():
            replacement = rule_set.rules.get(symbol, symbol)
            for produced, produced_count in Counter(replacement).items():
                next_counts[produced] += produced_count * count
        counts = next_counts
    return sum(counts.values())


RULE_SETS: tuple[GrammarRuleSet, ...] = (
    GrammarRuleSet(name="bushy", rules={"X": "F[+X][-X]FX", "F": "FF"}),
    GrammarRuleSet(name="fern", rules={"X": "F-[[X]+X]+F[+FX]-X", "F": "FF"}),
    GrammarRuleSet(name="lattice", rules={"X": "F[+X]F[-X]+X", "F": "F[+F]F"}),
    GrammarRuleSet(name="spiral", rules={"X": "F[++X][--X]FX", "F": "F+F-F"}),
)


def rule_set_named(name: str) -> GrammarRuleSet:
    key = name.strip().lower()
    for rule_set in RULE_SETS:
        if rule_set.name == key:
            return rule_set
    known = ", ".join(rule_set.name for rule_set in RULE_SETS)
    raise UnknownRuleSetError(f"unknown rule set {name!r} (known: {known})")


def select_rule_set(score: float) -> GrammarRuleSet:
    """Pick the active rule set for ``score`` in buckets of 150 points."""

    index = int(sanitize_score(score) // RULE_SET_BUCKET_SIZE) % len(RULE_SETS)
    return RULE_SETS[index]
