from __future__ import annotations

import json
from dataclasses import asdict
from typing import Annotated, Optional

import typer

from canopy.generation.grammar import UnknownRuleSetError
from canopy.generation.pipeline import generate
from canopy.generation.summary import TreeSummary
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)


def generate_command(
    score: Annotated[float, typer.Option("--score", help="Activity score")] = 0.0,
    seed: Annotated[
        Optional[int], typer.Option("--seed", help="Seed for repeatable trees")
    ] = None,
    rule_set: Annotated[
        Optional[str], typer.Option("--rule-set", help="Force a named rule set")
    ] = None,
    name: Annotated[str, typer.Option("--name", help="Display name")] = "",
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the full geometry as JSON")
    ] = False,
) -> None:
    try:
        tree = generate(score, seed, rule_set=rule_set)
    except UnknownRuleSetError as exc:
        logger.error("%s", exc.args[0])
        raise typer.Exit(code=1)

    if as_json:
        payload = {
            "score": tree.score,
            "rule_set": tree.rule_set.name,
            "parameters": asdict(tree.parameters),
            "branches": [asdict(branch) for branch in tree.branches],
            "leaves": [asdict(leaf) for leaf in tree.leaves],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    summary = TreeSummary.build(tree.score, display_name=name)
    typer.echo(summary.headline())
    typer.echo(f"rule set: {tree.rule_set.name}")
    typer.echo(f"iterations: {tree.parameters.iteration_count}")
    typer.echo(f"branches: {len(tree.branches)} (max level {tree.max_level})")
    typer.echo(f"leaves: {len(tree.leaves)}")
