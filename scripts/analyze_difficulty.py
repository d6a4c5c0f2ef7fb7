#!/usr/bin/env python
"""Analyze the phase difficulty formula and its distribution.

This script outputs:
1. Contribution tables showing each component type/size -> score
2. The difficulty histogram over many seeded phase sets, per position

Usage:
    uv run python scripts/analyze_difficulty.py
    uv run python scripts/analyze_difficulty.py --sets 500
    uv run python scripts/analyze_difficulty.py --type colorRun
"""

from collections import Counter
from dataclasses import dataclass

import typer

from phasegen.core.catalog import CATALOG, ComponentType, get_component_spec
from phasegen.core.difficulty import component_complexity, compute_difficulty
from phasegen.core.models import PHASE_COUNT, PhaseComponent
from phasegen.phases.phase_set import generate_phase_set_from_seed

app = typer.Typer(help="Analyze phase difficulty scoring.")


@dataclass
class SizeContribution:
    """Score of a single-group component of one size."""

    type: str
    size: int
    complexity: float
    difficulty: int


def analyze_type(component_type: ComponentType) -> list[SizeContribution]:
    """Score every legal single-group size of a component type."""
    spec = get_component_spec(component_type)
    rows = []
    for size in range(spec.min_size, spec.max_size + 1):
        component = PhaseComponent(
            type=spec.type,
            count=1,
            size=size,
            description=spec.describe(1, size),
        )
        rows.append(
            SizeContribution(
                type=spec.type.value,
                size=size,
                complexity=component_complexity(component),
                difficulty=compute_difficulty([component]),
            )
        )
    return rows


def difficulty_histogram(n_sets: int) -> dict[int, Counter[int]]:
    """Difficulty counts per final position over ``n_sets`` seeded sets."""
    histogram: dict[int, Counter[int]] = {
        position: Counter() for position in range(1, PHASE_COUNT + 1)
    }
    for index in range(n_sets):
        phase_set = generate_phase_set_from_seed(f"analyze{index}-{index:06d}")
        for phase in phase_set.phases:
            histogram[phase.position][phase.difficulty] += 1
    return histogram


@app.command()
def main(
    sets: int = typer.Option(100, "--sets", help="Seeded sets to sample"),
    type_: str | None = typer.Option(
        None, "--type", help="Only show one component type"
    ),
) -> None:
    types = [spec.type for spec in CATALOG]
    if type_ is not None:
        try:
            types = [ComponentType(type_)]
        except ValueError as err:
            raise typer.BadParameter(f"Unknown component type: {type_}") from err

    typer.echo("Single-group contributions")
    for component_type in types:
        typer.echo(f"  {component_type.value}")
        for row in analyze_type(component_type):
            typer.echo(
                f"    size {row.size}: complexity {row.complexity:6.2f}"
                f" -> difficulty {row.difficulty}"
            )

    typer.echo(f"\nDifficulty by position over {sets} seeded sets")
    for position, counts in difficulty_histogram(sets).items():
        cells = " ".join(f"{d}:{counts[d]}" for d in sorted(counts))
        typer.echo(f"  {position:>2}: {cells}")


if __name__ == "__main__":
    app()
