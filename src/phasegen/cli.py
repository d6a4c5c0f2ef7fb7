import logging
import random
from pathlib import Path
from typing import Annotated

import srsly
import typer
from pydantic import ValidationError

from phasegen.core.models import PHASE_COUNT, PhaseSet
from phasegen.core.rng import SeededRandom
from phasegen.core.tokens import (
    is_valid_reroll_token,
    parse_reroll_tokens,
    parse_seed,
)
from phasegen.phases.assemble import trace_single_phase
from phasegen.phases.phase_set import (
    apply_reroll,
    generate_phase_set,
    generate_phase_set_from_seed,
)

app = typer.Typer(help="Generate, reroll and inspect phase sets.")


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log fallback decisions")
    ] = False,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _split_reroll_args(values: list[str]) -> dict[str, str]:
    """Turn ``r5=token`` arguments into a key -> token mapping.

    An argument without ``=`` is kept under its own text with an empty
    token, so it is reported and dropped with the other malformed rerolls.
    """
    pairs: dict[str, str] = {}
    for value in values:
        key, _, token = value.partition("=")
        key = key.strip().lower()
        if key.isdigit():
            key = f"r{key}"
        pairs[key] = token.strip()
    return pairs


def _write_phase_set(phase_set: PhaseSet, output: Path | None) -> None:
    data = phase_set.model_dump(mode="json")
    if output is None:
        typer.echo(srsly.json_dumps(data, indent=2))
        return
    srsly.write_json(output, data)
    typer.echo(f"Wrote phase set {phase_set.id} to {output}")


def _read_phase_set(input_file: Path) -> PhaseSet:
    try:
        return PhaseSet.model_validate(srsly.read_json(input_file))
    except (OSError, ValueError, ValidationError) as err:
        typer.echo(
            f"Error: cannot load phase set from {input_file}: {err}", err=True
        )
        raise typer.Exit(1) from err


@app.command()
def generate(
    seed: Annotated[
        str | None,
        typer.Option(
            "--seed", "-s", help="Set id to rebuild, e.g. 'abc123-def456'"
        ),
    ] = None,
    reroll: Annotated[
        list[str] | None,
        typer.Option(
            "--reroll",
            "-r",
            help="Reroll token for a position, e.g. 'r5=xyz789' (repeatable)",
        ),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output JSON file")
    ] = None,
) -> None:
    """Generate a phase set, fresh or rebuilt from a seed."""
    parsed_seed = parse_seed(seed)
    if seed is not None and parsed_seed is None:
        typer.echo(
            f"Warning: ignoring malformed seed '{seed}', generating a new set",
            err=True,
        )

    raw_rerolls = _split_reroll_args(reroll or [])
    rerolls = parse_reroll_tokens(raw_rerolls)
    dropped = sorted(set(raw_rerolls) - {f"r{p}" for p in rerolls})
    if dropped:
        typer.echo(
            f"Warning: ignoring malformed rerolls: {', '.join(dropped)}",
            err=True,
        )

    if parsed_seed is None:
        if rerolls:
            typer.echo(
                "Warning: reroll tokens require --seed and were ignored",
                err=True,
            )
        phase_set = generate_phase_set()
    else:
        phase_set = generate_phase_set_from_seed(parsed_seed, rerolls=rerolls)

    _write_phase_set(phase_set, output)


@app.command(name="reroll")
def reroll_command(
    input_file: Annotated[Path, typer.Argument(help="Phase set JSON file")],
    position: Annotated[
        int,
        typer.Option(
            "--position",
            "-p",
            min=1,
            max=PHASE_COUNT,
            help="Phase position to reroll (1-10)",
        ),
    ],
    token: Annotated[
        str | None,
        typer.Option("--token", "-t", help="Reroll token to reproduce"),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--rng-seed", help="Seed for drawing a fresh token"),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output JSON file")
    ] = None,
) -> None:
    """Reroll one position of a saved phase set."""
    phase_set = _read_phase_set(input_file)
    if token is not None and not is_valid_reroll_token(token):
        typer.echo(
            f"Warning: ignoring malformed token '{token}', drawing a new one",
            err=True,
        )
        token = None

    rng = random.Random(seed) if seed is not None else None
    updated = apply_reroll(phase_set, position, token=token, rng=rng)
    _write_phase_set(updated, output)


@app.command()
def info(
    input_file: Annotated[Path, typer.Argument(help="Phase set JSON file")],
) -> None:
    """Show a summary of a saved phase set."""
    phase_set = _read_phase_set(input_file)
    typer.echo(
        f"{phase_set.name} ({phase_set.id}), version {phase_set.version}"
    )
    for phase in phase_set.phases:
        marker = ""
        if phase.reroll_token:
            marker = f"  [r{phase.position}={phase.reroll_token}]"
        typer.echo(
            f"  {phase.position:>2}. difficulty {phase.difficulty:>2}, "
            f"{phase.card_count} cards: {phase.description}{marker}"
        )


@app.command(name="trace")
def trace_command(
    position: Annotated[
        int,
        typer.Option(
            "--position",
            "-p",
            min=1,
            max=PHASE_COUNT,
            help="Phase position to generate (1-10)",
        ),
    ],
    seed: Annotated[
        str | None,
        typer.Option("--seed", "-s", help="Seed string for the phase draw"),
    ] = None,
) -> None:
    """Generate one phase and print it with its sampling steps."""
    rng = SeededRandom(seed) if seed else random.Random()
    phase, trace = trace_single_phase(position, rng)
    data = {
        "phase": phase.model_dump(mode="json"),
        "trace": trace.model_dump(mode="json"),
    }
    typer.echo(srsly.json_dumps(data, indent=2))
