import logging
import random
from collections.abc import Mapping
from datetime import datetime, timezone

from phasegen.core.models import (
    ALGORITHM_VERSION,
    PHASE_COUNT,
    GenerationAxes,
    Phase,
    PhaseSet,
)
from phasegen.core.rng import SeededRandom
from phasegen.core.tokens import new_set_id
from phasegen.phases.assemble import generate_single_phase, validate_position
from phasegen.phases.duplicates import is_duplicate, vary_phase
from phasegen.phases.reroll import reroll_phase

logger = logging.getLogger(__name__)

SHARED_SET_NAME = "Shared Phase Set"


def _pick_phase(
    position: int,
    accepted: list[Phase],
    rng: random.Random,
    axes: GenerationAxes,
) -> Phase:
    previous = accepted[-1].difficulty if accepted else None
    best: Phase | None = None
    candidate: Phase | None = None

    for _ in range(axes.phase_attempts):
        candidate = generate_single_phase(position, rng, axes=axes)
        if is_duplicate(candidate, accepted):
            continue
        if previous is None or candidate.difficulty >= previous - 1:
            return candidate
        if best is None or candidate.difficulty > best.difficulty:
            best = candidate

    if best is not None:
        return best

    logger.debug(
        "Phase %d collided on every attempt, retrying %d more times",
        position,
        axes.collision_retries,
    )
    assert candidate is not None
    for _ in range(axes.collision_retries):
        candidate = generate_single_phase(position, rng, axes=axes)
        if not is_duplicate(candidate, accepted):
            return candidate
    return vary_phase(candidate, accepted)


def build_phases(
    rng: random.Random, axes: GenerationAxes | None = None
) -> list[Phase]:
    """Generate, sort and renumber the ten phases of a set.

    Positions are generated in order; each accepted phase is unique
    within the set. The final order is ascending difficulty with ties
    kept in acceptance order.
    """
    if axes is None:
        axes = GenerationAxes()

    accepted: list[Phase] = []
    for position in range(1, PHASE_COUNT + 1):
        accepted.append(_pick_phase(position, accepted, rng, axes))

    ordered = sorted(accepted, key=lambda phase: phase.difficulty)
    return [
        phase.model_copy(update={"position": index + 1})
        for index, phase in enumerate(ordered)
    ]


def generate_phase_set(
    rng: random.Random | None = None,
    axes: GenerationAxes | None = None,
) -> PhaseSet:
    """Generate a fresh random phase set with a new id."""
    if rng is None:
        rng = random.Random()
    set_id = new_set_id(rng)
    return PhaseSet(
        id=set_id,
        name=f"Phase Set {set_id}",
        phases=build_phases(rng, axes),
        created_at=datetime.now(timezone.utc),
        version=ALGORITHM_VERSION,
    )


def generate_phase_set_from_seed(
    seed: str,
    rerolls: Mapping[int, str] | None = None,
    axes: GenerationAxes | None = None,
) -> PhaseSet:
    """Rebuild a phase set from its seed, then replay any reroll tokens.

    The seed becomes the set id. Tokens are applied in ascending
    position order, each against the phases present at that point.
    """
    phase_set = PhaseSet(
        id=seed,
        name=SHARED_SET_NAME,
        phases=build_phases(SeededRandom(seed), axes),
        created_at=datetime.now(timezone.utc),
        version=ALGORITHM_VERSION,
    )
    for position, token in sorted((rerolls or {}).items()):
        phase_set = apply_reroll(phase_set, position, token=token, axes=axes)
    return phase_set


def apply_reroll(
    phase_set: PhaseSet,
    position: int,
    token: str | None = None,
    rng: random.Random | None = None,
    axes: GenerationAxes | None = None,
) -> PhaseSet:
    """Return a copy of ``phase_set`` with one position rerolled."""
    validate_position(position)
    siblings = [p for p in phase_set.phases if p.position != position]
    new_phase = reroll_phase(position, siblings, token=token, rng=rng, axes=axes)
    phases = [
        new_phase if p.position == position else p for p in phase_set.phases
    ]
    rerolls = {**phase_set.rerolls, position: new_phase.reroll_token}
    return phase_set.model_copy(
        update={"phases": phases, "rerolls": dict(sorted(rerolls.items()))}
    )
