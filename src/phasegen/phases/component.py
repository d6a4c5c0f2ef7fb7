import random
from collections.abc import Sequence

from phasegen.core.catalog import (
    ComponentType,
    ComponentTypeSpec,
    available_types,
)
from phasegen.core.models import MAX_CARDS, PhaseComponent
from phasegen.core.sampling import chance, pick, weighted_random
from phasegen.core.trace import TraceStep, trace_step

MIN_REMAINING_CARDS = 2
COMPLEX_BIAS = 0.6
PAIR_CHANCE = 0.4
MAX_COUNT = 2


def remaining_cards(existing: Sequence[PhaseComponent]) -> int:
    used = sum(c.count * c.size for c in existing)
    return max(MIN_REMAINING_CARDS, MAX_CARDS - used)


def _candidate_types(
    position: int,
    existing: Sequence[PhaseComponent],
    rng: random.Random,
) -> list[ComponentTypeSpec]:
    candidates = available_types(position)

    if position <= 5 and len(candidates) > 1:
        used = {c.type for c in existing}
        unused = [spec for spec in candidates if spec.type not in used]
        if unused:
            candidates = unused

    if position >= 8 and len(candidates) > 3 and chance(COMPLEX_BIAS, rng):
        candidates = candidates[2:]

    return candidates


def size_limit(spec: ComponentTypeSpec, position: int) -> int:
    """Largest group size allowed for a type at a phase position."""
    if spec.type == ComponentType.MATCHING_SET:
        if position <= 3:
            return min(spec.max_size, 3)
        if position <= 6:
            return min(spec.max_size, 4)
    elif spec.type == ComponentType.RUN and position <= 3:
        return min(spec.max_size, 7)
    return spec.max_size


def _size_cap(spec: ComponentTypeSpec, position: int, remaining: int) -> int:
    return max(spec.min_size, min(size_limit(spec, position), remaining))


def _sample_count(
    spec: ComponentTypeSpec,
    size: int,
    position: int,
    remaining: int,
    rng: random.Random,
) -> int:
    if spec.type == ComponentType.MATCHING_SET and size >= 4:
        return 1
    if size * 2 <= remaining and (position <= 5 or size <= 3):
        return 2 if chance(PAIR_CHANCE, rng) else 1
    max_count = max(1, min(MAX_COUNT, remaining // size))
    return weighted_random(1, max_count, position, rng)


def sample_phase_component(
    position: int,
    existing: Sequence[PhaseComponent],
    rng: random.Random,
    trace: list[TraceStep] | None = None,
) -> PhaseComponent:
    """Sample one requirement clause for a phase.

    Types unlock with position, earlier phases prefer types not already
    used in the phase, and late phases lean toward the combined
    color/parity types. Size and count respect the remaining card
    budget; the size is clamped to the catalog bounds as a last step.
    """
    remaining = remaining_cards(existing)
    candidates = _candidate_types(position, existing, rng)
    spec = pick(candidates, rng)
    trace_step(
        trace,
        "sample_type",
        f"Component type: {spec.type.value}",
        spec.type.value,
    )

    size = weighted_random(
        spec.min_size, _size_cap(spec, position, remaining), position, rng
    )
    count = _sample_count(spec, size, position, remaining, rng)
    size = max(spec.min_size, min(size, remaining, spec.max_size))
    trace_step(
        trace,
        "sample_shape",
        f"{count} group(s) of {size} with {remaining} cards remaining",
        {"count": count, "size": size, "remaining": remaining},
    )

    return PhaseComponent(
        type=spec.type,
        count=count,
        size=size,
        description=spec.describe(count, size),
    )
