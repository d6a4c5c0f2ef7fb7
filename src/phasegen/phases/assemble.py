import logging
import math
import random
from collections.abc import Sequence

from phasegen.core.catalog import (
    TYPE_PRIORITY,
    ComponentType,
    get_component_spec,
)
from phasegen.core.difficulty import compute_difficulty
from phasegen.core.models import (
    MAX_CARDS,
    MIN_CARDS,
    PHASE_COUNT,
    GenerationAxes,
    Phase,
    PhaseComponent,
)
from phasegen.core.trace import GenerationTrace, TraceStep, trace_step
from phasegen.phases.component import sample_phase_component, size_limit

logger = logging.getLogger(__name__)

DESCRIPTION_SEPARATOR = " + "
FALLBACK_TYPE = ComponentType.RUN
FALLBACK_SIZE = 6

# (upper position, cumulative probabilities for 1 and 2 components)
_COMPONENT_COUNT_TABLE = (
    (3, (0.5, 1.0)),
    (7, (0.4, 0.85)),
    (PHASE_COUNT, (0.6, 0.9)),
)


def validate_position(position: int) -> None:
    if isinstance(position, bool) or not 1 <= position <= PHASE_COUNT:
        raise ValueError(
            f"position must be in 1..{PHASE_COUNT}, got {position!r}"
        )


def make_component(
    component_type: ComponentType, count: int, size: int
) -> PhaseComponent:
    spec = get_component_spec(component_type)
    return PhaseComponent(
        type=spec.type,
        count=count,
        size=size,
        description=spec.describe(count, size),
    )


def canonical_order(
    components: Sequence[PhaseComponent],
) -> list[PhaseComponent]:
    return sorted(
        components,
        key=lambda c: (TYPE_PRIORITY[c.type], -c.count, -c.size),
    )


def build_phase(
    position: int,
    components: Sequence[PhaseComponent],
    reroll_token: str | None = None,
) -> Phase:
    """Canonicalize, describe and score a finished component list."""
    ordered = canonical_order(components)
    return Phase(
        position=position,
        description=DESCRIPTION_SEPARATOR.join(c.description for c in ordered),
        difficulty=compute_difficulty(ordered),
        card_count=sum(c.count * c.size for c in ordered),
        components=ordered,
        reroll_token=reroll_token,
    )


def fallback_components() -> list[PhaseComponent]:
    return [make_component(FALLBACK_TYPE, 1, FALLBACK_SIZE)]


def _target_component_count(position: int, rng: random.Random) -> int:
    draw = rng.random()
    for upper, (one, two) in _COMPONENT_COUNT_TABLE:
        if position <= upper:
            if draw < one:
                return 1
            if draw < two:
                return 2
            return 3
    return 1


def _shrink_to_fit(component: PhaseComponent) -> PhaseComponent:
    spec = get_component_spec(component.type)
    count = component.count
    if count * spec.min_size > MAX_CARDS:
        count = 1
    size = max(spec.min_size, min(component.size, MAX_CARDS // count))
    return make_component(component.type, count, size)


def _expand_to_minimum(
    position: int,
    components: list[PhaseComponent],
) -> list[PhaseComponent] | None:
    total = sum(c.count * c.size for c in components)
    needed = MIN_CARDS - total
    # Matching sets get steep quickly, so grow them only as a last resort.
    order = sorted(
        range(len(components)),
        key=lambda i: components[i].type == ComponentType.MATCHING_SET,
    )
    for index in order:
        component = components[index]
        spec = get_component_spec(component.type)
        grow_by = math.ceil(needed / component.count)
        new_size = component.size + grow_by
        new_total = total + grow_by * component.count
        if (
            new_size <= size_limit(spec, position)
            and new_total <= MAX_CARDS
        ):
            expanded = list(components)
            expanded[index] = make_component(
                component.type, component.count, new_size
            )
            return expanded
    return None


def generate_single_phase(
    position: int,
    rng: random.Random,
    trace: list[TraceStep] | None = None,
    axes: GenerationAxes | None = None,
) -> Phase:
    """Assemble one phase of 1-3 components under the card budget.

    Components that would push the phase past the budget are discarded,
    except the first which is shrunk to fit. A phase left short of the
    minimum is expanded, or replaced by a plain run when no component
    has room to grow.
    """
    validate_position(position)
    if axes is None:
        axes = GenerationAxes()

    target = _target_component_count(position, rng)
    trace_step(
        trace, "component_target", f"Aim for {target} component(s)", target
    )

    components: list[PhaseComponent] = []
    total = 0
    for _ in range(axes.component_attempts):
        component = sample_phase_component(position, components, rng, trace)
        new_total = total + component.count * component.size
        if new_total <= MAX_CARDS:
            components.append(component)
            total = new_total
        elif not components:
            component = _shrink_to_fit(component)
            components.append(component)
            total = component.count * component.size
        if total >= MIN_CARDS or len(components) >= target:
            break

    if total < MIN_CARDS:
        expanded = (
            _expand_to_minimum(position, components) if components else None
        )
        if expanded is None:
            logger.debug(
                "Phase %d fell short at %d cards, using fallback run",
                position,
                total,
            )
            components = fallback_components()
            trace_step(
                trace, "recovery", "Replaced with fallback run", "fallback"
            )
        else:
            components = expanded
            trace_step(
                trace, "recovery", "Expanded a component to the minimum", "expand"
            )

    return build_phase(position, components)


def trace_single_phase(
    position: int,
    rng: random.Random,
    axes: GenerationAxes | None = None,
) -> tuple[Phase, GenerationTrace]:
    """Generate one phase and return it with its recorded sampling steps."""
    steps: list[TraceStep] = []
    phase = generate_single_phase(position, rng, trace=steps, axes=axes)
    return phase, GenerationTrace(position=position, steps=steps)
