"""Phase equality and the collision-resolution ladder.

Two phases collide when they share both description and card count.
``vary_phase`` never raises: it mutates the structured components (not
the rendered text) and always ends on a phase outside ``taken``.
"""

import logging
from collections.abc import Callable, Iterable, Sequence

from phasegen.core.catalog import ComponentType, get_component_spec
from phasegen.core.models import MAX_CARDS, MIN_CARDS, Phase, PhaseComponent
from phasegen.phases.assemble import build_phase, make_component

logger = logging.getLogger(__name__)

# Single-component families cycled by the terminal fallback. Sizes 6..9
# across three families give twelve distinct phases, more than the nine
# siblings a phase can collide with.
_FALLBACK_FAMILIES = (
    ComponentType.RUN,
    ComponentType.COLOR_GROUP,
    ComponentType.PARITY_GROUP,
)


def phases_equal(a: Phase, b: Phase) -> bool:
    return a.description == b.description and a.card_count == b.card_count


def is_duplicate(candidate: Phase, others: Iterable[Phase]) -> bool:
    return any(phases_equal(candidate, other) for other in others)


def _resize_first(
    components: Sequence[PhaseComponent],
    delta: int,
    fits: Callable[[int, int, int], bool],
) -> list[PhaseComponent] | None:
    for index, component in enumerate(components):
        if component.count != 1:
            continue
        spec = get_component_spec(component.type)
        new_size = component.size + delta
        if fits(new_size, spec.min_size, spec.max_size):
            resized = list(components)
            resized[index] = make_component(component.type, 1, new_size)
            return resized
    return None


def grow_phase(phase: Phase) -> Phase | None:
    """Add one card to the first single-group component with room."""
    if phase.card_count >= MAX_CARDS:
        return None
    components = _resize_first(
        phase.components, 1, lambda size, _lo, hi: size <= hi
    )
    if components is None:
        return None
    return build_phase(phase.position, components, phase.reroll_token)


def shrink_phase(phase: Phase) -> Phase | None:
    """Remove one card from the first single-group component with room."""
    if phase.card_count <= MIN_CARDS:
        return None
    components = _resize_first(
        phase.components, -1, lambda size, lo, _hi: size >= lo
    )
    if components is None:
        return None
    return build_phase(phase.position, components, phase.reroll_token)


def fallback_candidates(position: int) -> list[list[PhaseComponent]]:
    """Synthesized single-component phases, starting at 6 + position % 4."""
    sizes = list(range(MIN_CARDS, MAX_CARDS + 1))
    start = position % len(sizes)
    rotated = sizes[start:] + sizes[:start]
    return [
        [make_component(family, 1, size)]
        for family in _FALLBACK_FAMILIES
        for size in rotated
    ]


def vary_phase(phase: Phase, taken: Sequence[Phase]) -> Phase:
    """Resolve a collision: grow, else shrink, else synthesize a fallback."""
    for step in (grow_phase, shrink_phase):
        candidate = step(phase)
        if candidate is not None and not is_duplicate(candidate, taken):
            logger.debug(
                "Varied phase %d via %s: %r",
                phase.position,
                step.__name__,
                candidate.description,
            )
            return candidate

    candidate = phase
    for components in fallback_candidates(phase.position):
        candidate = build_phase(phase.position, components, phase.reroll_token)
        if not is_duplicate(candidate, taken):
            break
    logger.debug(
        "Replaced phase %d with fallback %r",
        phase.position,
        candidate.description,
    )
    return candidate
