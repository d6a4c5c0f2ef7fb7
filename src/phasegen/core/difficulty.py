import math
from collections.abc import Sequence

from phasegen.core.catalog import ComponentType, get_component_spec
from phasegen.core.models import MIN_CARDS, PhaseComponent

MATCHING_SET_EXPONENT = 1.8
LINEAR_SIZE_WEIGHT = 0.4
EXTRA_GROUP_WEIGHT = 1.2
EXTRA_COMPONENT_WEIGHT = 1.0
EXTRA_CARD_WEIGHT = 0.3
SCALE = 0.8


def component_complexity(component: PhaseComponent) -> float:
    """Raw complexity of one requirement clause.

    Matching sets grow as (size - 2) ** 1.8 since large sets are much
    harder to collect; every other type grows linearly from its minimum.
    """
    spec = get_component_spec(component.type)
    if component.type == ComponentType.MATCHING_SET:
        size_term = (component.size - 2) ** MATCHING_SET_EXPONENT
    else:
        size_term = (component.size - spec.min_size) * LINEAR_SIZE_WEIGHT
    count_term = 0.0
    if component.count > 1:
        count_term = (component.count - 1) * EXTRA_GROUP_WEIGHT
    return spec.base_difficulty + size_term + count_term


def raw_difficulty(components: Sequence[PhaseComponent]) -> float:
    total = sum(component_complexity(c) for c in components)
    if len(components) > 1:
        total += (len(components) - 1) * EXTRA_COMPONENT_WEIGHT
    total_cards = sum(c.count * c.size for c in components)
    total += max(0.0, (total_cards - MIN_CARDS) * EXTRA_CARD_WEIGHT)
    return total


def compute_difficulty(components: Sequence[PhaseComponent]) -> int:
    """Compute difficulty score (1-10) for a phase's components."""
    scaled = raw_difficulty(components) * SCALE + 1
    clamped = max(1.0, min(10.0, scaled))
    # Half-up, not banker's rounding.
    return math.floor(clamped + 0.5)
