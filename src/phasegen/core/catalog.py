"""Static table of phase requirement types and their size bounds."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class ComponentType(str, Enum):
    # Declaration order is the canonical ordering inside a phase.
    MATCHING_SET = "matchingSet"
    RUN = "run"
    COLOR_GROUP = "colorGroup"
    PARITY_GROUP = "parityGroup"
    COLOR_RUN = "colorRun"
    COLOR_PARITY_GROUP = "colorParityGroup"


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def _describe_matching_set(count: int, size: int) -> str:
    return f"{count} {_plural(count, 'set', 'sets')} of {size}"


def _describe_run(count: int, size: int) -> str:
    return f"{count} {_plural(count, 'run', 'runs')} of {size}"


def _describe_color_group(count: int, size: int) -> str:
    if count == 1:
        return f"{size} cards of one color"
    return f"{count} groups of {size} cards of one color"


def _describe_parity_group(count: int, size: int) -> str:
    if count == 1:
        return f"{size} even or odd cards"
    return f"{count} groups of {size} even or odd cards"


def _describe_color_run(count: int, size: int) -> str:
    return f"{count} {_plural(count, 'color run', 'color runs')} of {size}"


def _describe_color_parity_group(count: int, size: int) -> str:
    if count == 1:
        return f"{size} even or odd cards of one color"
    return f"{count} groups of {size} even or odd cards of one color"


@dataclass(frozen=True)
class ComponentTypeSpec:
    """Bounds and base difficulty for one requirement type."""

    type: ComponentType
    min_size: int
    max_size: int
    base_difficulty: float
    describe: Callable[[int, int], str]


CATALOG: tuple[ComponentTypeSpec, ...] = (
    ComponentTypeSpec(
        type=ComponentType.MATCHING_SET,
        min_size=2,
        max_size=6,
        base_difficulty=1.0,
        describe=_describe_matching_set,
    ),
    ComponentTypeSpec(
        type=ComponentType.RUN,
        min_size=3,
        max_size=9,
        base_difficulty=2.0,
        describe=_describe_run,
    ),
    ComponentTypeSpec(
        type=ComponentType.COLOR_GROUP,
        min_size=4,
        max_size=9,
        base_difficulty=3.0,
        describe=_describe_color_group,
    ),
    ComponentTypeSpec(
        type=ComponentType.PARITY_GROUP,
        min_size=4,
        max_size=9,
        base_difficulty=3.5,
        describe=_describe_parity_group,
    ),
    ComponentTypeSpec(
        type=ComponentType.COLOR_RUN,
        min_size=3,
        max_size=8,
        base_difficulty=5.0,
        describe=_describe_color_run,
    ),
    ComponentTypeSpec(
        type=ComponentType.COLOR_PARITY_GROUP,
        min_size=3,
        max_size=7,
        base_difficulty=6.5,
        describe=_describe_color_parity_group,
    ),
)

_BY_TYPE = {spec.type: spec for spec in CATALOG}

TYPE_PRIORITY: dict[ComponentType, int] = {
    spec.type: index for index, spec in enumerate(CATALOG)
}


def get_component_spec(component_type: ComponentType | str) -> ComponentTypeSpec:
    try:
        return _BY_TYPE[ComponentType(component_type)]
    except ValueError as err:
        raise ValueError(
            f"Unknown component type: {component_type!r}"
        ) from err


def available_types(position: int) -> list[ComponentTypeSpec]:
    """Catalog entries unlocked at a phase position.

    Positions 1-3 use sets and runs, 4-5 add color groups, 6-7 add
    parity groups and 8+ unlock every type.
    """
    if position <= 3:
        limit = 2
    elif position <= 5:
        limit = 3
    elif position <= 7:
        limit = 4
    else:
        limit = len(CATALOG)
    return list(CATALOG[:limit])


def describe_component(
    component_type: ComponentType | str, count: int, size: int
) -> str:
    return get_component_spec(component_type).describe(count, size)
