from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from phasegen.core.catalog import ComponentType

ALGORITHM_VERSION = "2.1"
PHASE_COUNT = 10
MIN_CARDS = 6
MAX_CARDS = 9

_ATTEMPT_FIELDS = (
    "component_attempts",
    "phase_attempts",
    "collision_retries",
    "reroll_attempts",
)


class PhaseComponent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: ComponentType
    count: int = Field(ge=1, description="Number of disjoint groups")
    size: int = Field(ge=1, description="Cards per group")
    description: str = Field(description="Rendered requirement text")

    @property
    def card_count(self) -> int:
        return self.count * self.size


class Phase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    position: int = Field(ge=1, le=PHASE_COUNT)
    description: str = Field(
        description="Component descriptions joined by ' + '"
    )
    difficulty: int = Field(ge=1, le=10)
    card_count: int = Field(ge=MIN_CARDS, le=MAX_CARDS)
    components: list[PhaseComponent] = Field(min_length=1, max_length=3)
    reroll_token: str | None = Field(
        default=None, description="Token the phase was rerolled from"
    )


class PhaseSet(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(description="Random set id or the caller's seed")
    name: str
    phases: list[Phase] = Field(
        min_length=PHASE_COUNT, max_length=PHASE_COUNT
    )
    created_at: datetime
    version: str = Field(default=ALGORITHM_VERSION)
    rerolls: dict[int, str] = Field(
        default_factory=dict,
        description="Position -> reroll token for explicitly rerolled slots",
    )

    @model_validator(mode="after")
    def validate_positions(self) -> "PhaseSet":
        positions = [phase.position for phase in self.phases]
        expected = list(range(1, PHASE_COUNT + 1))
        if positions != expected:
            raise ValueError(
                f"phase positions must be {expected}, got {positions}"
            )
        for position in self.rerolls:
            if not 1 <= position <= PHASE_COUNT:
                raise ValueError(
                    f"reroll position {position} outside 1..{PHASE_COUNT}"
                )
        return self


class GenerationAxes(BaseModel):
    """Retry ceilings for the bounded generate-validate-retry loops."""

    component_attempts: int = Field(default=20, ge=1)
    phase_attempts: int = Field(default=20, ge=1)
    collision_retries: int = Field(default=10, ge=0)
    reroll_attempts: int = Field(default=20, ge=1)

    @model_validator(mode="before")
    @classmethod
    def validate_input_axes(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for field_name in _ATTEMPT_FIELDS:
                if isinstance(data.get(field_name), bool):
                    raise ValueError(
                        f"{field_name}: bool is not allowed for attempt limits"
                    )
        return data
