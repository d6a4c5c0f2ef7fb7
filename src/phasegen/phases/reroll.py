import logging
import random
from collections.abc import Sequence

from phasegen.core.models import GenerationAxes, Phase
from phasegen.core.rng import SeededRandom
from phasegen.core.tokens import new_reroll_token
from phasegen.phases.assemble import generate_single_phase, validate_position
from phasegen.phases.duplicates import is_duplicate, vary_phase

logger = logging.getLogger(__name__)


def phase_from_token(
    position: int, token: str, axes: GenerationAxes | None = None
) -> Phase:
    """Generate the phase a reroll token stands for at ``position``."""
    phase = generate_single_phase(position, SeededRandom(token), axes=axes)
    return phase.model_copy(update={"reroll_token": token})


def reroll_phase(
    position: int,
    siblings: Sequence[Phase],
    token: str | None = None,
    rng: random.Random | None = None,
    axes: GenerationAxes | None = None,
) -> Phase:
    """Regenerate one phase position without touching its siblings.

    A supplied token is trusted as-is and reproduces the same phase on
    every call, even if it collides with a sibling. Without a token,
    fresh tokens are drawn from ``rng`` until the result is unique
    among ``siblings``; if every attempt collides the last candidate
    goes through the variation ladder.
    """
    validate_position(position)
    if axes is None:
        axes = GenerationAxes()

    if token is not None:
        return phase_from_token(position, token, axes)

    if rng is None:
        rng = random.Random()

    candidate: Phase | None = None
    for _ in range(axes.reroll_attempts):
        candidate = phase_from_token(position, new_reroll_token(rng), axes)
        if not is_duplicate(candidate, siblings):
            return candidate

    assert candidate is not None
    logger.debug(
        "Reroll of phase %d collided %d times, varying last candidate",
        position,
        axes.reroll_attempts,
    )
    return vary_phase(candidate, siblings)
