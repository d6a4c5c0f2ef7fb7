"""Set ids and reroll tokens exchanged with the share-link layer.

Malformed values are reported as absent (``None`` or dropped) rather
than raised, so a caller can fall back to fresh random generation.
"""

import random
import re
import string
from collections.abc import Mapping

from phasegen.core.models import PHASE_COUNT
from phasegen.core.sampling import pick

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
SET_ID_PREFIX_LENGTH = (6, 10)
SET_ID_SUFFIX_LENGTH = 6
REROLL_TOKEN_LENGTH = 6

SEED_RE = re.compile(r"^[a-z0-9]{3,12}-[a-z0-9]{6}$")
REROLL_TOKEN_RE = re.compile(r"^[a-z0-9]{3,8}$")
REROLL_KEY_RE = re.compile(r"^r(\d{1,2})$")
_REJECTED_PREFIXES = frozenset({"invalid"})


def _random_token(length: int, rng: random.Random) -> str:
    return "".join(pick(TOKEN_ALPHABET, rng) for _ in range(length))


def new_set_id(rng: random.Random | None = None) -> str:
    if rng is None:
        rng = random.Random()
    lo, hi = SET_ID_PREFIX_LENGTH
    prefix_length = lo + int(rng.random() * (hi - lo + 1))
    prefix = _random_token(prefix_length, rng)
    suffix = _random_token(SET_ID_SUFFIX_LENGTH, rng)
    return f"{prefix}-{suffix}"


def new_reroll_token(rng: random.Random | None = None) -> str:
    if rng is None:
        rng = random.Random()
    return _random_token(REROLL_TOKEN_LENGTH, rng)


def is_valid_seed(value: str | None) -> bool:
    if not value or not SEED_RE.match(value):
        return False
    return value.split("-", 1)[0] not in _REJECTED_PREFIXES


def is_valid_reroll_token(value: str | None) -> bool:
    return bool(value) and REROLL_TOKEN_RE.match(value) is not None


def parse_seed(value: str | None) -> str | None:
    """Return the seed when well formed, else None."""
    if value is None:
        return None
    value = value.strip()
    return value if is_valid_seed(value) else None


def parse_reroll_key(key: str) -> int | None:
    """Map ``r1``..``r10`` to a phase position."""
    match = REROLL_KEY_RE.match(key)
    if match is None:
        return None
    position = int(match.group(1))
    if not 1 <= position <= PHASE_COUNT:
        return None
    return position


def parse_reroll_tokens(params: Mapping[str, str]) -> dict[int, str]:
    """Collect valid ``rN=token`` pairs keyed by position.

    Unknown keys, out-of-range positions and malformed tokens are
    dropped.
    """
    tokens: dict[int, str] = {}
    for key, value in params.items():
        position = parse_reroll_key(key)
        if position is None:
            continue
        if not is_valid_reroll_token(value):
            continue
        tokens[position] = value
    return dict(sorted(tokens.items()))
