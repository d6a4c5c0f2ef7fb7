import random
import re

import pytest

from phasegen.core.tokens import (
    SEED_RE,
    is_valid_reroll_token,
    is_valid_seed,
    new_reroll_token,
    new_set_id,
    parse_reroll_key,
    parse_reroll_tokens,
    parse_seed,
)


@pytest.mark.parametrize(
    ("value", "valid"),
    [
        ("1m5j9k8l-abc123", True),
        ("abcd1234-def567", True),
        ("short-abc123", True),
        ("1m5j9k8l-12ab34", True),
        ("toolong12345678-abc123", False),
        ("1m5j9k8l-short", False),
        ("1m5j9k8l-toolong123", False),
        ("no-dash", False),
        ("1m5j9k8l-ABC123", False),
        ("invalid-abc123", False),
        ("", False),
    ],
)
def test_seed_format(value: str, valid: bool) -> None:
    assert is_valid_seed(value) is valid
    assert parse_seed(value) == (value if valid else None)


def test_parse_seed_absent() -> None:
    assert parse_seed(None) is None


def test_parse_seed_strips_whitespace() -> None:
    assert parse_seed("  abc123-def456\n") == "abc123-def456"


@pytest.mark.parametrize(
    ("value", "valid"),
    [
        ("abc", True),
        ("xyz789", True),
        ("abcdefgh", True),
        ("ab", False),
        ("abcdefghi", False),
        ("ABC123", False),
        ("", False),
        (None, False),
    ],
)
def test_reroll_token_format(value: str | None, valid: bool) -> None:
    assert is_valid_reroll_token(value) is valid


def test_new_set_id_shape() -> None:
    rng = random.Random(5)
    ids = {new_set_id(rng) for _ in range(20)}
    assert len(ids) == 20
    for set_id in ids:
        assert SEED_RE.match(set_id)
        prefix, suffix = set_id.split("-")
        assert 6 <= len(prefix) <= 10
        assert len(suffix) == 6


def test_new_set_id_varies_prefix() -> None:
    rng = random.Random(9)
    prefixes = {new_set_id(rng).split("-")[0] for _ in range(20)}
    assert len(prefixes) > 1


def test_new_reroll_token_shape() -> None:
    token = new_reroll_token(random.Random(2))
    assert re.fullmatch(r"[a-z0-9]{6}", token)
    assert is_valid_reroll_token(token)


def test_new_reroll_token_reproducible_from_rng() -> None:
    assert new_reroll_token(random.Random(3)) == new_reroll_token(
        random.Random(3)
    )


@pytest.mark.parametrize(
    ("key", "position"),
    [("r1", 1), ("r10", 10), ("r0", None), ("r11", None), ("x1", None)],
)
def test_parse_reroll_key(key: str, position: int | None) -> None:
    assert parse_reroll_key(key) == position


def test_parse_reroll_tokens_drops_bad_entries() -> None:
    params = {
        "r3": "ab",
        "r10": "abcdefgh",
        "set": "abc123-def456",
        "r5": "BAD!",
        "r11": "abc",
        "r1": "abc",
    }
    assert parse_reroll_tokens(params) == {1: "abc", 10: "abcdefgh"}
    assert list(parse_reroll_tokens(params)) == [1, 10]
