from __future__ import annotations

import random

import pytest


class ScriptedRandom(random.Random):
    """Random whose ``random()`` replays a fixed list of draws."""

    def __init__(self, values: list[float]) -> None:
        self._values = list(values)
        super().__init__(0)

    def random(self) -> float:
        if not self._values:
            raise AssertionError("ScriptedRandom ran out of draws")
        return self._values.pop(0)


@pytest.fixture
def scripted_random() -> type[ScriptedRandom]:
    return ScriptedRandom


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--verification-level",
        action="store",
        default="standard",
        choices=("fast", "standard", "full"),
        help=(
            "Select test verification level: "
            "fast (skip slow+full), "
            "standard (skip full), "
            "full (run all)."
        ),
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "full: exhaustive sweeps, run with --verification-level=full"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    level = config.getoption("--verification-level")

    if level == "full":
        return

    skip_full = pytest.mark.skip(reason="requires --verification-level=full")
    skip_slow = pytest.mark.skip(reason="skipped in fast verification level")

    for item in items:
        if "full" in item.keywords:
            item.add_marker(skip_full)
            continue
        if level == "fast" and "slow" in item.keywords:
            item.add_marker(skip_slow)
