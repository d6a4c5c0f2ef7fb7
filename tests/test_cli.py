import pytest
import srsly
from typer.testing import CliRunner

from phasegen.cli import app
from phasegen.core.models import PhaseSet
from phasegen.core.tokens import SEED_RE
from phasegen.phases.phase_set import generate_phase_set_from_seed

runner = CliRunner()

SEED = "abc123-def456"


@pytest.fixture
def saved_set(tmp_path):
    path = tmp_path / "set.json"
    result = runner.invoke(app, ["generate", "--seed", SEED, "-o", str(path)])
    assert result.exit_code == 0, result.output
    return path


class TestGenerate:
    def test_seed_to_stdout(self) -> None:
        result = runner.invoke(app, ["generate", "--seed", SEED])
        assert result.exit_code == 0, result.output
        data = srsly.json_loads(result.stdout)
        assert data["id"] == SEED
        assert len(data["phases"]) == 10

    def test_writes_file(self, saved_set) -> None:
        phase_set = PhaseSet.model_validate(srsly.read_json(saved_set))
        assert phase_set.id == SEED
        assert phase_set.rerolls == {}

    def test_same_seed_same_phases(self, tmp_path) -> None:
        paths = [tmp_path / "a.json", tmp_path / "b.json"]
        for path in paths:
            runner.invoke(app, ["generate", "-s", SEED, "-o", str(path)])
        a, b = (PhaseSet.model_validate(srsly.read_json(p)) for p in paths)
        assert a.phases == b.phases

    def test_malformed_seed_generates_fresh_set(self, tmp_path) -> None:
        path = tmp_path / "set.json"
        result = runner.invoke(
            app, ["generate", "--seed", "invalid-abc123", "-o", str(path)]
        )
        assert result.exit_code == 0
        assert "Warning" in result.output
        phase_set = PhaseSet.model_validate(srsly.read_json(path))
        assert phase_set.id != "invalid-abc123"
        assert SEED_RE.match(phase_set.id)

    def test_reroll_tokens(self, tmp_path) -> None:
        path = tmp_path / "set.json"
        result = runner.invoke(
            app,
            [
                "generate",
                "--seed",
                SEED,
                "-r",
                "r5=xyz789",
                "-r",
                "r12=abc",
                "-o",
                str(path),
            ],
        )
        assert result.exit_code == 0
        assert "r12" in result.output
        phase_set = PhaseSet.model_validate(srsly.read_json(path))
        assert phase_set.rerolls == {5: "xyz789"}

    def test_reroll_without_equals_is_dropped(self, tmp_path) -> None:
        path = tmp_path / "set.json"
        result = runner.invoke(
            app,
            ["generate", "-s", SEED, "-r", "r5xyz789", "-o", str(path)],
        )
        assert result.exit_code == 0, result.output
        assert "ignoring malformed rerolls: r5xyz789" in result.output
        phase_set = PhaseSet.model_validate(srsly.read_json(path))
        assert phase_set.rerolls == {}
        assert phase_set.phases == generate_phase_set_from_seed(SEED).phases


class TestReroll:
    def test_token_reroll(self, saved_set, tmp_path) -> None:
        out = tmp_path / "out.json"
        result = runner.invoke(
            app,
            [
                "reroll",
                str(saved_set),
                "--position",
                "5",
                "--token",
                "xyz789",
                "-o",
                str(out),
            ],
        )
        assert result.exit_code == 0, result.output
        phase_set = PhaseSet.model_validate(srsly.read_json(out))
        assert phase_set.rerolls == {5: "xyz789"}
        assert phase_set.phases[4].reroll_token == "xyz789"

    def test_matches_seeded_rebuild(self, saved_set, tmp_path) -> None:
        rerolled = tmp_path / "rerolled.json"
        rebuilt = tmp_path / "rebuilt.json"
        runner.invoke(
            app,
            [
                "reroll",
                str(saved_set),
                "-p",
                "3",
                "-t",
                "qwe",
                "-o",
                str(rerolled),
            ],
        )
        runner.invoke(
            app, ["generate", "-s", SEED, "-r", "r3=qwe", "-o", str(rebuilt)]
        )
        a = PhaseSet.model_validate(srsly.read_json(rerolled))
        b = PhaseSet.model_validate(srsly.read_json(rebuilt))
        assert a.phases == b.phases

    def test_fresh_token_with_rng_seed(self, saved_set, tmp_path) -> None:
        out = tmp_path / "out.json"
        result = runner.invoke(
            app,
            [
                "reroll",
                str(saved_set),
                "-p",
                "2",
                "--rng-seed",
                "4",
                "-o",
                str(out),
            ],
        )
        assert result.exit_code == 0, result.output
        phase_set = PhaseSet.model_validate(srsly.read_json(out))
        assert list(phase_set.rerolls) == [2]

    def test_position_out_of_range(self, saved_set) -> None:
        result = runner.invoke(
            app, ["reroll", str(saved_set), "--position", "11"]
        )
        assert result.exit_code == 2

    def test_missing_file(self, tmp_path) -> None:
        result = runner.invoke(
            app, ["reroll", str(tmp_path / "nope.json"), "--position", "1"]
        )
        assert result.exit_code == 1


class TestInfo:
    def test_summary(self, saved_set) -> None:
        result = runner.invoke(app, ["info", str(saved_set)])
        assert result.exit_code == 0, result.output
        assert f"Shared Phase Set ({SEED})" in result.output
        assert "difficulty" in result.output

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{}")
        result = runner.invoke(app, ["info", str(path)])
        assert result.exit_code == 1


class TestTrace:
    def test_seeded_trace(self) -> None:
        result = runner.invoke(app, ["trace", "-p", "4", "-s", "xyz789"])
        assert result.exit_code == 0, result.output
        data = srsly.json_loads(result.stdout)
        assert data["phase"]["position"] == 4
        assert data["trace"]["position"] == 4
        steps = [step["step"] for step in data["trace"]["steps"]]
        assert steps[0] == "component_target"
        assert "sample_type" in steps

    def test_seeded_trace_is_reproducible(self) -> None:
        first = runner.invoke(app, ["trace", "-p", "9", "-s", "abc"])
        second = runner.invoke(app, ["trace", "-p", "9", "-s", "abc"])
        assert first.stdout == second.stdout

    def test_position_out_of_range(self) -> None:
        result = runner.invoke(app, ["trace", "-p", "0"])
        assert result.exit_code == 2
