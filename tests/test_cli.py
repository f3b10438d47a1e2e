"""CLI smoke tests using click's CliRunner against a temp database."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from seminar.cli.main import cli
from seminar.config.loader import ENV_OVERRIDES


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch) -> Path:
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "seminar.yaml"
    path.write_text(yaml.dump({
        "version": 1,
        "boards": {"count": 20},
        "database": {"path": str(tmp_path / "seminar.db")},
        "output": {"report_dir": str(tmp_path / "reports")},
    }))
    return path


@pytest.fixture
def run(config_file):
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(cli, ["--config", str(config_file), *args])

    return invoke


def _last_line(result) -> str:
    return result.output.strip().splitlines()[-1].strip()


class TestTopLevel:
    def test_version(self, run):
        result = run("--version")
        assert result.exit_code == 0
        assert "seminar" in result.output

    def test_init(self, run, tmp_path):
        result = run("init")
        assert result.exit_code == 0, result.output
        assert "Schema version: 1" in result.output
        assert (tmp_path / "seminar.db").exists()
        assert (tmp_path / "reports").is_dir()

    def test_init_rerun_reports_existing_data(self, run):
        assert "(1 migration(s) applied)" in run("init").output
        run("presenter", "add", "Alice", "-c", "oral")
        result = run("init")
        assert result.exit_code == 0, result.output
        assert "(0 migration(s) applied)" in result.output
        assert "presenters: 1" in result.output

    def test_config_show(self, run):
        result = run("config", "show")
        assert result.exit_code == 0
        start = result.output.index("version:")
        assert yaml.safe_load(result.output[start:])["boards"]["count"] == 20

    def test_config_validate(self, run):
        result = run("config", "validate")
        assert result.exit_code == 0
        assert "Poster boards: 20" in result.output

    def test_config_validate_reports_schema(self, run):
        assert "not created" in run("config", "validate").output
        run("init")
        assert "(schema v1)" in run("config", "validate").output

    def test_config_init_writes_starter_file(self, tmp_path):
        target = tmp_path / "starter.yaml"
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init", str(target)])
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(target.read_text())["scoring"]["max_score"] == 10

        again = runner.invoke(cli, ["config", "init", str(target)])
        assert again.exit_code == 1
        assert "already exists" in again.output
        assert runner.invoke(cli, ["config", "init", str(target), "--force"]).exit_code == 0

    def test_config_validate_rejects_bad_file(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("scoring:\n  min_score: 9\n  max_score: 2\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "config", "validate"])
        assert result.exit_code == 1


class TestWorkflow:
    """Register, schedule, score and award through the CLI."""

    def test_end_to_end(self, run, tmp_path):
        alice = _last_line(run("presenter", "add", "Alice", "--category", "oral"))
        bob = _last_line(run("presenter", "add", "Bob", "-c", "ORAL"))
        dana = _last_line(run("presenter", "add", "Dana", "-c", "poster"))
        judge = _last_line(run("evaluator", "add", "Prof. X"))
        assert alice.startswith("P-") and judge.startswith("V-")

        session = _last_line(run("session", "create", "2026-03-14", "Hall A", "-c", "oral"))
        other = _last_line(run("session", "create", "2026-03-14", "Hall B", "-c", "oral"))
        assert session.startswith("S-")

        assert run("session", "assign-presenter", session, alice).exit_code == 0
        assert run("session", "assign-evaluator", session, judge).exit_code == 0

        clash = run("session", "assign-presenter", other, alice)
        assert clash.exit_code == 1
        assert "already assigned" in clash.output

        conflicts = run("session", "conflicts", alice, "2026-03-14")
        assert session in conflicts.output

        for presenter, value in ((alice, "9"), (bob, "7")):
            result = run(
                "evaluate", "submit", judge, presenter,
                "--clarity", value, "--methodology", value,
                "--results", value, "--presentation", value,
            )
            assert result.exit_code == 0, result.output

        assert "36.00" in run("evaluate", "average", alice).output

        assert run("vote", "cast", bob, dana).exit_code == 0
        assert run("vote", "cast", bob, alice).exit_code == 1

        agenda = run("awards", "compute", "--with-votes")
        assert agenda.exit_code == 0, agenda.output
        assert "1. Best Oral Presentation" in agenda.output
        assert f"Winner ID: {alice}" in agenda.output
        assert "People's Choice Award" in agenda.output
        assert "Best Oral Presentation" in run("awards", "list").output

        out = tmp_path / "out" / "summary.txt"
        summary = run("report", "summary", "--output", str(out))
        assert summary.exit_code == 0
        assert "Total Presenters: 3" in out.read_text()

    def test_invalid_score_reports_error(self, run):
        result = run(
            "evaluate", "submit", "V-1", "P-1",
            "--clarity", "11", "--methodology", "5", "--results", "5", "--presentation", "5",
        )
        assert result.exit_code == 1
        assert "Problem Clarity score must be between 1 and 10" in result.output

    def test_bad_date_is_usage_error(self, run):
        result = run("session", "create", "14/03/2026", "Hall A", "-c", "oral")
        assert result.exit_code == 2


class TestBoards:
    def test_assign_and_release(self, run):
        assert run("board", "assign", "B007", "P-1", "S-1").exit_code == 0

        taken = run("board", "assign", "B007", "P-2", "S-1")
        assert taken.exit_code == 1
        assert "already assigned to presenter P-1" in taken.output

        assert "19 board(s) available" in run("board", "available").output
        assert "B007" in run("board", "list").output
        assert "Released B007" in run("board", "unassign", "B007").output
        assert "was not assigned" in run("board", "unassign", "B007").output

    def test_unknown_board(self, run):
        assert run("board", "assign", "B021", "P-1", "S-1").exit_code == 1


class TestEmptyState:
    @pytest.mark.parametrize(
        "args, expected",
        [
            (("presenter", "list"), "No presenters registered."),
            (("evaluator", "list"), "No evaluators registered."),
            (("session", "list"), "No sessions scheduled."),
            (("evaluate", "list"), "No evaluations submitted."),
            (("awards", "list"), "No awards computed."),
            (("awards", "agenda"), "No awards have been determined yet."),
            (("report", "schedule"), "No sessions scheduled."),
        ],
    )
    def test_messages(self, run, args, expected):
        result = run(*args)
        assert result.exit_code == 0, result.output
        assert expected in result.output
