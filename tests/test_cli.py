"""
Tests for the command-line entry point

Runs ``main(argv)`` in-process against a temporary issue file and checks
stdout JSON and exit codes.
"""

import json

import pytest

from beadgraph.adapters.inbound.cli_main import build_parser, main

from conftest import write_jsonl


ISSUES = [
    {"id": "core", "title": "Core", "priority": 0},
    {"id": "api", "title": "API", "priority": 1,
     "dependencies": [{"depends_on_id": "core", "type": "blocks"}]},
    {"id": "ui", "title": "UI",
     "dependencies": [{"depends_on_id": "core", "type": "blocks"}]},
]

CYCLIC = ISSUES + [
    {"id": "x", "dependencies": [{"depends_on_id": "y", "type": "blocks"}]},
    {"id": "y", "dependencies": [{"depends_on_id": "x", "type": "blocks"}]},
]


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Temporary project directory holding .beads/beads.jsonl."""
    monkeypatch.chdir(tmp_path)
    write_jsonl(tmp_path / ".beads" / "beads.jsonl", ISSUES)
    return tmp_path


def run_json(capsys, *argv):
    code = main(["-q", *argv])
    out = capsys.readouterr().out
    return code, json.loads(out)


class TestParser:

    def test_modes_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--robot-insights", "--robot-triage"])

    def test_save_baseline_optional_description(self):
        args = build_parser().parse_args(["--save-baseline"])
        assert args.save_baseline == ""
        args = build_parser().parse_args(["--save-baseline", "pre-release"])
        assert args.save_baseline == "pre-release"

    def test_rejects_unknown_graph_format(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--robot-graph", "--graph-format", "svg"])


class TestRobotModes:

    def test_insights(self, project, capsys):
        code, data = run_json(capsys, "--robot-insights")
        assert code == 0
        assert data["Keystones"][0] == "core"
        assert data["Cycles"] == []
        assert data["stats"]["node_count"] == 3

    def test_triage(self, project, capsys):
        code, data = run_json(capsys, "--robot-triage", "--top-k", "1")
        assert code == 0
        triage = data["triage"]
        assert triage["recommendations"][0]["id"] == "core"
        assert len(triage["quick_wins"]) == 1
        assert data["data_hash"]

    def test_graph_json(self, project, capsys):
        code, data = run_json(capsys, "--robot-graph")
        assert code == 0
        assert data["format"] == "json"
        assert data["edges"] == 2

    def test_graph_filtered_mermaid(self, project, capsys):
        code, data = run_json(
            capsys, "--robot-graph", "--graph-format", "mermaid",
            "--graph-root", "api", "--graph-depth", "1",
        )
        assert code == 0
        assert data["root"] == "api"
        assert data["nodes"] == 2
        assert data["graph"].startswith("graph TD")

    def test_explicit_beads_file(self, tmp_path, capsys):
        path = write_jsonl(tmp_path / "elsewhere.jsonl", CYCLIC)
        code, data = run_json(capsys, "--robot-insights", "--beads-file", str(path))
        assert code == 0
        assert data["Cycles"] == [["x", "y", "x"]]

    def test_missing_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        assert main(["-q", "--robot-triage"]) == 1
        assert "Error: No issue data found" in capsys.readouterr().err

    def test_human_summary(self, project, capsys):
        assert main(["-q", "--no-color"]) == 0
        assert "core" in capsys.readouterr().out


class TestBaselineAndDrift:

    def test_save_then_check_clean(self, project, capsys):
        assert main(["-q", "--no-color", "--save-baseline", "initial"]) == 0
        assert (project / ".bv" / "baseline.json").exists()
        capsys.readouterr()

        code, data = run_json(capsys, "--check-drift", "--robot-drift")
        assert code == 0
        assert data["has_drift"] is False

    def test_new_cycle_is_critical(self, project, capsys):
        assert main(["-q", "--no-color", "--save-baseline"]) == 0
        capsys.readouterr()
        write_jsonl(project / ".beads" / "beads.jsonl", CYCLIC)

        code, data = run_json(capsys, "--check-drift", "--robot-drift")
        assert code == 1
        assert data["exit_code"] == 1
        assert data["alerts"][0]["type"] == "new_cycle"

    def test_drift_without_baseline(self, project, capsys):
        assert main(["-q", "--check-drift"]) == 1
        assert "No baseline found" in capsys.readouterr().err
