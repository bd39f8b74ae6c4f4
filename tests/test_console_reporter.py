"""
Tests for ConsoleReporter output
"""

from beadgraph.adapters.outbound.console_reporter import Colors, ConsoleReporter
from beadgraph.analysis.drift import DriftAlert, DriftResult
from beadgraph.analysis.models import TriageResult
from beadgraph.application.services.snapshot import SnapshotBuilder

from conftest import NOW


class TestConsoleReporter:

    def test_summary_without_color(self, triage_issues, capsys):
        snap = SnapshotBuilder(triage_issues).build(now=NOW)
        ConsoleReporter(use_color=False).summary(snap.stats, snap.insights, snap.triage)
        out = capsys.readouterr().out
        assert "Issues: 7   Edges: 3" in out
        assert "No dependency cycles" in out
        assert "Quick wins: core" in out
        assert Colors.RESET not in out

    def test_cycles_listed(self, two_node_cycle_issues, capsys):
        snap = SnapshotBuilder(two_node_cycle_issues).build(now=NOW)
        ConsoleReporter(use_color=False).summary(snap.stats, snap.insights, snap.triage)
        assert "cycle-a -> cycle-b -> cycle-a" in capsys.readouterr().out

    def test_empty_triage(self, capsys):
        ConsoleReporter(use_color=False).triage(TriageResult())
        assert "no open issues" in capsys.readouterr().out

    def test_drift_alerts(self, capsys):
        result = DriftResult(alerts=[DriftAlert("new_cycle", "critical", "New dependency cycle: a -> b -> a")])
        ConsoleReporter(use_color=True).drift(result)
        out = capsys.readouterr().out
        assert "[CRITICAL]" in out
        assert Colors.RED in out

    def test_table_skips_empty(self, capsys):
        ConsoleReporter().table(["a"], [])
        assert capsys.readouterr().out == ""
