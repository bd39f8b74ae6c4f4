"""
Tests for TriageEngine

Covers:
    - Candidate selection and score ordering
    - Reason and action texts
    - Unblocks computation (sole open blocker only)
    - Quick wins and blockers-to-clear subsets
    - Project health counts
    - Edge cases: missing targets, closed blockers, explicit blocked status
"""

from datetime import datetime, timezone

import pytest

from beadgraph.analysis.analyzer import GraphAnalyzer
from beadgraph.analysis.triage import TRIAGE_WEIGHTS, TriageEngine, compute_triage

from conftest import NOW, build, make_issue, make_issues


def triage(issues, top_k=5, now=NOW):
    stats = GraphAnalyzer().analyze(build(issues))
    return TriageEngine(top_k=top_k).triage(issues, stats, now=now)


class TestWeights:

    def test_weights_sum_to_one(self):
        assert sum(TRIAGE_WEIGHTS.values()) == pytest.approx(1.0)


class TestRecommendations:

    def test_closed_issues_excluded(self, triage_issues):
        result = triage(triage_issues)
        ids = [r.id for r in result.recommendations]
        assert "old" not in ids
        assert sorted(ids) == ["api", "core", "docs", "release", "ui", "wip"]

    def test_core_ranks_first(self, triage_issues):
        result = triage(triage_issues)
        top = result.recommendations[0]
        assert top.id == "core"
        # Best on every metric signal, P0, actionable and stale.
        assert top.score == pytest.approx(0.80)
        assert top.breakdown["betweenness"] == 0.0

    def test_scores_descending(self, triage_issues):
        scores = [r.score for r in triage(triage_issues).recommendations]
        assert scores == sorted(scores, reverse=True)

    def test_core_reasons_and_action(self, triage_issues):
        core = triage(triage_issues).get("core")
        assert core.primary_reason.startswith("High PageRank importance")
        assert "Unblocks 2 issue(s)" in core.reasons
        assert "Priority P0" in core.reasons
        assert "Ready to start (no open blockers)" in core.reasons
        assert "Not updated in 31 day(s)" in core.reasons
        assert core.action == "Complete to unblock 2 issue(s)"
        assert core.unblocks_ids == ["api", "ui"]

    def test_blocked_issue_reasons(self, triage_issues):
        api = triage(triage_issues).get("api")
        assert api.reasons[-1] == "Blocked by core"
        assert api.action == "Resolve blockers first: core"
        assert api.breakdown["actionable"] == 0.0
        assert api.breakdown["betweenness"] == pytest.approx(0.20)
        assert api.unblocks_ids == ["release"]

    def test_in_progress_action(self, triage_issues):
        assert triage(triage_issues).get("wip").action == "Continue work in progress"

    def test_idle_issue_action(self, triage_issues):
        assert triage(triage_issues).get("docs").action == "Start work"

    def test_ties_broken_by_id(self):
        result = triage(make_issues({"b": [], "a": []}))
        assert [r.id for r in result.recommendations] == ["a", "b"]
        assert result.recommendations[0].score == result.recommendations[1].score

    def test_priority_clamped(self):
        result = triage([make_issue("x", priority=9), make_issue("y", priority=-3)])
        assert result.get("x").breakdown["priority"] == 0.0
        assert result.get("y").breakdown["priority"] == pytest.approx(0.12)
        assert "Priority P0" in result.get("y").reasons

    def test_deterministic(self, triage_issues):
        first = triage(triage_issues).to_dict()
        for _ in range(3):
            assert triage(triage_issues).to_dict() == first


class TestBlockers:

    def test_missing_target_does_not_block(self, dangling_issues):
        result = triage(dangling_issues)
        b = result.get("B")
        assert b.action == "Resolve blockers first: A"
        assert not any("ghost" in r for r in b.reasons)

    def test_only_missing_target_is_actionable(self):
        result = triage([make_issue("B", ["ghost"])])
        assert "Ready to start (no open blockers)" in result.get("B").reasons

    def test_closed_blocker_releases_dependent(self):
        issues = [make_issue("A", status="closed"), make_issue("B", ["A"])]
        result = triage(issues)
        assert result.get("B").action == "Start work"
        assert result.project_health.blocked_count == 0

    def test_explicit_blocked_status(self):
        result = triage([make_issue("x", status="blocked")])
        rec = result.get("x")
        assert rec.reasons[-1] == "Marked as blocked"
        assert rec.action == "Resolve blockers first: status is blocked"
        assert result.project_health.blocked_count == 1

    def test_unblocks_requires_sole_blocker(self):
        issues = make_issues({"a": [], "b": [], "c": ["a", "b"]})
        result = triage(issues)
        assert result.get("a").unblocks_ids == []
        assert result.get("b").unblocks_ids == []


class TestSubsets:

    def test_quick_wins(self, triage_issues):
        result = triage(triage_issues)
        assert [q.id for q in result.quick_wins] == ["core"]
        assert result.quick_wins[0].unblocks_count == 2
        assert result.quick_wins[0].reason == "Unblocks 2 issue(s)"

    def test_long_estimate_and_epic_not_quick(self):
        issues = [
            make_issue("big", estimated_minutes=240),
            make_issue("epic", issue_type="epic"),
            make_issue("d1", ["big"]),
            make_issue("d2", ["epic"]),
        ]
        assert triage(issues).quick_wins == []

    def test_blockers_to_clear(self, triage_issues):
        result = triage(triage_issues)
        assert len(result.blockers_to_clear) == 1
        item = result.blockers_to_clear[0]
        assert (item.id, item.blocks_count, item.blocks_ids) == ("core", 2, ["api", "ui"])

    def test_subsets_capped_at_top_k(self):
        issues = make_issues({"a1": [], "a2": [], "a3": [], "b1": ["a1"], "b2": ["a2"], "b3": ["a3"]})
        result = triage(issues, top_k=2)
        assert len(result.quick_wins) == 2
        assert len(result.blockers_to_clear) == 2
        assert len(result.recommendations) == 6


class TestProjectHealth:

    def test_counts(self, triage_issues):
        health = triage(triage_issues).project_health
        assert health.status_counts == {"closed": 1, "in_progress": 1, "open": 5}
        assert list(health.status_counts) == ["closed", "in_progress", "open"]
        assert health.actionable_count == 3
        assert health.blocked_count == 3
        assert health.cycle_count == 0
        assert health.density == pytest.approx(3 / 42)

    def test_cycle_count(self, two_node_cycle_issues):
        health = triage(two_node_cycle_issues).project_health
        assert health.cycle_count == 1
        assert health.blocked_count == 2

    def test_all_closed(self):
        result = triage([make_issue("a", status="closed")])
        assert result.recommendations == []
        assert result.project_health.status_counts == {"closed": 1}

    def test_empty(self):
        result = compute_triage([], GraphAnalyzer().analyze(build([])))
        assert result.to_dict()["recommendations"] == []


class TestStaleness:

    def test_naive_now_treated_as_utc(self):
        issue = make_issue("x", updated_at=datetime(2024, 5, 12, tzinfo=timezone.utc))
        result = triage([issue], now=datetime(2024, 6, 1))
        assert "Not updated in 20 day(s)" in result.get("x").reasons

    def test_naive_updated_at_treated_as_utc(self):
        issues = [
            make_issue("a", updated_at=datetime(2024, 5, 1, 12, 0)),
            make_issue("b", ["a"]),
        ]
        result = triage(issues)
        assert "Not updated in 31 day(s)" in result.get("a").reasons
