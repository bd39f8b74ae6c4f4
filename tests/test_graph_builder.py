"""
Tests for the issue model and GraphBuilder

Covers:
    - Blocking edge policy (blocks, parent-child, untyped kept; related dropped)
    - Empty input
    - Dangling targets become phantom nodes
    - Self-loops recorded and excluded
    - Deterministic construction
    - Subgraph views (root + depth)
    - Issue parsing from JSON mappings
"""

from datetime import timezone

import pytest

from beadgraph.core.graph_builder import GraphBuilder, blocking_index
from beadgraph.core.models import Dependency, Issue, is_blocking, parse_timestamp

from conftest import build, make_issue, make_issues


class TestEdgePolicy:

    def test_blocking_types_become_edges(self):
        issues = [
            make_issue("A"),
            make_issue("B", ["A"], dep_type="blocks"),
            make_issue("C", ["A"], dep_type="parent-child"),
            make_issue("D", ["A"], dep_type=""),
        ]
        graph = build(issues)
        assert sorted((e.dependent, e.target) for e in graph.edges) == [
            ("B", "A"), ("C", "A"), ("D", "A"),
        ]

    def test_informational_types_dropped(self):
        issues = [
            make_issue("A"),
            make_issue("B", ["A"], dep_type="related"),
            make_issue("C", ["A"], dep_type="discovered-from"),
        ]
        graph = build(issues)
        assert graph.edges == ()
        assert graph.nodes == frozenset({"A", "B", "C"})

    def test_is_blocking_treats_missing_type_as_blocking(self):
        assert is_blocking(None)
        assert is_blocking("")
        assert is_blocking("blocks")
        assert not is_blocking("related")

    def test_duplicate_dependencies_collapse(self):
        issue = Issue(id="B", dependencies=(
            Dependency("B", "A", "blocks"),
            Dependency("B", "A", "parent-child"),
        ))
        graph = build([make_issue("A"), issue])
        assert len(graph.edges) == 1
        assert graph.edges[0].type == "blocks"


class TestDegenerateInput:

    def test_empty_input(self):
        graph = GraphBuilder().build([])
        assert graph.is_empty
        assert len(graph) == 0
        assert graph.edges == ()
        assert graph.digraph.number_of_nodes() == 0

    def test_dangling_target_is_phantom(self, dangling_issues):
        graph = build(dangling_issues)
        assert graph.nodes == frozenset({"A", "B"})
        assert graph.dangling_targets == frozenset({"ghost"})
        assert graph.digraph.nodes["ghost"]["dangling"] is True
        assert graph.digraph.out_degree("ghost") == 0
        assert graph.internal_edge_count == 1
        assert "ghost" not in graph

    def test_self_loop_recorded_not_in_digraph(self, self_loop_issues):
        graph = build(self_loop_issues)
        assert graph.self_loops == ("A",)
        assert not graph.digraph.has_edge("A", "A")
        assert graph.internal_edge_count == 1

    def test_graph_is_frozen(self, chain_issues):
        graph = build(chain_issues)
        with pytest.raises(Exception):
            graph.digraph.add_edge("A", "C")


class TestDeterminism:

    def test_node_order_lexicographic(self):
        graph = build(make_issues({"c": [], "a": ["c"], "b": ["a"]}))
        assert graph.order == ("a", "b", "c")
        assert list(graph.digraph.nodes) == ["a", "b", "c"]

    def test_repeated_builds_identical(self, mixed_issues):
        first = build(mixed_issues)
        for _ in range(3):
            again = build(mixed_issues)
            assert again == first
            assert list(again.digraph.edges) == list(first.digraph.edges)

    def test_neighbours_sorted(self, star_issues):
        graph = build(star_issues)
        assert graph.predecessors("H") == ["L1", "L2", "L3", "L4"]
        assert graph.successors("L1") == ["H"]
        assert graph.successors("missing") == []


class TestSubgraph:

    @pytest.fixture
    def five_chain(self):
        return build(make_issues({"A": [], "B": ["A"], "C": ["B"], "D": ["C"], "E": ["D"]}))

    @pytest.mark.parametrize("depth, expected", [
        (0, {"C"}),
        (1, {"C", "B"}),
        (2, {"C", "B", "A"}),
        (3, {"C", "B", "A"}),
    ])
    def test_depth_limits(self, five_chain, depth, expected):
        view = five_chain.subgraph("C", depth)
        assert set(view.nodes) == expected

    def test_unknown_root_is_empty(self, five_chain):
        assert five_chain.subgraph("nope", 2).is_empty

    def test_edges_restricted_to_view(self, five_chain):
        view = five_chain.subgraph("C", 1)
        assert [(e.dependent, e.target) for e in view.edges] == [("C", "B")]


class TestBlockingIndex:

    def test_dependents_per_blocker(self, star_issues):
        index = blocking_index(star_issues)
        assert index == {"H": ["L1", "L2", "L3", "L4"]}

    def test_self_loop_excluded(self, self_loop_issues):
        assert blocking_index(self_loop_issues) == {"A": ["B"]}


class TestIssueParsing:

    def test_from_dict_minimal(self):
        issue = Issue.from_dict({"id": "bv-1"})
        assert issue.status == "open"
        assert issue.priority == 2
        assert issue.dependencies == ()

    def test_from_dict_full(self):
        issue = Issue.from_dict({
            "id": "bv-2",
            "title": "Parser",
            "status": "in_progress",
            "priority": 0,
            "issue_type": "bug",
            "estimated_minutes": 45,
            "updated_at": "2024-01-02T03:04:05Z",
            "labels": ["core"],
            "dependencies": [
                {"issue_id": "bv-2", "depends_on_id": "bv-1", "type": "blocks"},
                {"depends_on_id": "bv-0"},
            ],
        })
        assert issue.updated_at.tzinfo == timezone.utc
        assert issue.labels == ("core",)
        assert [d.depends_on_id for d in issue.dependencies] == ["bv-1", "bv-0"]
        assert issue.dependencies[1].issue_id == "bv-2"
        assert issue.dependencies[1].is_blocking

    def test_to_dict_round_trips_dependencies(self):
        issue = make_issue("B", ["A"])
        again = Issue.from_dict(issue.to_dict())
        assert again == issue

    def test_parse_timestamp(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        ts = parse_timestamp("2024-03-01T00:00:00+02:00")
        assert ts.utcoffset().total_seconds() == 7200
