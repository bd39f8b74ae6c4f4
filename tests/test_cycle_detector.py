"""
Tests for CycleDetector

Covers:
    - Two-node, three-node, disjoint and nested cycles
    - Acyclic members never reported
    - Canonical rotation and stable ordering across runs
    - Enumeration limit and truncation flag
    - Optional self-loop reporting
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from beadgraph.analysis.cycle_detector import CycleDetector, canonical_cycle, find_cycles

from conftest import build, make_issues


class TestCycleShapes:

    def test_two_node_cycle(self, two_node_cycle_issues):
        result = CycleDetector().detect(build(two_node_cycle_issues))
        assert result.cycles == [["cycle-a", "cycle-b", "cycle-a"]]
        assert not result.truncated

    def test_three_node_cycle_is_closed_walk(self, three_node_cycle_issues):
        cycles = find_cycles(build(three_node_cycle_issues))
        assert len(cycles) == 1
        assert len(cycles[0]) == 4
        assert cycles[0][0] == cycles[0][-1] == "A"

    def test_disjoint_cycles(self, disjoint_cycles_issues):
        cycles = find_cycles(build(disjoint_cycles_issues))
        assert cycles == [["P", "Q", "P"], ["X", "Y", "X"]]

    def test_nested_cycles(self, nested_cycles_issues):
        cycles = find_cycles(build(nested_cycles_issues))
        assert ["B", "C", "B"] in cycles
        assert ["A", "B", "C", "A"] in cycles
        # Shorter cycles sort first.
        assert [len(c) for c in cycles] == sorted(len(c) for c in cycles)

    def test_mixed_graph_reports_only_cycle_members(self, mixed_issues):
        result = CycleDetector().detect(build(mixed_issues))
        assert result.members == ["cyc-1", "cyc-2"]
        assert not any(n.startswith("dag-") for c in result.cycles for n in c)

    def test_acyclic_graph(self, chain_issues):
        assert find_cycles(build(chain_issues)) == []

    def test_empty_graph(self):
        assert find_cycles(build([])) == []


class TestDeterminism:

    def test_canonical_rotation(self):
        assert canonical_cycle(["c", "a", "b"]) == ["a", "b", "c", "a"]
        assert canonical_cycle([]) == []

    def test_repeated_runs_identical(self, nested_cycles_issues, disjoint_cycles_issues):
        issues = nested_cycles_issues + disjoint_cycles_issues
        first = find_cycles(build(issues))
        for _ in range(3):
            assert find_cycles(build(issues)) == first


class TestLimits:

    @pytest.fixture
    def complete_four(self):
        """Every issue depends on every other: 20 elementary cycles."""
        ids = ["a", "b", "c", "d"]
        return build(make_issues({n: [m for m in ids if m != n] for n in ids}))

    def test_limit_truncates(self, complete_four):
        result = CycleDetector(limit=3).detect(complete_four)
        assert len(result.cycles) == 3
        assert result.truncated

    def test_under_limit_not_truncated(self, complete_four):
        result = CycleDetector(limit=1000).detect(complete_four)
        assert len(result.cycles) == 20
        assert not result.truncated


class TestSelfLoops:

    def test_self_loops_ignored_by_default(self, self_loop_issues):
        assert find_cycles(build(self_loop_issues)) == []

    def test_self_loops_reported_when_enabled(self, self_loop_issues):
        result = CycleDetector(include_self_loops=True).detect(build(self_loop_issues))
        assert result.cycles == [["A", "A"]]


TRUNCATED_COMPLETE_SIX = """
import json
from beadgraph.analysis.cycle_detector import CycleDetector
from beadgraph.core.graph_builder import GraphBuilder
from beadgraph.core.models import Dependency, Issue

ids = ["n%d" % i for i in range(6)]
issues = [
    Issue(id=n, dependencies=tuple(Dependency(n, m) for m in ids if m != n))
    for n in ids
]
print(json.dumps(CycleDetector(limit=10).detect(GraphBuilder().build(issues)).cycles))
"""


class TestTruncationOrder:

    def test_truncated_prefix_is_fixed(self):
        ids = ["a", "b", "c", "d"]
        graph = build(make_issues({n: [m for m in ids if m != n] for n in ids}))
        result = CycleDetector(limit=3).detect(graph)
        assert result.cycles == [
            ["a", "b", "a"],
            ["a", "b", "c", "a"],
            ["a", "b", "c", "d", "a"],
        ]

    @pytest.mark.slow
    def test_truncated_output_independent_of_hash_seed(self):
        root = Path(__file__).parent.parent
        outputs = set()
        for seed in ("0", "1", "2", "3", "4", "5"):
            env = dict(os.environ, PYTHONHASHSEED=seed, PYTHONPATH=str(root))
            proc = subprocess.run(
                [sys.executable, "-c", TRUNCATED_COMPLETE_SIX],
                cwd=str(root), env=env, capture_output=True, text=True, check=True,
            )
            outputs.add(proc.stdout.strip())
        assert len(outputs) == 1
        assert len(json.loads(outputs.pop())) == 10
