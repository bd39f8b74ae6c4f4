"""
Test Configuration and Fixtures
================================

Shared pytest fixtures: issue factories for the graph topologies exercised
across the suite (chains, cycles, nested cycles, mixed cycle + DAG,
self-loops, dangling targets).

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -k "cycle"         # Only cycle tests
    pytest tests/ --quick            # Skip slow tests
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from beadgraph.core.graph_builder import GraphBuilder, IssueGraph
from beadgraph.core.models import Dependency, Issue


# =============================================================================
# Custom Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--quick",
        action="store_true",
        default=False,
        help="Skip slow tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests if --quick is specified"""
    if config.getoption("--quick"):
        skip_slow = pytest.mark.skip(reason="Skipped with --quick")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


# =============================================================================
# Factories
# =============================================================================

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_issue(issue_id: str, depends_on: Iterable[str] = (), dep_type: str = "blocks", **kwargs) -> Issue:
    """Issue with blocking dependencies on *depends_on*."""
    deps = tuple(Dependency(issue_id, target, dep_type) for target in depends_on)
    kwargs.setdefault("title", f"Issue {issue_id}")
    return Issue(id=issue_id, dependencies=deps, **kwargs)


def make_issues(spec: Dict[str, List[str]], **kwargs) -> List[Issue]:
    """``{"B": ["A"]}`` means B depends on A."""
    return [make_issue(issue_id, deps, **kwargs) for issue_id, deps in spec.items()]


def build(issues: Iterable[Issue]) -> IssueGraph:
    return GraphBuilder().build(list(issues))


def write_jsonl(path: Path, records: Iterable[dict]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's BV_* variables out of the tests."""
    for var in ("BV_BEADS_FILE", "BV_BASELINE_FILE", "BV_TOP_K", "BV_CYCLE_LIMIT", "BV_CONFIG"):
        monkeypatch.delenv(var, raising=False)


# =============================================================================
# Issue Fixtures
# =============================================================================

@pytest.fixture
def chain_issues() -> List[Issue]:
    """A <- B <- C: B depends on A, C depends on B."""
    return make_issues({"A": [], "B": ["A"], "C": ["B"]})


@pytest.fixture
def two_node_cycle_issues() -> List[Issue]:
    return make_issues({"cycle-a": ["cycle-b"], "cycle-b": ["cycle-a"]})


@pytest.fixture
def three_node_cycle_issues() -> List[Issue]:
    return make_issues({"A": ["B"], "B": ["C"], "C": ["A"]})


@pytest.fixture
def disjoint_cycles_issues() -> List[Issue]:
    """Two independent mutual dependencies: X<->Y and P<->Q."""
    return make_issues({"X": ["Y"], "Y": ["X"], "P": ["Q"], "Q": ["P"]})


@pytest.fixture
def nested_cycles_issues() -> List[Issue]:
    """A->B->C->A with an inner B<->C."""
    return make_issues({"A": ["B"], "B": ["C"], "C": ["A", "B"]})


@pytest.fixture
def mixed_issues() -> List[Issue]:
    """A cycle (cyc-1 <-> cyc-2) next to an acyclic chain dag-1 <- dag-2 <- dag-3."""
    return make_issues({
        "cyc-1": ["cyc-2"],
        "cyc-2": ["cyc-1"],
        "dag-1": [],
        "dag-2": ["dag-1"],
        "dag-3": ["dag-2"],
    })


@pytest.fixture
def self_loop_issues() -> List[Issue]:
    return make_issues({"A": ["A"], "B": ["A"]})


@pytest.fixture
def dangling_issues() -> List[Issue]:
    """B depends on A and on ghost, which is not a known issue."""
    return make_issues({"A": [], "B": ["A", "ghost"]})


@pytest.fixture
def star_issues() -> List[Issue]:
    """Hub H that four leaves depend on."""
    return make_issues({"H": [], "L1": ["H"], "L2": ["H"], "L3": ["H"], "L4": ["H"]})


@pytest.fixture
def triage_issues() -> List[Issue]:
    """
    core blocks api and ui; api blocks release; docs is independent;
    old is closed; wip is in progress.
    """
    return [
        make_issue("core", priority=0, estimated_minutes=30,
                   updated_at=datetime(2024, 5, 1, tzinfo=timezone.utc)),
        make_issue("api", ["core"], priority=1),
        make_issue("ui", ["core"], priority=2),
        make_issue("release", ["api"], priority=1, issue_type="epic"),
        make_issue("docs", priority=3, estimated_minutes=120),
        make_issue("old", status="closed", priority=2),
        make_issue("wip", status="in_progress", priority=2),
    ]


@pytest.fixture
def now() -> datetime:
    return NOW
