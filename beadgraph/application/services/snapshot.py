"""
Data Snapshot

Immutable, self-contained bundle of everything a reader needs: the issues,
the graph, GraphStats, Insights, triage output, status counts and per-issue
lookup maps. A snapshot never changes after it is built, so a reader can
keep using it while the background worker builds the next one. Lookup maps
and the GraphStats metric maps are read-only proxies. Insights and
TriageResult stay plain dataclasses built per snapshot; treat them as
read-only.

Usage:
    snapshot = SnapshotBuilder(issues, top_k=5).build()
    snapshot.triage_scores["bv-3"]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from beadgraph.analysis import (
    GraphAnalyzer,
    GraphStats,
    Insights,
    InsightsAggregator,
    TriageEngine,
    TriageResult,
)
from beadgraph.analysis.constants import DEFAULT_CYCLE_LIMIT, DEFAULT_TOP_K
from beadgraph.core.graph_builder import GraphBuilder, IssueGraph
from beadgraph.core.models import Issue, Status, content_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TriageReasons:
    primary: str
    all: Tuple[str, ...]


@dataclass(frozen=True)
class DataSnapshot:
    """Read-only result of one refresh."""

    issues: Tuple[Issue, ...]
    issue_map: Mapping[str, Issue]
    graph: IssueGraph
    stats: GraphStats
    insights: Insights
    triage: TriageResult

    count_open: int = 0
    count_ready: int = 0
    count_blocked: int = 0
    count_closed: int = 0

    triage_scores: Mapping[str, float] = field(default_factory=dict)
    triage_reasons: Mapping[str, TriageReasons] = field(default_factory=dict)
    quick_win_set: FrozenSet[str] = frozenset()
    blocker_set: FrozenSet[str] = frozenset()
    unblocks_map: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    created_at: Optional[datetime] = None
    data_hash: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "data_hash": self.data_hash,
            "counts": {
                "open": self.count_open,
                "ready": self.count_ready,
                "blocked": self.count_blocked,
                "closed": self.count_closed,
            },
            "insights": self.insights.to_dict(),
            "triage": self.triage.to_dict(),
        }


class SnapshotBuilder:
    """Constructs DataSnapshots from raw issues."""

    def __init__(
        self,
        issues: Sequence[Issue],
        top_k: int = DEFAULT_TOP_K,
        cycle_limit: int = DEFAULT_CYCLE_LIMIT,
    ) -> None:
        self.issues: List[Issue] = sorted(issues, key=lambda i: i.id)
        self.top_k = top_k
        self.cycle_limit = cycle_limit
        self._stats: Optional[GraphStats] = None
        self._data_hash: Optional[str] = None

    def with_analysis(self, stats: GraphStats) -> "SnapshotBuilder":
        """Reuse pre-computed GraphStats (e.g. from a cache)."""
        self._stats = stats
        return self

    def with_data_hash(self, data_hash: str) -> "SnapshotBuilder":
        self._data_hash = data_hash
        return self

    def build(self, now: Optional[datetime] = None) -> DataSnapshot:
        now = now or datetime.now(timezone.utc)
        issues = self.issues
        issue_map = {i.id: i for i in issues}

        graph = GraphBuilder().build(issues)
        stats = self._stats
        if stats is None:
            stats = GraphAnalyzer(cycle_limit=self.cycle_limit).analyze(graph)
        stats = stats.read_only()
        insights = InsightsAggregator(top_k=self.top_k).aggregate(stats)
        triage = TriageEngine(top_k=self.top_k).triage(issues, stats, now=now)

        c_open = c_ready = c_blocked = c_closed = 0
        for issue in issues:
            if issue.is_closed:
                c_closed += 1
                continue
            c_open += 1
            if issue.status == Status.BLOCKED.value:
                c_blocked += 1
                continue
            waiting = any(
                d.depends_on_id in issue_map and not issue_map[d.depends_on_id].is_closed
                for d in issue.blocking_dependencies
                if d.depends_on_id != issue.id
            )
            if not waiting:
                c_ready += 1

        reasons = {
            r.id: TriageReasons(primary=r.reasons[0], all=tuple(r.reasons))
            for r in triage.recommendations if r.reasons
        }
        snapshot = DataSnapshot(
            issues=tuple(issues),
            issue_map=MappingProxyType(issue_map),
            graph=graph,
            stats=stats,
            insights=insights,
            triage=triage,
            count_open=c_open,
            count_ready=c_ready,
            count_blocked=c_blocked,
            count_closed=c_closed,
            triage_scores=MappingProxyType({r.id: r.score for r in triage.recommendations}),
            triage_reasons=MappingProxyType(reasons),
            quick_win_set=frozenset(q.id for q in triage.quick_wins),
            blocker_set=frozenset(b.id for b in triage.blockers_to_clear),
            unblocks_map=MappingProxyType(
                {r.id: tuple(r.unblocks_ids) for r in triage.recommendations}
            ),
            created_at=now,
            data_hash=self._data_hash if self._data_hash is not None else content_hash(issues),
        )
        logger.info(
            "Snapshot built: %d issues (%d open, %d ready, %d closed)",
            len(issues), c_open, c_ready, c_closed,
        )
        return snapshot
