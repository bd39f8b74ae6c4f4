"""
Analysis Domain Models

Consolidated data structures for graph analysis results: per-metric
computation status, the aggregate GraphStats, the Insights summary and the
triage recommendation bundle.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional

# ---------------------------------------------------------------------------
# Metric maps
# ---------------------------------------------------------------------------

#: Every metric map GraphStats carries, by attribute name.
METRIC_NAMES = (
    "pagerank",
    "betweenness",
    "eigenvector",
    "hubs",
    "authorities",
    "critical_path_score",
    "in_degree",
    "out_degree",
)


@dataclass
class MetricStatus:
    """Outcome of one algorithm run."""
    state: str = "computed"          # computed | fallback | failed | skipped
    elapsed_ms: float = 0.0
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GraphStats:
    """All metric maps plus cycles and graph-level counts for one snapshot."""
    node_count: int = 0
    edge_count: int = 0
    density: float = 0.0
    pagerank: Dict[str, float] = field(default_factory=dict)
    betweenness: Dict[str, float] = field(default_factory=dict)
    eigenvector: Dict[str, float] = field(default_factory=dict)
    hubs: Dict[str, float] = field(default_factory=dict)
    authorities: Dict[str, float] = field(default_factory=dict)
    critical_path_score: Dict[str, float] = field(default_factory=dict)
    in_degree: Dict[str, float] = field(default_factory=dict)
    out_degree: Dict[str, float] = field(default_factory=dict)
    cycles: List[List[str]] = field(default_factory=list)
    cycles_truncated: bool = False
    status: Dict[str, MetricStatus] = field(default_factory=dict)

    def metric(self, name: str) -> Dict[str, float]:
        if name not in METRIC_NAMES:
            raise KeyError(f"Unknown metric: {name}")
        return getattr(self, name)

    def get(self, name: str, node_id: str) -> float:
        return self.metric(name).get(node_id, 0.0)

    def assert_complete(self, nodes: Iterable[str]) -> None:
        """Raise AssertionError if any metric map lacks an entry for a known node."""
        for name in METRIC_NAMES:
            values = self.metric(name)
            missing = [n for n in nodes if n not in values]
            if missing:
                raise AssertionError(
                    f"Metric '{name}' is missing {len(missing)} node(s): {sorted(missing)[:5]}"
                )

    def read_only(self) -> "GraphStats":
        """Copy whose metric maps, cycles and status cannot be mutated."""
        maps = {name: MappingProxyType(dict(self.metric(name))) for name in METRIC_NAMES}
        return replace(
            self,
            cycles=tuple(tuple(c) for c in self.cycles),
            status=MappingProxyType(dict(self.status)),
            **maps,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "density": self.density,
            "cycle_count": len(self.cycles),
            "cycles_truncated": self.cycles_truncated,
        }
        for name in METRIC_NAMES:
            data[name] = dict(sorted(self.metric(name).items()))
        data["status"] = {k: v.to_dict() for k, v in sorted(self.status.items())}
        return data


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RankedItem:
    id: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value}


@dataclass
class Insights:
    """High-level summary of graph analysis."""
    bottlenecks: List[str] = field(default_factory=list)    # top betweenness
    keystones: List[str] = field(default_factory=list)      # top impact
    influencers: List[str] = field(default_factory=list)    # top eigenvector
    hubs: List[str] = field(default_factory=list)           # dependency aggregators
    authorities: List[str] = field(default_factory=list)    # prerequisite providers
    orphans: List[str] = field(default_factory=list)        # no blocking edges at all
    cycles: List[List[str]] = field(default_factory=list)
    cluster_density: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        # Capitalised keys are consumed by existing JSON clients.
        return {
            "Bottlenecks": list(self.bottlenecks),
            "Keystones": list(self.keystones),
            "Influencers": list(self.influencers),
            "Hubs": list(self.hubs),
            "Authorities": list(self.authorities),
            "Orphans": list(self.orphans),
            "Cycles": [list(c) for c in self.cycles],
            "ClusterDensity": self.cluster_density,
        }


# ---------------------------------------------------------------------------
# Triage
# ---------------------------------------------------------------------------

@dataclass
class TriageRecommendation:
    """A scored, explained recommendation for one candidate issue."""
    id: str
    title: str
    status: str
    priority: int
    score: float
    reasons: List[str] = field(default_factory=list)
    action: str = ""
    unblocks_ids: List[str] = field(default_factory=list)
    breakdown: Dict[str, float] = field(default_factory=dict)

    @property
    def primary_reason(self) -> Optional[str]:
        return self.reasons[0] if self.reasons else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "priority": self.priority,
            "score": self.score,
            "reasons": list(self.reasons),
            "action": self.action,
            "unblocks_ids": list(self.unblocks_ids),
            "breakdown": dict(self.breakdown),
        }


@dataclass
class QuickWin:
    id: str
    title: str
    score: float
    unblocks_count: int
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BlockerItem:
    id: str
    title: str
    score: float
    blocks_count: int
    unblocks_count: int
    blocks_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectHealth:
    status_counts: Dict[str, int] = field(default_factory=dict)
    actionable_count: int = 0
    blocked_count: int = 0
    cycle_count: int = 0
    density: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TriageResult:
    recommendations: List[TriageRecommendation] = field(default_factory=list)
    quick_wins: List[QuickWin] = field(default_factory=list)
    blockers_to_clear: List[BlockerItem] = field(default_factory=list)
    project_health: ProjectHealth = field(default_factory=ProjectHealth)

    def get(self, issue_id: str) -> Optional[TriageRecommendation]:
        for rec in self.recommendations:
            if rec.id == issue_id:
                return rec
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "quick_wins": [q.to_dict() for q in self.quick_wins],
            "blockers_to_clear": [b.to_dict() for b in self.blockers_to_clear],
            "project_health": self.project_health.to_dict(),
        }
