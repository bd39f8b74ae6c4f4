"""
Baseline and Drift Detection

A Baseline is a metrics snapshot taken at a known-good point (usually a
commit). DriftDetector compares the current snapshot against it and raises
alerts when the dependency structure degrades.

Rules:
    new_cycle          critical   a cycle absent from the baseline
    density_growth     warning    density grew by more than 50 %
    blocked_increase   warning    more blocked issues than before
    node_count_change  info       issue count changed

Persistence lives in the file store adapter; this module holds only the
value objects and the comparison.

Usage:
    baseline = Baseline.capture(issues, stats, health, top_k=10)
    result = DriftDetector().check(baseline, current)
    if result.has_critical: ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from beadgraph.core.models import Issue, Status
from .constants import DEFAULT_TOP_K
from .insights import rank
from .models import GraphStats, ProjectHealth, RankedItem

BASELINE_VERSION = 1
DENSITY_GROWTH_THRESHOLD = 0.5

SEVERITY_ORDER = {"critical": 0, "warning": 1, "info": 2}


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------

@dataclass
class BaselineStats:
    node_count: int = 0
    edge_count: int = 0
    density: float = 0.0
    open_count: int = 0
    closed_count: int = 0
    blocked_count: int = 0
    cycle_count: int = 0
    actionable_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaselineStats":
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)


@dataclass
class TopMetrics:
    pagerank: List[RankedItem] = field(default_factory=list)
    betweenness: List[RankedItem] = field(default_factory=list)
    critical_path: List[RankedItem] = field(default_factory=list)
    hubs: List[RankedItem] = field(default_factory=list)
    authorities: List[RankedItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            name: [item.to_dict() for item in getattr(self, name)]
            for name in self.__dataclass_fields__
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TopMetrics":
        return cls(**{
            name: [RankedItem(id=i["id"], value=float(i["value"])) for i in data.get(name) or []]
            for name in cls.__dataclass_fields__
        })


@dataclass
class Baseline:
    """Metrics snapshot used as the drift reference point."""
    version: int = BASELINE_VERSION
    created_at: str = ""
    commit_sha: str = ""
    commit_message: str = ""
    branch: str = ""
    description: str = ""
    stats: BaselineStats = field(default_factory=BaselineStats)
    top_metrics: TopMetrics = field(default_factory=TopMetrics)
    cycles: List[List[str]] = field(default_factory=list)

    @classmethod
    def capture(
        cls,
        issues: Sequence[Issue],
        stats: GraphStats,
        health: ProjectHealth,
        top_k: int = DEFAULT_TOP_K,
        description: str = "",
        git_info: Optional[Dict[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> "Baseline":
        git_info = git_info or {}
        now = now or datetime.now(timezone.utc)
        open_count = sum(1 for i in issues if not i.is_closed)
        return cls(
            created_at=now.isoformat(),
            commit_sha=git_info.get("commit_sha", ""),
            commit_message=git_info.get("commit_message", ""),
            branch=git_info.get("branch", ""),
            description=description,
            stats=BaselineStats(
                node_count=stats.node_count,
                edge_count=stats.edge_count,
                density=stats.density,
                open_count=open_count,
                closed_count=sum(1 for i in issues if i.status == Status.CLOSED.value),
                blocked_count=health.blocked_count,
                cycle_count=len(stats.cycles),
                actionable_count=health.actionable_count,
            ),
            top_metrics=TopMetrics(
                pagerank=rank(stats.pagerank, top_k),
                betweenness=rank(stats.betweenness, top_k),
                critical_path=rank(stats.critical_path_score, top_k),
                hubs=rank(stats.hubs, top_k),
                authorities=rank(stats.authorities, top_k),
            ),
            cycles=[list(c) for c in stats.cycles],
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"version": self.version, "created_at": self.created_at}
        for key in ("commit_sha", "commit_message", "branch", "description"):
            if getattr(self, key):
                data[key] = getattr(self, key)
        data["stats"] = self.stats.to_dict()
        data["top_metrics"] = self.top_metrics.to_dict()
        if self.cycles:
            data["cycles"] = [list(c) for c in self.cycles]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Baseline":
        return cls(
            version=int(data.get("version", BASELINE_VERSION)),
            created_at=data.get("created_at", ""),
            commit_sha=data.get("commit_sha", ""),
            commit_message=data.get("commit_message", ""),
            branch=data.get("branch", ""),
            description=data.get("description", ""),
            stats=BaselineStats.from_dict(data.get("stats") or {}),
            top_metrics=TopMetrics.from_dict(data.get("top_metrics") or {}),
            cycles=[list(c) for c in data.get("cycles") or []],
        )

    def summary(self) -> str:
        """Human-readable multi-line summary."""
        lines = [f"Baseline created: {self.created_at}"]
        if self.commit_sha:
            commit = f"Commit: {self.commit_sha[:8]}"
            if self.branch:
                commit += f" ({self.branch})"
            lines.append(commit)
            if self.commit_message:
                lines.append(f"Message: {self.commit_message}")
        if self.description:
            lines.append(f"Note: {self.description}")
        s = self.stats
        lines.append("")
        lines.append(f"Graph: {s.node_count} nodes, {s.edge_count} edges (density: {s.density:.4f})")
        lines.append(f"Status: {s.open_count} open, {s.blocked_count} blocked, {s.closed_count} closed")
        lines.append(f"Actionable: {s.actionable_count} | Cycles: {s.cycle_count}")
        if self.top_metrics.pagerank:
            lines.append("")
            lines.append("Top PageRank:")
            for item in self.top_metrics.pagerank[:5]:
                lines.append(f"  {item.id}: {item.value:.4f}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Drift
# ---------------------------------------------------------------------------

@dataclass
class DriftAlert:
    type: str
    severity: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "severity": self.severity, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


@dataclass
class DriftResult:
    alerts: List[DriftAlert] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return bool(self.alerts)

    @property
    def has_critical(self) -> bool:
        return any(a.severity == "critical" for a in self.alerts)

    @property
    def has_warning(self) -> bool:
        return any(a.severity == "warning" for a in self.alerts)

    @property
    def exit_code(self) -> int:
        """1 on critical drift, 2 on warnings only, 0 otherwise."""
        if self.has_critical:
            return 1
        if self.has_warning:
            return 2
        return 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_drift": self.has_drift,
            "exit_code": self.exit_code,
            "alerts": [a.to_dict() for a in self.alerts],
        }


class DriftDetector:
    """Compares a current Baseline against a saved one."""

    def __init__(self, density_growth_threshold: float = DENSITY_GROWTH_THRESHOLD) -> None:
        self.density_growth_threshold = density_growth_threshold

    def check(self, baseline: Baseline, current: Baseline) -> DriftResult:
        alerts: List[DriftAlert] = []

        known = {_cycle_key(c) for c in baseline.cycles}
        for cycle in current.cycles:
            if _cycle_key(cycle) not in known:
                alerts.append(DriftAlert(
                    type="new_cycle",
                    severity="critical",
                    message="New dependency cycle: " + " -> ".join(cycle),
                    details={"cycle": list(cycle)},
                ))

        old_d, new_d = baseline.stats.density, current.stats.density
        if old_d > 0 and (new_d - old_d) / old_d > self.density_growth_threshold:
            alerts.append(DriftAlert(
                type="density_growth",
                severity="warning",
                message=f"Graph density grew {((new_d - old_d) / old_d) * 100:.0f}% "
                        f"({old_d:.4f} -> {new_d:.4f})",
                details={"baseline": old_d, "current": new_d},
            ))

        old_b, new_b = baseline.stats.blocked_count, current.stats.blocked_count
        if new_b > old_b:
            alerts.append(DriftAlert(
                type="blocked_increase",
                severity="warning",
                message=f"Blocked issues increased from {old_b} to {new_b}",
                details={"baseline": old_b, "current": new_b},
            ))

        old_n, new_n = baseline.stats.node_count, current.stats.node_count
        if new_n != old_n:
            alerts.append(DriftAlert(
                type="node_count_change",
                severity="info",
                message=f"Issue count changed from {old_n} to {new_n}",
                details={"baseline": old_n, "current": new_n},
            ))

        alerts.sort(key=lambda a: SEVERITY_ORDER.get(a.severity, len(SEVERITY_ORDER)))
        return DriftResult(alerts=alerts)


def _cycle_key(cycle: Sequence[str]) -> tuple:
    """Rotation-independent identity of a closed cycle."""
    members = list(cycle[:-1]) if len(cycle) > 1 and cycle[0] == cycle[-1] else list(cycle)
    if not members:
        return ()
    start = members.index(min(members))
    return tuple(members[start:] + members[:start])
