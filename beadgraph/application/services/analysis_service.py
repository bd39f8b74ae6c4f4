"""
Analysis Service

Application service behind the CLI and the API. Loads issues through the
injected repository, builds a snapshot and exposes the read-only views:

    insights  -> Insights + summary counts
    triage    -> TriageResult
    graph     -> formatted (optionally filtered) dependency graph
    baseline  -> capture / save / drift check
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from beadgraph.analysis.constants import DEFAULT_CYCLE_LIMIT, DEFAULT_TOP_K
from beadgraph.analysis.drift import Baseline, DriftDetector, DriftResult
from beadgraph.core.interfaces import IIssueRepository
from .snapshot import DataSnapshot, SnapshotBuilder


class AnalysisService:
    """
    Orchestrates loading, analysis and output shaping.

    Follows the hexagonal architecture pattern:
    - Outbound ports: IIssueRepository (injected), baseline store and
      graph formatter (injected by the container)
    """

    def __init__(
        self,
        repository: IIssueRepository,
        top_k: int = DEFAULT_TOP_K,
        cycle_limit: int = DEFAULT_CYCLE_LIMIT,
        baseline_store: Any = None,
        git_info: Any = None,
    ) -> None:
        self._repo = repository
        self.top_k = top_k
        self.cycle_limit = cycle_limit
        self._baseline_store = baseline_store
        self._git_info = git_info
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self, now: Optional[datetime] = None) -> DataSnapshot:
        issues = self._repo.load_issues()
        self._logger.info("Analyzing %d issues", len(issues))
        return SnapshotBuilder(issues, top_k=self.top_k, cycle_limit=self.cycle_limit).build(now)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def insights(self, snapshot: Optional[DataSnapshot] = None) -> Dict[str, Any]:
        snap = snapshot or self.snapshot()
        data = snap.insights.to_dict()
        data["stats"] = {
            "node_count": snap.stats.node_count,
            "edge_count": snap.stats.edge_count,
            "cycle_count": len(snap.stats.cycles),
            "cycles_truncated": snap.stats.cycles_truncated,
            "status_counts": dict(snap.triage.project_health.status_counts),
        }
        data["status"] = {k: v.to_dict() for k, v in sorted(snap.stats.status.items())}
        return data

    def triage(self, snapshot: Optional[DataSnapshot] = None) -> Dict[str, Any]:
        snap = snapshot or self.snapshot()
        return {
            "generated_at": snap.created_at.isoformat() if snap.created_at else None,
            "data_hash": snap.data_hash,
            "triage": snap.triage.to_dict(),
        }

    def graph(
        self,
        fmt: str = "json",
        root: Optional[str] = None,
        depth: int = 1,
        snapshot: Optional[DataSnapshot] = None,
    ) -> Dict[str, Any]:
        from beadgraph.adapters.outbound.graph_formatter import GraphFormatter

        snap = snapshot or self.snapshot()
        graph = snap.graph.subgraph(root, depth) if root else snap.graph
        payload = GraphFormatter(snap.issues, snap.stats.cycles).format(graph, fmt)
        if root:
            payload["root"] = root
            payload["depth"] = depth
        return payload

    # ------------------------------------------------------------------
    # Baseline / drift
    # ------------------------------------------------------------------

    def capture_baseline(self, description: str = "",
                         snapshot: Optional[DataSnapshot] = None) -> Baseline:
        snap = snapshot or self.snapshot()
        info = self._git_info() if self._git_info else {}
        return Baseline.capture(
            snap.issues,
            snap.stats,
            snap.triage.project_health,
            top_k=self.top_k,
            description=description,
            git_info=info,
            now=snap.created_at,
        )

    def save_baseline(self, description: str = "") -> Baseline:
        baseline = self.capture_baseline(description)
        self._require_store().save(baseline)
        return baseline

    def check_drift(self) -> DriftResult:
        saved = self._require_store().load()
        current = self.capture_baseline()
        result = DriftDetector().check(saved, current)
        if result.has_drift:
            self._logger.warning("Drift detected: %d alert(s)", len(result.alerts))
        return result

    def _require_store(self):
        if self._baseline_store is None:
            raise RuntimeError("AnalysisService was created without a baseline store")
        return self._baseline_store
