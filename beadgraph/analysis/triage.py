"""
Triage Engine

Blends graph metrics with issue metadata into a ranked list of work
recommendations, plus the "quick wins" and "blockers to clear" subsets and
a project health summary.

Scoring:
    Every non-closed issue is a candidate. Each signal is normalised to
    [0, 1] and weighted (TRIAGE_WEIGHTS); the score is the weighted sum
    rounded to 6 decimals. Metric signals are divided by their maximum over
    the candidates, so the best candidate on a metric gets the full weight.

    pagerank     0.22   value / max
    betweenness  0.20   value / max
    unblocks     0.18   len(unblocks) / max
    impact       0.15   critical-path score / max
    priority     0.12   (4 - clamp(priority, 0, 4)) / 4
    actionable   0.08   1 when nothing open blocks the issue
    staleness    0.05   min(days since update, 30) / 30

Reasons:
    One string per signal contributing at least REASON_THRESHOLD, largest
    contribution first, then a "Blocked by ..." note for blocked issues.

Usage:
    result = TriageEngine(top_k=5).triage(issues, stats, now=datetime.now(timezone.utc))
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from beadgraph.core.graph_builder import blocking_index
from beadgraph.core.models import Issue, IssueType, Status
from .constants import DEFAULT_TOP_K
from .models import (
    BlockerItem,
    GraphStats,
    ProjectHealth,
    QuickWin,
    TriageRecommendation,
    TriageResult,
)

logger = logging.getLogger(__name__)

TRIAGE_WEIGHTS: Dict[str, float] = {
    "pagerank": 0.22,
    "betweenness": 0.20,
    "unblocks": 0.18,
    "impact": 0.15,
    "priority": 0.12,
    "actionable": 0.08,
    "staleness": 0.05,
}

REASON_THRESHOLD = 0.02
STALENESS_CAP_DAYS = 30
QUICK_WIN_MAX_MINUTES = 60
LOWEST_PRIORITY = 4


class TriageEngine:
    """Ranks open issues by blended graph and metadata signals."""

    def __init__(self, top_k: int = DEFAULT_TOP_K) -> None:
        self.top_k = top_k

    def triage(
        self,
        issues: Sequence[Issue],
        stats: GraphStats,
        now: Optional[datetime] = None,
    ) -> TriageResult:
        now = now or datetime.now(timezone.utc)
        by_id = {i.id: i for i in issues}
        open_blockers = {i.id: self._open_blockers(i, by_id) for i in issues}
        dependents = blocking_index(issues)

        health = self._health(issues, open_blockers, stats)
        candidates = sorted((i for i in issues if not i.is_closed), key=lambda i: i.id)
        if not candidates:
            return TriageResult(project_health=health)

        unblocks: Dict[str, List[str]] = {}
        for issue in candidates:
            unblocks[issue.id] = [
                d for d in dependents.get(issue.id, [])
                if d in by_id and not by_id[d].is_closed and open_blockers[d] == [issue.id]
            ]

        max_pr = max(stats.get("pagerank", i.id) for i in candidates)
        max_bw = max(stats.get("betweenness", i.id) for i in candidates)
        max_imp = max(stats.get("critical_path_score", i.id) for i in candidates)
        max_unb = max(len(v) for v in unblocks.values())

        recommendations: List[TriageRecommendation] = []
        for issue in candidates:
            pr = stats.get("pagerank", issue.id)
            bw = stats.get("betweenness", issue.id)
            imp = stats.get("critical_path_score", issue.id)
            n_unb = len(unblocks[issue.id])
            blockers = open_blockers[issue.id]
            actionable = self._is_actionable(issue, blockers)
            days = _days_since(issue.updated_at, now)

            signals = {
                "pagerank": _ratio(pr, max_pr),
                "betweenness": _ratio(bw, max_bw),
                "unblocks": _ratio(n_unb, max_unb),
                "impact": _ratio(imp, max_imp),
                "priority": (LOWEST_PRIORITY - _clamp_priority(issue.priority)) / LOWEST_PRIORITY,
                "actionable": 1.0 if actionable else 0.0,
                "staleness": min(days, STALENESS_CAP_DAYS) / STALENESS_CAP_DAYS,
            }
            breakdown = {k: round(TRIAGE_WEIGHTS[k] * v, 6) for k, v in signals.items()}
            score = round(sum(TRIAGE_WEIGHTS[k] * v for k, v in signals.items()), 6)

            texts = {
                "pagerank": f"High PageRank importance ({pr:.4f})",
                "betweenness": f"Bottleneck on dependency paths (betweenness {bw:.1f})",
                "unblocks": f"Unblocks {n_unb} issue(s)",
                "impact": f"High downstream impact ({imp:.0f})",
                "priority": f"Priority P{_clamp_priority(issue.priority)}",
                "actionable": "Ready to start (no open blockers)",
                "staleness": f"Not updated in {int(days)} day(s)",
            }
            ranked = sorted(
                (k for k in TRIAGE_WEIGHTS if breakdown[k] >= REASON_THRESHOLD),
                key=lambda k: -breakdown[k],
            )
            reasons = [texts[k] for k in ranked]
            if blockers:
                reasons.append("Blocked by " + ", ".join(blockers))
            elif issue.status == Status.BLOCKED.value:
                reasons.append("Marked as blocked")

            recommendations.append(TriageRecommendation(
                id=issue.id,
                title=issue.title,
                status=issue.status,
                priority=issue.priority,
                score=score,
                reasons=reasons,
                action=self._action(issue, blockers, n_unb),
                unblocks_ids=list(unblocks[issue.id]),
                breakdown=breakdown,
            ))

        recommendations.sort(key=lambda r: (-r.score, r.id))
        by_rec = {r.id: r for r in recommendations}

        quick_wins = [
            QuickWin(
                id=r.id,
                title=r.title,
                score=r.score,
                unblocks_count=len(r.unblocks_ids),
                reason=f"Unblocks {len(r.unblocks_ids)} issue(s)",
            )
            for r in recommendations
            if self._is_quick_win(by_id[r.id], open_blockers[r.id], len(r.unblocks_ids))
        ]
        quick_wins.sort(key=lambda q: (-q.unblocks_count, -q.score, q.id))

        blockers_to_clear: List[BlockerItem] = []
        for issue in candidates:
            if not self._is_actionable(issue, open_blockers[issue.id]):
                continue
            blocks = [d for d in dependents.get(issue.id, []) if d in by_id and not by_id[d].is_closed]
            if not blocks:
                continue
            rec = by_rec[issue.id]
            blockers_to_clear.append(BlockerItem(
                id=issue.id,
                title=issue.title,
                score=rec.score,
                blocks_count=len(blocks),
                unblocks_count=len(rec.unblocks_ids),
                blocks_ids=blocks,
            ))
        blockers_to_clear.sort(key=lambda b: (-b.blocks_count, -b.score, b.id))

        logger.info(
            "Triage: %d candidates, %d quick wins, %d blockers to clear",
            len(recommendations), len(quick_wins), len(blockers_to_clear),
        )
        return TriageResult(
            recommendations=recommendations,
            quick_wins=quick_wins[: self.top_k],
            blockers_to_clear=blockers_to_clear[: self.top_k],
            project_health=health,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _open_blockers(issue: Issue, by_id: Dict[str, Issue]) -> List[str]:
        """Known, non-closed issues that *issue* waits on."""
        return sorted({
            d.depends_on_id for d in issue.blocking_dependencies
            if d.depends_on_id != issue.id
            and d.depends_on_id in by_id
            and not by_id[d.depends_on_id].is_closed
        })

    @staticmethod
    def _is_actionable(issue: Issue, blockers: List[str]) -> bool:
        return (
            not issue.is_closed
            and issue.status != Status.BLOCKED.value
            and not blockers
        )

    def _is_quick_win(self, issue: Issue, blockers: List[str], unblocks_count: int) -> bool:
        if not self._is_actionable(issue, blockers) or unblocks_count < 1:
            return False
        if issue.issue_type == IssueType.EPIC.value:
            return False
        return issue.estimated_minutes is None or issue.estimated_minutes <= QUICK_WIN_MAX_MINUTES

    @staticmethod
    def _action(issue: Issue, blockers: List[str], unblocks_count: int) -> str:
        if blockers:
            return "Resolve blockers first: " + ", ".join(blockers)
        if issue.status == Status.BLOCKED.value:
            return "Resolve blockers first: status is blocked"
        if unblocks_count > 0:
            return f"Complete to unblock {unblocks_count} issue(s)"
        if issue.status == Status.IN_PROGRESS.value:
            return "Continue work in progress"
        return "Start work"

    def _health(
        self,
        issues: Sequence[Issue],
        open_blockers: Dict[str, List[str]],
        stats: GraphStats,
    ) -> ProjectHealth:
        counts = Counter(i.status for i in issues)
        actionable = sum(1 for i in issues if self._is_actionable(i, open_blockers[i.id]))
        blocked = sum(
            1 for i in issues
            if not i.is_closed and (i.status == Status.BLOCKED.value or open_blockers[i.id])
        )
        return ProjectHealth(
            status_counts=dict(sorted(counts.items())),
            actionable_count=actionable,
            blocked_count=blocked,
            cycle_count=len(stats.cycles),
            density=stats.density,
        )


def _ratio(value: float, maximum: float) -> float:
    return value / maximum if maximum > 0 else 0.0


def _clamp_priority(priority: int) -> int:
    return max(0, min(LOWEST_PRIORITY, int(priority)))


def _days_since(ts: Optional[datetime], now: datetime) -> float:
    if ts is None:
        return 0.0
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return max(0.0, (now - ts).total_seconds() / 86400.0)


def compute_triage(
    issues: Sequence[Issue],
    stats: GraphStats,
    now: Optional[datetime] = None,
    top_k: int = DEFAULT_TOP_K,
) -> TriageResult:
    """Convenience function."""
    return TriageEngine(top_k=top_k).triage(issues, stats, now)
