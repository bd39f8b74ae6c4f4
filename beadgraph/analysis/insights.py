"""
Insights Aggregator

Stateless transform from finished metric maps to the Insights summary:
top-K issue IDs per metric family, the cycle list and graph density.

Ordering:
    Top-K lists are sorted by score descending, ties broken by issue ID
    ascending, so identical input always yields identical lists.

Usage:
    insights = InsightsAggregator(top_k=5).aggregate(stats)
"""

from __future__ import annotations

from typing import Dict, List

from .constants import DEFAULT_TOP_K
from .models import GraphStats, Insights, RankedItem


def compute_density(node_count: int, edge_count: int) -> float:
    """Directed simple-graph density; 0 when fewer than two nodes."""
    if node_count < 2:
        return 0.0
    return edge_count / (node_count * (node_count - 1))


def rank(scores: Dict[str, float], limit: int) -> List[RankedItem]:
    """Top *limit* entries of *scores* by value desc, then ID asc."""
    if limit <= 0:
        return []
    ordered = sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))
    return [RankedItem(id=k, value=v) for k, v in ordered[:limit]]


def top_keys(scores: Dict[str, float], limit: int) -> List[str]:
    return [item.id for item in rank(scores, limit)]


class InsightsAggregator:
    """Builds Insights from GraphStats."""

    def __init__(self, top_k: int = DEFAULT_TOP_K) -> None:
        self.top_k = top_k

    def aggregate(self, stats: GraphStats) -> Insights:
        k = self.top_k
        orphans = sorted(
            n for n, deg in stats.in_degree.items()
            if deg == 0 and stats.out_degree.get(n, 0.0) == 0
        )
        return Insights(
            bottlenecks=top_keys(stats.betweenness, k),
            keystones=top_keys(stats.critical_path_score, k),
            influencers=top_keys(stats.eigenvector, k),
            hubs=top_keys(stats.hubs, k),
            authorities=top_keys(stats.authorities, k),
            orphans=orphans,
            cycles=[list(c) for c in stats.cycles],
            cluster_density=compute_density(stats.node_count, stats.edge_count),
        )


def generate_insights(stats: GraphStats, top_k: int = DEFAULT_TOP_K) -> Insights:
    """Convenience function."""
    return InsightsAggregator(top_k=top_k).aggregate(stats)
