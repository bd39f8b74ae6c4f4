"""
Graph Analyzer

Facade running every algorithm over one IssueGraph snapshot and assembling
the resulting GraphStats.

Steps:
    1. Centrality metrics (each isolated, see CentralityEngine)
    2. Impact / critical-path score
    3. Elementary cycles
    4. Graph-level counts and density

A failing algorithm is logged, marked ``failed`` in ``GraphStats.status``
and replaced with a zero-filled map; the remaining steps still run.

Usage:
    stats = GraphAnalyzer().analyze(graph)
    stats.assert_complete(graph.nodes)
"""

from __future__ import annotations

import logging
import time

from beadgraph.core.graph_builder import IssueGraph
from .centrality import CentralityEngine, run_isolated
from .constants import DEFAULT_CYCLE_LIMIT, PAGERANK_DAMPING
from .cycle_detector import CycleDetector, CycleResult
from .impact import ImpactScorer
from .insights import compute_density
from .models import GraphStats


class GraphAnalyzer:
    """Computes GraphStats for an IssueGraph."""

    def __init__(
        self,
        cycle_limit: int = DEFAULT_CYCLE_LIMIT,
        damping_factor: float = PAGERANK_DAMPING,
        include_self_loops: bool = False,
    ) -> None:
        self.centrality = CentralityEngine(damping_factor=damping_factor)
        self.impact = ImpactScorer()
        self.cycles = CycleDetector(limit=cycle_limit, include_self_loops=include_self_loops)
        self._logger = logging.getLogger(__name__)

    def analyze(self, graph: IssueGraph) -> GraphStats:
        start = time.perf_counter()
        node_count = len(graph)
        edge_count = graph.internal_edge_count
        stats = GraphStats(
            node_count=node_count,
            edge_count=edge_count,
            density=compute_density(node_count, edge_count),
        )

        self._logger.info(
            "Analyzing issue graph: %d nodes, %d edges", node_count, edge_count,
        )
        if graph.is_empty:
            return stats

        zeros = {n: 0.0 for n in graph.order}

        centrality = self.centrality.compute(graph)
        stats.pagerank = centrality.pagerank
        stats.betweenness = centrality.betweenness
        stats.eigenvector = centrality.eigenvector
        stats.hubs = centrality.hubs
        stats.authorities = centrality.authorities
        stats.in_degree = centrality.in_degree
        stats.out_degree = centrality.out_degree
        stats.status.update(centrality.status)

        stats.critical_path_score = run_isolated(
            "impact",
            lambda: (self.impact.score(graph), "computed"),
            dict(zeros),
            stats.status,
        )

        found: CycleResult = run_isolated(
            "cycles",
            lambda: (self.cycles.detect(graph), "computed"),
            CycleResult(),
            stats.status,
        )
        stats.cycles = found.cycles
        stats.cycles_truncated = found.truncated

        failed = sorted(k for k, v in stats.status.items() if v.state == "failed")
        if failed:
            self._logger.warning("Analysis finished with failed metrics: %s", ", ".join(failed))
        self._logger.info(
            "Analysis complete in %.1f ms: %d cycle(s)",
            (time.perf_counter() - start) * 1000.0, len(stats.cycles),
        )
        return stats


def analyze_graph(graph: IssueGraph, cycle_limit: int = DEFAULT_CYCLE_LIMIT) -> GraphStats:
    """Convenience function."""
    return GraphAnalyzer(cycle_limit=cycle_limit).analyze(graph)
