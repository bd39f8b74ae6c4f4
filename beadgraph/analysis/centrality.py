"""
Centrality Engine

Computes per-node importance metrics over an IssueGraph using NetworkX
(and NumPy for HITS).

Metrics:
    PageRank    : damped random walk, dangling mass redistributed uniformly,
                  renormalised to sum to 1 over real issues
    Betweenness : Brandes accumulation, unnormalised pair-dependency sums
    Eigenvector : power iteration on in-edges, L2-normalised, with Katz
                  fallback; isolated issues score 0
    Hubs/Auth.  : HITS alternating power iteration, max-rescaled every round,
                  sum-normalised at the end
    Degree      : raw in/out edge counts

Edge direction is dependent -> target, so rank, eigenvector weight and
authority flow towards the issues other work waits on.

Every metric runs in isolation: a failure in one is logged, recorded as
``failed`` and replaced with a zero-filled map while the others proceed.
Phantom (dangling) targets take part in the iteration but are dropped from
the returned maps.

Usage:
    engine = CentralityEngine()
    result = engine.compute(graph)
    result.pagerank["bv-12"]
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Tuple

import networkx as nx
import numpy as np

from beadgraph.core.graph_builder import IssueGraph
from .constants import (
    EIGENVECTOR_MAX_ITER,
    EIGENVECTOR_TOL,
    HITS_MAX_ITER,
    HITS_TOL,
    KATZ_ALPHA,
    KATZ_BETA,
    PAGERANK_DAMPING,
    PAGERANK_MAX_ITER,
    PAGERANK_TOL,
)
from .models import MetricStatus

logger = logging.getLogger(__name__)

Scores = Dict[str, float]


# ---------------------------------------------------------------------------
# Isolation helper
# ---------------------------------------------------------------------------

def run_isolated(
    name: str,
    func: Callable[[], Tuple[Any, str]],
    fallback: Any,
    status: Dict[str, MetricStatus],
) -> Any:
    """
    Run *func* and record its outcome under *name* in *status*.

    *func* returns ``(result, state)``. Any exception is logged and
    *fallback* is returned with state ``failed``.
    """
    start = time.perf_counter()
    detail = ""
    try:
        result, state = func()
    except Exception as exc:
        logger.error("%s computation failed: %s", name, exc, exc_info=True)
        result, state, detail = fallback, "failed", str(exc)
    elapsed = (time.perf_counter() - start) * 1000.0
    status[name] = MetricStatus(state=state, elapsed_ms=round(elapsed, 3), detail=detail)
    logger.debug("%s: %s in %.2f ms", name, state, elapsed)
    return result


def restrict(values: Dict[Any, float], order: Iterable[str]) -> Scores:
    """Project *values* onto *order*, zero-filling missing nodes."""
    return {n: float(values.get(n, 0.0)) for n in order}


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------

@dataclass
class CentralityResult:
    pagerank: Scores = field(default_factory=dict)
    betweenness: Scores = field(default_factory=dict)
    eigenvector: Scores = field(default_factory=dict)
    hubs: Scores = field(default_factory=dict)
    authorities: Scores = field(default_factory=dict)
    in_degree: Scores = field(default_factory=dict)
    out_degree: Scores = field(default_factory=dict)
    status: Dict[str, MetricStatus] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class CentralityEngine:
    """Computes centrality metrics for an IssueGraph."""

    def __init__(
        self,
        damping_factor: float = PAGERANK_DAMPING,
        pagerank_max_iter: int = PAGERANK_MAX_ITER,
        hits_max_iter: int = HITS_MAX_ITER,
    ) -> None:
        self.damping_factor = damping_factor
        self.pagerank_max_iter = pagerank_max_iter
        self.hits_max_iter = hits_max_iter
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def compute(self, graph: IssueGraph) -> CentralityResult:
        """Compute every centrality metric; the returned maps cover exactly ``graph.nodes``."""
        result = CentralityResult()
        if graph.is_empty:
            return result

        order = graph.order
        zeros = {n: 0.0 for n in order}
        G = graph.digraph
        status = result.status

        result.pagerank = run_isolated(
            "pagerank", lambda: self._pagerank(G, order), dict(zeros), status)
        result.betweenness = run_isolated(
            "betweenness", lambda: self._betweenness(G, order), dict(zeros), status)
        result.eigenvector = run_isolated(
            "eigenvector", lambda: self._eigenvector(G, order), dict(zeros), status)
        hubs, authorities = run_isolated(
            "hits", lambda: self._hits(G, order), (dict(zeros), dict(zeros)), status)
        result.hubs, result.authorities = hubs, authorities
        in_deg, out_deg = run_isolated(
            "degree", lambda: self._degrees(G, order), (dict(zeros), dict(zeros)), status)
        result.in_degree, result.out_degree = in_deg, out_deg
        return result

    def pagerank(self, graph: IssueGraph) -> Scores:
        return self._pagerank(graph.digraph, graph.order)[0] if not graph.is_empty else {}

    def betweenness(self, graph: IssueGraph) -> Scores:
        return self._betweenness(graph.digraph, graph.order)[0] if not graph.is_empty else {}

    def eigenvector(self, graph: IssueGraph) -> Scores:
        return self._eigenvector(graph.digraph, graph.order)[0] if not graph.is_empty else {}

    def hits(self, graph: IssueGraph) -> Tuple[Scores, Scores]:
        """Return ``(hubs, authorities)``."""
        if graph.is_empty:
            return {}, {}
        return self._hits(graph.digraph, graph.order)[0]

    # ------------------------------------------------------------------
    # Algorithms
    # ------------------------------------------------------------------

    def _pagerank(self, G: nx.DiGraph, order: Tuple[str, ...]) -> Tuple[Scores, str]:
        state = "computed"
        try:
            raw = nx.pagerank(
                G,
                alpha=self.damping_factor,
                max_iter=self.pagerank_max_iter,
                tol=PAGERANK_TOL,
                weight=None,
            )
        except nx.PowerIterationFailedConvergence:
            self._logger.warning(
                "PageRank did not converge in %d iterations; using uniform scores",
                self.pagerank_max_iter,
            )
            raw = {n: 1.0 / len(order) for n in order}
            state = "fallback"

        values = restrict(raw, order)
        # Phantom targets hold part of the mass; rescale over real issues.
        total = sum(values.values())
        if total > 0:
            values = {n: v / total for n, v in values.items()}
        return values, state

    @staticmethod
    def _betweenness(G: nx.DiGraph, order: Tuple[str, ...]) -> Tuple[Scores, str]:
        raw = nx.betweenness_centrality(G, normalized=False, weight=None)
        return restrict(raw, order), "computed"

    def _eigenvector(self, G: nx.DiGraph, order: Tuple[str, ...]) -> Tuple[Scores, str]:
        raw, state = self._safe_eigenvector(G)
        values = restrict(raw, order)
        for n in order:
            if G.degree(n) == 0:
                values[n] = 0.0
        return values, state

    def _safe_eigenvector(self, G: nx.DiGraph) -> Tuple[Dict[str, float], str]:
        """
        Compute eigenvector centrality with Katz centrality fallback.

        Power iteration does not settle on DAGs, where the adjacency matrix
        is nilpotent and no dominant eigenvalue exists. Katz centrality with
        a small attenuation factor covers those graphs, so acyclic graphs go
        straight to Katz.
        """
        if nx.is_directed_acyclic_graph(G):
            self._logger.debug("Acyclic graph; using Katz centrality for eigenvector scores")
        else:
            try:
                raw = nx.eigenvector_centrality(
                    G, max_iter=EIGENVECTOR_MAX_ITER, tol=EIGENVECTOR_TOL, weight=None)
                return raw, "computed"
            except (nx.PowerIterationFailedConvergence, nx.NetworkXException):
                self._logger.warning(
                    "Eigenvector centrality did not converge; "
                    "falling back to Katz centrality"
                )
        try:
            raw = nx.katz_centrality(
                G, alpha=KATZ_ALPHA, beta=KATZ_BETA,
                max_iter=EIGENVECTOR_MAX_ITER, tol=EIGENVECTOR_TOL, weight=None,
            )
            return raw, "fallback"
        except (nx.PowerIterationFailedConvergence, nx.NetworkXException):
            self._logger.warning("Katz centrality also failed; returning zeros")
            return {n: 0.0 for n in G.nodes}, "fallback"

    def _hits(
        self, G: nx.DiGraph, order: Tuple[str, ...]
    ) -> Tuple[Tuple[Scores, Scores], str]:
        """
        HITS by explicit power iteration.

        authority = A^T . hub, hub = A . authority, each rescaled by its
        maximum every round, starting from uniform hubs. The iteration is
        deterministic and defined for any graph size; a graph without edges
        yields all zeros.
        """
        if G.number_of_edges() == 0:
            zeros = {n: 0.0 for n in order}
            return (dict(zeros), dict(zeros)), "computed"

        nodelist = list(G)
        A = nx.to_numpy_array(G, nodelist=nodelist, weight=None)
        n = len(nodelist)
        h = np.full(n, 1.0 / n)
        state = "fallback"

        for _ in range(self.hits_max_iter):
            a = A.T @ h
            a /= a.max()
            h_next = A @ a
            h_next /= h_next.max()
            err = float(np.abs(h_next - h).sum())
            h = h_next
            if err < n * HITS_TOL:
                state = "computed"
                break
        else:
            self._logger.warning(
                "HITS did not converge in %d iterations; using last iterate",
                self.hits_max_iter,
            )

        a = A.T @ h
        a /= a.sum()
        h = h / h.sum()
        hubs = dict(zip(nodelist, h.tolist()))
        authorities = dict(zip(nodelist, a.tolist()))
        return (restrict(hubs, order), restrict(authorities, order)), state

    @staticmethod
    def _degrees(G: nx.DiGraph, order: Tuple[str, ...]) -> Tuple[Tuple[Scores, Scores], str]:
        in_deg = {n: float(G.in_degree(n)) for n in order}
        out_deg = {n: float(G.out_degree(n)) for n in order}
        return (in_deg, out_deg), "computed"
