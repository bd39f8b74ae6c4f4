"""
Impact Scorer

Blast-radius score per issue: how much work is transitively held up if the
issue slips.

    impact(v) = 1 + sum(impact(u) for every direct dependent u of v)

Issues nobody depends on score 1. Accumulation runs in topological order,
dependents before the issues they depend on.

Cycles:
    Strongly connected components are collapsed first (``nx.condensation``).
    A component's impact is its size plus the impact of every component
    depending on it, and each member receives its component's value. On
    acyclic graphs this is exactly the rule above.

Usage:
    scores = ImpactScorer().score(graph)
"""

from __future__ import annotations

import logging
from typing import Dict

import networkx as nx

from beadgraph.core.graph_builder import IssueGraph

logger = logging.getLogger(__name__)


class ImpactScorer:
    """Computes the critical-path / impact score for every issue."""

    def score(self, graph: IssueGraph) -> Dict[str, float]:
        if graph.is_empty:
            return {}

        G = graph.digraph
        C = nx.condensation(G)
        members = nx.get_node_attributes(C, "members")

        impact: Dict[int, float] = {}
        collapsed = 0
        # Condensation edges keep the dependent -> target direction, so every
        # predecessor is finalised before its target.
        for comp in nx.lexicographical_topological_sort(C, key=lambda c: min(members[c])):
            size = len(members[comp])
            if size > 1:
                collapsed += 1
            impact[comp] = float(size) + sum(impact[p] for p in C.predecessors(comp))

        if collapsed:
            logger.debug("Impact: collapsed %d cyclic component(s)", collapsed)

        mapping = C.graph["mapping"]
        return {n: impact[mapping[n]] for n in graph.order}


def impact_scores(graph: IssueGraph) -> Dict[str, float]:
    """Convenience function returning the impact map."""
    return ImpactScorer().score(graph)
