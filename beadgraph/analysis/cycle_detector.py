"""
Cycle Detector

Enumerates elementary directed cycles in the issue dependency graph with
Johnson's blocking search over networkx strongly connected components.

Output format:
    Each cycle is a closed walk ``[a, b, ..., a]`` whose length is the
    number of distinct members + 1.

Determinism:
    networkx's ``simple_cycles`` picks start nodes by iterating component
    sets, so a truncated run would keep a hash-seed dependent subset. The
    search here walks strongly connected components by smallest member,
    starts each at that member and visits successors in sorted order, so the
    first ``limit`` cycles are the same in every process. Each cycle is then
    rotated to its smallest member and the list sorted by (length, members).

Limits:
    Enumeration stops after ``limit`` cycles; ``truncated`` is set when that
    happens. Worst-case exponential blowup on dense cyclic graphs is a known
    limitation of elementary-cycle enumeration.

Self-loops:
    The analysis DiGraph carries no self-edges. With
    ``include_self_loops=True`` the recorded self-loops are reported as
    ``[x, x]``.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Set

import networkx as nx

from beadgraph.core.graph_builder import IssueGraph
from .constants import DEFAULT_CYCLE_LIMIT

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    cycles: List[List[str]] = field(default_factory=list)
    truncated: bool = False

    @property
    def members(self) -> List[str]:
        """Sorted IDs of every node that participates in some cycle."""
        return sorted({n for c in self.cycles for n in c})


def canonical_cycle(cycle: Sequence[str]) -> List[str]:
    """Rotate an open cycle to start at its smallest member and close it."""
    if not cycle:
        return []
    start = min(range(len(cycle)), key=lambda i: cycle[i])
    rotated = list(cycle[start:]) + list(cycle[:start])
    return rotated + [rotated[0]]


def _cyclic_components(G: nx.DiGraph) -> List[List[str]]:
    return [sorted(c) for c in nx.strongly_connected_components(G) if len(c) > 1]


def _unblock(node: str, blocked: Set[str], B: Dict[str, Set[str]]) -> None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current in blocked:
            blocked.discard(current)
            stack.extend(sorted(B[current]))
            B[current].clear()


def ordered_simple_cycles(G: nx.DiGraph) -> Iterator[List[str]]:
    """
    Yield elementary cycles (open, starting at their smallest member) in a
    fixed order: components by smallest member, successors ascending.
    """
    heap = [(c[0], c) for c in _cyclic_components(G)]
    heapq.heapify(heap)
    while heap:
        start, members = heapq.heappop(heap)
        component = G.subgraph(members)
        succ = {n: sorted(component.successors(n), reverse=True) for n in members}

        path = [start]
        blocked = {start}
        closed: Set[str] = set()
        B: Dict[str, Set[str]] = defaultdict(set)
        stack = [(start, list(succ[start]))]
        while stack:
            node, nbrs = stack[-1]
            if nbrs:
                nxt = nbrs.pop()
                if nxt == start:
                    yield list(path)
                    closed.update(path)
                elif nxt not in blocked:
                    path.append(nxt)
                    stack.append((nxt, list(succ[nxt])))
                    closed.discard(nxt)
                    blocked.add(nxt)
                    continue
            if not nbrs:
                if node in closed:
                    _unblock(node, blocked, B)
                else:
                    for nbr in succ[node]:
                        B[nbr].add(node)
                stack.pop()
                path.pop()

        rest = G.subgraph(members[1:])
        for c in _cyclic_components(rest):
            heapq.heappush(heap, (c[0], c))


class CycleDetector:
    """Finds elementary cycles in an IssueGraph."""

    def __init__(self, limit: int = DEFAULT_CYCLE_LIMIT, include_self_loops: bool = False) -> None:
        self.limit = limit
        self.include_self_loops = include_self_loops

    def detect(self, graph: IssueGraph) -> CycleResult:
        G = graph.digraph
        if G.number_of_edges() == 0 and not (self.include_self_loops and graph.self_loops):
            return CycleResult()

        found = list(itertools.islice(ordered_simple_cycles(G), self.limit + 1))
        truncated = len(found) > self.limit
        if truncated:
            found = found[: self.limit]
            logger.warning(
                "Cycle enumeration stopped after %d cycles; results are partial",
                self.limit,
            )

        cycles = [canonical_cycle(c) for c in found]
        if self.include_self_loops:
            cycles.extend([n, n] for n in graph.self_loops)
        cycles.sort(key=lambda c: (len(c), c))

        if cycles:
            logger.info("Detected %d dependency cycle(s)", len(cycles))
        return CycleResult(cycles=cycles, truncated=truncated)


def find_cycles(graph: IssueGraph, limit: int = DEFAULT_CYCLE_LIMIT) -> List[List[str]]:
    """Convenience function returning only the cycle list."""
    return CycleDetector(limit=limit).detect(graph).cycles
