"""
Graph Builder

Converts an ordered list of issues into an immutable IssueGraph snapshot.

Edge policy (fixed, not configurable per call):
    Only blocking dependency records become edges. ``blocks``,
    ``parent-child`` and untyped records are blocking; ``related`` and
    ``discovered-from`` are informational and dropped.

Edge direction:
    (dependent, target): the dependent issue points at the issue it
    depends on, so predecessors of a node are its dependents.

Degenerate input:
    - Empty issue list produces an empty graph.
    - Targets missing from the issue list produce dangling edges. The target
      is added to the analysis DiGraph as a phantom node (``dangling=True``)
      with no out-edges, but is not a member of ``nodes``.
    - Self-loops are recorded in ``self_loops`` and excluded from the DiGraph.

Usage:
    graph = GraphBuilder().build(issues)
    view = graph.subgraph("bv-12", depth=2)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, NamedTuple, Set, Tuple

import networkx as nx

from .models import DependencyType, Issue

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    dependent: str
    target: str
    type: str = DependencyType.BLOCKS.value


# ---------------------------------------------------------------------------
# Graph snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IssueGraph:
    """Immutable dependency graph built once per data refresh."""

    nodes: FrozenSet[str]
    edges: Tuple[Edge, ...]
    dangling_targets: FrozenSet[str] = frozenset()
    self_loops: Tuple[str, ...] = ()
    digraph: nx.DiGraph = field(default_factory=nx.DiGraph, repr=False, compare=False)

    @property
    def order(self) -> Tuple[str, ...]:
        """Real node IDs in lexicographic order (the fixed traversal order)."""
        return tuple(sorted(self.nodes))

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def successors(self, node_id: str) -> List[str]:
        """Issues *node_id* depends on (blockers), sorted."""
        if node_id not in self.digraph:
            return []
        return sorted(self.digraph.successors(node_id))

    def predecessors(self, node_id: str) -> List[str]:
        """Issues that depend on *node_id* (dependents), sorted."""
        if node_id not in self.digraph:
            return []
        return sorted(self.digraph.predecessors(node_id))

    @property
    def internal_edge_count(self) -> int:
        """Edges between two real nodes, self-loops excluded."""
        return sum(
            1 for e in self.edges
            if e.target in self.nodes and e.dependent != e.target
        )

    def subgraph(self, root: str, depth: int = 1) -> "IssueGraph":
        """
        Filtered view around *root*: the root plus every issue it
        transitively depends on within *depth* hops.

        An unknown root yields an empty graph; ``depth <= 0`` keeps the root only.
        """
        if root not in self.nodes:
            return IssueGraph(nodes=frozenset(), edges=())

        if depth <= 0:
            reached: Set[str] = {root}
        else:
            reached = set(nx.ego_graph(self.digraph, root, radius=depth))

        kept_nodes = frozenset(n for n in reached if n in self.nodes)
        kept_edges = [
            e for e in self.edges
            if e.dependent in kept_nodes and e.target in reached
        ]
        return GraphBuilder.assemble(kept_nodes, kept_edges)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class GraphBuilder:
    """Builds IssueGraph snapshots from issue lists."""

    def build(self, issues: Iterable[Issue]) -> IssueGraph:
        """
        Build the dependency graph for *issues*.

        Deterministic for a given input list and order: edges keep the
        order in which dependency records appear, duplicates collapse to
        their first occurrence.
        """
        node_ids: Set[str] = set()
        edges: List[Edge] = []
        seen: Set[Tuple[str, str]] = set()

        for issue in issues:
            node_ids.add(issue.id)
            for dep in issue.dependencies:
                if not dep.is_blocking:
                    continue
                key = (issue.id, dep.depends_on_id)
                if key in seen:
                    logger.debug("Duplicate dependency %s -> %s ignored", *key)
                    continue
                seen.add(key)
                edges.append(Edge(issue.id, dep.depends_on_id, dep.type or DependencyType.BLOCKS.value))

        graph = self.assemble(frozenset(node_ids), edges)
        logger.info(
            "Built issue graph: %d nodes, %d edges (%d dangling, %d self-loops)",
            len(graph.nodes), len(graph.edges),
            len(graph.dangling_targets), len(graph.self_loops),
        )
        return graph

    @staticmethod
    def assemble(nodes: FrozenSet[str], edges: Iterable[Edge]) -> IssueGraph:
        """Create the frozen DiGraph and IssueGraph for an already-classified edge list."""
        edge_list = tuple(edges)
        G = nx.DiGraph()
        # Lexicographic insertion fixes every downstream iteration order.
        for nid in sorted(nodes):
            G.add_node(nid, dangling=False)

        dangling: Set[str] = set()
        self_loops: List[str] = []
        for e in sorted(edge_list, key=lambda x: (x.dependent, x.target)):
            if e.dependent == e.target:
                self_loops.append(e.dependent)
                continue
            if e.target not in nodes:
                dangling.add(e.target)
                if e.target not in G:
                    G.add_node(e.target, dangling=True)
            G.add_edge(e.dependent, e.target, type=e.type)

        return IssueGraph(
            nodes=nodes,
            edges=edge_list,
            dangling_targets=frozenset(dangling),
            self_loops=tuple(sorted(set(self_loops))),
            digraph=nx.freeze(G),
        )


def build_graph(issues: Iterable[Issue]) -> IssueGraph:
    """Convenience function to build a graph."""
    return GraphBuilder().build(issues)


def blocking_index(issues: Iterable[Issue]) -> Dict[str, List[str]]:
    """Map each issue ID to the IDs of the issues it blocks (its dependents)."""
    index: Dict[str, List[str]] = {}
    for issue in issues:
        for dep in issue.blocking_dependencies:
            if dep.depends_on_id == issue.id:
                continue
            dependents = index.setdefault(dep.depends_on_id, [])
            if issue.id not in dependents:
                dependents.append(issue.id)
    return {k: sorted(v) for k, v in index.items()}
