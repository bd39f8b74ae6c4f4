"""
Graph Formatter Adapter

Renders an IssueGraph for the ``--robot-graph`` surface.

Formats:
    json     adjacency lists ``{"nodes": [...], "edges": [{from, to, type}]}``
    dot      Graphviz ``digraph``; cycle members drawn red
    mermaid  ``graph TD`` flowchart; cycle members styled red

Every payload carries ``format``, ``nodes`` and ``edges`` counts; DOT and
Mermaid add the rendered text under ``graph``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from beadgraph.core.graph_builder import IssueGraph
from beadgraph.core.models import Issue

FORMATS = ("json", "dot", "mermaid")

STATUS_COLORS = {
    "open": "#cfe8ff",
    "in_progress": "#fff3bf",
    "blocked": "#ffd6d6",
    "closed": "#e0e0e0",
}
CYCLE_COLOR = "#d62728"


class GraphFormatter:
    """Serialises an IssueGraph to JSON adjacency, DOT or Mermaid."""

    def __init__(self, issues: Iterable[Issue], cycles: Optional[Iterable[Iterable[str]]] = None) -> None:
        self.issues: Mapping[str, Issue] = {i.id: i for i in issues}
        self.cycle_members: Set[str] = {n for c in (cycles or []) for n in c}

    def format(self, graph: IssueGraph, fmt: str = "json") -> Dict[str, Any]:
        if fmt not in FORMATS:
            raise ValueError(f"Unknown graph format '{fmt}'. Expected one of: {', '.join(FORMATS)}")

        payload: Dict[str, Any] = {
            "format": fmt,
            "nodes": len(graph.nodes),
            "edges": graph.internal_edge_count,
        }
        if fmt == "json":
            payload["adjacency"] = self.adjacency(graph)
        elif fmt == "dot":
            payload["graph"] = self.to_dot(graph)
        else:
            payload["graph"] = self.to_mermaid(graph)
        return payload

    def adjacency(self, graph: IssueGraph) -> Dict[str, List[Dict[str, Any]]]:
        nodes = []
        for nid in graph.order:
            issue = self.issues.get(nid)
            nodes.append({
                "id": nid,
                "title": issue.title if issue else "",
                "status": issue.status if issue else "",
                "in_cycle": nid in self.cycle_members,
            })
        edges = [
            {"from": e.dependent, "to": e.target, "type": e.type}
            for e in self._internal_edges(graph)
        ]
        return {"nodes": nodes, "edges": edges}

    def to_dot(self, graph: IssueGraph) -> str:
        lines = [
            "digraph dependencies {",
            "  rankdir=LR;",
            '  node [shape=box, style="rounded,filled", fontname="Helvetica"];',
        ]
        for nid in graph.order:
            issue = self.issues.get(nid)
            label = _dot_escape(f"{nid}\\n{issue.title}" if issue and issue.title else nid)
            fill = STATUS_COLORS.get(issue.status if issue else "", "#ffffff")
            attrs = [f'label="{label}"', f'fillcolor="{fill}"']
            if nid in self.cycle_members:
                attrs.append(f'color="{CYCLE_COLOR}"')
                attrs.append("penwidth=2")
            lines.append(f'  "{_dot_escape(nid)}" [{", ".join(attrs)}];')
        for e in self._internal_edges(graph):
            style = "" if e.type == "blocks" else f' [style=dashed, label="{_dot_escape(e.type)}"]'
            if e.dependent in self.cycle_members and e.target in self.cycle_members:
                style = f' [color="{CYCLE_COLOR}"]'
            lines.append(f'  "{_dot_escape(e.dependent)}" -> "{_dot_escape(e.target)}"{style};')
        lines.append("}")
        return "\n".join(lines)

    def to_mermaid(self, graph: IssueGraph) -> str:
        ids = {nid: f"n{i}" for i, nid in enumerate(graph.order)}
        lines = ["graph TD"]
        for nid in graph.order:
            issue = self.issues.get(nid)
            label = _mermaid_escape(f"{nid}: {issue.title}" if issue and issue.title else nid)
            lines.append(f'    {ids[nid]}["{label}"]')
        for e in self._internal_edges(graph):
            arrow = "-->" if e.type == "blocks" else "-.->"
            lines.append(f"    {ids[e.dependent]} {arrow} {ids[e.target]}")
        if self.cycle_members & set(ids):
            lines.append(f"    classDef cycle stroke:{CYCLE_COLOR},stroke-width:2px")
            members = ",".join(ids[n] for n in graph.order if n in self.cycle_members)
            lines.append(f"    class {members} cycle")
        return "\n".join(lines)

    @staticmethod
    def _internal_edges(graph: IssueGraph):
        return sorted(
            (e for e in graph.edges if e.target in graph.nodes and e.dependent != e.target),
            key=lambda e: (e.dependent, e.target),
        )


def _dot_escape(text: str) -> str:
    return text.replace('"', '\\"')


def _mermaid_escape(text: str) -> str:
    return re.sub(r'["\[\]{}<>]', "'", text)
