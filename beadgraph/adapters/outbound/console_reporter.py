"""
Console Reporter Adapter

Human-readable terminal output with colors and tables for the analysis
summary, triage list and drift report.
"""

from typing import Any, List

from beadgraph.analysis.drift import DriftResult
from beadgraph.analysis.models import GraphStats, Insights, TriageResult


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    HEADER = "\033[95m"


SEVERITY_COLORS = {
    "critical": Colors.RED,
    "warning": Colors.YELLOW,
    "info": Colors.CYAN,
}


class ConsoleReporter:
    """Formatted terminal output."""

    def __init__(self, use_color: bool = True):
        self.use_color = use_color

    def _color(self, text: str, color: str) -> str:
        """Apply color if enabled."""
        if self.use_color:
            return f"{color}{text}{Colors.RESET}"
        return text

    def success(self, message: str) -> None:
        print(self._color(f"✅ {message}", Colors.GREEN))

    def warning(self, message: str) -> None:
        print(self._color(f"⚠️  {message}", Colors.YELLOW))

    def table(self, headers: List[str], rows: List[List[Any]]) -> None:
        """Display tabular data."""
        if not headers or not rows:
            return

        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = " | ".join(
            str(h).ljust(widths[i]) for i, h in enumerate(headers)
        )
        print(self._color(header_line, Colors.BOLD))
        print("-" * len(header_line))
        for row in rows:
            print(" | ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            ))

    def section(self, title: str) -> None:
        """Display section header."""
        line = "=" * (len(title) + 4)
        print()
        print(self._color(line, Colors.HEADER))
        print(self._color(f"  {title}  ", Colors.HEADER + Colors.BOLD))
        print(self._color(line, Colors.HEADER))
        print()

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def summary(self, stats: GraphStats, insights: Insights, triage: TriageResult) -> None:
        health = triage.project_health
        self.section("Dependency Graph")
        print(f"  Issues: {stats.node_count}   Edges: {stats.edge_count}   "
              f"Density: {insights.cluster_density:.4f}")
        status = ", ".join(f"{k}={v}" for k, v in health.status_counts.items()) or "none"
        print(f"  Status: {status}")
        print(f"  Actionable: {health.actionable_count}   Blocked: {health.blocked_count}")

        if insights.cycles:
            self.warning(f"{len(insights.cycles)} dependency cycle(s) detected")
            for cycle in insights.cycles[:10]:
                print(self._color("    " + " -> ".join(cycle), Colors.RED))
        else:
            self.success("No dependency cycles")

        self.section("Key Issues")
        rows = [
            ["Bottlenecks", ", ".join(insights.bottlenecks)],
            ["Keystones", ", ".join(insights.keystones)],
            ["Influencers", ", ".join(insights.influencers)],
            ["Hubs", ", ".join(insights.hubs)],
            ["Authorities", ", ".join(insights.authorities)],
        ]
        self.table(["Category", "Issues"], rows)

        self.triage(triage, limit=len(insights.keystones) or 5)

    def triage(self, result: TriageResult, limit: int = 5) -> None:
        self.section("Recommended Next")
        if not result.recommendations:
            print("  Nothing to do: no open issues.")
            return
        rows = [
            [r.id, f"{r.score:.3f}", r.action, r.primary_reason or ""]
            for r in result.recommendations[:limit]
        ]
        self.table(["ID", "Score", "Action", "Why"], rows)
        if result.quick_wins:
            print()
            print(self._color("  Quick wins: ", Colors.GREEN)
                  + ", ".join(q.id for q in result.quick_wins))

    def drift(self, result: DriftResult) -> None:
        self.section("Drift Check")
        if not result.has_drift:
            self.success("No drift from baseline")
            return
        for alert in result.alerts:
            color = SEVERITY_COLORS.get(alert.severity, Colors.RESET)
            print(self._color(f"  [{alert.severity.upper()}] ", color) + alert.message)
