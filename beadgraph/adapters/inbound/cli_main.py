#!/usr/bin/env python3
"""
beadgraph CLI

Dependency-graph analytics for a beads issue tracker: cycles, centrality,
impact, insights and triage recommendations over ``.beads/beads.jsonl``.

Robot modes print JSON to stdout (logs go to stderr):
    --robot-insights   top issues per metric, cycles, density
    --robot-triage     ranked recommendations, quick wins, blockers
    --robot-graph      dependency graph as json / dot / mermaid

Baselines:
    --save-baseline [DESC]       snapshot current metrics to .bv/baseline.json
    --check-drift [--robot-drift]
                                 compare against the baseline; exit code 1 on
                                 critical drift, 2 on warnings, 0 otherwise

Usage:
    beadgraph --robot-triage
    beadgraph --robot-graph --graph-format dot --graph-root bv-12 --graph-depth 2
    beadgraph --check-drift --robot-drift
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from beadgraph import __version__
from beadgraph.adapters.outbound.graph_formatter import FORMATS
from beadgraph.application.container import Container
from beadgraph.config.settings import Settings


# ---------------------------------------------------------------------------
# CLI Argument Parsing
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with clear grouping."""
    parser = argparse.ArgumentParser(
        prog="beadgraph",
        description="Graph analytics for issue dependencies.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s                                 Human-readable summary
  %(prog)s --robot-insights                Insights as JSON
  %(prog)s --robot-triage --top-k 10       Triage as JSON
  %(prog)s --robot-graph --graph-format mermaid
  %(prog)s --save-baseline "before refactor"
  %(prog)s --check-drift --robot-drift
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # --- Modes (mutually exclusive) ---
    modes = parser.add_mutually_exclusive_group()
    modes.add_argument("--robot-insights", action="store_true", help="Print insights as JSON")
    modes.add_argument("--robot-triage", action="store_true", help="Print triage as JSON")
    modes.add_argument("--robot-graph", action="store_true", help="Print the dependency graph")
    modes.add_argument(
        "--save-baseline", nargs="?", const="", default=None, metavar="DESC",
        help="Save current metrics as the drift baseline",
    )
    modes.add_argument("--check-drift", action="store_true", help="Compare against the saved baseline")

    # --- Graph view ---
    graph = parser.add_argument_group("Graph view")
    graph.add_argument("--graph-format", choices=FORMATS, default="json",
                       help="Output format for --robot-graph (default: json)")
    graph.add_argument("--graph-root", metavar="ID", help="Show only the neighbourhood of ID")
    graph.add_argument("--graph-depth", type=int, metavar="N",
                       help="Hops to include around --graph-root (default: 1)")

    # --- Input / config ---
    source = parser.add_argument_group("Input")
    source.add_argument("--beads-file", metavar="FILE", help="Issue file (default: .beads/beads.jsonl)")
    source.add_argument("--config", metavar="FILE", help="YAML settings file")
    source.add_argument("--top-k", type=int, metavar="K", help="Size of top-K lists (default: 5)")

    # --- Output ---
    output = parser.add_argument_group("Output")
    output.add_argument("--robot-drift", action="store_true", help="Print drift result as JSON")
    output.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    output.add_argument("--quiet", "-q", action="store_true", help="Only log warnings")
    output.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Defaults, YAML config, environment, then CLI flags."""
    return Settings.load(args.config).with_overrides(
        beads_file=args.beads_file,
        top_k=args.top_k,
        graph_root=args.graph_root,
        graph_depth=args.graph_depth,
    )


def emit_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


# ---------------------------------------------------------------------------
# Entry Point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = (
        logging.DEBUG if args.verbose
        else logging.WARNING if args.quiet
        else logging.INFO
    )
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    container = None
    try:
        settings = load_settings(args)
        container = Container.from_settings(settings)
        service = container.analysis_service()
        reporter = container.reporter(use_color=not args.no_color and sys.stdout.isatty())

        if args.save_baseline is not None:
            baseline = service.save_baseline(args.save_baseline)
            reporter.success(f"Baseline saved to {settings.baseline_file}")
            print(baseline.summary())
            return 0

        if args.check_drift:
            result = service.check_drift()
            if args.robot_drift:
                emit_json(result.to_dict())
            else:
                reporter.drift(result)
            return result.exit_code

        if args.robot_graph:
            emit_json(service.graph(
                fmt=args.graph_format,
                root=settings.graph_root,
                depth=settings.graph_depth,
            ))
            return 0

        if args.robot_insights:
            emit_json(service.insights())
            return 0

        if args.robot_triage:
            emit_json(service.triage())
            return 0

        snapshot = service.snapshot()
        reporter.summary(snapshot.stats, snapshot.insights, snapshot.triage)
        return 0

    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if args.verbose:
            logging.exception("beadgraph failed")
        return 1

    finally:
        if container is not None:
            container.close()


if __name__ == "__main__":
    sys.exit(main())
