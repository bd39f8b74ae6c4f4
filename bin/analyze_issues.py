#!/usr/bin/env python3
"""
Issue Graph Analysis CLI

Thin wrapper around the ``beadgraph`` console script so the tool can run
from a source checkout without installation.

Usage:
    python bin/analyze_issues.py --robot-insights
    python bin/analyze_issues.py --robot-graph --graph-format mermaid
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from beadgraph.adapters.inbound.cli_main import main


if __name__ == "__main__":
    sys.exit(main())
