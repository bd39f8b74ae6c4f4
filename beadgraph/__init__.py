"""
beadgraph

Graph analytics engine for issue-tracker dependency graphs: cycle detection,
centrality scoring, blast-radius impact, insights and triage recommendations.
"""

__version__ = "0.4.0"
