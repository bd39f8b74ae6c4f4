"""
Graph analytics engine: cycles, centrality, impact, insights, triage and drift.
"""
from .analyzer import GraphAnalyzer, analyze_graph
from .centrality import CentralityEngine, CentralityResult
from .cycle_detector import CycleDetector, CycleResult, find_cycles
from .drift import Baseline, DriftAlert, DriftDetector, DriftResult
from .impact import ImpactScorer, impact_scores
from .insights import InsightsAggregator, compute_density, generate_insights
from .models import (
    GraphStats,
    Insights,
    MetricStatus,
    ProjectHealth,
    RankedItem,
    TriageRecommendation,
    TriageResult,
)
from .triage import TriageEngine, compute_triage

__all__ = [
    "GraphAnalyzer", "analyze_graph",
    "CentralityEngine", "CentralityResult",
    "CycleDetector", "CycleResult", "find_cycles",
    "Baseline", "DriftAlert", "DriftDetector", "DriftResult",
    "ImpactScorer", "impact_scores",
    "InsightsAggregator", "compute_density", "generate_insights",
    "GraphStats", "Insights", "MetricStatus", "ProjectHealth", "RankedItem",
    "TriageRecommendation", "TriageResult",
    "TriageEngine", "compute_triage",
]
