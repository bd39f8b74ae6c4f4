"""
Core domain model, graph construction and ports.
"""
from .exceptions import (
    BeadGraphError,
    IssueSourceNotFoundError,
    BaselineNotFoundError,
    ConfigError,
)
from .models import (
    Issue,
    Dependency,
    Status,
    IssueType,
    DependencyType,
    BLOCKING_TYPES,
    is_blocking,
    content_hash,
)
from .graph_builder import Edge, IssueGraph, GraphBuilder, build_graph, blocking_index
from .interfaces import IIssueRepository, IAnalysisCache

__all__ = [
    "BeadGraphError",
    "IssueSourceNotFoundError",
    "BaselineNotFoundError",
    "ConfigError",
    "Issue",
    "Dependency",
    "Status",
    "IssueType",
    "DependencyType",
    "BLOCKING_TYPES",
    "is_blocking",
    "content_hash",
    "Edge",
    "IssueGraph",
    "GraphBuilder",
    "build_graph",
    "blocking_index",
    "IIssueRepository",
    "IAnalysisCache",
]
