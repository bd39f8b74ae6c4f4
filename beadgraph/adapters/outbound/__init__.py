# Outbound Adapters (Driven)
# Issue loading, file storage, caching, graph formatting and reporting

from .jsonl_repository import JsonlIssueRepository, InMemoryIssueRepository
from .file_store import LocalFileStore, BaselineStore, git_info
from .memory_cache import LRUAnalysisCache
from .graph_formatter import GraphFormatter
from .console_reporter import ConsoleReporter

__all__ = [
    "JsonlIssueRepository",
    "InMemoryIssueRepository",
    "LocalFileStore",
    "BaselineStore",
    "git_info",
    "LRUAnalysisCache",
    "GraphFormatter",
    "ConsoleReporter",
]
