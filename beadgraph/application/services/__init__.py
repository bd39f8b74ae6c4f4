"""Application services."""
from .analysis_service import AnalysisService
from .background_worker import BackgroundWorker, WorkerState
from .snapshot import DataSnapshot, SnapshotBuilder

__all__ = [
    "AnalysisService",
    "BackgroundWorker",
    "WorkerState",
    "DataSnapshot",
    "SnapshotBuilder",
]
