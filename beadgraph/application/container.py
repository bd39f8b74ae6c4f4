"""
Application Container

Dependency injection container that wires ports to adapters and manages
service lifecycle.
"""

from dataclasses import dataclass, field
from typing import Optional

from beadgraph.config.settings import Settings


@dataclass
class Container:
    """
    Dependency injection container.

    Wires hexagonal architecture components:
    - Ports define contracts
    - Adapters implement ports
    - Services orchestrate domain logic
    """
    settings: Settings = field(default_factory=Settings)

    _repository: Optional[object] = field(default=None, repr=False)
    _worker: Optional[object] = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Container":
        """Create container from settings."""
        return cls(settings=settings)

    def issue_repository(self):
        """Get the issue repository singleton."""
        if not self._repository:
            # Lazy import to avoid circular dependencies
            from beadgraph.adapters.outbound.jsonl_repository import JsonlIssueRepository
            self._repository = JsonlIssueRepository(self.settings.beads_file)
        return self._repository

    def baseline_store(self):
        from beadgraph.adapters.outbound.file_store import BaselineStore
        return BaselineStore(self.settings.baseline_file)

    def analysis_service(self):
        """Get analysis use case implementation."""
        from beadgraph.adapters.outbound.file_store import git_info
        from beadgraph.application.services.analysis_service import AnalysisService
        return AnalysisService(
            repository=self.issue_repository(),
            top_k=self.settings.top_k,
            cycle_limit=self.settings.cycle_limit,
            baseline_store=self.baseline_store(),
            git_info=git_info,
        )

    def background_worker(self):
        """Get the background worker singleton (with an LRU snapshot cache)."""
        if not self._worker:
            from beadgraph.adapters.outbound.memory_cache import LRUAnalysisCache
            from beadgraph.application.services.background_worker import BackgroundWorker
            self._worker = BackgroundWorker(
                self.issue_repository(),
                cache=LRUAnalysisCache(),
                top_k=self.settings.top_k,
                cycle_limit=self.settings.cycle_limit,
            )
        return self._worker

    def reporter(self, use_color: bool = True):
        """Get console reporter adapter."""
        from beadgraph.adapters.outbound.console_reporter import ConsoleReporter
        return ConsoleReporter(use_color=use_color)

    def close(self) -> None:
        """Stop background work and release resources."""
        if self._worker:
            self._worker.stop()
            self._worker = None
        self._repository = None
