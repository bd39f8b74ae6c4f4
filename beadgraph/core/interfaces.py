"""
Port Interfaces

Defines the Protocols that adapters must satisfy. Services depend on these
Protocols rather than concrete implementations, so the engine can be tested
with in-memory fakes.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, runtime_checkable

from beadgraph.core.models import Issue


@runtime_checkable
class IIssueRepository(Protocol):
    """
    Port for loading issue data.

    Any class implementing these methods satisfies this protocol
    via structural subtyping; explicit inheritance is optional.
    """

    def load_issues(self) -> List[Issue]:
        """Return all issues in source order."""
        ...

    def source_hash(self) -> str:
        """Content hash of the underlying data, used for cache validation."""
        ...


@runtime_checkable
class IAnalysisCache(Protocol):
    """
    Port for caching computed snapshots between refreshes.

    Injected into the background worker; the engine itself keeps no
    global state.
    """

    def get(self, key: str) -> Optional[Any]:
        ...

    def put(self, key: str, value: Any) -> None:
        ...
