"""
In-Memory Analysis Cache Adapter

Small LRU implementing IAnalysisCache, keyed by the source data hash.
Injected into the background worker.
"""

import threading
from collections import OrderedDict
from typing import Any, Optional

from beadgraph.core.interfaces import IAnalysisCache


class LRUAnalysisCache(IAnalysisCache):
    """Thread-safe least-recently-used cache."""

    def __init__(self, max_entries: int = 8) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._items: "OrderedDict[str, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if key not in self._items:
                self.misses += 1
                return None
            self._items.move_to_end(key)
            self.hits += 1
            return self._items[key]

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            while len(self._items) > self.max_entries:
                self._items.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
