"""
Background Worker

Recomputes DataSnapshots off the reader's thread.

Concurrency contract:
    - At most one computation runs at a time.
    - A refresh requested while one is running only marks the worker dirty;
      once the current run finishes, exactly one more run starts. Any number
      of triggers during a run collapse into that single rerun.
    - Each finished run publishes its snapshot by swapping a reference under
      a lock; readers never see a partially built snapshot.
    - A superseded run is not cancelled. It completes and is replaced by the
      rerun's result.
    - Loader errors are logged and the previous snapshot stays published.

Usage:
    worker = BackgroundWorker(JsonlIssueRepository(".beads/beads.jsonl"))
    worker.trigger_refresh()
    worker.wait_idle(timeout=5)
    snapshot = worker.get_snapshot()
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional, Tuple

from beadgraph.analysis.constants import DEFAULT_CYCLE_LIMIT, DEFAULT_TOP_K
from beadgraph.core.interfaces import IAnalysisCache, IIssueRepository
from .snapshot import DataSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class WorkerState(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    STOPPED = "stopped"


class BackgroundWorker:
    """Builds snapshots on a daemon thread with dirty-flag coalescing."""

    def __init__(
        self,
        repository: IIssueRepository,
        cache: Optional[IAnalysisCache] = None,
        top_k: int = DEFAULT_TOP_K,
        cycle_limit: int = DEFAULT_CYCLE_LIMIT,
        on_snapshot: Optional[Callable[[DataSnapshot], None]] = None,
    ) -> None:
        self.repository = repository
        self.cache = cache
        self.top_k = top_k
        self.cycle_limit = cycle_limit
        self.on_snapshot = on_snapshot

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._state = WorkerState.IDLE
        self._dirty = False
        self._snapshot: Optional[DataSnapshot] = None
        self._thread: Optional[threading.Thread] = None

        self.runs = 0
        self.last_error: Optional[BaseException] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> WorkerState:
        with self._lock:
            return self._state

    def get_snapshot(self) -> Optional[DataSnapshot]:
        """Latest published snapshot, or None before the first successful run."""
        with self._lock:
            return self._snapshot

    def trigger_refresh(self) -> bool:
        """
        Request a recomputation.

        Returns True when a new run was started, False when the request was
        folded into the running computation or the worker is stopped.
        """
        with self._lock:
            if self._state == WorkerState.STOPPED:
                return False
            if self._state == WorkerState.PROCESSING:
                self._dirty = True
                return False
            self._state = WorkerState.PROCESSING
            self._dirty = False
            self._thread = threading.Thread(
                target=self._process, name="beadgraph-worker", daemon=True,
            )
            self._thread.start()
            return True

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until no computation is running; False on timeout."""
        with self._idle:
            return self._idle.wait_for(
                lambda: self._state != WorkerState.PROCESSING, timeout=timeout,
            )

    def stop(self, timeout: float = 2.0) -> None:
        """Stop accepting refreshes. Safe to call more than once."""
        with self._lock:
            if self._state == WorkerState.STOPPED:
                return
            self._state = WorkerState.STOPPED
            self._dirty = False
            self._idle.notify_all()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        logger.debug("Background worker stopped")

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def _process(self) -> None:
        rerun = True
        while rerun:
            snapshot, error = self._build_snapshot()
            with self._lock:
                self.runs += 1
                self.last_error = error
                stopped = self._state == WorkerState.STOPPED
                if snapshot is not None and not stopped:
                    self._snapshot = snapshot
                rerun = self._dirty and not stopped
                self._dirty = False
                if not rerun:
                    if not stopped:
                        self._state = WorkerState.IDLE
                    self._idle.notify_all()

            if snapshot is not None and not stopped and self.on_snapshot is not None:
                try:
                    self.on_snapshot(snapshot)
                except Exception:
                    logger.exception("Snapshot listener failed")

    def _build_snapshot(self) -> Tuple[Optional[DataSnapshot], Optional[BaseException]]:
        try:
            data_hash = self.repository.source_hash()
            if self.cache is not None:
                cached = self.cache.get(data_hash)
                if cached is not None:
                    logger.debug("Snapshot cache hit for %s", data_hash[:12])
                    return cached, None

            issues = self.repository.load_issues()
            snapshot = (
                SnapshotBuilder(issues, top_k=self.top_k, cycle_limit=self.cycle_limit)
                .with_data_hash(data_hash)
                .build()
            )
            if self.cache is not None:
                self.cache.put(data_hash, snapshot)
            return snapshot, None
        except Exception as exc:
            logger.error("Refresh failed, keeping previous snapshot: %s", exc)
            return None, exc
