"""
JSONL Issue Repository Adapter

Implements IIssueRepository over a ``.beads/beads.jsonl`` file: one JSON
issue object per line. Blank lines are skipped; malformed lines are logged
with their line number and skipped.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from typing import Iterable, List

from beadgraph.core.exceptions import IssueSourceNotFoundError
from beadgraph.core.interfaces import IIssueRepository
from beadgraph.core.models import Issue, content_hash

logger = logging.getLogger(__name__)


class JsonlIssueRepository(IIssueRepository):
    """Reads issues from a JSON-lines file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def load_issues(self) -> List[Issue]:
        if not os.path.isfile(self.path):
            raise IssueSourceNotFoundError(self.path)

        issues: List[Issue] = []
        skipped = 0
        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    if not isinstance(data, dict):
                        raise ValueError("expected a JSON object")
                    issues.append(Issue.from_dict(data))
                except (ValueError, KeyError, TypeError) as exc:
                    skipped += 1
                    logger.warning("%s:%d: skipping malformed issue (%s)", self.path, lineno, exc)

        logger.info("Loaded %d issues from %s (%d skipped)", len(issues), self.path, skipped)
        return issues

    def source_hash(self) -> str:
        if not os.path.isfile(self.path):
            raise IssueSourceNotFoundError(self.path)
        digest = hashlib.sha256()
        with open(self.path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                digest.update(chunk)
        return digest.hexdigest()


class InMemoryIssueRepository(IIssueRepository):
    """
    In-memory adapter implementing IIssueRepository.

    Useful for tests and for feeding the worker from another process.
    """

    def __init__(self, issues: Iterable[Issue] = ()) -> None:
        self.issues: List[Issue] = list(issues)

    def set_issues(self, issues: Iterable[Issue]) -> None:
        self.issues = list(issues)

    def load_issues(self) -> List[Issue]:
        return list(self.issues)

    def source_hash(self) -> str:
        return content_hash(self.issues)
