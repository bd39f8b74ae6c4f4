"""
File Store Adapter

Local filesystem operations for JSON files, plus baseline
persistence and git metadata lookup for baselines.
"""

import json
import logging
import os
import subprocess
from typing import Any, Dict

from beadgraph.analysis.drift import Baseline
from beadgraph.core.exceptions import BaselineNotFoundError, BeadGraphError

logger = logging.getLogger(__name__)


class LocalFileStore:
    """
    Local filesystem store.

    Provides file I/O operations for JSON files.
    """

    def read_json(self, path: str) -> Dict[str, Any]:
        """Read JSON file and return parsed content."""
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def write_json(self, path: str, data: Dict[str, Any]) -> str:
        """Write data as indented JSON. Returns the written path."""
        self.makedirs(os.path.dirname(path))
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, default=str)
        return path

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def makedirs(self, path: str) -> None:
        """Create directory and parents if they don't exist."""
        if path:
            os.makedirs(path, exist_ok=True)


class BaselineStore:
    """Saves and loads Baseline snapshots as JSON."""

    def __init__(self, path: str, files: LocalFileStore = None) -> None:
        self.path = path
        self.files = files or LocalFileStore()

    def exists(self) -> bool:
        return self.files.exists(self.path)

    def save(self, baseline: Baseline) -> str:
        path = self.files.write_json(self.path, baseline.to_dict())
        logger.info("Saved baseline to %s", path)
        return path

    def load(self) -> Baseline:
        if not self.exists():
            raise BaselineNotFoundError(self.path)
        try:
            data = self.files.read_json(self.path)
        except json.JSONDecodeError as exc:
            raise BeadGraphError(
                f"Cannot parse baseline {self.path}: {exc}", details={"path": self.path}
            ) from exc
        return Baseline.from_dict(data)


def git_info(cwd: str = ".") -> Dict[str, str]:
    """Current commit SHA, subject line and branch; empty values outside a repository."""
    commands = {
        "commit_sha": ["git", "rev-parse", "HEAD"],
        "commit_message": ["git", "log", "-1", "--format=%s"],
        "branch": ["git", "rev-parse", "--abbrev-ref", "HEAD"],
    }
    info: Dict[str, str] = {}
    for key, cmd in commands.items():
        try:
            out = subprocess.run(
                cmd, cwd=cwd, capture_output=True, text=True, timeout=5, check=True,
            )
            info[key] = out.stdout.strip()
        except (OSError, subprocess.SubprocessError):
            logger.debug("git metadata unavailable for %s", key)
            info[key] = ""
    return info
