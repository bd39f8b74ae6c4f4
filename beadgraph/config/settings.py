"""
Application Settings

Configuration for the CLI, API and background worker.

Precedence (lowest to highest):
    defaults -> YAML file -> environment -> CLI flags

Environment variables:
    BV_BEADS_FILE, BV_BASELINE_FILE, BV_TOP_K, BV_CYCLE_LIMIT
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from beadgraph.analysis.constants import DEFAULT_CYCLE_LIMIT, DEFAULT_TOP_K
from beadgraph.core.exceptions import ConfigError

DEFAULT_BEADS_FILE = os.path.join(".beads", "beads.jsonl")
DEFAULT_BASELINE_FILE = os.path.join(".bv", "baseline.json")

ENV_VARS = {
    "beads_file": "BV_BEADS_FILE",
    "baseline_file": "BV_BASELINE_FILE",
    "top_k": "BV_TOP_K",
    "cycle_limit": "BV_CYCLE_LIMIT",
}


@dataclass
class Settings:
    """Application settings."""

    beads_file: str = DEFAULT_BEADS_FILE
    baseline_file: str = DEFAULT_BASELINE_FILE
    top_k: int = DEFAULT_TOP_K
    cycle_limit: int = DEFAULT_CYCLE_LIMIT
    graph_root: Optional[str] = None
    graph_depth: int = 1

    def __post_init__(self) -> None:
        self.top_k = _as_int("top_k", self.top_k, minimum=1)
        self.cycle_limit = _as_int("cycle_limit", self.cycle_limit, minimum=1)
        self.graph_depth = _as_int("graph_depth", self.graph_depth, minimum=0)
        if not self.beads_file:
            raise ConfigError("beads_file must not be empty")

    @classmethod
    def from_env(cls, base: Optional["Settings"] = None,
                 environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Load settings from environment variables on top of *base*."""
        environ = os.environ if environ is None else environ
        base = base or cls()
        overrides = {
            name: environ[var] for name, var in ENV_VARS.items()
            if environ.get(var)
        }
        return replace(base, **overrides)

    @classmethod
    def from_yaml(cls, path: str) -> "Settings":
        """Load settings from a YAML mapping; unknown keys are rejected."""
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Config file not found: {path}", details={"path": path})
        with open(p, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}", details={"path": path}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Settings":
        """Defaults, then *config_path* (if given), then environment."""
        base = cls.from_yaml(config_path) if config_path else cls()
        return cls.from_env(base)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Apply CLI flag values; ``None`` means "not given"."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _as_int(name: str, value: Any, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {number}")
    return number
