"""
Custom exception hierarchy for beadgraph.

The analysis engine itself never raises for bad data; these exceptions are
used by the adapters (issue source, baseline store, configuration) so that
entry points can report specific failure modes.
"""


class BeadGraphError(Exception):
    """Base exception for all beadgraph errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class IssueSourceNotFoundError(BeadGraphError):
    """The issue data file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            f"No issue data found at {path}. "
            f"Make sure you are in a project initialized with 'bd init'.",
            details={"path": path},
        )


class BaselineNotFoundError(BeadGraphError):
    """No baseline has been saved at the given path."""

    def __init__(self, path: str):
        super().__init__(f"No baseline found at {path}", details={"path": path})


class ConfigError(BeadGraphError):
    """A configuration value is missing or invalid."""
    pass
