"""
Core Value Objects and Entities

Issue-tracker domain model: issues, their typed dependency records and the
status / type vocabularies used by the analysis engine.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Status(str, Enum):
    """Lifecycle state of an issue."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    CLOSED = "closed"


class IssueType(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    TASK = "task"
    EPIC = "epic"
    CHORE = "chore"


class DependencyType(str, Enum):
    """
    Relationship between two issues.

    Only blocking relations become graph edges; ``related`` and
    ``discovered-from`` are informational.
    """
    BLOCKS = "blocks"
    RELATED = "related"
    PARENT_CHILD = "parent-child"
    DISCOVERED_FROM = "discovered-from"


#: Dependency type strings materialised as graph edges. The empty string is a
#: dependency record written without an explicit type.
BLOCKING_TYPES = frozenset({
    DependencyType.BLOCKS.value,
    DependencyType.PARENT_CHILD.value,
    "",
})


def is_blocking(dep_type: Optional[str]) -> bool:
    """Return True when *dep_type* prevents the dependent from being actionable."""
    if dep_type is None:
        return True
    if isinstance(dep_type, DependencyType):
        dep_type = dep_type.value
    return dep_type in BLOCKING_TYPES


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (trailing ``Z`` allowed) into an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Dependency:
    """A typed dependency record: *issue_id* depends on *depends_on_id*."""
    issue_id: str
    depends_on_id: str
    type: str = DependencyType.BLOCKS.value

    @property
    def is_blocking(self) -> bool:
        return is_blocking(self.type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issue_id": self.issue_id,
            "depends_on_id": self.depends_on_id,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], issue_id: str = "") -> "Dependency":
        return cls(
            issue_id=data.get("issue_id") or issue_id,
            depends_on_id=data["depends_on_id"],
            type=data.get("type") or "",
        )


@dataclass(frozen=True)
class Issue:
    """A trackable work item as delivered by the issue loader."""
    id: str
    title: str = ""
    status: str = Status.OPEN.value
    priority: int = 2
    issue_type: str = IssueType.TASK.value
    description: str = ""
    assignee: str = ""
    estimated_minutes: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    labels: tuple = ()
    dependencies: tuple = ()

    @property
    def is_closed(self) -> bool:
        return self.status == Status.CLOSED.value

    @property
    def blocking_dependencies(self) -> List[Dependency]:
        return [d for d in self.dependencies if d.is_blocking]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "priority": self.priority,
            "issue_type": self.issue_type,
        }
        if self.description:
            data["description"] = self.description
        if self.assignee:
            data["assignee"] = self.assignee
        if self.estimated_minutes is not None:
            data["estimated_minutes"] = self.estimated_minutes
        for key in ("created_at", "updated_at", "closed_at"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value.isoformat()
        if self.labels:
            data["labels"] = list(self.labels)
        if self.dependencies:
            data["dependencies"] = [d.to_dict() for d in self.dependencies]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        """Build an Issue from a decoded JSON record; optional fields may be absent."""
        issue_id = data["id"]
        deps = tuple(
            Dependency.from_dict(d, issue_id=issue_id)
            for d in (data.get("dependencies") or [])
            if d and d.get("depends_on_id")
        )
        priority = data.get("priority")
        return cls(
            id=issue_id,
            title=data.get("title", ""),
            status=data.get("status") or Status.OPEN.value,
            priority=int(priority) if priority is not None else 2,
            issue_type=data.get("issue_type") or IssueType.TASK.value,
            description=data.get("description", ""),
            assignee=data.get("assignee") or "",
            estimated_minutes=data.get("estimated_minutes"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            closed_at=parse_timestamp(data.get("closed_at")),
            labels=tuple(data.get("labels") or ()),
            dependencies=deps,
        )


def content_hash(issues: Iterable[Issue]) -> str:
    """SHA-256 over the canonical JSON of *issues*, stable across runs."""
    digest = hashlib.sha256()
    for issue in issues:
        digest.update(json.dumps(issue.to_dict(), sort_keys=True).encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()
