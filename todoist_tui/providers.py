"""
Domain snapshots and collaborator protocols.

Protocols define the interface; implementations can be swapped
for testing or alternative data sources.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Protocol, Sequence


def _parse_date(s: str | None) -> date | None:
    """Parse the calendar part of an ISO date/datetime string."""
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class Due:
    """Due information attached to a task."""

    date: str
    string: str = ""
    datetime: str | None = None
    timezone: str | None = None
    is_recurring: bool = False

    @property
    def day(self) -> date | None:
        """Calendar date, or None when the service sent something unparsable."""
        return _parse_date(self.date)

    @classmethod
    def from_dict(cls, data: dict) -> Due:
        return cls(
            date=data.get("date", ""),
            string=data.get("string") or "",
            datetime=data.get("datetime"),
            timezone=data.get("timezone"),
            is_recurring=bool(data.get("is_recurring", False)),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "string": self.string,
            "datetime": self.datetime,
            "timezone": self.timezone,
            "is_recurring": self.is_recurring,
        }


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of a remote task."""

    id: str
    content: str
    project_id: str = ""
    priority: int = 1
    description: str = ""
    due: Due | None = None
    labels: tuple[str, ...] = ()
    is_completed: bool = False
    url: str = ""
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        due = data.get("due")
        return cls(
            id=str(data["id"]),
            content=data.get("content", ""),
            project_id=str(data.get("project_id") or ""),
            priority=int(data.get("priority") or 1),
            description=data.get("description") or "",
            due=Due.from_dict(due) if due else None,
            labels=tuple(data.get("labels") or ()),
            is_completed=bool(data.get("is_completed", False)),
            url=data.get("url") or "",
            created_at=data.get("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "project_id": self.project_id,
            "priority": self.priority,
            "description": self.description,
            "due": self.due.to_dict() if self.due else None,
            "labels": list(self.labels),
            "is_completed": self.is_completed,
            "url": self.url,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class Project:
    """Read-only project reference data."""

    id: str
    name: str
    color: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Project:
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            color=data.get("color") or "",
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "color": self.color}


@dataclass(frozen=True)
class NewTask:
    """Payload for creating a task."""

    content: str
    priority: int = 1
    project_id: str | None = None
    due_string: str = ""
    description: str = ""
    labels: tuple[str, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        """Request body, omitting empty optional fields."""
        payload: dict = {"content": self.content}
        if self.description:
            payload["description"] = self.description
        if self.project_id:
            payload["project_id"] = self.project_id
        if self.priority:
            payload["priority"] = self.priority
        if self.labels:
            payload["labels"] = list(self.labels)
        if self.due_string:
            payload["due_string"] = self.due_string
        return payload


class TaskService(Protocol):
    """Protocol for the remote task service."""

    def get_tasks(self) -> list[Task]:
        """Fetch all active tasks."""
        ...

    def get_projects(self) -> list[Project]:
        """Fetch all projects."""
        ...

    def create_task(self, task: NewTask) -> Task:
        """Create a task and return the server's record."""
        ...

    def complete_task(self, task_id: str) -> None:
        """Close a task."""
        ...

    def delete_task(self, task_id: str) -> None:
        """Permanently delete a task."""
        ...


class CacheGateway(Protocol):
    """Protocol for the local snapshot store."""

    def is_stale(self, collection: str, max_age: timedelta) -> bool:
        """True when the collection has no usable timestamp or is too old."""
        ...

    def load(self, collection: str) -> Sequence[Task] | Sequence[Project]:
        """Load the last saved snapshot."""
        ...

    def save(self, collection: str, items: Sequence[Task] | Sequence[Project]) -> None:
        """Replace the snapshot and its timestamp."""
        ...
