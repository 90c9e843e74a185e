"""
Message vocabulary crossing the controller boundary.

Three closed families:
- events: user input and UI notifications delivered to the controller
- results: outcomes of background work, delivered back as events
- commands: background work the controller asks the app to run
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Union

from todoist_tui.providers import Project, Task


# ---- UI events -------------------------------------------------------------


@dataclass(frozen=True)
class KeyPress:
    """A key press. char is set only for printable input."""

    key: str
    char: str | None = None

    @property
    def printable(self) -> bool:
        return self.char is not None and len(self.char) == 1 and self.char.isprintable()


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    """Periodic timer notification."""


# ---- Background results ----------------------------------------------------


@dataclass(frozen=True)
class CacheLoaded:
    """Fresh cached snapshots; None for a collection that was stale or missing."""

    tasks: tuple[Task, ...] | None
    projects: tuple[Project, ...] | None


@dataclass(frozen=True)
class TasksLoaded:
    tasks: tuple[Task, ...]


@dataclass(frozen=True)
class ProjectsLoaded:
    projects: tuple[Project, ...]


@dataclass(frozen=True)
class TaskCreated:
    task: Task


@dataclass(frozen=True)
class TaskCompleted:
    task_id: str


@dataclass(frozen=True)
class TaskDeleted:
    task_id: str


@dataclass(frozen=True)
class RefreshSkipped:
    """A conditional refresh found its collection still fresh."""

    collection: str


@dataclass(frozen=True)
class OperationFailed:
    operation: str
    detail: str


Result = Union[
    CacheLoaded,
    TasksLoaded,
    ProjectsLoaded,
    TaskCreated,
    TaskCompleted,
    TaskDeleted,
    RefreshSkipped,
    OperationFailed,
]

Event = Union[KeyPress, Resize, Tick, Result]

RESULT_TYPES = (
    CacheLoaded,
    TasksLoaded,
    ProjectsLoaded,
    TaskCreated,
    TaskCompleted,
    TaskDeleted,
    RefreshSkipped,
    OperationFailed,
)
EVENT_TYPES = (KeyPress, Resize, Tick) + RESULT_TYPES


# ---- Commands --------------------------------------------------------------

FETCH_TASKS = "fetch_tasks"
FETCH_PROJECTS = "fetch_projects"
LOAD_CACHE = "load_cache"
CREATE_TASK = "create_task"
COMPLETE_TASK = "complete_task"
DELETE_TASK = "delete_task"
OPEN_URL = "open_url"


@dataclass(frozen=True)
class LoadCache:
    """Seed the UI from fresh cached snapshots."""

    max_age: timedelta
    operation: str = LOAD_CACHE


@dataclass(frozen=True)
class FetchTasks:
    """Fetch tasks; when if_stale is set, only if the cached copy is older."""

    if_stale: timedelta | None = None
    operation: str = FETCH_TASKS


@dataclass(frozen=True)
class FetchProjects:
    if_stale: timedelta | None = None
    operation: str = FETCH_PROJECTS


@dataclass(frozen=True)
class CreateTask:
    content: str
    priority: int
    project_id: str | None
    due_string: str
    operation: str = CREATE_TASK


@dataclass(frozen=True)
class CompleteTask:
    task_id: str
    operation: str = COMPLETE_TASK


@dataclass(frozen=True)
class DeleteTask:
    task_id: str
    operation: str = DELETE_TASK


@dataclass(frozen=True)
class OpenUrl:
    url: str
    operation: str = OPEN_URL


@dataclass(frozen=True)
class Quit:
    """Terminate the application."""


Command = Union[
    LoadCache,
    FetchTasks,
    FetchProjects,
    CreateTask,
    CompleteTask,
    DeleteTask,
    OpenUrl,
    Quit,
]
