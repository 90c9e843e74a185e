"""In-process stand-ins for the remote service and the cache."""

from __future__ import annotations

from datetime import date, timedelta

from todoist_tui.errors import CacheError, ServiceError
from todoist_tui.providers import Due, NewTask, Project, Task


class FakeService:
    """
    Deterministic TaskService.

    - Captures calls for assertions
    - Raises ServiceError for operations listed in fail_on
    """

    def __init__(
        self,
        tasks: list[Task] | None = None,
        projects: list[Project] | None = None,
        fail_on: tuple[str, ...] = (),
    ) -> None:
        self.tasks = list(tasks or [])
        self.projects = list(projects or [])
        self.fail_on = fail_on
        self.calls: list[tuple] = []

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail_on:
            raise ServiceError(f"{name} exploded", status_code=500)

    def get_tasks(self) -> list[Task]:
        self.calls.append(("get_tasks",))
        self._maybe_fail("get_tasks")
        return list(self.tasks)

    def get_projects(self) -> list[Project]:
        self.calls.append(("get_projects",))
        self._maybe_fail("get_projects")
        return list(self.projects)

    def create_task(self, task: NewTask) -> Task:
        self.calls.append(("create_task", task))
        self._maybe_fail("create_task")
        created = Task(id="new-1", content=task.content, priority=task.priority)
        self.tasks.append(created)
        return created

    def complete_task(self, task_id: str) -> None:
        self.calls.append(("complete_task", task_id))
        self._maybe_fail("complete_task")

    def delete_task(self, task_id: str) -> None:
        self.calls.append(("delete_task", task_id))
        self._maybe_fail("delete_task")


class FakeCache:
    """In-memory CacheGateway with switchable freshness and failures."""

    def __init__(self, fresh: bool = True, broken: bool = False) -> None:
        self.fresh = fresh
        self.broken = broken
        self.data: dict[str, list] = {}
        self.saved: list[str] = []

    def is_stale(self, collection: str, max_age: timedelta) -> bool:
        return not self.fresh or collection not in self.data

    def load(self, collection: str) -> list:
        if self.broken:
            raise CacheError("disk on fire")
        return list(self.data.get(collection, []))

    def save(self, collection: str, items) -> None:
        if self.broken:
            raise CacheError("disk on fire")
        self.data[collection] = list(items)
        self.saved.append(collection)


TODAY = date(2024, 5, 15)

PROJECTS = (
    Project(id="p1", name="Inbox"),
    Project(id="p2", name="Work"),
    Project(id="p3", name="Home"),
)


def make_task(
    task_id: str,
    days_from_today: int | None = 0,
    priority: int = 1,
    content: str | None = None,
    project_id: str = "p1",
) -> Task:
    """Task due `days_from_today` relative to TODAY; None means no due date."""
    due = None
    if days_from_today is not None:
        due = Due(date=(TODAY + timedelta(days=days_from_today)).isoformat())
    return Task(
        id=task_id,
        content=content or f"task {task_id}",
        project_id=project_id,
        priority=priority,
        due=due,
        url=f"https://todoist.com/showTask?id={task_id}",
    )
