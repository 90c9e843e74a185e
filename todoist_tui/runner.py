"""
Execution of controller commands.

CommandRunner.execute() is called from a worker thread. It talks to the
service and the cache and returns exactly one result message, never
touching controller state itself.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable

from todoist_tui.cache import PROJECTS, TASKS
from todoist_tui.errors import CacheError, ServiceError
from todoist_tui.messages import (
    CacheLoaded,
    Command,
    CompleteTask,
    CreateTask,
    DeleteTask,
    FetchProjects,
    FetchTasks,
    LoadCache,
    OpenUrl,
    OperationFailed,
    ProjectsLoaded,
    RefreshSkipped,
    Result,
    TaskCompleted,
    TaskCreated,
    TaskDeleted,
    TasksLoaded,
)
from todoist_tui.providers import CacheGateway, NewTask, TaskService

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs one command against the service and cache."""

    def __init__(
        self,
        service: TaskService,
        cache: CacheGateway | None,
        open_url: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self._service = service
        self._cache = cache
        self._open_url = open_url
        self._dispatch: dict[type, Callable] = {
            LoadCache: self._load_cache,
            FetchTasks: self._fetch_tasks,
            FetchProjects: self._fetch_projects,
            CreateTask: self._create_task,
            CompleteTask: self._complete_task,
            DeleteTask: self._delete_task,
            OpenUrl: self._open,
        }

    def execute(self, command: Command) -> Result | None:
        """Run a command. None means there is nothing to report back."""
        handler = self._dispatch.get(type(command))
        if handler is None:
            raise TypeError(f"Not a background command: {command!r}")
        try:
            return handler(command)
        except (ServiceError, CacheError) as e:
            logger.error("%s failed: %s", command.operation, e)
            return OperationFailed(command.operation, str(e))

    # ---- Cache ------------------------------------------------------------

    def _load_fresh(self, collection: str, max_age) -> tuple | None:
        if self._cache is None:
            return None
        try:
            if self._cache.is_stale(collection, max_age):
                logger.debug("Cached %s are stale", collection)
                return None
            return tuple(self._cache.load(collection))
        except CacheError as e:
            logger.warning("Ignoring %s cache: %s", collection, e)
            return None

    def _save(self, collection: str, items) -> None:
        if self._cache is None:
            return
        try:
            self._cache.save(collection, items)
        except CacheError as e:
            logger.warning("Could not save %s cache: %s", collection, e)

    def _load_cache(self, command: LoadCache) -> CacheLoaded:
        return CacheLoaded(
            tasks=self._load_fresh(TASKS, command.max_age),
            projects=self._load_fresh(PROJECTS, command.max_age),
        )

    def _still_fresh(self, collection: str, if_stale) -> bool:
        if if_stale is None or self._cache is None:
            return False
        return not self._cache.is_stale(collection, if_stale)

    # ---- Service ----------------------------------------------------------

    def _fetch_tasks(self, command: FetchTasks) -> TasksLoaded | RefreshSkipped:
        if self._still_fresh(TASKS, command.if_stale):
            return RefreshSkipped(TASKS)
        tasks = self._service.get_tasks()
        logger.info("Fetched %d tasks", len(tasks))
        self._save(TASKS, tasks)
        return TasksLoaded(tuple(tasks))

    def _fetch_projects(self, command: FetchProjects) -> ProjectsLoaded | RefreshSkipped:
        if self._still_fresh(PROJECTS, command.if_stale):
            return RefreshSkipped(PROJECTS)
        projects = self._service.get_projects()
        logger.info("Fetched %d projects", len(projects))
        self._save(PROJECTS, projects)
        return ProjectsLoaded(tuple(projects))

    def _create_task(self, command: CreateTask) -> TaskCreated:
        task = self._service.create_task(
            NewTask(
                content=command.content,
                priority=command.priority,
                project_id=command.project_id,
                due_string=command.due_string,
            )
        )
        return TaskCreated(task)

    def _complete_task(self, command: CompleteTask) -> TaskCompleted:
        self._service.complete_task(command.task_id)
        logger.info("Completed task %s", command.task_id)
        return TaskCompleted(command.task_id)

    def _delete_task(self, command: DeleteTask) -> TaskDeleted:
        self._service.delete_task(command.task_id)
        logger.info("Deleted task %s", command.task_id)
        return TaskDeleted(command.task_id)

    def _open(self, command: OpenUrl) -> OperationFailed | None:
        if self._open_url(command.url):
            return None
        logger.warning("No browser could open %s", command.url)
        return OperationFailed(command.operation, f"Could not open {command.url}")
