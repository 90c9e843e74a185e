"""
Application controller.

Owns the view mode, the task/project lists, the selection and the
create-task form. Every input arrives through update(); the return value is
the list of commands the app must run in the background. Results of those
commands come back through update() as well, so all state changes happen on
the UI thread in event order.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterable

from todoist_tui.cache import PROJECTS, TASKS
from todoist_tui.classify import classify
from todoist_tui.form import CreateTaskForm
from todoist_tui.messages import (
    CREATE_TASK,
    FETCH_PROJECTS,
    FETCH_TASKS,
    CacheLoaded,
    Command,
    CompleteTask,
    CreateTask,
    DeleteTask,
    Event,
    FetchProjects,
    FetchTasks,
    KeyPress,
    LoadCache,
    OpenUrl,
    OperationFailed,
    ProjectsLoaded,
    Quit,
    RefreshSkipped,
    Resize,
    TaskCompleted,
    TaskCreated,
    TaskDeleted,
    TasksLoaded,
    Tick,
)
from todoist_tui.providers import Project, Task

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "TODOIST_TOKEN environment variable is required"
UNKNOWN_PROJECT = "Unknown Project"
DEFAULT_CACHE_MAX_AGE = timedelta(minutes=5)

QUIT_KEYS = ("ctrl+c",)
# alt+backspace reaches Textual as ctrl+w on most terminals
DELETE_KEYS = ("alt+backspace", "ctrl+w", "delete")

COLLECTION_OF = {FETCH_TASKS: TASKS, FETCH_PROJECTS: PROJECTS}


class ViewMode(Enum):
    LOADING = "loading"
    ERROR = "error"
    LIST = "list"
    POPUP = "popup"
    CREATE_FORM = "create_form"
    DELETE_CONFIRM = "delete_confirm"


INTERACTIVE_MODES = (
    ViewMode.LIST,
    ViewMode.POPUP,
    ViewMode.CREATE_FORM,
    ViewMode.DELETE_CONFIRM,
)


def _command_name(key: KeyPress) -> str:
    """Printable keys by character, everything else by key name."""
    return key.char if key.printable else key.key


class Controller:
    """Top-level view-state machine."""

    def __init__(
        self,
        *,
        has_credential: bool,
        cache_max_age: timedelta = DEFAULT_CACHE_MAX_AGE,
        today: Callable[[], date] = date.today,
        width: int = 80,
        height: int = 24,
    ) -> None:
        self.mode = ViewMode.LOADING
        self.error: str | None = None
        self.notice: str | None = None
        self.tasks: list[Task] = []
        self.display: list[Task] = []
        self.projects: list[Project] = []
        self.selected: int | None = None
        self.form = CreateTaskForm()
        self.creating = False
        self.delete_target: str | None = None
        self.width = width
        self.height = height
        self.has_loaded = False

        self._cache_max_age = cache_max_age
        self._today = today
        # collections still needed before Loading can give way to List
        self._awaiting: set[str] = set()
        # collections with a fetch in flight
        self._pending: set[str] = set()
        # collections the service has answered at least once; cache can't override
        self._remote: set[str] = set()

        self._handlers: dict[type, Callable[..., list[Command]]] = {
            KeyPress: self._on_key,
            Resize: self._on_resize,
            Tick: self._on_tick,
            CacheLoaded: self._on_cache_loaded,
            TasksLoaded: self._on_tasks_loaded,
            ProjectsLoaded: self._on_projects_loaded,
            TaskCreated: self._on_task_created,
            TaskCompleted: self._on_task_removed,
            TaskDeleted: self._on_task_removed,
            RefreshSkipped: self._on_refresh_skipped,
            OperationFailed: self._on_operation_failed,
        }

        # a missing credential is the one error no later result can clear
        self._fatal = not has_credential
        if self._fatal:
            self.mode = ViewMode.ERROR
            self.error = MISSING_TOKEN_MESSAGE

    # ---- Public API -------------------------------------------------------

    def start(self) -> list[Command]:
        """Initial commands. Nothing runs when startup already failed."""
        if self.mode is ViewMode.ERROR:
            return []
        self._awaiting = {TASKS, PROJECTS}
        self._pending = {TASKS, PROJECTS}
        return [LoadCache(self._cache_max_age), FetchTasks(), FetchProjects()]

    def update(self, event: Event) -> list[Command]:
        """Apply one event and return the commands it triggers."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unhandled event: {event!r}")
        return handler(event)

    def handled_types(self) -> frozenset[type]:
        return frozenset(self._handlers)

    @property
    def today(self) -> date:
        return self._today()

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._pending)

    @property
    def selected_task(self) -> Task | None:
        if self.selected is None or not 0 <= self.selected < len(self.display):
            return None
        return self.display[self.selected]

    @property
    def delete_target_task(self) -> Task | None:
        for task in self.display:
            if task.id == self.delete_target:
                return task
        return None

    def project_name(self, project_id: str) -> str:
        for project in self.projects:
            if project.id == project_id:
                return project.name
        return UNKNOWN_PROJECT

    # ---- List bookkeeping -------------------------------------------------

    def _clamp_selection(self) -> None:
        if not self.display:
            self.selected = None
            if self.mode is ViewMode.POPUP:
                self.mode = ViewMode.LIST
        elif self.selected is None:
            self.selected = 0
        elif self.selected >= len(self.display):
            self.selected = len(self.display) - 1

    def _set_tasks(self, tasks: Iterable[Task]) -> None:
        self.tasks = list(tasks)
        self.display = classify(self.tasks, self.today)
        self._awaiting.discard(TASKS)
        if self.mode is ViewMode.DELETE_CONFIRM and self.delete_target_task is None:
            self.mode = ViewMode.LIST
            self.delete_target = None
        self._clamp_selection()

    def _set_projects(self, projects: Iterable[Project]) -> None:
        self.projects = list(projects)
        self._awaiting.discard(PROJECTS)
        # don't yank the project out from under an open form
        if self.mode is not ViewMode.CREATE_FORM:
            self.form.set_projects(self.projects)

    def _maybe_finish_loading(self) -> None:
        if self._awaiting:
            return
        if self.mode is ViewMode.ERROR and not self._fatal:
            # data arrived after an early failure; demote the error to a notice
            self.notice = self.error
            self.error = None
        elif self.mode is not ViewMode.LOADING:
            return
        self.mode = ViewMode.LIST
        self.has_loaded = True
        self._clamp_selection()

    def _refresh(self) -> list[Command]:
        self.mode = ViewMode.LOADING
        self._awaiting = {TASKS, PROJECTS}
        self._pending |= {TASKS, PROJECTS}
        return [FetchTasks(), FetchProjects()]

    # ---- Results ----------------------------------------------------------

    def _on_cache_loaded(self, msg: CacheLoaded) -> list[Command]:
        if msg.tasks is not None and TASKS not in self._remote:
            self._set_tasks(msg.tasks)
        if msg.projects is not None and PROJECTS not in self._remote:
            self._set_projects(msg.projects)
        self._maybe_finish_loading()
        return []

    def _on_tasks_loaded(self, msg: TasksLoaded) -> list[Command]:
        self._remote.add(TASKS)
        self._pending.discard(TASKS)
        self._set_tasks(msg.tasks)
        self._maybe_finish_loading()
        return []

    def _on_projects_loaded(self, msg: ProjectsLoaded) -> list[Command]:
        self._remote.add(PROJECTS)
        self._pending.discard(PROJECTS)
        self._set_projects(msg.projects)
        self._maybe_finish_loading()
        return []

    def _on_task_created(self, msg: TaskCreated) -> list[Command]:
        logger.info("Created task %s", msg.task.id)
        self.creating = False
        self.form.set_projects(self.projects)
        self.form.reset()
        if self.mode is ViewMode.CREATE_FORM:
            self.mode = ViewMode.LIST
        # refetch rather than splice, the server owns the new task's fields
        self._pending.add(TASKS)
        return [FetchTasks()]

    def _on_task_removed(self, msg: TaskCompleted | TaskDeleted) -> list[Command]:
        task_id = msg.task_id
        if not any(t.id == task_id for t in self.tasks) and not any(
            t.id == task_id for t in self.display
        ):
            return []

        current = self.selected_task
        self.tasks = [t for t in self.tasks if t.id != task_id]
        self.display = [t for t in self.display if t.id != task_id]

        if self.mode is ViewMode.POPUP and current is not None and current.id == task_id:
            self.mode = ViewMode.LIST
        if self.mode is ViewMode.DELETE_CONFIRM and self.delete_target == task_id:
            self.mode = ViewMode.LIST
            self.delete_target = None
        self._clamp_selection()
        return []

    def _on_refresh_skipped(self, msg: RefreshSkipped) -> list[Command]:
        self._pending.discard(msg.collection)
        return []

    def _on_operation_failed(self, msg: OperationFailed) -> list[Command]:
        collection = COLLECTION_OF.get(msg.operation)
        if collection is not None:
            self._pending.discard(collection)
        if msg.operation == CREATE_TASK:
            self.creating = False

        if not self.has_loaded:
            if self.mode is not ViewMode.ERROR:
                self.mode = ViewMode.ERROR
                self.error = msg.detail
            return []

        self.notice = msg.detail
        if self.mode is ViewMode.LOADING:
            self._awaiting.clear()
            self.mode = ViewMode.LIST
            self._clamp_selection()
        return []

    # ---- UI events --------------------------------------------------------

    def _on_resize(self, msg: Resize) -> list[Command]:
        self.width = msg.width
        self.height = msg.height
        return []

    def _on_tick(self, msg: Tick) -> list[Command]:
        if self.mode not in INTERACTIVE_MODES:
            return []
        # the date may have rolled over since the last classification
        self.display = classify(self.tasks, self.today)
        self._clamp_selection()

        commands: list[Command] = []
        if TASKS not in self._pending:
            self._pending.add(TASKS)
            commands.append(FetchTasks(if_stale=self._cache_max_age))
        if PROJECTS not in self._pending:
            self._pending.add(PROJECTS)
            commands.append(FetchProjects(if_stale=self._cache_max_age))
        return commands

    def _on_key(self, key: KeyPress) -> list[Command]:
        if key.key in QUIT_KEYS:
            return [Quit()]

        if self.mode in (ViewMode.LOADING, ViewMode.ERROR):
            return [Quit()] if key.key == "escape" else []

        self.notice = None
        if self.mode is ViewMode.DELETE_CONFIRM:
            return self._delete_confirm_key(key)
        if self.mode is ViewMode.CREATE_FORM:
            return self._form_key(key)
        if key.key in DELETE_KEYS:
            return self._request_delete()
        if self.mode is ViewMode.POPUP:
            return self._popup_key(key)
        return self._list_key(key)

    def _list_key(self, key: KeyPress) -> list[Command]:
        name = _command_name(key)
        if name == "escape":
            return [Quit()]
        if name == "r":
            if self.mode is not ViewMode.LOADING and self.error is None:
                return self._refresh()
        elif name in ("up", "k"):
            self._move_selection(-1)
        elif name in ("down", "j"):
            self._move_selection(1)
        elif name in ("enter", " ", "space"):
            if self.selected_task is not None:
                self.mode = ViewMode.POPUP
        elif name in ("o", "O"):
            return self._open_selected()
        elif name in ("e", "E"):
            return self._complete_selected()
        elif name in ("q", "Q"):
            self._open_form()
        return []

    def _popup_key(self, key: KeyPress) -> list[Command]:
        name = _command_name(key)
        if name == "escape":
            self.mode = ViewMode.LIST
        elif name in ("o", "O"):
            return self._open_selected()
        elif name in ("e", "E"):
            return self._complete_selected()
        elif name in ("q", "Q"):
            self._open_form()
        return []

    def _form_key(self, key: KeyPress) -> list[Command]:
        if self.creating:
            return []
        if key.key == "escape":
            self.form.reset()
            self.mode = ViewMode.LIST
            return []
        if key.key == "enter":
            if not self.form.can_submit:
                return []
            self.creating = True
            new_task = self.form.to_new_task()
            return [
                CreateTask(
                    content=new_task.content,
                    priority=new_task.priority,
                    project_id=new_task.project_id,
                    due_string=new_task.due_string,
                )
            ]
        self.form.handle_key(key)
        return []

    def _delete_confirm_key(self, key: KeyPress) -> list[Command]:
        name = _command_name(key)
        if name in ("y", "Y"):
            target = self.delete_target
            self.delete_target = None
            self.mode = ViewMode.LIST
            return [DeleteTask(target)] if target else []
        if name in ("n", "N", "escape"):
            self.delete_target = None
            self.mode = ViewMode.LIST
        return []

    # ---- Actions ----------------------------------------------------------

    def _move_selection(self, delta: int) -> None:
        if not self.display:
            return
        current = self.selected if self.selected is not None else 0
        self.selected = (current + delta) % len(self.display)

    def _open_form(self) -> None:
        if self.creating:
            return
        self.form.set_projects(self.projects)
        self.form.reset()
        self.mode = ViewMode.CREATE_FORM

    def _request_delete(self) -> list[Command]:
        task = self.selected_task
        if task is None:
            return []
        self.delete_target = task.id
        self.mode = ViewMode.DELETE_CONFIRM
        return []

    def _complete_selected(self) -> list[Command]:
        task = self.selected_task
        if task is None:
            return []
        return [CompleteTask(task.id)]

    def _open_selected(self) -> list[Command]:
        task = self.selected_task
        if task is None or not task.url:
            return []
        return [OpenUrl(task.url)]
