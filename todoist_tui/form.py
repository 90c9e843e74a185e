"""
Create-task form.

Each field is a tiny state machine that only knows its own input rules;
the form moves focus between them and builds the request on submit.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from todoist_tui.matching import filter_projects
from todoist_tui.messages import KeyPress
from todoist_tui.providers import NewTask, Project

MIN_PRIORITY = 1
MAX_PRIORITY = 4
DEFAULT_PRIORITY = 1
DEFAULT_DEADLINE = "today"
DEFAULT_PROJECT_NAME = "Inbox"


class FormField(Enum):
    CONTENT = "content"
    PRIORITY = "priority"
    PROJECT = "project"
    DEADLINE = "deadline"


FIELD_ORDER = (FormField.CONTENT, FormField.PRIORITY, FormField.PROJECT, FormField.DEADLINE)


class TextField:
    """Append printable characters, backspace removes the last one."""

    def __init__(self, value: str = "") -> None:
        self.value = value

    def handle(self, key: KeyPress) -> bool:
        if key.key == "backspace":
            self.value = self.value[:-1]
            return True
        if key.printable:
            self.value += key.char
            return True
        return False


class PriorityField:
    """Left/right step the priority, clamped to [1, 4]."""

    def __init__(self, value: int = DEFAULT_PRIORITY) -> None:
        self.value = value

    def handle(self, key: KeyPress) -> bool:
        if key.key == "right":
            self.value = min(self.value + 1, MAX_PRIORITY)
            return True
        if key.key == "left":
            self.value = max(self.value - 1, MIN_PRIORITY)
            return True
        return False


class ProjectField:
    """Search string plus a wrapping selection over the matching projects."""

    def __init__(self, projects: Sequence[Project] = ()) -> None:
        self.reset(projects)

    def reset(self, projects: Sequence[Project]) -> None:
        self.projects: list[Project] = list(projects)
        self.search = ""
        self._refilter()

    def _refilter(self) -> None:
        self.matches = filter_projects(self.projects, self.search)
        self.index: int | None = 0 if self.matches else None

    @property
    def selected(self) -> Project | None:
        if self.index is None:
            return None
        return self.matches[self.index]

    @property
    def label(self) -> str:
        if self.selected is not None:
            return self.selected.name
        if self.search:
            return "No matches"
        return DEFAULT_PROJECT_NAME

    def _step(self, delta: int) -> None:
        if not self.matches:
            return
        current = self.index if self.index is not None else 0
        self.index = (current + delta) % len(self.matches)

    def handle(self, key: KeyPress) -> bool:
        if key.key in ("right", "down"):
            self._step(1)
            return True
        if key.key in ("left", "up"):
            self._step(-1)
            return True
        if key.key == "backspace":
            if self.search:
                self.search = self.search[:-1]
                self._refilter()
            return True
        if key.printable:
            self.search += key.char
            self._refilter()
            return True
        return False


class CreateTaskForm:
    """Field focus plus per-field state for the create-task overlay."""

    def __init__(self, projects: Sequence[Project] = ()) -> None:
        self._projects = list(projects)
        self.reset()

    def reset(self) -> None:
        """Back to defaults, first project preselected."""
        self.content = TextField()
        self.priority = PriorityField()
        self.project = ProjectField(self._projects)
        self.deadline = TextField(DEFAULT_DEADLINE)
        self.active = FormField.CONTENT

    def set_projects(self, projects: Sequence[Project]) -> None:
        """Replace the project list and reseed the project field."""
        self._projects = list(projects)
        self.project.reset(self._projects)

    def focus_next(self) -> None:
        i = FIELD_ORDER.index(self.active)
        self.active = FIELD_ORDER[(i + 1) % len(FIELD_ORDER)]

    def focus_previous(self) -> None:
        i = FIELD_ORDER.index(self.active)
        self.active = FIELD_ORDER[(i - 1) % len(FIELD_ORDER)]

    def _active_field(self) -> TextField | PriorityField | ProjectField:
        return {
            FormField.CONTENT: self.content,
            FormField.PRIORITY: self.priority,
            FormField.PROJECT: self.project,
            FormField.DEADLINE: self.deadline,
        }[self.active]

    def handle_key(self, key: KeyPress) -> None:
        """Route an editing key. Enter and escape belong to the controller."""
        if key.key == "tab":
            self.focus_next()
            return
        if key.key == "shift+tab":
            self.focus_previous()
            return
        # up/down cycle projects inside the project field, move focus elsewhere
        if key.key in ("up", "down") and self.active is not FormField.PROJECT:
            if key.key == "down":
                self.focus_next()
            else:
                self.focus_previous()
            return
        self._active_field().handle(key)

    @property
    def can_submit(self) -> bool:
        return bool(self.content.value.strip())

    def to_new_task(self) -> NewTask:
        selected = self.project.selected
        return NewTask(
            content=self.content.value,
            priority=self.priority.value,
            project_id=selected.id if selected else None,
            due_string=self.deadline.value,
        )
