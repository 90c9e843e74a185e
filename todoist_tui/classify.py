"""Due-today / overdue classification of tasks."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from todoist_tui.providers import Task


def due_day(task: Task) -> date | None:
    """Calendar due date of a task, if it has a usable one."""
    if task.due is None:
        return None
    return task.due.day


def is_overdue(task: Task, today: date) -> bool:
    """True when the task was due strictly before today."""
    day = due_day(task)
    return day is not None and day < today


def is_due_today(task: Task, today: date) -> bool:
    day = due_day(task)
    return day is not None and day == today


def classify(tasks: Iterable[Task], today: date) -> list[Task]:
    """
    Order the working set for display.

    Only tasks with a due date on or before today are kept. Overdue tasks
    come first, oldest due date first; tasks due today follow, highest
    priority first. Both sorts are stable, so ties keep fetch order.
    """
    overdue: list[Task] = []
    due_today: list[Task] = []
    for task in tasks:
        day = due_day(task)
        if day is None or day > today:
            continue
        if day < today:
            overdue.append(task)
        else:
            due_today.append(task)

    overdue.sort(key=lambda t: due_day(t))
    due_today.sort(key=lambda t: t.priority, reverse=True)
    return overdue + due_today


def split_sections(ordered: list[Task], today: date) -> tuple[list[Task], list[Task]]:
    """Split a classified list back into (overdue, due_today) sections."""
    overdue = [t for t in ordered if is_overdue(t, today)]
    rest = [t for t in ordered if not is_overdue(t, today)]
    return overdue, rest
