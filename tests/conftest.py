"""Shared fixtures."""

from __future__ import annotations

import pytest

from todoist_tui.controller import Controller
from todoist_tui.messages import ProjectsLoaded, TasksLoaded

from .fakes import PROJECTS, TODAY, FakeCache, FakeService, make_task


@pytest.fixture()
def controller() -> Controller:
    """Controller with a credential and a frozen clock, before start()."""
    return Controller(has_credential=True, today=lambda: TODAY)


@pytest.fixture()
def loaded(controller: Controller) -> Controller:
    """
    Controller in List mode.

    Display order: a (overdue), b (today, P1), c (today, P3).
    """
    controller.start()
    controller.update(
        TasksLoaded(
            (
                make_task("a", -1, priority=1),
                make_task("c", 0, priority=2),
                make_task("b", 0, priority=4),
            )
        )
    )
    controller.update(ProjectsLoaded(PROJECTS))
    return controller


@pytest.fixture()
def service() -> FakeService:
    return FakeService(tasks=[make_task("a", -1)], projects=list(PROJECTS))


@pytest.fixture()
def cache() -> FakeCache:
    return FakeCache()
