"""
Todoist TUI Application.

Main entry point for the terminal user interface. The app is a thin shell
around the Controller: it feeds it keys, timer ticks, resizes and worker
results, runs the commands it returns on worker threads, and redraws.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Sequence

from textual import events
from textual.app import App
from textual.binding import Binding
from textual.message import Message
from textual.worker import Worker, WorkerState

from todoist_tui.cache import FileCache
from todoist_tui.client import TodoistClient
from todoist_tui.config import Settings, get_settings
from todoist_tui.controller import Controller
from todoist_tui.messages import (
    Command,
    Event,
    KeyPress,
    OperationFailed,
    Quit,
    Resize,
    Result,
    Tick,
)
from todoist_tui.providers import CacheGateway, TaskService
from todoist_tui.runner import CommandRunner
from todoist_tui.shortcuts import KeyLabels, key_labels
from todoist_tui.theme import DEFAULT_THEME, Theme
from todoist_tui.views.render import DEFAULT_COLUMNS
from todoist_tui.views.task_list import TaskListScreen

logger = logging.getLogger(__name__)


class CommandFinished(Message):
    """Posted from a worker thread with the result of one command."""

    def __init__(self, result: Result) -> None:
        super().__init__()
        self.result = result


class TodoistApp(App):
    """Main Todoist TUI application."""

    TITLE = "Todoist"
    SUB_TITLE = "Today & Overdue"

    BINDINGS = [
        Binding("ctrl+c", "force_quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        settings: Settings,
        columns: Sequence[str] = DEFAULT_COLUMNS,
        auto_refresh: bool = True,
        service: TaskService | None = None,
        cache: CacheGateway | None = None,
        labels: KeyLabels | None = None,
        theme: Theme = DEFAULT_THEME,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._settings = settings
        self._columns = tuple(columns)
        self._auto_refresh = auto_refresh
        self._labels = labels or key_labels()
        self._theme = theme
        self._client: TodoistClient | None = None
        self._runner: CommandRunner | None = None
        self._screen: TaskListScreen | None = None
        self.controller = Controller(
            has_credential=settings.has_credential,
            cache_max_age=settings.cache_max_age,
        )

        # no credential, no collaborators: nothing may run in the background
        if settings.has_credential:
            if service is None:
                self._client = TodoistClient(
                    settings.token,
                    base_url=settings.api_base,
                    timeout=settings.request_timeout,
                )
                service = self._client
            if cache is None:
                cache = FileCache(settings.cache_dir)
            self._runner = CommandRunner(service, cache)

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self._screen = TaskListScreen(self._columns, self._labels, self._theme)
        self.push_screen(self._screen)
        self.controller.width = self.size.width
        self.controller.height = self.size.height

        self._dispatch(self.controller.start())
        if self._auto_refresh and self._runner and self._settings.refresh_interval > 0:
            self.set_interval(self._settings.refresh_interval, self._on_tick)
        self._redraw()

    def on_unmount(self) -> None:
        if self._client is not None:
            self._client.close()

    # ---- Event intake ------------------------------------------------------

    def submit_key(self, key: KeyPress) -> None:
        self._deliver(key)

    def on_resize(self, event: events.Resize) -> None:
        self._deliver(Resize(event.size.width, event.size.height))

    def _on_tick(self) -> None:
        self._deliver(Tick())

    def on_command_finished(self, message: CommandFinished) -> None:
        self._deliver(message.result)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Anything a worker raised past the runner still becomes a failure result."""
        if event.state == WorkerState.ERROR:
            logger.error(
                "Worker %s crashed", event.worker.name, exc_info=event.worker.error
            )
            self._deliver(OperationFailed(event.worker.name, str(event.worker.error)))

    def action_force_quit(self) -> None:
        self.submit_key(KeyPress("ctrl+c"))

    # ---- Plumbing ----------------------------------------------------------

    def _deliver(self, event: Event) -> None:
        self._dispatch(self.controller.update(event))
        self._redraw()

    def _dispatch(self, commands: list[Command]) -> None:
        for command in commands:
            if isinstance(command, Quit):
                self.exit()
                return
            if self._runner is None:
                logger.warning("Dropping %s: no service configured", command)
                continue
            self.run_worker(
                partial(self._execute, command),
                name=command.operation,
                group=command.operation,
                description=repr(command),
                thread=True,
                exit_on_error=False,
            )

    def _execute(self, command: Command) -> None:
        # runs on a worker thread; post_message is thread-safe
        result = self._runner.execute(command)
        if result is not None:
            self.post_message(CommandFinished(result))

    def _redraw(self) -> None:
        if self._screen is not None and self._screen.is_mounted:
            self._screen.show(self.controller)


def run(
    settings: Settings | None = None,
    columns: Sequence[str] = DEFAULT_COLUMNS,
    auto_refresh: bool = True,
) -> None:
    """Run the TUI application."""
    app = TodoistApp(settings or get_settings(), columns=columns, auto_refresh=auto_refresh)
    app.run()


if __name__ == "__main__":
    run()
