"""Single screen: task list body, modal overlay layer and help line."""

from __future__ import annotations

from typing import Sequence

from textual import events
from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.screen import Screen
from textual.widgets import Static

from todoist_tui.controller import Controller
from todoist_tui.messages import KeyPress
from todoist_tui.shortcuts import KeyLabels
from todoist_tui.theme import Theme
from todoist_tui.views.render import render_body, render_help, render_overlay


class BodyScroll(VerticalScroll, can_focus=False):
    """Scroll container that never takes focus, so every key reaches the screen."""


class TaskListScreen(Screen):
    """Renders controller state; forwards every key to the app."""

    DEFAULT_CSS = """
    TaskListScreen {
        layers: base overlay;
    }

    #body {
        padding: 1 0;
    }

    #help {
        dock: bottom;
        height: auto;
        padding: 0 2;
        color: $text-muted;
    }

    #overlay-layer {
        layer: overlay;
        width: 100%;
        height: 100%;
        align: center middle;
        display: none;
    }

    #overlay-layer.visible {
        display: block;
    }

    #overlay {
        width: 60;
        max-width: 90%;
        height: auto;
        border: round $accent;
        padding: 1 2;
        background: $surface;
    }
    """

    def __init__(
        self,
        columns: Sequence[str],
        labels: KeyLabels,
        theme: Theme,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._columns = tuple(columns)
        self._labels = labels
        self._theme = theme

    def compose(self) -> ComposeResult:
        with BodyScroll():
            yield Static(id="body")
        yield Static(id="help")
        with Container(id="overlay-layer"):
            yield Static(id="overlay")

    def on_mount(self) -> None:
        self.show(self.app.controller)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        char = event.character if event.is_printable else None
        self.app.submit_key(KeyPress(event.key, char))

    def show(self, controller: Controller) -> None:
        """Redraw everything from the controller's current state."""
        self.query_one("#body", Static).update(
            render_body(controller, self._columns, self._theme)
        )
        self.query_one("#help", Static).update(render_help(controller, self._labels))

        overlay = render_overlay(controller, self._labels, self._theme)
        layer = self.query_one("#overlay-layer", Container)
        if overlay is None:
            layer.remove_class("visible")
        else:
            self.query_one("#overlay", Static).update(overlay)
            layer.add_class("visible")
