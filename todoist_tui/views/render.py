"""
Rich renderables for every view mode.

Pure functions of controller state; nothing here feeds back into it.
"""

from __future__ import annotations

from typing import Sequence

from rich.text import Text

from todoist_tui.classify import is_overdue, split_sections
from todoist_tui.controller import Controller, ViewMode
from todoist_tui.form import FormField
from todoist_tui.providers import Task
from todoist_tui.shortcuts import KeyLabels
from todoist_tui.theme import Theme

VALID_COLUMNS = ("priority", "task", "project")
DEFAULT_COLUMNS = ("task", "project")

PRIORITY_TEXT = {4: "P1", 3: "P2", 2: "P3", 1: "P4"}
PRIORITY_DESCRIPTION = {
    4: "P1 (Urgent)",
    3: "P2 (High)",
    2: "P3 (Normal)",
    1: "P4 (Low)",
}

TITLE = "📋 Today's Tasks & Overdue"


def priority_label(priority: int) -> str:
    return PRIORITY_TEXT.get(priority, "P4")


def priority_description(priority: int) -> str:
    return PRIORITY_DESCRIPTION.get(priority, PRIORITY_DESCRIPTION[1])


def column_widths(width: int) -> tuple[int, int, int]:
    """(priority, task, project) widths for a terminal of the given width."""
    available = width - 8
    priority_width = 8
    project_width = 20
    task_width = available - priority_width - project_width - 6
    if task_width < 20:
        task_width = 20
        project_width = 15
    return priority_width, task_width, project_width


def wrap_text(text: str, width: int) -> list[str]:
    """Word-wrap text to width; single words longer than width are kept whole."""
    if len(text) <= width:
        return [text]
    words = text.split()
    if not words:
        return [text]

    lines: list[str] = []
    current = ""
    for word in words:
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current += " " + word
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(width - 3, 0)] + "..."


def header_lines(columns: Sequence[str], width: int) -> tuple[str, str]:
    """Column header and separator line for the selected columns."""
    priority_width, task_width, project_width = column_widths(width)
    headers: list[str] = []
    separators: list[str] = []
    for col in columns:
        if col == "priority":
            headers.append("PRIORITY".ljust(priority_width))
            separators.append("─" * priority_width)
        elif col == "task":
            headers.append("TASK".ljust(task_width))
            separators.append("─" * task_width)
        elif col == "project":
            headers.append("PROJECT")
            separators.append("─" * project_width)
    return "  ".join(headers), "  ".join(separators)


def _task_rows(
    task: Task,
    project_name: str,
    columns: Sequence[str],
    width: int,
    selected: bool,
    theme: Theme,
) -> Text:
    priority_width, task_width, project_width = column_widths(width)
    content_lines = wrap_text(task.content, task_width) or [""]
    color = theme.priority_color(task.priority)
    rows = Text()

    for line_no, line in enumerate(content_lines):
        row = Text("    ")
        cells: list[Text] = []
        for col in columns:
            if col == "priority":
                value = priority_label(task.priority) if line_no == 0 else ""
                cells.append(Text(value.ljust(priority_width), style=color))
            elif col == "task":
                cells.append(Text(line.ljust(task_width), style=color))
            elif col == "project":
                value = truncate(project_name, project_width) if line_no == 0 else ""
                cells.append(Text(value.ljust(project_width), style=theme.project))
        row.append(Text("  ").join(cells))
        if selected:
            row.stylize(theme.selection, 4)
        rows.append(row)
        rows.append("\n")
    return rows


def render_body(controller: Controller, columns: Sequence[str], theme: Theme) -> Text:
    """Main screen: title plus loading/error text or the task sections."""
    out = Text.assemble((f"  {TITLE}\n\n", theme.title))

    if controller.mode is ViewMode.ERROR:
        out.append(f"  Error: {controller.error}\n\nPress Ctrl+C to quit", style=theme.error)
        return out
    if controller.mode is ViewMode.LOADING:
        out.append("  Loading tasks...\n\nPress Ctrl+C to quit", style=theme.muted)
        return out

    if not controller.display:
        out.append("    🎉 No tasks due today! Great job!\n", style=theme.task)
    else:
        overdue, due_today = split_sections(controller.display, controller.today)
        header, separator = header_lines(columns, controller.width)
        index = 0
        for title, section in (("⚠️ Overdue Tasks", overdue), ("📅 Today's Tasks", due_today)):
            if not section:
                continue
            out.append(f"  {title}\n", style=theme.title)
            out.append(f"    {header}\n    {separator}\n", style=theme.header)
            for task in section:
                out.append(
                    _task_rows(
                        task,
                        controller.project_name(task.project_id),
                        columns,
                        controller.width,
                        index == controller.selected,
                        theme,
                    )
                )
                index += 1
            out.append("\n")

    if controller.notice:
        out.append(f"\n  {controller.notice}\n", style=theme.error)
    return out


def render_help(controller: Controller, labels: KeyLabels) -> str:
    if controller.display:
        return (
            "↑/↓ or j/k: navigate • Enter/Space: details • e: complete • "
            f"{labels.delete} • o: open • q: new task • r: refresh • ESC/Ctrl+C: quit"
        )
    return "Press 'r' to refresh, 'q' for new task, ESC/Ctrl+C to quit"


def render_popup(controller: Controller, labels: KeyLabels, theme: Theme) -> Text:
    task = controller.selected_task
    out = Text.assemble(("📋 Task Details\n\n", theme.title))
    if task is None:
        return out

    def field(name: str, value: str) -> None:
        out.append(f"{name}: ", style=theme.field_label)
        out.append(f"{value}\n\n")

    field("Title", task.content)
    field("Priority", priority_description(task.priority))
    field("Project", controller.project_name(task.project_id))

    if task.due is not None:
        due = task.due.date
        if task.due.string:
            due += f" ({task.due.string})"
        if is_overdue(task, controller.today):
            due += " ⚠️ OVERDUE"
    else:
        due = "No due date"
    field("Due Date", due)

    if task.description:
        out.append("Description:\n", style=theme.field_label)
        out.append("\n".join(wrap_text(task.description, 50)) + "\n\n")
    if task.labels:
        field("Labels", ", ".join(task.labels))

    out.append(
        f"Press 'e' to complete • {labels.delete} • 'o' to open in Todoist • ESC to close",
        style=theme.muted,
    )
    return out


def render_form(controller: Controller, theme: Theme) -> Text:
    form = controller.form
    out = Text.assemble(("📝 Create New Task\n\n", theme.title))

    def label(field_: FormField, name: str) -> None:
        arrow = "→" if form.active is field_ else " "
        out.append(f"{arrow} {name}: ", style=theme.field_label)

    def cursor(field_: FormField) -> str:
        return "│" if form.active is field_ and not controller.creating else ""

    label(FormField.CONTENT, "Task")
    if controller.creating:
        out.append(f"{form.content.value} (Creating...)\n\n")
    else:
        out.append(f"{form.content.value}{cursor(FormField.CONTENT)}\n\n")

    label(FormField.PRIORITY, "Priority")
    out.append(f"{priority_description(form.priority.value)}\n\n")

    label(FormField.PROJECT, "Project")
    project = form.project
    if form.active is FormField.PROJECT:
        out.append(f"Search: {project.search}│\n")
        if project.matches:
            position = (project.index or 0) + 1
            out.append(f"Selected: ◀ {project.label} ▶ ({position}/{len(project.matches)})")
        else:
            out.append("No matching projects")
    else:
        out.append(project.label)
    out.append("\n\n")

    label(FormField.DEADLINE, "Deadline")
    out.append(f"{form.deadline.value}{cursor(FormField.DEADLINE)}\n\n")

    if controller.creating:
        out.append("Creating task...", style=theme.muted)
    else:
        hint = {
            FormField.PRIORITY: "←/→: change priority",
            FormField.PROJECT: "Type: search • ←/→/↑/↓: select • Backspace: clear",
        }.get(form.active, "Type to edit field")
        out.append(f"Tab: navigate • Enter: create • ESC: cancel\n{hint}", style=theme.muted)
    if controller.notice:
        out.append(f"\n\n{controller.notice}", style=theme.error)
    return out


def render_delete_confirm(controller: Controller, theme: Theme) -> Text:
    task = controller.delete_target_task
    out = Text.assemble(("⚠️ Delete Task\n\n", theme.title))
    out.append("Task: ", style=theme.field_label)
    out.append(f"{task.content if task else ''}\n\n")
    out.append("Are you sure you want to permanently delete this task?\n")
    out.append("This action cannot be undone.\n\n")
    out.append("Press 'y' to confirm • 'n' or ESC to cancel", style=theme.muted)
    return out


def render_overlay(controller: Controller, labels: KeyLabels, theme: Theme) -> Text | None:
    """Overlay for the active modal mode, or None in list/loading/error."""
    if controller.mode is ViewMode.POPUP:
        return render_popup(controller, labels, theme)
    if controller.mode is ViewMode.CREATE_FORM:
        return render_form(controller, theme)
    if controller.mode is ViewMode.DELETE_CONFIRM:
        return render_delete_confirm(controller, theme)
    return None
