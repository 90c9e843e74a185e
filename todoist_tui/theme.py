"""Presentation colours, built once and handed to the views."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

_PRIORITY_COLORS = MappingProxyType(
    {
        1: "#9CA3AF",  # low
        2: "#6366F1",  # normal
        3: "#F59E0B",  # high
        4: "#F97316",  # urgent
    }
)


@dataclass(frozen=True)
class Theme:
    title: str = "bold #7C3AED"
    header: str = "bold #374151"
    task: str = "#374151"
    project: str = "italic #6B7280"
    muted: str = "#6B7280"
    error: str = "#EF4444"
    selection: str = "#FFFFFF on #7C3AED"
    field_label: str = "bold #7C3AED"
    priority_colors: Mapping[int, str] = field(default_factory=lambda: _PRIORITY_COLORS)

    def priority_color(self, priority: int) -> str:
        return self.priority_colors.get(priority, self.priority_colors[1])


DEFAULT_THEME = Theme()
