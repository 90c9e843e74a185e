"""Fuzzy subsequence matching over projects."""

from __future__ import annotations

from typing import Sequence

from todoist_tui.providers import Project


def is_subsequence(query: str, text: str) -> bool:
    """True when every character of query appears in text, in order."""
    it = iter(text)
    return all(ch in it for ch in query)


def filter_projects(projects: Sequence[Project], query: str) -> list[Project]:
    """
    Case-insensitive subsequence filter, preserving input order.

    An empty query returns every project. No match yields an empty list.
    """
    if not query:
        return list(projects)
    needle = query.lower()
    return [p for p in projects if is_subsequence(needle, p.name.lower())]
