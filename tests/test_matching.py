"""Tests for matching.py - fuzzy project search."""

from todoist_tui.matching import filter_projects, is_subsequence
from todoist_tui.providers import Project

PROJECTS = [
    Project(id="1", name="Inbox"),
    Project(id="2", name="Work"),
    Project(id="3", name="Home"),
]


def names(projects: list[Project]) -> list[str]:
    return [p.name for p in projects]


class TestIsSubsequence:
    """Tests for is_subsequence()."""

    def test_empty_query(self) -> None:
        assert is_subsequence("", "anything")
        assert is_subsequence("", "")

    def test_in_order(self) -> None:
        assert is_subsequence("ork", "work")
        assert is_subsequence("wk", "work")

    def test_out_of_order(self) -> None:
        assert not is_subsequence("kw", "work")

    def test_repeated_characters_need_repeats(self) -> None:
        assert not is_subsequence("oo", "work")
        assert is_subsequence("oo", "books")

    def test_longer_than_text(self) -> None:
        assert not is_subsequence("works", "work")


class TestFilterProjects:
    """Tests for filter_projects()."""

    def test_empty_query_returns_all(self) -> None:
        assert filter_projects(PROJECTS, "") == PROJECTS

    def test_empty_query_returns_copy(self) -> None:
        result = filter_projects(PROJECTS, "")
        assert result is not PROJECTS

    def test_subsequence(self) -> None:
        assert names(filter_projects(PROJECTS, "ork")) == ["Work"]

    def test_case_insensitive(self) -> None:
        assert names(filter_projects(PROJECTS, "WOR")) == ["Work"]
        assert names(filter_projects(PROJECTS, "inb")) == ["Inbox"]

    def test_no_match(self) -> None:
        assert filter_projects(PROJECTS, "xyz") == []

    def test_preserves_order(self) -> None:
        # 'o' appears in all three names
        assert names(filter_projects(PROJECTS, "o")) == ["Inbox", "Work", "Home"]

    def test_empty_project_list(self) -> None:
        assert filter_projects([], "a") == []
