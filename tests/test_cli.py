"""Tests for cli.py - argument parsing."""

import pytest

from todoist_tui import cli
from todoist_tui.errors import ConfigurationError


class TestParseColumns:
    """Tests for parse_columns()."""

    def test_valid(self) -> None:
        assert cli.parse_columns("priority,task,project") == ("priority", "task", "project")

    def test_whitespace_and_case(self) -> None:
        assert cli.parse_columns(" Task , PROJECT") == ("task", "project")

    def test_invalid(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid column: due"):
            cli.parse_columns("task,due")


class TestMain:
    """Tests for main()."""

    def test_invalid_column_exits_1(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["--columns", "nope"]) == 1
        assert "Invalid column: nope" in capsys.readouterr().err

    def test_defaults(self) -> None:
        args = cli.build_parser().parse_args([])
        assert args.columns == "task,project"
        assert not args.no_auto_refresh
