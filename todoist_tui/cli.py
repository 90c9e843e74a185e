"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from todoist_tui.config import get_settings
from todoist_tui.errors import ConfigurationError
from todoist_tui.logging_setup import setup_logging
from todoist_tui.views.render import DEFAULT_COLUMNS, VALID_COLUMNS


def parse_columns(raw: str) -> tuple[str, ...]:
    """Split and validate a comma-separated column list."""
    columns = tuple(col.strip().lower() for col in raw.split(","))
    for col in columns:
        if col not in VALID_COLUMNS:
            raise ConfigurationError(
                f"Invalid column: {col}. Valid columns are: {', '.join(VALID_COLUMNS)}"
            )
    return columns


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todoist-tui",
        description="Today's and overdue Todoist tasks in the terminal",
    )
    parser.add_argument(
        "--columns",
        default=",".join(DEFAULT_COLUMNS),
        help="Comma-separated list of columns to display (priority,task,project)",
    )
    parser.add_argument(
        "--no-auto-refresh",
        action="store_true",
        help="Do not refresh stale data in the background",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        columns = parse_columns(args.columns)
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return 1

    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, level=settings.log_level)

    from todoist_tui.app import run

    run(settings=settings, columns=columns, auto_refresh=not args.no_auto_refresh)
    return 0


if __name__ == "__main__":
    sys.exit(main())
