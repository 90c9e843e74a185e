"""Tests for config.py and logging_setup.py."""

import logging
from datetime import timedelta
from pathlib import Path

import pytest

from todoist_tui.client import DEFAULT_TIMEOUT_SECONDS, TODOIST_API_BASE
from todoist_tui.config import Settings, default_cache_dir
from todoist_tui.logging_setup import LOG_FILE_NAME, setup_logging

ENV_VARS = (
    "TODOIST_TOKEN",
    "TODOIST_API_BASE",
    "TODOIST_TUI_TIMEOUT_SECONDS",
    "TODOIST_TUI_CACHE_DIR",
    "TODOIST_TUI_CACHE_MAX_AGE",
    "TODOIST_TUI_REFRESH_SECONDS",
    "TODOIST_TUI_LOG_DIR",
    "TODOIST_TUI_LOG_LEVEL",
    "XDG_CACHE_HOME",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings.from_env()."""

    def test_defaults(self, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
        clean_env.setenv("HOME", str(tmp_path))
        settings = Settings.from_env()
        assert settings.token is None
        assert not settings.has_credential
        assert settings.api_base == TODOIST_API_BASE
        assert settings.request_timeout == DEFAULT_TIMEOUT_SECONDS
        assert settings.cache_max_age == timedelta(minutes=5)
        assert settings.refresh_interval == 60.0
        assert settings.cache_dir == tmp_path / ".cache" / "todoist-tui"
        assert settings.log_dir == settings.cache_dir
        assert settings.log_level == "INFO"

    def test_blank_token_is_missing(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("TODOIST_TOKEN", "   ")
        assert not Settings.from_env().has_credential

    def test_overrides(self, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
        clean_env.setenv("TODOIST_TOKEN", "abc")
        clean_env.setenv("TODOIST_API_BASE", "http://localhost:9000")
        clean_env.setenv("TODOIST_TUI_TIMEOUT_SECONDS", "5")
        clean_env.setenv("TODOIST_TUI_CACHE_DIR", str(tmp_path / "c"))
        clean_env.setenv("TODOIST_TUI_CACHE_MAX_AGE", "30")
        clean_env.setenv("TODOIST_TUI_REFRESH_SECONDS", "0")
        clean_env.setenv("TODOIST_TUI_LOG_DIR", str(tmp_path / "logs"))
        clean_env.setenv("TODOIST_TUI_LOG_LEVEL", "debug")

        settings = Settings.from_env()
        assert settings.token == "abc"
        assert settings.has_credential
        assert settings.api_base == "http://localhost:9000"
        assert settings.request_timeout == 5.0
        assert settings.cache_dir == tmp_path / "c"
        assert settings.cache_max_age == timedelta(seconds=30)
        assert settings.refresh_interval == 0.0
        assert settings.log_dir == tmp_path / "logs"
        assert settings.log_level == "DEBUG"

    def test_bad_number_falls_back(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("TODOIST_TUI_TIMEOUT_SECONDS", "soon")
        assert Settings.from_env().request_timeout == DEFAULT_TIMEOUT_SECONDS

    def test_xdg_cache_home(self, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
        clean_env.setenv("XDG_CACHE_HOME", str(tmp_path))
        assert default_cache_dir() == tmp_path / "todoist-tui"


class TestSetupLogging:
    """Tests for setup_logging()."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in handlers:
            root.addHandler(h)
        root.setLevel(level)
        logging.captureWarnings(False)

    def test_writes_to_file(self, tmp_path: Path) -> None:
        log_file = setup_logging(log_dir=tmp_path / "logs", level="debug")
        assert log_file == tmp_path / "logs" / LOG_FILE_NAME

        logging.getLogger("todoist_tui.test").info("hello %s", "world")
        for h in logging.getLogger().handlers:
            h.flush()
        assert "INFO todoist_tui.test: hello world" in log_file.read_text()

    def test_single_handler_and_quiet_http(self, tmp_path: Path) -> None:
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING
