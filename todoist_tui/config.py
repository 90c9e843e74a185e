"""Settings loaded once from environment variables (+ optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from todoist_tui.client import DEFAULT_TIMEOUT_SECONDS, TODOIST_API_BASE

ENV_PREFIX = "TODOIST_TUI"
APP_NAME = "todoist-tui"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def default_cache_dir() -> Path:
    base = os.getenv("XDG_CACHE_HOME")
    root = Path(base).expanduser() if base else Path.home() / ".cache"
    return root / APP_NAME


@dataclass(frozen=True)
class Settings:
    token: str | None
    api_base: str
    request_timeout: float
    cache_dir: Path
    cache_max_age: timedelta
    refresh_interval: float
    log_dir: Path
    log_level: str

    @property
    def has_credential(self) -> bool:
        return bool(self.token)

    @staticmethod
    def from_env() -> Settings:
        token = _env("TODOIST_TOKEN").strip() or None
        cache_dir = _env_path(_k("CACHE_DIR"), default_cache_dir())
        return Settings(
            token=token,
            api_base=_env("TODOIST_API_BASE", TODOIST_API_BASE),
            request_timeout=_env_float(_k("TIMEOUT_SECONDS"), DEFAULT_TIMEOUT_SECONDS),
            cache_dir=cache_dir,
            cache_max_age=timedelta(seconds=_env_float(_k("CACHE_MAX_AGE"), 300.0)),
            refresh_interval=_env_float(_k("REFRESH_SECONDS"), 60.0),
            log_dir=_env_path(_k("LOG_DIR"), cache_dir),
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read .env (without overriding the real environment) and build Settings once."""
    load_dotenv(override=False)
    return Settings.from_env()
