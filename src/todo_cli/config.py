# src/todo_cli/config.py

"""Settings loaded from environment variables (+ optional .env).

- One frozen Settings object per process, built by get_settings().
- Everything has a default; no configuration is required to run.
- Commands receive Settings explicitly so tests can point them at tmp dirs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"
APP_DIR_NAME = "todo-cli"
DATA_FILE_NAME = ".todo_data.json"
LOG_FILE_NAME = "todo.log"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def default_data_dir() -> Path:
    """$XDG_DATA_HOME/todo-cli, falling back to ~/.local/share/todo-cli."""
    xdg = os.getenv("XDG_DATA_HOME")
    base = Path(xdg).expanduser() if xdg and xdg.strip() else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data paths ----
    data_dir: Path
    data_file: Path
    log_dir: Path

    @property
    def log_file(self) -> Path:
        return self.log_dir / LOG_FILE_NAME

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), APP_DIR_NAME).strip() or APP_DIR_NAME
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), default_data_dir())
        data_file = _env_path(_k("DATA_FILE"), data_dir / DATA_FILE_NAME)
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            data_file=data_file,
            log_dir=log_dir,
        )


_SETTINGS: Settings | None = None


def get_settings(*, reload: bool = False) -> Settings:
    global _SETTINGS
    if _SETTINGS is None or reload:
        # Real environment variables win over .env entries.
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
