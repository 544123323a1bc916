from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    tasks_file: str = "tasks.json"
    log_level: str = "INFO"
    log_dir: str = "logs"
    cleanup_days: int = 30

    @property
    def tasks_path(self) -> Path:
        return self.data_dir / self.tasks_file

    @property
    def log_path(self) -> Path:
        log_dir = Path(self.log_dir).expanduser()
        return log_dir if log_dir.is_absolute() else self.data_dir / log_dir


def load_settings() -> Settings:
    data_dir = os.getenv("PROWORK_DATA_DIR", "").strip()
    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else Path.home() / ".prowork",
        tasks_file=os.getenv("PROWORK_TASKS_FILE", "").strip() or "tasks.json",
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        cleanup_days=_env_int("PROWORK_CLEANUP_DAYS", 30),
    )


load_env()

SETTINGS = load_settings()
