# src/mission_control/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Google's own variables (GOOGLE_CLOUD_PROJECT, GOOGLE_APPLICATION_CREDENTIALS) are honored as fallbacks.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "MISSION"

STORE_BACKENDS = ("firestore", "local")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv() -> None:
    """Load a local .env (never overrides variables already set)."""
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


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


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data (ignored by git) ----
    data_dir: Path

    # ---- Task store ----
    store_backend: str
    tasks_collection: str
    local_store_path: Path

    # ---- Firestore ----
    firestore_project: str | None
    firestore_database: str | None
    firestore_credentials_path: Path | None

    # ---- Countdown ----
    tick_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Mission Control").strip() or "Mission Control"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/mission_control"))

        store_backend = _env(_k("STORE_BACKEND"), "firestore").strip().lower()
        if store_backend not in STORE_BACKENDS:
            store_backend = "firestore"
        tasks_collection = _env(_k("TASKS_COLLECTION"), "tasks").strip() or "tasks"
        local_store_path = _env_path(_k("LOCAL_STORE_PATH"), data_dir / "tasks.json")

        firestore_project = _first_env(_k("FIRESTORE_PROJECT"), "GOOGLE_CLOUD_PROJECT", default=None)
        firestore_database = _first_env(_k("FIRESTORE_DATABASE"), default=None)
        creds = _first_env(_k("FIRESTORE_CREDENTIALS"), "GOOGLE_APPLICATION_CREDENTIALS", default=None)
        firestore_credentials_path = Path(creds).expanduser() if creds else None

        tick_interval_seconds = _env_float(_k("TICK_INTERVAL_SECONDS"), 1.0)
        if tick_interval_seconds <= 0:
            tick_interval_seconds = 1.0

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_backend=store_backend,
            tasks_collection=tasks_collection,
            local_store_path=local_store_path,
            firestore_project=firestore_project.strip() if firestore_project else None,
            firestore_database=firestore_database.strip() if firestore_database else None,
            firestore_credentials_path=firestore_credentials_path,
            tick_interval_seconds=tick_interval_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_dotenv()
    return Settings.from_env()
