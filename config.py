# config.py
"""Application settings read from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "EXPENSE_TRACKER_"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name, default)


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = _env(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Runtime configuration for the API."""

    APP_NAME = "Expense Tracker API"
    SESSION_COOKIE = "session"
    JWT_ALGORITHM = "HS256"

    def __init__(self) -> None:
        self.SECRET_KEY = _env("SECRET_KEY", "replace-me")
        self.DATABASE_URL = _env("DATABASE_URL", "sqlite:///./expenses.db")
        self.DEV_MODE = _env_bool("DEV_MODE", default=True)
        self.SESSION_MAX_AGE = int(_env("SESSION_MAX_AGE", str(60 * 60 * 24 * 7)))
        self.LOG_LEVEL = (_env("LOG_LEVEL", "INFO") or "INFO").upper()
        self.LOG_DIR = _env("LOG_DIR")
        self.HOST = _env("HOST", "127.0.0.1")
        self.PORT = int(_env("PORT", "8000"))
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError(f"{ENV_PREFIX}SECRET_KEY must be set in non-dev mode.")

    @property
    def environment(self) -> str:
        return "development" if self.DEV_MODE else "production"

    def engine_options(self) -> dict:
        """Engine kwargs; SQLite connections are shared across request threads."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


@lru_cache
def get_settings() -> Settings:
    return Settings()
