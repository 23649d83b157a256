"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad input."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Hustle"
    DB_FILENAME = "hustle.db"
    DEFAULT_SESSION_TTL_HOURS = 24 * 7
    DEFAULT_MIN_PASSWORD_LENGTH = 6
    TESTING = False

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.SECRET_KEY = os.getenv("HUSTLE_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("HUSTLE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HUSTLE_DATABASE_URL", self._build_sqlite_url())
        self.SESSION_TTL_HOURS = _env_int(
            "HUSTLE_SESSION_TTL_HOURS", self.DEFAULT_SESSION_TTL_HOURS
        )
        self.MIN_PASSWORD_LENGTH = _env_int(
            "HUSTLE_MIN_PASSWORD_LENGTH", self.DEFAULT_MIN_PASSWORD_LENGTH
        )
        if self.SESSION_TTL_HOURS <= 0:
            raise ValueError("HUSTLE_SESSION_TTL_HOURS must be positive.")
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HUSTLE_SECRET_KEY must be set in non-dev mode.")

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.SESSION_TTL_HOURS)

    def _resolve_data_dir(self, override: Path | str | None = None) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = override or os.getenv("HUSTLE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            # load_month fans queries out to worker threads
            engine_options["connect_args"] = {"check_same_thread": False}
            if self.is_memory_database:
                # every new connection would open its own empty database
                engine_options["poolclass"] = StaticPool
        return engine_options

    @property
    def is_memory_database(self) -> bool:
        url = make_url(self.DATABASE_URL)
        if not url.drivername.startswith("sqlite"):
            return False
        database = url.database or ""
        return database in ("", ":memory:") or "mode=memory" in str(url)


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite and the Flask test client."""

    TESTING = True
    __test__ = False  # not a pytest test class

    def __init__(self, data_dir: Path | str | None = None) -> None:
        super().__init__(data_dir)
        self.DATABASE_URL = self._build_sqlite_url()
        self.SECRET_KEY = "test-secret"
