from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

MEMORY_DATABASE_URL = "sqlite://"
MEMORY_DATABASE_URLS = frozenset({MEMORY_DATABASE_URL, "sqlite:///:memory:"})


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _normalize_database_url(value: str | None, fallback: str = MEMORY_DATABASE_URL) -> str:
    raw = (value or fallback).strip() or fallback
    # Some dashboards accidentally store quoted values.
    if (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'")):
        raw = raw[1:-1].strip()

    # DataMapper-style spelling, kept so old .env files still work.
    if raw.lower() in {"memory", ":memory:", "sqlite::memory:"}:
        return MEMORY_DATABASE_URL

    return raw


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    public_host: str
    database_url: str
    db_echo: bool
    log_level: str

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_memory(self) -> bool:
        return self.database_url in MEMORY_DATABASE_URLS

    @property
    def public_url(self) -> str:
        return f"http://{self.public_host}:{self.port}/"

    def validate(self) -> None:
        """Raise early on settings the server cannot start with."""
        if not 0 < self.port < 65536:
            raise RuntimeError(f"PORT must be between 1 and 65535, got {self.port}")


def load_settings() -> Settings:
    loaded = Settings(
        host=os.getenv("HOST", "127.0.0.1").strip(),
        port=_as_int(os.getenv("PORT"), 4567),
        public_host=os.getenv("PUBLIC_HOST", "localhost").strip(),
        database_url=_normalize_database_url(os.getenv("DATABASE_URL")),
        db_echo=_as_bool(os.getenv("DB_ECHO"), True),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )
    loaded.validate()
    return loaded


settings = load_settings()
