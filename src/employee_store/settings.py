"""
employee_store.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    - Strict env-driven configuration (prefix `EMPSTORE_`)
    - Defaults safe for local dev
    - Single settings object wired explicitly into the app, engine and services
    """

    model_config = SettingsConfigDict(env_prefix="EMPSTORE_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "employee-store"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./employees.db"
    echo_sql: bool = False
    # Seconds a SQLite writer waits on a locked database before failing.
    sqlite_busy_timeout: float = 5.0

    # Startup hook: run the fixed demonstration sequence once tables exist.
    run_demo_on_startup: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other layer receives a `Settings` instance explicitly; only the API
# entrypoint and Alembic read the cached one.
