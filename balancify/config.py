# balancify/config.py

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from starlette.config import Config

# --- Configuration (Load from Environment) ---

# Values in a local .env file are used when present; OS environment variables win.
config = Config(".env" if os.path.exists(".env") else None)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./balancify.db"


def _async_database_url(url: str) -> str:
    """Rewrites a plain Postgres URL for the async psycopg driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    api_key: str = ""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-pro"
    insight_timeout_seconds: float = 20.0
    session_ttl_hours: int = 24
    log_level: str = "INFO"
    log_file: Optional[str] = None
    cors_origins: List[str] = field(default_factory=list)


def load_settings() -> Settings:
    """Reads the service configuration from the environment / .env file."""
    origins = config("CORS_ORIGINS", default="")
    return Settings(
        database_url=_async_database_url(config("DATABASE_URL", default=DEFAULT_DATABASE_URL)),
        api_key=config("BALANCIFY_API_KEY", default=""),
        gemini_api_key=config("GEMINI_API_KEY", default=""),
        gemini_model=config("GEMINI_MODEL", default="gemini-2.5-pro"),
        insight_timeout_seconds=config("INSIGHT_TIMEOUT_SECONDS", cast=float, default=20.0),
        session_ttl_hours=config("SESSION_TTL_HOURS", cast=int, default=24),
        log_level=config("LOG_LEVEL", default="INFO"),
        log_file=config("LOG_FILE", default=None),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
