"""
Service configuration loaded from environment variables and .env files.
"""
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Checked in order, first existing file wins
ENV_PATHS = [
    _PROJECT_ROOT / "config" / ".env",
    _PROJECT_ROOT / ".env",
]


def load_environment() -> None:
    """Load the first .env file found, falling back to the default lookup."""
    for env_path in ENV_PATHS:
        if env_path.exists():
            load_dotenv(env_path)
            break
    else:
        load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Runtime settings for the scoring service."""
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: List[str] = field(default_factory=list)
    rate_limit: str = "60/minute"
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"
    parallel_scoring: bool = False
    scoring_workers: int = 4

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("CORS_ORIGINS", "")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8000),
            debug=_env_bool("DEBUG"),
            cors_origins=[o.strip() for o in raw_origins.split(",") if o.strip()],
            rate_limit=os.getenv("RATE_LIMIT", "60/minute"),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            log_format=os.getenv("LOG_FORMAT", "json").strip().lower(),
            parallel_scoring=_env_bool("PARALLEL_SCORING"),
            scoring_workers=max(1, _env_int("SCORING_WORKERS", 4)),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings, reading the environment on first use."""
    load_environment()
    return Settings.from_env()
