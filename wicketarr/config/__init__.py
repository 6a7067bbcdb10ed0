"""Application configuration.

Single source of truth for all configuration values.
Loads from environment variables with .env file support.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# =============================================================================
# VERSION - Read from pyproject.toml (single source of truth)
# =============================================================================


def _get_version() -> str:
    """Read version - prefer pyproject.toml, fall back to installed metadata."""
    try:
        import tomllib

        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
                return data.get("project", {}).get("version", "0.0.0")
    except (OSError, KeyError, ValueError):
        pass

    # Fall back to installed package metadata (pip install without source)
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("wicketarr")
    except (ImportError, PackageNotFoundError):
        pass

    return "0.0.0"


VERSION = _get_version()

# Load .env file from project root
_PROJECT_ROOT = Path(__file__).parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"
load_dotenv(_ENV_FILE)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration singleton.

    All configuration values should be accessed through this class.
    Values are loaded from environment variables with sensible defaults.
    """

    # Upstream match data (CricAPI)
    CRICKET_API_KEY: str | None = os.getenv("CRICKET_API_KEY")
    CRICKET_API_BASE_URL: str = os.getenv("CRICKET_API_BASE_URL", "https://api.cricapi.com/v1")
    CRICKET_API_TIMEOUT: int = _env_int("CRICKET_API_TIMEOUT", 25)
    CRICKET_API_PAGE_SIZE: int = _env_int("CRICKET_API_PAGE_SIZE", 25)

    # Scheduling
    POLL_SECONDS: int = _env_int("POLL_SECONDS", 600)
    IDLE_BACKOFF_SECONDS: int = _env_int("IDLE_BACKOFF_SECONDS", 1800)
    DAILY_SUMMARY_HHMM: str = os.getenv("DAILY_SUMMARY_HHMM", "2100")
    POST_BATCH_SIZE: int = _env_int("POST_BATCH_SIZE", 8)
    TICK_CRON: str = os.getenv("TICK_CRON", "* * * * *")
    SCHEDULER_ENABLED: bool = _env_bool("SCHEDULER_ENABLED", True)

    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", str(_PROJECT_ROOT / "data" / "wicketarr.db"))

    # Daily times (HHMM) are wall-clock times in this zone
    _timezone_from_env: str | None = os.getenv("SUMMARY_TIMEZONE") or os.getenv("TZ")

    @classmethod
    def get_timezone_str(cls) -> str:
        """Get the summary timezone as a string, falling back to UTC if invalid."""
        if cls._timezone_from_env:
            try:
                ZoneInfo(cls._timezone_from_env)
                return cls._timezone_from_env
            except (KeyError, ValueError):
                pass
        return "UTC"

    @classmethod
    def get_timezone(cls) -> ZoneInfo:
        """Get the summary timezone as a ZoneInfo object."""
        return ZoneInfo(cls.get_timezone_str())


@dataclass(frozen=True)
class SchedulerSettings:
    """Snapshot of the process-level values consumed by the tick scheduler.

    Immutable so a tick never sees settings change halfway through.
    """

    poll_seconds: int = 600
    idle_backoff_seconds: int = 1800
    default_daily_time: str = "2100"
    post_batch_size: int = 8
    throttle_grace_seconds: int = 5
    tick_cron: str = "* * * * *"
    timezone: str = "UTC"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def get_scheduler_settings() -> SchedulerSettings:
    """Build SchedulerSettings from the environment-backed Config."""
    return SchedulerSettings(
        poll_seconds=Config.POLL_SECONDS,
        idle_backoff_seconds=Config.IDLE_BACKOFF_SECONDS,
        default_daily_time=Config.DAILY_SUMMARY_HHMM,
        post_batch_size=max(1, Config.POST_BATCH_SIZE),
        tick_cron=Config.TICK_CRON,
        timezone=Config.get_timezone_str(),
    )


def get_user_timezone() -> ZoneInfo:
    """Get the configured summary timezone."""
    return Config.get_timezone()
