"""Timetable watcher configuration loaded from environment variables."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class TimetableConfig(BaseSettings):
    """Timetable watcher configuration loaded from environment variables.

    Every field maps to a TIMETABLE_<FIELD> environment variable; a .env
    file in the working directory is read too (see .env.example).
    """

    # Upstream schedule site (server-rendered HTML, one page per group)
    base_url: str = Field(
        default="https://rasps.nsuem.ru",
        description="Schedule site base URL",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds for one document fetch",
    )
    user_agent: str = Field(
        default="timetable-watch/0.1",
        description="User-Agent header sent to the schedule site",
    )

    # Refresh cadence
    request_delay_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Minimum pause between the starts of two document fetches",
    )
    refresh_interval_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Wall-clock interval between batch refresh cycles",
    )
    today_day_id: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Day slot treated as 'today' by the differencer (0=Monday)",
    )
    groups: list[str] = Field(
        default_factory=list,
        description="Group keys refreshed by the batch driver, e.g. ИС502.1",
    )

    # Snapshot cache
    cache_backend: Literal["sqlite", "json", "memory"] = Field(
        default="sqlite",
        description="Snapshot cache backend",
    )
    cache_path: str = Field(
        default="data/schedules.sqlite",
        description="SQLite database file for the sqlite backend",
    )
    state_dir: str = Field(
        default="data/state",
        description="Directory of per-group JSON files for the json backend",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "TIMETABLE_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Loaded once per process
_config: TimetableConfig | None = None


def get_config() -> TimetableConfig:
    """Get the timetable configuration singleton.

    Returns:
        TimetableConfig: Timetable configuration instance
    """
    global _config
    if _config is None:
        _config = TimetableConfig()
    return _config
