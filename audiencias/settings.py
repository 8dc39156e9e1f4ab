from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from ``AUDIENCIAS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AUDIENCIAS_", env_file=".env", extra="ignore"
    )

    # Morning and afternoon court sessions, used when neither the request
    # nor the venue defines its own windows.
    default_work_windows: str = "08:00-12:00,13:00-18:00"
    skip_weekends: bool = True
    # Upper bound on a free-slot search range, in days.
    max_range_days: int = Field(default=90, gt=0)

    log_level: str = "INFO"
    seed_demo_data: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
