"""Scheduler settings.

Loaded from ``SRS_*`` environment variables, with keyword overrides for
callers that configure the engine in code.
"""
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DECK_PATH = Path.home() / ".srs_scheduler" / "deck.json"


class SchedulerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SRS_", extra="ignore")

    policy: Literal["sm2", "difficulty"] = "sm2"
    # None keeps only the 1.3 floor; 2.5 matches the stricter variant
    max_ease_factor: Optional[float] = Field(default=None, ge=1.3)
    session_limit: int = Field(default=50, ge=0)
    forecast_days: int = Field(default=7, ge=1)
    deck_path: Path = DEFAULT_DECK_PATH
    log_level: str = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).upper()


def get_settings(**overrides) -> SchedulerSettings:
    return SchedulerSettings(**overrides)
