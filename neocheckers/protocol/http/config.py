from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...search.service import Difficulty


class AppConfig(BaseSettings):
    """Runtime settings for the HTTP service.

    Loaded from ``NEOCHECKERS_*`` environment variables; empty values fall back
    to the defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="NEOCHECKERS_",
        env_ignore_empty=True,
        extra="ignore",
    )

    history_path: Optional[str] = Field(
        default=None, description="JSON file for completed games; in-memory when unset"
    )
    default_difficulty: Difficulty = Difficulty.MEDIUM
    think_delay_ms: int = Field(default=0, ge=0, le=10_000)
    log_level: str = "INFO"
