"""
Application configuration using Pydantic Settings.

Settings are read from environment variables prefixed with ``CLASSROOMOS_``
(or a local ``.env`` file). A cached instance is provided via get_settings().

Example:
    >>> from classroomos.config import get_settings
    >>> get_settings().db_path
    'classroomos.db'
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Console settings.

    Attributes:
        environment: Current environment.
        debug: Enable debug mode (colored console logs).
        log_level: Logging level.
        app_title: Window / app bar title.
        db_path: Path of the sqlite database file.
        seed_demo_data: Insert the demo branches, batches and staff on first start.
        activity_count: Number of activities the planner generates per run.
        default_room: Room pre-filled in the activity generator.
        default_teachers: Teachers pre-filled in the activity generator.
        late_grace_minutes: Minutes after batch start still counted as Present.
    """

    model_config = SettingsConfigDict(
        env_prefix="CLASSROOMOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    app_title: str = "ClassroomOS"

    db_path: str = "classroomos.db"
    seed_demo_data: bool = True

    activity_count: int = Field(default=8, ge=1, le=60)
    default_room: str = "B7"
    default_teachers: str = "John Doe, Sarah Smith"
    late_grace_minutes: int = Field(default=5, ge=0)

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Production consoles never run in debug mode."""
        if self.environment == "production" and self.debug:
            raise ValueError("debug must be disabled in production")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Call clear_settings_cache() to reload settings from the environment.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache."""
    get_settings.cache_clear()
