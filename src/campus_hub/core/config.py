"""Application settings for the Campus Hub service."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration values."""

    model_config = SettingsConfigDict(
        env_prefix="CAMPUS_HUB_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    persistence_backend: Literal["json", "sql"] = Field(
        default="json",
        description="Durable medium backing the entity store.",
    )
    data_path: Path = Field(
        default=Path("campus_hub_state.json"),
        description="Location of the JSON state file for the json backend.",
    )
    database_url: str = Field(
        default="sqlite:///./campus_hub.db",
        description="SQLAlchemy database URL for the sql backend.",
    )
    degraded_writes: Literal["reject", "accept"] = Field(
        default="reject",
        description="Whether mutations are kept in memory when the durable medium cannot be written.",
    )
    sync_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Polling interval for changes made to the medium by other processes.",
    )
    leaderboard_limit: int = Field(default=50, ge=1, le=500)
    mentor_points_threshold: int = Field(default=300, ge=0)
    allowed_email_domain: Optional[str] = Field(
        default=None,
        description="When set, sign-in is limited to addresses under this domain.",
    )
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
