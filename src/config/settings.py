"""Application settings using Pydantic BaseSettings."""
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Deployment environment, also used to namespace the state file
    app_env: str = "dev"

    # Records cache
    records_state_path: str = ""
    records_update_interval_sec: int = Field(default=60 * 60, gt=0)
    records_corrupt_state_policy: Literal["abort", "refetch"] = "abort"

    # WCA API
    wca_api_url: str = "https://www.worldcubeassociation.org/api/v0"
    wca_api_timeout: float = 30.0

    log_level: str = "INFO"

    # API
    cors_allow_origins: list[str] = ["*"]

    @property
    def state_path(self) -> Path:
        """Path of the durable records snapshot for this environment."""
        if self.records_state_path:
            return Path(self.records_state_path)
        return Path("tmp") / f"record-store.{self.app_env}.data"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
