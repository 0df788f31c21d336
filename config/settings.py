"""Pydantic settings for tokenlaw configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOKENLAW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    storage_backend: Literal["memory", "disk"] = Field(
        default="disk",
        description="Key-value backend for rebalancer and registry records",
    )
    storage_dir: Path = Field(default=Path(".cache/tokenlaw"), description="Disk storage directory")

    # Logging
    log_level: str = Field(default="WARNING", description="Root log level for the CLI")

    @field_validator("storage_dir", mode="before")
    @classmethod
    def parse_storage_dir(cls, v):
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Upper-case level names so `info` and `INFO` both work."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def ensure_storage_dir(self) -> Path:
        """Ensure storage directory exists and return it."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        return self.storage_dir


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
