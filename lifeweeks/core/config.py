"""
Application configuration using Pydantic Settings.

Centralizes all configuration with environment variable support.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_BODY_BYTES = 50 * 1024 * 1024  # 50 MB, fits a 2x-scale grid PNG


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: str = "development"
    log_level: str = "INFO"
    log_to_file: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: str = "*"
    public_base_url: str = ""

    # Front-end application shell
    static_dir: str = "dist"

    # Share links
    snapshot_ttl_seconds: float = 3600
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @field_validator("snapshot_ttl_seconds")
    @classmethod
    def ttl_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("snapshot_ttl_seconds must be > 0")
        return v

    @property
    def cors_origin_list(self) -> list:
        """Comma-separated CORS_ORIGINS as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_test(self) -> bool:
        return self.environment == "test"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
