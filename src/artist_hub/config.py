"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Artist Hub API"
    debug: bool = False
    log_level: str = "INFO"
    secret_key: str  # Required, no default

    # Database
    database_url: str = "sqlite+aiosqlite:///./artist_hub.db"

    # JWT Authentication
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30

    # Artwork storage
    artwork_storage_backend: Literal["local", "http"] = "local"
    artwork_storage_dir: str = "./artwork"
    artwork_base_url: str = "/artwork"
    artwork_storage_url: str = ""
    artwork_storage_token: str = ""
    artwork_max_bytes: int = 5 * 1024 * 1024
    placeholder_artwork_url: str = "/placeholder-artwork.png"

    # Distribution platform (takedown notifications)
    distribution_api_url: str = ""
    distribution_api_key: str = ""

    # Release lifecycle
    takedown_cancel_window_hours: int = 24

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Validate that secret_key is secure."""
        if not v:
            raise ValueError("SECRET_KEY is required")

        # In production mode, ensure secret key is strong
        debug = info.data.get("debug", False)
        if not debug:
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production mode")
            if v in ("change-me-in-production", "secret", "password", "changeme"):
                raise ValueError("SECRET_KEY must not be a common weak value")

        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("takedown_cancel_window_hours")
    @classmethod
    def validate_cancel_window(cls, v: int) -> int:
        """The takedown reversal window must be positive."""
        if v < 1:
            raise ValueError("TAKEDOWN_CANCEL_WINDOW_HOURS must be at least 1")
        return v

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if not self.distribution_api_url:
            warnings.append(
                "DISTRIBUTION_API_URL is not set - takedown notifications will be simulated"
            )

        if self.artwork_storage_backend == "http" and not self.artwork_storage_url:
            warnings.append(
                "ARTWORK_STORAGE_BACKEND is 'http' but ARTWORK_STORAGE_URL is not set - "
                "artwork uploads will fail"
            )

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
