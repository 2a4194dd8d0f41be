"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify bearer JWT credentials", min_length=1
    )
    jwt_algorithm: str = Field(
        default="HS256", description="Algorithm used to sign and verify JWT credentials"
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before issued access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC", description="Timezone used for timestamps exposed to clients"
    )
    initial_notifications_limit: int = Field(
        default=10,
        description="Unread notifications pushed to a client right after it connects",
        gt=0,
    )
    default_page_size: int = Field(
        default=20, description="Page size used when a listing omits a limit", gt=0
    )
    max_page_size: int = Field(
        default=100, description="Upper bound applied to client supplied limits", gt=0
    )
    notification_retention_days: int = Field(
        default=30,
        description="Age in days after which read notifications are purged",
        gt=0,
    )
    cleanup_interval_minutes: int = Field(
        default=60,
        description="Minutes between retention sweeps; 0 disables the periodic sweep",
        ge=0,
    )
    cors_origins: str = Field(
        default="http://localhost:4200",
        description="Comma separated origins allowed to call the HTTP API from a browser",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Return ``cors_origins`` split into individual origins."""

        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> "Settings":
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE cannot be greater than MAX_PAGE_SIZE")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
