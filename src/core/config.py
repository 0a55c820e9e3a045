"""Application configuration via Pydantic settings."""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration object loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Products API"
    debug: bool = False
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    database_url: str = Field("sqlite+aiosqlite:///./products.db", alias="DATABASE_URL")

    auth_enabled: bool = Field(False, alias="AUTH_ENABLED")
    jwt_secret_key: str = Field("", alias="JWT_SECRET_KEY")

    store_timeout_seconds: float = Field(5.0, alias="STORE_TIMEOUT_SECONDS")
    cors_allow_origins: str = Field("*", alias="CORS_ALLOW_ORIGINS")

    @field_validator("auth_enabled", mode="before")
    @classmethod
    def _only_literal_true_enables_auth(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value) == "true"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache(1)
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()


settings = get_settings()
