"""Application configuration and constants."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    app_env: Literal["dev", "prod", "test"] = Field(default="dev", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # Relative paths resolve against the working directory; empty disables the file
    log_file: str | None = Field(default="logs/gateway.log", alias="LOG_FILE")

    # HTTP listener
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8090, alias="PORT", ge=1, le=65535)

    # Remote services
    classifier_url: str = Field(default="http://localhost:8080", alias="CLASSIFIER_URL")
    classify_path: str = Field(default="/classify", alias="CLASSIFY_PATH")
    dedupe_url: str = Field(default="http://localhost:8081", alias="DEDUPE_URL")
    check_path: str = Field(default="/check", alias="CHECK_PATH")

    # Transport timeout applied to every downstream call (seconds)
    request_timeout_seconds: float = Field(
        default=30.0,
        alias="REQUEST_TIMEOUT_SECONDS",
        gt=0.0,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()  # type: ignore[call-arg]
