from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_version: str = Field(default="v1", alias="API_VERSION")

    enable_recovery_router: bool = Field(default=True, alias="ENABLE_RECOVERY_ROUTER")
    enable_request_tracing: bool = Field(default=True, alias="ENABLE_REQUEST_TRACING")
    enable_contact_signals: bool = Field(default=True, alias="ENABLE_CONTACT_SIGNALS")

    # Structured events are handed to a queue listener thread when enabled
    structured_log_async: bool = Field(default=True, alias="STRUCTURED_LOG_ASYNC")

    # Crisis resources (US defaults)
    emergency_number: str = Field(default="911", alias="CRISIS_EMERGENCY_NUMBER")
    crisis_lifeline: str = Field(default="988", alias="CRISIS_LIFELINE_NUMBER")
    samhsa_helpline: str = Field(default="1-800-662-4357", alias="SAMHSA_HELPLINE_NUMBER")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
