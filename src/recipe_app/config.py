"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = "http://localhost:8080"
    request_timeout_seconds: float = 15
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    flash_dismiss_seconds: int = 5
    redirect_delay_seconds: float = 1.5
    session_cookie_secure: bool = False
    browser_session_ttl_seconds: int = 86400
    form_session_ttl_seconds: int = 3600
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
