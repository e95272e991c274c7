# app/config.py
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: Literal["dev", "stage", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    access_log: bool = True
    feed_log_level: Optional[str] = None  # falls back to log_level

    # Feed fetching
    default_feed_url: Optional[str] = None  # used when ?feed= is not supplied
    fetch_timeout_seconds: float = 5.0
    strict_error_status: bool = False  # True = 400/502/504 instead of a flat 500

    # CORS
    cors_allow_origins: list[str] = ["*"]
    cors_allow_methods: list[str] = ["POST", "GET", "OPTIONS", "PUT", "DELETE"]
    cors_allow_headers: list[str] = [
        "Accept",
        "Content-Type",
        "Content-Length",
        "Accept-Encoding",
        "X-CSRF-Token",
        "Authorization",
    ]

    @property
    def is_dev(self) -> bool:
        return self.env == "dev" or self.debug is True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
