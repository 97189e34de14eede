# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Client configuration via environment variables and .env files."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logvault import __version__
from logvault.core.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOGVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Credentials and endpoint
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL

    # Delivery
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    enable_nonce: bool = False
    total_timeout: float | None = None

    # Local development mode
    local_mode: bool | Literal["auto"] = False
    environment: str = "production"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    def resolve_local_mode(self) -> bool:
        if self.local_mode == "auto":
            return self.environment.lower() == "development"
        return bool(self.local_mode)


def get_settings() -> Settings:
    return Settings()


class ClientConfig(BaseModel):
    """Immutable per-client configuration handed to the delivery engine."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    enable_nonce: bool = False
    total_timeout: float | None = Field(default=None, gt=0)
    client_version: str = __version__
    user_agent: str = f"logvault-python/{__version__}"

    @field_validator("base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def events_url(self) -> str:
        return f"{self.base_url}/v1/events"

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientConfig:
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            enable_nonce=settings.enable_nonce,
            total_timeout=settings.total_timeout,
        )
