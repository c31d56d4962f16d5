"""Pydantic Settings for the Paperless MCP server.

Both naming conventions are accepted for the connection variables:
PAPERLESS_BASE_URL or PAPERLESS_URL, PAPERLESS_API_TOKEN or PAPERLESS_TOKEN.
The settings object is frozen and built once at startup, then handed to the
client; nothing reads the environment at call time.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaperlessSettings(BaseSettings):
    """Server configuration validated from environment variables."""

    # Backend connection
    base_url: str = Field(
        validation_alias=AliasChoices("PAPERLESS_BASE_URL", "PAPERLESS_URL", "base_url"),
    )
    api_token: str = Field(
        min_length=1,
        validation_alias=AliasChoices("PAPERLESS_API_TOKEN", "PAPERLESS_TOKEN", "api_token"),
    )
    api_version: int = Field(
        default=9,
        ge=1,
        validation_alias=AliasChoices("PAPERLESS_API_VERSION", "api_version"),
    )

    # Tool surface
    max_page_size: int = Field(
        default=100,
        ge=1,
        validation_alias=AliasChoices("MAX_PAGE_SIZE", "max_page_size"),
    )
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("MCP_HOST", "host"),
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("MCP_PORT", "port"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    # Timeouts and retries
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices("PAPERLESS_REQUEST_TIMEOUT_SECONDS", "request_timeout_seconds"),
    )
    upload_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        validation_alias=AliasChoices("PAPERLESS_UPLOAD_TIMEOUT_SECONDS", "upload_timeout_seconds"),
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        validation_alias=AliasChoices("PAPERLESS_MAX_RETRIES", "max_retries"),
    )
    upload_max_retries: int = Field(
        default=3,
        ge=1,
        validation_alias=AliasChoices("PAPERLESS_UPLOAD_MAX_RETRIES", "upload_max_retries"),
    )

    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value
