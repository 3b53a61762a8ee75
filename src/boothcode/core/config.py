"""Configuration management for BoothCode.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BOOTHCODE_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application Settings
    app_name: str = "BoothCode"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    workers: int = 1

    # Commerce platform (collection service)
    shop_domain: str = Field(
        default="",
        validation_alias=AliasChoices("BOOTHCODE_SHOP_DOMAIN", "SHOP"),
        description="Shop domain, e.g. my-shop.myshopify.com",
    )
    admin_api_token: str = Field(
        default="",
        validation_alias=AliasChoices("BOOTHCODE_ADMIN_API_TOKEN", "SHOPIFY_ADMIN_TOKEN"),
        description="Admin API access token",
    )
    admin_api_version: str = "2025-01"
    metafield_namespace: str = "custom"
    metafield_key: str = "booth_s_number"
    metafield_type: str = "single_line_text_field"

    # Seller directory
    seller_directory_url: str = "https://mvmapi.webkul.com/api/v2/public/sellers.json"

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Webhooks
    webhook_secret: str | None = Field(
        default=None,
        description="Shared secret for X-Shopify-Hmac-Sha256 verification (disabled when unset)",
    )
    default_collection_title: str = "Untitled"

    # Code registry
    registry_backend: Literal["file", "database", "memory"] = "file"
    registry_path: str = "./data/used_codes.json"
    database_url: str = "sqlite+aiosqlite:///./data/boothcode.db"
    db_echo: bool = False

    # Code generation
    code_max_attempts: int = Field(default=20, ge=1)
    code_step_max: int = Field(default=37, ge=1)
    code_fallback_max_attempts: int = Field(default=1000, ge=0)

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("shop_domain")
    @classmethod
    def normalize_shop_domain(cls, v: str) -> str:
        """Strip scheme and trailing slash from the shop domain."""
        v = v.strip()
        for scheme in ("https://", "http://"):
            if v.startswith(scheme):
                v = v[len(scheme):]
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def registry_is_process_local(self) -> bool:
        """Whether the registry can only be written safely by one process."""
        if self.registry_backend in ("file", "memory"):
            return True
        return self.database_url.startswith("sqlite")

    @model_validator(mode="after")
    def validate_single_writer(self) -> "Settings":
        """Validate that a process-local registry is not used with multiple workers."""
        if self.workers > 1 and self.registry_is_process_local:
            raise ValueError(
                "The code registry requires a single writer. "
                f"Requested {self.workers} workers, but the '{self.registry_backend}' "
                "registry backend requires workers=1. "
                "Either use --workers 1 or switch to a server database."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
