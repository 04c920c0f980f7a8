"""
Core configuration and settings for the law-firm site backend.
"""

import json
from functools import lru_cache
from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Lawsite"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = Field(default=["http://localhost:5173", "http://localhost:8080"])

    # Supabase (the frontend build uses the VITE_ prefixed names)
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "VITE_SUPABASE_URL"),
    )
    supabase_anon_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "VITE_SUPABASE_ANON_KEY"),
    )
    supabase_service_role_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_SERVICE_ROLE_KEY"),
    )
    request_timeout: float = 15.0

    # Public site
    site_url: str = Field(
        default="https://libertylawfirm.net",
        validation_alias=AliasChoices("SITE_URL", "VITE_SITE_URL"),
    )
    dist_dir: str = "dist/spa"
    sitemap_path: str = "dist/spa/sitemap.xml"

    # Call tracking (DNI)
    dni_poll_interval: float = 0.25  # seconds between footer sync checks
    dni_timeout: float = 10.0
    dni_refresh_delay: float = 0.1
    dni_refresh_throttle: float = 2.0

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.server_key)

    @property
    def server_key(self) -> str:
        """Service role key when available, otherwise the anon key."""
        return self.supabase_service_role_key or self.supabase_anon_key

    @property
    def missing_supabase_env(self) -> list[str]:
        missing = []
        if not self.supabase_url:
            missing.append("VITE_SUPABASE_URL")
        if not self.supabase_anon_key:
            missing.append("VITE_SUPABASE_ANON_KEY")
        if not self.supabase_service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from JSON string if needed."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, treat as comma-separated
                return [s.strip() for s in v.split(",")]
        return v

    @field_validator("site_url", "supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
