# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Upstream ===
    package_name: str = "@varlet/ui"
    registry_url: str = "https://registry.npmjs.org"
    web_types_url: str = "https://unpkg.com/{package}@{version}/web-types.json"
    request_timeout_seconds: float = 10.0
    user_agent: str = "varletmeta"

    # === Resolution / staleness ===
    latest_ttl_seconds: int = 300
    degraded_max_age_seconds: int = 3600

    # === Cache ===
    cache_backend: Literal["json", "memory"] = "json"
    cache_root: Path = Path("~/.varlet-mcp")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        return v

    @field_validator("latest_ttl_seconds", "degraded_max_age_seconds")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("ttl values must be >= 0")
        return v

    @field_validator("registry_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if "{version}" not in self.web_types_url:
            errors.append("WEB_TYPES_URL must contain a {version} placeholder")

        if not self.package_name.strip():
            errors.append("PACKAGE_NAME must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    def web_types_url_for(self, version: str) -> str:
        """Build the web-types URL for one concrete version."""
        return self.web_types_url.format(package=self.package_name, version=version)

    def registry_url_for(self, version: str) -> str:
        """Build the registry metadata URL for a version or dist-tag."""
        return f"{self.registry_url}/{self.package_name}/{version}"


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
