# src/config/settings.py — v2
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

    # === Friends file ===
    friends_file: Path = Path("~/.friends.json")
    atomic_save: bool = True

    # === Resolver ===
    resolver_backend: Literal["mojang", "static"] = "mojang"
    mojang_api_url: str = "https://api.mojang.com"
    mojang_session_url: str = "https://sessionserver.mojang.com"
    resolver_timeout_s: float = 10.0
    static_resolver_file: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: str = ""
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("resolver_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("resolver_timeout_s must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.static_resolver_file and self.resolver_backend != "static":
            errors.append(
                "STATIC_RESOLVER_FILE requires RESOLVER_BACKEND=static"
            )

        if (
            self.static_resolver_file
            and not Path(self.static_resolver_file).expanduser().is_file()
        ):
            errors.append(
                f"STATIC_RESOLVER_FILE not found: {self.static_resolver_file}"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def friends_path(self) -> Path:
        """Friends file with the user's home directory expanded."""
        return self.friends_file.expanduser()


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
