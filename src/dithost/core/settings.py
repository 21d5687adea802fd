"""
Centralized settings for dithost.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    One cached ``DitHostSettings`` object feeds logging, the application
    store, and the provider/instance-config registries built at startup.

    - **Pydantic validation:** Type-checked at startup
    - **Environment-driven:** ``DITHOST_*`` env vars and ``.env`` files
    - **Sensible defaults:** Works out of the box for local development

Examples:
    >>> import os
    >>> os.environ["DITHOST_AWS_REGION"] = "eu-west-1"
    >>> clear_settings_cache()
    >>> get_settings().aws_region
    'eu-west-1'

Tags:
    dithost, configuration, settings, pydantic, environment

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DitHostSettings(BaseSettings):
    """dithost process configuration.

    All fields can be set via ``DITHOST_*`` environment variables (e.g.
    ``DITHOST_DATABASE_PATH=/var/lib/dithost/apps.db``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="DITHOST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="console")

    # ── Application store ────────────────────────────────────────
    database_path: Path = Field(
        default=Path("data/dithost.db"),
        description="SQLite file for application records (':memory:' for ephemeral)",
    )

    # ── AWS provider ─────────────────────────────────────────────
    aws_region: str = Field(default="us-east-1")
    aws_endpoint_url: str | None = Field(
        default=None,
        description="Override EC2 endpoint (LocalStack, moto server)",
    )

    # ── Compose instance config ──────────────────────────────────
    compose_destination_path: str = Field(default="/opt/docker")
    compose_filename: str = Field(default="docker-compose.yml")
    compose_packages: list[str] = Field(
        default_factory=lambda: ["docker.io", "docker-compose-v2"],
        description="Packages providing docker and the compose v2 plugin",
    )
    compose_start: bool = Field(
        default=True,
        description="Append 'docker compose up -d' to the instance runcmd",
    )

    # ── Development ──────────────────────────────────────────────
    enable_stub_provider: bool = Field(
        default=False,
        description="Register the in-memory 'stub' provider",
    )


_settings_cache: dict[str, DitHostSettings] = {}


def get_settings(*, _force_reload: bool = False) -> DitHostSettings:
    """Load, validate, and cache a :class:`DitHostSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = DitHostSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["DitHostSettings", "get_settings", "clear_settings_cache"]
