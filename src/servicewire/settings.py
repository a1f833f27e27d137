from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BootstrapSettings(BaseSettings):
    """Startup configuration read from ``SERVICEWIRE_*`` environment variables.

    ``roots`` accepts a JSON list (``SERVICEWIRE_ROOTS='["app.services"]'``).
    Command-line flags take precedence over these values.
    """

    model_config = SettingsConfigDict(env_prefix="SERVICEWIRE_", extra="ignore")

    roots: list[str] = Field(default_factory=list)
    """Packages scanned for services."""

    service: str | None = None
    """Identifier of the top-level service to build."""

    entrypoint: str | None = None
    """Method called on the built service, for example ``listen``."""

    log_level: str = "INFO"
