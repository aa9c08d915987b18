"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the policy wizard REST API server.

    Values are read from environment variables
    and from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"
    locale: str = "en-US"

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # platform-injected PORT takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (injected PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # Wizard sessions
    session_ttl_seconds: int = 1800  # 30 min inactivity
    session_cleanup_interval: int = 60  # seconds between cleanup sweeps

    # Confirmation dialog
    confirm_modal_template: str = "templates/modal/confirm-modal.tpl.html"
