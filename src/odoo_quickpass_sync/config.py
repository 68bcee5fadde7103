"""Configuration management for the Odoo Quickpass sync service."""

from dataclasses import dataclass

from pydantic_settings import BaseSettings

from .odoo.exceptions import OdooConfigurationError


@dataclass(frozen=True)
class OdooConfig:
    """Validated connection settings for a single Odoo instance."""

    url: str
    database: str
    username: str | None = None
    password: str | None = None
    api_key: str | None = None

    # Client identity, reported by /odoo/status and in logs
    client_id: str = "default"
    client_name: str = "Default Client"

    timeout: float = 30.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables (and .env)."""

    # Odoo connection
    odoo_url: str | None = None
    odoo_database: str | None = None
    odoo_username: str | None = None
    odoo_password: str | None = None
    odoo_api_key: str | None = None  # Preferred over username/password
    odoo_client_id: str = "default"
    odoo_client_name: str = "Default Client"
    odoo_timeout: float = 30.0

    # HTTP Server
    http_host: str = "0.0.0.0"
    port: int = 8081

    # Development
    log_level: str = "info"
    debug: bool = False

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore",
    }

    def odoo_config(self) -> OdooConfig:
        """
        Validate Odoo settings and build the connection config.

        Supports API key authentication (recommended) or
        username/password (legacy).

        Raises:
            OdooConfigurationError: If a required setting is missing
        """
        if not self.odoo_url:
            raise OdooConfigurationError("ODOO_URL is not configured")

        if not self.odoo_database:
            raise OdooConfigurationError("ODOO_DATABASE is not configured")

        if not self.odoo_api_key and not (self.odoo_username and self.odoo_password):
            raise OdooConfigurationError(
                "Set ODOO_API_KEY or ODOO_USERNAME+ODOO_PASSWORD"
            )

        return OdooConfig(
            url=self.odoo_url,
            database=self.odoo_database,
            username=self.odoo_username or None,
            password=self.odoo_password or None,
            api_key=self.odoo_api_key or None,
            client_id=self.odoo_client_id,
            client_name=self.odoo_client_name,
            timeout=self.odoo_timeout,
        )
