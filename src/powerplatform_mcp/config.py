"""Configuration management for the PowerPlatform MCP server.

This module defines the ``PowerPlatformConfig`` model and helpers to load
configuration from environment variables. Values may also come from a local
``.env`` file, which is loaded at import time for development convenience.
"""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

# Load variables from a local .env file for development convenience
load_dotenv()

DEFAULT_AUTHORITY_HOST = "https://login.microsoftonline.com"

# Environment variable -> model field, in the order they are reported when missing.
REQUIRED_ENV_VARS: dict[str, str] = {
    "POWERPLATFORM_URL": "organization_url",
    "POWERPLATFORM_CLIENT_ID": "client_id",
    "POWERPLATFORM_CLIENT_SECRET": "client_secret",
    "POWERPLATFORM_TENANT_ID": "tenant_id",
}
OPTIONAL_ENV_VARS: dict[str, str] = {
    "POWERPLATFORM_AUTHORITY_HOST": "authority_host",
    "POWERPLATFORM_TIMEOUT_MS": "timeout_ms",
    "POWERPLATFORM_VERIFY_SSL": "verify_ssl",
}


def _normalize_https_url(value: str, *, label: str) -> str:
    """Strip whitespace and trailing slashes, and require an http(s) scheme."""
    cleaned = value.strip().rstrip("/")
    if not cleaned:
        msg = f"{label} is required"
        raise ValueError(msg)
    if not cleaned.startswith(("https://", "http://")):
        msg = f"Invalid {label}: {value!r} (expected an http:// or https:// URL)"
        raise ValueError(msg)
    return cleaned


class PowerPlatformConfig(BaseModel):
    """Connection settings for a Dataverse environment and its Entra ID app registration."""

    model_config = ConfigDict(frozen=True)

    organization_url: str
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)
    tenant_id: str = Field(min_length=1)
    authority_host: str = DEFAULT_AUTHORITY_HOST
    timeout_ms: int = Field(default=30000, ge=1000, le=600000)
    verify_ssl: bool = True

    @field_validator("organization_url")
    @classmethod
    def _validate_organization_url(cls, value: str) -> str:
        return _normalize_https_url(value, label="organization url")

    @field_validator("authority_host")
    @classmethod
    def _validate_authority_host(cls, value: str) -> str:
        return _normalize_https_url(value, label="authority host")

    @property
    def scope(self) -> str:
        """Return the client-credential scope for the Dataverse resource."""
        return f"{self.organization_url}/.default"

    @property
    def token_url(self) -> str:
        """Return the OAuth2 v2.0 token endpoint for the configured tenant."""
        return f"{self.authority_host}/{self.tenant_id}/oauth2/v2.0/token"

    @classmethod
    def from_env(cls) -> PowerPlatformConfig:
        """Build a configuration object from environment variables.

        Raises:
            ConfigError: If required variables are missing or values fail validation.

        """
        missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
        if missing:
            msg = f"Missing PowerPlatform configuration: {', '.join(missing)}. Set these in environment variables."
            raise ConfigError(msg)

        raw_config: dict[str, Any] = {field: os.getenv(name) for name, field in REQUIRED_ENV_VARS.items()}
        for name, field in OPTIONAL_ENV_VARS.items():
            value = os.getenv(name)
            if value:
                raw_config[field] = value
        try:
            return cls(**raw_config)
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            msg = f"Invalid PowerPlatform configuration: {messages}"
            raise ConfigError(msg) from exc


__all__ = ["DEFAULT_AUTHORITY_HOST", "PowerPlatformConfig"]
