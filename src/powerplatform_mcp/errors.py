"""Error taxonomy for the PowerPlatform MCP server.

Every failure raised by the client layer is one of three kinds, each tagged with
a ``kind`` string so callers can branch without parsing messages:

- ``ConfigError``: missing or invalid startup configuration
- ``AuthError``: the client-credential token exchange failed
- ``ApiError``: a Dataverse Web API call failed (transport or non-2xx)
"""

from typing import ClassVar


class PowerPlatformError(RuntimeError):
    """Base class for all errors surfaced by the PowerPlatform client layer."""

    kind: ClassVar[str] = "error"


class ConfigError(PowerPlatformError):
    """Raised when the server configuration is incomplete or invalid."""

    kind: ClassVar[str] = "config"


class AuthError(PowerPlatformError):
    """Raised when an access token cannot be acquired from the identity authority."""

    kind: ClassVar[str] = "auth"


class ApiError(PowerPlatformError):
    """Raised when a Dataverse Web API request fails.

    Attributes:
        status_code: HTTP status of the response, or ``None`` for transport failures.
        url: The absolute URL that was requested.

    """

    kind: ClassVar[str] = "api"

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None) -> None:
        """Initialize the error with optional response details."""
        super().__init__(message)
        self.status_code = status_code
        self.url = url


__all__ = ["ApiError", "AuthError", "ConfigError", "PowerPlatformError"]
