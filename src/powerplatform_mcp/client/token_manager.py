"""Token management for the Dataverse Web API.

Access tokens are obtained from the Microsoft identity platform with the OAuth2
client-credential grant and cached in memory on the ``TokenManager`` instance
until five minutes before the authority-reported expiry.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from ..config import PowerPlatformConfig
from ..errors import AuthError
from .http import create_http_client

logger = logging.getLogger("powerplatform_mcp.token_manager")

# Tokens are treated as expired this long before the authority says they are.
REFRESH_MARGIN = timedelta(minutes=5)


@dataclass(frozen=True, slots=True)
class TokenGrant:
    """Parsed response of a successful client-credential exchange."""

    access_token: str
    expires_on: datetime


@dataclass(frozen=True, slots=True)
class Credential:
    """A cached bearer token and the instant after which it must be refreshed."""

    token: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        """Return True while ``now`` is strictly before ``expires_at``."""
        return now < self.expires_at


class TokenManager:
    """Acquire and cache bearer tokens, refreshing them when they expire."""

    def __init__(
        self,
        config: PowerPlatformConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the token manager.

        Args:
            config: The resolved PowerPlatform configuration to authenticate with.
            transport: Optional HTTP transport override for the token endpoint.

        """
        self._config = config
        self._transport = transport
        self._credential: Credential | None = None
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def credential(self) -> Credential | None:
        """Return the currently cached credential, if any."""
        return self._credential

    def _ensure_lock(self) -> asyncio.Lock:
        """Return an asyncio lock bound to the current event loop.

        Creates a new lock if one does not exist or if the event loop has changed.
        """
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _cached_token(self) -> str | None:
        credential = self._credential
        if credential is not None and credential.is_valid(datetime.now(UTC)):
            return credential.token
        return None

    async def get_token(self) -> str:
        """Return a valid bearer token, performing a token exchange only when needed.

        Concurrent callers that find the token expired share a single exchange.

        Raises:
            AuthError: If the identity authority rejects the exchange or returns no usable token.

        """
        token = self._cached_token()
        if token is not None:
            return token

        async with self._ensure_lock():
            # Another caller may have refreshed while we waited.
            token = self._cached_token()
            if token is not None:
                return token
            credential = await self._fetch_credential()
            self._credential = credential
            return credential.token

    async def _fetch_credential(self) -> Credential:
        """Perform a token exchange and build the credential to cache.

        The cache is not touched here, so a failure leaves the previous state intact.
        """
        try:
            grant = await self._request_token()
        except AuthError:
            logger.exception("Failed to acquire PowerPlatform access token")
            raise
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.exception("Failed to acquire PowerPlatform access token")
            msg = f"Authentication failed: {exc}"
            raise AuthError(msg) from exc

        logger.debug("Fetched new access token for %s (expires %s).", self._config.organization_url, grant.expires_on)
        return Credential(token=grant.access_token, expires_at=grant.expires_on - REFRESH_MARGIN)

    async def _request_token(self) -> TokenGrant:
        """Exchange the client id and secret for an access token.

        Returns:
            The access token and its absolute expiry.

        Raises:
            AuthError: If the authority returns an error or an unusable body.
            httpx.HTTPError: On transport failures.
            httpx.InvalidURL: If the tenant id or authority host makes the token URL unusable.

        """
        form = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
            "scope": self._config.scope,
        }
        async with create_http_client(self._config, transport=self._transport) as http_client:
            response = await http_client.post(self._config.token_url, data=form)
        issued_at = datetime.now(UTC)

        try:
            payload: Any = response.json()
        except ValueError as exc:
            msg = f"Authentication failed: token endpoint returned HTTP {response.status_code} with a non-JSON body"
            raise AuthError(msg) from exc

        if not response.is_success:
            detail = _describe_auth_error(payload)
            msg = f"Authentication failed: HTTP {response.status_code}{f' ({detail})' if detail else ''}"
            raise AuthError(msg)

        return _parse_token_grant(payload, issued_at=issued_at)


def _describe_auth_error(payload: Any) -> str:
    """Extract the OAuth2 ``error`` / ``error_description`` pair from an error body."""
    if not isinstance(payload, dict):
        return ""
    error = payload.get("error")
    description = payload.get("error_description")
    if error and description:
        # Entra ID descriptions are multi-line with trace ids; the first line is enough.
        return f"{error}: {str(description).splitlines()[0]}"
    return str(error or description or "")


def _parse_token_grant(payload: Any, *, issued_at: datetime) -> TokenGrant:
    """Validate a token response body and convert ``expires_in`` to an absolute expiry."""
    if not isinstance(payload, dict):
        msg = "Authentication failed: token response is not a JSON object"
        raise AuthError(msg)

    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        msg = "Authentication failed: token response did not include an access token"
        raise AuthError(msg)

    try:
        expires_in = int(payload["expires_in"])
    except (KeyError, TypeError, ValueError) as exc:
        msg = "Authentication failed: token response did not include a valid expires_in"
        raise AuthError(msg) from exc

    return TokenGrant(access_token=access_token, expires_on=issued_at + timedelta(seconds=expires_in))


__all__ = ["REFRESH_MARGIN", "Credential", "TokenGrant", "TokenManager"]
