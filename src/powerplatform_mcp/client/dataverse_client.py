"""Authenticated read-only client for the Dataverse Web API.

``DataverseClient`` issues GET requests with a bearer token from its
``TokenManager`` and exposes one coroutine per supported metadata or record
query. Failures surface as ``ApiError``; token acquisition failures surface as
the ``AuthError`` raised by the token manager.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..config import PowerPlatformConfig
from ..errors import ApiError
from . import paths
from .http import create_http_client
from .token_manager import TokenManager

logger = logging.getLogger("powerplatform_mcp.dataverse_client")

ODATA_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "OData-MaxVersion": "4.0",
    "OData-Version": "4.0",
}


@dataclass(frozen=True, slots=True)
class QueryRequest:
    """One outbound Web API call.

    ``result_type`` is a human-readable label used in logs and error messages.
    """

    relative_path: str
    result_type: str = "resource"


def build_request_headers(token: str) -> dict[str, str]:
    """Build the authorization and OData headers for a Web API request."""
    return {"Authorization": f"Bearer {token}", **ODATA_HEADERS}


def _describe_api_error(response: httpx.Response) -> str:
    """Return the message from a Dataverse ``{"error": {...}}`` body, or a short text excerpt."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200].strip()
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        error = payload["error"]
        code = error.get("code")
        message = error.get("message", "")
        return f"{code}: {message}" if code else str(message)
    return ""


def _one_to_many_query(entity_name: str) -> QueryRequest:
    return QueryRequest(paths.one_to_many_relationships_path(entity_name), "one-to-many relationships")


def _many_to_many_query(entity_name: str) -> QueryRequest:
    return QueryRequest(paths.many_to_many_relationships_path(entity_name), "many-to-many relationships")


class DataverseClient:
    """Query entity metadata, option sets and records from a Dataverse environment."""

    def __init__(
        self,
        config: PowerPlatformConfig,
        token_manager: TokenManager | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: The resolved PowerPlatform configuration.
            token_manager: Token source to use; a new one is created from ``config`` if omitted.
            transport: Optional HTTP transport override for Web API requests.

        """
        self._config = config
        self._token_manager = token_manager or TokenManager(config, transport=transport)
        self._transport = transport

    @property
    def config(self) -> PowerPlatformConfig:
        """Return the configuration this client was built with."""
        return self._config

    @property
    def token_manager(self) -> TokenManager:
        """Return the token source used to authorize requests."""
        return self._token_manager

    async def request(self, relative_path: str) -> Any:
        """Issue an authenticated GET against ``{organization_url}/{relative_path}``.

        Returns:
            The parsed JSON response body.

        Raises:
            AuthError: If no access token could be acquired.
            ApiError: On transport failures, non-2xx responses, or non-JSON bodies.

        """
        return await self._send(QueryRequest(relative_path))

    async def _send(self, query: QueryRequest, *, http_client: httpx.AsyncClient | None = None) -> Any:
        """Run one GET, on ``http_client`` when given or on a client opened for this call."""
        token = await self._token_manager.get_token()
        url = f"{self._config.organization_url}/{query.relative_path}"
        headers = build_request_headers(token)
        logger.debug("GET %s (%s)", url, query.result_type)

        # Control characters in interpolated identifiers raise InvalidURL, which is not an HTTPError.
        try:
            if http_client is not None:
                response = await http_client.get(url, headers=headers)
            else:
                async with create_http_client(self._config, transport=self._transport) as owned_client:
                    response = await owned_client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("PowerPlatform API request for %s failed: %s", query.result_type, exc)
            msg = f"PowerPlatform API request failed: {exc}"
            raise ApiError(msg, url=url) from exc

        if not response.is_success:
            detail = _describe_api_error(response)
            logger.error(
                "PowerPlatform API returned HTTP %s for %s: %s",
                response.status_code,
                query.result_type,
                detail,
            )
            msg = f"PowerPlatform API request failed: HTTP {response.status_code}{f' ({detail})' if detail else ''}"
            raise ApiError(msg, status_code=response.status_code, url=url)

        try:
            return response.json()
        except ValueError as exc:
            msg = f"PowerPlatform API request failed: response for {query.result_type} is not valid JSON"
            raise ApiError(msg, status_code=response.status_code, url=url) from exc

    async def get_entity_metadata(self, entity_name: str) -> Any:
        """Get the definition of an entity by logical name."""
        return await self._send(QueryRequest(paths.entity_definition_path(entity_name), "entity metadata"))

    async def get_entity_attributes(self, entity_name: str) -> Any:
        """Get all attribute definitions of an entity."""
        return await self._send(QueryRequest(paths.entity_attributes_path(entity_name), "entity attributes"))

    async def get_entity_attribute(self, entity_name: str, attribute_name: str) -> Any:
        """Get a single attribute definition of an entity."""
        return await self._send(
            QueryRequest(paths.entity_attribute_path(entity_name, attribute_name), "entity attribute"),
        )

    async def get_entity_one_to_many_relationships(self, entity_name: str) -> Any:
        """Get the one-to-many relationships of an entity."""
        return await self._send(_one_to_many_query(entity_name))

    async def get_entity_many_to_many_relationships(self, entity_name: str) -> Any:
        """Get the many-to-many relationships of an entity."""
        return await self._send(_many_to_many_query(entity_name))

    async def get_entity_relationships(self, entity_name: str) -> dict[str, Any]:
        """Get one-to-many and many-to-many relationships of an entity.

        Both requests run concurrently over one shared connection pool; if either
        fails the whole call fails and no partial result is returned.
        """
        async with create_http_client(self._config, transport=self._transport) as http_client:
            # Wait for both so neither request outlives the shared client.
            results = await asyncio.gather(
                self._send(_one_to_many_query(entity_name), http_client=http_client),
                self._send(_many_to_many_query(entity_name), http_client=http_client),
                return_exceptions=True,
            )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        one_to_many, many_to_many = results
        return {"oneToMany": one_to_many, "manyToMany": many_to_many}

    async def get_global_option_set(self, option_set_name: str) -> Any:
        """Get a global option set definition by name."""
        return await self._send(QueryRequest(paths.global_option_set_path(option_set_name), "global option set"))

    async def get_record(self, entity_name_plural: str, record_id: str) -> Any:
        """Get a single record by entity set name (e.g. ``accounts``) and id."""
        return await self._send(QueryRequest(paths.record_path(entity_name_plural, record_id), "record"))

    async def query_records(
        self,
        entity_name_plural: str,
        filter_expression: str,
        max_records: int = paths.DEFAULT_MAX_RECORDS,
    ) -> Any:
        """Query an entity set with an OData filter, returning at most ``max_records`` rows."""
        return await self._send(
            QueryRequest(
                paths.query_records_path(entity_name_plural, filter_expression, max_records),
                "record query",
            ),
        )


__all__ = ["ODATA_HEADERS", "DataverseClient", "QueryRequest", "build_request_headers"]
