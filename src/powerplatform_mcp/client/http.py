"""Shared HTTP client setup for the identity authority and the Dataverse Web API.

Provides the async context manager that creates an ``httpx.AsyncClient`` with
the timeout and TLS settings from ``PowerPlatformConfig``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from ..config import PowerPlatformConfig


@asynccontextmanager
async def create_http_client(
    config: PowerPlatformConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Create a configured async HTTP client.

    Args:
        config: The configuration containing timeout and TLS verification settings.
        transport: Optional transport override (e.g. ``httpx.MockTransport`` in tests).

    Yields:
        Configured ``httpx.AsyncClient`` instance, closed on exit.

    """
    timeout = httpx.Timeout(config.timeout_ms / 1000)
    async with httpx.AsyncClient(verify=config.verify_ssl, timeout=timeout, transport=transport) as client:
        yield client


__all__ = ["create_http_client"]
