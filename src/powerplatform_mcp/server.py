"""Entry point for the PowerPlatform MCP server.

This module wires together the FastMCP app and registers tools and prompts.
The Dataverse client is built lazily on the first tool call so that a missing
configuration fails that call with a descriptive message instead of the process.

Registered tools:
- ``get-entity-metadata``: entity definition by logical name
- ``get-entity-attributes``: all attribute definitions of an entity
- ``get-entity-attribute``: one attribute definition of an entity
- ``get-entity-relationships``: one-to-many and many-to-many relationships
- ``get-global-option-set``: global option set definition by name
- ``get-record``: one record by entity set name and id
- ``query-records``: records matching an OData filter
"""

import logging
import os
import signal
import sys
from functools import lru_cache
from types import SimpleNamespace

from fastmcp import FastMCP

from . import prompts
from .client.dataverse_client import DataverseClient
from .config import PowerPlatformConfig
from .tools.entities import register as register_entity_tools
from .tools.option_sets import register as register_option_set_tools
from .tools.records import register as register_record_tools

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("powerplatform_mcp.server")

app = FastMCP(
    name="powerplatform-mcp",
    instructions="Expose read-only tools that query PowerPlatform (Dataverse) entity metadata and records.",
)


@lru_cache(maxsize=1)
def get_dataverse_client() -> DataverseClient:
    """Return the process-wide Dataverse client, creating it on first use.

    Raises:
        ConfigError: If the environment configuration is incomplete. Failures are
            not cached, so the next call re-reads the environment.

    """
    config = PowerPlatformConfig.from_env()
    client = DataverseClient(config)
    logger.info("PowerPlatform client initialized for %s", config.organization_url)
    return client


def _register_capabilities() -> None:
    """Register tool and prompt modules with the app instance."""
    deps = SimpleNamespace(get_client=get_dataverse_client)
    register_entity_tools(app, deps=deps)
    register_option_set_tools(app, deps=deps)
    register_record_tools(app, deps=deps)
    prompts.register(app)


_register_capabilities()


def handle_interrupt(signum: int, frame: object) -> None:  # noqa: ARG001
    """Handle keyboard interrupt gracefully."""
    logger.info("Received interrupt signal, shutting down...")
    sys.exit(0)


def main() -> None:
    """Entry point for the powerplatform-mcp console script."""
    signal.signal(signal.SIGINT, handle_interrupt)
    signal.signal(signal.SIGTERM, handle_interrupt)
    logger.info("Starting PowerPlatform MCP server...")
    app.run()


__all__ = ["app", "get_dataverse_client", "handle_interrupt", "main"]


if __name__ == "__main__":
    main()
