"""MCP tools: entity metadata, attributes and relationships.

Registers ``get-entity-metadata``, ``get-entity-attributes``,
``get-entity-attribute`` and ``get-entity-relationships``.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Annotated

from fastmcp import Context, FastMCP
from pydantic import Field

from .common import ToolConfig, run_tool

EntityName = Annotated[str, Field(description="The logical name of the entity")]


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the entity metadata tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_client``.

    """

    @app.tool(
        name="get-entity-metadata",
        description="Get metadata about a PowerPlatform entity",
        annotations={"title": "Get entity metadata", "readOnlyHint": True},
    )
    async def get_entity_metadata(ctx: Context, entity_name: EntityName) -> str:
        tool_config = ToolConfig(
            action="get entity metadata",
            log_message=f"Fetching metadata for entity '{entity_name}'.",
            heading=f"Entity metadata for '{entity_name}'",
        )
        return await run_tool(ctx, deps, tool_config, lambda client: client.get_entity_metadata(entity_name))

    @app.tool(
        name="get-entity-attributes",
        description="Get attributes/fields of a PowerPlatform entity",
        annotations={"title": "Get entity attributes", "readOnlyHint": True},
    )
    async def get_entity_attributes(ctx: Context, entity_name: EntityName) -> str:
        tool_config = ToolConfig(
            action="get entity attributes",
            log_message=f"Fetching attributes for entity '{entity_name}'.",
            heading=f"Attributes for entity '{entity_name}'",
        )
        return await run_tool(ctx, deps, tool_config, lambda client: client.get_entity_attributes(entity_name))

    @app.tool(
        name="get-entity-attribute",
        description="Get a specific attribute/field of a PowerPlatform entity",
        annotations={"title": "Get entity attribute", "readOnlyHint": True},
    )
    async def get_entity_attribute(
        ctx: Context,
        entity_name: EntityName,
        attribute_name: Annotated[str, Field(description="The logical name of the attribute")],
    ) -> str:
        tool_config = ToolConfig(
            action="get entity attribute",
            log_message=f"Fetching attribute '{attribute_name}' of entity '{entity_name}'.",
            heading=f"Attribute '{attribute_name}' for entity '{entity_name}'",
        )
        return await run_tool(
            ctx,
            deps,
            tool_config,
            lambda client: client.get_entity_attribute(entity_name, attribute_name),
        )

    @app.tool(
        name="get-entity-relationships",
        description="Get relationships (one-to-many and many-to-many) for a PowerPlatform entity",
        annotations={"title": "Get entity relationships", "readOnlyHint": True},
    )
    async def get_entity_relationships(ctx: Context, entity_name: EntityName) -> str:
        tool_config = ToolConfig(
            action="get entity relationships",
            log_message=f"Fetching relationships for entity '{entity_name}'.",
            heading=f"Relationships for entity '{entity_name}'",
        )
        return await run_tool(ctx, deps, tool_config, lambda client: client.get_entity_relationships(entity_name))


__all__ = ["register"]
