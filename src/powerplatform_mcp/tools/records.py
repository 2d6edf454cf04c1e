"""MCP tools: get-record and query-records.

Reads records from an entity set (plural entity name such as ``accounts``),
either by id or with an OData filter expression capped at ``max_records`` rows.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from pydantic import Field

from ..client.paths import DEFAULT_MAX_RECORDS
from .common import ToolConfig, run_tool

EntityNamePlural = Annotated[
    str,
    Field(description="The plural name of the entity (e.g., 'accounts', 'contacts')"),
]


def count_records(payload: Any) -> int:
    """Return the number of rows in an OData collection response."""
    if isinstance(payload, dict) and isinstance(payload.get("value"), list):
        return len(payload["value"])
    return 0


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the record tools on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tools to.
        deps: Dependencies namespace with ``get_client``.

    """

    @app.tool(
        name="get-record",
        description="Get a specific record by entity name (plural) and ID",
        annotations={"title": "Get record", "readOnlyHint": True},
    )
    async def get_record(
        ctx: Context,
        entity_name_plural: EntityNamePlural,
        record_id: Annotated[str, Field(description="The GUID of the record")],
    ) -> str:
        tool_config = ToolConfig(
            action="get record",
            log_message=f"Fetching record '{record_id}' from '{entity_name_plural}'.",
            heading=f"Record from '{entity_name_plural}' with ID '{record_id}'",
        )
        return await run_tool(ctx, deps, tool_config, lambda client: client.get_record(entity_name_plural, record_id))

    @app.tool(
        name="query-records",
        description="Query records using an OData filter expression",
        annotations={"title": "Query records", "readOnlyHint": True},
    )
    async def query_records(
        ctx: Context,
        entity_name_plural: EntityNamePlural,
        filter: Annotated[  # noqa: A002 (tool argument name)
            str,
            Field(description="OData filter expression (e.g., \"name eq 'test'\" or \"createdon gt 2023-01-01\")"),
        ],
        max_records: Annotated[
            int | None,
            Field(description=f"Maximum number of records to retrieve (default: {DEFAULT_MAX_RECORDS})"),
        ] = None,
    ) -> str:
        top = DEFAULT_MAX_RECORDS if max_records is None else max_records
        tool_config = ToolConfig(
            action="query records",
            log_message=f"Querying up to {top} records from '{entity_name_plural}'.",
            heading=lambda payload: (
                f"Retrieved {count_records(payload)} records from '{entity_name_plural}' with filter '{filter}'"
            ),
        )
        return await run_tool(
            ctx,
            deps,
            tool_config,
            lambda client: client.query_records(entity_name_plural, filter, top),
        )


__all__ = ["count_records", "register"]
