"""MCP tool: get-global-option-set.

Returns the definition of a global option set (choice) by name.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Annotated

from fastmcp import Context, FastMCP
from pydantic import Field

from .common import ToolConfig, run_tool


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the get-global-option-set tool on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tool to.
        deps: Dependencies namespace with ``get_client``.

    """

    @app.tool(
        name="get-global-option-set",
        description="Get a global option set definition by name",
        annotations={"title": "Get global option set", "readOnlyHint": True},
    )
    async def get_global_option_set(
        ctx: Context,
        option_set_name: Annotated[str, Field(description="The name of the global option set")],
    ) -> str:
        tool_config = ToolConfig(
            action="get global option set",
            log_message=f"Fetching global option set '{option_set_name}'.",
            heading=f"Global option set '{option_set_name}'",
        )
        return await run_tool(ctx, deps, tool_config, lambda client: client.get_global_option_set(option_set_name))


__all__ = ["register"]
