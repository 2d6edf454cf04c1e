"""Common utilities for MCP tool registration.

Every tool follows the same shape: resolve the Dataverse client, run one client
coroutine, and render the JSON result as text under a heading. Errors from the
client layer are turned into a ``Failed to ...`` message instead of propagating
to the host.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, TypeAlias

from fastmcp import Context

from ..client.dataverse_client import DataverseClient
from ..errors import PowerPlatformError

logger = logging.getLogger("powerplatform_mcp.tools")

ClientCall: TypeAlias = Callable[[DataverseClient], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ToolConfig:
    """Text and logging settings for a single tool invocation.

    ``heading`` is either fixed text or a callable that builds it from the result.
    """

    action: str
    log_message: str
    heading: str | Callable[[Any], str]


def format_tool_result(heading: str, payload: Any) -> str:
    """Render a JSON payload under a heading."""
    return f"{heading}:\n\n{json.dumps(payload, indent=2, ensure_ascii=False)}"


def format_tool_failure(action: str, exc: PowerPlatformError) -> str:
    """Render a client-layer error as a user-visible failure message."""
    return f"Failed to {action}: {exc}"


async def run_tool(
    ctx: Context,
    deps: SimpleNamespace,
    tool_config: ToolConfig,
    call: ClientCall,
) -> str:
    """Resolve the client, run ``call`` against it, and format the outcome as text.

    Args:
        ctx: FastMCP context.
        deps: Dependencies namespace exposing ``get_client``.
        tool_config: Text and logging settings for this tool.
        call: Coroutine factory that performs the client query.

    Returns:
        The formatted result, or a failure message for config, auth and API errors.

    """
    await ctx.info(tool_config.log_message)
    try:
        client: DataverseClient = deps.get_client()
        payload = await call(client)
    except PowerPlatformError as exc:
        logger.error("Failed to %s (%s error): %s", tool_config.action, exc.kind, exc)
        await ctx.error(f"Failed to {tool_config.action}: {exc}")
        return format_tool_failure(tool_config.action, exc)

    heading = tool_config.heading(payload) if callable(tool_config.heading) else tool_config.heading
    return format_tool_result(heading, payload)


__all__ = ["ClientCall", "ToolConfig", "format_tool_failure", "format_tool_result", "run_tool"]
