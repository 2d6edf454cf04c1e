"""PowerPlatform MCP Server package.

This package contains the FastMCP server and tools for querying entity metadata
and records from a PowerPlatform (Dataverse) environment.
"""

# Intentionally do not re-export symbols from submodules to avoid importing
# heavy dependencies and configuring logging at package import time.
# Individual modules (e.g., ``server``) should be imported directly by
# consumers as needed.

__all__: list[str] = []
