"""Tools package for MCP server.

Contains MCP tool registration modules:
- ``entities``: Entity metadata, attributes and relationships
- ``option_sets``: Global option set definitions
- ``records``: Record lookup by id and filtered record queries
- ``common``: Shared invocation and formatting helpers
"""
