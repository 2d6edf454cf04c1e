"""Client package for the PowerPlatform MCP server.

Provides HTTP client setup, token management, and the Dataverse Web API client:
- ``http``: Async context manager factory for configured httpx clients
- ``token_manager``: Client-credential token lifecycle with cached refresh
- ``paths``: Relative Web API path builders
- ``dataverse_client``: Authenticated GET primitive and typed query operations
"""
