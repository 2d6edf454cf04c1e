"""Unit tests for the MCP tool wrappers.

Validates text formatting, dependency injection, and error handling through the
tool registration layer (without requiring a running FastMCP app).
"""

import json
from collections.abc import Awaitable, Callable
from types import SimpleNamespace
from typing import Any, TypeAlias
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastmcp import Context

from powerplatform_mcp.client.dataverse_client import DataverseClient
from powerplatform_mcp.client.token_manager import TokenManager
from powerplatform_mcp.config import PowerPlatformConfig
from powerplatform_mcp.errors import ApiError, AuthError, ConfigError
from powerplatform_mcp.tools.common import ToolConfig, format_tool_failure, format_tool_result, run_tool
from powerplatform_mcp.tools.entities import register as register_entity_tools
from powerplatform_mcp.tools.option_sets import register as register_option_set_tools
from powerplatform_mcp.tools.records import count_records
from powerplatform_mcp.tools.records import register as register_record_tools

ToolFunc: TypeAlias = Callable[..., Awaitable[str]]


class _FakeApp:
    """Minimal stand-in for FastMCP app to capture registered tools."""

    def __init__(self) -> None:
        self.tools: dict[str, ToolFunc] = {}

    def tool(
        self,
        *,
        name: str,
        description: str,
        annotations: dict[str, Any] | None = None,
    ) -> Callable[[ToolFunc], ToolFunc]:
        """Register a tool by name and return a decorator that captures the function."""

        def _decorator(func: ToolFunc) -> ToolFunc:
            _ = description
            assert annotations is not None
            assert annotations["readOnlyHint"] is True
            self.tools[name] = func
            return func

        return _decorator


@pytest.fixture
def mock_ctx() -> Context:
    """Return a Context-like AsyncMock for tool logging."""
    ctx = MagicMock(spec=Context)
    ctx.info = AsyncMock()
    ctx.error = AsyncMock()
    return ctx


@pytest.fixture
def mock_client() -> MagicMock:
    """Return a DataverseClient mock with async query methods."""
    return MagicMock(spec=DataverseClient)


@pytest.fixture
def app(mock_client: MagicMock) -> _FakeApp:
    """Return a fake app with every tool registered against the mock client."""
    fake_app = _FakeApp()
    deps = SimpleNamespace(get_client=lambda: mock_client)
    register_entity_tools(fake_app, deps=deps)  # type: ignore[arg-type]
    register_option_set_tools(fake_app, deps=deps)  # type: ignore[arg-type]
    register_record_tools(fake_app, deps=deps)  # type: ignore[arg-type]
    return fake_app


def test_all_tools_registered(app: _FakeApp) -> None:
    """All seven tools should be registered under their hyphenated names."""
    assert set(app.tools) == {
        "get-entity-metadata",
        "get-entity-attributes",
        "get-entity-attribute",
        "get-entity-relationships",
        "get-global-option-set",
        "get-record",
        "query-records",
    }


class TestEntityTools:
    """Tests for the entity metadata tools."""

    @pytest.mark.asyncio
    async def test_get_entity_metadata_success(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        """The result should be pretty-printed JSON under a heading."""
        metadata = {"LogicalName": "account", "EntitySetName": "accounts"}
        mock_client.get_entity_metadata = AsyncMock(return_value=metadata)

        text = await app.tools["get-entity-metadata"](mock_ctx, entity_name="account")

        assert text == f"Entity metadata for 'account':\n\n{json.dumps(metadata, indent=2)}"
        mock_client.get_entity_metadata.assert_awaited_once_with("account")
        mock_ctx.info.assert_awaited()  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_get_entity_metadata_api_error(
        self,
        app: _FakeApp,
        mock_client: MagicMock,
        mock_ctx: Context,
    ) -> None:
        """An ApiError should become a failure message rather than an exception."""
        mock_client.get_entity_metadata = AsyncMock(
            side_effect=ApiError("PowerPlatform API request failed: HTTP 404", status_code=404),
        )

        text = await app.tools["get-entity-metadata"](mock_ctx, entity_name="nope")

        assert text == "Failed to get entity metadata: PowerPlatform API request failed: HTTP 404"
        mock_ctx.error.assert_awaited_once()  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entity_name", ["", "   ", "\t", "no_such_entity"])
    async def test_get_entity_metadata_unresolvable_name(self, mock_ctx: Context, entity_name: str) -> None:
        """Blank, control-character and unknown names should produce a failure message from a real client."""
        token_manager = MagicMock(spec=TokenManager)
        token_manager.get_token = AsyncMock(return_value="tok")
        not_found = {"error": {"code": "0x80060888", "message": "Resource not found for the segment"}}
        client = DataverseClient(
            PowerPlatformConfig(
                organization_url="https://contoso.crm.dynamics.com",
                client_id="client-id",
                client_secret="client-secret",
                tenant_id="tenant-123",
            ),
            token_manager=token_manager,
            transport=httpx.MockTransport(lambda _request: httpx.Response(404, json=not_found)),
        )
        fake_app = _FakeApp()
        register_entity_tools(fake_app, deps=SimpleNamespace(get_client=lambda: client))  # type: ignore[arg-type]

        text = await fake_app.tools["get-entity-metadata"](mock_ctx, entity_name=entity_name)

        assert text.startswith("Failed to get entity metadata: PowerPlatform API request failed")
        mock_ctx.error.assert_awaited_once()  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_get_entity_attributes(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        mock_client.get_entity_attributes = AsyncMock(return_value={"value": []})
        text = await app.tools["get-entity-attributes"](mock_ctx, entity_name="contact")
        assert text.startswith("Attributes for entity 'contact':\n\n")

    @pytest.mark.asyncio
    async def test_get_entity_attribute(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        mock_client.get_entity_attribute = AsyncMock(return_value={"LogicalName": "fullname"})
        text = await app.tools["get-entity-attribute"](mock_ctx, entity_name="contact", attribute_name="fullname")
        assert text.startswith("Attribute 'fullname' for entity 'contact':\n\n")
        mock_client.get_entity_attribute.assert_awaited_once_with("contact", "fullname")

    @pytest.mark.asyncio
    async def test_get_entity_relationships(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        relationships = {"oneToMany": {"value": []}, "manyToMany": {"value": []}}
        mock_client.get_entity_relationships = AsyncMock(return_value=relationships)
        text = await app.tools["get-entity-relationships"](mock_ctx, entity_name="account")
        assert text == f"Relationships for entity 'account':\n\n{json.dumps(relationships, indent=2)}"


class TestOptionSetTool:
    """Tests for get-global-option-set."""

    @pytest.mark.asyncio
    async def test_success(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        mock_client.get_global_option_set = AsyncMock(return_value={"Name": "budgetstatus"})
        text = await app.tools["get-global-option-set"](mock_ctx, option_set_name="budgetstatus")
        assert text.startswith("Global option set 'budgetstatus':\n\n")

    @pytest.mark.asyncio
    async def test_auth_error(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        mock_client.get_global_option_set = AsyncMock(side_effect=AuthError("Authentication failed: HTTP 401"))
        text = await app.tools["get-global-option-set"](mock_ctx, option_set_name="budgetstatus")
        assert text == "Failed to get global option set: Authentication failed: HTTP 401"


class TestRecordTools:
    """Tests for get-record and query-records."""

    @pytest.mark.asyncio
    async def test_get_record(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        record_id = "11111111-1111-1111-1111-111111111111"
        mock_client.get_record = AsyncMock(return_value={"name": "Acme"})
        text = await app.tools["get-record"](mock_ctx, entity_name_plural="accounts", record_id=record_id)
        assert text == f"Record from 'accounts' with ID '{record_id}':\n\n{json.dumps({'name': 'Acme'}, indent=2)}"
        mock_client.get_record.assert_awaited_once_with("accounts", record_id)

    @pytest.mark.asyncio
    async def test_query_records_defaults_to_fifty(
        self,
        app: _FakeApp,
        mock_client: MagicMock,
        mock_ctx: Context,
    ) -> None:
        """Omitting max_records should request 50 rows and report the row count."""
        payload = {"value": [{"name": "a"}, {"name": "b"}]}
        mock_client.query_records = AsyncMock(return_value=payload)

        text = await app.tools["query-records"](mock_ctx, entity_name_plural="contacts", filter="name eq 'test'")

        mock_client.query_records.assert_awaited_once_with("contacts", "name eq 'test'", 50)
        assert text.startswith("Retrieved 2 records from 'contacts' with filter 'name eq 'test'':\n\n")

    @pytest.mark.asyncio
    async def test_query_records_explicit_cap(self, app: _FakeApp, mock_client: MagicMock, mock_ctx: Context) -> None:
        mock_client.query_records = AsyncMock(return_value={"value": []})
        text = await app.tools["query-records"](
            mock_ctx,
            entity_name_plural="contacts",
            filter="statecode eq 0",
            max_records=10,
        )
        mock_client.query_records.assert_awaited_once_with("contacts", "statecode eq 0", 10)
        assert text.startswith("Retrieved 0 records")

    @pytest.mark.asyncio
    async def test_config_error_reported(self, mock_ctx: Context) -> None:
        """A missing configuration should fail the call with a descriptive message."""
        fake_app = _FakeApp()

        def get_client() -> DataverseClient:
            msg = "Missing PowerPlatform configuration: POWERPLATFORM_URL. Set these in environment variables."
            raise ConfigError(msg)

        register_record_tools(fake_app, deps=SimpleNamespace(get_client=get_client))  # type: ignore[arg-type]

        text = await fake_app.tools["get-record"](mock_ctx, entity_name_plural="accounts", record_id="1")

        assert text.startswith("Failed to get record: Missing PowerPlatform configuration: POWERPLATFORM_URL")

    def test_count_records(self) -> None:
        assert count_records({"value": [1, 2, 3]}) == 3
        assert count_records({"value": None}) == 0
        assert count_records([1, 2]) == 0


class TestRunTool:
    """Tests for the shared invocation helper."""

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, mock_ctx: Context) -> None:
        """Only client-layer errors are converted; anything else reaches the host."""
        deps = SimpleNamespace(get_client=lambda: MagicMock())
        tool_config = ToolConfig(action="do things", log_message="Doing things.", heading="Things")

        async def broken(_client: DataverseClient) -> Any:
            msg = "bug"
            raise ValueError(msg)

        with pytest.raises(ValueError, match="bug"):
            await run_tool(mock_ctx, deps, tool_config, broken)

    @pytest.mark.asyncio
    async def test_callable_heading_receives_payload(self, mock_ctx: Context) -> None:
        deps = SimpleNamespace(get_client=lambda: MagicMock())
        tool_config = ToolConfig(action="count", log_message="Counting.", heading=lambda payload: f"{len(payload)} items")

        async def call(_client: DataverseClient) -> Any:
            return [1, 2]

        assert await run_tool(mock_ctx, deps, tool_config, call) == "2 items:\n\n[\n  1,\n  2\n]"

    def test_format_helpers(self) -> None:
        assert format_tool_result("Heading", {"a": 1}) == 'Heading:\n\n{\n  "a": 1\n}'
        assert format_tool_failure("get record", ApiError("boom")) == "Failed to get record: boom"
