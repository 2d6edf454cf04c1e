"""Unit tests for MCP prompts."""

from collections.abc import Callable
from typing import Any

import pytest

from powerplatform_mcp import prompts


class _FakeApp:
    """Minimal stand-in for FastMCP app to capture registered prompts."""

    def __init__(self) -> None:
        self.prompts: dict[str, Callable[..., str]] = {}

    def prompt(self, *, name: str, description: str, tags: set[str] | None = None) -> Callable[[Any], Any]:
        def _decorator(func: Callable[..., str]) -> Callable[..., str]:
            _ = (description, tags)
            self.prompts[name] = func
            return func

        return _decorator


@pytest.fixture
def app() -> _FakeApp:
    fake_app = _FakeApp()
    prompts.register(fake_app)  # type: ignore[arg-type]
    return fake_app


def test_register_prompts(app: _FakeApp) -> None:
    """Test that prompts are registered with the app."""
    assert set(app.prompts) == {"Explore Entity", "Build OData Query", "Explain Option Set"}


def test_explore_entity_prompt(app: _FakeApp) -> None:
    result = app.prompts["Explore Entity"](entity_name="account")
    assert "'account'" in result
    assert "get-entity-metadata" in result
    assert "get-entity-relationships" in result


def test_build_odata_query_prompt_with_goal(app: _FakeApp) -> None:
    result = app.prompts["Build OData Query"](entity_name_plural="contacts", goal="find active contacts in Seattle")
    assert "'contacts'" in result
    assert "Goal: find active contacts in Seattle." in result
    assert "query-records" in result


def test_build_odata_query_prompt_without_goal(app: _FakeApp) -> None:
    result = app.prompts["Build OData Query"](entity_name_plural="contacts")
    assert "Goal:" not in result


def test_explain_option_set_prompt(app: _FakeApp) -> None:
    result = app.prompts["Explain Option Set"](option_set_name="budgetstatus")
    assert "'budgetstatus'" in result
    assert "get-global-option-set" in result
