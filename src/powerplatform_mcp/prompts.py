"""MCP prompts for PowerPlatform exploration.

Exposes common Dataverse workflows as prompts.
"""

# pyright: reportUnusedFunction=false

from fastmcp import FastMCP


def register(app: FastMCP) -> None:
    """Register prompts on the provided app instance."""

    @app.prompt(
        name="Explore Entity",
        description="Create a prompt to summarize a Dataverse entity's structure.",
        tags={"metadata", "entities"},
    )
    def explore_entity(entity_name: str) -> str:
        return (
            f"Please describe the PowerPlatform entity '{entity_name}'. "
            "Use get-entity-metadata for its display name, primary key and primary name attribute, "
            "get-entity-attributes to list its fields with their types, "
            "and get-entity-relationships to explain how it relates to other entities."
        )

    @app.prompt(
        name="Build OData Query",
        description="Help compose and run an OData filter against an entity set.",
        tags={"records", "query"},
    )
    def build_odata_query(entity_name_plural: str, goal: str = "") -> str:
        prompt = f"I want to query records from '{entity_name_plural}'."
        if goal:
            prompt += f" Goal: {goal}."
        prompt += (
            " First inspect the entity's attributes with get-entity-attributes to find the right logical names, "
            "then compose an OData $filter expression and run it with query-records. "
            "Keep max_records small until the filter is confirmed to be correct."
        )
        return prompt

    @app.prompt(
        name="Explain Option Set",
        description="Explain the values of a global option set.",
        tags={"metadata", "option-sets"},
    )
    def explain_option_set(option_set_name: str) -> str:
        return (
            f"Please explain the global option set '{option_set_name}'. "
            "Use get-global-option-set to list each option's value and label, "
            "and point out any options that look deprecated or duplicated."
        )


__all__ = ["register"]
