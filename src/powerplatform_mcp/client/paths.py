"""Relative path builders for the Dataverse Web API.

Each helper is pure string composition. Entity, attribute and option-set names
and record ids are interpolated as given; callers must supply values that are
safe for OData literal syntax. Only the query filter expression is
percent-encoded.
"""

from urllib.parse import quote

API_ROOT = "api/data/v9.2"
DEFAULT_MAX_RECORDS = 50


def entity_definition_path(entity_name: str) -> str:
    """Return the path of an entity definition by logical name."""
    return f"{API_ROOT}/EntityDefinitions(LogicalName='{entity_name}')"


def entity_attributes_path(entity_name: str) -> str:
    """Return the path listing all attributes of an entity."""
    return f"{entity_definition_path(entity_name)}/Attributes"


def entity_attribute_path(entity_name: str, attribute_name: str) -> str:
    """Return the path of a single attribute by logical name."""
    return f"{entity_definition_path(entity_name)}/Attributes(LogicalName='{attribute_name}')"


def one_to_many_relationships_path(entity_name: str) -> str:
    """Return the path listing the one-to-many relationships of an entity."""
    return f"{entity_definition_path(entity_name)}/OneToManyRelationships"


def many_to_many_relationships_path(entity_name: str) -> str:
    """Return the path listing the many-to-many relationships of an entity."""
    return f"{entity_definition_path(entity_name)}/ManyToManyRelationships"


def global_option_set_path(option_set_name: str) -> str:
    """Return the path of a global option set definition by name."""
    return f"{API_ROOT}/GlobalOptionSetDefinitions(Name='{option_set_name}')"


def record_path(entity_name_plural: str, record_id: str) -> str:
    """Return the path of a single record in an entity set."""
    return f"{API_ROOT}/{entity_name_plural}({record_id})"


def query_records_path(
    entity_name_plural: str,
    filter_expression: str,
    max_records: int = DEFAULT_MAX_RECORDS,
) -> str:
    """Return the path of a filtered query against an entity set.

    The filter is percent-encoded with no safe characters, so ``name eq 'test'``
    becomes ``name%20eq%20%27test%27``.
    """
    encoded_filter = quote(filter_expression, safe="")
    return f"{API_ROOT}/{entity_name_plural}?$filter={encoded_filter}&$top={max_records}"


__all__ = [
    "API_ROOT",
    "DEFAULT_MAX_RECORDS",
    "entity_attribute_path",
    "entity_attributes_path",
    "entity_definition_path",
    "global_option_set_path",
    "many_to_many_relationships_path",
    "one_to_many_relationships_path",
    "query_records_path",
    "record_path",
]
