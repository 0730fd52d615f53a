""" Flat file structure to JSON Schema (array of objects) converter. """

import logging
from typing import Any, Dict, Mapping, Optional

from flatschema.common import JSON_SCHEMA_DRAFT_07
from flatschema.options import get_option
from flatschema.structure import StructuralNode, row_item
from flatschema.typeinference import BOOLEAN, INTEGER, NUMBER

logger = logging.getLogger(__name__)

# null and string both become "string"; the null information is dropped.
_JSON_SCHEMA_TYPES = {
    INTEGER: 'integer',
    NUMBER: 'number',
    BOOLEAN: 'boolean',
}


def json_schema_type(declared_type: Optional[str]) -> str:
    """Maps an inferred column type to a JSON Schema type name."""
    return _JSON_SCHEMA_TYPES.get(declared_type, 'string')


def generate_standard_schema(root: StructuralNode, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Generate a draft-07 JSON Schema describing the file as an array of row objects.

    Args:
        root: Structure tree shaped ``array -> object -> scalars``
        options: Optional mapping; 'schemaName' overrides the title

    Returns:
        Dict[str, Any]: The JSON Schema document

    Raises:
        GenerationError: If the tree is not shaped like a flat file
    """
    item = row_item(root)
    title = get_option(options, 'schemaName', root.name)
    logger.debug("Generating standard JSON Schema for: %s", title)

    properties: Dict[str, Any] = {}
    for column in item.children:
        properties[column.name] = {"type": json_schema_type(column.declared_type)}

    schema: Dict[str, Any] = {
        "$schema": JSON_SCHEMA_DRAFT_07,
        "title": title,
        "description": f"Rows of {title}",
        "type": "array",
        "items": {
            "type": "object",
            "properties": properties
        }
    }
    logger.debug("Standard JSON Schema generated with %d properties", len(properties))
    return schema
