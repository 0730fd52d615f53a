"""
Flat file structure to Header/Record JSON Schema converter.

Produces a schema for class generators such as jsonschema2pojo: a root
object with a ``header`` property and a ``records`` array, both backed by
definitions in ``$defs`` that share one flat property set::

    {
      "$schema": "http://json-schema.org/draft-07/schema#",
      "title": "MySchema",
      "type": "object",
      "properties": {
        "header": {"$ref": "#/$defs/Header"},
        "records": {"type": "array", "items": {"$ref": "#/$defs/Record"}}
      },
      "$defs": {
        "Header": {"title": "Header", "type": "object", "properties": {...}},
        "Record": {"title": "Record", "type": "object", "properties": {...}}
      }
    }

Column names are turned into camelCase property names. When two columns
produce the same name, the second gets a '2' suffix, the third a '3', and
so on.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from flatschema.common import JSON_SCHEMA_DRAFT_07, column_camel
from flatschema.options import get_option
from flatschema.structure import StructuralNode, row_item
from flatschema.structuretojsons import json_schema_type

logger = logging.getLogger(__name__)

FALLBACK_PROPERTY_NAME = 'field'


@dataclass(frozen=True)
class FlatProperty:
    """One property of the shared Header/Record property set."""
    name: str
    type: str
    original_name: str


def property_base_name(column_name: str) -> str:
    return column_camel(column_name) or FALLBACK_PROPERTY_NAME


def build_flat_properties(item: StructuralNode) -> List[FlatProperty]:
    """Names every column of the row, deduplicating names in column order."""
    counts: Dict[str, int] = {}
    used = set()
    properties: List[FlatProperty] = []
    for column in item.children:
        base_name = property_base_name(column.name)
        count = counts.get(base_name, 0) + 1
        name = base_name if count == 1 else f"{base_name}{count}"
        while name in used:
            count += 1
            name = f"{base_name}{count}"
        counts[base_name] = count
        used.add(name)
        properties.append(FlatProperty(name, json_schema_type(column.declared_type), column.name))
    return properties


def _definition(title: str, properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "title": title,
        "type": "object",
        "properties": copy.deepcopy(properties)
    }


def generate_header_record_schema(root: StructuralNode, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Generate a Header + Records JSON Schema with one shared flat property set.

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
    logger.debug("Generating Header/Record schema for: %s", title)

    flat_properties = {
        prop.name: {"type": prop.type, "description": f"CSV column: {prop.original_name}"}
        for prop in build_flat_properties(item)
    }

    schema: Dict[str, Any] = {
        "$schema": JSON_SCHEMA_DRAFT_07,
        "title": title,
        "type": "object",
        "properties": {
            "header": {"$ref": "#/$defs/Header"},
            "records": {
                "type": "array",
                "items": {"$ref": "#/$defs/Record"}
            }
        },
        "$defs": {
            "Header": _definition("Header", flat_properties),
            "Record": _definition("Record", flat_properties)
        }
    }
    logger.debug("Schema generated with %d properties in Header and Record", len(flat_properties))
    return schema
