"""Tests for the standard (array of row objects) schema generator."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from flatschema.analyzer import analyze
from flatschema.common import JSON_SCHEMA_DRAFT_07
from flatschema.errors import GenerationError
from flatschema.structure import build_row_structure, object_node, scalar_node
from flatschema.structuretojsons import generate_standard_schema, json_schema_type


class TestStructureToJsonSchema(unittest.TestCase):
    """Test cases for generate_standard_schema."""

    def test_products(self):
        root = analyze(["ID", "Name", "Price"], [["1", "Product A", "19.99"]], schema_name="products")
        schema = generate_standard_schema(root)

        self.assertEqual(schema["$schema"], JSON_SCHEMA_DRAFT_07)
        self.assertEqual(schema["title"], "products")
        self.assertEqual(schema["type"], "array")
        self.assertEqual(schema["items"]["type"], "object")
        self.assertEqual(schema["items"]["properties"], {
            "ID": {"type": "integer"},
            "Name": {"type": "string"},
            "Price": {"type": "number"},
        })

    def test_properties_keep_column_order(self):
        root = build_row_structure("t", [("Z", "string"), ("A", "string"), ("M", "string")])
        schema = generate_standard_schema(root)
        self.assertEqual(list(schema["items"]["properties"].keys()), ["Z", "A", "M"])

    def test_null_columns_become_strings(self):
        root = build_row_structure("t", [("Empty", "null"), ("Flag", "boolean")])
        properties = generate_standard_schema(root)["items"]["properties"]
        self.assertEqual(properties["Empty"], {"type": "string"})
        self.assertEqual(properties["Flag"], {"type": "boolean"})

    def test_schema_name_option_overrides_title(self):
        root = build_row_structure("t", [("A", "integer")])
        schema = generate_standard_schema(root, {"schemaName": "Orders"})
        self.assertEqual(schema["title"], "Orders")

    def test_rejects_non_flat_tree(self):
        with self.assertRaises(GenerationError):
            generate_standard_schema(object_node("t", [scalar_node("A", "integer")]))
        with self.assertRaises(GenerationError):
            generate_standard_schema(None)

    def test_type_mapping(self):
        self.assertEqual(json_schema_type("integer"), "integer")
        self.assertEqual(json_schema_type("number"), "number")
        self.assertEqual(json_schema_type("boolean"), "boolean")
        self.assertEqual(json_schema_type("null"), "string")
        self.assertEqual(json_schema_type("string"), "string")


if __name__ == '__main__':
    unittest.main()
