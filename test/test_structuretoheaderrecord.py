"""Tests for the deduplicating Header/Record schema generator."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from flatschema.common import column_camel
from flatschema.errors import GenerationError
from flatschema.structure import build_row_structure
from flatschema.structuretoheaderrecord import build_flat_properties, generate_header_record_schema


def flat(*columns, types=None):
    types = types or {}
    return build_row_structure("Expenses", [(c, types.get(c, "string")) for c in columns])


class TestStructureToHeaderRecord(unittest.TestCase):
    """Test cases for generate_header_record_schema."""

    def test_distinct_prefixes_do_not_collide(self):
        schema = generate_header_record_schema(flat("A.X", "B.X"))
        self.assertEqual(list(schema["$defs"]["Record"]["properties"].keys()), ["aX", "bX"])

    def test_colliding_names_get_counters(self):
        schema = generate_header_record_schema(flat("X", "x", "X "))
        self.assertEqual(list(schema["$defs"]["Header"]["properties"].keys()), ["x", "x2", "x3"])

    def test_document_layout(self):
        schema = generate_header_record_schema(flat("ACCOUNTS_BATCH.NUMBER"))
        self.assertEqual(schema["$schema"], "http://json-schema.org/draft-07/schema#")
        self.assertEqual(schema["title"], "Expenses")
        self.assertEqual(schema["type"], "object")
        self.assertEqual(schema["properties"]["header"], {"$ref": "#/$defs/Header"})
        self.assertEqual(schema["properties"]["records"], {
            "type": "array",
            "items": {"$ref": "#/$defs/Record"}
        })
        self.assertEqual(schema["$defs"]["Header"]["title"], "Header")
        self.assertEqual(schema["$defs"]["Record"]["title"], "Record")
        self.assertEqual(schema["$defs"]["Record"]["properties"]["accountsBatchNumber"], {
            "type": "string",
            "description": "CSV column: ACCOUNTS_BATCH.NUMBER"
        })

    def test_header_and_record_share_properties(self):
        root = flat("ID", "AMOUNT", "PAID", types={"ID": "integer", "AMOUNT": "number", "PAID": "boolean"})
        schema = generate_header_record_schema(root)
        header = schema["$defs"]["Header"]["properties"]
        record = schema["$defs"]["Record"]["properties"]
        self.assertEqual(header, record)
        self.assertIsNot(header, record)
        self.assertEqual(record["amount"]["type"], "number")

    def test_null_columns_become_strings(self):
        schema = generate_header_record_schema(flat("EMPTY", types={"EMPTY": "null"}))
        self.assertEqual(schema["$defs"]["Record"]["properties"]["empty"]["type"], "string")

    def test_names_without_alphanumerics(self):
        names = [p.name for p in build_flat_properties(flat("...", "__").children[0])]
        self.assertEqual(names, ["field", "field2"])

    def test_counter_skips_taken_names(self):
        names = [p.name for p in build_flat_properties(flat("x2", "x", "X").children[0])]
        self.assertEqual(names, ["x2", "x", "x3"])

    def test_column_camel(self):
        self.assertEqual(column_camel("ACCOUNTS_BATCH.NUMBER"), "accountsBatchNumber")
        self.assertEqual(column_camel("REPORT.DOC_NUMBER"), "reportDocNumber")
        self.assertEqual(column_camel("EXPENSE.TYPE_TOWN/CITY"), "expenseTypeTownCity")
        self.assertEqual(column_camel("order id"), "orderId")
        self.assertEqual(column_camel("---"), "")

    def test_rejects_missing_tree(self):
        with self.assertRaises(GenerationError):
            generate_header_record_schema(None)


if __name__ == '__main__':
    unittest.main()
