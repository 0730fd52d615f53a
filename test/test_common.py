"""Tests for the common helpers."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from flatschema.common import render_schema, split_words, structures_equal
from flatschema.errors import AnalyzerError, SerializationError, ValidationError


class TestCommon(unittest.TestCase):
    """Test cases for rendering and comparing documents."""

    def test_render_schema(self):
        text = render_schema({"title": "Straße", "type": "object"})
        self.assertIn('"title": "Straße"', text)
        self.assertTrue(text.startswith('{\n  "title"'))

    def test_render_unserializable(self):
        with self.assertRaises(SerializationError) as context:
            render_schema({"default": float("nan")})
        self.assertEqual(context.exception.kind, 'SERIALIZATION_ERROR')
        with self.assertRaises(SerializationError):
            render_schema({"value": object()})

    def test_structures_equal(self):
        self.assertTrue(structures_equal({"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1}))
        self.assertFalse(structures_equal({"a": 1}, {"a": 2}))

    def test_split_words(self):
        self.assertEqual(split_words("EXPENSE.TYPE_TOWN/CITY"), ["EXPENSE", "TYPE", "TOWN", "CITY"])
        self.assertEqual(split_words("__"), [])


class TestErrors(unittest.TestCase):
    """Test cases for the error hierarchy."""

    def test_message_includes_input_kind(self):
        error = ValidationError("schema name cannot be null or blank", input_kind="csv")
        self.assertEqual(str(error), "schema name cannot be null or blank (input kind: csv)")
        self.assertEqual(error.kind, 'VALIDATION_ERROR')
        self.assertIsInstance(error, AnalyzerError)

    def test_kind_override(self):
        cause = ValueError("bad")
        error = AnalyzerError("Failed", kind='PARSE_ERROR', cause=cause)
        self.assertEqual(error.kind, 'PARSE_ERROR')
        self.assertIs(error.cause, cause)
        self.assertEqual(str(error), "Failed")
        self.assertEqual(AnalyzerError("x").kind, 'ANALYSIS_ERROR')


if __name__ == '__main__':
    unittest.main()
