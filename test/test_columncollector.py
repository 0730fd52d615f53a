"""Tests for building structure trees from rows."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from flatschema.columncollector import (ColumnCollector, ColumnDescriptor, collect_structure,
                                        normalize_column_names)
from flatschema.errors import EmptyInputError, InvalidOptionError
from flatschema.options import CsvOptions
from flatschema.structure import ARRAY, ITEM_NAME, OBJECT, SCALAR


def column_types(root):
    return {column.name: column.declared_type for column in root.children[0].children}


class TestColumnCollector(unittest.TestCase):
    """Test cases for ColumnCollector."""

    def test_header_row(self):
        rows = [["ID", "Name", "Price"], ["1", "Product A", "19.99"]]
        root = ColumnCollector().collect("products", rows)

        self.assertEqual(root.name, "products")
        self.assertEqual(root.kind, ARRAY)
        self.assertTrue(root.is_array)
        self.assertEqual(len(root.children), 1)
        item = root.children[0]
        self.assertEqual(item.name, ITEM_NAME)
        self.assertEqual(item.kind, OBJECT)
        self.assertEqual([c.name for c in item.children], ["ID", "Name", "Price"])
        self.assertTrue(all(c.kind == SCALAR for c in item.children))
        self.assertEqual(column_types(root), {"ID": "integer", "Name": "string", "Price": "number"})

    def test_supplied_columns(self):
        rows = [["1", "Product A", "19.99"]]
        root = collect_structure("products", rows, columns=["ID", "Name", "Price"])
        self.assertEqual(column_types(root), {"ID": "integer", "Name": "string", "Price": "number"})

    def test_without_header_uses_placeholders(self):
        rows = [["1", "x"], ["2", "y"]]
        root = ColumnCollector({"hasHeader": "false"}).collect("data", rows)
        self.assertEqual(column_types(root), {"column1": "integer", "column2": "string"})

    def test_header_only_gives_null_columns(self):
        root = ColumnCollector().collect("data", [["A", "B"]])
        self.assertEqual(column_types(root), {"A": "null", "B": "null"})

    def test_blank_values_are_not_sampled(self):
        rows = [["A"], [""], ["  "], ["3"]]
        root = ColumnCollector().collect("data", rows)
        self.assertEqual(column_types(root), {"A": "integer"})

    def test_short_rows(self):
        rows = [["A", "B"], ["1"], ["2", "true"]]
        root = ColumnCollector().collect("data", rows)
        self.assertEqual(column_types(root), {"A": "integer", "B": "boolean"})

    def test_sample_limit(self):
        """Values beyond the sample limit do not influence the type."""
        rows = [["A"], ["1"], ["2"], ["abc"]]
        root = ColumnCollector({"sampleRows": "2"}).collect("data", rows)
        self.assertEqual(column_types(root), {"A": "integer"})

        root = ColumnCollector({"sampleRows": "3"}).collect("data", rows)
        self.assertEqual(column_types(root), {"A": "string"})

    def test_sample_limit_counts_non_blank_values(self):
        rows = [["A"], [""], [""], ["1"], ["x"]]
        root = ColumnCollector({"sampleRows": "2"}).collect("data", rows)
        self.assertEqual(column_types(root), {"A": "string"})

    def test_stops_reading_when_saturated(self):
        consumed = []

        def rows():
            yield ["A"]
            for value in ["abc", "1", "2"]:
                consumed.append(value)
                yield [value]

        root = ColumnCollector().collect("data", rows())
        self.assertEqual(column_types(root), {"A": "string"})
        self.assertEqual(consumed, ["abc"])

    def test_skip_lines(self):
        rows = [["exported by tool"], ["ID", "Amount"], ["1", "2.5"]]
        root = ColumnCollector({"skipLines": "1"}).collect("data", rows)
        self.assertEqual(column_types(root), {"ID": "integer", "Amount": "number"})

    def test_empty_after_skip_lines(self):
        with self.assertRaises(EmptyInputError) as context:
            ColumnCollector({"skipLines": "2"}).collect("data", [["a"], ["b"]])
        self.assertEqual(context.exception.kind, "EMPTY_INPUT")

    def test_empty_input(self):
        with self.assertRaises(EmptyInputError):
            ColumnCollector().collect("data", [])

    def test_duplicate_and_blank_headers(self):
        rows = [["X", "", "X", "X"], ["1", "2", "3", "4"]]
        root = ColumnCollector().collect("data", rows)
        self.assertEqual([c.name for c in root.children[0].children], ["X", "column2", "X_2", "X_3"])

    def test_invalid_numeric_options(self):
        for options in [{"sampleRows": "many"}, {"skipLines": "-1"}, {"sampleRows": "0"}]:
            with self.assertRaises(InvalidOptionError, msg=str(options)):
                ColumnCollector(options)

    def test_accepts_parsed_options(self):
        collector = ColumnCollector(CsvOptions(sample_rows=5))
        self.assertEqual(collector.options.sample_rows, 5)


class TestColumnHelpers(unittest.TestCase):
    """Test cases for the column helpers."""

    def test_descriptor_saturates_on_string(self):
        descriptor = ColumnDescriptor("A", sample_limit=10)
        descriptor.offer("1")
        self.assertFalse(descriptor.saturated)
        descriptor.offer("abc")
        self.assertTrue(descriptor.saturated)
        descriptor.offer("2")
        self.assertEqual(descriptor.samples, ["1", "abc"])

    def test_normalize_keeps_unique_names(self):
        self.assertEqual(normalize_column_names(["A", "B"]), ["A", "B"])

    def test_normalize_avoids_existing_suffix(self):
        self.assertEqual(normalize_column_names(["A", "A_2", "A"]), ["A", "A_2", "A_3"])


if __name__ == '__main__':
    unittest.main()
