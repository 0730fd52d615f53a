"""
Common utility functions for flatschema.
"""

# pylint: disable=line-too-long

import json
import re
from typing import Any, Dict, List

from jsoncomparison import NO_DIFF, Compare

from flatschema.errors import SerializationError

JSON_SCHEMA_DRAFT_07 = "http://json-schema.org/draft-07/schema#"


def split_words(string: str) -> List[str]:
    """Splits a string on every run of non-alphanumeric characters, dropping empty words."""
    return [word for word in re.split(r'[^A-Za-z0-9]+', string) if word]


def column_camel(string: str) -> str:
    """
    Convert a column name to camelCase.

    Every non-alphanumeric character separates words. The first word is
    lowercased, the following words are capitalized.

    Examples:
        ACCOUNTS_BATCH.NUMBER -> accountsBatchNumber
        REPORT.DOC_NUMBER -> reportDocNumber
        EXPENSE.TYPE_TOWN/CITY -> expenseTypeTownCity

    Args:
        string (str): The column name to convert.

    Returns:
        str: The name in camelCase, empty if the name has no alphanumeric characters.
    """
    words = split_words(string)
    if not words:
        return ''
    return words[0].lower() + ''.join(word.capitalize() for word in words[1:])


def record_name(schema_name: str) -> str:
    """
    Convert a schema name to a record name: CSV_ACCOUNTING_CANONICAL -> csvAccountingCanonical.

    Only underscores separate words; a blank schema name yields 'record'.
    """
    if not schema_name or not schema_name.strip():
        return 'record'
    parts = [part.lower() for part in schema_name.split('_')]
    return parts[0] + ''.join(part[:1].upper() + part[1:] for part in parts[1:])


def structures_equal(left: Dict[str, Any], right: Dict[str, Any]) -> bool:
    """Check if two JSON documents are structurally equal."""
    return Compare().check(left, right) == NO_DIFF


def render_schema(schema: Dict[str, Any]) -> str:
    """
    Render a schema document as indented JSON text.

    Raises:
        SerializationError: If the document holds values JSON cannot represent.
    """
    try:
        return json.dumps(schema, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize schema: {e}", cause=e) from e
