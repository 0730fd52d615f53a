# coding: utf-8
"""
Input handler for delimited text (CSV) files.

Tokenizing is left to pandas; this module only configures the reader,
hands the rows to the column collector and documents the options.
"""

import dataclasses
import io
import logging
import re
import warnings
from typing import List, Mapping, Optional, Union

import pandas as pd

from flatschema.columncollector import ColumnCollector
from flatschema.errors import AnalyzerError
from flatschema.options import CSV_OPTION_DESCRIPTORS, CsvOptions, OptionDescriptor
from flatschema.structure import StructuralNode

logger = logging.getLogger(__name__)

BOM = '\ufeff'


def remove_bom(content: str) -> str:
    """Removes a UTF-8 byte order mark from the beginning of the content."""
    if content.startswith(BOM):
        logger.debug("BOM detected and removed from CSV content")
        return content[1:]
    return content


def protect_escapes(content: str, escape_char: str, quote_char: str) -> str:
    """
    Doubles every escape character that is not followed by a quote or another
    escape character.

    The escape character only escapes a quote or itself; elsewhere it is a
    literal character ('C:\\temp' keeps its backslash).
    """
    escape = re.escape(escape_char)
    pattern = re.compile(f"{escape}(?:[{re.escape(quote_char)}{escape}])?")
    return pattern.sub(lambda m: m.group(0) if len(m.group(0)) == 2 else escape_char * 2, content)


def _keep_long_line(line: List[str]) -> List[str]:
    # pandas drops the cells beyond the expected width
    return line


def read_csv_rows(content: Union[str, bytes], options: CsvOptions) -> List[List[str]]:
    """
    Tokenize delimited text into rows of string cells.

    The first ``options.skip_lines`` physical lines are dropped by the
    reader, so a preamble with a different column count does not disturb
    tokenizing. Blank lines are skipped, short rows are padded with empty
    cells and surplus cells of long rows are dropped.

    :param content: File content; bytes are decoded with ``options.encoding``.
    :param options: Parsed CSV options.
    :return: The rows, header row included.
    """
    if isinstance(content, bytes):
        content = content.decode(options.encoding)
    content = remove_bom(content)
    escape_char = options.escape_char
    if escape_char == options.quote_char:
        # a quote escapes a quote by doubling, which the reader does by default
        escape_char = None
    else:
        content = protect_escapes(content, escape_char, options.quote_char)

    logger.debug("CSV options - delimiter: '%s', hasHeader: %s, skipLines: %d, sampleRows: %d",
                 options.delimiter, options.has_header, options.skip_lines, options.sample_rows)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(content),
                sep=options.delimiter,
                quotechar=options.quote_char,
                escapechar=escape_char,
                header=None,
                index_col=False,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=True,
                skiprows=options.skip_lines,
                engine='python',
                on_bad_lines=_keep_long_line,
            )
    except pd.errors.EmptyDataError:
        return []

    rows = [[cell if isinstance(cell, str) else '' for cell in row]
            for row in df.itertuples(index=False, name=None)]
    logger.debug("Read %d CSV rows", len(rows))
    return rows


class CsvInputHandler:
    """
    Builds structure trees from delimited text content.
    """

    kind = 'csv'
    available = True

    def option_descriptors(self) -> List[OptionDescriptor]:
        return list(CSV_OPTION_DESCRIPTORS)

    def can_parse(self, content: Union[str, bytes, None]) -> bool:
        if content is None:
            return False
        if isinstance(content, bytes):
            return len(content) > 0
        return bool(content.strip())

    def parse(self, content: Union[str, bytes], schema_name: str,
              options: Optional[Mapping[str, str]] = None) -> StructuralNode:
        """
        Parse CSV content into a structure tree.

        :raises InvalidOptionError: If an option value cannot be parsed.
        :raises EmptyInputError: If no rows remain after the skipped lines.
        :raises AnalyzerError: With kind PARSE_ERROR if the content cannot be tokenized.
        """
        logger.debug("Starting CSV parsing for schema: %s", schema_name)
        try:
            csv_options = CsvOptions.from_options(options)
            rows = read_csv_rows(content, csv_options)
            # the reader has already dropped the skipped lines
            collector = ColumnCollector(dataclasses.replace(csv_options, skip_lines=0))
            root = collector.collect(schema_name, rows)
        except AnalyzerError as e:
            if e.input_kind is None:
                raise type(e)(e.message, kind=e.kind, input_kind=self.kind, cause=e.cause) from e
            raise
        except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
            raise AnalyzerError(f"Failed to parse CSV: {e}", kind='PARSE_ERROR',
                                input_kind=self.kind, cause=e) from e
        logger.debug("CSV parsing completed successfully")
        return root
