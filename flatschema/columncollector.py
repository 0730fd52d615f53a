"""
Builds the structure tree of a flat file from its rows.

The collector samples a bounded number of non-blank values per column,
widens their inferred types in row order and produces
``root (array) -> item (object) -> one scalar per column``.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from flatschema.errors import EmptyInputError
from flatschema.options import CsvOptions
from flatschema.structure import StructuralNode, build_row_structure
from flatschema.typeinference import NULL, is_settled, widen

logger = logging.getLogger(__name__)

Row = Sequence[Optional[str]]


@dataclass
class ColumnDescriptor:
    """Sampling state of one column while rows are read."""
    original_name: str
    sample_limit: int
    samples: List[str] = field(default_factory=list)
    inferred_type: str = NULL

    @property
    def saturated(self) -> bool:
        """True once no further value can change the inferred type."""
        return is_settled(self.inferred_type) or len(self.samples) >= self.sample_limit

    def offer(self, value: Optional[str]) -> None:
        """Samples a cell value; blanks are not sampled."""
        if value is None or not value.strip() or self.saturated:
            return
        self.samples.append(value)
        self.inferred_type = widen(self.inferred_type, value)


def placeholder_name(index: int) -> str:
    """Placeholder for a column without a header, 0-based index in, 'columnN' out."""
    return f"column{index + 1}"


def normalize_column_names(names: Sequence[Optional[str]]) -> List[str]:
    """Replaces blank names with placeholders and suffixes repeated names.

    The second 'X' becomes 'X_2', the third 'X_3', so that sibling names
    stay unique while the original position of each column is kept.
    """
    result: List[str] = []
    seen = set()
    for index, raw in enumerate(names):
        name = raw.strip() if raw is not None else ''
        if not name:
            name = placeholder_name(index)
        candidate = name
        counter = 1
        while candidate in seen:
            counter += 1
            candidate = f"{name}_{counter}"
        if candidate != name:
            logger.debug("Duplicate column name '%s' renamed to '%s'", name, candidate)
        seen.add(candidate)
        result.append(candidate)
    return result


class ColumnCollector:
    """
    Collects per-column samples from a row stream and builds a structure tree.
    """

    def __init__(self, options: Union[CsvOptions, Mapping[str, str], None] = None):
        """
        :param options: Parsed CsvOptions or a string-valued option mapping.
        """
        if not isinstance(options, CsvOptions):
            options = CsvOptions.from_options(options)
        self.options = options

    def collect(self, schema_name: str, rows: Iterable[Row],
                columns: Optional[Sequence[str]] = None) -> StructuralNode:
        """
        Samples the rows and builds the structure tree.

        :param schema_name: Name of the root node.
        :param rows: Row stream, each row an ordered list of string cells.
        :param columns: Column names. When omitted they are taken from the
            header row (hasHeader) or generated as column1..columnN.
        :return: The root node of the tree.
        :raises EmptyInputError: If no rows remain after skipping lines.
        """
        row_iter = iter(rows)
        skipped = list(itertools.islice(row_iter, self.options.skip_lines))
        logger.debug("Skipped %d leading lines", len(skipped))

        first_row = next(row_iter, None)
        if first_row is None:
            raise EmptyInputError("Flat file is empty")

        if columns is not None:
            data_rows = itertools.chain([first_row], row_iter)
            header = list(columns)
        elif self.options.has_header:
            data_rows = row_iter
            header = list(first_row)
        else:
            data_rows = itertools.chain([first_row], row_iter)
            header = [placeholder_name(i) for i in range(len(first_row))]

        names = normalize_column_names(header)
        logger.debug("Columns: %s", names)

        descriptors = [ColumnDescriptor(name, self.options.sample_rows) for name in names]
        rows_read = 0
        for row in data_rows:
            rows_read += 1
            for descriptor, value in zip(descriptors, row):
                descriptor.offer(value)
            if all(d.saturated for d in descriptors):
                break
        logger.debug("Read %d data rows for sampling", rows_read)

        for descriptor in descriptors:
            logger.debug("Column '%s' inferred type: %s (%d samples)",
                         descriptor.original_name, descriptor.inferred_type, len(descriptor.samples))

        return build_row_structure(
            schema_name, [(d.original_name, d.inferred_type) for d in descriptors])


def collect_structure(schema_name: str, rows: Iterable[Row],
                      options: Union[CsvOptions, Mapping[str, str], None] = None,
                      columns: Optional[Sequence[str]] = None) -> StructuralNode:
    """Convenience wrapper around ColumnCollector.collect."""
    return ColumnCollector(options).collect(schema_name, rows, columns)
