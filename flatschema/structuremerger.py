"""
Merges the structure trees of several samples of the same flat file.

Columns are unioned in first-seen order. A column seen in more than one
sample gets the widened type of all its occurrences.
"""

import logging
from typing import Dict, Optional, Sequence

from flatschema.common import structures_equal
from flatschema.errors import MergeError
from flatschema.structure import StructuralNode, build_row_structure, row_item
from flatschema.typeinference import merge_types

logger = logging.getLogger(__name__)


def merge_structures(structures: Optional[Sequence[StructuralNode]]) -> StructuralNode:
    """
    Merge flat file structures into one.

    Args:
        structures: Trees shaped ``array -> object -> scalars``, in sample order.
            The merged root takes the name of the first tree.

    Returns:
        StructuralNode: The merged tree; a single tree is returned unchanged.

    Raises:
        MergeError: If the list is empty or a tree is not shaped like a flat file.
    """
    if not structures:
        raise MergeError("No structures to merge")
    if len(structures) == 1:
        return structures[0]

    logger.debug("Merging %d structures", len(structures))
    base = structures[0]
    base_item = row_item(base, MergeError).to_dict()

    column_types: Dict[str, str] = {}
    for index, structure in enumerate(structures):
        item = row_item(structure, MergeError)
        if index > 0 and structures_equal(item.to_dict(), base_item):
            logger.debug("Structure %d is identical to the base structure", index)
            continue
        for column in item.children:
            if column.name in column_types:
                column_types[column.name] = merge_types(column_types[column.name], column.declared_type)
            else:
                column_types[column.name] = column.declared_type

    logger.debug("Structure merging completed - total columns: %d", len(column_types))
    return build_row_structure(base.name, list(column_types.items()))
