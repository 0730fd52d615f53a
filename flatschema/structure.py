"""
Canonical structure tree for analyzed flat files.

A flat file analyzes to ``root (array) -> item (object) -> scalar columns``.
Nodes are immutable once built; generators read them and never change them.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from flatschema.errors import AnalyzerError, GenerationError
from flatschema.typeinference import TYPED_VALUES

ARRAY = 'array'
OBJECT = 'object'
SCALAR = 'scalar'

ITEM_NAME = 'item'


@dataclass(frozen=True)
class StructuralNode:
    """A node of the structure tree.

    Attributes:
        name: Node name; for columns this is the original column name
        kind: 'array', 'object' or 'scalar'
        declared_type: Inferred type, scalars only
        children: Ordered child nodes, names unique among siblings
        is_array: True if the node repeats
    """
    name: str
    kind: str
    declared_type: Optional[str] = None
    children: Tuple['StructuralNode', ...] = ()
    is_array: bool = False

    def __post_init__(self):
        if self.kind == SCALAR:
            if self.declared_type not in TYPED_VALUES:
                raise ValueError(f"Scalar '{self.name}' has invalid type {self.declared_type!r}")
            if self.children:
                raise ValueError(f"Scalar '{self.name}' cannot have children")
        elif self.kind in (ARRAY, OBJECT):
            if self.declared_type is not None:
                raise ValueError(f"Node '{self.name}' of kind {self.kind} cannot declare a type")
        else:
            raise ValueError(f"Unknown node kind {self.kind!r}")
        names = [child.name for child in self.children]
        if len(names) != len(set(names)):
            raise ValueError(f"Node '{self.name}' has duplicate child names")

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Returns a plain dict rendition of the subtree."""
        node: Dict[str, Any] = {"name": self.name, "kind": self.kind}
        if self.declared_type is not None:
            node["type"] = self.declared_type
        if self.is_array:
            node["isArray"] = True
        if self.children:
            node["children"] = [child.to_dict() for child in self.children]
        return node


def scalar_node(name: str, declared_type: str) -> StructuralNode:
    return StructuralNode(name=name, kind=SCALAR, declared_type=declared_type)


def object_node(name: str, children: List[StructuralNode]) -> StructuralNode:
    return StructuralNode(name=name, kind=OBJECT, children=tuple(children))


def array_node(name: str, children: List[StructuralNode]) -> StructuralNode:
    return StructuralNode(name=name, kind=ARRAY, children=tuple(children), is_array=True)


def build_row_structure(name: str, columns: List[Tuple[str, str]]) -> StructuralNode:
    """Builds ``root (array) -> item (object) -> columns`` from (name, type) pairs."""
    item = object_node(ITEM_NAME, [scalar_node(col, col_type) for col, col_type in columns])
    return array_node(name, [item])


def row_item(root: Optional[StructuralNode],
             error_type: Type[AnalyzerError] = GenerationError) -> StructuralNode:
    """Returns the item (row object) of a flat file structure.

    Raises:
        error_type: If the tree is not shaped ``array -> object``
    """
    if root is None:
        raise error_type("Root element cannot be null")
    if root.kind != ARRAY or not root.has_children:
        raise error_type("No structure found in flat file")
    item = root.children[0]
    if item.kind != OBJECT:
        raise error_type("Expected object type for flat file row")
    return item


def count_elements(node: Optional[StructuralNode]) -> int:
    if node is None:
        return 0
    return 1 + sum(count_elements(child) for child in node.children)


def count_fields(node: Optional[StructuralNode]) -> int:
    """Counts the scalar nodes of a subtree."""
    if node is None:
        return 0
    if node.kind == SCALAR:
        return 1
    return sum(count_fields(child) for child in node.children)


def count_arrays(node: Optional[StructuralNode]) -> int:
    if node is None:
        return 0
    return (1 if node.is_array else 0) + sum(count_arrays(child) for child in node.children)


def collect_array_paths(node: Optional[StructuralNode], path: str = '') -> List[str]:
    """Returns the dotted paths of all repeating nodes, in tree order."""
    if node is None:
        return []
    current_path = f"{path}.{node.name}" if path else node.name
    paths = [current_path] if node.is_array else []
    for child in node.children:
        paths.extend(collect_array_paths(child, current_path))
    return paths
