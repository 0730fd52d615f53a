"""
Registries for input handlers and schema generators.

Handlers are looked up by input kind ('csv', ...) and generators by mode
('standard', 'segmented', 'deduplicated'). Both registries are filled once
at start-up and only read afterwards.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Union

from flatschema.csvreader import CsvInputHandler
from flatschema.errors import UnsupportedInputError, ValidationError
from flatschema.options import OptionDescriptor
from flatschema.structure import StructuralNode
from flatschema.structuretoheaderrecord import generate_header_record_schema
from flatschema.structuretojsons import generate_standard_schema
from flatschema.structuretosegments import generate_segmented_schema

logger = logging.getLogger(__name__)

SchemaGeneratorFunc = Callable[[StructuralNode, Optional[Mapping[str, Any]]], Dict[str, Any]]


class InputHandler(Protocol):
    """Builds structure trees for one input kind."""
    kind: str
    available: bool

    def option_descriptors(self) -> List[OptionDescriptor]: ...

    def can_parse(self, content: Union[str, bytes, None]) -> bool: ...

    def parse(self, content: Union[str, bytes], schema_name: str,
              options: Optional[Mapping[str, str]] = None) -> StructuralNode: ...


class InputHandlerRegistry:
    """Maps input kinds to their handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[str, InputHandler] = {}

    def register(self, handler: InputHandler) -> None:
        kind = handler.kind.lower()
        logger.debug("Registering input handler for kind: %s", kind)
        self._handlers[kind] = handler

    def get(self, kind: Optional[str]) -> InputHandler:
        """
        Returns the handler for an input kind (case-insensitive).

        Raises:
            UnsupportedInputError: If no handler is registered for the kind.
        """
        handler = self._handlers.get((kind or '').lower())
        if handler is None:
            raise UnsupportedInputError(
                f"No handler registered for input kind '{kind}'. Available kinds: {', '.join(self.kinds())}",
                input_kind=kind)
        return handler

    def kinds(self) -> List[str]:
        return list(self._handlers.keys())

    def available_kinds(self) -> List[str]:
        return [kind for kind, handler in self._handlers.items() if handler.available]


def default_registry() -> InputHandlerRegistry:
    """Creates a registry holding the built-in input handlers."""
    registry = InputHandlerRegistry()
    registry.register(CsvInputHandler())
    return registry


@dataclass(frozen=True)
class GenerationMode:
    """A schema generation mode."""
    name: str
    description: str
    generate: SchemaGeneratorFunc

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description}


STANDARD_MODE = 'standard'
SEGMENTED_MODE = 'segmented'
DEDUPLICATED_MODE = 'deduplicated'
DEFAULT_MODE = STANDARD_MODE

GENERATORS: Dict[str, GenerationMode] = {
    mode.name: mode for mode in [
        GenerationMode(STANDARD_MODE,
                       'JSON Schema of an array of row objects',
                       generate_standard_schema),
        GenerationMode(SEGMENTED_MODE,
                       'JSON Schema grouped by column name prefix, with field positions (BeanIO mapping)',
                       generate_segmented_schema),
        GenerationMode(DEDUPLICATED_MODE,
                       'Header and Record definitions sharing deduplicated camelCase properties (jsonschema2pojo)',
                       generate_header_record_schema),
    ]
}


def get_generation_mode(mode: Optional[str]) -> GenerationMode:
    """
    Returns the generation mode of the given name.

    Raises:
        ValidationError: If the mode is unknown.
    """
    generation_mode = GENERATORS.get((mode or DEFAULT_MODE).lower())
    if generation_mode is None:
        raise ValidationError(
            f"Unknown generation mode '{mode}'. Supported modes: {', '.join(GENERATORS.keys())}")
    return generation_mode
