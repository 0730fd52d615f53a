"""
Exceptions raised by the flat file schema analyzer.

Every failure is terminal for the request that raised it. Each exception
carries a kind tag (e.g. ``EMPTY_INPUT``) so callers on the transport side
can map it to a response without inspecting the class hierarchy.
"""

from typing import Optional


class AnalyzerError(Exception):
    """
    Base exception for schema analysis failures.

    Attributes:
        message: Human-readable error description
        kind: Error kind tag, e.g. ``VALIDATION_ERROR``
        input_kind: Input kind being analyzed when the error occurred, if known
        cause: Optional underlying exception that caused this error
    """

    kind = 'ANALYSIS_ERROR'

    def __init__(self, message: str, kind: Optional[str] = None,
                 input_kind: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        self.message = message
        if kind:
            self.kind = kind
        self.input_kind = input_kind
        self.cause = cause
        full_message = message
        if input_kind:
            full_message = f"{message} (input kind: {input_kind})"
        super().__init__(full_message)


class ValidationError(AnalyzerError):
    """A required request field is missing or blank."""
    kind = 'VALIDATION_ERROR'


class UnsupportedInputError(AnalyzerError):
    """No handler is registered for the declared input kind."""
    kind = 'UNSUPPORTED_INPUT'


class EmptyInputError(AnalyzerError):
    """The row source yielded no rows once the skipped lines were dropped."""
    kind = 'EMPTY_INPUT'


class InvalidOptionError(AnalyzerError):
    """A numeric parser option could not be parsed."""
    kind = 'INVALID_OPTION'


class MergeError(AnalyzerError):
    """Structures could not be merged."""
    kind = 'MERGE_ERROR'


class GenerationError(AnalyzerError):
    """A schema document could not be generated from the structure."""
    kind = 'GENERATION_ERROR'


class SerializationError(AnalyzerError):
    """A schema document could not be rendered as text."""
    kind = 'SERIALIZATION_ERROR'
