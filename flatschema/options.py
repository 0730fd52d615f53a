"""
Parser options for flat file analysis.

Options arrive as string-valued mappings (the way the transport layer
delivers them) and are parsed here into typed values with documented
defaults.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from flatschema.errors import InvalidOptionError

DEFAULT_DELIMITER = ','
DEFAULT_HAS_HEADER = 'true'
DEFAULT_ENCODING = 'UTF-8'
DEFAULT_QUOTE_CHAR = '"'
DEFAULT_ESCAPE_CHAR = '\\'
DEFAULT_SKIP_LINES = '0'
DEFAULT_SAMPLE_ROWS = '100'


@dataclass(frozen=True)
class OptionDescriptor:
    """Documents one parser option for introspection."""
    name: str
    description: str
    default: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description, "default": self.default}


CSV_OPTION_DESCRIPTORS: List[OptionDescriptor] = [
    OptionDescriptor('delimiter', 'Column delimiter', DEFAULT_DELIMITER),
    OptionDescriptor('hasHeader', 'Whether the first row contains headers (true/false)', DEFAULT_HAS_HEADER),
    OptionDescriptor('encoding', 'File encoding', DEFAULT_ENCODING),
    OptionDescriptor('quoteChar', 'Quote character', DEFAULT_QUOTE_CHAR),
    OptionDescriptor('escapeChar', 'Escape character', DEFAULT_ESCAPE_CHAR),
    OptionDescriptor('skipLines', 'Number of lines to skip at the beginning', DEFAULT_SKIP_LINES),
    OptionDescriptor('sampleRows', 'Number of non-blank values per column sampled for type inference', DEFAULT_SAMPLE_ROWS),
]


def get_option(options: Optional[Mapping[str, str]], key: str, default: str) -> str:
    """Returns an option value, or the default if the option is missing or None."""
    if not options:
        return default
    value = options.get(key)
    return default if value is None else str(value)


def parse_bool_option(value: str) -> bool:
    """Only 'true' (any case) is true; everything else is false."""
    return value.strip().lower() == 'true'


def parse_int_option(key: str, value: str, minimum: int = 0) -> int:
    """Parses a numeric option.

    Raises:
        InvalidOptionError: If the value is not an integer or is below the minimum
    """
    try:
        number = int(value.strip())
    except (TypeError, ValueError) as e:
        raise InvalidOptionError(
            f"Invalid numeric option value for '{key}': {value!r}", cause=e) from e
    if number < minimum:
        raise InvalidOptionError(
            f"Option '{key}' must be at least {minimum}, got {number}")
    return number


def _single_char(key: str, value: str) -> str:
    if len(value) != 1:
        raise InvalidOptionError(f"Option '{key}' must be a single character, got {value!r}")
    return value


@dataclass(frozen=True)
class CsvOptions:
    """Typed parser options for delimited text input."""
    delimiter: str = DEFAULT_DELIMITER
    has_header: bool = True
    encoding: str = DEFAULT_ENCODING
    quote_char: str = DEFAULT_QUOTE_CHAR
    escape_char: str = DEFAULT_ESCAPE_CHAR
    skip_lines: int = 0
    sample_rows: int = 100

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, str]] = None) -> 'CsvOptions':
        """Parses a string-valued option mapping, applying defaults."""
        return cls(
            delimiter=_single_char('delimiter', get_option(options, 'delimiter', DEFAULT_DELIMITER)),
            has_header=parse_bool_option(get_option(options, 'hasHeader', DEFAULT_HAS_HEADER)),
            encoding=get_option(options, 'encoding', DEFAULT_ENCODING),
            quote_char=_single_char('quoteChar', get_option(options, 'quoteChar', DEFAULT_QUOTE_CHAR)),
            escape_char=_single_char('escapeChar', get_option(options, 'escapeChar', DEFAULT_ESCAPE_CHAR)),
            skip_lines=parse_int_option('skipLines', get_option(options, 'skipLines', DEFAULT_SKIP_LINES), minimum=0),
            sample_rows=parse_int_option('sampleRows', get_option(options, 'sampleRows', DEFAULT_SAMPLE_ROWS), minimum=1),
        )
