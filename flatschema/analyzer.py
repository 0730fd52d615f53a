"""Analyzes flat files and generates JSON Schemas from their structure.

This module provides:
- analyze: build a structure tree from column names and rows
- SchemaAnalyzer: the request pipeline (validate, build and merge the
  structure, generate, check the output, package the result)
- convert_csv_to_schema: file-to-file conversion used by the command line
"""

import json
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from flatschema.columncollector import ColumnCollector, Row
from flatschema.common import JSON_SCHEMA_DRAFT_07, render_schema
from flatschema.errors import AnalyzerError, GenerationError, ValidationError
from flatschema.options import CsvOptions
from flatschema.registry import (DEFAULT_MODE, InputHandler, InputHandlerRegistry,
                                 default_registry, get_generation_mode, GENERATORS)
from flatschema.structure import (StructuralNode, collect_array_paths, count_arrays,
                                  count_elements, count_fields)
from flatschema.structuremerger import merge_structures

logger = logging.getLogger(__name__)


def analyze(columns: Optional[Sequence[str]], rows: Iterable[Row],
            options: Union[CsvOptions, Mapping[str, str], None] = None,
            schema_name: str = 'root') -> StructuralNode:
    """Builds the structure tree of a flat file.

    Args:
        columns: Column names, or None to take them from the rows
            (header row or generated column1..columnN placeholders)
        rows: Rows of string cells
        options: Parsed CsvOptions or string-valued options
            (sampleRows, skipLines, hasHeader)
        schema_name: Name of the root node

    Returns:
        The root of the ``array -> object -> scalars`` tree
    """
    return ColumnCollector(options).collect(schema_name, rows, columns)


@dataclass
class AnalysisRequest:
    """A request to analyze one file, optionally with extra sample files."""
    input_kind: str
    content: Union[str, bytes, None]
    schema_name: str
    sample_contents: List[Union[str, bytes]] = field(default_factory=list)
    parser_options: Dict[str, str] = field(default_factory=dict)
    mode: str = DEFAULT_MODE

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If a required field is missing or blank.
        """
        if not self.input_kind or not self.input_kind.strip():
            raise ValidationError("input kind cannot be null or blank")
        if self.content is None or (isinstance(self.content, str) and not self.content.strip()) \
                or (isinstance(self.content, bytes) and not self.content):
            raise ValidationError("file content must be provided", input_kind=self.input_kind)
        if not self.schema_name or not self.schema_name.strip():
            raise ValidationError("schema name cannot be null or blank", input_kind=self.input_kind)


@dataclass
class SchemaMetadata:
    """Statistics about a generated schema."""
    schema_version: str
    root_element: str
    source_type: str
    generated_at: datetime
    total_elements: int
    total_fields: int
    array_elements: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "rootElement": self.root_element,
            "sourceType": self.source_type,
            "generatedAt": self.generated_at.isoformat(),
            "totalElements": self.total_elements,
            "totalFields": self.total_fields,
            "arrayElements": self.array_elements,
        }


@dataclass
class AnalysisResult:
    """Outcome of a successful analysis."""
    schema_name: str
    source_type: str
    mode: str
    schema: Dict[str, Any]
    schema_text: str
    metadata: SchemaMetadata
    detected_array_fields: List[str]
    elements_analyzed: int
    analysis_time_ms: float
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaName": self.schema_name,
            "sourceType": self.source_type,
            "mode": self.mode,
            "jsonSchema": self.schema,
            "jsonSchemaAsString": self.schema_text,
            "metadata": self.metadata.to_dict(),
            "detectedArrayFields": self.detected_array_fields,
            "elementsAnalyzed": self.elements_analyzed,
            "analysisTimeMs": self.analysis_time_ms,
            "success": self.success,
        }


def validate_schema(schema: Optional[Dict[str, Any]]) -> List[str]:
    """Checks the minimal shape of a generated schema, returning the problems found."""
    if not schema:
        return ["Schema is empty"]
    errors = []
    if "$schema" not in schema:
        errors.append("Missing '$schema' field")
    if "type" not in schema and "properties" not in schema:
        errors.append("Missing 'type' or 'properties' field")
    return errors


class SchemaAnalyzer:
    """
    Runs analysis requests.

    The analyzer keeps no state between requests; the handler registry is
    only read, so one instance can serve concurrent requests.
    """

    def __init__(self, registry: Optional[InputHandlerRegistry] = None):
        self.registry = registry if registry is not None else default_registry()

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze a file and generate its JSON Schema.

        Raises:
            AnalyzerError: If any stage fails; no partial result is returned.
        """
        start_time = time.perf_counter()
        if request is None:
            raise ValidationError("Request cannot be null")
        logger.info("Starting schema analysis for: %s (type: %s)", request.schema_name, request.input_kind)

        try:
            self._validate_request(request)
            handler = self._select_handler(request)
            structure = self._parse_main_file(request, handler)
            if request.sample_contents:
                structure = self._fuse_samples(request, handler, structure)
            schema = self._generate_schema(request, structure)
            self._validate_schema(request, schema)
            result = self._build_result(request, structure, schema, start_time)
        except AnalyzerError as e:
            logger.error("Schema analysis failed: %s", e)
            raise
        except Exception as e:
            logger.exception("Unexpected error during schema analysis")
            raise AnalyzerError(f"Analysis failed: {e}", kind='ANALYSIS_ERROR',
                                input_kind=request.input_kind, cause=e) from e

        logger.info("Schema analysis completed successfully in %.1fms", result.analysis_time_ms)
        return result

    def available_input_kinds(self) -> List[str]:
        return self.registry.available_kinds()

    def registered_input_kinds(self) -> List[str]:
        return self.registry.kinds()

    def parser_options(self, input_kind: str) -> List[Dict[str, str]]:
        """Documents the options of an input kind as name/description/default entries."""
        return [descriptor.to_dict() for descriptor in self.registry.get(input_kind).option_descriptors()]

    @staticmethod
    def supported_modes() -> List[Dict[str, str]]:
        return [mode.to_dict() for mode in GENERATORS.values()]

    def _validate_request(self, request: AnalysisRequest) -> None:
        logger.debug("Step 1: Validating request")
        request.validate()
        get_generation_mode(request.mode)

    def _select_handler(self, request: AnalysisRequest) -> InputHandler:
        logger.debug("Step 2: Selecting handler for input kind: %s", request.input_kind)
        handler = self.registry.get(request.input_kind)
        if not handler.can_parse(request.content):
            raise AnalyzerError("Handler cannot handle the provided file content",
                                kind='PARSE_ERROR', input_kind=request.input_kind)
        return handler

    def _parse_main_file(self, request: AnalysisRequest, handler: InputHandler) -> StructuralNode:
        logger.debug("Step 3: Parsing main file")
        structure = handler.parse(request.content, request.schema_name, request.parser_options)
        logger.debug("Main file parsed successfully: %d elements", count_elements(structure))
        return structure

    def _fuse_samples(self, request: AnalysisRequest, handler: InputHandler,
                      main_structure: StructuralNode) -> StructuralNode:
        logger.debug("Step 4: Fusing %d sample files", len(request.sample_contents))
        structures = [main_structure]
        for index, sample in enumerate(request.sample_contents):
            try:
                structures.append(handler.parse(sample, f"{request.schema_name}_sample{index}",
                                                request.parser_options))
                logger.debug("Parsed sample %d successfully", index + 1)
            except AnalyzerError as e:
                logger.warning("Failed to parse sample %d: %s", index + 1, e)
        merged = merge_structures(structures)
        logger.debug("Sample fusion completed: %d total structures merged", len(structures))
        return merged

    def _generate_schema(self, request: AnalysisRequest, structure: StructuralNode) -> Dict[str, Any]:
        mode = get_generation_mode(request.mode)
        logger.debug("Step 5: Generating JSON Schema (mode: %s)", mode.name)
        options: Dict[str, Any] = dict(request.parser_options)
        options['schemaName'] = request.schema_name
        options['sourceType'] = request.input_kind
        try:
            schema = mode.generate(structure, options)
        except AnalyzerError as e:
            if e.input_kind is None:
                raise type(e)(e.message, kind=e.kind, input_kind=request.input_kind, cause=e.cause) from e
            raise
        if not schema:
            raise GenerationError("Schema generator returned null or empty schema",
                                  input_kind=request.input_kind)
        return schema

    def _validate_schema(self, request: AnalysisRequest, schema: Dict[str, Any]) -> None:
        logger.debug("Step 6: Validating generated schema")
        errors = validate_schema(schema)
        if errors:
            raise GenerationError(f"Generated schema is not valid: {'; '.join(errors)}",
                                  input_kind=request.input_kind)

    def _build_result(self, request: AnalysisRequest, structure: StructuralNode,
                      schema: Dict[str, Any], start_time: float) -> AnalysisResult:
        logger.debug("Step 7: Building result")
        schema_text = render_schema(schema)
        total_elements = count_elements(structure)
        metadata = SchemaMetadata(
            schema_version=JSON_SCHEMA_DRAFT_07,
            root_element=structure.name,
            source_type=request.input_kind.upper(),
            generated_at=datetime.now(),
            total_elements=total_elements,
            total_fields=count_fields(structure),
            array_elements=count_arrays(structure),
        )
        return AnalysisResult(
            schema_name=request.schema_name,
            source_type=request.input_kind.upper(),
            mode=get_generation_mode(request.mode).name,
            schema=schema,
            schema_text=schema_text,
            metadata=metadata,
            detected_array_fields=collect_array_paths(structure),
            elements_analyzed=total_elements,
            analysis_time_ms=(time.perf_counter() - start_time) * 1000.0,
        )


def _read_text(file_path: str, encoding: str) -> str:
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"CSV file not found at: {file_path}")
    with open(file_path, 'r', encoding=encoding, newline='') as file:
        return file.read()


def convert_csv_to_schema(
    csv_file_path: str,
    schema_file_path: Optional[str] = None,
    schema_name: Optional[str] = None,
    mode: str = DEFAULT_MODE,
    sample_files: Optional[List[str]] = None,
    delimiter: str = ',',
    has_header: Union[bool, str] = True,
    skip_lines: int = 0,
    sample_rows: int = 100,
    quote_char: str = '"',
    escape_char: str = '\\',
    encoding: str = 'utf-8'
) -> str:
    """Infers a JSON Schema from a CSV file.

    Args:
        csv_file_path: Path to the CSV file
        schema_file_path: Output path for the schema; nothing is written if empty
        schema_name: Schema title; defaults to the file's base name
        mode: Generation mode ('standard', 'segmented' or 'deduplicated')
        sample_files: Further CSV files of the same layout merged into the analysis
        delimiter: Column delimiter
        has_header: Whether the first row holds the column names ('true'/'false' accepted)
        skip_lines: Lines to skip at the beginning of each file
        sample_rows: Non-blank values sampled per column
        quote_char: Quote character
        escape_char: Escape character
        encoding: File encoding

    Returns:
        The schema as JSON text
    """
    content = _read_text(csv_file_path, encoding)
    samples = [_read_text(sample, encoding) for sample in (sample_files or [])]

    if not schema_name:
        schema_name = os.path.splitext(os.path.basename(csv_file_path))[0].replace(" ", "_")

    request = AnalysisRequest(
        input_kind='csv',
        content=content,
        schema_name=schema_name,
        sample_contents=samples,
        parser_options={
            'delimiter': delimiter,
            'hasHeader': str(has_header).lower(),
            'quoteChar': quote_char,
            'escapeChar': escape_char,
            'encoding': encoding,
            'skipLines': str(skip_lines),
            'sampleRows': str(sample_rows),
        },
        mode=mode,
    )
    result = SchemaAnalyzer().analyze(request)

    if schema_file_path:
        output_dir = os.path.dirname(schema_file_path)
        if output_dir and not os.path.exists(output_dir):
            os.makedirs(output_dir)
        with open(schema_file_path, 'w', encoding='utf-8') as f:
            f.write(result.schema_text)

    return result.schema_text


def print_supported_modes() -> None:
    """Prints the supported generation modes as JSON."""
    print(json.dumps(SchemaAnalyzer.supported_modes(), indent=2))


def print_parser_options(input_kind: str = 'csv') -> None:
    """Prints the documented parser options of an input kind as JSON."""
    print(json.dumps(SchemaAnalyzer().parser_options(input_kind), indent=2))
