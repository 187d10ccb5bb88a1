"""
parser.py - Turn YAML/JSON documents into typed Flow objects.

Parsing happens in three tiers, each with its own exception:

1. Syntax: the text must be well-formed YAML or JSON with a mapping at the
   root (DocumentSyntaxError, code PARSE_ERROR).
2. Limits: the document must fit the configured size, step-count and nesting
   bounds (InputLimitError, code INPUT_LIMIT_EXCEEDED).
3. Shape: the tree must fit the Flow type model (DocumentShapeError, one
   SCHEMA_VALIDATION_ERROR finding per offending path).

No semantic checks happen here.

Usage:
    from flowdsl.parser import parse, load_flow_file

    flow = parse(yaml_text)
    flow = load_flow_file(Path("samples/flows/iot-processing.yaml"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .config import InputLimits, get_validator_config
from .types import Flow
from .validator.errors import INPUT_LIMIT_EXCEEDED, PARSE_ERROR, Finding
from .validator.structural import check_structure

logger = logging.getLogger(__name__)

FORMAT_YAML = "yaml"
FORMAT_JSON = "json"
FORMATS = (FORMAT_YAML, FORMAT_JSON)

SUFFIX_FORMATS = {
    ".yaml": FORMAT_YAML,
    ".yml": FORMAT_YAML,
    ".json": FORMAT_JSON,
}

DocumentInput = Union[str, bytes, Path, Mapping[str, Any]]


# =============================================================================
# Exceptions
# =============================================================================


class FlowDslError(Exception):
    """Base class for Flow DSL errors."""


class DeserializationError(FlowDslError):
    """A document could not be turned into a Flow.

    Attributes:
        findings: The findings describing why.
    """

    def __init__(self, message: str, findings: Optional[List[Finding]] = None):
        super().__init__(message)
        self.findings: List[Finding] = list(findings or [])


class DocumentSyntaxError(DeserializationError):
    """Malformed YAML/JSON, an empty document, or a non-mapping root."""

    def __init__(self, message: str):
        super().__init__(message, [Finding.critical(message, PARSE_ERROR)])


class InputLimitError(DeserializationError):
    """The document exceeds a configured input limit."""

    def __init__(self, message: str):
        super().__init__(message, [Finding.critical(message, INPUT_LIMIT_EXCEEDED)])


class DocumentShapeError(DeserializationError):
    """The document is well-formed but does not fit the Flow type model."""

    def __init__(self, findings: List[Finding]):
        super().__init__(
            f"Document does not match the Flow schema ({len(findings)} error(s))",
            findings,
        )


# =============================================================================
# Limits
# =============================================================================


def _resolve_limits(limits: Optional[InputLimits]) -> InputLimits:
    return limits if limits is not None else get_validator_config().limits


def measure_depth(tree: Any, stop_at: Optional[int] = None) -> int:
    """Return the container nesting depth of a document tree.

    Walks with an explicit stack. YAML anchors can make the tree a DAG (or
    even cyclic), so a container is only revisited when reached at a greater
    depth, and the walk stops as soon as ``stop_at`` is exceeded.
    """
    deepest = 0
    seen: Dict[int, int] = {}
    stack = [(tree, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = list(node.values())
        elif isinstance(node, list):
            children = node
        else:
            continue
        if seen.get(id(node), 0) >= depth:
            continue
        seen[id(node)] = depth
        deepest = max(deepest, depth)
        if stop_at is not None and deepest > stop_at:
            return deepest
        stack.extend((child, depth + 1) for child in children)
    return deepest


def check_document_size(size: int, limits: Optional[InputLimits] = None) -> None:
    """Raise InputLimitError if a document of ``size`` bytes is too large."""
    limits = _resolve_limits(limits)
    if size > limits.max_document_bytes:
        raise InputLimitError(
            f"Document is {size} bytes, exceeding the limit of {limits.max_document_bytes} bytes"
        )


def enforce_limits(tree: Any, limits: Optional[InputLimits] = None) -> None:
    """Raise InputLimitError if a parsed tree exceeds the step-count or depth limits."""
    limits = _resolve_limits(limits)

    if isinstance(tree, dict):
        steps = tree.get("steps")
        if isinstance(steps, list) and len(steps) > limits.max_steps:
            raise InputLimitError(
                f"Document declares {len(steps)} steps, exceeding the limit of {limits.max_steps}"
            )

    depth = measure_depth(tree, stop_at=limits.max_depth)
    if depth > limits.max_depth:
        raise InputLimitError(f"Document nesting exceeds the depth limit of {limits.max_depth}")


# =============================================================================
# Text -> untyped tree
# =============================================================================


def detect_format(text: str) -> str:
    """Guess the document format: JSON when the text opens with a brace, else YAML.

    YAML flow mappings also open with a brace, so load_document falls back to
    YAML when a detected JSON document does not decode.
    """
    return FORMAT_JSON if text.lstrip().startswith("{") else FORMAT_YAML


def _load_text(text: str, fmt: str) -> Any:
    if fmt == FORMAT_JSON:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentSyntaxError(f"Invalid JSON: {e}") from e
        except RecursionError as e:
            raise InputLimitError("Document nesting is too deep to parse") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentSyntaxError(f"Invalid YAML: {e}") from e
    except RecursionError as e:
        raise InputLimitError("Document nesting is too deep to parse") from e


def load_document(
    text: Union[str, bytes],
    format: Optional[str] = None,
    limits: Optional[InputLimits] = None,
) -> Dict[str, Any]:
    """Parse YAML/JSON text into an untyped document tree.

    Args:
        text: Document text (bytes are decoded as UTF-8; a leading BOM is dropped).
        format: "yaml", "json", or None to detect from the text.
        limits: Input limits; defaults to the configured limits.

    Returns:
        The root mapping.

    Raises:
        DocumentSyntaxError: Malformed text, empty document, or non-mapping root.
        InputLimitError: Size, step-count or depth limit exceeded.
        ValueError: Unknown format name.
    """
    if format is not None and format not in FORMATS:
        raise ValueError(f"Unknown document format {format!r}; expected one of {FORMATS}")
    limits = _resolve_limits(limits)

    if isinstance(text, bytes):
        check_document_size(len(text), limits)
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DocumentSyntaxError(f"Document is not valid UTF-8: {e}") from e
    else:
        try:
            encoded = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise DocumentSyntaxError(f"Document is not valid UTF-8: {e}") from e
        check_document_size(len(encoded), limits)

    fmt = format or detect_format(text)
    logger.debug("Parsing document as %s (%d chars)", fmt, len(text))

    try:
        tree = _load_text(text, fmt)
    except DocumentSyntaxError as json_error:
        if format is not None or fmt != FORMAT_JSON:
            raise
        logger.debug("Document is not JSON, retrying as a YAML flow mapping")
        try:
            tree = _load_text(text, FORMAT_YAML)
        except DocumentSyntaxError:
            raise json_error
    if tree is None:
        raise DocumentSyntaxError("Document is empty")
    if not isinstance(tree, dict):
        raise DocumentSyntaxError(
            f"Document root must be a mapping, got {type(tree).__name__}"
        )

    enforce_limits(tree, limits)
    return tree


# =============================================================================
# Untyped tree -> Flow
# =============================================================================


def parse_object(tree: Mapping[str, Any], limits: Optional[InputLimits] = None) -> Flow:
    """Coerce a pre-parsed document tree into a Flow, applying defaults.

    Raises:
        DocumentSyntaxError: If the root is not a mapping.
        InputLimitError: Step-count or depth limit exceeded.
        DocumentShapeError: The tree does not fit the type model.
    """
    if not isinstance(tree, Mapping):
        raise DocumentSyntaxError(
            f"Document root must be a mapping, got {type(tree).__name__}"
        )
    tree = dict(tree)
    enforce_limits(tree, limits)

    report = check_structure(tree)
    if not report.valid:
        raise DocumentShapeError(report.errors)
    return report.flow


def parse_yaml(text: Union[str, bytes], limits: Optional[InputLimits] = None) -> Flow:
    return parse_object(load_document(text, FORMAT_YAML, limits), limits)


def parse_json(text: Union[str, bytes], limits: Optional[InputLimits] = None) -> Flow:
    return parse_object(load_document(text, FORMAT_JSON, limits), limits)


def format_for_path(path: Path) -> Optional[str]:
    """Document format implied by a file suffix, or None to detect from content."""
    return SUFFIX_FORMATS.get(path.suffix.lower())


def read_document(path: Union[str, Path], limits: Optional[InputLimits] = None) -> Dict[str, Any]:
    """Read a flow file into an untyped document tree.

    Raises:
        FileNotFoundError: If the file does not exist.
        DocumentSyntaxError, InputLimitError: As for load_document.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Flow file not found: {path}")
    return load_document(path.read_bytes(), format_for_path(path), limits)


def load_flow_file(path: Union[str, Path], limits: Optional[InputLimits] = None) -> Flow:
    """Load and coerce a flow file (.yaml, .yml or .json).

    Raises:
        FileNotFoundError: If the file does not exist.
        DeserializationError: If the file cannot be turned into a Flow.
    """
    return parse_object(read_document(path, limits), limits)


def parse(
    document: DocumentInput,
    format: Optional[str] = None,
    limits: Optional[InputLimits] = None,
) -> Flow:
    """Parse any supported document input into a Flow.

    Args:
        document: YAML/JSON text, bytes, a Path to a flow file, or a
            pre-parsed mapping.
        format: "yaml" or "json" to force a text format; ignored for mappings.
        limits: Input limits; defaults to the configured limits.

    Raises:
        DeserializationError: If the document cannot be turned into a Flow.
    """
    if isinstance(document, Mapping):
        return parse_object(document, limits)
    if isinstance(document, Path):
        if format is None:
            return load_flow_file(document, limits)
        return parse_object(load_document(document.read_bytes(), format, limits), limits)
    if isinstance(document, (str, bytes)):
        return parse_object(load_document(document, format, limits), limits)
    raise TypeError(f"Unsupported document input: {type(document).__name__}")
