"""JSON Schema export of the Flow type model.

The schema is generated from the pydantic models, so it always matches what
the structural validator accepts (modulo the semantic rules). It is meant for
editors and non-Python consumers; the Python validator does not depend on it.

Usage:
    from flowdsl.json_schema import build_flow_schema, check_flow_schema

    schema = build_flow_schema()
    problems = check_flow_schema(schema)   # [] when the schema is sound
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from .types import DEFAULT_SCHEMA_URI, Flow
from .validator.errors import SCHEMA_VALIDATION_ERROR, Finding

logger = logging.getLogger(__name__)

SCHEMA_ID = "https://flowdsl.dev/schemas/flow.schema.json"

# Definitions a usable Flow schema must carry
REQUIRED_DEFINITIONS = ("Metadata", "Observability", "FlowStep")
REQUIRED_PROPERTIES = ("metadata", "steps")


def build_flow_schema() -> Dict[str, Any]:
    """Return the draft 2020-12 JSON Schema of a Flow document (camelCase keys)."""
    schema = Flow.model_json_schema(by_alias=True, mode="validation")
    schema["$schema"] = DEFAULT_SCHEMA_URI
    schema["$id"] = SCHEMA_ID
    return schema


def export_flow_schema(path: Union[str, Path]) -> Path:
    """Write the Flow schema as JSON to ``path`` and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_flow_schema(), indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote Flow JSON Schema to %s", path)
    return path


def check_flow_schema(schema: Optional[Dict[str, Any]] = None) -> List[str]:
    """Check a Flow schema against the draft 2020-12 metaschema.

    Also verifies that the definitions for Metadata, Observability and the step
    entry are present, and that metadata and steps are required.

    Returns:
        List of problems (empty when the schema is sound).
    """
    if schema is None:
        schema = build_flow_schema()

    problems: List[str] = []
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        problems.append(f"Schema does not conform to the draft 2020-12 metaschema: {e.message}")

    definitions = schema.get("$defs", {})
    for name in REQUIRED_DEFINITIONS:
        if name not in definitions:
            problems.append(f"Missing definition: {name}")

    required = schema.get("required", [])
    for name in REQUIRED_PROPERTIES:
        if name not in required:
            problems.append(f"Property '{name}' is not required")

    return problems


def _json_default(value: Any) -> Any:
    # YAML loads unquoted timestamps as date/datetime objects
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _format_path(parts: Any) -> str:
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def validate_with_schema(
    document: Dict[str, Any], schema: Optional[Dict[str, Any]] = None
) -> List[Finding]:
    """Validate an untyped document tree with jsonschema.

    Returns one SCHEMA_VALIDATION_ERROR finding per schema violation, ordered
    by document path.
    """
    if schema is None:
        schema = build_flow_schema()
    instance = json.loads(json.dumps(document, default=_json_default))

    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    return [
        Finding.error(_format_path(error.absolute_path), error.message, SCHEMA_VALIDATION_ERROR)
        for error in errors
    ]
