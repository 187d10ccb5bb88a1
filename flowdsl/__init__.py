"""
flowdsl - Flow DSL type model and two-phase validator.

A Flow document describes an integration pipeline: triggers, steps,
transports, policies and observability settings. Before an execution engine
may run it, it must pass structural validation (does it fit the type model?)
and semantic validation (do references resolve, do business rules hold?).

Usage:
    from flowdsl import (
        # Validation
        validate,
        is_valid,
        format_findings,
        FlowValidator,
        # Parsing
        parse,
        load_flow_file,
        # Types
        Flow,
        FlowStep,
    )

    result = validate(yaml_text)
    if not result.valid:
        raise SystemExit(format_findings(result))

    flow = parse(yaml_text)
    flow.steps[0].step.type
"""

from .config import ValidatorConfig, get_validator_config, load_validator_config
from .parser import (
    DeserializationError,
    DocumentShapeError,
    DocumentSyntaxError,
    FlowDslError,
    InputLimitError,
    load_document,
    load_flow_file,
    parse,
    parse_json,
    parse_object,
    parse_yaml,
)
from .types import Flow, FlowStep
from .validator import Finding, ValidationResult, format_findings
from .validator.engine import FlowValidator, is_valid, validate

__version__ = "1.0.0"

__all__ = [
    # Validation
    "validate",
    "is_valid",
    "format_findings",
    "FlowValidator",
    "Finding",
    "ValidationResult",
    # Parsing
    "parse",
    "parse_yaml",
    "parse_json",
    "parse_object",
    "load_document",
    "load_flow_file",
    "FlowDslError",
    "DeserializationError",
    "DocumentSyntaxError",
    "DocumentShapeError",
    "InputLimitError",
    # Types
    "Flow",
    "FlowStep",
    # Configuration
    "ValidatorConfig",
    "get_validator_config",
    "load_validator_config",
]
