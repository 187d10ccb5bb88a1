"""Flow validation: findings, structural and semantic phases, reporting.

The validation entry points live in ``flowdsl.validator.engine`` and are
re-exported from the top-level ``flowdsl`` package.
"""

from .errors import (
    BLOCKING_SEVERITIES,
    INPUT_LIMIT_EXCEEDED,
    PARSE_ERROR,
    SCHEMA_VALIDATION_ERROR,
    SEVERITY_CRITICAL,
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    Finding,
    ValidationResult,
)
from .report import (
    build_report_json,
    build_report_markdown,
    build_summary_json,
    format_findings,
)

__all__ = [
    "BLOCKING_SEVERITIES",
    "INPUT_LIMIT_EXCEEDED",
    "PARSE_ERROR",
    "SCHEMA_VALIDATION_ERROR",
    "SEVERITY_CRITICAL",
    "SEVERITY_ERROR",
    "SEVERITY_WARNING",
    "Finding",
    "ValidationResult",
    "build_report_json",
    "build_report_markdown",
    "build_summary_json",
    "format_findings",
]
