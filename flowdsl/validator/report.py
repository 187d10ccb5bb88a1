"""Human and machine readable renderings of a ValidationResult."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .errors import Finding, ValidationResult

VALID_MESSAGE = "Flow is valid"


def _lines(findings: List[Finding]) -> str:
    return "\n".join(f.format() for f in findings)


def format_findings(result: ValidationResult) -> str:
    """Render a result as plain text for logs and CI output.

    Failed results start with ``Validation failed with N error(s):``;
    valid ones with ``Flow is valid``. Warnings, if any, follow in a
    ``M warning(s):`` block.
    """
    if result.valid:
        output = VALID_MESSAGE
    else:
        output = f"Validation failed with {len(result.errors)} error(s):\n"
        output += _lines(result.errors)

    if result.warnings:
        output += f"\n\n{len(result.warnings)} warning(s):\n"
        output += _lines(result.warnings)

    return output


def _status(result: ValidationResult) -> str:
    return "PASSED" if not result.has_errors() else "FAILED"


def build_report_json(result: ValidationResult, source: Optional[str] = None) -> Dict[str, Any]:
    """Build the machine-readable report for one document."""
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "source": source,
        "status": _status(result),
        "valid": result.valid,
        "error_count": len(result.errors),
        "warning_count": len(result.warnings),
        "errors": [e.to_dict() for e in result.errors],
        "warnings": [w.to_dict() for w in result.warnings],
    }


def build_summary_json(results: Mapping[str, ValidationResult]) -> Dict[str, Any]:
    """Build one report covering several documents, keyed by source."""
    failed = [source for source, result in results.items() if result.has_errors()]
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "status": "FAILED" if failed else "PASSED",
        "total": len(results),
        "passed": len(results) - len(failed),
        "failed": len(failed),
        "files": [build_report_json(result, source) for source, result in results.items()],
    }


def build_report_markdown(result: ValidationResult, source: Optional[str] = None) -> str:
    """Build markdown validation report.

    Generates a human-readable markdown report with title, status and any
    errors/warnings.
    """
    lines: List[str] = []

    lines.append("# Flow Validation Report")
    lines.append("")
    if source:
        lines.append(f"**Source**: {source}")
    lines.append(f"**Timestamp**: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}")
    lines.append(f"**Status**: {_status(result)}")
    lines.append("")

    lines.append(f"## Errors ({len(result.errors)})")
    lines.append("")
    if not result.errors:
        lines.append("_No errors found._")
    else:
        for error in result.errors:
            location = f"`{error.path}`: " if error.path else ""
            lines.append(f"- **{error.code}** {location}{error.message}")
    lines.append("")

    lines.append(f"## Warnings ({len(result.warnings)})")
    lines.append("")
    if not result.warnings:
        lines.append("_No warnings._")
    else:
        for warning in result.warnings:
            location = f"`{warning.path}`: " if warning.path else ""
            lines.append(f"- **{warning.code}** {location}{warning.message}")

    return "\n".join(lines)
