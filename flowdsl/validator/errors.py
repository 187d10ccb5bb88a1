# flowdsl/validator/errors.py
"""Validation finding collection and formatting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITY_CRITICAL = "critical"

BLOCKING_SEVERITIES = (SEVERITY_ERROR, SEVERITY_CRITICAL)

# Codes shared by the parser and structural phases
PARSE_ERROR = "PARSE_ERROR"
INPUT_LIMIT_EXCEEDED = "INPUT_LIMIT_EXCEEDED"
SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"

# Finding template: <path>: <message> (<code>)
FINDING_TEMPLATE = "{path}: {message} ({code})"


@dataclass(frozen=True)
class Finding:
    """One structural or semantic validation outcome.

    Attributes:
        path: Dot/bracket path into the document (e.g. "steps[2].step.expression").
            Empty when the finding concerns the document as a whole.
        message: Human-readable description.
        code: Machine-readable code (e.g. "DUPLICATE_STEP_ID").
        severity: "error", "warning" or "critical".
    """

    path: str
    message: str
    code: str
    severity: str = SEVERITY_ERROR

    @classmethod
    def error(cls, path: str, message: str, code: str) -> "Finding":
        return cls(path=path, message=message, code=code, severity=SEVERITY_ERROR)

    @classmethod
    def warning(cls, path: str, message: str, code: str) -> "Finding":
        return cls(path=path, message=message, code=code, severity=SEVERITY_WARNING)

    @classmethod
    def critical(cls, message: str, code: str, path: str = "") -> "Finding":
        return cls(path=path, message=message, code=code, severity=SEVERITY_CRITICAL)

    @property
    def is_blocking(self) -> bool:
        """Errors and critical findings block validity; warnings never do."""
        return self.severity in BLOCKING_SEVERITIES

    def promoted(self) -> "Finding":
        """Return this finding as an error (used by strict mode)."""
        if self.is_blocking:
            return self
        return Finding(self.path, self.message, self.code, SEVERITY_ERROR)

    def format(self) -> str:
        """Format finding as a single report line."""
        if not self.path:
            return f"{self.message} ({self.code})"
        return FINDING_TEMPLATE.format(path=self.path, message=self.message, code=self.code)

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to dictionary for JSON serialization."""
        return {
            "path": self.path,
            "message": self.message,
            "code": self.code,
            "severity": self.severity,
        }


class ValidationResult:
    """Collects validation errors and warnings.

    ``valid`` is True iff no error (or critical) finding was collected.
    """

    def __init__(
        self,
        errors: Optional[List[Finding]] = None,
        warnings: Optional[List[Finding]] = None,
    ):
        self.errors: List[Finding] = list(errors or [])
        self.warnings: List[Finding] = list(warnings or [])

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "ValidationResult":
        """Split a flat finding list into errors and warnings, keeping order."""
        result = cls()
        for finding in findings:
            result.add(finding)
        return result

    @property
    def valid(self) -> bool:
        return not self.errors

    def add(self, finding: Finding) -> None:
        if finding.is_blocking:
            self.errors.append(finding)
        else:
            self.warnings.append(finding)

    def extend(self, other: "ValidationResult") -> None:
        """Extend with errors and warnings from another result."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def codes(self) -> List[str]:
        """All finding codes, errors first."""
        return [f.code for f in self.errors] + [f.code for f in self.warnings]

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "status": "FAIL" if self.has_errors() else "PASS",
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.errors == other.errors and self.warnings == other.warnings

    def __repr__(self) -> str:
        return (
            f"ValidationResult(valid={self.valid}, errors={len(self.errors)}, "
            f"warnings={len(self.warnings)})"
        )
