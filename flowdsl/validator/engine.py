"""
engine.py - Two-phase flow validation.

Documents go through the parser boundary (syntax and input limits), then the
structural phase (type model), then the semantic phase (business rules).
Each phase only runs if the previous one passed, and bad documents always
come back as a ValidationResult rather than an exception.

Usage:
    from flowdsl import validate, format_findings

    result = validate(Path("flows/orders.yaml"))
    if not result.valid:
        print(format_findings(result))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from ..config import ValidatorConfig, get_validator_config
from ..parser import (
    DeserializationError,
    DocumentSyntaxError,
    enforce_limits,
    load_document,
    read_document,
)
from ..types import Flow
from .errors import Finding, ValidationResult
from .semantic import SemanticValidator
from .structural import check_structure

logger = logging.getLogger(__name__)


class FlowValidator:
    """Validates flow documents under one immutable configuration.

    Holds no per-call state: every ``validate`` call builds its own finding
    list, so one instance can be shared across threads.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or get_validator_config()
        self._semantic = SemanticValidator(self.config)

    def _load(self, document: Any) -> Dict[str, Any]:
        limits = self.config.limits
        if isinstance(document, Flow):
            tree = document.to_dict()
        elif isinstance(document, Path):
            return read_document(document, limits)
        elif isinstance(document, (str, bytes)):
            return load_document(document, limits=limits)
        elif isinstance(document, Mapping):
            tree = dict(document)
        else:
            raise DocumentSyntaxError(
                f"Document root must be a mapping, got {type(document).__name__}"
            )
        enforce_limits(tree, limits)
        return tree

    def _finish(self, findings: Iterable[Finding]) -> ValidationResult:
        if self.config.strict:
            findings = [f.promoted() for f in findings]
        return ValidationResult.from_findings(findings)

    def validate(self, document: Any) -> ValidationResult:
        """Validate a document.

        Args:
            document: A mapping, YAML/JSON text, bytes, a Path to a flow file,
                or a Flow instance.

        Returns:
            ValidationResult. A parse failure yields a single PARSE_ERROR; a
            limit breach a single INPUT_LIMIT_EXCEEDED; a shape failure only
            SCHEMA_VALIDATION_ERROR findings; otherwise the semantic findings.

        Raises:
            FileNotFoundError: If ``document`` is a Path that does not exist.
        """
        try:
            tree = self._load(document)
        except DeserializationError as e:
            logger.debug("Document rejected at parser boundary: %s", e)
            return self._finish(e.findings)

        report = check_structure(tree)
        if not report.valid:
            logger.debug("Structural validation failed; skipping semantic phase")
            return self._finish(report.errors)

        return self._finish(self._semantic.validate(report.flow))

    def validate_flow(self, flow: Flow) -> ValidationResult:
        """Run only the semantic phase on an already-typed Flow."""
        return self._finish(self._semantic.validate(flow))

    def is_valid(self, document: Any) -> bool:
        return self.validate(document).valid


def validate(document: Any, config: Optional[ValidatorConfig] = None) -> ValidationResult:
    """Validate a flow document with the given (or process-wide) configuration."""
    return FlowValidator(config).validate(document)


def is_valid(document: Any, config: Optional[ValidatorConfig] = None) -> bool:
    return validate(document, config).valid

