"""Structural validation: does the raw tree fit the Flow type model?

Every shape problem is reported at once. pydantic collects all field errors in
a single pass; each one becomes a SCHEMA_VALIDATION_ERROR finding whose path
uses the document's own keys (``steps[0].step.expression``), with the
internal union-tag segments removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..types import Flow
from .errors import SCHEMA_VALIDATION_ERROR, Finding

logger = logging.getLogger(__name__)


@dataclass
class StructureReport:
    """Outcome of the structural phase.

    ``flow`` is the typed document (defaults applied) when ``valid`` is True,
    otherwise None.
    """

    valid: bool
    errors: List[Finding] = field(default_factory=list)
    flow: Optional[Flow] = None


def format_loc(loc: Sequence[Union[str, int]], raw: Any) -> str:
    """Render a pydantic error location as a dot/bracket document path.

    Discriminated unions add the variant tag to the location
    (``("steps", 0, "step", "map", "expression")``). The raw tree is walked
    alongside the location so a segment that names the tag of the object it
    sits on, rather than one of its keys, is dropped.
    """
    path = ""
    node = raw
    for item in loc:
        if isinstance(item, int):
            path += f"[{item}]"
            if isinstance(node, list) and 0 <= item < len(node):
                node = node[item]
            else:
                node = None
            continue

        if isinstance(node, dict) and item not in node and node.get("type") == item:
            continue

        if item.startswith("["):
            # dict key markers such as "[key]"
            path += item
        else:
            path += f".{item}" if path else item
        node = node.get(item) if isinstance(node, dict) else None
    return path


def findings_from_validation_error(exc: ValidationError, raw: Any) -> List[Finding]:
    """Convert every pydantic error into a SCHEMA_VALIDATION_ERROR finding."""
    findings: List[Finding] = []
    for err in exc.errors(include_url=False):
        findings.append(
            Finding.error(format_loc(err["loc"], raw), err["msg"], SCHEMA_VALIDATION_ERROR)
        )
    return findings


def check_structure(raw: Any) -> StructureReport:
    """Check an untyped document tree against the Flow type model.

    Never raises for bad input; problems are returned as findings.
    """
    if not isinstance(raw, dict):
        return StructureReport(
            valid=False,
            errors=[
                Finding.error(
                    "",
                    f"Document root must be a mapping, got {type(raw).__name__}",
                    SCHEMA_VALIDATION_ERROR,
                )
            ],
        )

    try:
        flow = Flow.from_dict(raw)
    except ValidationError as e:
        errors = findings_from_validation_error(e, raw)
        logger.debug("Structural validation found %d error(s)", len(errors))
        return StructureReport(valid=False, errors=errors)

    return StructureReport(valid=True, flow=flow)
