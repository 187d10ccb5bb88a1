"""Semantic validation of a structurally valid Flow.

A pure fold over the document: every rule returns its own findings and the
validator concatenates them in a fixed order (metadata, triggers, steps,
step graph, observability). No rule short-circuits another.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..config import RuleToggles, ValidatorConfig
from ..types import Flow, FlowStep
from .errors import Finding
from .rules import (
    check_duplicate_ids,
    check_graph,
    check_metadata,
    check_observability,
    check_policy,
    check_step,
    check_transport,
    check_triggers,
)

logger = logging.getLogger(__name__)


def check_flow_step(entry: FlowStep, path: str) -> List[Finding]:
    """Action, transport and policy rules for one step entry."""
    findings = check_step(entry.step, f"{path}.step")
    if entry.transport is not None:
        findings.extend(check_transport(entry.transport, f"{path}.transport"))
    for index, policy in enumerate(entry.policies or []):
        findings.extend(check_policy(policy, f"{path}.policies[{index}]"))
    return findings


def check_semantics(flow: Flow, rules: Optional[RuleToggles] = None) -> List[Finding]:
    """Run every semantic rule over ``flow`` and return all findings in order."""
    findings: List[Finding] = []
    findings.extend(check_metadata(flow.metadata))
    findings.extend(check_triggers(flow.triggers or []))

    findings.extend(check_duplicate_ids(flow.steps))
    for index, entry in enumerate(flow.steps):
        findings.extend(check_flow_step(entry, f"steps[{index}]"))

    findings.extend(check_graph(flow.steps, rules))

    if flow.observability is not None:
        findings.extend(check_observability(flow.observability))

    return findings


class SemanticValidator:
    """Applies the semantic rules under a fixed, immutable configuration."""

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()

    def validate(self, flow: Flow) -> List[Finding]:
        findings = check_semantics(flow, self.config.rules)
        logger.debug(
            "Semantic validation of %r produced %d finding(s)",
            flow.metadata.name,
            len(findings),
        )
        return findings
