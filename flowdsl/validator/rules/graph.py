"""Flow-wide step graph rules.

Steps form a directed graph through ``next``, ``error`` and branch targets,
all by string id. Duplicate ids and dangling ``next``/``error`` references
are always errors. Self-references, cycles, unreachable steps and dangling
branch targets are reported at the level set in RuleToggles
("ignore", "warning" or "error").

The walks below use explicit stacks and queues so that long step chains
cannot exhaust the interpreter stack.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Sequence

from ...config import RULE_ERROR, RULE_IGNORE, RULE_WARNING, RuleToggles
from ...types import BranchStep, FlowStep
from ..errors import Finding
from ._common import is_blank


def _at_level(level: str, path: str, message: str, code: str) -> Optional[Finding]:
    if level == RULE_ERROR:
        return Finding.error(path, message, code)
    if level == RULE_WARNING:
        return Finding.warning(path, message, code)
    if level == RULE_IGNORE:
        return None
    raise ValueError(f"Unknown rule level: {level!r}")


def _first_index(steps: Sequence[FlowStep]) -> Dict[str, int]:
    """Map each step id to the index of its first occurrence."""
    index: Dict[str, int] = {}
    for i, step in enumerate(steps):
        index.setdefault(step.id, i)
    return index


def _adjacency(steps: Sequence[FlowStep], index: Dict[str, int]) -> Dict[str, List[str]]:
    """Resolved successor ids per step id, self-loops and dangling targets excluded."""
    graph: Dict[str, List[str]] = {}
    for step_id, i in index.items():
        targets: List[str] = []
        for target in steps[i].successors():
            if target in index and target != step_id and target not in targets:
                targets.append(target)
        graph[step_id] = targets
    return graph


# =============================================================================
# Always-on rules
# =============================================================================


def check_duplicate_ids(steps: Sequence[FlowStep], path: str = "steps") -> List[Finding]:
    findings: List[Finding] = []
    seen = set()
    for i, step in enumerate(steps):
        if step.id in seen:
            findings.append(
                Finding.error(
                    f"{path}[{i}].id",
                    f"Duplicate step ID: {step.id}",
                    "DUPLICATE_STEP_ID",
                )
            )
        seen.add(step.id)
    return findings


def check_references(steps: Sequence[FlowStep], path: str = "steps") -> List[Finding]:
    """Every ``next`` and ``error`` id must name an existing step."""
    findings: List[Finding] = []
    ids = {step.id for step in steps}
    for i, step in enumerate(steps):
        for j, target in enumerate(step.next or []):
            if target not in ids:
                findings.append(
                    Finding.error(
                        f"{path}[{i}].next[{j}]",
                        f'Referenced step "{target}" does not exist',
                        "INVALID_NEXT_STEP_REFERENCE",
                    )
                )
        if step.error is not None and step.error not in ids:
            findings.append(
                Finding.error(
                    f"{path}[{i}].error",
                    f'Referenced error step "{step.error}" does not exist',
                    "INVALID_ERROR_STEP_REFERENCE",
                )
            )
    return findings


# =============================================================================
# Configurable rules
# =============================================================================


def check_self_references(
    steps: Sequence[FlowStep], level: str = RULE_ERROR, path: str = "steps"
) -> List[Finding]:
    findings: List[Finding] = []
    if level == RULE_IGNORE:
        return findings
    for i, step in enumerate(steps):
        for j, target in enumerate(step.next or []):
            if target == step.id:
                finding = _at_level(
                    level,
                    f"{path}[{i}].next[{j}]",
                    f'Step "{step.id}" lists itself as a next step',
                    "STEP_SELF_REFERENCE",
                )
                if finding:
                    findings.append(finding)
        if step.error == step.id:
            finding = _at_level(
                level,
                f"{path}[{i}].error",
                f'Step "{step.id}" is its own error handler',
                "STEP_SELF_REFERENCE",
            )
            if finding:
                findings.append(finding)
    return findings


def check_cycles(
    steps: Sequence[FlowStep], level: str = RULE_IGNORE, path: str = "steps"
) -> List[Finding]:
    """Report each back edge found by a depth-first walk in document order.

    Self-loops are left to check_self_references.
    """
    findings: List[Finding] = []
    if level == RULE_IGNORE:
        return findings

    index = _first_index(steps)
    graph = _adjacency(steps, index)
    visiting, done = set(), set()

    for root in index:
        if root in visiting or root in done:
            continue
        visiting.add(root)
        trail = [root]
        stack = [(root, iter(graph[root]))]
        while stack:
            node, successors = stack[-1]
            target = next(successors, None)
            if target is None:
                stack.pop()
                trail.pop()
                visiting.discard(node)
                done.add(node)
            elif target in visiting:
                cycle = trail[trail.index(target):] + [target]
                finding = _at_level(
                    level,
                    f"{path}[{index[node]}]",
                    "Steps form a cycle: " + " -> ".join(cycle),
                    "STEP_CYCLE_DETECTED",
                )
                if finding:
                    findings.append(finding)
            elif target not in done:
                visiting.add(target)
                trail.append(target)
                stack.append((target, iter(graph[target])))
    return findings


def check_unreachable(
    steps: Sequence[FlowStep], level: str = RULE_IGNORE, path: str = "steps"
) -> List[Finding]:
    """Steps that no chain of next/error/branch edges from the first step reaches."""
    findings: List[Finding] = []
    if level == RULE_IGNORE or not steps:
        return findings

    index = _first_index(steps)
    graph = _adjacency(steps, index)
    entry = steps[0].id
    reached = {entry}
    queue = deque([entry])
    while queue:
        for target in graph[queue.popleft()]:
            if target not in reached:
                reached.add(target)
                queue.append(target)

    for i, step in enumerate(steps):
        if index[step.id] != i or step.id in reached:
            continue
        finding = _at_level(
            level,
            f"{path}[{i}]",
            f'Step "{step.id}" is not reachable from the first step "{entry}"',
            "STEP_UNREACHABLE",
        )
        if finding:
            findings.append(finding)
    return findings


def check_branch_targets(
    steps: Sequence[FlowStep], level: str = RULE_IGNORE, path: str = "steps"
) -> List[Finding]:
    """Branch ``nextStep`` and ``default`` ids must name an existing step."""
    findings: List[Finding] = []
    if level == RULE_IGNORE:
        return findings

    ids = {step.id for step in steps}
    for i, step in enumerate(steps):
        action = step.step
        if not isinstance(action, BranchStep):
            continue
        for k, condition in enumerate(action.conditions):
            # blank targets are reported as BRANCH_NEXT_STEP_MISSING
            if is_blank(condition.next_step) or condition.next_step in ids:
                continue
            finding = _at_level(
                level,
                f"{path}[{i}].step.conditions[{k}].nextStep",
                f'Branch target "{condition.next_step}" does not exist',
                "INVALID_BRANCH_TARGET_REFERENCE",
            )
            if finding:
                findings.append(finding)
        if action.default is not None and action.default not in ids:
            finding = _at_level(
                level,
                f"{path}[{i}].step.default",
                f'Branch default "{action.default}" does not exist',
                "INVALID_BRANCH_TARGET_REFERENCE",
            )
            if finding:
                findings.append(finding)
    return findings


def check_graph(steps: Sequence[FlowStep], rules: Optional[RuleToggles] = None) -> List[Finding]:
    """All flow-wide reference and graph rules, in a fixed order."""
    rules = rules or RuleToggles()
    return (
        check_references(steps)
        + check_self_references(steps, rules.self_references)
        + check_branch_targets(steps, rules.branch_targets)
        + check_cycles(steps, rules.cycles)
        + check_unreachable(steps, rules.unreachable_steps)
    )
