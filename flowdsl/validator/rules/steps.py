"""Per-variant step action rules (paths rooted at ``steps[i].step``)."""

from __future__ import annotations

from typing import Dict, List

from ...types import (
    STEP_TYPES,
    BranchStep,
    CheckpointStep,
    CircuitBreakerStep,
    ConnectorStep,
    DlqStep,
    EnrichStep,
    MapStep,
    RetryStep,
    ScriptStep,
    Step,
    ThrottleStep,
)
from ..errors import Finding
from ._common import RuleFn, check_coverage, dispatch, require_positive, require_text


def check_connector_step(step: ConnectorStep, path: str) -> List[Finding]:
    return (
        require_text(
            step.connector_ref,
            f"{path}.connectorRef",
            "Connector reference is required",
            "CONNECTOR_REF_MISSING",
        )
        + require_text(
            step.operation,
            f"{path}.operation",
            "Operation is required",
            "CONNECTOR_OPERATION_MISSING",
        )
        + require_positive(
            step.timeout,
            f"{path}.timeout",
            "Timeout must be greater than 0",
            "CONNECTOR_TIMEOUT_INVALID",
        )
    )


def check_map_step(step: MapStep, path: str) -> List[Finding]:
    return require_text(
        step.expression,
        f"{path}.expression",
        "JSONata expression is required",
        "MAP_EXPRESSION_MISSING",
    )


def check_script_step(step: ScriptStep, path: str) -> List[Finding]:
    return require_text(
        step.code, f"{path}.code", "Script code is required", "SCRIPT_CODE_MISSING"
    ) + require_positive(
        step.timeout, f"{path}.timeout", "Timeout must be greater than 0", "SCRIPT_TIMEOUT_INVALID"
    )


def check_enrich_step(step: EnrichStep, path: str) -> List[Finding]:
    return require_text(
        step.source, f"{path}.source", "Source is required", "ENRICH_SOURCE_MISSING"
    ) + require_text(step.key, f"{path}.key", "Key field is required", "ENRICH_KEY_MISSING")


def check_branch_step(step: BranchStep, path: str) -> List[Finding]:
    findings: List[Finding] = []
    if not step.conditions:
        findings.append(
            Finding.error(
                f"{path}.conditions",
                "At least one condition is required",
                "BRANCH_CONDITIONS_EMPTY",
            )
        )
    for index, condition in enumerate(step.conditions):
        cond_path = f"{path}.conditions[{index}]"
        findings.extend(
            require_text(
                condition.condition,
                f"{cond_path}.condition",
                "Condition expression is required",
                "BRANCH_CONDITION_MISSING",
            )
        )
        findings.extend(
            require_text(
                condition.next_step,
                f"{cond_path}.nextStep",
                "Next step is required",
                "BRANCH_NEXT_STEP_MISSING",
            )
        )
    return findings


def check_retry_step(step: RetryStep, path: str) -> List[Finding]:
    return require_positive(
        step.max_attempts,
        f"{path}.maxAttempts",
        "Max attempts must be greater than 0",
        "RETRY_MAX_ATTEMPTS_INVALID",
    )


def check_dlq_step(step: DlqStep, path: str) -> List[Finding]:
    return require_text(step.reason, f"{path}.reason", "DLQ reason is required", "DLQ_REASON_MISSING")


def check_throttle_step(step: ThrottleStep, path: str) -> List[Finding]:
    return require_positive(
        step.rate, f"{path}.rate", "Rate must be greater than 0", "THROTTLE_RATE_INVALID"
    ) + require_positive(
        step.burst,
        f"{path}.burst",
        "Burst capacity must be greater than 0",
        "THROTTLE_BURST_INVALID",
    )


def check_checkpoint_step(step: CheckpointStep, path: str) -> List[Finding]:
    return require_text(
        step.name, f"{path}.name", "Checkpoint name is required", "CHECKPOINT_NAME_MISSING"
    )


def check_circuit_breaker_step(step: CircuitBreakerStep, path: str) -> List[Finding]:
    return require_positive(
        step.failure_threshold,
        f"{path}.failureThreshold",
        "Failure threshold must be greater than 0",
        "CIRCUIT_BREAKER_THRESHOLD_INVALID",
    ) + require_positive(
        step.recovery_timeout,
        f"{path}.recoveryTimeout",
        "Recovery timeout must be greater than 0",
        "CIRCUIT_BREAKER_TIMEOUT_INVALID",
    )


STEP_RULES: Dict[str, RuleFn] = {
    "connector": check_connector_step,
    "map": check_map_step,
    "script": check_script_step,
    "enrich": check_enrich_step,
    "branch": check_branch_step,
    "retry": check_retry_step,
    "dlq": check_dlq_step,
    "throttle": check_throttle_step,
    "checkpoint": check_checkpoint_step,
    "circuitBreaker": check_circuit_breaker_step,
}

check_coverage(STEP_RULES, STEP_TYPES, "step")


def check_step(step: Step, path: str) -> List[Finding]:
    return dispatch(STEP_RULES, step, path)
