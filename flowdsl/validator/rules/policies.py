"""Per-variant policy rules (paths rooted at ``steps[i].policies[j]``)."""

from __future__ import annotations

from typing import Dict, List

from ...types import (
    POLICY_TYPES,
    IdempotencyPolicy,
    MtlsPolicy,
    OpaPolicy,
    Policy,
    QosPolicy,
    SecretsPolicy,
)
from ..errors import Finding
from ._common import RuleFn, check_coverage, dispatch, require_positive, require_text


def check_qos_policy(policy: QosPolicy, path: str) -> List[Finding]:
    return require_positive(
        policy.timeout,
        f"{path}.timeout",
        "QoS timeout must be greater than 0",
        "QOS_TIMEOUT_INVALID",
    )


def check_idempotency_policy(policy: IdempotencyPolicy, path: str) -> List[Finding]:
    return require_text(
        policy.key,
        f"{path}.key",
        "Idempotency key expression is required",
        "IDEMPOTENCY_KEY_MISSING",
    ) + require_positive(
        policy.ttl, f"{path}.ttl", "TTL must be greater than 0", "IDEMPOTENCY_TTL_INVALID"
    )


def check_mtls_policy(policy: MtlsPolicy, path: str) -> List[Finding]:
    return require_text(
        policy.cert_path,
        f"{path}.certPath",
        "Certificate path is required for mTLS",
        "MTLS_CERT_PATH_MISSING",
    ) + require_text(
        policy.key_path,
        f"{path}.keyPath",
        "Private key path is required for mTLS",
        "MTLS_KEY_PATH_MISSING",
    )


def check_opa_policy(policy: OpaPolicy, path: str) -> List[Finding]:
    return require_text(
        policy.policy_ref,
        f"{path}.policyRef",
        "Policy reference is required for OPA policy",
        "OPA_POLICY_REF_MISSING",
    )


def check_secrets_policy(policy: SecretsPolicy, path: str) -> List[Finding]:
    findings: List[Finding] = []
    if not policy.vault_paths:
        findings.append(
            Finding.error(
                f"{path}.vaultPaths",
                "At least one Vault path is required",
                "SECRETS_VAULT_PATHS_EMPTY",
            )
        )
    findings.extend(
        require_positive(
            policy.refresh_interval,
            f"{path}.refreshInterval",
            "Refresh interval must be greater than 0",
            "SECRETS_REFRESH_INTERVAL_INVALID",
        )
    )
    return findings


POLICY_RULES: Dict[str, RuleFn] = {
    "qos": check_qos_policy,
    "idempotency": check_idempotency_policy,
    "mtls": check_mtls_policy,
    "opa": check_opa_policy,
    "secrets": check_secrets_policy,
}

check_coverage(POLICY_RULES, POLICY_TYPES, "policy")


def check_policy(policy: Policy, path: str) -> List[Finding]:
    return dispatch(POLICY_RULES, policy, path)
