"""Metadata rules: compliance-driven requirements and ownership."""

from __future__ import annotations

from typing import List

from ...types import Metadata
from ..errors import Finding


def check_metadata(metadata: Metadata, path: str = "metadata") -> List[Finding]:
    findings: List[Finding] = []
    compliance = metadata.compliance

    if compliance is not None and (compliance.gdpr or compliance.hipaa):
        if not compliance.data_retention:
            findings.append(
                Finding.warning(
                    f"{path}.compliance.dataRetention",
                    "Data retention period should be specified for GDPR/HIPAA compliance",
                    "COMPLIANCE_DATA_RETENTION_MISSING",
                )
            )

    if compliance is not None and compliance.hipaa:
        if metadata.rbac is None or not metadata.rbac.roles:
            findings.append(
                Finding.error(
                    f"{path}.rbac.roles",
                    "RBAC roles are required for HIPAA compliance",
                    "HIPAA_RBAC_REQUIRED",
                )
            )

    if not metadata.owners:
        findings.append(
            Finding.warning(
                f"{path}.owners",
                "Flow should have at least one owner",
                "OWNERS_MISSING",
            )
        )

    return findings
