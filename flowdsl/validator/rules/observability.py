"""Observability rules: sampling rates in [0, 1], positive payload sizes."""

from __future__ import annotations

from typing import List

from ...types import Observability
from ..errors import Finding
from ._common import require_unit_interval


def check_observability(observability: Observability, path: str = "observability") -> List[Finding]:
    findings = require_unit_interval(
        observability.sample_rate,
        f"{path}.sampleRate",
        "Sample rate must be between 0 and 1",
        "OBSERVABILITY_SAMPLE_RATE_INVALID",
    )

    sampling = observability.trace_id.sampling if observability.trace_id else None
    if sampling is not None:
        findings.extend(
            require_unit_interval(
                sampling.rate,
                f"{path}.traceId.sampling.rate",
                "Trace sampling rate must be between 0 and 1",
                "OBSERVABILITY_TRACE_SAMPLING_RATE_INVALID",
            )
        )

    payload = observability.payload_sampling
    if payload is not None:
        findings.extend(
            require_unit_interval(
                payload.rate,
                f"{path}.payloadSampling.rate",
                "Payload sampling rate must be between 0 and 1",
                "OBSERVABILITY_PAYLOAD_SAMPLING_RATE_INVALID",
            )
        )
        if payload.max_size <= 0:
            findings.append(
                Finding.error(
                    f"{path}.payloadSampling.maxSize",
                    "Payload sampling max size must be greater than 0",
                    "OBSERVABILITY_PAYLOAD_SAMPLING_SIZE_INVALID",
                )
            )

    return findings
