"""Observability configuration: trace propagation, sampling, metrics and logs.

Rates are plain numbers here; the [0, 1] range is enforced by the semantic
observability rules so out-of-range values report a specific code.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from ._base import DslModel


class TraceSampling(DslModel):
    rate: float = 1.0
    strategy: Literal["always", "probabilistic", "rate-limiting"] = "always"


class TraceConfig(DslModel):
    propagation: Literal["w3c", "b3", "jaeger"] = "w3c"
    sampling: Optional[TraceSampling] = None


class PayloadSampling(DslModel):
    enabled: bool = False
    rate: float = 0.1
    max_size: int = 1024  # bytes
    fields: Optional[List[str]] = None


class MetricsConfig(DslModel):
    enabled: bool = True
    interval: float = 60  # seconds


class LogsConfig(DslModel):
    level: Literal["debug", "info", "warn", "error"] = "info"
    structured: bool = True


class Observability(DslModel):
    trace_id: Optional[TraceConfig] = None
    sample_rate: float = 1.0
    payload_sampling: Optional[PayloadSampling] = None
    metrics: Optional[MetricsConfig] = None
    logs: Optional[LogsConfig] = None
