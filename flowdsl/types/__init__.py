"""
flowdsl.types - Type model for the Flow DSL.

Each variant family (Trigger, Step, Transport, Policy) is a pydantic tagged
union keyed by ``type``. Coercing an untyped tree applies defaults and fails
with a pydantic ``ValidationError`` listing every offending path.

Usage:
    from flowdsl.types import Flow, FlowStep, MapStep

    flow = Flow.from_dict(document)
    flow.steps[0].step.type      # "map"
    flow.to_yaml()
"""

from __future__ import annotations

from ._base import (
    Backoff,
    DslModel,
    RateLimit,
    RetryConfig,
    parse_iso_datetime,
)
from .flow import DEFAULT_SCHEMA_URI, Flow, FlowStep
from .metadata import RBAC, Compliance, Metadata, Owner
from .observability import (
    LogsConfig,
    MetricsConfig,
    Observability,
    PayloadSampling,
    TraceConfig,
    TraceSampling,
)
from .policies import (
    POLICY_TYPES,
    IdempotencyPolicy,
    MtlsPolicy,
    OpaPolicy,
    Policy,
    QosPolicy,
    SecretsPolicy,
)
from .steps import (
    STEP_TYPES,
    BranchCondition,
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
from .transports import (
    TRANSPORT_TYPES,
    ConnectionPool,
    CustomTransport,
    FsTransport,
    GraphqlTransport,
    JdbcTransport,
    KafkaTransport,
    MqttTransport,
    RestTransport,
    SftpTransport,
    SoapTransport,
    Transport,
)
from .triggers import (
    TRIGGER_TYPES,
    FileWatchTrigger,
    HttpAuth,
    HttpTrigger,
    JdbcTrigger,
    KafkaTrigger,
    MqttTrigger,
    ScheduleTrigger,
    SftpTrigger,
    Trigger,
)

__all__ = [
    # Base
    "DslModel",
    "Backoff",
    "RetryConfig",
    "RateLimit",
    "parse_iso_datetime",
    # Root
    "Flow",
    "FlowStep",
    "DEFAULT_SCHEMA_URI",
    # Metadata
    "Metadata",
    "Owner",
    "Compliance",
    "RBAC",
    # Triggers
    "Trigger",
    "TRIGGER_TYPES",
    "HttpAuth",
    "HttpTrigger",
    "ScheduleTrigger",
    "KafkaTrigger",
    "MqttTrigger",
    "SftpTrigger",
    "JdbcTrigger",
    "FileWatchTrigger",
    # Steps
    "Step",
    "STEP_TYPES",
    "ConnectorStep",
    "MapStep",
    "ScriptStep",
    "EnrichStep",
    "BranchCondition",
    "BranchStep",
    "RetryStep",
    "DlqStep",
    "ThrottleStep",
    "CheckpointStep",
    "CircuitBreakerStep",
    # Transports
    "Transport",
    "TRANSPORT_TYPES",
    "RestTransport",
    "SoapTransport",
    "GraphqlTransport",
    "ConnectionPool",
    "JdbcTransport",
    "KafkaTransport",
    "MqttTransport",
    "SftpTransport",
    "FsTransport",
    "CustomTransport",
    # Policies
    "Policy",
    "POLICY_TYPES",
    "QosPolicy",
    "IdempotencyPolicy",
    "MtlsPolicy",
    "OpaPolicy",
    "SecretsPolicy",
    # Observability
    "Observability",
    "TraceConfig",
    "TraceSampling",
    "PayloadSampling",
    "MetricsConfig",
    "LogsConfig",
]
