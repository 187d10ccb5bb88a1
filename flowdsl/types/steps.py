"""Step actions: what a flow step does.

``Step`` is a tagged union keyed by ``type``: connector, map, script, enrich,
branch, retry, dlq, throttle, checkpoint, circuitBreaker. Expressions and
script bodies are carried as opaque text and never evaluated.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from ._base import Backoff, DslModel, RetryConfig


class ConnectorStep(DslModel):
    type: Literal["connector"] = "connector"
    connector_ref: str  # resolved against the connector registry outside the core
    operation: str
    config: Optional[Dict[str, Any]] = None
    timeout: Optional[float] = None  # seconds
    retry: Optional[RetryConfig] = None


class MapStep(DslModel):
    type: Literal["map"] = "map"
    expression: str  # JSONata
    variables: Optional[Dict[str, Any]] = None
    output_format: Literal["json", "xml", "csv"] = "json"


class ScriptStep(DslModel):
    type: Literal["script"] = "script"
    language: Literal["javascript", "python"]
    code: str
    timeout: float = 30  # seconds
    sandbox: bool = True
    imports: Optional[List[str]] = None


class EnrichStep(DslModel):
    type: Literal["enrich"] = "enrich"
    source: str  # connectorRef or URL
    key: str
    fields: Optional[List[str]] = None
    timeout: float = 10  # seconds


class BranchCondition(DslModel):
    condition: str
    next_step: str


class BranchStep(DslModel):
    type: Literal["branch"] = "branch"
    conditions: List[BranchCondition]
    default: Optional[str] = None


class RetryStep(DslModel):
    type: Literal["retry"] = "retry"
    max_attempts: int = 3
    backoff: Backoff
    retry_on: List[str] = Field(default_factory=lambda: ["*"])


class DlqStep(DslModel):
    type: Literal["dlq"] = "dlq"
    reason: str
    metadata: Optional[Dict[str, Any]] = None


class ThrottleStep(DslModel):
    type: Literal["throttle"] = "throttle"
    rate: float  # requests per second
    burst: Optional[float] = None
    strategy: Literal["token-bucket", "leaky-bucket", "fixed-window"] = "token-bucket"


class CheckpointStep(DslModel):
    type: Literal["checkpoint"] = "checkpoint"
    name: str
    data: Optional[Dict[str, Any]] = None


class CircuitBreakerStep(DslModel):
    type: Literal["circuitBreaker"] = "circuitBreaker"
    failure_threshold: int = 5
    recovery_timeout: float = 60  # seconds
    half_open_max_calls: int = 3
    monitor_interval: float = 10  # seconds


Step = Annotated[
    Union[
        ConnectorStep,
        MapStep,
        ScriptStep,
        EnrichStep,
        BranchStep,
        RetryStep,
        DlqStep,
        ThrottleStep,
        CheckpointStep,
        CircuitBreakerStep,
    ],
    Field(discriminator="type"),
]

STEP_TYPES = (
    "connector",
    "map",
    "script",
    "enrich",
    "branch",
    "retry",
    "dlq",
    "throttle",
    "checkpoint",
    "circuitBreaker",
)
