"""Policy variants: non-functional constraints attached to a step."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from ._base import DslModel, RetryConfig


class QosPolicy(DslModel):
    type: Literal["qos"] = "qos"
    priority: Literal["low", "normal", "high", "critical"] = "normal"
    timeout: Optional[float] = None  # seconds
    retry: Optional[RetryConfig] = None


class IdempotencyPolicy(DslModel):
    type: Literal["idempotency"] = "idempotency"
    key: str  # JSONata expression producing the idempotency key
    ttl: float = 3600  # seconds
    strategy: Literal["cache", "database"] = "cache"


class MtlsPolicy(DslModel):
    type: Literal["mtls"] = "mtls"
    cert_path: str
    key_path: str
    ca_path: Optional[str] = None
    verify: bool = True


class OpaPolicy(DslModel):
    type: Literal["opa"] = "opa"
    policy_ref: str
    data: Optional[Dict[str, Any]] = None
    input: Optional[Dict[str, Any]] = None


class SecretsPolicy(DslModel):
    type: Literal["secrets"] = "secrets"
    vault_paths: List[str]
    refresh_interval: float = 300  # seconds


Policy = Annotated[
    Union[QosPolicy, IdempotencyPolicy, MtlsPolicy, OpaPolicy, SecretsPolicy],
    Field(discriminator="type"),
]

POLICY_TYPES = ("qos", "idempotency", "mtls", "opa", "secrets")
