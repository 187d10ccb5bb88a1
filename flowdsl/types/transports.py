"""Transport variants: the wire mechanism a step uses to reach an external system.

Independent vocabulary from triggers. ``Transport`` is keyed by ``type``:
rest, soap, graphql, jdbc, kafka, mqtt, sftp, fs, custom.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from ._base import DslModel, HttpMethod, RetryConfig

STRING_SERIALIZER = "org.apache.kafka.common.serialization.StringSerializer"


class RestTransport(DslModel):
    type: Literal["rest"] = "rest"
    method: HttpMethod
    url: str
    headers: Optional[Dict[str, str]] = None
    timeout: float = 30  # seconds
    retry: Optional[RetryConfig] = None


class SoapTransport(DslModel):
    type: Literal["soap"] = "soap"
    url: str
    action: str
    envelope: str
    timeout: float = 30  # seconds
    headers: Optional[Dict[str, str]] = None


class GraphqlTransport(DslModel):
    type: Literal["graphql"] = "graphql"
    url: str
    query: str
    variables: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, str]] = None
    timeout: float = 30  # seconds


class ConnectionPool(DslModel):
    min: int = 1
    max: int = 10


class JdbcTransport(DslModel):
    type: Literal["jdbc"] = "jdbc"
    url: str
    username: str
    password: str
    query: str
    parameters: Optional[List[Any]] = None
    timeout: float = 30  # seconds
    connection_pool: Optional[ConnectionPool] = None


class KafkaTransport(DslModel):
    type: Literal["kafka"] = "kafka"
    topic: str
    bootstrap_servers: List[str]
    key_serializer: str = STRING_SERIALIZER
    value_serializer: str = STRING_SERIALIZER
    acks: Literal["0", "1", "all"] = "1"
    retries: int = 3


class MqttTransport(DslModel):
    type: Literal["mqtt"] = "mqtt"
    topic: str
    qos: int = Field(default=1, ge=0, le=2)
    broker: str
    client_id: str
    username: Optional[str] = None
    password: Optional[str] = None
    retain: bool = False


class SftpTransport(DslModel):
    type: Literal["sftp"] = "sftp"
    host: str
    port: int = 22
    username: str
    password: Optional[str] = None
    private_key: Optional[str] = None
    path: str
    mode: Literal["upload", "download"]


class FsTransport(DslModel):
    type: Literal["fs"] = "fs"
    path: str
    mode: Literal["read", "write", "append"]
    encoding: str = "utf8"
    create_dir: bool = False


class CustomTransport(DslModel):
    type: Literal["custom"] = "custom"
    name: str
    config: Dict[str, Any]


Transport = Annotated[
    Union[
        RestTransport,
        SoapTransport,
        GraphqlTransport,
        JdbcTransport,
        KafkaTransport,
        MqttTransport,
        SftpTransport,
        FsTransport,
        CustomTransport,
    ],
    Field(discriminator="type"),
]

TRANSPORT_TYPES = (
    "rest",
    "soap",
    "graphql",
    "jdbc",
    "kafka",
    "mqtt",
    "sftp",
    "fs",
    "custom",
)
