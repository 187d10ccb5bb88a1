"""Trigger variants: the entry points that start a flow.

``Trigger`` is a tagged union keyed by ``type``:
http, schedule, kafka, mqtt, sftp, jdbc, file-watch.
"""

from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field

from ._base import DslModel, HttpMethod, IsoDateTime, RateLimit

STRING_DESERIALIZER = "org.apache.kafka.common.serialization.StringDeserializer"

FileEvent = Literal["create", "modify", "delete"]


class HttpAuth(DslModel):
    type: Literal["none", "basic", "bearer", "api-key"] = "none"
    config: Optional[Dict[str, str]] = None


class HttpTrigger(DslModel):
    type: Literal["http"] = "http"
    method: HttpMethod = "POST"
    path: str
    headers: Optional[Dict[str, str]] = None
    auth: Optional[HttpAuth] = None
    rate_limit: Optional[RateLimit] = None


class ScheduleTrigger(DslModel):
    type: Literal["schedule"] = "schedule"
    cron: str
    timezone: str = "UTC"
    start_date: Optional[IsoDateTime] = None
    end_date: Optional[IsoDateTime] = None


class KafkaTrigger(DslModel):
    type: Literal["kafka"] = "kafka"
    topic: str
    group_id: str
    bootstrap_servers: List[str]
    auto_commit: bool = True
    auto_offset_reset: Literal["earliest", "latest"] = "earliest"
    key_deserializer: str = STRING_DESERIALIZER
    value_deserializer: str = STRING_DESERIALIZER


class MqttTrigger(DslModel):
    type: Literal["mqtt"] = "mqtt"
    topic: str
    # Range is a semantic rule (MQTT_QOS_INVALID), not a shape constraint
    qos: int = 1
    broker: str
    client_id: str
    username: Optional[str] = None
    password: Optional[str] = None


class SftpTrigger(DslModel):
    type: Literal["sftp"] = "sftp"
    host: str
    port: int = 22
    username: str
    password: Optional[str] = None
    private_key: Optional[str] = None
    path: str
    pattern: str = "*"
    poll_interval: float = 60  # seconds


class JdbcTrigger(DslModel):
    type: Literal["jdbc"] = "jdbc"
    url: str
    username: str
    password: str
    query: str
    poll_interval: float = 60  # seconds
    driver: str


class FileWatchTrigger(DslModel):
    type: Literal["file-watch"] = "file-watch"
    path: str
    pattern: str = "*"
    events: List[FileEvent] = Field(default_factory=lambda: ["create"])
    recursive: bool = False


Trigger = Annotated[
    Union[
        HttpTrigger,
        ScheduleTrigger,
        KafkaTrigger,
        MqttTrigger,
        SftpTrigger,
        JdbcTrigger,
        FileWatchTrigger,
    ],
    Field(discriminator="type"),
]

TRIGGER_TYPES = (
    "http",
    "schedule",
    "kafka",
    "mqtt",
    "sftp",
    "jdbc",
    "file-watch",
)
