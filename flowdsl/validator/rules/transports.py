"""Per-variant transport rules (paths rooted at ``steps[i].transport``)."""

from __future__ import annotations

from typing import Dict, List

from ...types import (
    TRANSPORT_TYPES,
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
from ..errors import Finding
from ._common import RuleFn, check_coverage, dispatch, require_positive, require_text


def check_rest_transport(transport: RestTransport, path: str) -> List[Finding]:
    return require_text(
        transport.url, f"{path}.url", "URL is required for REST transport", "REST_URL_MISSING"
    ) + require_positive(
        transport.timeout,
        f"{path}.timeout",
        "Timeout must be greater than 0",
        "REST_TIMEOUT_INVALID",
    )


def check_soap_transport(transport: SoapTransport, path: str) -> List[Finding]:
    return require_text(
        transport.url, f"{path}.url", "URL is required for SOAP transport", "SOAP_URL_MISSING"
    ) + require_text(
        transport.action, f"{path}.action", "SOAP action is required", "SOAP_ACTION_MISSING"
    )


def check_graphql_transport(transport: GraphqlTransport, path: str) -> List[Finding]:
    return require_text(
        transport.url,
        f"{path}.url",
        "URL is required for GraphQL transport",
        "GRAPHQL_URL_MISSING",
    ) + require_text(
        transport.query, f"{path}.query", "GraphQL query is required", "GRAPHQL_QUERY_MISSING"
    )


def check_jdbc_transport(transport: JdbcTransport, path: str) -> List[Finding]:
    findings: List[Finding] = []
    if not transport.url.startswith("jdbc:"):
        findings.append(
            Finding.error(f"{path}.url", 'JDBC URL must start with "jdbc:"', "JDBC_URL_INVALID")
        )
    findings.extend(
        require_text(transport.query, f"{path}.query", "SQL query is required", "JDBC_QUERY_MISSING")
    )
    return findings


def check_kafka_transport(transport: KafkaTransport, path: str) -> List[Finding]:
    findings = require_text(
        transport.topic,
        f"{path}.topic",
        "Topic is required for Kafka transport",
        "KAFKA_TOPIC_MISSING",
    )
    if not transport.bootstrap_servers:
        findings.append(
            Finding.error(
                f"{path}.bootstrapServers",
                "At least one bootstrap server is required",
                "KAFKA_BOOTSTRAP_SERVERS_EMPTY",
            )
        )
    return findings


def check_mqtt_transport(transport: MqttTransport, path: str) -> List[Finding]:
    return require_text(
        transport.topic,
        f"{path}.topic",
        "Topic is required for MQTT transport",
        "MQTT_TOPIC_MISSING",
    ) + require_text(
        transport.broker,
        f"{path}.broker",
        "Broker is required for MQTT transport",
        "MQTT_BROKER_MISSING",
    )


def check_sftp_transport(transport: SftpTransport, path: str) -> List[Finding]:
    return require_text(
        transport.host, f"{path}.host", "Host is required for SFTP transport", "SFTP_HOST_MISSING"
    ) + require_text(
        transport.path, f"{path}.path", "Path is required for SFTP transport", "SFTP_PATH_MISSING"
    )


def check_fs_transport(transport: FsTransport, path: str) -> List[Finding]:
    return require_text(
        transport.path,
        f"{path}.path",
        "Path is required for file system transport",
        "FS_PATH_MISSING",
    )


def check_custom_transport(transport: CustomTransport, path: str) -> List[Finding]:
    return require_text(
        transport.name,
        f"{path}.name",
        "Name is required for custom transport",
        "CUSTOM_TRANSPORT_NAME_MISSING",
    )


TRANSPORT_RULES: Dict[str, RuleFn] = {
    "rest": check_rest_transport,
    "soap": check_soap_transport,
    "graphql": check_graphql_transport,
    "jdbc": check_jdbc_transport,
    "kafka": check_kafka_transport,
    "mqtt": check_mqtt_transport,
    "sftp": check_sftp_transport,
    "fs": check_fs_transport,
    "custom": check_custom_transport,
}

check_coverage(TRANSPORT_RULES, TRANSPORT_TYPES, "transport")


def check_transport(transport: Transport, path: str) -> List[Finding]:
    return dispatch(TRANSPORT_RULES, transport, path)
