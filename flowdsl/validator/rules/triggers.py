"""Per-variant trigger rules.

Every trigger tag maps to exactly one rule in TRIGGER_RULES; paths are
rooted at ``triggers[i]``.
"""

from __future__ import annotations

from typing import Dict, List

from ...types import (
    TRIGGER_TYPES,
    FileWatchTrigger,
    HttpTrigger,
    JdbcTrigger,
    KafkaTrigger,
    MqttTrigger,
    ScheduleTrigger,
    SftpTrigger,
    Trigger,
    parse_iso_datetime,
)
from ..errors import Finding
from ._common import RuleFn, check_coverage, dispatch, is_blank

CRON_FIELD_COUNTS = (5, 6)
MQTT_QOS_LEVELS = (0, 1, 2)


def check_http_trigger(trigger: HttpTrigger, path: str) -> List[Finding]:
    findings: List[Finding] = []
    auth = trigger.auth
    if auth is not None and auth.type == "api-key":
        if is_blank((auth.config or {}).get("key")):
            findings.append(
                Finding.error(
                    f"{path}.auth.config.key",
                    "API key is required for api-key authentication",
                    "HTTP_API_KEY_MISSING",
                )
            )
    if trigger.rate_limit is not None and trigger.rate_limit.requests <= 0:
        findings.append(
            Finding.error(
                f"{path}.rateLimit.requests",
                "Rate limit requests must be greater than 0",
                "HTTP_RATE_LIMIT_INVALID",
            )
        )
    return findings


def check_schedule_trigger(trigger: ScheduleTrigger, path: str) -> List[Finding]:
    findings: List[Finding] = []
    if len(trigger.cron.split()) not in CRON_FIELD_COUNTS:
        findings.append(
            Finding.error(f"{path}.cron", "Invalid cron expression format", "SCHEDULE_CRON_INVALID")
        )
    if trigger.start_date and trigger.end_date:
        if parse_iso_datetime(trigger.start_date) >= parse_iso_datetime(trigger.end_date):
            findings.append(
                Finding.error(
                    f"{path}.endDate",
                    "End date must be after start date",
                    "SCHEDULE_DATE_RANGE_INVALID",
                )
            )
    return findings


def check_kafka_trigger(trigger: KafkaTrigger, path: str) -> List[Finding]:
    if not trigger.bootstrap_servers:
        return [
            Finding.error(
                f"{path}.bootstrapServers",
                "At least one bootstrap server is required",
                "KAFKA_BOOTSTRAP_SERVERS_EMPTY",
            )
        ]
    return []


def check_mqtt_trigger(trigger: MqttTrigger, path: str) -> List[Finding]:
    if trigger.qos not in MQTT_QOS_LEVELS:
        return [Finding.error(f"{path}.qos", "QoS must be between 0 and 2", "MQTT_QOS_INVALID")]
    return []


def check_sftp_trigger(trigger: SftpTrigger, path: str) -> List[Finding]:
    if is_blank(trigger.password) and is_blank(trigger.private_key):
        return [
            Finding.error(
                path,
                "Either password or privateKey must be provided for SFTP authentication",
                "SFTP_AUTH_MISSING",
            )
        ]
    return []


def check_jdbc_trigger(trigger: JdbcTrigger, path: str) -> List[Finding]:
    if not trigger.url.startswith("jdbc:"):
        return [Finding.error(f"{path}.url", 'JDBC URL must start with "jdbc:"', "JDBC_URL_INVALID")]
    return []


def check_file_watch_trigger(trigger: FileWatchTrigger, path: str) -> List[Finding]:
    if not trigger.events:
        return [
            Finding.error(
                f"{path}.events",
                "At least one event type must be specified",
                "FILE_WATCH_EVENTS_EMPTY",
            )
        ]
    return []


TRIGGER_RULES: Dict[str, RuleFn] = {
    "http": check_http_trigger,
    "schedule": check_schedule_trigger,
    "kafka": check_kafka_trigger,
    "mqtt": check_mqtt_trigger,
    "sftp": check_sftp_trigger,
    "jdbc": check_jdbc_trigger,
    "file-watch": check_file_watch_trigger,
}

check_coverage(TRIGGER_RULES, TRIGGER_TYPES, "trigger")


def check_trigger(trigger: Trigger, path: str) -> List[Finding]:
    return dispatch(TRIGGER_RULES, trigger, path)


def check_triggers(triggers: List[Trigger], path: str = "triggers") -> List[Finding]:
    findings: List[Finding] = []
    for index, trigger in enumerate(triggers):
        findings.extend(check_trigger(trigger, f"{path}[{index}]"))
    return findings
