"""Shared base model and field types for the Flow DSL type model.

Documents use camelCase keys (``connectorRef``, ``bootstrapServers``); the
Python attributes are snake_case. Typing is strict: numbers are never parsed
from strings and strings are never built from numbers.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
BackoffType = Literal["fixed", "exponential", "linear"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class DslModel(BaseModel):
    """Base for every Flow DSL model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain document tree (camelCase keys, unset optionals omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ISO-8601 datetimes
# =============================================================================


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 datetime string; naive values are taken as UTC."""
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"invalid ISO-8601 datetime: {value!r}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _datetime_to_text(value: Any) -> Any:
    # YAML loads unquoted timestamps as date/datetime objects
    if isinstance(value, date):
        return value.isoformat()
    return value


def _check_iso_datetime(value: str) -> str:
    parse_iso_datetime(value)
    return value


IsoDateTime = Annotated[
    str,
    BeforeValidator(_datetime_to_text),
    AfterValidator(_check_iso_datetime),
]


# =============================================================================
# Retry / backoff (shared by connector steps, REST transports, QoS policies)
# =============================================================================


class Backoff(DslModel):
    """Backoff schedule between attempts. Delays are milliseconds."""

    type: BackoffType = "exponential"
    initial_delay: float = 1000
    max_delay: float = 30000
    multiplier: float = 2


class RetryConfig(DslModel):
    attempts: int = 3
    backoff: Optional[Backoff] = None


class RateLimit(DslModel):
    requests: float
    window: float  # seconds
