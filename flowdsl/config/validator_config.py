"""Validator configuration registry.

Provides the rule toggles and input limits used by the validator.
Environment variables take precedence over YAML config.

Usage:
    from flowdsl.config import get_validator_config

    config = get_validator_config()
    config.rules.cycles          # "ignore" | "warning" | "error"
    config.limits.max_steps      # 1000

Per-call overrides:
    from flowdsl.config import get_validator_config

    config = get_validator_config().with_overrides(
        strict=True,
        rules={"cycles": "error"},
    )
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).parent / "validator.yaml"
_cached_config: Optional["ValidatorConfig"] = None

ENV_PREFIX = "FLOWDSL_"
ENV_CONFIG_PATH = "FLOWDSL_CONFIG"
ENV_STRICT = "FLOWDSL_STRICT"

# Rule toggle levels
RULE_IGNORE = "ignore"
RULE_WARNING = "warning"
RULE_ERROR = "error"
RULE_LEVELS = (RULE_IGNORE, RULE_WARNING, RULE_ERROR)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")

# =============================================================================
# Input limit guardrails
# =============================================================================

# (minimum, maximum) accepted for each limit; values outside are clamped
LIMIT_BOUNDS: Dict[str, Tuple[int, int]] = {
    "max_document_bytes": (1_024, 64 * 1_048_576),
    "max_steps": (1, 100_000),
    "max_depth": (4, 1_024),
}


def _clamp_limit(value: int, name: str) -> int:
    """Clamp an input limit to its sanity bounds with logging."""
    min_val, max_val = LIMIT_BOUNDS[name]
    if value < min_val:
        logger.warning(
            "Limit '%s' value %d is below minimum %d. Clamping to %d.",
            name,
            value,
            min_val,
            min_val,
        )
        return min_val
    if value > max_val:
        logger.warning(
            "Limit '%s' value %d exceeds maximum %d. Clamping to %d.",
            name,
            value,
            max_val,
            max_val,
        )
        return max_val
    return value


@dataclass(frozen=True)
class RuleToggles:
    """Severity of the optional flow-graph rules.

    Each value is one of "ignore", "warning" or "error".
    """

    self_references: str = RULE_ERROR
    cycles: str = RULE_IGNORE
    unreachable_steps: str = RULE_IGNORE
    branch_targets: str = RULE_IGNORE


@dataclass(frozen=True)
class InputLimits:
    """Bounds enforced on raw documents before they are parsed into a Flow."""

    max_document_bytes: int = 1_048_576
    max_steps: int = 1_000
    max_depth: int = 64


@dataclass(frozen=True)
class ValidatorConfig:
    """Resolved, immutable validator configuration.

    ``source`` records where the values came from ("default", "file", "env").
    """

    strict: bool = False
    rules: RuleToggles = field(default_factory=RuleToggles)
    limits: InputLimits = field(default_factory=InputLimits)
    source: str = "default"

    def with_overrides(
        self,
        strict: Optional[bool] = None,
        rules: Optional[Mapping[str, str]] = None,
        limits: Optional[Mapping[str, int]] = None,
    ) -> "ValidatorConfig":
        """Return a copy with the given fields replaced.

        Raises:
            ValueError: If a rule name, rule level or limit name is unknown.
        """
        new_rules = self.rules
        if rules:
            known = {f.name for f in fields(RuleToggles)}
            for name, level in rules.items():
                if name not in known:
                    raise ValueError(f"Unknown rule toggle: {name!r}")
                if level not in RULE_LEVELS:
                    raise ValueError(
                        f"Invalid level {level!r} for rule {name!r}; expected one of {RULE_LEVELS}"
                    )
            new_rules = replace(self.rules, **dict(rules))

        new_limits = self.limits
        if limits:
            for name in limits:
                if name not in LIMIT_BOUNDS:
                    raise ValueError(f"Unknown input limit: {name!r}")
            new_limits = replace(
                self.limits,
                **{name: _clamp_limit(int(value), name) for name, value in limits.items()},
            )

        return replace(
            self,
            strict=self.strict if strict is None else strict,
            rules=new_rules,
            limits=new_limits,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strict": self.strict,
            "rules": {f.name: getattr(self.rules, f.name) for f in fields(RuleToggles)},
            "limits": {f.name: getattr(self.limits, f.name) for f in fields(InputLimits)},
            "source": self.source,
        }


# =============================================================================
# Loading
# =============================================================================


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Validator config %s not found, using built-in defaults", path)
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Validator config %s is not a mapping, using built-in defaults", path)
        return {}
    return data


def _parse_bool(value: Any, name: str, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean %r for '%s', falling back to %s", value, name, default)
    return default


def _rule_level(value: Any, name: str, default: str) -> str:
    level = str(value).strip().lower()
    if level in RULE_LEVELS:
        return level
    logger.warning(
        "Invalid level %r for rule '%s' (expected one of %s), falling back to '%s'",
        value,
        name,
        ", ".join(RULE_LEVELS),
        default,
    )
    return default


def _limit_value(value: Any, name: str, default: int) -> int:
    if isinstance(value, bool):
        logger.warning("Invalid value %r for limit '%s', falling back to %d", value, name, default)
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value %r for limit '%s', falling back to %d", value, name, default)
        return default
    return _clamp_limit(number, name)


def load_validator_config(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ValidatorConfig:
    """Build a ValidatorConfig from YAML and environment variables.

    Args:
        path: YAML file to read. Defaults to $FLOWDSL_CONFIG, then the packaged
            validator.yaml.
        env: Environment mapping. Defaults to os.environ.

    Returns:
        Resolved configuration. Invalid values fall back to defaults with a
        logged warning; out-of-range limits are clamped.
    """
    if env is None:
        env = os.environ

    config_path = Path(path) if path else Path(env.get(ENV_CONFIG_PATH) or _CONFIG_PATH)
    data = _read_yaml(config_path)
    source = "file" if data else "default"

    defaults = ValidatorConfig()

    strict = _parse_bool(data.get("strict", defaults.strict), "strict", defaults.strict)
    if env.get(ENV_STRICT) is not None:
        strict = _parse_bool(env[ENV_STRICT], ENV_STRICT, strict)
        source = "env"

    file_rules = data.get("rules") or {}
    rule_values: Dict[str, str] = {}
    for f in fields(RuleToggles):
        default = getattr(defaults.rules, f.name)
        value = file_rules.get(f.name, default)
        env_value = env.get(f"{ENV_PREFIX}RULE_{f.name.upper()}")
        if env_value is not None:
            value = env_value
            source = "env"
        rule_values[f.name] = _rule_level(value, f.name, default)

    file_limits = data.get("limits") or {}
    limit_values: Dict[str, int] = {}
    for f in fields(InputLimits):
        default = getattr(defaults.limits, f.name)
        value = file_limits.get(f.name, default)
        env_value = env.get(f"{ENV_PREFIX}{f.name.upper()}")
        if env_value is not None:
            value = env_value
            source = "env"
        limit_values[f.name] = _limit_value(value, f.name, default)

    config = ValidatorConfig(
        strict=strict,
        rules=RuleToggles(**rule_values),
        limits=InputLimits(**limit_values),
        source=source,
    )
    logger.debug("Loaded validator config from %s: %s", config_path, config.to_dict())
    return config


def get_validator_config() -> ValidatorConfig:
    """Return the process-wide validator configuration, with caching."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_validator_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config (for testing)."""
    global _cached_config
    _cached_config = None
