"""Validator configuration (packaged YAML defaults plus environment overrides)."""

from .validator_config import (
    RULE_ERROR,
    RULE_IGNORE,
    RULE_LEVELS,
    RULE_WARNING,
    InputLimits,
    RuleToggles,
    ValidatorConfig,
    get_validator_config,
    load_validator_config,
    reset_config,
)

__all__ = [
    "RULE_ERROR",
    "RULE_IGNORE",
    "RULE_LEVELS",
    "RULE_WARNING",
    "InputLimits",
    "RuleToggles",
    "ValidatorConfig",
    "get_validator_config",
    "load_validator_config",
    "reset_config",
]
