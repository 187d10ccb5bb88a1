"""Semantic rules, one module per entity family.

Each rule takes a typed entity plus its document path and returns a list of
findings. Variant families dispatch on the ``type`` tag through a table;
a tag with no rule raises UnmappedVariantError.
"""

from ._common import UnmappedVariantError, is_blank
from .graph import (
    check_branch_targets,
    check_cycles,
    check_duplicate_ids,
    check_graph,
    check_references,
    check_self_references,
    check_unreachable,
)
from .metadata import check_metadata
from .observability import check_observability
from .policies import POLICY_RULES, check_policy
from .steps import STEP_RULES, check_step
from .transports import TRANSPORT_RULES, check_transport
from .triggers import TRIGGER_RULES, check_trigger, check_triggers

__all__ = [
    "UnmappedVariantError",
    "is_blank",
    "check_branch_targets",
    "check_cycles",
    "check_duplicate_ids",
    "check_graph",
    "check_references",
    "check_self_references",
    "check_unreachable",
    "check_metadata",
    "check_observability",
    "POLICY_RULES",
    "check_policy",
    "STEP_RULES",
    "check_step",
    "TRANSPORT_RULES",
    "check_transport",
    "TRIGGER_RULES",
    "check_trigger",
    "check_triggers",
]
