"""Flow root document and step entries.

The Flow exclusively owns its metadata, triggers, steps and observability
configuration. Steps refer to each other by string id only (``next``,
``error``, branch targets); ids are resolved at validation time.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field, ValidationError

from ._base import DslModel
from .metadata import Metadata
from .observability import Observability
from .policies import Policy
from .steps import BranchStep, Step
from .transports import Transport
from .triggers import Trigger

DEFAULT_SCHEMA_URI = "https://json-schema.org/draft/2020-12/schema"


class FlowStep(DslModel):
    """One unit of processing: an action plus optional transport and policies."""

    id: str
    name: str
    description: Optional[str] = None
    step: Step
    transport: Optional[Transport] = None
    policies: Optional[List[Policy]] = None
    next: Optional[List[str]] = None
    error: Optional[str] = None

    def successors(self) -> List[str]:
        """Every step id this step can hand control to (next, error, branch targets)."""
        targets: List[str] = list(self.next or [])
        if self.error:
            targets.append(self.error)
        if isinstance(self.step, BranchStep):
            targets.extend(c.next_step for c in self.step.conditions if c.next_step)
            if self.step.default:
                targets.append(self.step.default)
        return targets


class Flow(DslModel):
    """Root pipeline-definition document."""

    schema_: str = Field(default=DEFAULT_SCHEMA_URI, alias="$schema")
    metadata: Metadata
    triggers: Optional[List[Trigger]] = None
    steps: List[FlowStep] = Field(min_length=1)
    observability: Optional[Observability] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flow":
        """Coerce an untyped document tree, applying defaults.

        Raises:
            pydantic.ValidationError: If the tree does not match the type model.
        """
        return cls.model_validate(data)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def step_ids(self) -> List[str]:
        """Step ids in document order (duplicates preserved)."""
        return [s.id for s in self.steps]

    def conforms(self) -> bool:
        """Check that an in-memory (possibly mutated) Flow still matches the type model."""
        try:
            type(self).model_validate(self.to_dict())
        except ValidationError:
            return False
        return True
