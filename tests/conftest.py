"""
Test fixtures and utilities for the Flow DSL validator tests.

Provides document builders for minimal and sample flows, and isolates every
test from FLOWDSL_* environment variables and the cached validator config.
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from flowdsl.config import reset_config

REPO_ROOT = Path(__file__).resolve().parent.parent
SAMPLES_DIR = REPO_ROOT / "samples" / "flows"

FLOWDSL_ENV_VARS = (
    "FLOWDSL_CONFIG",
    "FLOWDSL_STRICT",
    "FLOWDSL_RULE_SELF_REFERENCES",
    "FLOWDSL_RULE_CYCLES",
    "FLOWDSL_RULE_UNREACHABLE_STEPS",
    "FLOWDSL_RULE_BRANCH_TARGETS",
    "FLOWDSL_MAX_DOCUMENT_BYTES",
    "FLOWDSL_MAX_STEPS",
    "FLOWDSL_MAX_DEPTH",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Clear FLOWDSL_* variables and the config cache around each test."""
    for name in FLOWDSL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


# ============================================================================
# Document builders
# ============================================================================


def checkpoint_step(step_id: str, **extra: Any) -> Dict[str, Any]:
    """A step entry whose action is a checkpoint (the simplest valid action)."""
    entry: Dict[str, Any] = {
        "id": step_id,
        "name": step_id.title(),
        "step": {"type": "checkpoint", "name": f"{step_id}-checkpoint"},
    }
    entry.update(extra)
    return entry


def make_flow(steps: Optional[List[Dict[str, Any]]] = None, **sections: Any) -> Dict[str, Any]:
    """Build a flow document with the given steps and top-level sections."""
    doc: Dict[str, Any] = {
        "metadata": {"name": "Test Flow", "version": "1.0.0"},
        "steps": steps if steps is not None else [checkpoint_step("step1")],
    }
    doc.update(sections)
    return doc


def owned(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Add an owner so OWNERS_MISSING does not appear."""
    doc = copy.deepcopy(doc)
    doc["metadata"]["owners"] = [{"name": "Ops", "email": "ops@example.com"}]
    return doc


@pytest.fixture
def minimal_flow() -> Dict[str, Any]:
    """Metadata name plus one checkpoint step, nothing else."""
    return {
        "metadata": {"name": "Minimal"},
        "steps": [checkpoint_step("s1")],
    }


@pytest.fixture
def samples_dir() -> Path:
    return SAMPLES_DIR


@pytest.fixture
def simple_flow_path() -> Path:
    return SAMPLES_DIR / "simple-api-integration.yaml"


@pytest.fixture
def iot_flow_path() -> Path:
    return SAMPLES_DIR / "iot-processing.yaml"


@pytest.fixture
def write_flow(tmp_path):
    """Write text to a flow file under tmp_path and return its path."""

    def _write(text: str, name: str = "flow.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
