"""End-to-end tests for the two-phase validator (flowdsl.validate)."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest
import yaml

from flowdsl import FlowValidator, ValidatorConfig, format_findings, is_valid, parse, validate
from flowdsl.config import InputLimits
from flowdsl.types import Flow

from conftest import checkpoint_step, make_flow, owned


class TestMinimalFlow:
    """The smallest valid document."""

    def test_only_owner_warning(self, minimal_flow):
        """A minimal flow is valid with a single OWNERS_MISSING warning."""
        result = validate(minimal_flow)
        assert result.valid
        assert result.errors == []
        assert [w.code for w in result.warnings] == ["OWNERS_MISSING"]
        assert result.warnings[0].path == "metadata.owners"

    def test_owned_flow_is_clean(self, minimal_flow):
        """With an owner there is nothing to report."""
        result = validate(owned(minimal_flow))
        assert result.valid
        assert result.codes() == []

    def test_is_valid(self, minimal_flow):
        """is_valid mirrors result.valid."""
        assert is_valid(minimal_flow)
        assert not is_valid({"metadata": {"name": "x"}})


class TestSemanticFindings:
    """Representative semantic failures end to end."""

    def test_sample_rate_out_of_range(self):
        """sampleRate 1.5 is a semantic error, not a shape error."""
        result = validate(owned(make_flow(observability={"sampleRate": 1.5})))
        assert not result.valid
        assert [(e.path, e.code) for e in result.errors] == [
            ("observability.sampleRate", "OBSERVABILITY_SAMPLE_RATE_INVALID")
        ]

    def test_duplicate_ids(self):
        """Repeated ids are reported at the repeat."""
        result = validate(owned(make_flow([checkpoint_step("a"), checkpoint_step("a")])))
        assert [(e.path, e.code) for e in result.errors] == [("steps[1].id", "DUPLICATE_STEP_ID")]

    def test_dangling_next(self):
        """A next id naming no step."""
        result = validate(owned(make_flow([checkpoint_step("a", next=["b"])])))
        assert result.codes() == ["INVALID_NEXT_STEP_REFERENCE"]
        assert result.errors[0].path == "steps[0].next[0]"

    def test_hipaa_without_rbac(self):
        """HIPAA without roles is an error and missing retention a warning."""
        doc = owned(make_flow())
        doc["metadata"]["compliance"] = {"hipaa": True}
        result = validate(doc)
        assert not result.valid
        assert [e.code for e in result.errors] == ["HIPAA_RBAC_REQUIRED"]
        assert [w.code for w in result.warnings] == ["COMPLIANCE_DATA_RETENTION_MISSING"]

    def test_findings_in_document_order(self):
        """Metadata, triggers, steps, graph and observability findings, in that order."""
        doc = make_flow(
            [checkpoint_step("a", next=["ghost"]), {"id": "m", "name": "M", "step": {"type": "map", "expression": " "}}],
            triggers=[{"type": "kafka", "topic": "t", "groupId": "g", "bootstrapServers": []}],
            observability={"sampleRate": 2},
        )
        result = validate(doc)
        assert [e.code for e in result.errors] == [
            "KAFKA_BOOTSTRAP_SERVERS_EMPTY",
            "MAP_EXPRESSION_MISSING",
            "INVALID_NEXT_STEP_REFERENCE",
            "OBSERVABILITY_SAMPLE_RATE_INVALID",
        ]
        assert [w.code for w in result.warnings] == ["OWNERS_MISSING"]

    def test_every_violation_reported(self):
        """Semantic rules never stop at the first problem."""
        doc = owned(
            make_flow(
                [
                    {"id": "c", "name": "C", "step": {"type": "connector", "connectorRef": "", "operation": ""}},
                    {"id": "t", "name": "T", "step": {"type": "throttle", "rate": 0, "burst": 0}},
                ]
            )
        )
        assert len(validate(doc).errors) == 4


class TestPhases:
    """Each phase runs only if the previous one passed."""

    def test_shape_failure_skips_semantics(self):
        """A missing field hides the semantic problems behind it."""
        doc = make_flow(
            [
                checkpoint_step("a", next=["ghost"]),
                {"id": "m", "name": "M", "step": {"type": "map"}},
            ]
        )
        result = validate(doc)
        assert not result.valid
        assert {e.code for e in result.errors} == {"SCHEMA_VALIDATION_ERROR"}
        assert result.warnings == []

    def test_parse_error_single_finding(self):
        """Malformed text yields exactly one critical PARSE_ERROR."""
        result = validate("metadata: {name: [broken")
        assert not result.valid
        assert len(result.errors) == 1
        assert result.errors[0].code == "PARSE_ERROR"
        assert result.errors[0].severity == "critical"

    def test_unencodable_text_single_finding(self):
        """A lone surrogate in text is reported as PARSE_ERROR."""
        result = validate("metadata: {name: \ud800}\nsteps: []\n")
        assert result.codes() == ["PARSE_ERROR"]

    def test_limit_breach_single_finding(self):
        """Too many steps yields exactly one INPUT_LIMIT_EXCEEDED."""
        config = ValidatorConfig().with_overrides(limits={"max_steps": 2})
        doc = make_flow([checkpoint_step(f"s{i}") for i in range(3)])
        result = validate(doc, config)
        assert result.codes() == ["INPUT_LIMIT_EXCEEDED"]

    def test_limits_apply_to_text(self, minimal_flow):
        """The byte limit applies before parsing."""
        config = ValidatorConfig(limits=InputLimits(max_document_bytes=1024))
        text = yaml.safe_dump(minimal_flow) + "#" * 2048
        assert validate(text, config).codes() == ["INPUT_LIMIT_EXCEEDED"]

    def test_non_document_input(self):
        """Inputs that are not documents are reported, not raised."""
        result = validate(42)
        assert result.codes() == ["PARSE_ERROR"]

    def test_missing_file_raises(self, tmp_path):
        """A missing Path is a caller error."""
        with pytest.raises(FileNotFoundError):
            validate(tmp_path / "missing.yaml")


class TestInputForms:
    """The same document validates identically in every form."""

    def test_text_bytes_mapping_and_flow_agree(self, minimal_flow):
        """YAML, JSON, bytes, mapping and Flow inputs give equal results."""
        expected = validate(minimal_flow)
        assert validate(yaml.safe_dump(minimal_flow)) == expected
        assert validate(json.dumps(minimal_flow)) == expected
        assert validate(json.dumps(minimal_flow).encode("utf-8")) == expected
        assert validate(Flow.from_dict(minimal_flow)) == expected
        assert validate(yaml.safe_dump(minimal_flow, default_flow_style=True)) == expected

    def test_path_input(self, write_flow, minimal_flow):
        """A Path is read from disk."""
        path = write_flow(yaml.safe_dump(minimal_flow))
        assert validate(path) == validate(minimal_flow)

    def test_validate_flow_skips_parsing(self, minimal_flow):
        """validate_flow runs only the semantic phase on a typed Flow."""
        flow = parse(minimal_flow)
        assert FlowValidator(ValidatorConfig()).validate_flow(flow).codes() == ["OWNERS_MISSING"]


class TestProperties:
    """Determinism, idempotence and round-trip."""

    def test_idempotent(self, iot_flow_path):
        """Validating twice gives equal results."""
        validator = FlowValidator(ValidatorConfig())
        assert validator.validate(iot_flow_path) == validator.validate(iot_flow_path)

    def test_round_trip_preserves_result(self):
        """Serializing a parsed Flow and validating again gives the same result."""
        doc = make_flow(
            [checkpoint_step("a", next=["b"]), checkpoint_step("b", next=["a"], error="a")],
            observability={"sampleRate": 0.5, "payloadSampling": {"rate": 2}},
        )
        flow = parse(doc)
        assert validate(flow.to_yaml()) == validate(doc)
        assert validate(flow.to_json()) == validate(doc)

    def test_input_not_mutated(self, minimal_flow):
        """Validation leaves the caller's mapping untouched."""
        before = json.dumps(minimal_flow, sort_keys=True)
        validate(minimal_flow)
        assert json.dumps(minimal_flow, sort_keys=True) == before

    def test_shared_validator_across_threads(self, simple_flow_path, minimal_flow):
        """One validator instance serves concurrent callers."""
        validator = FlowValidator(ValidatorConfig())
        bad = make_flow([checkpoint_step("a", next=["ghost"])])
        inputs = [simple_flow_path, minimal_flow, bad] * 10
        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(validator.validate, inputs))
        for document, result in zip(inputs, results):
            assert result == validator.validate(document)


class TestStrictMode:
    """Strict mode promotes warnings to errors."""

    def test_warnings_become_errors(self, minimal_flow):
        """OWNERS_MISSING fails the flow in strict mode."""
        result = validate(minimal_flow, ValidatorConfig(strict=True))
        assert not result.valid
        assert result.warnings == []
        assert [(e.code, e.severity) for e in result.errors] == [("OWNERS_MISSING", "error")]

    def test_strict_from_environment(self, monkeypatch, minimal_flow):
        """FLOWDSL_STRICT reaches the default validator."""
        monkeypatch.setenv("FLOWDSL_STRICT", "1")
        assert not validate(minimal_flow).valid

    def test_graph_warning_promoted(self):
        """Rule toggles at warning level are promoted too."""
        config = ValidatorConfig(strict=True).with_overrides(rules={"unreachable_steps": "warning"})
        doc = owned(make_flow([checkpoint_step("a"), checkpoint_step("b")]))
        assert validate(doc, config).codes() == ["STEP_UNREACHABLE"]
        assert not validate(doc, config).valid


class TestConfiguredRules:
    """Rule toggles change the verdict."""

    def test_cycles_allowed_by_default(self):
        """A two-step loop is valid unless cycles are enabled."""
        doc = owned(make_flow([checkpoint_step("a", next=["b"]), checkpoint_step("b", next=["a"])]))
        assert validate(doc, ValidatorConfig()).valid
        config = ValidatorConfig().with_overrides(rules={"cycles": "error"})
        assert validate(doc, config).codes() == ["STEP_CYCLE_DETECTED"]

    def test_self_reference_can_be_ignored(self):
        """Self-reference is an error by default and can be switched off."""
        doc = owned(make_flow([checkpoint_step("a", next=["a"])]))
        assert validate(doc, ValidatorConfig()).codes() == ["STEP_SELF_REFERENCE"]
        config = ValidatorConfig().with_overrides(rules={"self_references": "ignore"})
        assert validate(doc, config).valid


class TestSamples:
    """The shipped sample flows."""

    def test_samples_valid(self, simple_flow_path, iot_flow_path):
        """Both samples pass with no findings at all."""
        for path in (simple_flow_path, iot_flow_path):
            result = validate(path, ValidatorConfig())
            assert result.valid, format_findings(result)
            assert result.warnings == []

    def test_samples_pass_all_graph_rules(self, simple_flow_path, iot_flow_path):
        """Samples stay valid with every graph rule at error."""
        config = ValidatorConfig(strict=True).with_overrides(
            rules={"cycles": "error", "unreachable_steps": "error", "branch_targets": "error"}
        )
        assert validate(simple_flow_path, config).valid
        assert validate(iot_flow_path, config).valid


class TestFormatFindings:
    """Plain-text rendering."""

    def test_valid_with_warning(self, minimal_flow):
        """Valid flows print the valid line followed by warnings."""
        assert format_findings(validate(minimal_flow)) == (
            "Flow is valid\n"
            "\n"
            "1 warning(s):\n"
            "metadata.owners: Flow should have at least one owner (OWNERS_MISSING)"
        )

    def test_clean_flow(self, minimal_flow):
        """No warnings means a single line."""
        assert format_findings(validate(owned(minimal_flow))) == "Flow is valid"

    def test_failure(self):
        """Failed flows list each error on its own line."""
        result = validate(owned(make_flow([checkpoint_step("a"), checkpoint_step("a")])))
        assert format_findings(result) == (
            "Validation failed with 1 error(s):\n"
            "steps[1].id: Duplicate step ID: a (DUPLICATE_STEP_ID)"
        )

    def test_pathless_finding(self):
        """Document-level findings have no path prefix."""
        result = validate("")
        assert format_findings(result) == (
            "Validation failed with 1 error(s):\nDocument is empty (PARSE_ERROR)"
        )
