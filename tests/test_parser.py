"""Tests for the parser boundary (flowdsl.parser)."""

import json

import pytest
import yaml

from flowdsl.config import InputLimits
from flowdsl.parser import (
    DeserializationError,
    DocumentShapeError,
    DocumentSyntaxError,
    InputLimitError,
    detect_format,
    enforce_limits,
    load_document,
    load_flow_file,
    measure_depth,
    parse,
    parse_json,
    parse_object,
    parse_yaml,
)
from flowdsl.types import Flow
from flowdsl.validator.errors import INPUT_LIMIT_EXCEEDED, PARSE_ERROR, SCHEMA_VALIDATION_ERROR

from conftest import checkpoint_step, make_flow


class TestInputKinds:
    """parse() accepts text, bytes, paths and mappings."""

    def test_parse_yaml_text(self, minimal_flow):
        """YAML text parses into a Flow."""
        flow = parse(yaml.safe_dump(minimal_flow))
        assert isinstance(flow, Flow)
        assert flow.metadata.name == "Minimal"

    def test_parse_json_text(self, minimal_flow):
        """JSON text is detected and parsed."""
        flow = parse(json.dumps(minimal_flow))
        assert flow.steps[0].id == "s1"

    def test_parse_bytes(self, minimal_flow):
        """UTF-8 bytes are decoded."""
        flow = parse(yaml.safe_dump(minimal_flow).encode("utf-8"))
        assert flow.metadata.name == "Minimal"

    def test_parse_mapping(self, minimal_flow):
        """A pre-parsed tree goes straight to coercion."""
        assert parse(minimal_flow).metadata.name == "Minimal"

    def test_parse_path(self, write_flow, minimal_flow):
        """A Path is read and its format taken from the suffix."""
        path = write_flow(json.dumps(minimal_flow), name="flow.json")
        assert parse(path).metadata.name == "Minimal"

    def test_parse_yaml_and_parse_json(self, minimal_flow):
        """The format-specific helpers agree."""
        assert parse_yaml(yaml.safe_dump(minimal_flow)) == parse_json(json.dumps(minimal_flow))

    def test_unsupported_input_type(self):
        """Non-document inputs are a caller error."""
        with pytest.raises(TypeError):
            parse(42)

    def test_unknown_format_name(self, minimal_flow):
        """Only yaml and json are known formats."""
        with pytest.raises(ValueError):
            load_document(json.dumps(minimal_flow), format="toml")

    def test_detect_format(self):
        """Leading brace means JSON, anything else YAML."""
        assert detect_format('  {"a": 1}') == "json"
        assert detect_format("a: 1") == "yaml"

    def test_yaml_flow_mapping(self, minimal_flow):
        """A YAML flow mapping opens with a brace but is not JSON."""
        text = yaml.safe_dump(minimal_flow, default_flow_style=True)
        assert text.startswith("{")
        assert parse(text) == parse(minimal_flow)

    def test_explicit_json_format_stays_strict(self, minimal_flow):
        """Asking for JSON does not fall back to YAML."""
        with pytest.raises(DocumentSyntaxError, match="Invalid JSON"):
            load_document(yaml.safe_dump(minimal_flow, default_flow_style=True), format="json")

    def test_bytes_with_bom(self, minimal_flow):
        """A leading UTF-8 byte order mark is dropped."""
        data = b"\xef\xbb\xbf" + json.dumps(minimal_flow).encode("utf-8")
        assert parse(data).metadata.name == "Minimal"

    def test_json_file_with_bom(self, tmp_path, minimal_flow):
        """JSON files saved with a byte order mark load."""
        path = tmp_path / "flow.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps(minimal_flow).encode("utf-8"))
        assert parse(path).metadata.name == "Minimal"


class TestSyntaxErrors:
    """Malformed documents raise DocumentSyntaxError with one PARSE_ERROR."""

    def test_malformed_yaml(self):
        """Unclosed flow sequence."""
        with pytest.raises(DocumentSyntaxError) as exc_info:
            parse("metadata: [unclosed")
        findings = exc_info.value.findings
        assert len(findings) == 1
        assert findings[0].code == PARSE_ERROR
        assert findings[0].severity == "critical"
        assert findings[0].path == ""

    def test_malformed_json(self):
        """Broken JSON is reported as a JSON parse error."""
        with pytest.raises(DocumentSyntaxError, match="Invalid JSON"):
            parse('{"metadata": ')

    def test_empty_document(self):
        """An empty document is a syntax-tier failure."""
        with pytest.raises(DocumentSyntaxError, match="empty"):
            parse("")

    def test_non_mapping_root(self):
        """A list at the root is a syntax-tier failure."""
        with pytest.raises(DocumentSyntaxError, match="mapping"):
            parse("- a\n- b\n")

    def test_invalid_utf8(self):
        """Undecodable bytes are a syntax-tier failure."""
        with pytest.raises(DocumentSyntaxError):
            parse(b"\xff\xfe\x00bad")

    def test_lone_surrogate(self):
        """Text that cannot be encoded as UTF-8 is a syntax-tier failure."""
        with pytest.raises(DocumentSyntaxError, match="not valid UTF-8"):
            parse("metadata: {name: \ud800}\nsteps: []\n")

    def test_syntax_error_is_deserialization_error(self):
        """All parser failures share one base class."""
        with pytest.raises(DeserializationError):
            parse("metadata: [unclosed")


class TestShapeErrors:
    """Well-formed documents that do not fit the model raise DocumentShapeError."""

    def test_missing_steps(self):
        """One finding per offending path."""
        with pytest.raises(DocumentShapeError) as exc_info:
            parse_object({"metadata": {"name": "No Steps"}})
        findings = exc_info.value.findings
        assert [f.path for f in findings] == ["steps"]
        assert all(f.code == SCHEMA_VALIDATION_ERROR for f in findings)

    def test_parser_runs_no_semantic_checks(self):
        """A dangling next reference still parses."""
        doc = make_flow([checkpoint_step("a", next=["missing"])])
        assert parse_object(doc).steps[0].next == ["missing"]


class TestInputLimits:
    """Configured limits are enforced before coercion."""

    def test_document_size_limit(self, minimal_flow):
        """Oversized text is rejected with INPUT_LIMIT_EXCEEDED."""
        with pytest.raises(InputLimitError) as exc_info:
            parse(yaml.safe_dump(minimal_flow), limits=InputLimits(max_document_bytes=10))
        finding = exc_info.value.findings[0]
        assert finding.code == INPUT_LIMIT_EXCEEDED
        assert finding.severity == "critical"

    def test_step_count_limit(self):
        """More steps than allowed is rejected."""
        doc = make_flow([checkpoint_step("a"), checkpoint_step("b")])
        with pytest.raises(InputLimitError, match="steps"):
            parse_object(doc, limits=InputLimits(max_steps=1))

    def test_depth_limit(self):
        """Deeply nested JSON is rejected."""
        nested = "1"
        for _ in range(100):
            nested = '{"a": ' + nested + "}"
        text = '{"metadata": {"name": "Deep"}, "steps": [], "extra": ' + nested + "}"
        with pytest.raises(InputLimitError, match="depth"):
            parse(text, limits=InputLimits(max_depth=64))

    def test_within_limits_passes(self, minimal_flow):
        """A small document is untouched by enforce_limits."""
        enforce_limits(minimal_flow, InputLimits())

    def test_measure_depth(self):
        """Scalars have depth 0; each container adds one."""
        assert measure_depth(1) == 0
        assert measure_depth({}) == 1
        assert measure_depth({"a": {"b": [1]}}) == 3

    def test_measure_depth_stops_on_cycles(self):
        """A self-referencing structure terminates once past stop_at."""
        loop = []
        loop.append(loop)
        assert measure_depth(loop, stop_at=10) > 10


class TestFiles:
    """Loading flow files."""

    def test_load_sample_flows(self, simple_flow_path, iot_flow_path):
        """Both sample flows load."""
        assert len(load_flow_file(simple_flow_path).steps) == 7
        assert len(load_flow_file(iot_flow_path).steps) == 9

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_flow_file(tmp_path / "nope.yaml")
