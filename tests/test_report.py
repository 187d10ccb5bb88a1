"""Tests for report rendering (flowdsl.validator.report)."""

from flowdsl.validator import (
    Finding,
    ValidationResult,
    build_report_json,
    build_report_markdown,
    build_summary_json,
)


def _failed():
    return ValidationResult.from_findings(
        [
            Finding.error("steps[1].id", "Duplicate step ID: a", "DUPLICATE_STEP_ID"),
            Finding.warning("metadata.owners", "Flow should have at least one owner", "OWNERS_MISSING"),
        ]
    )


class TestValidationResult:
    """Result bookkeeping."""

    def test_from_findings_splits_by_severity(self):
        """Critical and error findings are errors; warnings stay warnings."""
        result = ValidationResult.from_findings(
            [
                Finding.warning("a", "w", "W"),
                Finding.critical("bad", "PARSE_ERROR"),
                Finding.error("b", "e", "E"),
            ]
        )
        assert [f.code for f in result.errors] == ["PARSE_ERROR", "E"]
        assert [f.code for f in result.warnings] == ["W"]
        assert not result.valid

    def test_warnings_do_not_invalidate(self):
        """Warnings alone keep the result valid."""
        result = ValidationResult()
        result.add(Finding.warning("metadata.owners", "m", "OWNERS_MISSING"))
        assert result.valid
        assert result.has_warnings()

    def test_extend(self):
        """extend merges both lists."""
        result = ValidationResult()
        result.extend(_failed())
        assert result.codes() == ["DUPLICATE_STEP_ID", "OWNERS_MISSING"]

    def test_promoted(self):
        """Promotion turns warnings into errors and leaves errors alone."""
        warning = Finding.warning("p", "m", "C")
        assert warning.promoted().severity == "error"
        error = Finding.error("p", "m", "C")
        assert error.promoted() is error

    def test_to_dict(self):
        """Dictionary form for JSON output."""
        data = _failed().to_dict()
        assert data["valid"] is False
        assert data["error_count"] == 1
        assert data["warnings"][0]["code"] == "OWNERS_MISSING"


class TestJsonReport:
    """Machine-readable reports."""

    def test_single_report(self):
        """Status, counts and findings."""
        report = build_report_json(_failed(), source="flows/a.yaml")
        assert report["source"] == "flows/a.yaml"
        assert report["status"] == "FAILED"
        assert report["valid"] is False
        assert report["error_count"] == 1
        assert report["warning_count"] == 1
        assert report["errors"][0] == {
            "path": "steps[1].id",
            "message": "Duplicate step ID: a",
            "code": "DUPLICATE_STEP_ID",
            "severity": "error",
        }

    def test_summary(self):
        """The summary counts passing and failing sources."""
        summary = build_summary_json({"a.yaml": _failed(), "b.yaml": ValidationResult()})
        assert summary["status"] == "FAILED"
        assert summary["total"] == 2
        assert summary["passed"] == 1
        assert summary["failed"] == 1
        assert [f["source"] for f in summary["files"]] == ["a.yaml", "b.yaml"]

    def test_summary_all_passed(self):
        """No failures means PASSED."""
        assert build_summary_json({"b.yaml": ValidationResult()})["status"] == "PASSED"


class TestMarkdownReport:
    """Human-readable markdown reports."""

    def test_failed_report(self):
        """Errors and warnings are listed under their headings."""
        report = build_report_markdown(_failed(), source="flows/a.yaml")
        assert report.startswith("# Flow Validation Report")
        assert "**Source**: flows/a.yaml" in report
        assert "**Status**: FAILED" in report
        assert "## Errors (1)" in report
        assert "- **DUPLICATE_STEP_ID** `steps[1].id`: Duplicate step ID: a" in report
        assert "## Warnings (1)" in report

    def test_clean_report(self):
        """Empty sections say so."""
        report = build_report_markdown(ValidationResult())
        assert "**Status**: PASSED" in report
        assert "_No errors found._" in report
        assert "_No warnings._" in report
        assert "**Source**" not in report

    def test_pathless_finding(self):
        """Document-level findings have no path."""
        result = ValidationResult.from_findings([Finding.critical("Document is empty", "PARSE_ERROR")])
        assert "- **PARSE_ERROR** Document is empty" in build_report_markdown(result)
