#!/usr/bin/env python3
"""
validate_flows.py - Flow DSL document validator

Validates Flow DSL documents (.yaml, .yml, .json) with two layers:

**Layer 1: Structure**
- YAML/JSON parses correctly and fits the input limits
- Fields are of correct types, required fields are present
- Trigger/step/transport/policy tags belong to the closed vocabulary

**Layer 2: Semantics**
- Per-variant business rules (cron format, JDBC URL scheme, timeouts, ...)
- Compliance requirements (HIPAA implies RBAC roles)
- Step graph integrity (unique ids, resolvable next/error references)

## CLI Usage

Validate the sample flows:
  flowdsl-validate samples/flows

Validate with strict mode (warnings become errors):
  flowdsl-validate --strict samples/flows

Also flag cycles, unreachable steps and dangling branch targets:
  flowdsl-validate --cycles --unreachable --branch-targets flows/

Fine-grained rule levels:
  flowdsl-validate --rule cycles=warning flows/

Scan for hardcoded credentials and cross-check with the JSON Schema:
  flowdsl-validate --check-secrets --schema flows/

Export the JSON Schema:
  flowdsl-validate --export-schema schema/flow.schema.json

## Exit Codes

0   All flows valid
1   Validation failed for at least one flow
2   Fatal error (no inputs, unreadable path, bad arguments)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .. import __version__
from ..config import RULE_ERROR, RULE_LEVELS, ValidatorConfig, get_validator_config
from ..json_schema import export_flow_schema, validate_with_schema
from ..parser import SUFFIX_FORMATS, DeserializationError, read_document
from ..validator import (
    Finding,
    ValidationResult,
    build_report_markdown,
    build_summary_json,
    format_findings,
)
from ..validator.engine import FlowValidator
from .secrets_scan import scan_for_hardcoded_secrets

logger = logging.getLogger(__name__)

# Exit codes
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILED = 1
EXIT_FATAL_ERROR = 2


class FatalError(Exception):
    """Problem with the invocation itself rather than with a flow document."""


def collect_flow_files(paths: Sequence[str]) -> List[Path]:
    """Expand files and directories into a sorted, de-duplicated list of flow files.

    Raises:
        FatalError: If a path does not exist or nothing was found.
    """
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(
                sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in SUFFIX_FORMATS)
            )
        elif path.is_file():
            files.append(path)
        else:
            raise FatalError(f"Path not found: {path}")

    unique = list(dict.fromkeys(files))
    if not unique:
        raise FatalError("No flow files found (expected .yaml, .yml or .json)")
    return unique


def parse_rule_overrides(values: Sequence[str]) -> Dict[str, str]:
    """Parse ``NAME=LEVEL`` pairs from --rule."""
    overrides: Dict[str, str] = {}
    for value in values:
        name, sep, level = value.partition("=")
        if not sep or level not in RULE_LEVELS:
            raise FatalError(
                f"Invalid --rule {value!r}; expected NAME=LEVEL with LEVEL in {', '.join(RULE_LEVELS)}"
            )
        overrides[name.strip().replace("-", "_")] = level
    return overrides


def build_config(args: argparse.Namespace) -> ValidatorConfig:
    rules: Dict[str, str] = {}
    if args.cycles:
        rules["cycles"] = RULE_ERROR
    if args.unreachable:
        rules["unreachable_steps"] = RULE_ERROR
    if args.branch_targets:
        rules["branch_targets"] = RULE_ERROR
    rules.update(parse_rule_overrides(args.rule))

    try:
        return get_validator_config().with_overrides(
            strict=True if args.strict else None,
            rules=rules,
        )
    except ValueError as e:
        raise FatalError(str(e)) from e


def validate_file(
    path: Path,
    validator: FlowValidator,
    check_secrets: bool = False,
    check_schema: bool = False,
) -> ValidationResult:
    """Validate one flow file, optionally adding secret-scan and JSON Schema findings."""
    result = validator.validate(path)
    extra: List[Finding] = []

    if check_secrets:
        text = path.read_text(encoding="utf-8", errors="replace")
        extra.extend(scan_for_hardcoded_secrets(text))

    if check_schema and result.valid:
        try:
            tree = read_document(path, validator.config.limits)
        except DeserializationError:
            tree = None
        if tree is not None:
            # Cross-check only: the pydantic model is authoritative
            extra.extend(
                Finding.warning(f.path, f"JSON Schema: {f.message}", f.code)
                for f in validate_with_schema(tree)
            )

    if validator.config.strict:
        extra = [f.promoted() for f in extra]
    result.extend(ValidationResult.from_findings(extra))
    return result


def run_validation(
    paths: Sequence[str],
    config: ValidatorConfig,
    check_secrets: bool = False,
    check_schema: bool = False,
) -> Dict[str, ValidationResult]:
    """Validate every flow file under ``paths``; results keyed by file path."""
    validator = FlowValidator(config)
    results: Dict[str, ValidationResult] = {}
    for path in collect_flow_files(paths):
        logger.debug("Validating %s", path)
        results[str(path)] = validate_file(path, validator, check_secrets, check_schema)
    return results


def print_results(results: Dict[str, ValidationResult]) -> None:
    """Print per-file results; failures go to stderr."""
    failed = 0
    for source, result in results.items():
        if result.valid:
            print(f"[PASS] {source}")
            if result.has_warnings():
                for line in format_findings(result).splitlines()[1:]:
                    if line:
                        print(f"  {line}")
        else:
            failed += 1
            print(f"[FAIL] {source}", file=sys.stderr)
            for line in format_findings(result).splitlines():
                if line:
                    print(f"  {line}", file=sys.stderr)

    if failed:
        print(
            f"\nFlow validation FAILED ({failed} of {len(results)} file(s)).",
            file=sys.stderr,
        )
    else:
        print(f"\nFlow validation PASSED ({len(results)} file(s)).")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="flowdsl-validate",
        description="Flow DSL validator - check flow documents before execution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0 - All flows valid
  1 - Validation failed
  2 - Fatal error (no inputs, unreadable path)

Examples:
  flowdsl-validate samples/flows
  flowdsl-validate --strict --cycles flows/orders.yaml
  flowdsl-validate --report json samples/flows
  flowdsl-validate --export-schema schema/flow.schema.json
        """,
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="Flow files or directories to validate",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors",
    )

    parser.add_argument(
        "--cycles",
        action="store_true",
        help="Report cycles in the step graph as errors",
    )

    parser.add_argument(
        "--unreachable",
        action="store_true",
        help="Report steps not reachable from the first step as errors",
    )

    parser.add_argument(
        "--branch-targets",
        action="store_true",
        help="Report branch nextStep/default ids that name no step as errors",
    )

    parser.add_argument(
        "--rule",
        action="append",
        default=[],
        metavar="NAME=LEVEL",
        help="Set a graph rule level (self_references, cycles, unreachable_steps, "
        "branch_targets) to ignore, warning or error",
    )

    parser.add_argument(
        "--check-secrets",
        action="store_true",
        help="Warn about hardcoded passwords, secrets, tokens and API keys",
    )

    parser.add_argument(
        "--schema",
        action="store_true",
        help="Cross-check valid flows against the generated JSON Schema",
    )

    parser.add_argument(
        "--report",
        choices=["json", "markdown"],
        help="Output format for validation report (json or markdown)",
    )

    parser.add_argument(
        "--export-schema",
        metavar="PATH",
        help="Write the Flow JSON Schema to PATH",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"flowdsl-validate {__version__}",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        if args.export_schema:
            path = export_flow_schema(args.export_schema)
            print(f"Wrote JSON Schema to {path}")
            if not args.paths:
                sys.exit(EXIT_SUCCESS)

        if not args.paths:
            raise FatalError("No flow files or directories given")

        config = build_config(args)
        results = run_validation(
            args.paths,
            config,
            check_secrets=args.check_secrets,
            check_schema=args.schema,
        )
    except FatalError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(EXIT_FATAL_ERROR)
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        sys.exit(EXIT_FATAL_ERROR)

    has_errors = any(result.has_errors() for result in results.values())

    if args.report == "json":
        print(json.dumps(build_summary_json(results), indent=2))
    elif args.report == "markdown":
        print("\n\n---\n\n".join(build_report_markdown(r, s) for s, r in results.items()))
    else:
        print_results(results)

    sys.exit(EXIT_VALIDATION_FAILED if has_errors else EXIT_SUCCESS)


if __name__ == "__main__":
    main()
