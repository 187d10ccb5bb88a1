"""Helpers shared by the semantic rule modules."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from ..errors import Finding

RuleFn = Callable[[Any, str], List[Finding]]


class UnmappedVariantError(LookupError):
    """A variant tag has no rule registered (a programming error, not bad input)."""


def is_blank(value: Optional[str]) -> bool:
    """Missing, empty or whitespace-only text."""
    return value is None or not value.strip()


def require_text(value: Optional[str], path: str, message: str, code: str) -> List[Finding]:
    if is_blank(value):
        return [Finding.error(path, message, code)]
    return []


def require_positive(value: Optional[float], path: str, message: str, code: str) -> List[Finding]:
    """Error when a present number is zero or negative; absent values pass."""
    if value is not None and value <= 0:
        return [Finding.error(path, message, code)]
    return []


def require_unit_interval(value: Optional[float], path: str, message: str, code: str) -> List[Finding]:
    if value is not None and not 0 <= value <= 1:
        return [Finding.error(path, message, code)]
    return []


def check_coverage(table: Dict[str, RuleFn], vocabulary: Iterable[str], family: str) -> None:
    """Raise UnmappedVariantError unless the table has exactly one rule per tag."""
    tags = set(vocabulary)
    missing = sorted(tags - set(table))
    unknown = sorted(set(table) - tags)
    if missing or unknown:
        raise UnmappedVariantError(
            f"{family} rule table out of sync: missing {missing}, unknown {unknown}"
        )


def dispatch(table: Dict[str, RuleFn], variant: Any, path: str) -> List[Finding]:
    """Run the rule registered for ``variant.type``.

    Raises:
        UnmappedVariantError: If no rule is registered for the tag.
    """
    try:
        rule = table[variant.type]
    except KeyError:
        raise UnmappedVariantError(
            f"No semantic rule registered for variant {variant.type!r} at {path}"
        ) from None
    return rule(variant, path)
