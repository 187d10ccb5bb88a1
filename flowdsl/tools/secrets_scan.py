"""
secrets_scan.py - Flag hardcoded credentials in flow documents.

Flow files should reference credentials through placeholders such as
``${env.DB_PASSWORD}`` rather than carry literal values. This scan works on
the raw text (so it also covers keys the type model ignores) and reports a
HARDCODED_SECRET warning per quoted literal found under a password, secret,
token or api key entry. Matched values are never echoed back.
"""

from __future__ import annotations

import re
from typing import List

from ..validator.errors import Finding

HARDCODED_SECRET = "HARDCODED_SECRET"
REDACTED = "***REDACTED***"

SECRET_PATTERN = re.compile(
    r"""(?P<key>password|secret|token|api[_-]?key)['"]?\s*:\s*(?P<quote>['"])(?P<value>[^'"]+)(?P=quote)""",
    re.IGNORECASE,
)

# Values that are clearly not real credentials
PLACEHOLDER_PATTERN = re.compile(
    r"\$\{|password|secret|token|api[_-]?key|test|example|changeme|<",
    re.IGNORECASE,
)


def is_placeholder(value: str) -> bool:
    """True for env placeholders and obvious dummy values."""
    return PLACEHOLDER_PATTERN.match(value.strip()) is not None


def scan_for_hardcoded_secrets(text: str) -> List[Finding]:
    """Return one HARDCODED_SECRET warning per literal credential in ``text``.

    Paths are ``line N`` (1-based) since the scan runs before parsing.
    """
    findings: List[Finding] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        for match in SECRET_PATTERN.finditer(line):
            if is_placeholder(match.group("value")):
                continue
            key = match.group("key")
            findings.append(
                Finding.warning(
                    f"line {lineno}",
                    f"Hardcoded secret found ({key}: {REDACTED}); "
                    "use an environment placeholder such as ${env.NAME} instead",
                    HARDCODED_SECRET,
                )
            )
    return findings
