"""Injection and probing signatures scanned in raw payload strings.

Each pattern group maps to the violation type reported when it matches.
Groups are checked in declaration order; the first match wins.
"""

import re

from command_gateway.domain.enums import ViolationType

SQL_INJECTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bunion\b.*\bselect\b", re.IGNORECASE | re.DOTALL),
    re.compile(r"\bselect\b.*\bfrom\b.*\bwhere\b", re.IGNORECASE | re.DOTALL),
    re.compile(r"\bdrop\b.*\btable\b", re.IGNORECASE | re.DOTALL),
    re.compile(r"\binsert\b.*\binto\b", re.IGNORECASE | re.DOTALL),
    re.compile(r"\bdelete\b.*\bfrom\b", re.IGNORECASE | re.DOTALL),
    re.compile(r"\bupdate\b.*\bset\b", re.IGNORECASE | re.DOTALL),
    re.compile(r"'\s*or\s+'?\d+'?\s*=\s*'?\d+", re.IGNORECASE),
)

XSS_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<script\b", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"<[^>]*\bon[a-z]+\s*=", re.IGNORECASE),
    re.compile(r"<iframe[^>]*>", re.IGNORECASE),
    re.compile(r"<object[^>]*>", re.IGNORECASE),
    re.compile(r"data\s*:\s*text/html", re.IGNORECASE),
)

MALICIOUS_INPUT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.\./"),
    re.compile(r"\.\.\\"),
    re.compile(r"/etc/passwd", re.IGNORECASE),
    re.compile(r"/proc/self/environ", re.IGNORECASE),
    re.compile(r"\b(?:eval|exec|system|shell_exec|passthru|base64_decode)\s*\(", re.IGNORECASE),
    re.compile(r"\b(?:sqlmap|nikto|nessus|masscan)\b", re.IGNORECASE),
)

THREAT_PATTERN_GROUPS: tuple[tuple[ViolationType, tuple[re.Pattern[str], ...]], ...] = (
    (ViolationType.SQL_INJECTION_ATTEMPT, SQL_INJECTION_PATTERNS),
    (ViolationType.XSS_ATTEMPT, XSS_PATTERNS),
    (ViolationType.MALICIOUS_INPUT, MALICIOUS_INPUT_PATTERNS),
)


def match_threat(value: str) -> tuple[ViolationType, str] | None:
    """First threat signature matched by ``value``.

    Returns:
        (violation type, pattern source) or None when the string is clean.
    """
    for violation_type, patterns in THREAT_PATTERN_GROUPS:
        for pattern in patterns:
            if pattern.search(value):
                return violation_type, pattern.pattern
    return None
