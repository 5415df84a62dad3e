"""
Input checks shared by the auth and data-entry services.

contains_sql_injection is a pattern denylist, not a parser: it has false
positives and false negatives. Every query in this package uses bound
parameters, which is what actually keeps input out of SQL; this check only
rejects obviously hostile input early.
"""

import re
from dataclasses import dataclass
from typing import Any

# ASCII rules for \b, \d and case folding, so non-ASCII letters and digits never count.
SQL_INJECTION_PATTERNS = (
    re.compile(
        r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|EXECUTE|UNION|SCRIPT)\b",
        re.IGNORECASE | re.ASCII,
    ),
    re.compile(r"'|\\'|;|--|/\*|\*/|\+|%|="),
    re.compile(r"(\bor\b|\band\b).*(\d+|'|\")", re.IGNORECASE | re.ASCII),
    re.compile(r"\bunion\b.*\bselect\b", re.IGNORECASE | re.ASCII),
)

# Applied in order; "&" is not escaped.
_XSS_REPLACEMENTS = (
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


def contains_sql_injection(value: Any) -> bool:
    """True if value is a string matching any injection pattern. Non-strings are never flagged."""
    if not isinstance(value, str):
        return False
    return any(pattern.search(value) for pattern in SQL_INJECTION_PATTERNS)


def validate_length(field: str, value: Any, max_length: int) -> ValidationResult:
    if not isinstance(value, str):
        return ValidationResult(False, f"{field} must be a string")
    if len(value) > max_length:
        return ValidationResult(False, f"{field} must be less than {max_length} characters")
    return ValidationResult(True)


def validate_required(fields: dict[str, Any]) -> ValidationResult:
    """Fail listing every field whose value is falsy or a blank string."""
    missing = [
        name
        for name, value in fields.items()
        if not value or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        return ValidationResult(False, f"Missing required fields: {', '.join(missing)}")
    return ValidationResult(True)


def sanitize_xss(value: Any) -> Any:
    """Replace <, >, ", ' and / with HTML entities. Non-strings are returned unchanged."""
    if not isinstance(value, str):
        return value
    for char, entity in _XSS_REPLACEMENTS:
        value = value.replace(char, entity)
    return value

