"""Input validation utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Sequence

MIN_PASSWORD_LENGTH = 12

# Each rule is checked independently; every failure is reported.
_PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain uppercase letters"),
    (re.compile(r"[a-z]"), "Password must contain lowercase letters"),
    (re.compile(r"[0-9]"), "Password must contain numbers"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain symbols"),
)

# Deliberately loose: one "@" and a dot in the domain, no whitespace.
_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validator run."""

    valid: bool
    errors: tuple[str, ...] = ()


def validate_password(password: Optional[str]) -> ValidationResult:
    """Check a password against the account password policy.

    The policy requires at least 12 characters, an uppercase letter, a
    lowercase letter, a digit and a symbol. All rules are evaluated, so
    an empty password fails every one of them.

    Args:
        password: The candidate password, or None.

    Returns:
        ValidationResult listing every violated rule in a fixed order.
    """
    value = password or ""
    errors: list[str] = []

    if len(value) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(value):
            errors.append(message)

    return ValidationResult(valid=not errors, errors=tuple(errors))


def validate_email(email: Optional[str]) -> bool:
    """Return True when the value looks like an email address.

    This is a shape check only, not an RFC 5322 parser.
    """
    if not email or not isinstance(email, str):
        return False
    return _EMAIL_PATTERN.fullmatch(email) is not None


def is_present(value: Any) -> bool:
    """Return True for a string that is non-empty after trimming."""
    return isinstance(value, str) and bool(value.strip())


def missing_fields(body: Mapping[str, Any], fields: Sequence[str]) -> list[str]:
    """Return the required fields that are absent or blank.

    Args:
        body: Parsed request body.
        fields: Names of the required fields.

    Returns:
        Field names in the order given, for every field that fails
        ``is_present``.
    """
    return [name for name in fields if not is_present(body.get(name))]
