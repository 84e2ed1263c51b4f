"""Completeness and sanity checks for a configuration session."""

from __future__ import annotations

import math
from typing import Any
from typing import Mapping

from auth_service.configurator.session import ConfigSession

# Sections counted towards completeness; list sections are optional extras.
CORE_SECTIONS: tuple[str, ...] = (
    "useCase",
    "authMethod",
    "mfaConfig",
    "passwordPolicy",
    "advancedSecurity",
    "emailConfig",
    "appClient",
    "domain",
)

RECOMMENDED_MIN_PASSWORD_LENGTH = 12


def _field(section: Any, key: str) -> Any:
    return section.get(key) if isinstance(section, Mapping) else None


def calculate_completeness(session: ConfigSession) -> int:
    """Percentage of core sections that have been answered."""
    completed = sum(1 for name in CORE_SECTIONS if session.sections[name] is not None)
    return math.floor(completed * 100 / len(CORE_SECTIONS) + 0.5)


def validate_configuration(session: ConfigSession) -> dict[str, Any]:
    """Report blocking errors and advisory warnings for a session.

    Returns:
        Dictionary with ``valid``, ``errors``, ``warnings`` and
        ``completeness`` (0-100).
    """
    config = session.sections
    errors: list[str] = []
    warnings: list[str] = []

    if config["useCase"] is None:
        errors.append("Use case not defined")

    if config["authMethod"] is None:
        errors.append("Authentication method not configured")

    if config["passwordPolicy"] is None:
        warnings.append("Password policy not configured - defaults will be used")

    if (
        _field(config["mfaConfig"], "mode") == "OFF"
        and _field(config["useCase"], "type") == "production"
    ):
        warnings.append("MFA is disabled for a production use case - consider enabling")

    minimum_length = _field(config["passwordPolicy"], "minimumLength")
    if isinstance(minimum_length, (int, float)) and minimum_length < RECOMMENDED_MIN_PASSWORD_LENGTH:
        warnings.append(
            "Password minimum length is less than 12 characters - consider increasing"
        )

    if config["emailConfig"] is None:
        warnings.append(
            "Email configuration not set - Cognito default will be used (50 emails/day limit)"
        )

    if config["appClient"] is None:
        errors.append("App client not configured")

    if _field(config["advancedSecurity"], "mode") == "OFF":
        warnings.append("Advanced security is disabled - consider enabling for production")

    return {
        "valid": not errors,
        "errors": errors,
        "warnings": warnings,
        "completeness": calculate_completeness(session),
    }
