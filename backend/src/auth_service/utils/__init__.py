"""Utility modules for the auth service."""

from auth_service.utils.responses import (
    format_error,
    format_success,
    json_response,
    redact,
)
from auth_service.utils.validators import (
    ValidationResult,
    missing_fields,
    validate_email,
    validate_password,
)
from auth_service.utils.logging import (
    configure_logging,
    get_logger,
    mask_email,
    mask_pii,
    set_request_context,
    clear_request_context,
)

__all__ = [
    "ValidationResult",
    "clear_request_context",
    "configure_logging",
    "format_error",
    "format_success",
    "get_logger",
    "json_response",
    "mask_email",
    "mask_pii",
    "missing_fields",
    "redact",
    "set_request_context",
    "validate_email",
    "validate_password",
]
