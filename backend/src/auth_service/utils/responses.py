"""Shared response utilities for Lambda handlers."""

from __future__ import annotations

import json
import re
from dataclasses import asdict
from dataclasses import is_dataclass
from typing import Any
from typing import Optional

from pydantic import BaseModel

from auth_service.exceptions import AppError

REDACTION_MARKER = "[REDACTED]"

_SENSITIVE_WORDS = re.compile(r"password|token|session", re.IGNORECASE)


def redact(message: str) -> str:
    """Replace sensitive words in a message with a fixed marker.

    SECURITY: Provider error text can echo request parameters. Every
    case-insensitive occurrence of "password", "token" and "session"
    is replaced before the text reaches a response body or a log line.
    """
    return _SENSITIVE_WORDS.sub(REDACTION_MARKER, message or "")


def get_response_headers() -> dict[str, str]:
    """Headers returned with every response."""
    return {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }


def json_response(status_code: int, body: Any) -> dict[str, Any]:
    """Create a JSON API Gateway response.

    Args:
        status_code: HTTP status code.
        body: Response body (dict, Pydantic model, or dataclass).

    Returns:
        API Gateway response dictionary.
    """
    return {
        "statusCode": status_code,
        "headers": get_response_headers(),
        "body": json.dumps(_serialize_body(body), default=str),
    }


def _serialize_body(body: Any) -> Any:
    """Serialize response body to JSON-compatible format."""
    if isinstance(body, BaseModel):
        return body.model_dump(by_alias=True)

    if is_dataclass(body) and not isinstance(body, type):
        return asdict(body)

    return body


def format_success(data: Any, status_code: int = 200) -> dict[str, Any]:
    """Wrap a payload in a success envelope.

    The payload is serialized verbatim; callers must not pass secrets
    they do not intend to return.
    """
    return json_response(status_code, data)


def format_error(
    error: BaseException,
    status_code: Optional[int] = None,
) -> dict[str, Any]:
    """Build an error envelope from an exception.

    Args:
        error: The error to report. Application errors supply their own
            status and code; anything else becomes an InternalError.
        status_code: Explicit status overriding the error's own.

    Returns:
        API Gateway response with body ``{"error": {"code", "message"}}``.
    """
    if isinstance(error, AppError):
        code = error.code
        message = error.message
        default_status = error.status_code
    else:
        code = AppError.default_code
        message = str(error)
        default_status = 500

    return json_response(
        status_code or default_status,
        {"error": {"code": code, "message": redact(message)}},
    )
