"""Request pipeline shared by the auth Lambda handlers.

Every handler runs the same steps: parse the JSON body, load the user
pool configuration, validate required fields and domain rules, make a
single identity gateway call, then translate the outcome into a response
envelope. Handlers differ only in their ``Operation`` descriptor.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional

from auth_service.config import IdentityProviderConfig
from auth_service.config import load_identity_config
from auth_service.exceptions import AppError
from auth_service.exceptions import ConfigurationError
from auth_service.exceptions import IdentityErrorKind
from auth_service.exceptions import IdentityProviderError
from auth_service.exceptions import RateLimitError
from auth_service.exceptions import ValidationError
from auth_service.services.identity_gateway import IdentityGateway
from auth_service.utils.logging import clear_request_context
from auth_service.utils.logging import configure_logging
from auth_service.utils.logging import get_logger
from auth_service.utils.logging import set_request_context
from auth_service.utils.responses import format_error
from auth_service.utils.responses import format_success
from auth_service.utils.responses import redact
from auth_service.utils.validators import missing_fields
from auth_service.utils.validators import validate_password

configure_logging()
logger = get_logger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body: must be valid JSON"

ErrorRule = tuple[type[AppError], str]

INVALID_PARAMETER_RULE: ErrorRule = (ValidationError, "Invalid parameter provided")
TOO_MANY_REQUESTS_RULE: ErrorRule = (
    RateLimitError,
    "Too many requests. Please try again later",
)

GatewayFactory = Callable[[IdentityProviderConfig], Any]


@dataclass(frozen=True)
class RequiredFields:
    """Fields that must all be present, and the message when any is not."""

    names: tuple[str, ...]
    message: str


@dataclass(frozen=True)
class Operation:
    """Descriptor of one auth operation.

    Attributes:
        name: Operation name used in structured logs.
        label: Human-readable prefix for log messages.
        fallback_message: 500 message for unexpected failures.
        required: Presence checks, evaluated in order.
        validate: Domain rule check; raises ValidationError.
        invoke: Makes the single gateway call and returns the response body.
        errors: Gateway failure kind to (error class, safe message).
        summarize: Non-sensitive log fields for a successful call.
        route: Picks the concrete operation from the request body.
    """

    name: str
    label: str
    fallback_message: str
    required: tuple[RequiredFields, ...] = ()
    validate: Optional[Callable[[Mapping[str, Any]], None]] = None
    invoke: Optional[Callable[[Any, Mapping[str, Any]], Any]] = None
    errors: Mapping[IdentityErrorKind, ErrorRule] = field(default_factory=dict)
    summarize: Optional[Callable[[Mapping[str, Any], Any], dict[str, Any]]] = None
    route: Optional[Callable[[Mapping[str, Any]], "Operation"]] = None


def parse_body(event: Mapping[str, Any]) -> dict[str, Any]:
    """Decode the request body as a JSON object.

    Raises:
        ValidationError: If the body is empty, malformed, or not an object.
    """
    raw = event.get("body")
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError(INVALID_BODY_MESSAGE, field="body")
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(INVALID_BODY_MESSAGE, field="body") from exc
    if not isinstance(body, dict):
        raise ValidationError(INVALID_BODY_MESSAGE, field="body")
    return body


def enforce_password_policy(password: str, prefix: str) -> None:
    """Raise a ValidationError listing every violated password rule."""
    result = validate_password(password)
    if not result.valid:
        raise ValidationError(f"{prefix}: {', '.join(result.errors)}", field="password")


def translate_error(operation: Operation, exc: Exception) -> AppError:
    """Map a gateway failure to the operation's safe application error."""
    if isinstance(exc, IdentityProviderError):
        rule = operation.errors.get(exc.kind)
        if rule is not None:
            error_class, message = rule
            return error_class(message)
    return AppError(operation.fallback_message)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _request_origin(event: Any) -> tuple[str, str]:
    context = _mapping(_mapping(event).get("requestContext"))
    identity = _mapping(context.get("identity"))
    request_id = context.get("requestId")
    source_ip = identity.get("sourceIp")
    return (
        request_id if isinstance(request_id, str) else "",
        source_ip if isinstance(source_ip, str) else "",
    )


def dispatch(
    event: Mapping[str, Any],
    operation: Operation,
    gateway_factory: Optional[GatewayFactory] = None,
) -> dict[str, Any]:
    """Run one request through the shared pipeline.

    Never raises: every failure becomes an error envelope.
    """
    try:
        request_id, source_ip = _request_origin(event)
        set_request_context(req_id=request_id, ip=source_ip)
        return _run(event, operation, gateway_factory or IdentityGateway)
    except Exception:
        logger.exception(
            f"{operation.label} error - unexpected failure",
            extra={"operation": operation.name},
        )
        return format_error(AppError(operation.fallback_message))
    finally:
        clear_request_context()


def _run(
    event: Mapping[str, Any],
    operation: Operation,
    gateway_factory: GatewayFactory,
) -> dict[str, Any]:
    try:
        body = parse_body(event)
        config = load_identity_config()

        if operation.route is not None:
            operation = operation.route(body)

        for check in operation.required:
            missing = missing_fields(body, check.names)
            if missing:
                raise ValidationError(check.message, field=missing[0])

        if operation.validate is not None:
            operation.validate(body)
    except ConfigurationError as exc:
        logger.error(
            f"{operation.label} error - missing configuration",
            extra={"operation": operation.name, "config_name": exc.config_name},
        )
        return format_error(exc)
    except ValidationError as exc:
        logger.warning(
            f"{operation.label} error - invalid request",
            extra={
                "operation": operation.name,
                "error_code": exc.code,
                "field": exc.field,
                "error_message": redact(exc.message),
            },
        )
        return format_error(exc)

    try:
        gateway = gateway_factory(config)
        result = operation.invoke(gateway, body)
    except IdentityProviderError as exc:
        logger.warning(
            f"{operation.label} error",
            extra={
                "operation": operation.name,
                "error_code": exc.kind.value,
                "error_message": redact(exc.message),
            },
        )
        return format_error(translate_error(operation, exc))

    summary = operation.summarize(body, result) if operation.summarize else {}
    logger.info(
        f"{operation.label} successful",
        extra={"operation": operation.name, **summary},
    )
    return format_success(result)
