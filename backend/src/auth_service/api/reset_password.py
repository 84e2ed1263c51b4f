"""Reset-password handler.

Supports two operations selected by the ``operation`` field:

1. ``initiate``: sends a reset code to the user's verified contact.
2. ``confirm``: sets a new password using that code.
"""

from __future__ import annotations

from typing import Any
from typing import Mapping

from auth_service.api.dispatcher import INVALID_PARAMETER_RULE
from auth_service.api.dispatcher import Operation
from auth_service.api.dispatcher import RequiredFields
from auth_service.api.dispatcher import TOO_MANY_REQUESTS_RULE
from auth_service.api.dispatcher import dispatch
from auth_service.api.dispatcher import enforce_password_policy
from auth_service.exceptions import AuthorizationError
from auth_service.exceptions import IdentityErrorKind
from auth_service.exceptions import NotFoundError
from auth_service.exceptions import RateLimitError
from auth_service.exceptions import ValidationError
from auth_service.schemas import MessageResponse
from auth_service.utils.logging import mask_pii

FALLBACK_MESSAGE = "An unexpected error occurred during password reset"

USERNAME_REQUIRED = RequiredFields(
    ("username",),
    "Missing required field: username is required",
)

RESET_ERRORS = {
    IdentityErrorKind.USER_NOT_FOUND: (NotFoundError, "User not found"),
    IdentityErrorKind.CODE_MISMATCH: (ValidationError, "Invalid verification code"),
    IdentityErrorKind.EXPIRED_CODE: (
        ValidationError,
        "Verification code has expired. Please request a new code",
    ),
    IdentityErrorKind.INVALID_PASSWORD: (
        ValidationError,
        "New password does not meet requirements",
    ),
    IdentityErrorKind.INVALID_PARAMETER: INVALID_PARAMETER_RULE,
    IdentityErrorKind.LIMIT_EXCEEDED: (
        RateLimitError,
        "Attempt limit exceeded. Please try again later",
    ),
    IdentityErrorKind.TOO_MANY_REQUESTS: TOO_MANY_REQUESTS_RULE,
    IdentityErrorKind.TOO_MANY_FAILED_ATTEMPTS: (
        RateLimitError,
        "Too many failed attempts. Please try again later",
    ),
    IdentityErrorKind.NOT_AUTHORIZED: (
        AuthorizationError,
        "Password reset not authorized for this user",
    ),
    IdentityErrorKind.USER_NOT_CONFIRMED: (
        AuthorizationError,
        "User account is not confirmed. Please verify your email first",
    ),
}


def _initiate(gateway: Any, body: Mapping[str, Any]) -> MessageResponse:
    gateway.initiate_password_reset(body["username"])
    return MessageResponse(message="Password reset code sent successfully")


def _confirm(gateway: Any, body: Mapping[str, Any]) -> MessageResponse:
    gateway.confirm_password_reset(
        username=body["username"],
        code=body["code"],
        new_password=body["newPassword"],
    )
    return MessageResponse(message="Password reset successfully")


def _validate_confirm(body: Mapping[str, Any]) -> None:
    enforce_password_policy(body["newPassword"], "Password does not meet requirements")


INITIATE_RESET = Operation(
    name="reset_password",
    label="Password reset initiation",
    fallback_message=FALLBACK_MESSAGE,
    required=(USERNAME_REQUIRED,),
    invoke=_initiate,
    errors=RESET_ERRORS,
    summarize=lambda body, _result: {
        "step": "initiate",
        "username": mask_pii(body["username"]),
    },
)

CONFIRM_RESET = Operation(
    name="reset_password",
    label="Password reset confirmation",
    fallback_message=FALLBACK_MESSAGE,
    required=(
        USERNAME_REQUIRED,
        RequiredFields(
            ("code", "newPassword"),
            "Missing required fields: code and newPassword are required "
            "for confirm operation",
        ),
    ),
    validate=_validate_confirm,
    invoke=_confirm,
    errors=RESET_ERRORS,
    summarize=lambda body, _result: {
        "step": "confirm",
        "username": mask_pii(body["username"]),
    },
)

_STEPS = {
    "initiate": INITIATE_RESET,
    "confirm": CONFIRM_RESET,
}


def _route(body: Mapping[str, Any]) -> Operation:
    step = body.get("operation")
    if not isinstance(step, str) or step not in _STEPS:
        raise ValidationError(
            'Invalid operation: must be "initiate" or "confirm"',
            field="operation",
        )
    return _STEPS[step]


RESET_PASSWORD = Operation(
    name="reset_password",
    label="Reset password",
    fallback_message=FALLBACK_MESSAGE,
    route=_route,
)


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return dispatch(event, RESET_PASSWORD)
