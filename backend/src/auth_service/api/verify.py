"""Verification handler: confirms a registration with the emailed code."""

from __future__ import annotations

from typing import Any
from typing import Mapping

from auth_service.api.dispatcher import Operation
from auth_service.api.dispatcher import RequiredFields
from auth_service.api.dispatcher import TOO_MANY_REQUESTS_RULE
from auth_service.api.dispatcher import dispatch
from auth_service.exceptions import IdentityErrorKind
from auth_service.exceptions import NotFoundError
from auth_service.exceptions import RateLimitError
from auth_service.exceptions import ValidationError
from auth_service.schemas import MessageResponse
from auth_service.utils.logging import mask_pii


def _invoke(gateway: Any, body: Mapping[str, Any]) -> MessageResponse:
    gateway.confirm_registration(
        username=body["username"],
        code=body["code"].strip(),
    )
    return MessageResponse(message="User verification successful")


VERIFY = Operation(
    name="verify",
    label="Verification",
    fallback_message="An unexpected error occurred during verification",
    required=(
        RequiredFields(
            ("username", "code"),
            "Missing required fields: username and code are required",
        ),
    ),
    invoke=_invoke,
    errors={
        IdentityErrorKind.CODE_MISMATCH: (ValidationError, "Invalid verification code"),
        IdentityErrorKind.EXPIRED_CODE: (ValidationError, "Verification code has expired"),
        IdentityErrorKind.USER_NOT_FOUND: (NotFoundError, "User not found"),
        # Cognito answers NotAuthorized when the user is already confirmed.
        IdentityErrorKind.NOT_AUTHORIZED: (ValidationError, "User is already confirmed"),
        IdentityErrorKind.TOO_MANY_FAILED_ATTEMPTS: (
            RateLimitError,
            "Too many failed attempts. Please try again later",
        ),
        IdentityErrorKind.TOO_MANY_REQUESTS: TOO_MANY_REQUESTS_RULE,
        IdentityErrorKind.LIMIT_EXCEEDED: (
            RateLimitError,
            "Verification limit exceeded. Please try again later",
        ),
    },
    summarize=lambda body, _result: {"username": mask_pii(body["username"])},
)


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return dispatch(event, VERIFY)
