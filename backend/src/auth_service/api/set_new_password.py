"""Set-new-password handler: changes the password of a signed-in user.

The ``session`` field carries the user's access token; this is distinct
from the reset flow, which works for signed-out users via emailed codes.
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
from auth_service.exceptions import AuthenticationError
from auth_service.exceptions import AuthorizationError
from auth_service.exceptions import IdentityErrorKind
from auth_service.exceptions import NotFoundError
from auth_service.exceptions import RateLimitError
from auth_service.exceptions import ValidationError
from auth_service.schemas import MessageResponse
from auth_service.utils.logging import mask_pii


def _validate(body: Mapping[str, Any]) -> None:
    enforce_password_policy(body["proposedPassword"], "Password does not meet requirements")


def _invoke(gateway: Any, body: Mapping[str, Any]) -> MessageResponse:
    gateway.change_password(
        previous_password=body["previousPassword"],
        proposed_password=body["proposedPassword"],
        access_token=body["session"],
    )
    return MessageResponse(message="Password changed successfully")


SET_NEW_PASSWORD = Operation(
    name="set_new_password",
    label="Set password",
    fallback_message="An unexpected error occurred during password change",
    required=(
        RequiredFields(
            ("username", "previousPassword", "proposedPassword", "session"),
            "Missing required fields: username, previousPassword, "
            "proposedPassword, and session are required",
        ),
    ),
    validate=_validate,
    invoke=_invoke,
    errors={
        IdentityErrorKind.NOT_AUTHORIZED: (
            AuthenticationError,
            "Invalid previous password or session",
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
        IdentityErrorKind.USER_NOT_FOUND: (NotFoundError, "User not found"),
        IdentityErrorKind.USER_NOT_CONFIRMED: (
            AuthorizationError,
            "User account is not confirmed. Please verify your email",
        ),
    },
    summarize=lambda body, _result: {"username": mask_pii(body["username"])},
)


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return dispatch(event, SET_NEW_PASSWORD)
