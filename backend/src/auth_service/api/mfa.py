"""MFA handler: answers the second-factor challenge issued at login."""

from __future__ import annotations

from typing import Any
from typing import Mapping

from auth_service.api.dispatcher import INVALID_PARAMETER_RULE
from auth_service.api.dispatcher import Operation
from auth_service.api.dispatcher import RequiredFields
from auth_service.api.dispatcher import TOO_MANY_REQUESTS_RULE
from auth_service.api.dispatcher import dispatch
from auth_service.exceptions import AuthenticationError
from auth_service.exceptions import AuthorizationError
from auth_service.exceptions import IdentityErrorKind
from auth_service.exceptions import NotFoundError
from auth_service.exceptions import ValidationError
from auth_service.schemas import TokenBundle
from auth_service.services.identity_gateway import MFA_CODE_PARAMETERS
from auth_service.utils.logging import mask_pii

DEFAULT_CHALLENGE = "SMS_MFA"


def _validate(body: Mapping[str, Any]) -> None:
    challenge = body.get("challengeName", DEFAULT_CHALLENGE)
    if not isinstance(challenge, str) or challenge not in MFA_CODE_PARAMETERS:
        raise ValidationError(
            "Invalid challengeName: must be SMS_MFA or SOFTWARE_TOKEN_MFA",
            field="challengeName",
        )


def _invoke(gateway: Any, body: Mapping[str, Any]) -> TokenBundle:
    return gateway.respond_to_challenge(
        session=body["session"],
        username=body["username"],
        code=body["mfaCode"],
        challenge_name=body.get("challengeName", DEFAULT_CHALLENGE),
    )


def _summarize(body: Mapping[str, Any], result: TokenBundle) -> dict[str, Any]:
    return {
        "username": mask_pii(body["username"]),
        "token_type": result.token_type,
        "expires_in": result.expires_in,
    }


MFA = Operation(
    name="mfa",
    label="MFA verification",
    fallback_message="An unexpected error occurred during MFA verification",
    required=(
        RequiredFields(
            ("session", "mfaCode", "username"),
            "Missing required fields: session, mfaCode, and username are required",
        ),
    ),
    validate=_validate,
    invoke=_invoke,
    errors={
        IdentityErrorKind.CODE_MISMATCH: (AuthenticationError, "Invalid MFA code provided"),
        IdentityErrorKind.EXPIRED_CODE: (
            AuthenticationError,
            "MFA code has expired. Please request a new code",
        ),
        IdentityErrorKind.NOT_AUTHORIZED: (AuthenticationError, "Invalid session or MFA code"),
        IdentityErrorKind.INVALID_PARAMETER: INVALID_PARAMETER_RULE,
        IdentityErrorKind.TOO_MANY_REQUESTS: TOO_MANY_REQUESTS_RULE,
        IdentityErrorKind.USER_NOT_FOUND: (NotFoundError, "User not found"),
        IdentityErrorKind.USER_NOT_CONFIRMED: (
            AuthorizationError,
            "User account is not confirmed. Please verify your email",
        ),
    },
    summarize=_summarize,
)


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return dispatch(event, MFA)
