"""Login handler: authenticates a user with username and password.

When the user pool requires a second factor, Cognito answers with a
challenge instead of tokens. That outcome is returned as a 200 response
carrying the session the caller must pass to the MFA handler.
"""

from __future__ import annotations

from typing import Any
from typing import Mapping
from typing import Union

from auth_service.api.dispatcher import INVALID_PARAMETER_RULE
from auth_service.api.dispatcher import Operation
from auth_service.api.dispatcher import RequiredFields
from auth_service.api.dispatcher import TOO_MANY_REQUESTS_RULE
from auth_service.api.dispatcher import dispatch
from auth_service.exceptions import AuthenticationError
from auth_service.exceptions import AuthorizationError
from auth_service.exceptions import IdentityErrorKind
from auth_service.schemas import ChallengeRequired
from auth_service.schemas import MfaChallengeResponse
from auth_service.schemas import TokenBundle
from auth_service.utils.logging import mask_pii
from auth_service.utils.tokens import token_summary

# Unknown user and wrong password share one answer to avoid user enumeration.
BAD_CREDENTIALS_MESSAGE = "Incorrect username or password"


def _invoke(
    gateway: Any,
    body: Mapping[str, Any],
) -> Union[TokenBundle, MfaChallengeResponse]:
    outcome = gateway.authenticate(
        username=body["username"],
        password=body["password"],
    )
    if isinstance(outcome, ChallengeRequired):
        return MfaChallengeResponse(
            challenge_type=outcome.challenge_name,
            session=outcome.session,
        )
    return outcome


def _summarize(body: Mapping[str, Any], result: Any) -> dict[str, Any]:
    summary: dict[str, Any] = {"username": mask_pii(body["username"])}
    if isinstance(result, MfaChallengeResponse):
        summary["outcome"] = "mfa_required"
        summary["challenge_type"] = result.challenge_type
        return summary

    summary["outcome"] = "authenticated"
    summary["token_type"] = result.token_type
    summary["expires_in"] = result.expires_in
    summary.update(token_summary(result.id_token))
    return summary


LOGIN = Operation(
    name="login",
    label="Login",
    fallback_message="An unexpected error occurred during login",
    required=(
        RequiredFields(
            ("username", "password"),
            "Missing required fields: username and password are required",
        ),
    ),
    invoke=_invoke,
    errors={
        IdentityErrorKind.NOT_AUTHORIZED: (AuthenticationError, BAD_CREDENTIALS_MESSAGE),
        IdentityErrorKind.USER_NOT_FOUND: (AuthenticationError, BAD_CREDENTIALS_MESSAGE),
        IdentityErrorKind.USER_NOT_CONFIRMED: (
            AuthorizationError,
            "User account is not confirmed. Please verify your email",
        ),
        IdentityErrorKind.INVALID_PARAMETER: INVALID_PARAMETER_RULE,
        IdentityErrorKind.TOO_MANY_REQUESTS: TOO_MANY_REQUESTS_RULE,
        IdentityErrorKind.PASSWORD_RESET_REQUIRED: (
            AuthorizationError,
            "Password reset required. Please reset your password",
        ),
        IdentityErrorKind.USER_LAMBDA_VALIDATION: (
            AuthorizationError,
            "User validation failed",
        ),
    },
    summarize=_summarize,
)


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Return tokens, or an MFA challenge the caller must answer."""
    return dispatch(event, LOGIN)
