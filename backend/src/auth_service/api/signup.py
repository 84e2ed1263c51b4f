"""Signup handler: registers a new user in the Cognito user pool."""

from __future__ import annotations

from typing import Any
from typing import Mapping

from auth_service.api.dispatcher import INVALID_PARAMETER_RULE
from auth_service.api.dispatcher import Operation
from auth_service.api.dispatcher import RequiredFields
from auth_service.api.dispatcher import TOO_MANY_REQUESTS_RULE
from auth_service.api.dispatcher import dispatch
from auth_service.api.dispatcher import enforce_password_policy
from auth_service.exceptions import ConflictError
from auth_service.exceptions import IdentityErrorKind
from auth_service.exceptions import RateLimitError
from auth_service.exceptions import ValidationError
from auth_service.schemas import SignUpResult
from auth_service.utils.logging import mask_email
from auth_service.utils.logging import mask_pii
from auth_service.utils.validators import validate_email


def _validate(body: Mapping[str, Any]) -> None:
    if not validate_email(body["email"]):
        raise ValidationError("Invalid email format", field="email")

    attributes = body.get("attributes")
    if attributes is not None and not isinstance(attributes, dict):
        raise ValidationError("Invalid attributes: must be an object", field="attributes")

    enforce_password_policy(body["password"], "Password validation failed")


def _invoke(gateway: Any, body: Mapping[str, Any]) -> SignUpResult:
    return gateway.register(
        username=body["username"],
        password=body["password"],
        email=body["email"],
        attributes=body.get("attributes"),
    )


def _summarize(body: Mapping[str, Any], result: SignUpResult) -> dict[str, Any]:
    return {
        "username": mask_pii(body["username"]),
        "email": mask_email(body["email"]),
        "user_sub": result.user_sub,
        "delivery_medium": result.code_delivery_details.delivery_medium,
    }


SIGNUP = Operation(
    name="signup",
    label="Signup",
    fallback_message="An unexpected error occurred during signup",
    required=(
        RequiredFields(
            ("username", "password", "email"),
            "Missing required fields: username, password, and email are required",
        ),
    ),
    validate=_validate,
    invoke=_invoke,
    errors={
        IdentityErrorKind.USERNAME_EXISTS: (
            ConflictError,
            "An account with this username already exists",
        ),
        IdentityErrorKind.INVALID_PASSWORD: (
            ValidationError,
            "Password does not meet requirements",
        ),
        IdentityErrorKind.INVALID_PARAMETER: INVALID_PARAMETER_RULE,
        IdentityErrorKind.TOO_MANY_REQUESTS: TOO_MANY_REQUESTS_RULE,
        IdentityErrorKind.LIMIT_EXCEEDED: (
            RateLimitError,
            "Account creation limit exceeded. Please try again later",
        ),
    },
    summarize=_summarize,
)


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Register a user and report where the confirmation code was sent."""
    return dispatch(event, SIGNUP)
