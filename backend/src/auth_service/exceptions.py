"""Custom exception classes for the auth service.

This module provides domain-specific exception classes that carry
appropriate HTTP status codes and structured error information.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    All application-specific exceptions should inherit from this class.
    Each exception carries an HTTP status code and an error code that is
    safe to return to callers.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (default 500).
        code: Error code placed in the response envelope.
    """

    default_code = "InternalError"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(AppError):
    """Raised when input validation fails.

    Use for malformed requests, missing fields, or password and email
    policy violations.
    """

    default_code = "ValidationError"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, status_code=400)
        self.field = field


class AuthenticationError(AppError):
    """Raised when credentials, codes or sessions are rejected."""

    default_code = "AuthenticationError"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class AuthorizationError(AppError):
    """Raised when the caller is known but the action is not allowed."""

    default_code = "AuthorizationError"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403)


class NotFoundError(AppError):
    """Raised when the identity provider has no such user."""

    default_code = "NotFoundError"

    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404)


class ConflictError(AppError):
    """Raised when the request collides with an existing account."""

    default_code = "ConflictError"

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, status_code=409)


class RateLimitError(AppError):
    """Raised when rate limits are exceeded.

    Use when the identity provider throttles the caller.
    """

    default_code = "RateLimitError"

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, status_code=429)


class ConfigurationError(AppError):
    """Raised when required configuration is missing.

    Use when environment variables are not properly configured.
    """

    default_code = "ConfigurationError"

    def __init__(self, config_name: str):
        super().__init__(
            "Server configuration error: missing Cognito configuration",
            status_code=500,
        )
        self.config_name = config_name


class IdentityErrorKind(str, Enum):
    """Closed set of failure categories reported by the identity provider."""

    USERNAME_EXISTS = "UsernameExistsException"
    INVALID_PASSWORD = "InvalidPasswordException"
    INVALID_PARAMETER = "InvalidParameterException"
    CODE_MISMATCH = "CodeMismatchException"
    EXPIRED_CODE = "ExpiredCodeException"
    USER_NOT_FOUND = "UserNotFoundException"
    NOT_AUTHORIZED = "NotAuthorizedException"
    USER_NOT_CONFIRMED = "UserNotConfirmedException"
    TOO_MANY_REQUESTS = "TooManyRequestsException"
    LIMIT_EXCEEDED = "LimitExceededException"
    TOO_MANY_FAILED_ATTEMPTS = "TooManyFailedAttemptsException"
    PASSWORD_RESET_REQUIRED = "PasswordResetRequiredException"
    USER_LAMBDA_VALIDATION = "UserLambdaValidationException"
    UNKNOWN = "Unknown"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "IdentityErrorKind":
        """Map a provider error code to a kind, falling back to UNKNOWN."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


class IdentityProviderError(Exception):
    """Raised by the identity gateway when a provider call fails.

    The gateway never decides HTTP semantics; callers translate ``kind``.

    Attributes:
        kind: The failure category.
        message: The provider's message (may contain sensitive words).
    """

    def __init__(self, kind: IdentityErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value
