"""JWT inspection helpers for Cognito tokens.

SECURITY NOTES:
- parse_jwt() does NOT verify signatures. Its output is only fit for
  log summaries of tokens the identity provider has just issued.
- Never log the token itself.
"""

from __future__ import annotations

from typing import Any
from typing import Optional

import jwt

from auth_service.utils.logging import get_logger

logger = get_logger(__name__)


class TokenFormatError(ValueError):
    """Raised when a token cannot be decoded."""


def parse_jwt(token: str) -> dict[str, Any]:
    """Split a JWT into its decoded header, payload and raw signature.

    Args:
        token: The compact-serialized JWT.

    Returns:
        Dictionary with ``header``, ``payload`` and ``signature`` keys.

    Raises:
        TokenFormatError: If the token is empty or not a decodable JWT.
    """
    if not token or not isinstance(token, str):
        raise TokenFormatError("Invalid token: token must be a non-empty string")

    if token.count(".") != 2:
        raise TokenFormatError("Invalid token: JWT must have three parts")

    try:
        header = jwt.get_unverified_header(token)
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        raise TokenFormatError("Invalid token: failed to decode JWT parts") from exc

    return {
        "header": header,
        "payload": payload,
        "signature": token.rsplit(".", 1)[1],
    }


def token_summary(token: Optional[str]) -> dict[str, Any]:
    """Return non-sensitive claims of a token for logging.

    Tokens that cannot be decoded yield an empty summary.
    """
    if not token:
        return {}
    try:
        payload = parse_jwt(token)["payload"]
    except TokenFormatError:
        logger.debug("Issued token is not a decodable JWT")
        return {}
    return {
        key: payload[key]
        for key in ("sub", "token_use", "exp")
        if key in payload
    }
