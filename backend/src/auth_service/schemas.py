"""Pydantic schemas for identity gateway results and handler responses."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class _ResponseModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class TokenBundle(_ResponseModel):
    """Tokens issued after a completed authentication."""

    access_token: str = ""
    id_token: str = ""
    refresh_token: str = ""
    expires_in: int = 0
    token_type: str = "Bearer"


class CodeDeliveryDetails(_ResponseModel):
    """Where the provider sent a confirmation code."""

    destination: str = ""
    delivery_medium: str = ""
    attribute_name: str = ""


class SignUpResult(_ResponseModel):
    """Result of registering a new user."""

    user_sub: str
    code_delivery_details: CodeDeliveryDetails


class ChallengeRequired(_ResponseModel):
    """Authentication paused on a provider challenge."""

    challenge_name: str
    session: str


class MfaChallengeResponse(_ResponseModel):
    """Body returned by login when a second factor is required."""

    challenge_name: str = "MFA_REQUIRED"
    challenge_type: str
    session: str
    message: str = "MFA verification required. Please provide MFA code."


class MessageResponse(_ResponseModel):
    """Plain confirmation body."""

    message: str
