"""Runtime configuration read from the Lambda environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from auth_service.exceptions import ConfigurationError

DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class IdentityProviderConfig:
    """Cognito user pool coordinates for one invocation."""

    user_pool_id: str
    client_id: str
    region: str = DEFAULT_REGION


def load_identity_config() -> IdentityProviderConfig:
    """Read the user pool configuration from the environment.

    Raises:
        ConfigurationError: If USER_POOL_ID or CLIENT_ID is unset.
    """
    user_pool_id = os.getenv("USER_POOL_ID", "")
    client_id = os.getenv("CLIENT_ID", "")
    region = os.getenv("REGION") or os.getenv("AWS_REGION") or DEFAULT_REGION

    if not user_pool_id:
        raise ConfigurationError("USER_POOL_ID")
    if not client_id:
        raise ConfigurationError("CLIENT_ID")

    return IdentityProviderConfig(
        user_pool_id=user_pool_id,
        client_id=client_id,
        region=region,
    )
