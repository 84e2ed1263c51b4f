"""Shared boto3 client factory with caching."""

from __future__ import annotations

import os
from typing import Any

import boto3
import botocore.config

_CLIENT_CACHE: dict[tuple[str, str | None], Any] = {}


def _client_config() -> botocore.config.Config:
    """Timeouts so a stalled provider call cannot hang the invocation."""
    return botocore.config.Config(
        connect_timeout=float(os.getenv("COGNITO_CONNECT_TIMEOUT", "5")),
        read_timeout=float(os.getenv("COGNITO_READ_TIMEOUT", "10")),
        retries={"max_attempts": int(os.getenv("COGNITO_MAX_ATTEMPTS", "2"))},
    )


def get_client(service: str, region_name: str | None = None) -> Any:
    """Return a cached boto3 client for the given service."""
    cache_key = (service, region_name)
    if cache_key in _CLIENT_CACHE:
        return _CLIENT_CACHE[cache_key]
    client = boto3.client(  # type: ignore[call-overload]
        service,
        region_name=region_name,
        config=_client_config(),
    )
    _CLIENT_CACHE[cache_key] = client
    return client


def clear_client_cache() -> None:
    """Clear cached boto3 clients (useful in tests)."""
    _CLIENT_CACHE.clear()


def get_cognito_idp_client(region_name: str | None = None) -> Any:
    return get_client("cognito-idp", region_name=region_name)
