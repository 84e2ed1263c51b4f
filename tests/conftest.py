"""Pytest configuration and fixtures for backend tests.

This module provides shared fixtures for testing the auth handlers,
including API Gateway events, Cognito environment settings and a mocked
cognito-idp client.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any
from typing import Optional
from uuid import uuid4

import pytest

# Add backend source to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))


# --- Environment Fixtures ---


@pytest.fixture
def cognito_env(monkeypatch) -> dict[str, str]:
    """Configure the user pool environment variables."""
    values = {
        'USER_POOL_ID': 'us-east-1_TestPool',
        'CLIENT_ID': 'test-client-id',
        'REGION': 'us-east-1',
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values


@pytest.fixture
def missing_cognito_env(monkeypatch) -> None:
    """Remove the user pool environment variables."""
    for name in ('USER_POOL_ID', 'CLIENT_ID'):
        monkeypatch.delenv(name, raising=False)


# --- API Event Fixtures ---


def make_event(body: Any = None, raw_body: Optional[str] = None) -> dict:
    """Build an API Gateway proxy event with a JSON body."""
    return {
        'httpMethod': 'POST',
        'headers': {'Content-Type': 'application/json'},
        'requestContext': {
            'requestId': str(uuid4()),
            'identity': {'sourceIp': '203.0.113.10'},
        },
        'body': raw_body if raw_body is not None else json.dumps(body),
        'isBase64Encoded': False,
    }


@pytest.fixture
def api_gateway_event() -> dict:
    """Base API Gateway event structure."""
    return make_event({})


def response_body(response: dict) -> dict:
    """Decode the JSON body of a handler response."""
    return json.loads(response['body'])


# --- Mock Fixtures ---


@pytest.fixture
def cognito_client(mocker):
    """Mock cognito-idp client used by the identity gateway."""
    client = mocker.MagicMock(name='cognito-idp')
    mocker.patch(
        'auth_service.services.identity_gateway.get_cognito_idp_client',
        return_value=client,
    )
    return client


@pytest.fixture
def mock_boto3_client(mocker):
    """Mock boto3 client for AWS service calls."""
    from auth_service.services.aws_clients import clear_client_cache

    clear_client_cache()
    mock = mocker.patch('boto3.client')
    yield mock
    clear_client_cache()


def client_error(code: str, message: str = '', operation: str = 'Operation'):
    """Build the botocore error a Cognito call raises."""
    from botocore.exceptions import ClientError

    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)
