"""Lambda entrypoint for user registration."""

from __future__ import annotations

from typing import Any
from typing import Mapping

from auth_service.api.signup import lambda_handler as _handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    return _handler(event, context)
