"""Lambda entrypoint for the two-step forgotten password flow."""

from __future__ import annotations

from typing import Any
from typing import Mapping

from auth_service.api.reset_password import lambda_handler as _handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Delegate to reset-password handler."""
    return _handler(event, context)
