"""Lambda entrypoint for username and password login.

A 200 response carries either tokens or an MFA challenge; clients follow
up on the latter through the MFA endpoint.
"""

from __future__ import annotations

from typing import Any
from typing import Mapping

from auth_service.api.login import lambda_handler as _handler


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Delegate to login handler."""
    return _handler(event, context)
