"""Configurator operations exposed as tools.

Each operation reads the caller's session from the store, applies one
step, stores the resulting record and returns a JSON-serializable result.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from typing import Callable
from typing import Optional

from auth_service.configurator.session import SessionStore
from auth_service.configurator.template import render_cloudformation
from auth_service.configurator.validation import validate_configuration
from auth_service.utils.logging import get_logger

logger = get_logger(__name__)

TEMPLATE_FILENAME = "cognito-stack.yaml"

# Tool argument names that differ from the Python parameter names.
_ARGUMENT_NAMES = {"stackName": "stack_name"}


def default_output_dir() -> Path:
    return Path(os.getenv("CONFIGURATOR_OUTPUT_DIR") or "resources")


class ConfiguratorTools:
    """Session-scoped configurator operations.

    Args:
        store: Where session records live; a fresh store by default.
        output_dir: Directory receiving generated templates.
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        output_dir: Optional[Path] = None,
    ):
        self.store = store or SessionStore()
        self.output_dir = Path(output_dir) if output_dir else default_output_dir()
        self._tools: dict[str, Callable[..., dict[str, Any]]] = {
            "save_config": self.save_config,
            "get_config": self.get_config,
            "reset_config": self.reset_config,
            "validate_config": self.validate_config,
            "generate_cloudformation": self.generate_cloudformation,
        }

    def call(self, name: str, arguments: dict[str, Any]) -> Any:
        """Invoke a tool by name with MCP-style arguments."""
        tool = self._tools.get(name)
        if tool is None:
            raise ValueError(f"Unknown tool: {name}")
        kwargs = {_ARGUMENT_NAMES.get(key, key): value for key, value in arguments.items()}
        return tool(**kwargs)

    def save_config(
        self,
        section: str,
        data: Any,
        session_id: Optional[str] = None,
    ) -> dict[str, Any]:
        session = self.store.get(session_id).with_section(section, data)
        self.store.put(session)
        logger.info(
            "Configuration section saved",
            extra={"session_id": session.session_id, "section": section},
        )
        return {
            "success": True,
            "message": f"Configuration section '{section}' saved successfully",
            "currentState": session.to_dict(),
        }

    def get_config(
        self,
        section: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> Any:
        session = self.store.get(session_id)
        return session.get(section) if section else session.to_dict()

    def reset_config(self, session_id: Optional[str] = None) -> dict[str, Any]:
        self.store.put(self.store.get(session_id).reset())
        return {"success": True, "message": "Configuration reset successfully"}

    def validate_config(self, session_id: Optional[str] = None) -> dict[str, Any]:
        return validate_configuration(self.store.get(session_id))

    def generate_cloudformation(
        self,
        stack_name: str,
        session_id: Optional[str] = None,
    ) -> dict[str, Any]:
        """Render the session's template and write it to the output directory."""
        session = self.store.get(session_id)
        template = render_cloudformation(stack_name, session)
        output_path = self.output_dir / TEMPLATE_FILENAME

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_text(template, encoding="utf-8")
        except OSError as exc:
            logger.warning(
                "Failed to write CloudFormation template",
                extra={"session_id": session.session_id, "path": str(output_path)},
            )
            return {
                "success": False,
                "error": f"Failed to write template: {exc}",
                "template": template,
            }

        logger.info(
            "CloudFormation template generated",
            extra={"session_id": session.session_id, "path": str(output_path)},
        )
        return {
            "success": True,
            "message": "CloudFormation template generated successfully",
            "outputPath": str(output_path),
            "template": template,
        }
