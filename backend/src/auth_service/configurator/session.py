"""Per-session configuration records.

A ``ConfigSession`` is immutable: every step returns a new record and the
``SessionStore`` swaps the record kept for that session id. Sessions never
share state.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any
from typing import Mapping
from typing import Optional

SECTIONS: tuple[str, ...] = (
    "useCase",
    "appType",
    "authMethod",
    "mfaConfig",
    "passwordPolicy",
    "advancedSecurity",
    "emailConfig",
    "appClient",
    "domain",
    "customAttributes",
    "lambdaTriggers",
    "multiTenant",
)

LIST_SECTIONS = frozenset({"customAttributes", "lambdaTriggers"})

DEFAULT_SESSION_ID = "default"


def _empty_sections() -> Mapping[str, Any]:
    return MappingProxyType(
        {name: ([] if name in LIST_SECTIONS else None) for name in SECTIONS}
    )


def _check_section(section: str) -> None:
    if section not in SECTIONS:
        raise ValueError(
            f"Unknown configuration section '{section}'. "
            f"Expected one of: {', '.join(SECTIONS)}"
        )


@dataclass(frozen=True)
class ConfigSession:
    """Configuration answers collected for one session."""

    session_id: str = DEFAULT_SESSION_ID
    sections: Mapping[str, Any] = field(default_factory=_empty_sections)

    def get(self, section: str) -> Any:
        _check_section(section)
        return copy.deepcopy(self.sections[section])

    def with_section(self, section: str, data: Any) -> "ConfigSession":
        """Return a copy of this session with ``section`` replaced."""
        _check_section(section)
        updated = dict(self.sections)
        updated[section] = copy.deepcopy(data)
        return ConfigSession(self.session_id, MappingProxyType(updated))

    def reset(self) -> "ConfigSession":
        return ConfigSession(self.session_id)

    def to_dict(self) -> dict[str, Any]:
        """Plain, detached copy of every section."""
        return copy.deepcopy(dict(self.sections))


class SessionStore:
    """Holds the latest ConfigSession for each session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, ConfigSession] = {}
        self._lock = threading.Lock()

    def get(self, session_id: Optional[str] = None) -> ConfigSession:
        key = session_id or DEFAULT_SESSION_ID
        with self._lock:
            return self._sessions.get(key) or ConfigSession(key)

    def put(self, session: ConfigSession) -> ConfigSession:
        with self._lock:
            self._sessions[session.session_id] = session
        return session
