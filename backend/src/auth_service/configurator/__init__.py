"""Conversational Cognito user pool configurator."""

from auth_service.configurator.session import ConfigSession, SessionStore
from auth_service.configurator.template import render_cloudformation
from auth_service.configurator.tools import ConfiguratorTools
from auth_service.configurator.validation import validate_configuration

__all__ = [
    "ConfigSession",
    "ConfiguratorTools",
    "SessionStore",
    "render_cloudformation",
    "validate_configuration",
]
