"""Render a configuration session as a CloudFormation template."""

from __future__ import annotations

import json
from typing import Any
from typing import Mapping
from typing import Optional

from auth_service.configurator.session import ConfigSession

DEFAULT_AUTH_FLOWS = ["ALLOW_USER_SRP_AUTH", "ALLOW_REFRESH_TOKEN_AUTH"]


def _export(name: str) -> dict[str, str]:
    return {"Name": f"${{AWS::StackName}}-{name}"}


def _section(config: Mapping[str, Any], name: str) -> Optional[Mapping[str, Any]]:
    """Return an object section, or None when unset or not an object.

    An empty object counts as set and renders with defaults.
    """
    value = config.get(name)
    return value if isinstance(value, Mapping) else None


def _entries(config: Mapping[str, Any], name: str) -> list[Mapping[str, Any]]:
    """Return the object entries of a list section; anything else is empty."""
    value = config.get(name)
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, Mapping)]


def _user_pool(stack_name: str, config: Mapping[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "UserPoolName": f"{stack_name}-${{Environment}}",
        "UsernameConfiguration": {"CaseSensitive": False},
    }

    auth_method = _section(config, "authMethod")
    if auth_method is not None:
        properties["UsernameAttributes"] = auth_method.get("usernameAttributes") or []
        properties["AliasAttributes"] = auth_method.get("aliasAttributes") or []

    mfa = _section(config, "mfaConfig")
    if mfa is not None:
        mode = mfa.get("mode")
        properties["MfaConfiguration"] = mode or "OFF"
        if mode != "OFF":
            properties["EnabledMfas"] = mfa.get("methods") or ["SOFTWARE_TOKEN_MFA"]

    policy = _section(config, "passwordPolicy")
    if policy is not None:
        properties["Policies"] = {
            "PasswordPolicy": {
                "MinimumLength": policy.get("minimumLength") or 12,
                "RequireUppercase": policy.get("requireUppercase") is not False,
                "RequireLowercase": policy.get("requireLowercase") is not False,
                "RequireNumbers": policy.get("requireNumbers") is not False,
                "RequireSymbols": policy.get("requireSymbols") is not False,
                "TemporaryPasswordValidityDays": policy.get("tempPasswordValidity") or 7,
            }
        }

    security = _section(config, "advancedSecurity")
    if security is not None:
        properties["UserPoolAddOns"] = {
            "AdvancedSecurityMode": security.get("mode") or "OFF",
        }

    email = _section(config, "emailConfig")
    if email is not None:
        if email.get("type") == "SES":
            properties["EmailConfiguration"] = {
                "EmailSendingAccount": "DEVELOPER",
                "SourceArn": email.get("sesSourceArn"),
                "From": email.get("fromEmail"),
                "ReplyToEmailAddress": email.get("replyToEmail"),
            }
        else:
            properties["EmailConfiguration"] = {"EmailSendingAccount": "COGNITO_DEFAULT"}

    custom_attributes = _entries(config, "customAttributes")
    if custom_attributes:
        properties["Schema"] = [
            {
                "Name": attr.get("name"),
                "AttributeDataType": attr.get("dataType") or "String",
                "Mutable": attr.get("mutable") is not False,
                "Required": attr.get("required") is True,
            }
            for attr in custom_attributes
        ]

    triggers = _entries(config, "lambdaTriggers")
    if triggers:
        properties["LambdaConfig"] = {
            trigger.get("type"): trigger.get("lambdaArn")
            for trigger in triggers
        }

    return {"Type": "AWS::Cognito::UserPool", "Properties": properties}


def _user_pool_client(stack_name: str, app_client: Mapping[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "ClientName": app_client.get("name") or f"{stack_name}-client",
        "UserPoolId": {"Ref": "UserPool"},
        "GenerateSecret": app_client.get("generateSecret") is True,
        "RefreshTokenValidity": app_client.get("refreshTokenValidity") or 30,
        "AccessTokenValidity": app_client.get("accessTokenValidity") or 1,
        "IdTokenValidity": app_client.get("idTokenValidity") or 1,
        "TokenValidityUnits": {
            "RefreshToken": "days",
            "AccessToken": "hours",
            "IdToken": "hours",
        },
        "ExplicitAuthFlows": app_client.get("authFlows") or list(DEFAULT_AUTH_FLOWS),
        "PreventUserExistenceErrors": "ENABLED",
        "EnableTokenRevocation": True,
    }
    if app_client.get("callbackUrls"):
        properties["CallbackURLs"] = app_client["callbackUrls"]
    if app_client.get("logoutUrls"):
        properties["LogoutURLs"] = app_client["logoutUrls"]
    return {"Type": "AWS::Cognito::UserPoolClient", "Properties": properties}


def _user_pool_domain(domain: Mapping[str, Any]) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "Domain": domain.get("prefix"),
        "UserPoolId": {"Ref": "UserPool"},
    }
    if domain.get("customDomain"):
        properties["CustomDomainConfig"] = {
            "CertificateArn": domain.get("certificateArn"),
        }
    return {"Type": "AWS::Cognito::UserPoolDomain", "Properties": properties}


def build_template(stack_name: str, session: ConfigSession) -> dict[str, Any]:
    """Build the CloudFormation template as a dictionary."""
    config = session.to_dict()
    use_case = _section(config, "useCase") or {}
    description = use_case.get("description") or "application"

    resources: dict[str, Any] = {"UserPool": _user_pool(stack_name, config)}
    outputs: dict[str, Any] = {
        "UserPoolId": {
            "Description": "Cognito User Pool ID",
            "Value": {"Ref": "UserPool"},
            "Export": _export("UserPoolId"),
        },
        "UserPoolArn": {
            "Description": "Cognito User Pool ARN",
            "Value": {"Fn::GetAtt": ["UserPool", "Arn"]},
            "Export": _export("UserPoolArn"),
        },
    }

    app_client = _section(config, "appClient")
    if app_client is not None:
        resources["UserPoolClient"] = _user_pool_client(stack_name, app_client)
        outputs["UserPoolClientId"] = {
            "Description": "Cognito User Pool Client ID",
            "Value": {"Ref": "UserPoolClient"},
            "Export": _export("UserPoolClientId"),
        }

    domain = _section(config, "domain")
    if domain is not None:
        resources["UserPoolDomain"] = _user_pool_domain(domain)
        outputs["CognitoDomain"] = {
            "Description": "Cognito Hosted UI Domain",
            "Value": {"Ref": "UserPoolDomain"},
            "Export": _export("CognitoDomain"),
        }

    return {
        "AWSTemplateFormatVersion": "2010-09-09",
        "Description": f"Cognito User Pool configuration for {description}",
        "Parameters": {
            "Environment": {
                "Type": "String",
                "Default": "dev",
                "AllowedValues": ["dev", "staging", "prod"],
                "Description": "Environment name",
            },
        },
        "Resources": resources,
        "Outputs": outputs,
    }


def render_cloudformation(stack_name: str, session: ConfigSession) -> str:
    """Render the template as indented JSON (which CloudFormation accepts as YAML)."""
    return json.dumps(build_template(stack_name, session), indent=2)
