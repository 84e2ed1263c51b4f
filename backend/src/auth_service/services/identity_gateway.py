"""Thin adapter over the Cognito user pool API.

Each method issues exactly one Cognito call. Provider failures surface as
``IdentityProviderError`` carrying an ``IdentityErrorKind``; mapping kinds
to HTTP statuses is the caller's job.
"""

from __future__ import annotations

from typing import Any
from typing import Mapping
from typing import Optional
from typing import Union

from botocore.exceptions import ClientError

from auth_service.config import IdentityProviderConfig
from auth_service.exceptions import IdentityErrorKind
from auth_service.exceptions import IdentityProviderError
from auth_service.schemas import ChallengeRequired
from auth_service.schemas import CodeDeliveryDetails
from auth_service.schemas import SignUpResult
from auth_service.schemas import TokenBundle
from auth_service.services.aws_clients import get_cognito_idp_client

MFA_CODE_PARAMETERS = {
    "SMS_MFA": "SMS_MFA_CODE",
    "SOFTWARE_TOKEN_MFA": "SOFTWARE_TOKEN_MFA_CODE",
}

AuthenticationOutcome = Union[TokenBundle, ChallengeRequired]


def to_cognito_attributes(attributes: Mapping[str, Any]) -> list[dict[str, str]]:
    """Convert a plain mapping to Cognito's Name/Value attribute list."""
    return [{"Name": str(name), "Value": str(value)} for name, value in attributes.items()]


def _token_bundle(response: Mapping[str, Any]) -> TokenBundle:
    result = response.get("AuthenticationResult") or {}
    return TokenBundle(
        access_token=result.get("AccessToken") or "",
        id_token=result.get("IdToken") or "",
        refresh_token=result.get("RefreshToken") or "",
        expires_in=result.get("ExpiresIn") or 0,
        token_type=result.get("TokenType") or "Bearer",
    )


def _provider_error(exc: ClientError) -> IdentityProviderError:
    error = exc.response.get("Error", {})
    return IdentityProviderError(
        IdentityErrorKind.from_code(error.get("Code")),
        error.get("Message", ""),
    )


class IdentityGateway:
    """Cognito operations used by the auth handlers.

    Args:
        config: User pool coordinates.
        client: Optional pre-built ``cognito-idp`` client; by default the
            cached client for ``config.region`` is used.
    """

    def __init__(self, config: IdentityProviderConfig, client: Any = None):
        self.config = config
        self._client = client or get_cognito_idp_client(region_name=config.region)

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        try:
            return getattr(self._client, operation)(**params)
        except ClientError as exc:
            raise _provider_error(exc) from exc

    def register(
        self,
        username: str,
        password: str,
        email: str,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> SignUpResult:
        """Create an unconfirmed user; extra attributes follow the email."""
        user_attributes = [{"Name": "email", "Value": email}]
        if attributes:
            user_attributes.extend(to_cognito_attributes(attributes))

        response = self._call(
            "sign_up",
            ClientId=self.config.client_id,
            Username=username,
            Password=password,
            UserAttributes=user_attributes,
        )

        delivery = response.get("CodeDeliveryDetails") or {}
        return SignUpResult(
            user_sub=response.get("UserSub", ""),
            code_delivery_details=CodeDeliveryDetails(
                destination=delivery.get("Destination", ""),
                delivery_medium=delivery.get("DeliveryMedium", ""),
                attribute_name=delivery.get("AttributeName", ""),
            ),
        )

    def confirm_registration(self, username: str, code: str) -> None:
        self._call(
            "confirm_sign_up",
            ClientId=self.config.client_id,
            Username=username,
            ConfirmationCode=code,
        )

    def authenticate(self, username: str, password: str) -> AuthenticationOutcome:
        """Start a USER_PASSWORD_AUTH flow.

        Returns:
            TokenBundle when Cognito issues tokens, or ChallengeRequired
            carrying the challenge name and session when it does not.
        """
        response = self._call(
            "initiate_auth",
            ClientId=self.config.client_id,
            AuthFlow="USER_PASSWORD_AUTH",
            AuthParameters={"USERNAME": username, "PASSWORD": password},
        )

        if response.get("ChallengeName"):
            return ChallengeRequired(
                challenge_name=response["ChallengeName"],
                session=response.get("Session") or "",
            )
        return _token_bundle(response)

    def respond_to_challenge(
        self,
        session: str,
        username: str,
        code: str,
        challenge_name: str = "SMS_MFA",
    ) -> TokenBundle:
        """Answer an MFA challenge with the user's code."""
        response = self._call(
            "respond_to_auth_challenge",
            ClientId=self.config.client_id,
            ChallengeName=challenge_name,
            Session=session,
            ChallengeResponses={
                "USERNAME": username,
                MFA_CODE_PARAMETERS[challenge_name]: code,
            },
        )
        return _token_bundle(response)

    def change_password(
        self,
        previous_password: str,
        proposed_password: str,
        access_token: str,
    ) -> None:
        """Change the password of the user owning ``access_token``."""
        self._call(
            "change_password",
            PreviousPassword=previous_password,
            ProposedPassword=proposed_password,
            AccessToken=access_token,
        )

    def initiate_password_reset(self, username: str) -> None:
        """Send a reset code to the user out of band."""
        self._call(
            "forgot_password",
            ClientId=self.config.client_id,
            Username=username,
        )

    def confirm_password_reset(self, username: str, code: str, new_password: str) -> None:
        self._call(
            "confirm_forgot_password",
            ClientId=self.config.client_id,
            Username=username,
            ConfirmationCode=code,
            Password=new_password,
        )
