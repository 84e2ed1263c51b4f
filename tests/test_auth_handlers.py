"""Tests for the auth Lambda handlers.

The cognito-idp client is mocked; everything between the API Gateway
event and the client call runs for real.
"""

from __future__ import annotations

import sys
from pathlib import Path

import jwt
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from conftest import client_error, make_event, response_body

from auth_service.api import login, mfa, reset_password, set_new_password, signup, verify

GOOD_PASSWORD = 'Correct-Horse-9'
NEW_PASSWORD = 'Battery-Staple-42'

SIGNUP_BODY = {
    'username': 'alice',
    'password': GOOD_PASSWORD,
    'email': 'alice@example.com',
}

AUTH_RESULT = {
    'AuthenticationResult': {
        'AccessToken': 'access-token',
        'IdToken': 'id-token',
        'RefreshToken': 'refresh-token',
        'ExpiresIn': 3600,
        'TokenType': 'Bearer',
    },
}

TOKEN_BODY = {
    'accessToken': 'access-token',
    'idToken': 'id-token',
    'refreshToken': 'refresh-token',
    'expiresIn': 3600,
    'tokenType': 'Bearer',
}


def _error(response: dict) -> dict:
    return response_body(response)['error']


class TestSignup:
    """Tests for the signup handler."""

    def test_registers_user(self, cognito_env, cognito_client) -> None:
        cognito_client.sign_up.return_value = {
            'UserSub': 'sub-123',
            'CodeDeliveryDetails': {
                'Destination': 'a***@e***.com',
                'DeliveryMedium': 'EMAIL',
                'AttributeName': 'email',
            },
        }

        response = signup.lambda_handler(make_event(SIGNUP_BODY), None)

        assert response['statusCode'] == 200
        assert response['headers'] == {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*',
        }
        assert response_body(response) == {
            'userSub': 'sub-123',
            'codeDeliveryDetails': {
                'destination': 'a***@e***.com',
                'deliveryMedium': 'EMAIL',
                'attributeName': 'email',
            },
        }
        assert cognito_client.sign_up.call_count == 1

    def test_passes_extra_attributes(self, cognito_env, cognito_client) -> None:
        cognito_client.sign_up.return_value = {'UserSub': 'sub-123'}
        body = dict(SIGNUP_BODY, attributes={'given_name': 'Alice'})

        signup.lambda_handler(make_event(body), None)

        attributes = cognito_client.sign_up.call_args.kwargs['UserAttributes']
        assert attributes == [
            {'Name': 'email', 'Value': 'alice@example.com'},
            {'Name': 'given_name', 'Value': 'Alice'},
        ]

    def test_short_password(self, cognito_env, cognito_client) -> None:
        body = dict(SIGNUP_BODY, password='Short1!')

        response = signup.lambda_handler(make_event(body), None)

        assert response['statusCode'] == 400
        assert _error(response) == {
            'code': 'ValidationError',
            'message': '[REDACTED] validation failed: '
            '[REDACTED] must be at least 12 characters',
        }
        cognito_client.sign_up.assert_not_called()

    def test_weak_password_lists_every_rule(self, cognito_env, cognito_client) -> None:
        body = dict(SIGNUP_BODY, password='weakpassword')

        response = signup.lambda_handler(make_event(body), None)

        message = _error(response)['message']
        assert 'must contain uppercase letters' in message
        assert 'must contain numbers' in message
        assert 'must contain symbols' in message
        assert 'at least 12 characters' not in message

    def test_invalid_email(self, cognito_env, cognito_client) -> None:
        body = dict(SIGNUP_BODY, email='not-an-email')
        response = signup.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        assert _error(response)['message'] == 'Invalid email format'
        cognito_client.sign_up.assert_not_called()

    def test_invalid_attributes(self, cognito_env, cognito_client) -> None:
        body = dict(SIGNUP_BODY, attributes=['given_name'])
        response = signup.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        cognito_client.sign_up.assert_not_called()

    @pytest.mark.parametrize('missing', ['username', 'password', 'email'])
    def test_missing_fields(self, cognito_env, cognito_client, missing: str) -> None:
        body = {key: value for key, value in SIGNUP_BODY.items() if key != missing}
        response = signup.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        assert 'Missing required fields' in _error(response)['message']

    def test_missing_configuration(self, missing_cognito_env, mocker) -> None:
        factory = mocker.patch(
            'auth_service.services.identity_gateway.get_cognito_idp_client',
        )
        response = signup.lambda_handler(make_event(SIGNUP_BODY), None)
        assert response['statusCode'] == 500
        assert _error(response)['message'] == (
            'Server configuration error: missing Cognito configuration'
        )
        factory.assert_not_called()

    @pytest.mark.parametrize(
        'code,status,message',
        [
            ('UsernameExistsException', 409, 'An account with this username already exists'),
            ('InvalidPasswordException', 400, '[REDACTED] does not meet requirements'),
            ('InvalidParameterException', 400, 'Invalid parameter provided'),
            ('TooManyRequestsException', 429, 'Too many requests. Please try again later'),
            (
                'LimitExceededException',
                429,
                'Account creation limit exceeded. Please try again later',
            ),
            ('InternalErrorException', 500, 'An unexpected error occurred during signup'),
        ],
    )
    def test_provider_errors(
        self, cognito_env, cognito_client, code: str, status: int, message: str
    ) -> None:
        cognito_client.sign_up.side_effect = client_error(code, 'provider detail')
        response = signup.lambda_handler(make_event(SIGNUP_BODY), None)
        assert response['statusCode'] == status
        assert _error(response)['message'] == message
        assert 'provider detail' not in response['body']

    def test_unexpected_exception(self, cognito_env, cognito_client) -> None:
        cognito_client.sign_up.side_effect = RuntimeError('connection reset')
        response = signup.lambda_handler(make_event(SIGNUP_BODY), None)
        assert response['statusCode'] == 500
        assert _error(response) == {
            'code': 'InternalError',
            'message': 'An unexpected error occurred during signup',
        }


class TestVerify:
    """Tests for the verification handler."""

    def test_confirms_user(self, cognito_env, cognito_client) -> None:
        response = verify.lambda_handler(
            make_event({'username': 'alice', 'code': ' 123456 '}), None
        )
        assert response['statusCode'] == 200
        assert response_body(response) == {'message': 'User verification successful'}
        cognito_client.confirm_sign_up.assert_called_once_with(
            ClientId='test-client-id',
            Username='alice',
            ConfirmationCode='123456',
        )

    def test_code_mismatch(self, cognito_env, cognito_client) -> None:
        cognito_client.confirm_sign_up.side_effect = client_error(
            'CodeMismatchException', 'Invalid verification code provided'
        )
        response = verify.lambda_handler(
            make_event({'username': 'alice', 'code': '000000'}), None
        )
        assert response['statusCode'] == 400
        assert _error(response)['message'] == 'Invalid verification code'

    def test_already_confirmed(self, cognito_env, cognito_client) -> None:
        cognito_client.confirm_sign_up.side_effect = client_error(
            'NotAuthorizedException', 'User cannot be confirmed. Current status is CONFIRMED'
        )
        response = verify.lambda_handler(
            make_event({'username': 'alice', 'code': '123456'}), None
        )
        assert response['statusCode'] == 400
        assert _error(response)['message'] == 'User is already confirmed'

    @pytest.mark.parametrize(
        'code,status',
        [
            ('ExpiredCodeException', 400),
            ('UserNotFoundException', 404),
            ('TooManyFailedAttemptsException', 429),
            ('TooManyRequestsException', 429),
            ('LimitExceededException', 429),
            ('InvalidParameterException', 500),
        ],
    )
    def test_provider_errors(self, cognito_env, cognito_client, code: str, status: int) -> None:
        cognito_client.confirm_sign_up.side_effect = client_error(code)
        response = verify.lambda_handler(
            make_event({'username': 'alice', 'code': '123456'}), None
        )
        assert response['statusCode'] == status

    def test_blank_code(self, cognito_env, cognito_client) -> None:
        response = verify.lambda_handler(make_event({'username': 'alice', 'code': '   '}), None)
        assert response['statusCode'] == 400
        assert _error(response)['message'] == (
            'Missing required fields: username and code are required'
        )
        cognito_client.confirm_sign_up.assert_not_called()


class TestLogin:
    """Tests for the login handler."""

    def test_returns_tokens(self, cognito_env, cognito_client) -> None:
        cognito_client.initiate_auth.return_value = AUTH_RESULT
        response = login.lambda_handler(
            make_event({'username': 'alice', 'password': GOOD_PASSWORD}), None
        )
        assert response['statusCode'] == 200
        assert response_body(response) == TOKEN_BODY
        assert cognito_client.initiate_auth.call_count == 1

    def test_logs_id_token_claims(self, cognito_env, cognito_client, caplog) -> None:
        id_token = jwt.encode(
            {'sub': 'sub-123', 'token_use': 'id', 'email': 'alice@example.com'},
            'test-signing-key-that-is-long-enough-for-hs256',
            algorithm='HS256',
        )
        cognito_client.initiate_auth.return_value = {
            'AuthenticationResult': dict(AUTH_RESULT['AuthenticationResult'], IdToken=id_token),
        }

        with caplog.at_level('INFO'):
            login.lambda_handler(
                make_event({'username': 'alice', 'password': GOOD_PASSWORD}), None
            )

        record = next(r for r in caplog.records if r.getMessage() == 'Login successful')
        assert record.sub == 'sub-123'
        assert record.token_use == 'id'
        assert record.username == 'alic***'
        assert not hasattr(record, 'email')

    def test_mfa_challenge(self, cognito_env, cognito_client) -> None:
        cognito_client.initiate_auth.return_value = {
            'ChallengeName': 'SMS_MFA',
            'Session': 'sess123',
        }
        response = login.lambda_handler(
            make_event({'username': 'alice', 'password': GOOD_PASSWORD}), None
        )
        assert response['statusCode'] == 200
        assert response_body(response) == {
            'challengeName': 'MFA_REQUIRED',
            'challengeType': 'SMS_MFA',
            'session': 'sess123',
            'message': 'MFA verification required. Please provide MFA code.',
        }

    @pytest.mark.parametrize('code', ['NotAuthorizedException', 'UserNotFoundException'])
    def test_bad_credentials_share_one_answer(
        self, cognito_env, cognito_client, code: str
    ) -> None:
        cognito_client.initiate_auth.side_effect = client_error(
            code, 'Incorrect username or password.'
        )
        response = login.lambda_handler(
            make_event({'username': 'alice', 'password': GOOD_PASSWORD}), None
        )
        assert response['statusCode'] == 401
        assert _error(response) == {
            'code': 'AuthenticationError',
            'message': 'Incorrect username or [REDACTED]',
        }

    @pytest.mark.parametrize(
        'code,status',
        [
            ('UserNotConfirmedException', 403),
            ('PasswordResetRequiredException', 403),
            ('UserLambdaValidationException', 403),
            ('InvalidParameterException', 400),
            ('TooManyRequestsException', 429),
        ],
    )
    def test_provider_errors(self, cognito_env, cognito_client, code: str, status: int) -> None:
        cognito_client.initiate_auth.side_effect = client_error(code)
        response = login.lambda_handler(
            make_event({'username': 'alice', 'password': GOOD_PASSWORD}), None
        )
        assert response['statusCode'] == status
        assert GOOD_PASSWORD not in response['body']

    def test_missing_password(self, cognito_env, cognito_client) -> None:
        response = login.lambda_handler(make_event({'username': 'alice'}), None)
        assert response['statusCode'] == 400
        cognito_client.initiate_auth.assert_not_called()


class TestMfa:
    """Tests for the MFA handler."""

    def test_answers_sms_challenge(self, cognito_env, cognito_client) -> None:
        cognito_client.respond_to_auth_challenge.return_value = AUTH_RESULT
        response = mfa.lambda_handler(
            make_event({'session': 'sess123', 'mfaCode': '123456', 'username': 'alice'}),
            None,
        )
        assert response['statusCode'] == 200
        assert response_body(response) == TOKEN_BODY
        kwargs = cognito_client.respond_to_auth_challenge.call_args.kwargs
        assert kwargs['ChallengeName'] == 'SMS_MFA'
        assert kwargs['ChallengeResponses'] == {'USERNAME': 'alice', 'SMS_MFA_CODE': '123456'}

    def test_software_token_challenge(self, cognito_env, cognito_client) -> None:
        cognito_client.respond_to_auth_challenge.return_value = AUTH_RESULT
        body = {
            'session': 'sess123',
            'mfaCode': '123456',
            'username': 'alice',
            'challengeName': 'SOFTWARE_TOKEN_MFA',
        }
        response = mfa.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 200
        kwargs = cognito_client.respond_to_auth_challenge.call_args.kwargs
        assert kwargs['ChallengeResponses']['SOFTWARE_TOKEN_MFA_CODE'] == '123456'

    def test_rejects_unknown_challenge(self, cognito_env, cognito_client) -> None:
        body = {
            'session': 'sess123',
            'mfaCode': '123456',
            'username': 'alice',
            'challengeName': 'NEW_PASSWORD_REQUIRED',
        }
        response = mfa.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        cognito_client.respond_to_auth_challenge.assert_not_called()

    @pytest.mark.parametrize(
        'code,status,message',
        [
            ('CodeMismatchException', 401, 'Invalid MFA code provided'),
            ('ExpiredCodeException', 401, 'MFA code has expired. Please request a new code'),
            ('NotAuthorizedException', 401, 'Invalid [REDACTED] or MFA code'),
            ('UserNotFoundException', 404, 'User not found'),
            ('UserNotConfirmedException', 403, None),
        ],
    )
    def test_provider_errors(
        self, cognito_env, cognito_client, code: str, status: int, message
    ) -> None:
        cognito_client.respond_to_auth_challenge.side_effect = client_error(code)
        response = mfa.lambda_handler(
            make_event({'session': 'sess123', 'mfaCode': '000000', 'username': 'alice'}),
            None,
        )
        assert response['statusCode'] == status
        if message:
            assert _error(response)['message'] == message
        assert 'sess123' not in response['body']

    def test_missing_session(self, cognito_env, cognito_client) -> None:
        response = mfa.lambda_handler(
            make_event({'mfaCode': '123456', 'username': 'alice'}), None
        )
        assert response['statusCode'] == 400
        assert _error(response)['message'] == (
            'Missing required fields: [REDACTED], mfaCode, and username are required'
        )


class TestSetNewPassword:
    """Tests for the set-new-password handler."""

    BODY = {
        'username': 'alice',
        'previousPassword': GOOD_PASSWORD,
        'proposedPassword': NEW_PASSWORD,
        'session': 'access-token',
    }

    def test_changes_password(self, cognito_env, cognito_client) -> None:
        response = set_new_password.lambda_handler(make_event(self.BODY), None)
        assert response['statusCode'] == 200
        assert response_body(response) == {'message': 'Password changed successfully'}
        cognito_client.change_password.assert_called_once_with(
            PreviousPassword=GOOD_PASSWORD,
            ProposedPassword=NEW_PASSWORD,
            AccessToken='access-token',
        )

    def test_weak_proposed_password(self, cognito_env, cognito_client) -> None:
        body = dict(self.BODY, proposedPassword='Short1!')
        response = set_new_password.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        assert _error(response)['message'].startswith('[REDACTED] does not meet requirements')
        cognito_client.change_password.assert_not_called()

    @pytest.mark.parametrize(
        'code,status',
        [
            ('NotAuthorizedException', 401),
            ('InvalidPasswordException', 400),
            ('LimitExceededException', 429),
            ('UserNotFoundException', 404),
            ('UserNotConfirmedException', 403),
        ],
    )
    def test_provider_errors(self, cognito_env, cognito_client, code: str, status: int) -> None:
        cognito_client.change_password.side_effect = client_error(code)
        response = set_new_password.lambda_handler(make_event(self.BODY), None)
        assert response['statusCode'] == status
        assert 'access-token' not in response['body']
        assert NEW_PASSWORD not in response['body']


class TestResetPassword:
    """Tests for the reset-password handler."""

    def test_initiate(self, cognito_env, cognito_client) -> None:
        response = reset_password.lambda_handler(
            make_event({'operation': 'initiate', 'username': 'alice'}), None
        )
        assert response['statusCode'] == 200
        assert response_body(response) == {'message': 'Password reset code sent successfully'}
        cognito_client.forgot_password.assert_called_once_with(
            ClientId='test-client-id',
            Username='alice',
        )

    def test_confirm(self, cognito_env, cognito_client) -> None:
        body = {
            'operation': 'confirm',
            'username': 'alice',
            'code': '123456',
            'newPassword': NEW_PASSWORD,
        }
        response = reset_password.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 200
        cognito_client.confirm_forgot_password.assert_called_once_with(
            ClientId='test-client-id',
            Username='alice',
            ConfirmationCode='123456',
            Password=NEW_PASSWORD,
        )
        cognito_client.forgot_password.assert_not_called()

    @pytest.mark.parametrize('operation', [None, 'restart', 7])
    def test_invalid_operation(self, cognito_env, cognito_client, operation) -> None:
        body = {'username': 'alice'}
        if operation is not None:
            body['operation'] = operation
        response = reset_password.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        assert _error(response)['message'] == (
            'Invalid operation: must be "initiate" or "confirm"'
        )
        cognito_client.forgot_password.assert_not_called()
        cognito_client.confirm_forgot_password.assert_not_called()

    def test_confirm_requires_code(self, cognito_env, cognito_client) -> None:
        body = {'operation': 'confirm', 'username': 'alice', 'newPassword': NEW_PASSWORD}
        response = reset_password.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        assert _error(response)['message'] == (
            'Missing required fields: code and new[REDACTED] are required for confirm operation'
        )

    def test_confirm_weak_password(self, cognito_env, cognito_client) -> None:
        body = {
            'operation': 'confirm',
            'username': 'alice',
            'code': '123456',
            'newPassword': 'Short1!',
        }
        response = reset_password.lambda_handler(make_event(body), None)
        assert response['statusCode'] == 400
        cognito_client.confirm_forgot_password.assert_not_called()

    @pytest.mark.parametrize(
        'code,status',
        [
            ('UserNotFoundException', 404),
            ('CodeMismatchException', 400),
            ('ExpiredCodeException', 400),
            ('InvalidPasswordException', 400),
            ('LimitExceededException', 429),
            ('TooManyFailedAttemptsException', 429),
            ('NotAuthorizedException', 403),
            ('UserNotConfirmedException', 403),
        ],
    )
    def test_provider_errors(self, cognito_env, cognito_client, code: str, status: int) -> None:
        cognito_client.confirm_forgot_password.side_effect = client_error(code)
        body = {
            'operation': 'confirm',
            'username': 'alice',
            'code': '123456',
            'newPassword': NEW_PASSWORD,
        }
        response = reset_password.lambda_handler(make_event(body), None)
        assert response['statusCode'] == status
        assert NEW_PASSWORD not in response['body']
