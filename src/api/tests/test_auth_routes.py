"""Unit tests for authentication routes."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from api.dependencies import get_email_sender, get_token_repo, get_user_repo
from api.main import app
from adapter.fake.email_sender import FakeEmailSender
from adapter.fake.token_repository import FakeTokenRepository
from adapter.fake.user_repository import FakeUserRepository
from domain.model.email import EmailResult
from domain.model.token import TokenPurpose

ENVELOPE_KEYS = {'error', 'errors', 'data', 'message', 'status'}
OVERLONG_PASSWORD = 'Aa1!' + 'x' * 80


class AuthRouteTestCase(unittest.TestCase):
    """Shared fixtures: fake repositories wired through dependency overrides."""

    def setUp(self):
        self.client = TestClient(app)
        self.users = FakeUserRepository()
        self.tokens = FakeTokenRepository()
        self.sender = FakeEmailSender()
        app.dependency_overrides[get_user_repo] = lambda: self.users
        app.dependency_overrides[get_token_repo] = lambda: self.tokens
        app.dependency_overrides[get_email_sender] = lambda: self.sender

    def tearDown(self):
        app.dependency_overrides.clear()

    def _register(self, email='a@b.com', password='Secret1!'):
        return self.client.post('/auth/register', json={
            'email': email,
            'password': password,
            'firstName': 'Ada',
            'lastName': 'Lovelace',
        })

    def _login(self, email='a@b.com', password='Secret1!'):
        return self.client.post('/auth/login', json={'email': email, 'password': password})


class TestRegister(AuthRouteTestCase):
    """Test cases for POST /auth/register."""

    def test_register_success(self):
        response = self._register()

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(set(body), ENVELOPE_KEYS)
        self.assertFalse(body['error'])
        self.assertEqual(body['errors'], [])
        self.assertEqual(body['status'], 200)
        self.assertEqual(body['message'], 'User registered successfully.')
        data = body['data']
        self.assertEqual(data['email'], 'a@b.com')
        self.assertEqual(data['firstName'], 'Ada')
        self.assertEqual(data['lastName'], 'Lovelace')
        self.assertEqual(data['role'], 'user')
        self.assertTrue(data['isUser'])
        self.assertFalse(data['isAdmin'])
        self.assertEqual(len(self.users.store), 1)

    def test_register_never_returns_password(self):
        data = self._register().json()['data']

        self.assertNotIn('password', data)
        self.assertNotIn('passwordHash', data)
        self.assertNotIn('password_hash', data)

    def test_register_duplicate_email_returns_403(self):
        self._register()

        response = self._register(email='A@B.COM')

        self.assertEqual(response.status_code, 403)
        body = response.json()
        self.assertTrue(body['error'])
        self.assertEqual(body['status'], 403)
        self.assertEqual(body['errors'], ['User already exists, use another email'])
        self.assertEqual(len(self.users.store), 1)

    def test_register_missing_fields_returns_400(self):
        response = self.client.post('/auth/register', json={'email': 'a@b.com'})

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()['error'])
        self.assertEqual(self.users.store, {})

    def test_register_wrong_field_type_returns_400_envelope(self):
        response = self.client.post('/auth/register', json={'email': 123, 'password': 'x'})

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertTrue(body['error'])
        self.assertEqual(body['message'], 'Invalid request body')
        self.assertTrue(any(e.startswith('email') for e in body['errors']))

    def test_register_overlong_password_returns_400(self):
        response = self._register(password=OVERLONG_PASSWORD)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'], ['Password must be at most 72 bytes'])
        self.assertEqual(self.users.store, {})


class TestLogin(AuthRouteTestCase):
    """Test cases for POST /auth/login."""

    def setUp(self):
        super().setUp()
        self.user_id = self._register().json()['data']['id']

    def test_login_success_returns_token_and_persists_it(self):
        response = self._login()

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body['error'])
        self.assertEqual(body['status'], 200)
        token = body['data']['authToken']
        self.assertTrue(token)
        self.assertEqual(body['data']['id'], self.user_id)
        self.assertNotIn('passwordHash', body['data'])

        record = self.tokens.find_by_user(self.user_id, TokenPurpose.AUTH)
        self.assertEqual(record.user_id, self.user_id)
        self.assertEqual(record.token, token)

    def test_repeated_login_keeps_single_token(self):
        for _ in range(3):
            last = self._login().json()['data']['authToken']

        records = self.tokens.all_for(self.user_id, TokenPurpose.AUTH)
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].token, last)

    def test_login_missing_password_returns_400(self):
        response = self.client.post('/auth/login', json={'email': 'a@b.com'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'], ['Email and password are required'])

    def test_login_bad_credentials_returns_400(self):
        response = self._login(password='Wrong1!!')

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()['error'])
        self.assertEqual(self.tokens.store, {})

    def test_login_overlong_password_returns_400(self):
        response = self._login(password=OVERLONG_PASSWORD)

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()['error'])
        self.assertEqual(self.tokens.store, {})

    def test_token_store_read_failure_returns_500_without_new_token(self):
        self._login()
        client = TestClient(app, raise_server_exceptions=False)

        with patch.object(self.tokens, 'find_by_user', side_effect=PyMongoError('read timeout')):
            response = client.post('/auth/login', json={'email': 'a@b.com', 'password': 'Secret1!'})

        self.assertEqual(response.status_code, 500)
        self.assertTrue(response.json()['error'])
        self.assertEqual(len(self.tokens.all_for(self.user_id, TokenPurpose.AUTH)), 1)

    @patch('services.auth_service.create_auth_token', return_value=None)
    def test_token_generation_failure_returns_500(self, _mock_issue):
        response = self._login()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['errors'], ['Token generation failed'])


class TestLogout(AuthRouteTestCase):

    def test_logout_returns_200_without_state_change(self):
        self._register()
        self._login()
        tokens_before = dict(self.tokens.store)

        response = self.client.post('/auth/logout')

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body['error'])
        self.assertEqual(body['message'], 'User logged out successfully.')
        self.assertEqual(self.tokens.store, tokens_before)


class TestForgotPassword(AuthRouteTestCase):
    """Test cases for POST /auth/forgot-password."""

    def test_forgot_password_success(self):
        self._register()

        response = self.client.post('/auth/forgot-password', json={'email': 'a@b.com'})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['data'], {})
        self.assertEqual(body['message'], 'Forgot Password link sent to your email')
        self.assertEqual(len(self.sender.sent), 1)
        self.assertIn('/forgot-password?token=', self.sender.sent[0][1])

    def test_forgot_password_invalid_email(self):
        response = self.client.post('/auth/forgot-password', json={'email': 'bogus'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'], ['Invalid email format.'])

    def test_forgot_password_unknown_email(self):
        response = self.client.post('/auth/forgot-password', json={'email': 'ghost@b.com'})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.tokens.store, {})

    def test_forgot_password_send_failure_is_propagated(self):
        self._register()
        self.sender.result = EmailResult(error=True, code=503, message='Unable to send password reset email')

        response = self.client.post('/auth/forgot-password', json={'email': 'a@b.com'})

        self.assertEqual(response.status_code, 503)
        body = response.json()
        self.assertEqual(body['status'], 503)
        self.assertEqual(body['errors'], ['Unable to send password reset email'])
        self.assertEqual(len(self.tokens.store), 1)


class TestChangePassword(AuthRouteTestCase):
    """Test cases for POST /auth/change-password."""

    def setUp(self):
        super().setUp()
        self.user_id = self._register().json()['data']['id']
        token = self._login().json()['data']['authToken']
        self.headers = {'Authorization': f'Bearer {token}'}

    def _change(self, old, new, headers=None):
        return self.client.post(
            '/auth/change-password',
            json={'oldPassword': old, 'newPassword': new},
            headers=self.headers if headers is None else headers,
        )

    def test_change_password_success(self):
        response = self._change('Secret1!', 'Brandnew9#')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], 'Password changed successfully')
        self.assertEqual(self._login(password='Brandnew9#').status_code, 200)
        self.assertEqual(self._login(password='Secret1!').status_code, 400)

    def test_requires_authentication(self):
        response = self._change('Secret1!', 'Brandnew9#', headers={})

        self.assertEqual(response.status_code, 401)
        body = response.json()
        self.assertTrue(body['error'])
        self.assertEqual(body['status'], 401)

    def test_rejects_invalid_token(self):
        response = self._change('Secret1!', 'Brandnew9#', headers={'Authorization': 'Bearer nope'})
        self.assertEqual(response.status_code, 401)

    def test_wrong_old_password(self):
        stored_hash = self.users.store[self.user_id].password_hash

        response = self._change('Wrong1!!', 'Brandnew9#')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'], ['Old password is incorrect'])
        self.assertEqual(self.users.store[self.user_id].password_hash, stored_hash)

    def test_weak_new_password(self):
        stored_hash = self.users.store[self.user_id].password_hash

        response = self._change('Secret1!', 'Abcdefgh!')

        self.assertEqual(response.status_code, 400)
        self.assertIn('one number', response.json()['message'])
        self.assertEqual(self.users.store[self.user_id].password_hash, stored_hash)

    def test_overlong_new_password(self):
        stored_hash = self.users.store[self.user_id].password_hash

        response = self._change('Secret1!', OVERLONG_PASSWORD)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'], ['Password must be at most 72 bytes'])
        self.assertEqual(self.users.store[self.user_id].password_hash, stored_hash)

    def test_deleted_user_returns_404(self):
        del self.users.store[self.user_id]

        response = self._change('Secret1!', 'Brandnew9#')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['errors'], ['User not found'])


if __name__ == '__main__':
    unittest.main()
