"""
Test suite for authentication: login, registration, token refresh,
logout and the current user profile.
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from tests.factories import TestDataFactory, AuthenticatedAPIClient


class LoginTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_manager(email='manager@test.com', password='secret123')

    def test_login_returns_tokens_and_profile(self):
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'manager@test.com', 'password': 'secret123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['email'], 'manager@test.com')
        self.assertEqual(response.data['user']['role'], 'manager')

    def test_access_token_carries_role(self):
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'manager@test.com', 'password': 'secret123'},
            format='json'
        )
        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'manager')

    def test_login_is_case_insensitive_for_email(self):
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'Manager@Test.com', 'password': 'secret123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_password(self):
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'manager@test.com', 'password': 'wrong'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)

    def test_inactive_user_cannot_login(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'manager@test.com', 'password': 'secret123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_requires_email(self):
        response = self.client.post('/api/v1/auth/login/', {'password': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Неверные данные')
        self.assertEqual(response.data['details'][0]['field'], 'email')


class RegisterTests(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_register_creates_user_with_user_role(self):
        response = self.client.post(
            '/api/v1/auth/register/',
            {'email': 'new@test.com', 'password': 'secret123', 'role': 'admin'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['role'], 'user')

    def test_register_duplicate_email(self):
        TestDataFactory.create_user(email='taken@test.com')
        response = self.client.post(
            '/api/v1/auth/register/',
            {'email': 'TAKEN@test.com', 'password': 'secret123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_short_password(self):
        response = self.client.post(
            '/api/v1/auth/register/',
            {'email': 'short@test.com', 'password': '123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TokenLifecycleTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        TestDataFactory.create_user(email='user@test.com', password='secret123')
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'user@test.com', 'password': 'secret123'},
            format='json'
        )
        self.access = response.data['access']
        self.refresh = response.data['refresh']

    def test_refresh_returns_new_access_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': self.refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_with_invalid_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'garbage'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_blacklists_refresh_token(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.access}')
        response = self.client.post('/api/v1/auth/logout/', {'refresh': self.refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.credentials()
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': self.refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class MeTests(TestCase):

    def test_me_returns_profile(self):
        user = TestDataFactory.create_user(email='me@test.com')
        client = AuthenticatedAPIClient().authenticate_user(user)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'me@test.com')
        self.assertEqual(response.data['role'], 'user')

    def test_me_requires_authentication(self):
        response = APIClient().get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)
