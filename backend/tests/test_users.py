"""
Test suite for user management: admin-only writes and the last
active administrator rule.
"""
from unittest.mock import patch

from django.db import transaction
from django.db.models.query import QuerySet
from django.test import TestCase
from rest_framework import status

from infrastructure.persistence.models import User
from tests.factories import TestDataFactory, AuthenticatedAPIClient


class UserManagementTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin(email='admin@test.com')
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_admin_creates_user_with_role(self):
        response = self.client.post(
            '/api/v1/users/',
            {'email': 'staff@test.com', 'password': 'secret123', 'role': 'manager'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], 'manager')
        self.assertNotIn('password', response.data)
        self.assertTrue(User.objects.get(email='staff@test.com').check_password('secret123'))

    def test_list_users_is_paginated(self):
        TestDataFactory.create_user()
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)

    def test_manager_cannot_create_users(self):
        manager = TestDataFactory.create_manager()
        client = AuthenticatedAPIClient().authenticate_user(manager)
        response = client.post(
            '/api/v1/users/',
            {'email': 'x@test.com', 'password': 'secret123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_password(self):
        user = TestDataFactory.create_user()
        response = self.client.patch(
            f'/api/v1/users/{user.id}/',
            {'password': 'newsecret'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.check_password('newsecret'))

    def test_cannot_demote_last_admin(self):
        response = self.client.patch(
            f'/api/v1/users/{self.admin.id}/',
            {'role': 'user'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'BUSINESS_RULE_VIOLATION')
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.role, 'admin')

    def test_cannot_deactivate_last_admin(self):
        response = self.client.patch(
            f'/api/v1/users/{self.admin.id}/',
            {'is_active': False},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_delete_last_admin(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_admin_can_be_deleted_when_another_remains(self):
        other = TestDataFactory.create_admin()
        response = self.client.delete(f'/api/v1/users/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_duplicate_email_rejected(self):
        TestDataFactory.create_user(email='dup@test.com')
        response = self.client.post(
            '/api/v1/users/',
            {'email': 'dup@test.com', 'password': 'secret123'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_and_retrieve_users(self):
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

        response = self.client.get(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'admin@test.com')

    def test_second_demotion_of_two_admins_rejected(self):
        other = TestDataFactory.create_admin()
        response = self.client.patch(f'/api/v1/users/{other.id}/', {'role': 'manager'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.patch(f'/api/v1/users/{self.admin.id}/', {'role': 'manager'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(User.objects.active_admins().count(), 1)


class LastActiveAdminTests(TestCase):

    def test_admin_rows_are_locked_while_counting(self):
        admin = TestDataFactory.create_admin()
        TestDataFactory.create_admin()
        with patch.object(QuerySet, 'select_for_update', autospec=True,
                          side_effect=lambda queryset, *args, **kwargs: queryset) as mock_lock:
            with transaction.atomic():
                self.assertFalse(admin.is_last_active_admin())
        mock_lock.assert_called_once()

    def test_non_admin_is_never_last_admin(self):
        user = TestDataFactory.create_user()
        self.assertFalse(user.is_last_active_admin())
