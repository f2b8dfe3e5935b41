"""
Test suite for the migrations API. Management commands are mocked.
"""
from unittest.mock import patch

from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework import status

from tests.factories import TestDataFactory, AuthenticatedAPIClient

CALL_COMMAND = 'presentation.api.v1.views.migrations.call_command'


def write_output(*args, **kwargs):
    kwargs['stdout'].write(f'ran {args[0]}\n')


class MigrationsAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient().authenticate_user(self.admin)

    def test_requires_admin(self):
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_manager())
        response = client.get('/api/v1/migrations/status/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @patch(CALL_COMMAND, side_effect=write_output)
    def test_deploy(self, mock_call):
        response = self.client.post('/api/v1/migrations/deploy/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['output'], 'ran migrate\n')
        self.assertEqual(response.data['warnings'], [])
        self.assertIn('message', response.data)
        self.assertEqual(mock_call.call_args.args, ('migrate',))

    @patch(CALL_COMMAND, side_effect=write_output)
    def test_status(self, mock_call):
        response = self.client.get('/api/v1/migrations/status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_call.call_args.args, ('showmigrations',))

    @patch(CALL_COMMAND, side_effect=write_output)
    def test_create(self, mock_call):
        response = self.client.post('/api/v1/migrations/create/', {'name': 'add_field'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_call.call_args.args, ('makemigrations', 'persistence'))
        self.assertEqual(mock_call.call_args.kwargs['name'], 'add_field')

    @patch(CALL_COMMAND)
    def test_create_rejects_invalid_name(self, mock_call):
        for payload in ({}, {'name': '1bad'}, {'name': 'drop table'}):
            response = self.client.post('/api/v1/migrations/create/', payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_call.assert_not_called()

    @patch(CALL_COMMAND)
    def test_reset_requires_confirmation(self, mock_call):
        response = self.client.post('/api/v1/migrations/reset/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_call.assert_not_called()

    @patch(CALL_COMMAND, side_effect=write_output)
    def test_reset(self, mock_call):
        response = self.client.post('/api/v1/migrations/reset/', {'confirm': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c.args[0] for c in mock_call.call_args_list], ['flush', 'migrate'])

    @patch(CALL_COMMAND, side_effect=CommandError('boom'))
    def test_command_failure(self, mock_call):
        response = self.client.post('/api/v1/migrations/deploy/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['details']['message'], 'boom')

    @patch(CALL_COMMAND)
    def test_stderr_lines_become_warnings(self, mock_call):
        mock_call.side_effect = lambda *args, **kwargs: kwargs['stderr'].write('careful\n\n')
        response = self.client.post('/api/v1/migrations/deploy/')
        self.assertEqual(response.data['warnings'], ['careful'])
