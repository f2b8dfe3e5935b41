"""
Test suite for persons and counterparties.
"""
from django.test import TestCase
from rest_framework import status

from tests.factories import TestDataFactory, AuthenticatedAPIClient


class PersonAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_create_person(self):
        response = self.client.post(
            '/api/v1/persons/',
            {
                'last_name': 'Петров',
                'first_name': 'Пётр',
                'middle_name': 'Петрович',
                'is_project_manager': True,
            },
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['full_name'], 'Петров Пётр Петрович')

    def test_filter_by_query_and_flag(self):
        TestDataFactory.create_person(last_name='Сидоров', is_project_manager=True)
        TestDataFactory.create_person(last_name='Кузнецов')

        response = self.client.get('/api/v1/persons/', {'query': 'Сидор'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['last_name'], 'Сидоров')

        response = self.client.get('/api/v1/persons/', {'is_project_manager': 'true'})
        self.assertEqual(response.data['count'], 1)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/persons/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CounterpartyAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient().authenticate_user(self.user)

    def test_create_counterparty(self):
        response = self.client.post(
            '/api/v1/counterparties/',
            {'name': 'ООО Ромашка', 'inn': '7707083893', 'kpp': '773601001', 'is_supplier': True},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['is_supplier'])

    def test_invalid_inn(self):
        response = self.client.post(
            '/api/v1/counterparties/',
            {'name': 'ООО Ошибка', 'inn': '12345'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['details'][0]['field'], 'inn')

    def test_invalid_kpp(self):
        response = self.client.post(
            '/api/v1/counterparties/',
            {'name': 'ООО Ошибка', 'kpp': '12'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filter_by_query(self):
        TestDataFactory.create_counterparty(name='ООО Альфа', inn='1111111111')
        TestDataFactory.create_counterparty(name='ООО Бета')
        response = self.client.get('/api/v1/counterparties/', {'query': '1111'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'ООО Альфа')
