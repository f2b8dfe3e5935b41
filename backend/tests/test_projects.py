"""
Test suite for projects: CRUD, role checks, filters and bulk reorder.
"""
import uuid
from datetime import date

from django.test import TestCase
from rest_framework import status

from infrastructure.persistence.models import Project, ProjectProduct
from tests.factories import TestDataFactory, AuthenticatedAPIClient


class ProjectAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_manager()
        self.client = AuthenticatedAPIClient().authenticate_user(self.manager)

    def test_create_project_defaults(self):
        response = self.client.post('/api/v1/projects/', {'name': 'Линия 1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'planned')
        self.assertEqual(response.data['owner'], self.manager.id)
        self.assertEqual(response.data['order_index'], 0)
        self.assertEqual(response.data['products'], [])

        response = self.client.post('/api/v1/projects/', {'name': 'Линия 2'}, format='json')
        self.assertEqual(response.data['order_index'], 1)

    def test_create_with_project_manager(self):
        person = TestDataFactory.create_person(is_project_manager=True)
        response = self.client.post(
            '/api/v1/projects/',
            {'name': 'Линия', 'project_manager': str(person.id)},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['project_manager_detail']['id'], str(person.id))

    def test_name_is_required(self):
        response = self.client.post('/api/v1/projects/', {'name': ''}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_status(self):
        response = self.client.post('/api/v1/projects/', {'name': 'X', 'status': 'lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_end_date_before_start_date(self):
        response = self.client.post(
            '/api/v1/projects/',
            {'name': 'X', 'start_date': '2026-05-01', 'end_date': '2026-04-01'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['details'][0]['field'], 'end_date')

    def test_user_cannot_create_project(self):
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = client.post('/api/v1/projects/', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_user_can_read_projects(self):
        TestDataFactory.create_project(owner=self.manager)
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = client.get('/api/v1/projects/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_list_filters(self):
        TestDataFactory.create_project(owner=self.manager, name='Alpha', status='in_progress',
                                       start_date=date(2026, 1, 10))
        TestDataFactory.create_project(owner=self.manager, name='Beta', start_date=date(2026, 3, 1))

        response = self.client.get('/api/v1/projects/', {'status': 'in_progress'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Alpha')

        response = self.client.get('/api/v1/projects/', {'query': 'bet'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Beta')

        response = self.client.get('/api/v1/projects/', {'from': '2026-02-01'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Beta')

        response = self.client.get('/api/v1/projects/', {'to': '2026-02-01'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Alpha')

    def test_list_is_ordered_by_order_index(self):
        TestDataFactory.create_project(owner=self.manager, name='Second', order_index=1)
        TestDataFactory.create_project(owner=self.manager, name='First', order_index=0)
        response = self.client.get('/api/v1/projects/')
        self.assertEqual([p['name'] for p in response.data['results']], ['First', 'Second'])

    def test_retrieve_includes_products(self):
        project = TestDataFactory.create_project(owner=self.manager)
        TestDataFactory.create_project_product(project, quantity=3)
        response = self.client.get(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['products_count'], 1)
        self.assertEqual(response.data['products'][0]['quantity'], 3)
        self.assertIn('work_stages', response.data['products'][0])

    def test_unknown_project_is_404(self):
        response = self.client.get(f'/api/v1/projects/{uuid.uuid4()}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)

    def test_only_admin_deletes_projects(self):
        project = TestDataFactory.create_project(owner=self.manager)
        TestDataFactory.create_project_product(project)

        response = self.client.delete(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        admin = TestDataFactory.create_admin()
        client = AuthenticatedAPIClient().authenticate_user(admin)
        response = client.delete(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ProjectProduct.objects.filter(project_id=project.id).exists())

    def test_history(self):
        project = TestDataFactory.create_project(owner=self.manager)
        self.client.patch(f'/api/v1/projects/{project.id}/', {'status': 'done'}, format='json')
        response = self.client.get(f'/api/v1/projects/{project.id}/history/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)


class ProjectReorderTests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_manager()
        self.client = AuthenticatedAPIClient().authenticate_user(self.manager)
        self.first = TestDataFactory.create_project(owner=self.manager, order_index=0)
        self.second = TestDataFactory.create_project(owner=self.manager, order_index=1)

    def test_reorder(self):
        response = self.client.put(
            '/api/v1/projects/reorder/',
            {'project_orders': [
                {'id': str(self.first.id), 'order_index': 1},
                {'id': str(self.second.id), 'order_index': 0},
            ]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['updated'], 2)
        self.first.refresh_from_db()
        self.second.refresh_from_db()
        self.assertEqual((self.first.order_index, self.second.order_index), (1, 0))

    def test_reorder_with_unknown_id_changes_nothing(self):
        missing = uuid.uuid4()
        response = self.client.put(
            '/api/v1/projects/reorder/',
            {'project_orders': [
                {'id': str(self.first.id), 'order_index': 5},
                {'id': str(missing), 'order_index': 0},
            ]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['details']['missing_ids'], [str(missing)])
        self.first.refresh_from_db()
        self.assertEqual(self.first.order_index, 0)

    def test_reorder_invalid_payload(self):
        response = self.client.put('/api/v1/projects/reorder/', {'project_orders': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.put(
            '/api/v1/projects/reorder/',
            {'project_orders': [{'id': str(self.first.id), 'order_index': -1}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_user_cannot_reorder(self):
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = client.put(
            '/api/v1/projects/reorder/',
            {'project_orders': [{'id': str(self.first.id), 'order_index': 1}]},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Project.objects.get(pk=self.first.pk).order_index, 0)
