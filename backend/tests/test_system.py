"""
Tests for the health endpoint, management commands and the API
exception handler.
"""
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db.models.deletion import ProtectedError
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from domain.shared.exceptions import EntityLockedException
from infrastructure.persistence.models import NomenclatureKind, Unit, User
from presentation.api.exception_handler import custom_exception_handler, _flatten_validation_errors
from presentation.api.v1.serializers.project import ProjectListSerializer, ProjectWriteSerializer
from presentation.api.v1.views.directory import PersonViewSet
from presentation.api.v1.views.project import ProjectViewSet


class HealthTests(TestCase):

    def test_health_is_public(self):
        response = APIClient().get('/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ok')
        self.assertIn('time', response.data)


class ManagementCommandTests(TestCase):

    def test_create_admin(self):
        out = StringIO()
        call_command('create_admin', '--email', 'Root@Test.com', '--password', 'secret123', stdout=out)
        user = User.objects.get(email='root@test.com')
        self.assertEqual(user.role, 'admin')
        self.assertTrue(user.is_active)
        self.assertTrue(user.check_password('secret123'))

    def test_create_admin_resets_existing(self):
        call_command('create_admin', '--email', 'root@test.com', '--password', 'secret123', stdout=StringIO())
        User.objects.filter(email='root@test.com').update(is_active=False, role='user')
        call_command('create_admin', '--email', 'root@test.com', '--password', 'another1', stdout=StringIO())
        user = User.objects.get(email='root@test.com')
        self.assertEqual(User.objects.count(), 1)
        self.assertEqual(user.role, 'admin')
        self.assertTrue(user.is_active)
        self.assertTrue(user.check_password('another1'))

    def test_create_admin_short_password(self):
        with self.assertRaises(CommandError):
            call_command('create_admin', '--email', 'root@test.com', '--password', '123', stdout=StringIO())

    def test_init_system_is_idempotent(self):
        call_command('init_system', '--skip-admin', stdout=StringIO())
        call_command('init_system', '--skip-admin', stdout=StringIO())
        self.assertEqual(Unit.objects.count(), 6)
        self.assertEqual(NomenclatureKind.objects.count(), 5)
        self.assertFalse(User.objects.exists())
        pcs = Unit.objects.get(code='796')
        self.assertIn('штука', set(pcs.aliases.values_list('normalized_alias', flat=True)))

    def test_init_system_creates_admin(self):
        call_command(
            'init_system', '--admin-email', 'boss@test.com', '--admin-password', 'secret123',
            stdout=StringIO()
        )
        self.assertTrue(User.objects.filter(email='boss@test.com', role='admin').exists())


class ExceptionHandlerTests(SimpleTestCase):

    def test_domain_exception(self):
        response = custom_exception_handler(EntityLockedException('Спецификация', 'x'), {})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'ENTITY_LOCKED')
        self.assertIn('error', response.data)

    def test_protected_error(self):
        response = custom_exception_handler(ProtectedError('protected', {'a', 'b'}), {})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(len(response.data['details']['protected_objects_sample']), 2)

    def test_validation_error(self):
        response = custom_exception_handler(ValidationError({'name': ['Обязательное поле.']}), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['details'], [{'field': 'name', 'message': 'Обязательное поле.'}])

    def test_unhandled_error_is_500(self):
        with self.assertLogs('presentation', level='ERROR'):
            response = custom_exception_handler(RuntimeError('boom'), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Внутренняя ошибка сервера'})

    def test_flatten_nested_errors(self):
        errors = _flatten_validation_errors({'rows': [{'price': ['bad']}], 'name': 'x'})
        self.assertEqual(errors, [
            {'field': 'rows[0].price', 'message': 'bad'},
            {'field': 'name', 'message': 'x'},
        ])


class SerializerLookupTests(SimpleTestCase):

    def _serializer_for(self, viewset_class, action):
        view = viewset_class()
        view.action = action
        return view.get_serializer_class()

    def test_action_specific_serializer(self):
        self.assertIs(self._serializer_for(ProjectViewSet, 'list'), ProjectListSerializer)

    def test_default_without_serializer_class(self):
        self.assertIsNone(getattr(ProjectViewSet, 'serializer_class', None))
        self.assertIs(self._serializer_for(ProjectViewSet, 'reorder'), ProjectWriteSerializer)
        self.assertIs(self._serializer_for(ProjectViewSet, 'partial_update'), ProjectWriteSerializer)

    def test_falls_back_to_serializer_class(self):
        self.assertIs(self._serializer_for(PersonViewSet, 'list'), PersonViewSet.serializer_class)
