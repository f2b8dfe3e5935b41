"""
Migrations Views.

Admin endpoints that run Django management commands for the schema
and report their output.
"""

import logging
import re
from io import StringIO

from django.conf import settings
from django.core.management import call_command
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from domain.shared.exceptions import ValidationException
from ...permissions import IsAdmin

logger = logging.getLogger(__name__)

MIGRATION_NAME_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


class MigrationsViewSet(viewsets.ViewSet):
    """
    ViewSet for schema migrations.

    Endpoints:
    - POST /migrations/deploy/ - apply pending migrations
    - GET /migrations/status/ - list migrations and their state
    - POST /migrations/create/ - create a migration {name}
    - POST /migrations/reset/ - flush data and re-apply {confirm: true}
    """

    permission_classes = [IsAdmin]

    def _run(self, message, commands):
        stdout = StringIO()
        stderr = StringIO()
        try:
            for args, options in commands:
                call_command(*args, stdout=stdout, stderr=stderr, **options)
        except Exception as exc:
            logger.exception('Management command %s failed', commands[-1][0][0])
            return Response(
                {
                    'error': 'Ошибка выполнения команды',
                    'details': {
                        'message': str(exc),
                        'output': stdout.getvalue(),
                    },
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        warnings = [line for line in stderr.getvalue().splitlines() if line.strip()]
        return Response({
            'message': message,
            'output': stdout.getvalue(),
            'warnings': warnings,
        })

    @action(detail=False, methods=['post'])
    def deploy(self, request):
        logger.info('Migrations deploy requested by %s', request.user.email)
        return self._run('Миграции применены', [
            (('migrate',), {'interactive': False}),
        ])

    @action(detail=False, methods=['get'], url_path='status')
    def migration_status(self, request):
        return self._run('Состояние миграций', [
            (('showmigrations',), {}),
        ])

    @action(detail=False, methods=['post'], url_path='create')
    def create_migration(self, request):
        name = request.data.get('name')
        if not name or not isinstance(name, str) or not MIGRATION_NAME_RE.match(name):
            raise ValidationException(
                'Имя миграции должно быть идентификатором (латиница, цифры, _)',
                field='name',
                value=name,
            )
        logger.info('Migration "%s" requested by %s', name, request.user.email)
        return self._run('Миграция создана', [
            (('makemigrations', settings.MIGRATIONS_API_APP_LABEL), {'name': name}),
        ])

    @action(detail=False, methods=['post'])
    def reset(self, request):
        if request.data.get('confirm') is not True:
            raise ValidationException(
                'Для сброса базы данных требуется подтверждение (confirm: true)',
                field='confirm',
            )
        logger.warning('Database reset requested by %s', request.user.email)
        return self._run('База данных сброшена', [
            (('flush',), {'interactive': False}),
            (('migrate',), {'interactive': False}),
        ])
