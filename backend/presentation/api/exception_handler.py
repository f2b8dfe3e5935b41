"""
API exception handler.

Every error response has the shape {"error": <message>, "details": <optional>}.
"""

import logging

from django.db import IntegrityError
from django.db.models.deletion import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from domain.shared.exceptions import DomainException

logger = logging.getLogger(__name__)

DOMAIN_STATUS_CODES = {
    'ENTITY_NOT_FOUND': status.HTTP_404_NOT_FOUND,
    'CONCURRENCY_ERROR': status.HTTP_409_CONFLICT,
    'BUSINESS_RULE_VIOLATION': status.HTTP_400_BAD_REQUEST,
    'ENTITY_LOCKED': status.HTTP_403_FORBIDDEN,
    'AUTHORIZATION_ERROR': status.HTTP_403_FORBIDDEN,
    'VALIDATION_ERROR': status.HTTP_400_BAD_REQUEST,
}


def _flatten_validation_errors(detail, prefix=''):
    """Turn DRF's nested error dict into [{"field": ..., "message": ...}]."""
    result = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            field = f'{prefix}.{key}' if prefix else str(key)
            result.extend(_flatten_validation_errors(value, field))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                field = f'{prefix}[{index}]' if prefix else str(index)
                result.extend(_flatten_validation_errors(value, field))
            else:
                result.append({'field': prefix or 'non_field_errors', 'message': str(value)})
    else:
        result.append({'field': prefix or 'non_field_errors', 'message': str(detail)})
    return result


def _domain_response(exc: DomainException):
    code = DOMAIN_STATUS_CODES.get(exc.code, status.HTTP_400_BAD_REQUEST)
    data = {'error': exc.message, 'code': exc.code}
    if exc.details:
        data['details'] = exc.details
    return Response(data, status=code)


def custom_exception_handler(exc, context):
    """
    Render domain, database and DRF exceptions in a single error format.
    Unhandled exceptions are logged and become 500.
    """
    if isinstance(exc, DomainException):
        set_rollback()
        return _domain_response(exc)

    if isinstance(exc, ProtectedError):
        set_rollback()
        protected = [str(o) for o in list(exc.protected_objects)[:5]]
        return Response(
            {
                'error': 'Нельзя удалить объект: на него есть ссылки в других документах.',
                'code': 'protected_error',
                'details': {'protected_objects_sample': protected},
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, IntegrityError):
        set_rollback()
        logger.warning('Integrity error: %s', exc)
        return Response(
            {
                'error': 'Нарушение целостности данных (возможны связанные записи).',
                'code': 'integrity_error',
            },
            status=status.HTTP_409_CONFLICT,
        )

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            'Unhandled API error in %s', view.__class__.__name__ if view else 'unknown view'
        )
        set_rollback()
        return Response(
            {'error': 'Внутренняя ошибка сервера'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            'error': 'Неверные данные',
            'details': _flatten_validation_errors(exc.detail),
        }
    elif isinstance(exc, Http404):
        response.data = {'error': 'Не найдено'}
    elif isinstance(response.data, dict) and 'detail' in response.data:
        data = {'error': str(response.data['detail'])}
        code = getattr(response.data['detail'], 'code', None)
        if code:
            data['code'] = code
        response.data = data

    return response
