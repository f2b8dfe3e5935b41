"""
Catalog Views.

API views for nomenclature groups, items, kinds and units of measure.
"""

import logging

from django.db import transaction
from rest_framework.response import Response

from domain.shared.exceptions import BusinessRuleViolationException, ValidationException
from infrastructure.persistence.models import (
    NomenclatureGroup,
    NomenclatureItem,
    NomenclatureKind,
    Unit,
)
from ..filters import NomenclatureFilterSet
from ..serializers.catalog import (
    NomenclatureGroupSerializer,
    NomenclatureItemSerializer,
    NomenclatureKindSerializer,
    UnitSerializer,
)
from ...permissions import IsAdmin, IsAdminOrManager
from .base import BaseModelViewSet, HistoryViewMixin

logger = logging.getLogger(__name__)

UUID_REGEX = '[0-9a-f-]{36}'

CATALOG_WRITE_PERMISSIONS = {
    'create': [IsAdminOrManager],
    'update': [IsAdminOrManager],
    'partial_update': [IsAdminOrManager],
    'destroy': [IsAdmin],
}


class NomenclatureGroupViewSet(BaseModelViewSet):
    """
    ViewSet for nomenclature groups.

    A group holding items or subgroups cannot be deleted.
    """

    queryset = NomenclatureGroup.objects.prefetch_related('items', 'children').order_by('name')
    serializer_class = NomenclatureGroupSerializer
    permission_classes_by_action = CATALOG_WRITE_PERMISSIONS
    lookup_value_regex = UUID_REGEX
    pagination_class = None
    filterset_fields = ['parent']
    search_fields = ['name']

    def perform_destroy(self, instance):
        if instance.items.exists():
            raise BusinessRuleViolationException(
                'group_not_empty',
                'Невозможно удалить группу, содержащую позиции'
            )
        if instance.children.exists():
            raise BusinessRuleViolationException(
                'group_has_children',
                'Невозможно удалить группу, содержащую подгруппы'
            )
        instance.delete()
        logger.info('Nomenclature group %s deleted', instance.pk)


class NomenclatureItemViewSet(HistoryViewMixin, BaseModelViewSet):
    """
    ViewSet for nomenclature items.

    Endpoints:
    - GET /nomenclature/ - list with filters group, type, article, code1c, name
    - GET /nomenclature/find/ - exact (case-insensitive) lookup, first match or null
    - GET|POST /nomenclature/items/
    - GET|PUT|PATCH|DELETE /nomenclature/items/{id}/
    - GET /nomenclature/items/{id}/history/
    """

    queryset = NomenclatureItem.objects.select_related('group', 'kind', 'unit')
    serializer_class = NomenclatureItemSerializer
    permission_classes_by_action = CATALOG_WRITE_PERMISSIONS
    lookup_value_regex = UUID_REGEX
    filterset_class = NomenclatureFilterSet
    search_fields = ['name', 'designation', 'article', 'code1c']
    ordering_fields = ['name', 'article', 'price', 'created_at']
    ordering = ['name']

    FIND_FIELDS = ('article', 'code1c', 'designation', 'name')

    def find(self, request):
        """Find the first item matching every given field exactly (case-insensitive)."""
        criteria = {
            f'{field}__iexact': request.query_params[field]
            for field in self.FIND_FIELDS
            if request.query_params.get(field)
        }
        if not criteria:
            raise ValidationException('Необходимо указать хотя бы одно поле для поиска')

        item = self.get_queryset().filter(**criteria).order_by('created_at').first()
        if item is None:
            return Response(None)
        return Response(self.get_serializer(item).data)

    def perform_destroy(self, instance):
        usage = instance.get_usage()
        if any(usage.values()):
            labels = {
                'specifications': 'спецификациях',
                'project_products': 'изделиях проектов',
                'work_stages': 'этапах работ',
            }
            used_in = ', '.join(labels[key] for key, count in usage.items() if count)
            raise BusinessRuleViolationException(
                'nomenclature_in_use',
                f'Невозможно удалить позицию номенклатуры: она используется в {used_in}',
                details={'usage': usage},
            )
        instance.delete()
        logger.info('Nomenclature item %s deleted', instance.pk)


class NomenclatureKindViewSet(BaseModelViewSet):
    queryset = NomenclatureKind.objects.all()
    serializer_class = NomenclatureKindSerializer
    permission_classes_by_action = CATALOG_WRITE_PERMISSIONS
    pagination_class = None
    search_fields = ['name']
    ordering = ['name']


class UnitViewSet(BaseModelViewSet):
    """
    ViewSet for units of measure.

    `aliases` are normalised; the unit name is always one of them.
    """

    queryset = Unit.objects.prefetch_related('aliases')
    serializer_class = UnitSerializer
    permission_classes_by_action = CATALOG_WRITE_PERMISSIONS
    pagination_class = None
    search_fields = ['code', 'name', 'full_name', 'aliases__normalized_alias']
    ordering = ['name']

    def perform_create(self, serializer):
        with transaction.atomic():
            super().perform_create(serializer)

    def perform_update(self, serializer):
        with transaction.atomic():
            super().perform_update(serializer)
