"""
Base Views.

Common view mixins and base classes.
"""

import logging

from django.db import transaction
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from domain.project.ordering import parse_order_entries, find_missing_ids
from domain.shared.exceptions import EntitiesNotFoundException, EntityNotFoundException

logger = logging.getLogger(__name__)


class AuditViewMixin:
    """
    Mixin that adds audit fields on create/update.
    """

    def perform_create(self, serializer):
        """Set created_by and updated_by on create."""
        serializer.save(
            created_by=self.request.user,
            updated_by=self.request.user
        )

    def perform_update(self, serializer):
        """Set updated_by on update."""
        serializer.save(updated_by=self.request.user)


class HistoryViewMixin:
    """
    Mixin for accessing object history.
    """

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        """Get object history (last 50 entries)."""
        obj = self.get_object()

        history = obj.history.select_related('history_user').all()[:50]
        data = [{
            'id': h.history_id,
            'date': h.history_date,
            'user': str(h.history_user) if h.history_user else None,
            'type': h.history_type,
            'changes': h.history_change_reason,
        } for h in history]

        return Response(data)


class ReorderMixin:
    """
    Bulk reorder: validates {"<field>": [{"id", "order_index"}]}, checks
    that every id exists and applies all updates in one transaction.
    """

    def apply_reorder(self, request, queryset, field, entity_type):
        orders = parse_order_entries(request.data.get(field), field)
        ids = list(orders.keys())

        with transaction.atomic():
            found = list(queryset.filter(id__in=ids).values_list('id', flat=True))
            missing = find_missing_ids(ids, found)
            if missing:
                raise EntitiesNotFoundException(entity_type, missing)
            model = queryset.model
            list(model.objects.select_for_update().filter(id__in=ids).values_list('id', flat=True))
            for obj_id, order_index in orders.items():
                model.objects.filter(id=obj_id).update(order_index=order_index)

        logger.info('Reordered %s %s rows', len(ids), entity_type)
        return Response({'updated': len(ids)})


class OwnedProductMixin:
    """
    Scopes nested resources to project products whose project is owned
    by the caller. Anything outside that scope is reported as missing.
    """

    def get_owned_product(self, product_pk):
        from infrastructure.persistence.models import ProjectProduct

        product = ProjectProduct.objects.filter(
            pk=product_pk,
            project__owner=self.request.user,
        ).select_related('project').first()
        if product is None:
            raise EntityNotFoundException('Изделие', product_pk, 'Изделие не найдено')
        return product


class BaseModelViewSet(
    AuditViewMixin,
    viewsets.ModelViewSet
):
    """
    Base viewset with common functionality.
    """
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        """
        Return different serializers for list/retrieve actions.

        Override `serializer_classes` dict in subclass:
        serializer_classes = {
            'list': ListSerializer,
            'retrieve': DetailSerializer,
            'default': DetailSerializer,
        }
        """
        serializer_classes = getattr(self, 'serializer_classes', {})
        return (
            serializer_classes.get(self.action)
            or serializer_classes.get('default')
            or super().get_serializer_class()
        )

    def get_permissions(self):
        """
        Per-action permissions.

        Override `permission_classes_by_action` dict in subclass:
        permission_classes_by_action = {
            'create': [IsAdminOrManager],
            'destroy': [IsAdmin],
        }
        """
        by_action = getattr(self, 'permission_classes_by_action', {})
        classes = by_action.get(self.action, self.permission_classes)
        return [permission() for permission in classes]
