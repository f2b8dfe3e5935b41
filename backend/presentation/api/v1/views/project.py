"""
Project Views.

API views for projects, project products, work stages and model links.
"""

import logging

from django.db import transaction
from django.db.models import Max, Prefetch

from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from domain.project.ordering import next_order_index
from domain.shared.exceptions import ConcurrencyException, EntityNotFoundException
from infrastructure.persistence.models import (
    Project,
    ProjectProduct,
    WorkStage,
    ModelLink,
)
from ..filters import ProjectFilterSet
from ..serializers.project import (
    ProjectListSerializer,
    ProjectDetailSerializer,
    ProjectWriteSerializer,
    ProjectProductSerializer,
    ProjectProductUpdateSerializer,
    WorkStageSerializer,
    ModelLinkSerializer,
)
from ...permissions import IsAdmin, IsAdminOrManager
from .base import BaseModelViewSet, HistoryViewMixin, ReorderMixin, OwnedProductMixin

logger = logging.getLogger(__name__)


class ProjectViewSet(HistoryViewMixin, ReorderMixin, BaseModelViewSet):
    """
    ViewSet for projects.

    Endpoints:
    - GET /projects/ - list (filters: status, query, from, to)
    - POST /projects/ - create (admin, manager)
    - GET /projects/{id}/ - project with products
    - PUT/PATCH /projects/{id}/ - update (admin, manager)
    - DELETE /projects/{id}/ - delete with products (admin)
    - PUT /projects/reorder/ - bulk reorder (admin, manager)
    - GET /projects/{id}/history/
    """

    queryset = Project.objects.select_related('owner', 'project_manager').prefetch_related(
        Prefetch(
            'products',
            queryset=ProjectProduct.objects.select_related('product').prefetch_related(
                'work_stages__nomenclature_item', 'work_stages__assignee'
            ).order_by('order_index', 'created_at')
        )
    )
    lookup_value_regex = '[0-9a-f-]{36}'

    serializer_classes = {
        'list': ProjectListSerializer,
        'retrieve': ProjectDetailSerializer,
        'default': ProjectWriteSerializer,
    }
    permission_classes_by_action = {
        'create': [IsAdminOrManager],
        'update': [IsAdminOrManager],
        'partial_update': [IsAdminOrManager],
        'reorder': [IsAdminOrManager],
        'destroy': [IsAdmin],
    }

    filterset_class = ProjectFilterSet
    ordering_fields = ['order_index', 'name', 'start_date', 'created_at']
    ordering = ['order_index', '-created_at']

    def perform_create(self, serializer):
        extra = {}
        if 'owner' not in serializer.validated_data:
            extra['owner'] = self.request.user
        if 'order_index' not in serializer.validated_data:
            extra['order_index'] = next_order_index(
                Project.objects.aggregate(m=Max('order_index'))['m']
            )
        serializer.save(
            created_by=self.request.user,
            updated_by=self.request.user,
            **extra
        )
        logger.info('Project "%s" created by %s', serializer.instance.name, self.request.user.email)

    def perform_destroy(self, instance):
        logger.info('Project %s deleted by %s', instance.pk, self.request.user.email)
        instance.delete()

    @action(detail=False, methods=['put'])
    def reorder(self, request):
        """Bulk reorder: {"project_orders": [{"id", "order_index"}]}."""
        return self.apply_reorder(request, Project.objects.all(), 'project_orders', 'Проект')


class ProjectProductViewSet(HistoryViewMixin, ReorderMixin, BaseModelViewSet):
    """
    ViewSet for products of a project.

    Endpoints:
    - GET|POST /projects/{project_id}/products/
    - GET|PUT|PATCH|DELETE /projects/{project_id}/products/{id}/
    - GET /projects/products/{id}/ - single product summary
    - GET /projects/products/{id}/history/
    - PUT /projects/products/reorder/

    Updates require the current `version`; a stale version is rejected with 409.
    """

    queryset = ProjectProduct.objects.select_related('project', 'product').prefetch_related(
        'work_stages__nomenclature_item', 'work_stages__assignee'
    )
    serializer_classes = {
        'update': ProjectProductUpdateSerializer,
        'partial_update': ProjectProductUpdateSerializer,
        'default': ProjectProductSerializer,
    }
    permission_classes_by_action = {
        'create': [IsAdminOrManager],
        'update': [IsAdminOrManager],
        'partial_update': [IsAdminOrManager],
        'destroy': [IsAdminOrManager],
        'reorder': [IsAdminOrManager],
    }
    ordering = ['order_index', 'created_at']

    def get_project(self):
        project_pk = self.kwargs.get('project_pk')
        project = Project.objects.filter(pk=project_pk).first()
        if project is None:
            raise EntityNotFoundException('Проект', project_pk, 'Проект не найден')
        return project

    def get_queryset(self):
        queryset = super().get_queryset()
        if 'project_pk' in self.kwargs:
            queryset = queryset.filter(project_id=self.kwargs['project_pk'])
        return queryset

    def list(self, request, *args, **kwargs):
        self.get_project()
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        project = self.get_project()
        extra = {}
        if 'order_index' not in serializer.validated_data:
            extra['order_index'] = next_order_index(
                project.products.aggregate(m=Max('order_index'))['m']
            )
        serializer.save(
            project=project,
            created_by=self.request.user,
            updated_by=self.request.user,
            **extra
        )
        logger.info('Product %s added to project %s', serializer.instance.pk, project.pk)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        if 'version' not in request.data:
            raise ValidationError({'version': ['Обязательное поле.']})

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            current_version = (
                ProjectProduct.objects.select_for_update()
                .values_list('version', flat=True)
                .get(pk=instance.pk)
            )
            if serializer.validated_data['version'] != current_version:
                raise ConcurrencyException('ProjectProduct', instance.pk, current_version)
            self.perform_update(serializer)

        logger.info('Product %s updated to version %s', instance.pk, serializer.instance.version)
        return Response(serializer.data)

    @action(detail=False, methods=['put'])
    def reorder(self, request):
        """Bulk reorder: {"product_orders": [{"id", "order_index"}]}."""
        return self.apply_reorder(request, ProjectProduct.objects.all(), 'product_orders', 'Изделие')


class WorkStageViewSet(ReorderMixin, BaseModelViewSet):
    """
    ViewSet for work stages of a project product.

    Endpoints:
    - GET|POST /projects/products/{product_id}/work-stages/
    - GET|PUT|PATCH|DELETE /projects/products/{product_id}/work-stages/{id}/
    - PUT /projects/products/{product_id}/work-stages/reorder/

    New stages are appended after the last one; `order_index` changes only
    through reorder.
    """

    queryset = WorkStage.objects.select_related('nomenclature_item', 'assignee')
    serializer_class = WorkStageSerializer
    permission_classes_by_action = {
        'create': [IsAdminOrManager],
        'update': [IsAdminOrManager],
        'partial_update': [IsAdminOrManager],
        'reorder': [IsAdminOrManager],
        'destroy': [IsAdmin],
    }
    ordering = ['order_index', 'created_at']

    def get_product(self):
        product_pk = self.kwargs.get('product_pk')
        product = ProjectProduct.objects.filter(pk=product_pk).first()
        if product is None:
            raise EntityNotFoundException('Изделие', product_pk, 'Изделие не найдено')
        return product

    def get_queryset(self):
        return super().get_queryset().filter(product_id=self.kwargs.get('product_pk'))

    def list(self, request, *args, **kwargs):
        self.get_product()
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        product = self.get_product()
        with transaction.atomic():
            current_max = product.work_stages.aggregate(m=Max('order_index'))['m']
            serializer.save(
                product=product,
                order_index=next_order_index(current_max),
                created_by=self.request.user,
                updated_by=self.request.user,
            )

    def reorder(self, request, *args, **kwargs):
        """Bulk reorder: {"stage_orders": [{"id", "order_index"}]}."""
        product = self.get_product()
        return self.apply_reorder(request, product.work_stages.all(), 'stage_orders', 'Этап работ')


class ModelLinkViewSet(OwnedProductMixin, BaseModelViewSet):
    """
    ViewSet for CAD model links of a project product.

    Endpoints:
    - GET|POST /products/{product_id}/model-links/
    - GET|PUT|PATCH|DELETE /model-links/{id}/

    Only the owner of the project sees its links.
    """

    serializer_class = ModelLinkSerializer
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_queryset(self):
        queryset = ModelLink.objects.filter(product__project__owner=self.request.user)
        if 'product_pk' in self.kwargs:
            queryset = queryset.filter(product_id=self.kwargs['product_pk'])
        return queryset.order_by('-created_at')

    def list(self, request, *args, **kwargs):
        self.get_owned_product(kwargs.get('product_pk'))
        return super().list(request, *args, **kwargs)

    def perform_create(self, serializer):
        product = self.get_owned_product(self.kwargs.get('product_pk'))
        serializer.save(
            product=product,
            created_by=self.request.user,
            updated_by=self.request.user,
        )
