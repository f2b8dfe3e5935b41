"""
API v1 URL Configuration.

All API endpoints for version 1. Nested resources are mapped explicitly
and listed before the router so they take precedence.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views.users import AuthViewSet, UserViewSet
from .views.directory import PersonViewSet, CounterpartyViewSet
from .views.catalog import (
    NomenclatureGroupViewSet,
    NomenclatureItemViewSet,
    NomenclatureKindViewSet,
    UnitViewSet,
)
from .views.project import (
    ProjectViewSet,
    ProjectProductViewSet,
    WorkStageViewSet,
    ModelLinkViewSet,
)
from .views.specification import (
    ProductSpecificationViewSet,
    SpecificationViewSet,
)
from .views.migrations import MigrationsViewSet

app_name = 'api_v1'

# Create router
router = DefaultRouter()

# Catalog (registered before anything matching "nomenclature/")
router.register(r'nomenclature/groups', NomenclatureGroupViewSet, basename='nomenclature-groups')
router.register(r'nomenclature/items', NomenclatureItemViewSet, basename='nomenclature-items')
router.register(r'nomenclature-kinds', NomenclatureKindViewSet, basename='nomenclature-kinds')
router.register(r'units', UnitViewSet, basename='units')

# Auth & Users
router.register(r'auth', AuthViewSet, basename='auth')
router.register(r'users', UserViewSet, basename='users')

# Directories
router.register(r'persons', PersonViewSet, basename='persons')
router.register(r'counterparties', CounterpartyViewSet, basename='counterparties')

# Projects
router.register(r'projects', ProjectViewSet, basename='projects')

# Schema
router.register(r'migrations', MigrationsViewSet, basename='migrations')

DETAIL_ACTIONS = {
    'get': 'retrieve',
    'put': 'update',
    'patch': 'partial_update',
    'delete': 'destroy',
}
LIST_ACTIONS = {'get': 'list', 'post': 'create'}

urlpatterns = [
    # Nomenclature
    path(
        'nomenclature/',
        NomenclatureItemViewSet.as_view({'get': 'list'}),
        name='nomenclature-list'
    ),
    path(
        'nomenclature/find/',
        NomenclatureItemViewSet.as_view({'get': 'find'}),
        name='nomenclature-find'
    ),

    # Project products
    path(
        'projects/products/reorder/',
        ProjectProductViewSet.as_view({'put': 'reorder'}),
        name='project-products-reorder'
    ),
    path(
        'projects/products/<uuid:pk>/',
        ProjectProductViewSet.as_view({'get': 'retrieve'}),
        name='project-product-summary'
    ),
    path(
        'projects/products/<uuid:pk>/history/',
        ProjectProductViewSet.as_view({'get': 'history'}),
        name='project-product-history'
    ),
    path(
        'projects/<uuid:project_pk>/products/',
        ProjectProductViewSet.as_view(LIST_ACTIONS),
        name='project-products-list'
    ),
    path(
        'projects/<uuid:project_pk>/products/<uuid:pk>/',
        ProjectProductViewSet.as_view(DETAIL_ACTIONS),
        name='project-products-detail'
    ),

    # Work stages
    path(
        'projects/products/<uuid:product_pk>/work-stages/',
        WorkStageViewSet.as_view(LIST_ACTIONS),
        name='work-stages-list'
    ),
    path(
        'projects/products/<uuid:product_pk>/work-stages/reorder/',
        WorkStageViewSet.as_view({'put': 'reorder'}),
        name='work-stages-reorder'
    ),
    path(
        'projects/products/<uuid:product_pk>/work-stages/<uuid:pk>/',
        WorkStageViewSet.as_view(DETAIL_ACTIONS),
        name='work-stages-detail'
    ),

    # Product specifications
    path(
        'products/<uuid:product_pk>/specifications/',
        ProductSpecificationViewSet.as_view(LIST_ACTIONS),
        name='product-specifications-list'
    ),
    path(
        'product-specifications/<uuid:pk>/',
        ProductSpecificationViewSet.as_view(DETAIL_ACTIONS),
        name='product-specifications-detail'
    ),
    path(
        'product-specifications/<uuid:pk>/copy/',
        ProductSpecificationViewSet.as_view({'post': 'copy'}),
        name='product-specifications-copy'
    ),
    path(
        'product-specifications/<uuid:pk>/history/',
        ProductSpecificationViewSet.as_view({'get': 'history'}),
        name='product-specifications-history'
    ),
    path(
        'product-specifications/<uuid:pk>/import-excel/preview/',
        ProductSpecificationViewSet.as_view({'post': 'import_excel_preview'}),
        name='product-specifications-import-preview'
    ),
    path(
        'product-specifications/<uuid:pk>/import-excel/',
        ProductSpecificationViewSet.as_view({'post': 'import_excel'}),
        name='product-specifications-import'
    ),

    # Specification rows
    path(
        'product-specifications/<uuid:spec_pk>/specifications/',
        SpecificationViewSet.as_view(LIST_ACTIONS),
        name='specifications-list'
    ),
    path(
        'specifications/reorder/',
        SpecificationViewSet.as_view({'put': 'reorder'}),
        name='specifications-reorder'
    ),
    path(
        'specifications/<uuid:pk>/',
        SpecificationViewSet.as_view(DETAIL_ACTIONS),
        name='specifications-detail'
    ),

    # Model links
    path(
        'products/<uuid:product_pk>/model-links/',
        ModelLinkViewSet.as_view(LIST_ACTIONS),
        name='model-links-list'
    ),
    path(
        'model-links/<uuid:pk>/',
        ModelLinkViewSet.as_view(DETAIL_ACTIONS),
        name='model-links-detail'
    ),

    path('', include(router.urls)),
]
