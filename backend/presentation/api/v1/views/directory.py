"""
Directory Views.

CRUD for persons and counterparties.
"""

from infrastructure.persistence.models import Person, Counterparty
from ..filters import PersonFilterSet, CounterpartyFilterSet
from ..serializers.directory import PersonSerializer, CounterpartySerializer
from .base import BaseModelViewSet


class PersonViewSet(BaseModelViewSet):
    """
    ViewSet for persons (employees, project managers).

    Filters: is_project_manager, is_active, query (last/first/middle name).
    """

    queryset = Person.objects.all()
    serializer_class = PersonSerializer
    filterset_class = PersonFilterSet
    ordering_fields = ['last_name', 'first_name', 'created_at']
    ordering = ['last_name', 'first_name']


class CounterpartyViewSet(BaseModelViewSet):
    """
    ViewSet for counterparties (suppliers, manufacturers, contractors).

    Filters: is_supplier, is_manufacturer, is_contractor, is_active,
    query (name / full name / INN).
    """

    queryset = Counterparty.objects.all()
    serializer_class = CounterpartySerializer
    filterset_class = CounterpartyFilterSet
    ordering_fields = ['name', 'created_at']
    ordering = ['name']
