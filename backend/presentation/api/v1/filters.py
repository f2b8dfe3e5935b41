"""
FilterSets for API list endpoints.
"""

import django_filters
from django.db.models import Q

from infrastructure.persistence.models import (
    Person,
    Counterparty,
    NomenclatureItem,
    Project,
)


class PersonFilterSet(django_filters.FilterSet):
    query = django_filters.CharFilter(method='filter_query')

    class Meta:
        model = Person
        fields = ['is_project_manager', 'is_active']

    def filter_query(self, queryset, name, value):
        return queryset.filter(
            Q(last_name__icontains=value)
            | Q(first_name__icontains=value)
            | Q(middle_name__icontains=value)
        )


class CounterpartyFilterSet(django_filters.FilterSet):
    query = django_filters.CharFilter(method='filter_query')

    class Meta:
        model = Counterparty
        fields = ['is_supplier', 'is_manufacturer', 'is_contractor', 'is_active']

    def filter_query(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value)
            | Q(full_name__icontains=value)
            | Q(inn__icontains=value)
        )


class NomenclatureFilterSet(django_filters.FilterSet):
    """Filters for nomenclature items; text filters are case-insensitive contains."""

    article = django_filters.CharFilter(field_name='article', lookup_expr='icontains')
    code1c = django_filters.CharFilter(field_name='code1c', lookup_expr='icontains')
    name = django_filters.CharFilter(field_name='name', lookup_expr='icontains')

    class Meta:
        model = NomenclatureItem
        fields = ['group', 'type', 'kind', 'article', 'code1c', 'name']


class ProjectFilterSet(django_filters.FilterSet):
    query = django_filters.CharFilter(field_name='name', lookup_expr='icontains')

    class Meta:
        model = Project
        fields = ['status', 'owner', 'project_manager']

    @classmethod
    def get_filters(cls):
        # "from" is a keyword, so the date range filters cannot be class attributes
        filters = super().get_filters()
        filters['from'] = django_filters.DateFilter(field_name='start_date', lookup_expr='gte')
        filters['to'] = django_filters.DateFilter(field_name='start_date', lookup_expr='lte')
        return filters
