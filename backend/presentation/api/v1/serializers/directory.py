"""
Directory Serializers.

Serializers for persons and counterparties.
"""

from rest_framework import serializers

from infrastructure.persistence.models import Person, Counterparty
from .base import BaseModelSerializer


class PersonMinimalSerializer(BaseModelSerializer):
    """Minimal person serializer for nested representations."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Person
        fields = ['id', 'last_name', 'first_name', 'middle_name', 'full_name', 'position']
        read_only_fields = fields


class PersonSerializer(BaseModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Person
        fields = [
            'id', 'last_name', 'first_name', 'middle_name', 'full_name',
            'position', 'phone', 'email',
            'is_project_manager', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'full_name', 'created_at', 'updated_at']


class CounterpartyMinimalSerializer(BaseModelSerializer):
    """Minimal counterparty serializer for nested representations."""

    class Meta:
        model = Counterparty
        fields = ['id', 'name', 'inn']
        read_only_fields = fields


class CounterpartySerializer(BaseModelSerializer):

    class Meta:
        model = Counterparty
        fields = [
            'id', 'name', 'full_name', 'inn', 'kpp', 'legal_address',
            'contact_name', 'phone', 'email',
            'is_supplier', 'is_manufacturer', 'is_contractor', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_inn(self, value):
        if value and (not value.isdigit() or len(value) not in (10, 12)):
            raise serializers.ValidationError('ИНН должен содержать 10 или 12 цифр')
        return value

    def validate_kpp(self, value):
        if value and (not value.isdigit() or len(value) != 9):
            raise serializers.ValidationError('КПП должен содержать 9 цифр')
        return value
