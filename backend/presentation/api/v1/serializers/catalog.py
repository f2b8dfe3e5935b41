"""
Catalog Serializers.

Serializers for nomenclature groups, kinds, units and items.
"""

from rest_framework import serializers

from infrastructure.persistence.models import (
    NomenclatureGroup,
    NomenclatureKind,
    NomenclatureItem,
    NomenclatureTypeChoices,
    Unit,
)
from .base import BaseModelSerializer


# =============================================================================
# UNITS / KINDS
# =============================================================================

class UnitMinimalSerializer(BaseModelSerializer):
    class Meta:
        model = Unit
        fields = ['id', 'code', 'name']
        read_only_fields = fields


class UnitSerializer(BaseModelSerializer):
    """
    Unit of measure with aliases.

    `aliases` is written as a list of strings and read back as
    [{"alias", "normalized_alias"}].
    """

    aliases = serializers.ListField(
        child=serializers.CharField(max_length=100, allow_blank=True),
        required=False,
        write_only=True
    )
    alias_list = serializers.SerializerMethodField()

    class Meta:
        model = Unit
        fields = [
            'id', 'code', 'name', 'full_name', 'international_code',
            'aliases', 'alias_list',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_alias_list(self, obj):
        return [
            {'alias': a.alias, 'normalized_alias': a.normalized_alias}
            for a in obj.aliases.all()
        ]

    def create(self, validated_data):
        aliases = validated_data.pop('aliases', [])
        unit = super().create(validated_data)
        unit.set_aliases(aliases)
        return unit

    def update(self, instance, validated_data):
        aliases = validated_data.pop('aliases', None)
        name_changed = 'name' in validated_data and validated_data['name'] != instance.name
        unit = super().update(instance, validated_data)
        if aliases is not None:
            unit.set_aliases(aliases)
        elif name_changed:
            unit.set_aliases([a.alias for a in unit.aliases.all()])
        return unit


class NomenclatureKindSerializer(BaseModelSerializer):
    items_count = serializers.IntegerField(source='items.count', read_only=True)

    class Meta:
        model = NomenclatureKind
        fields = ['id', 'name', 'description', 'items_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'items_count', 'created_at', 'updated_at']


# =============================================================================
# NOMENCLATURE ITEMS
# =============================================================================

class NomenclatureMinimalSerializer(BaseModelSerializer):
    """Minimal nomenclature serializer for nested representations."""

    class Meta:
        model = NomenclatureItem
        fields = ['id', 'name', 'designation', 'article', 'code1c', 'price', 'type']
        read_only_fields = fields


class NomenclatureItemSerializer(BaseModelSerializer):
    type = serializers.ChoiceField(
        choices=NomenclatureTypeChoices.choices,
        default=NomenclatureTypeChoices.PRODUCT
    )
    type_display = serializers.CharField(source='get_type_display', read_only=True)
    group_name = serializers.CharField(source='group.name', read_only=True, default=None)
    kind_name = serializers.CharField(source='kind.name', read_only=True, default=None)
    unit_detail = UnitMinimalSerializer(source='unit', read_only=True)

    class Meta:
        model = NomenclatureItem
        fields = [
            'id', 'group', 'group_name', 'kind', 'kind_name',
            'unit', 'unit_detail',
            'designation', 'name', 'article', 'code1c', 'manufacturer',
            'description', 'price', 'type', 'type_display',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


# =============================================================================
# GROUPS
# =============================================================================

class NomenclatureGroupMinimalSerializer(BaseModelSerializer):
    class Meta:
        model = NomenclatureGroup
        fields = ['id', 'name', 'parent']
        read_only_fields = fields


class NomenclatureGroupSerializer(BaseModelSerializer):
    """Group with its items and direct subgroups."""

    items = NomenclatureMinimalSerializer(many=True, read_only=True)
    children = NomenclatureGroupMinimalSerializer(many=True, read_only=True)

    class Meta:
        model = NomenclatureGroup
        fields = [
            'id', 'name', 'description', 'parent',
            'items', 'children',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'items', 'children', 'created_at', 'updated_at']

    def validate_parent(self, value):
        if value is None or self.instance is None:
            return value
        node = value
        while node is not None:
            if node.pk == self.instance.pk:
                raise serializers.ValidationError('Группа не может быть вложена сама в себя')
            node = node.parent
        return value
