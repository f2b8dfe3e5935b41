"""
Specification Serializers.

Serializers for product specifications and their rows.
"""

from rest_framework import serializers

from infrastructure.persistence.models import ProductSpecification, Specification
from .base import BaseModelSerializer
from .catalog import NomenclatureMinimalSerializer, UnitMinimalSerializer


class ProductSpecificationSerializer(BaseModelSerializer):
    rows_count = serializers.IntegerField(source='rows.count', read_only=True)

    class Meta:
        model = ProductSpecification
        fields = [
            'id', 'product', 'name', 'description', 'version',
            'is_locked', 'total_sum', 'rows_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'product', 'is_locked', 'total_sum', 'rows_count',
            'created_at', 'updated_at',
        ]
        extra_kwargs = {
            'version': {'min_value': 1},
        }


class SpecificationSerializer(BaseModelSerializer):
    """
    Specification row.

    On create, blank name/designation/price/description are taken from
    the nomenclature item; `total_price` defaults to price * quantity.
    """

    nomenclature_item_detail = NomenclatureMinimalSerializer(
        source='nomenclature_item',
        read_only=True
    )
    unit_detail = UnitMinimalSerializer(source='unit', read_only=True)

    class Meta:
        model = Specification
        fields = [
            'id', 'product_specification',
            'nomenclature_item', 'nomenclature_item_detail',
            'designation', 'name', 'description',
            'quantity', 'unit', 'unit_detail',
            'price', 'total_price', 'order_index',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'product_specification', 'order_index',
            'created_at', 'updated_at',
        ]
        extra_kwargs = {
            'name': {'required': False, 'allow_blank': True},
            'quantity': {'min_value': 0},
            'price': {'min_value': 0},
            'total_price': {'min_value': 0},
        }

    def validate(self, attrs):
        if self.instance is None:
            item = attrs.get('nomenclature_item')
            if item is not None:
                if not attrs.get('name'):
                    attrs['name'] = item.name
                if not attrs.get('designation'):
                    attrs['designation'] = item.designation
                if attrs.get('price') is None:
                    attrs['price'] = item.price
                if not attrs.get('description'):
                    attrs['description'] = item.description
                if attrs.get('unit') is None and item.unit_id:
                    attrs['unit'] = item.unit
            if not attrs.get('name'):
                raise serializers.ValidationError({'name': 'Обязательное поле.'})
            if attrs.get('total_price') is None:
                attrs['total_price'] = Specification.calculate_total(
                    attrs.get('price'), attrs.get('quantity', Specification._meta.get_field('quantity').default)
                )
        else:
            if 'name' in attrs and not attrs['name']:
                raise serializers.ValidationError({'name': 'Обязательное поле.'})
            if 'total_price' not in attrs and ('price' in attrs or 'quantity' in attrs):
                attrs['total_price'] = Specification.calculate_total(
                    attrs.get('price', self.instance.price),
                    attrs.get('quantity', self.instance.quantity),
                )
        return attrs
