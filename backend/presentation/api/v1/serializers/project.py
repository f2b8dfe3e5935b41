"""
Project Serializers.

Serializers for projects, project products, work stages and model links.
"""

from rest_framework import serializers
from django.contrib.auth import get_user_model

from infrastructure.persistence.models import (
    Project,
    ProjectProduct,
    ProjectStatusChoices,
    WorkStage,
    ModelLink,
    Person,
)
from .base import BaseModelSerializer, UserMinimalSerializer
from .catalog import NomenclatureMinimalSerializer
from .directory import PersonMinimalSerializer, CounterpartyMinimalSerializer

User = get_user_model()


# =============================================================================
# WORK STAGES
# =============================================================================

class WorkStageSerializer(BaseModelSerializer):
    """Work stage; `order_index` is assigned on create and not editable."""

    nomenclature_item_detail = NomenclatureMinimalSerializer(
        source='nomenclature_item',
        read_only=True
    )
    assignee_detail = CounterpartyMinimalSerializer(
        source='assignee',
        read_only=True
    )

    class Meta:
        model = WorkStage
        fields = [
            'id', 'product',
            'nomenclature_item', 'nomenclature_item_detail',
            'sum', 'hours', 'start_date', 'end_date', 'duration', 'progress',
            'assignee', 'assignee_detail', 'order_index',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'product', 'order_index', 'created_at', 'updated_at']
        extra_kwargs = {
            'duration': {'min_value': 1},
            'progress': {'min_value': 0, 'max_value': 100},
        }

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'Дата окончания раньше даты начала'})
        return attrs


# =============================================================================
# PROJECT PRODUCTS
# =============================================================================

class ProjectProductSummarySerializer(BaseModelSerializer):
    """Short product representation used inside project lists."""

    product_detail = NomenclatureMinimalSerializer(source='product', read_only=True)

    class Meta:
        model = ProjectProduct
        fields = [
            'id', 'project', 'product', 'product_detail', 'serial_number',
            'quantity', 'product_sum', 'status', 'version', 'order_index',
        ]
        read_only_fields = fields


class ProjectProductSerializer(BaseModelSerializer):
    product_detail = NomenclatureMinimalSerializer(source='product', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    work_stages = WorkStageSerializer(many=True, read_only=True)

    class Meta:
        model = ProjectProduct
        fields = [
            'id', 'project', 'product', 'product_detail',
            'serial_number', 'quantity', 'product_sum',
            'status', 'status_display', 'version', 'order_index',
            'work_stages',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'project', 'version', 'work_stages', 'created_at', 'updated_at']
        extra_kwargs = {
            'quantity': {'min_value': 1},
            'order_index': {'min_value': 0, 'required': False},
        }


class ProjectProductUpdateSerializer(ProjectProductSerializer):
    """Update requires the version the client has seen."""

    version = serializers.IntegerField(min_value=1, write_only=True)

    class Meta(ProjectProductSerializer.Meta):
        read_only_fields = ['id', 'project', 'work_stages', 'created_at', 'updated_at']

    def to_representation(self, instance):
        return ProjectProductSerializer(instance, context=self.context).data


# =============================================================================
# PROJECTS
# =============================================================================

class ProjectListSerializer(BaseModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    owner_detail = UserMinimalSerializer(source='owner', read_only=True)
    project_manager_detail = PersonMinimalSerializer(source='project_manager', read_only=True)
    products = ProjectProductSummarySerializer(many=True, read_only=True)
    products_count = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            'id', 'name', 'status', 'status_display',
            'start_date', 'end_date', 'order_index',
            'owner', 'owner_detail',
            'project_manager', 'project_manager_detail',
            'products', 'products_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_products_count(self, obj):
        return len(obj.products.all())


class ProjectDetailSerializer(ProjectListSerializer):
    products = ProjectProductSerializer(many=True, read_only=True)

    class Meta(ProjectListSerializer.Meta):
        pass


class ProjectWriteSerializer(BaseModelSerializer):
    name = serializers.CharField(min_length=1, max_length=200)
    status = serializers.ChoiceField(
        choices=ProjectStatusChoices.choices,
        default=ProjectStatusChoices.PLANNED
    )
    owner = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(),
        required=False
    )
    project_manager = serializers.PrimaryKeyRelatedField(
        queryset=Person.objects.all(),
        required=False,
        allow_null=True
    )

    class Meta:
        model = Project
        fields = [
            'id', 'name', 'status', 'start_date', 'end_date',
            'owner', 'project_manager', 'order_index',
        ]
        read_only_fields = ['id']
        extra_kwargs = {
            'order_index': {'min_value': 0, 'required': False},
        }

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'Дата окончания раньше даты начала'})
        return attrs

    def to_representation(self, instance):
        return ProjectDetailSerializer(instance, context=self.context).data


# =============================================================================
# MODEL LINKS
# =============================================================================

class ModelLinkSerializer(BaseModelSerializer):
    class Meta:
        model = ModelLink
        fields = ['id', 'product', 'name', 'url', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'product', 'created_at', 'updated_at']
