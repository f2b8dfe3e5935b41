"""
Base Serializers.

Common serializer base classes.
"""

from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer with common configuration.
    """

    class Meta:
        abstract = True
        read_only_fields = ['id', 'created_at', 'updated_at']


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user serializer for nested representations."""

    class Meta:
        model = User
        fields = ['id', 'email', 'role']
        read_only_fields = fields
