"""
User Serializers.

Serializers for authentication and user management.
"""

from rest_framework import serializers
from django.contrib.auth import get_user_model

from infrastructure.persistence.models import Person, UserRoleChoices
from .base import BaseModelSerializer
from .directory import PersonMinimalSerializer

User = get_user_model()

PASSWORD_MIN_LENGTH = 6


def _validate_unique_email(value, instance=None):
    qs = User.objects.filter(email__iexact=value)
    if instance is not None:
        qs = qs.exclude(pk=instance.pk)
    if qs.exists():
        raise serializers.ValidationError('Пользователь с таким email уже существует')
    return value.lower()


class LoginSerializer(serializers.Serializer):
    """Login payload; credentials are checked in the view."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


class RegisterSerializer(serializers.Serializer):
    """Self-registration. The new account always gets the `user` role."""

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LENGTH,
        style={'input_type': 'password'}
    )

    def validate_email(self, value):
        return _validate_unique_email(value)

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            role=UserRoleChoices.USER,
        )


class UserProfileSerializer(BaseModelSerializer):
    """Serializer for the user's own profile and user lists."""

    role_display = serializers.CharField(source='get_role_display', read_only=True)
    person_detail = PersonMinimalSerializer(source='person', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'role', 'role_display', 'is_active',
            'person', 'person_detail', 'last_login',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class UserCreateSerializer(BaseModelSerializer):
    """Admin creates a user with any role."""

    password = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LENGTH,
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=UserRoleChoices.choices, default=UserRoleChoices.USER)
    person = serializers.PrimaryKeyRelatedField(
        queryset=Person.objects.all(),
        required=False,
        allow_null=True
    )

    class Meta:
        model = User
        fields = ['id', 'email', 'password', 'role', 'is_active', 'person']
        read_only_fields = ['id']

    def validate_email(self, value):
        return _validate_unique_email(value)

    def create(self, validated_data):
        validated_data.pop('created_by', None)
        validated_data.pop('updated_by', None)
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)

    def to_representation(self, instance):
        return UserProfileSerializer(instance, context=self.context).data


class UserUpdateSerializer(BaseModelSerializer):
    """Admin updates email, password, role, activity and linked person."""

    password = serializers.CharField(
        write_only=True,
        required=False,
        min_length=PASSWORD_MIN_LENGTH,
        style={'input_type': 'password'}
    )
    person = serializers.PrimaryKeyRelatedField(
        queryset=Person.objects.all(),
        required=False,
        allow_null=True
    )

    class Meta:
        model = User
        fields = ['id', 'email', 'password', 'role', 'is_active', 'person']
        read_only_fields = ['id']

    def validate_email(self, value):
        return _validate_unique_email(value, self.instance)

    def update(self, instance, validated_data):
        validated_data.pop('created_by', None)
        validated_data.pop('updated_by', None)
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance

    def to_representation(self, instance):
        return UserProfileSerializer(instance, context=self.context).data
