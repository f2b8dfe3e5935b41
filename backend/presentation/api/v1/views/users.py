"""
User Views.

API views for authentication and user management.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from domain.shared.exceptions import BusinessRuleViolationException
from infrastructure.persistence.models import UserRoleChoices
from ..serializers.users import (
    LoginSerializer,
    RegisterSerializer,
    UserProfileSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
)
from ...permissions import IsAdmin
from .base import BaseModelViewSet

logger = logging.getLogger(__name__)

User = get_user_model()


def issue_tokens(user):
    """Token pair with the user's role as an extra claim."""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return {
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }


class AuthViewSet(viewsets.GenericViewSet):
    """
    ViewSet for authentication.

    Endpoints:
    - POST /auth/login/ - login and get JWT tokens
    - POST /auth/register/ - self-registration (role "user")
    - POST /auth/refresh/ - refresh access token
    - POST /auth/logout/ - logout (blacklist refresh token)
    - GET /auth/me/ - get current user profile
    """

    permission_classes = [AllowAny]
    serializer_class = LoginSerializer

    @action(detail=False, methods=['post'], permission_classes=[AllowAny])
    def login(self, request):
        """Login and get JWT tokens."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data['email']
        password = serializer.validated_data['password']

        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.check_password(password):
            logger.info('Failed login attempt for %s', email)
            raise AuthenticationFailed('Неверный email или пароль')
        if not user.is_active:
            raise AuthenticationFailed('Учетная запись отключена')

        tokens = issue_tokens(user)

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

        logger.info('User %s logged in', user.email)
        return Response({
            **tokens,
            'user': UserProfileSerializer(user).data,
        })

    @action(detail=False, methods=['post'], permission_classes=[AllowAny])
    def register(self, request):
        """Register a new account with the `user` role."""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info('User %s registered', user.email)
        return Response(
            {'user': UserProfileSerializer(user).data},
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['post'], permission_classes=[AllowAny])
    def refresh(self, request):
        """Refresh access token."""
        serializer = TokenRefreshSerializer(data=request.data)

        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise AuthenticationFailed(str(e), code='token_not_valid')

        return Response(serializer.validated_data, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'], permission_classes=[IsAuthenticated])
    def logout(self, request):
        """Logout and blacklist refresh token."""
        refresh_token = request.data.get('refresh')
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.info('Logout with invalid refresh token: %s', e)

        return Response({'message': 'Выход выполнен успешно'})

    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def me(self, request):
        """Get current user profile."""
        if not request.user.is_active:
            raise AuthenticationFailed('Учетная запись отключена')
        serializer = UserProfileSerializer(request.user)
        return Response(serializer.data)


class UserViewSet(BaseModelViewSet):
    """
    ViewSet for user management.

    Endpoints:
    - GET /users/ - list all users
    - POST /users/ - create user (admin)
    - GET /users/{id}/ - get user details
    - PUT/PATCH /users/{id}/ - update user (admin)
    - DELETE /users/{id}/ - delete user (admin)

    At least one active administrator must always remain.
    """

    queryset = User.objects.select_related('person').order_by('-created_at')
    lookup_value_regex = '[0-9a-f-]{36}'

    serializer_classes = {
        'list': UserProfileSerializer,
        'retrieve': UserProfileSerializer,
        'create': UserCreateSerializer,
        'default': UserUpdateSerializer,
    }
    permission_classes_by_action = {
        'create': [IsAdmin],
        'update': [IsAdmin],
        'partial_update': [IsAdmin],
        'destroy': [IsAdmin],
    }

    search_fields = ['email', 'person__last_name', 'person__first_name']
    filterset_fields = ['role', 'is_active']
    ordering_fields = ['email', 'created_at', 'last_login']

    def perform_update(self, serializer):
        user = serializer.instance
        new_role = serializer.validated_data.get('role', user.role)
        new_active = serializer.validated_data.get('is_active', user.is_active)
        demoted = new_role != UserRoleChoices.ADMIN or not new_active

        with transaction.atomic():
            if demoted and user.is_last_active_admin():
                raise BusinessRuleViolationException(
                    'last_admin',
                    'Нельзя понизить роль или отключить последнего активного администратора'
                )
            super().perform_update(serializer)

        logger.info('User %s updated by %s', user.email, self.request.user.email)

    def perform_destroy(self, instance):
        with transaction.atomic():
            if instance.is_last_active_admin():
                raise BusinessRuleViolationException(
                    'last_admin',
                    'Нельзя удалить последнего активного администратора'
                )
            instance.delete()

        logger.info('User %s deleted by %s', instance.email, self.request.user.email)
