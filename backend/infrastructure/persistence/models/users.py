"""
User Models.

Custom user model authenticated by email, with a single application role.
"""

import uuid

from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager


class UserRoleChoices(models.TextChoices):
    """Application roles."""

    ADMIN = 'admin', 'Администратор'
    MANAGER = 'manager', 'Менеджер'
    USER = 'user', 'Пользователь'


class UserManager(BaseUserManager):
    """Manager for email-based users."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('Email обязателен')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', UserRoleChoices.USER)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', UserRoleChoices.ADMIN)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self._create_user(email, password, **extra_fields)

    def active_admins(self):
        return self.filter(role=UserRoleChoices.ADMIN, is_active=True)


class User(AbstractUser):
    """
    Custom User model.

    Email is the login. The `role` field drives API permissions;
    `person` optionally links the account to a directory person.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    username = None
    email = models.EmailField(
        unique=True,
        verbose_name="Email"
    )
    role = models.CharField(
        max_length=20,
        choices=UserRoleChoices.choices,
        default=UserRoleChoices.USER,
        db_index=True,
        verbose_name="Роль"
    )
    person = models.ForeignKey(
        'persistence.Person',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
        verbose_name="Сотрудник"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Дата создания"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Дата обновления"
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'users'
        verbose_name = 'Пользователь'
        verbose_name_plural = 'Пользователи'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.role == UserRoleChoices.ADMIN

    def is_last_active_admin(self):
        """True when this user is the only active administrator left."""
        if not (self.is_active and self.role == UserRoleChoices.ADMIN):
            return False
        # Must run inside atomic(); admin rows stay locked until commit.
        locked = User.objects.active_admins().select_for_update().values_list('pk', flat=True)
        return len(list(locked)) <= 1
