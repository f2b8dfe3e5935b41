"""
Project Models.

Projects, the products built in them, work stages of each product
and links to CAD models.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from .base import BaseModel, BaseModelWithHistory, VersionedMixin


class ProjectStatusChoices(models.TextChoices):
    """Project status choices."""

    PLANNED = 'planned', 'Запланирован'
    IN_PROGRESS = 'in_progress', 'В работе'
    DONE = 'done', 'Завершён'
    HAS_PROBLEMS = 'has_problems', 'Есть проблемы'


class ProductStatusChoices(models.TextChoices):
    """Project product status choices."""

    IN_PROJECT = 'in_project', 'В проекте'
    IN_PROGRESS = 'in_progress', 'В работе'
    DONE = 'done', 'Готово'
    HAS_PROBLEMS = 'has_problems', 'Есть проблемы'


class Project(BaseModelWithHistory):
    """Project owned by a user, optionally led by a project manager."""

    name = models.CharField(
        max_length=200,
        verbose_name="Наименование"
    )
    status = models.CharField(
        max_length=20,
        choices=ProjectStatusChoices.choices,
        default=ProjectStatusChoices.PLANNED,
        db_index=True,
        verbose_name="Статус"
    )
    start_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Дата начала"
    )
    end_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Дата окончания"
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='owned_projects',
        verbose_name="Владелец"
    )
    project_manager = models.ForeignKey(
        'persistence.Person',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='managed_projects',
        verbose_name="Руководитель проекта"
    )
    order_index = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name="Порядок"
    )

    class Meta:
        db_table = 'projects'
        verbose_name = 'Проект'
        verbose_name_plural = 'Проекты'
        ordering = ['order_index', '-created_at']

    def __str__(self):
        return self.name


class ProjectProduct(VersionedMixin, BaseModelWithHistory):
    """
    Product built within a project.

    Updates are guarded by optimistic locking on `version`.
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='products',
        verbose_name="Проект"
    )
    product = models.ForeignKey(
        'persistence.NomenclatureItem',
        on_delete=models.PROTECT,
        related_name='project_products',
        verbose_name="Изделие"
    )
    serial_number = models.CharField(
        max_length=100,
        blank=True,
        verbose_name="Серийный номер"
    )
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name="Количество"
    )
    product_sum = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Сумма"
    )
    status = models.CharField(
        max_length=20,
        choices=ProductStatusChoices.choices,
        default=ProductStatusChoices.IN_PROJECT,
        db_index=True,
        verbose_name="Статус"
    )
    order_index = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name="Порядок"
    )

    class Meta:
        db_table = 'project_products'
        verbose_name = 'Изделие проекта'
        verbose_name_plural = 'Изделия проекта'
        ordering = ['order_index', 'created_at']

    def __str__(self):
        return f"{self.project} / {self.product}"


class WorkStage(BaseModel):
    """Stage of work on a project product."""

    product = models.ForeignKey(
        ProjectProduct,
        on_delete=models.CASCADE,
        related_name='work_stages',
        verbose_name="Изделие проекта"
    )
    nomenclature_item = models.ForeignKey(
        'persistence.NomenclatureItem',
        on_delete=models.PROTECT,
        related_name='work_stages',
        verbose_name="Вид работ"
    )
    sum = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Сумма"
    )
    hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name="Часы"
    )
    start_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Дата начала"
    )
    end_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Дата окончания"
    )
    duration = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name="Длительность, дней"
    )
    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
        verbose_name="Прогресс, %"
    )
    assignee = models.ForeignKey(
        'persistence.Counterparty',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='work_stages',
        verbose_name="Исполнитель"
    )
    order_index = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name="Порядок"
    )

    class Meta:
        db_table = 'work_stages'
        verbose_name = 'Этап работ'
        verbose_name_plural = 'Этапы работ'
        ordering = ['order_index', 'created_at']

    def __str__(self):
        return f"{self.nomenclature_item} ({self.product_id})"


class ModelLink(BaseModel):
    """Link to a CAD model of a project product."""

    product = models.ForeignKey(
        ProjectProduct,
        on_delete=models.CASCADE,
        related_name='model_links',
        verbose_name="Изделие проекта"
    )
    name = models.CharField(
        max_length=255,
        verbose_name="Наименование"
    )
    url = models.URLField(
        max_length=1000,
        verbose_name="Ссылка"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Описание"
    )

    class Meta:
        db_table = 'model_links'
        verbose_name = 'Ссылка на модель'
        verbose_name_plural = 'Ссылки на модели'
        ordering = ['-created_at']

    def __str__(self):
        return self.name
