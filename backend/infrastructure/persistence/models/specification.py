"""
Specification Models.

A product specification is a versioned bill of materials of a project
product; its rows reference nomenclature items.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum

from .base import BaseModel, BaseModelWithHistory


class ProductSpecification(BaseModelWithHistory):
    """
    Specification of a project product.

    A locked specification (e.g. the original after copying) cannot be
    edited, and neither can its rows.
    """

    product = models.ForeignKey(
        'persistence.ProjectProduct',
        on_delete=models.CASCADE,
        related_name='specifications',
        verbose_name="Изделие проекта"
    )
    name = models.CharField(
        max_length=255,
        verbose_name="Наименование"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Описание"
    )
    version = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name="Версия"
    )
    is_locked = models.BooleanField(
        default=False,
        verbose_name="Заблокирована"
    )
    total_sum = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name="Итоговая сумма"
    )

    class Meta:
        db_table = 'product_specifications'
        verbose_name = 'Спецификация изделия'
        verbose_name_plural = 'Спецификации изделий'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def recalculate_total(self):
        total = self.rows.aggregate(total=Sum('total_price'))['total'] or Decimal('0')
        self.total_sum = total
        self.save(update_fields=['total_sum', 'updated_at'])
        return total


class Specification(BaseModel):
    """Row of a product specification."""

    product_specification = models.ForeignKey(
        ProductSpecification,
        on_delete=models.CASCADE,
        related_name='rows',
        verbose_name="Спецификация"
    )
    nomenclature_item = models.ForeignKey(
        'persistence.NomenclatureItem',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='specifications',
        verbose_name="Номенклатура"
    )
    designation = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="Обозначение"
    )
    name = models.CharField(
        max_length=500,
        verbose_name="Наименование"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Описание"
    )
    quantity = models.DecimalField(
        max_digits=15,
        decimal_places=3,
        default=Decimal('1'),
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name="Количество"
    )
    unit = models.ForeignKey(
        'persistence.Unit',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='specifications',
        verbose_name="Единица измерения"
    )
    price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Цена"
    )
    total_price = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Сумма"
    )
    order_index = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name="Порядок"
    )

    class Meta:
        db_table = 'specifications'
        verbose_name = 'Строка спецификации'
        verbose_name_plural = 'Строки спецификации'
        ordering = ['order_index', 'created_at']

    def __str__(self):
        return self.name

    @staticmethod
    def calculate_total(price, quantity):
        if price is None or quantity is None:
            return None
        return (Decimal(price) * Decimal(quantity)).quantize(Decimal('0.01'))
