"""
Catalog Models.

Nomenclature groups, kinds, units of measure and nomenclature items.
"""

from django.db import models, transaction
from django.core.validators import MinValueValidator

from domain.catalog.units import prepare_aliases

from .base import BaseModel, BaseModelWithHistory


class NomenclatureTypeChoices(models.TextChoices):
    """Type of a nomenclature item."""

    PRODUCT = 'product', 'Изделие'
    SERVICE = 'service', 'Услуга'
    WORK = 'work', 'Работа'


class NomenclatureGroup(BaseModel):
    """
    Hierarchical group of nomenclature items.

    A group cannot be deleted while it holds items or subgroups.
    """

    name = models.CharField(
        max_length=255,
        verbose_name="Наименование"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Описание"
    )
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='children',
        verbose_name="Родительская группа"
    )

    class Meta:
        db_table = 'nomenclature_groups'
        verbose_name = 'Группа номенклатуры'
        verbose_name_plural = 'Группы номенклатуры'
        ordering = ['name']

    def __str__(self):
        return self.name

    def is_empty(self):
        return not self.items.exists() and not self.children.exists()


class NomenclatureKind(BaseModel):
    """Kind of nomenclature (материал, покупное изделие, ...)."""

    name = models.CharField(
        max_length=255,
        unique=True,
        verbose_name="Наименование"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Описание"
    )

    class Meta:
        db_table = 'nomenclature_kinds'
        verbose_name = 'Вид номенклатуры'
        verbose_name_plural = 'Виды номенклатуры'
        ordering = ['name']

    def __str__(self):
        return self.name


class Unit(BaseModel):
    """Unit of measure."""

    code = models.CharField(
        max_length=20,
        unique=True,
        verbose_name="Код"
    )
    name = models.CharField(
        max_length=100,
        verbose_name="Краткое наименование"
    )
    full_name = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="Полное наименование"
    )
    international_code = models.CharField(
        max_length=20,
        blank=True,
        verbose_name="Международное обозначение"
    )

    class Meta:
        db_table = 'units'
        verbose_name = 'Единица измерения'
        verbose_name_plural = 'Единицы измерения'
        ordering = ['name']

    def __str__(self):
        return self.name

    def set_aliases(self, aliases=()):
        """Replace stored aliases; the unit name is always kept as an alias."""
        with transaction.atomic():
            self.aliases.all().delete()
            UnitAlias.objects.bulk_create([
                UnitAlias(unit=self, alias=alias, normalized_alias=normalized)
                for alias, normalized in prepare_aliases(self.name, aliases)
            ])


class UnitAlias(models.Model):
    """Alternative spelling of a unit of measure."""

    unit = models.ForeignKey(
        Unit,
        on_delete=models.CASCADE,
        related_name='aliases',
        verbose_name="Единица измерения"
    )
    alias = models.CharField(
        max_length=100,
        verbose_name="Псевдоним"
    )
    normalized_alias = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name="Нормализованный псевдоним"
    )

    class Meta:
        db_table = 'unit_aliases'
        verbose_name = 'Псевдоним единицы измерения'
        verbose_name_plural = 'Псевдонимы единиц измерения'
        unique_together = [['unit', 'normalized_alias']]

    def __str__(self):
        return self.alias


class NomenclatureItem(BaseModelWithHistory):
    """
    Nomenclature item - product, service or type of work.

    Referenced by specification rows, project products and work stages;
    referenced items cannot be deleted.
    """

    group = models.ForeignKey(
        NomenclatureGroup,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='items',
        verbose_name="Группа"
    )
    kind = models.ForeignKey(
        NomenclatureKind,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='items',
        verbose_name="Вид"
    )
    unit = models.ForeignKey(
        Unit,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='items',
        verbose_name="Единица измерения"
    )
    designation = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        verbose_name="Обозначение"
    )
    name = models.CharField(
        max_length=500,
        db_index=True,
        verbose_name="Наименование"
    )
    article = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        verbose_name="Артикул"
    )
    code1c = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        verbose_name="Код 1С"
    )
    manufacturer = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="Производитель"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Описание"
    )
    price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        verbose_name="Цена"
    )
    type = models.CharField(
        max_length=20,
        choices=NomenclatureTypeChoices.choices,
        default=NomenclatureTypeChoices.PRODUCT,
        db_index=True,
        verbose_name="Тип"
    )

    class Meta:
        db_table = 'nomenclature_items'
        verbose_name = 'Номенклатура'
        verbose_name_plural = 'Номенклатура'
        ordering = ['name']

    def __str__(self):
        return self.name

    def get_usage(self):
        """Count references that prevent deletion."""
        return {
            'specifications': self.specifications.count(),
            'project_products': self.project_products.count(),
            'work_stages': self.work_stages.count(),
        }
