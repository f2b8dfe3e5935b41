"""
Directory Models.

People (employees, project managers) and counterparties
(suppliers, manufacturers, contractors).
"""

from django.db import models

from .base import BaseModel


class Person(BaseModel):
    """Employee or contact person."""

    last_name = models.CharField(
        max_length=150,
        verbose_name="Фамилия"
    )
    first_name = models.CharField(
        max_length=150,
        verbose_name="Имя"
    )
    middle_name = models.CharField(
        max_length=150,
        blank=True,
        verbose_name="Отчество"
    )
    position = models.CharField(
        max_length=200,
        blank=True,
        verbose_name="Должность"
    )
    phone = models.CharField(
        max_length=50,
        blank=True,
        verbose_name="Телефон"
    )
    email = models.EmailField(
        blank=True,
        verbose_name="Email"
    )
    is_project_manager = models.BooleanField(
        default=False,
        db_index=True,
        verbose_name="Руководитель проектов"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        verbose_name="Активен"
    )

    class Meta:
        db_table = 'persons'
        verbose_name = 'Сотрудник'
        verbose_name_plural = 'Сотрудники'
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        parts = [self.last_name, self.first_name, self.middle_name]
        return ' '.join(p for p in parts if p)


class Counterparty(BaseModel):
    """
    Counterparty - supplier, manufacturer and/or contractor.

    One organisation may play several roles at once.
    """

    name = models.CharField(
        max_length=255,
        verbose_name="Наименование"
    )
    full_name = models.CharField(
        max_length=500,
        blank=True,
        verbose_name="Полное наименование"
    )
    inn = models.CharField(
        max_length=12,
        blank=True,
        db_index=True,
        verbose_name="ИНН"
    )
    kpp = models.CharField(
        max_length=9,
        blank=True,
        verbose_name="КПП"
    )
    legal_address = models.TextField(
        blank=True,
        verbose_name="Юридический адрес"
    )
    contact_name = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="Контактное лицо"
    )
    phone = models.CharField(
        max_length=50,
        blank=True,
        verbose_name="Телефон"
    )
    email = models.EmailField(
        blank=True,
        verbose_name="Email"
    )
    is_supplier = models.BooleanField(
        default=False,
        verbose_name="Поставщик"
    )
    is_manufacturer = models.BooleanField(
        default=False,
        verbose_name="Производитель"
    )
    is_contractor = models.BooleanField(
        default=False,
        verbose_name="Подрядчик"
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        verbose_name="Активен"
    )

    class Meta:
        db_table = 'counterparties'
        verbose_name = 'Контрагент'
        verbose_name_plural = 'Контрагенты'
        ordering = ['name']

    def __str__(self):
        return self.name
