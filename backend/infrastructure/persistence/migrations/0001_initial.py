import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from django.conf import settings
from django.db import migrations, models

import infrastructure.persistence.models.users


def audit_fields():
    return [
        ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_created', to=settings.AUTH_USER_MODEL, verbose_name='Создано пользователем')),
        ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_updated', to=settings.AUTH_USER_MODEL, verbose_name='Обновлено пользователем')),
    ]


def historical_audit_fields():
    return [
        ('created_by', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Создано пользователем')),
        ('updated_by', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Обновлено пользователем')),
    ]


def base_fields():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Дата создания')),
        ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Дата обновления')),
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
    ]


def historical_base_fields():
    return [
        ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Дата создания')),
        ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Дата обновления')),
        ('id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name='ID')),
    ]


def history_fields():
    return [
        ('history_id', models.AutoField(primary_key=True, serialize=False)),
        ('history_date', models.DateTimeField(db_index=True)),
        ('history_change_reason', models.CharField(max_length=100, null=True)),
        ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
        ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
    ]


def history_options(verbose_name, verbose_name_plural):
    return {
        'verbose_name': f'historical {verbose_name}',
        'verbose_name_plural': f'historical {verbose_name_plural}',
        'ordering': ('-history_date', '-history_id'),
        'get_latest_by': ('history_date', 'history_id'),
    }


PROJECT_STATUS_CHOICES = [('planned', 'Запланирован'), ('in_progress', 'В работе'), ('done', 'Завершён'), ('has_problems', 'Есть проблемы')]
PRODUCT_STATUS_CHOICES = [('in_project', 'В проекте'), ('in_progress', 'В работе'), ('done', 'Готово'), ('has_problems', 'Есть проблемы')]
NOMENCLATURE_TYPE_CHOICES = [('product', 'Изделие'), ('service', 'Услуга'), ('work', 'Работа')]


def project_fields():
    return [
        ('name', models.CharField(max_length=200, verbose_name='Наименование')),
        ('status', models.CharField(choices=PROJECT_STATUS_CHOICES, db_index=True, default='planned', max_length=20, verbose_name='Статус')),
        ('start_date', models.DateField(blank=True, null=True, verbose_name='Дата начала')),
        ('end_date', models.DateField(blank=True, null=True, verbose_name='Дата окончания')),
        ('order_index', models.PositiveIntegerField(db_index=True, default=0, verbose_name='Порядок')),
    ]


def project_product_fields():
    return [
        ('version', models.PositiveIntegerField(default=1, verbose_name='Версия')),
        ('serial_number', models.CharField(blank=True, max_length=100, verbose_name='Серийный номер')),
        ('quantity', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Количество')),
        ('product_sum', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True, verbose_name='Сумма')),
        ('status', models.CharField(choices=PRODUCT_STATUS_CHOICES, db_index=True, default='in_project', max_length=20, verbose_name='Статус')),
        ('order_index', models.PositiveIntegerField(db_index=True, default=0, verbose_name='Порядок')),
    ]


def nomenclature_item_fields():
    return [
        ('designation', models.CharField(blank=True, db_index=True, max_length=255, verbose_name='Обозначение')),
        ('name', models.CharField(db_index=True, max_length=500, verbose_name='Наименование')),
        ('article', models.CharField(blank=True, db_index=True, max_length=100, verbose_name='Артикул')),
        ('code1c', models.CharField(blank=True, db_index=True, max_length=100, verbose_name='Код 1С')),
        ('manufacturer', models.CharField(blank=True, max_length=255, verbose_name='Производитель')),
        ('description', models.TextField(blank=True, verbose_name='Описание')),
        ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Цена')),
        ('type', models.CharField(choices=NOMENCLATURE_TYPE_CHOICES, db_index=True, default='product', max_length=20, verbose_name='Тип')),
    ]


def product_specification_fields():
    return [
        ('name', models.CharField(max_length=255, verbose_name='Наименование')),
        ('description', models.TextField(blank=True, verbose_name='Описание')),
        ('version', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Версия')),
        ('is_locked', models.BooleanField(default=False, verbose_name='Заблокирована')),
        ('total_sum', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=18, verbose_name='Итоговая сумма')),
    ]


def historical_fk(to, verbose_name, blank=False):
    return models.ForeignKey(
        blank=blank,
        null=True,
        db_constraint=False,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name='+',
        to=to,
        verbose_name=verbose_name,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='Email')),
                ('role', models.CharField(choices=[('admin', 'Администратор'), ('manager', 'Менеджер'), ('user', 'Пользователь')], db_index=True, default='user', max_length=20, verbose_name='Роль')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Дата создания')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Дата обновления')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'Пользователь',
                'verbose_name_plural': 'Пользователи',
                'db_table': 'users',
                'ordering': ['-created_at'],
            },
            managers=[
                ('objects', infrastructure.persistence.models.users.UserManager()),
            ],
        ),

        # Directory
        migrations.CreateModel(
            name='Person',
            fields=base_fields() + [
                ('last_name', models.CharField(max_length=150, verbose_name='Фамилия')),
                ('first_name', models.CharField(max_length=150, verbose_name='Имя')),
                ('middle_name', models.CharField(blank=True, max_length=150, verbose_name='Отчество')),
                ('position', models.CharField(blank=True, max_length=200, verbose_name='Должность')),
                ('phone', models.CharField(blank=True, max_length=50, verbose_name='Телефон')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='Email')),
                ('is_project_manager', models.BooleanField(db_index=True, default=False, verbose_name='Руководитель проектов')),
                ('is_active', models.BooleanField(db_index=True, default=True, verbose_name='Активен')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Сотрудник',
                'verbose_name_plural': 'Сотрудники',
                'db_table': 'persons',
                'ordering': ['last_name', 'first_name'],
            },
        ),
        migrations.AddField(
            model_name='user',
            name='person',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='persistence.person', verbose_name='Сотрудник'),
        ),
        migrations.CreateModel(
            name='Counterparty',
            fields=base_fields() + [
                ('name', models.CharField(max_length=255, verbose_name='Наименование')),
                ('full_name', models.CharField(blank=True, max_length=500, verbose_name='Полное наименование')),
                ('inn', models.CharField(blank=True, db_index=True, max_length=12, verbose_name='ИНН')),
                ('kpp', models.CharField(blank=True, max_length=9, verbose_name='КПП')),
                ('legal_address', models.TextField(blank=True, verbose_name='Юридический адрес')),
                ('contact_name', models.CharField(blank=True, max_length=255, verbose_name='Контактное лицо')),
                ('phone', models.CharField(blank=True, max_length=50, verbose_name='Телефон')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='Email')),
                ('is_supplier', models.BooleanField(default=False, verbose_name='Поставщик')),
                ('is_manufacturer', models.BooleanField(default=False, verbose_name='Производитель')),
                ('is_contractor', models.BooleanField(default=False, verbose_name='Подрядчик')),
                ('is_active', models.BooleanField(db_index=True, default=True, verbose_name='Активен')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Контрагент',
                'verbose_name_plural': 'Контрагенты',
                'db_table': 'counterparties',
                'ordering': ['name'],
            },
        ),

        # Catalog
        migrations.CreateModel(
            name='NomenclatureGroup',
            fields=base_fields() + [
                ('name', models.CharField(max_length=255, verbose_name='Наименование')),
                ('description', models.TextField(blank=True, verbose_name='Описание')),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='children', to='persistence.nomenclaturegroup', verbose_name='Родительская группа')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Группа номенклатуры',
                'verbose_name_plural': 'Группы номенклатуры',
                'db_table': 'nomenclature_groups',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='NomenclatureKind',
            fields=base_fields() + [
                ('name', models.CharField(max_length=255, unique=True, verbose_name='Наименование')),
                ('description', models.TextField(blank=True, verbose_name='Описание')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Вид номенклатуры',
                'verbose_name_plural': 'Виды номенклатуры',
                'db_table': 'nomenclature_kinds',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Unit',
            fields=base_fields() + [
                ('code', models.CharField(max_length=20, unique=True, verbose_name='Код')),
                ('name', models.CharField(max_length=100, verbose_name='Краткое наименование')),
                ('full_name', models.CharField(blank=True, max_length=255, verbose_name='Полное наименование')),
                ('international_code', models.CharField(blank=True, max_length=20, verbose_name='Международное обозначение')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Единица измерения',
                'verbose_name_plural': 'Единицы измерения',
                'db_table': 'units',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='UnitAlias',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('alias', models.CharField(max_length=100, verbose_name='Псевдоним')),
                ('normalized_alias', models.CharField(db_index=True, max_length=100, verbose_name='Нормализованный псевдоним')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='aliases', to='persistence.unit', verbose_name='Единица измерения')),
            ],
            options={
                'verbose_name': 'Псевдоним единицы измерения',
                'verbose_name_plural': 'Псевдонимы единиц измерения',
                'db_table': 'unit_aliases',
                'unique_together': {('unit', 'normalized_alias')},
            },
        ),
        migrations.CreateModel(
            name='NomenclatureItem',
            fields=base_fields() + nomenclature_item_fields() + [
                ('group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='items', to='persistence.nomenclaturegroup', verbose_name='Группа')),
                ('kind', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='items', to='persistence.nomenclaturekind', verbose_name='Вид')),
                ('unit', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='items', to='persistence.unit', verbose_name='Единица измерения')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Номенклатура',
                'verbose_name_plural': 'Номенклатура',
                'db_table': 'nomenclature_items',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalNomenclatureItem',
            fields=historical_base_fields() + nomenclature_item_fields() + history_fields() + [
                ('group', historical_fk('persistence.nomenclaturegroup', 'Группа', blank=True)),
                ('kind', historical_fk('persistence.nomenclaturekind', 'Вид', blank=True)),
                ('unit', historical_fk('persistence.unit', 'Единица измерения', blank=True)),
            ] + historical_audit_fields(),
            options=history_options('Номенклатура', 'Номенклатура'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),

        # Projects
        migrations.CreateModel(
            name='Project',
            fields=base_fields() + project_fields() + [
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='owned_projects', to=settings.AUTH_USER_MODEL, verbose_name='Владелец')),
                ('project_manager', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='managed_projects', to='persistence.person', verbose_name='Руководитель проекта')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Проект',
                'verbose_name_plural': 'Проекты',
                'db_table': 'projects',
                'ordering': ['order_index', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalProject',
            fields=historical_base_fields() + project_fields() + history_fields() + [
                ('owner', historical_fk(settings.AUTH_USER_MODEL, 'Владелец', blank=True)),
                ('project_manager', historical_fk('persistence.person', 'Руководитель проекта', blank=True)),
            ] + historical_audit_fields(),
            options=history_options('Проект', 'Проекты'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='ProjectProduct',
            fields=base_fields() + project_product_fields() + [
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='persistence.project', verbose_name='Проект')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='project_products', to='persistence.nomenclatureitem', verbose_name='Изделие')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Изделие проекта',
                'verbose_name_plural': 'Изделия проекта',
                'db_table': 'project_products',
                'ordering': ['order_index', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalProjectProduct',
            fields=historical_base_fields() + project_product_fields() + history_fields() + [
                ('project', historical_fk('persistence.project', 'Проект', blank=True)),
                ('product', historical_fk('persistence.nomenclatureitem', 'Изделие', blank=True)),
            ] + historical_audit_fields(),
            options=history_options('Изделие проекта', 'Изделия проекта'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='WorkStage',
            fields=base_fields() + [
                ('sum', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True, verbose_name='Сумма')),
                ('hours', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='Часы')),
                ('start_date', models.DateField(blank=True, null=True, verbose_name='Дата начала')),
                ('end_date', models.DateField(blank=True, null=True, verbose_name='Дата окончания')),
                ('duration', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Длительность, дней')),
                ('progress', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(100)], verbose_name='Прогресс, %')),
                ('order_index', models.PositiveIntegerField(db_index=True, default=0, verbose_name='Порядок')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='work_stages', to='persistence.projectproduct', verbose_name='Изделие проекта')),
                ('nomenclature_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='work_stages', to='persistence.nomenclatureitem', verbose_name='Вид работ')),
                ('assignee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='work_stages', to='persistence.counterparty', verbose_name='Исполнитель')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Этап работ',
                'verbose_name_plural': 'Этапы работ',
                'db_table': 'work_stages',
                'ordering': ['order_index', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='ModelLink',
            fields=base_fields() + [
                ('name', models.CharField(max_length=255, verbose_name='Наименование')),
                ('url', models.URLField(max_length=1000, verbose_name='Ссылка')),
                ('description', models.TextField(blank=True, verbose_name='Описание')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='model_links', to='persistence.projectproduct', verbose_name='Изделие проекта')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Ссылка на модель',
                'verbose_name_plural': 'Ссылки на модели',
                'db_table': 'model_links',
                'ordering': ['-created_at'],
            },
        ),

        # Specifications
        migrations.CreateModel(
            name='ProductSpecification',
            fields=base_fields() + product_specification_fields() + [
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='specifications', to='persistence.projectproduct', verbose_name='Изделие проекта')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Спецификация изделия',
                'verbose_name_plural': 'Спецификации изделий',
                'db_table': 'product_specifications',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalProductSpecification',
            fields=historical_base_fields() + product_specification_fields() + history_fields() + [
                ('product', historical_fk('persistence.projectproduct', 'Изделие проекта', blank=True)),
            ] + historical_audit_fields(),
            options=history_options('Спецификация изделия', 'Спецификации изделий'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='Specification',
            fields=base_fields() + [
                ('designation', models.CharField(blank=True, max_length=255, verbose_name='Обозначение')),
                ('name', models.CharField(max_length=500, verbose_name='Наименование')),
                ('description', models.TextField(blank=True, verbose_name='Описание')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('1'), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='Количество')),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True, verbose_name='Цена')),
                ('total_price', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True, verbose_name='Сумма')),
                ('order_index', models.PositiveIntegerField(db_index=True, default=0, verbose_name='Порядок')),
                ('product_specification', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rows', to='persistence.productspecification', verbose_name='Спецификация')),
                ('nomenclature_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='specifications', to='persistence.nomenclatureitem', verbose_name='Номенклатура')),
                ('unit', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='specifications', to='persistence.unit', verbose_name='Единица измерения')),
            ] + audit_fields(),
            options={
                'verbose_name': 'Строка спецификации',
                'verbose_name_plural': 'Строки спецификации',
                'db_table': 'specifications',
                'ordering': ['order_index', 'created_at'],
            },
        ),
    ]
