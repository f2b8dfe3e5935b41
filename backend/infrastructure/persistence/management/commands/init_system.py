"""
Initialize System Command.

Creates default units of measure, nomenclature kinds and the admin user.
"""

from django.core.management import call_command
from django.core.management.base import BaseCommand
from django.db import transaction


DEFAULT_UNITS = [
    {'code': '796', 'name': 'шт', 'full_name': 'Штука', 'international_code': 'PCE',
     'aliases': ['шт.', 'штук', 'штука']},
    {'code': '006', 'name': 'м', 'full_name': 'Метр', 'international_code': 'MTR',
     'aliases': ['метр', 'м.']},
    {'code': '166', 'name': 'кг', 'full_name': 'Килограмм', 'international_code': 'KGM',
     'aliases': ['килограмм', 'кг.']},
    {'code': '112', 'name': 'л', 'full_name': 'Литр', 'international_code': 'LTR',
     'aliases': ['литр', 'л.']},
    {'code': '839', 'name': 'компл', 'full_name': 'Комплект', 'international_code': 'SET',
     'aliases': ['комплект', 'к-т', 'компл.']},
    {'code': '356', 'name': 'ч', 'full_name': 'Час', 'international_code': 'HUR',
     'aliases': ['час', 'ч.']},
]

DEFAULT_KINDS = [
    {'name': 'Материал', 'description': 'Сырьё и материалы'},
    {'name': 'Покупное изделие', 'description': 'Стандартные и покупные изделия'},
    {'name': 'Собственное изделие', 'description': 'Изделия собственного производства'},
    {'name': 'Работа', 'description': 'Виды работ'},
    {'name': 'Услуга', 'description': 'Услуги сторонних организаций'},
]


class Command(BaseCommand):
    help = 'Initialize system with default data (units, nomenclature kinds, admin user)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--admin-email',
            type=str,
            default='admin@example.com',
            help='Email for admin user'
        )
        parser.add_argument(
            '--admin-password',
            type=str,
            default='admin123',
            help='Password for admin user'
        )
        parser.add_argument(
            '--skip-admin',
            action='store_true',
            help='Skip creating admin user'
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            self._create_units()
            self._create_nomenclature_kinds()

        if not options['skip_admin']:
            call_command(
                'create_admin',
                email=options['admin_email'],
                password=options['admin_password'],
                stdout=self.stdout,
            )

        self.stdout.write(
            self.style.SUCCESS('System initialization completed!')
        )

    def _create_units(self):
        """Create default units of measure."""
        from infrastructure.persistence.models import Unit

        for unit_data in DEFAULT_UNITS:
            data = dict(unit_data)
            aliases = data.pop('aliases')
            unit, created = Unit.objects.get_or_create(
                code=data['code'],
                defaults=data
            )
            if created:
                unit.set_aliases(aliases)
                self.stdout.write(f'  Created unit: {unit.name}')

    def _create_nomenclature_kinds(self):
        """Create default nomenclature kinds."""
        from infrastructure.persistence.models import NomenclatureKind

        for kind_data in DEFAULT_KINDS:
            kind, created = NomenclatureKind.objects.get_or_create(
                name=kind_data['name'],
                defaults=kind_data
            )
            if created:
                self.stdout.write(f'  Created nomenclature kind: {kind.name}')
