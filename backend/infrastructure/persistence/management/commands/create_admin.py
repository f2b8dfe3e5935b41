"""
Create Admin Command.

Creates an active administrator or resets the password of an existing one.
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction


class Command(BaseCommand):
    help = 'Create (or reset) an active administrator account'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            type=str,
            default='admin@example.com',
            help='Admin email'
        )
        parser.add_argument(
            '--password',
            type=str,
            default='admin123',
            help='Admin password'
        )

    def handle(self, *args, **options):
        from infrastructure.persistence.models import User, UserRoleChoices

        email = options['email'].strip().lower()
        password = options['password']
        if len(password) < 6:
            raise CommandError('Пароль должен содержать не менее 6 символов')

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()
            created = user is None
            if created:
                user = User(email=email)
            user.role = UserRoleChoices.ADMIN
            user.is_active = True
            user.is_staff = True
            user.is_superuser = True
            user.set_password(password)
            user.save()

        if created:
            self.stdout.write(self.style.SUCCESS(f'Created admin user: {email}'))
        else:
            self.stdout.write(self.style.WARNING(f'Admin user {email} already exists, password reset'))
