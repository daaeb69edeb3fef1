"""
Management command to create (or reset) an office ADMIN account.

Usage:
    python manage.py create_office_admin --username admin.dev --email admin@example.com
    python manage.py create_office_admin --username admin.dev --password secret123

The password falls back to the OFFICE_ADMIN_PASSWORD environment variable
and is prompted for when neither is given.
"""

import getpass
import os

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User


class Command(BaseCommand):
    help = 'Creates or updates an agricultural office ADMIN user'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='admin.dev')
        parser.add_argument('--email', default='')
        parser.add_argument('--password', default=None)

    def handle(self, *args, **options):
        username = options['username']
        email = options['email']
        password = options['password'] or os.getenv('OFFICE_ADMIN_PASSWORD')

        if not User.username_matches_role(username, User.UserRole.ADMIN):
            raise CommandError(
                f"Username must end with '{User.USERNAME_SUFFIXES[User.UserRole.ADMIN]}' for ADMIN accounts"
            )

        if not password:
            password = getpass.getpass('Password: ')
        if not password:
            raise CommandError('A password is required')

        with transaction.atomic():
            user = User.objects.filter(username=username).first()
            if user is not None:
                self.stdout.write(self.style.WARNING(f'User {username} already exists.'))
                user.role = User.UserRole.ADMIN
                user.is_active = True
                user.is_staff = True
                if email:
                    user.email = email
                user.set_password(password)
                user.save()
                self.stdout.write(self.style.SUCCESS(f'✓ Updated existing user: {username}'))
            else:
                user = User.objects.create_user(
                    username=username,
                    email=email,
                    password=password,
                    role=User.UserRole.ADMIN,
                    is_staff=True,
                )
                self.stdout.write(self.style.SUCCESS(f'✓ Created new user: {username}'))

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write(f'Username:  {user.username}')
        self.stdout.write(f'Email:     {user.email or "-"}')
        self.stdout.write(f'Role:      {user.get_role_display()}')
        self.stdout.write(f'Is Staff:  {user.is_staff}')
        self.stdout.write('=' * 60)
        self.stdout.write('Log in with POST /api/auth/login/ and use the returned access token.')
