"""
Tests for office accounts: role suffixes and the admin bootstrap command.
"""
import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from accounts.models import User


class TestUsernameSuffix:

    @pytest.mark.parametrize('username,role,expected', [
        ('rosa.dev', User.UserRole.ADMIN, True),
        ('maria.jo', User.UserRole.JO, True),
        ('jose.tech', User.UserRole.TECHNICIAN, True),
        ('maria.jo', User.UserRole.TECHNICIAN, False),
        ('rosa', User.UserRole.ADMIN, False),
        ('rosa.dev', 'GUEST', False),
    ])
    def test_matches_role(self, username, role, expected):
        assert User.username_matches_role(username, role) is expected


@pytest.mark.django_db
class TestCreateOfficeAdmin:

    def test_creates_admin(self):
        call_command('create_office_admin', username='office.dev', password='Bukid-Admin-2025')

        user = User.objects.get(username='office.dev')
        assert user.role == User.UserRole.ADMIN
        assert user.is_staff
        assert user.check_password('Bukid-Admin-2025')

    def test_promotes_existing_user(self, technician_user):
        technician_user.username = 'jose.dev'
        technician_user.save()

        call_command('create_office_admin', username='jose.dev', password='Bukid-Admin-2025')

        technician_user.refresh_from_db()
        assert technician_user.role == User.UserRole.ADMIN
        assert technician_user.check_password('Bukid-Admin-2025')

    def test_rejects_username_without_suffix(self):
        with pytest.raises(CommandError):
            call_command('create_office_admin', username='office.jo', password='Bukid-Admin-2025')

        assert not User.objects.filter(username='office.jo').exists()
