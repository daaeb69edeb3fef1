from django.contrib.auth.models import AbstractUser
from django.db import models
from phonenumber_field.modelfields import PhoneNumberField
import uuid


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.
    Every account belongs to exactly one office role.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class UserRole(models.TextChoices):
        ADMIN = 'ADMIN', 'Administrator'
        JO = 'JO', 'JO Staff'
        TECHNICIAN = 'TECHNICIAN', 'Agricultural Technician'

    # Username suffix each role must carry (e.g. 'maria.jo')
    USERNAME_SUFFIXES = {
        UserRole.ADMIN: '.dev',
        UserRole.JO: '.jo',
        UserRole.TECHNICIAN: '.tech',
    }

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.TECHNICIAN,
        db_index=True,
        help_text="User's role in the agricultural office"
    )

    phone = PhoneNumberField(
        region='PH',
        unique=True,
        blank=True,
        null=True,
        help_text="Contact number (Philippine format: +639XXXXXXXXX)"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'is_active'], name='users_role_active_idx'),
        ]

    def __str__(self):
        return f"{self.get_full_name()} ({self.get_role_display()})"

    def get_full_name(self):
        """Return the user's full name or username if name is not set."""
        full_name = super().get_full_name()
        return full_name if full_name else self.username

    @classmethod
    def username_matches_role(cls, username, role):
        """Check the username carries the suffix required for the role."""
        suffix = cls.USERNAME_SUFFIXES.get(role)
        return bool(suffix) and username.endswith(suffix)
