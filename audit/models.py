"""
Audit Trail Models

Every significant action in the office system (logins, registrations,
allocation changes, request approvals, exports) is written here so that
administrators can review who did what and when.
"""

import uuid
from django.conf import settings
from django.db import models
from django.utils import timezone


class AuditAction(models.TextChoices):
    CREATE = 'CREATE', 'Create'
    UPDATE = 'UPDATE', 'Update'
    DELETE = 'DELETE', 'Delete'
    LOGIN = 'LOGIN', 'Login'
    LOGOUT = 'LOGOUT', 'Logout'
    LOGIN_FAILED = 'LOGIN_FAILED', 'Login Failed'
    EXPORT = 'EXPORT', 'Export'
    APPROVE = 'APPROVE', 'Approve'
    REJECT = 'REJECT', 'Reject'
    DISTRIBUTE = 'DISTRIBUTE', 'Distribute'
    PASSWORD_CHANGE = 'PASSWORD_CHANGE', 'Password Change'


class AuditModule(models.TextChoices):
    AUTH = 'AUTH', 'Authentication'
    RSBSA = 'RSBSA', 'RSBSA Registry'
    DISTRIBUTION = 'DISTRIBUTION', 'Distribution'
    INCENTIVES = 'INCENTIVES', 'Incentive Requests'
    REPORTS = 'REPORTS', 'Reports'
    USERS = 'USERS', 'Users'
    SYSTEM = 'SYSTEM', 'System'


# Actions surfaced as "critical" in the audit statistics panel
CRITICAL_ACTIONS = [AuditAction.DELETE, AuditAction.LOGIN_FAILED]


class AuditLog(models.Model):
    """
    A single audit trail entry.

    User name and role are copied onto the row so entries stay readable
    after the account is deleted.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
        help_text="User who performed the action (null for system/anonymous)"
    )
    user_name = models.CharField(max_length=150, default='SYSTEM')
    user_role = models.CharField(max_length=20, default='system')

    action = models.CharField(
        max_length=20,
        choices=AuditAction.choices,
        db_index=True
    )
    module = models.CharField(
        max_length=20,
        choices=AuditModule.choices,
        db_index=True
    )

    record_id = models.CharField(
        max_length=64,
        blank=True,
        help_text="Primary key of the affected record"
    )
    record_type = models.CharField(
        max_length=100,
        blank=True,
        help_text="Type of the affected record (e.g. 'farmer_request')"
    )
    description = models.TextField(help_text="Human-readable description of the action")

    old_values = models.JSONField(null=True, blank=True)
    new_values = models.JSONField(null=True, blank=True)
    metadata = models.JSONField(null=True, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-timestamp']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['module', 'action'], name='audit_module_action_idx'),
            models.Index(fields=['record_type', 'record_id'], name='audit_record_idx'),
            models.Index(fields=['user_name'], name='audit_user_name_idx'),
        ]

    def __str__(self):
        return f"[{self.timestamp:%Y-%m-%d %H:%M}] {self.user_name} {self.action} {self.module}"
