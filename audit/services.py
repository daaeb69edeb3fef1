"""
Audit logging helpers.

Call `log_audit` from views and services after a successful mutation.
A failure to write the audit row is logged and never propagates to the caller.
"""

import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, transaction

from .models import AuditLog, AuditAction, AuditModule

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Return the client IP, honouring X-Forwarded-For from the proxy."""
    if request is None:
        return None
    forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded_for:
        return forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class AuditJSONEncoder(DjangoJSONEncoder):
    """Falls back to str() for values such as phone numbers."""

    def default(self, o):
        try:
            return super().default(o)
        except TypeError:
            return str(o)


def _jsonable(values):
    if values is None:
        return None
    return json.loads(json.dumps(values, cls=AuditJSONEncoder))


def log_audit(action, module, description, user=None, request=None,
              record=None, record_id='', record_type='',
              old_values=None, new_values=None, metadata=None,
              user_name=None, user_role=None):
    """
    Write an audit trail entry.

    Args:
        action: AuditAction value
        module: AuditModule value
        description: Human readable summary
        user: Acting user (defaults to request.user when authenticated)
        request: Current request, used for user and IP address
        record: Model instance affected; fills record_id/record_type
        user_name / user_role: Override for anonymous attempts (failed logins)

    Returns:
        The created AuditLog, or None when the entry could not be written.
    """
    if user is None and request is not None and request.user.is_authenticated:
        user = request.user

    if record is not None:
        record_id = record_id or str(record.pk)
        record_type = record_type or record._meta.model_name

    if user_name is None:
        user_name = user.username if user is not None else 'SYSTEM'
    if user_role is None:
        user_role = user.role if user is not None else 'system'

    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                user=user,
                user_name=user_name,
                user_role=user_role,
                action=action,
                module=module,
                record_id=str(record_id or ''),
                record_type=record_type or '',
                description=description,
                old_values=_jsonable(old_values),
                new_values=_jsonable(new_values),
                metadata=_jsonable(metadata),
                ip_address=get_client_ip(request),
            )
    except DatabaseError as e:
        logger.error(f"Error logging audit entry ({action} {module}): {e}")
        return None


def log_login(request, username, user=None, success=True):
    """Record a login attempt, successful or not."""
    if success:
        return log_audit(
            AuditAction.LOGIN, AuditModule.AUTH,
            f"User {username} logged in",
            user=user, request=request,
        )
    return log_audit(
        AuditAction.LOGIN_FAILED, AuditModule.AUTH,
        f"Failed login attempt for {username}",
        user=user, request=request,
        user_name=username,
        user_role=user.role if user is not None else 'unknown',
    )
