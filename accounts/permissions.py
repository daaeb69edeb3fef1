"""
Role-based permissions for office staff.

- ADMIN: oversight (dashboards, audit trail, user management), read-only on records
- JO / TECHNICIAN: field staff who register farmers and manage allocations and requests
"""

from rest_framework import permissions


OFFICE_ROLES = ['ADMIN', 'JO', 'TECHNICIAN']
FIELD_ROLES = ['JO', 'TECHNICIAN']


class IsOfficeStaff(permissions.BasePermission):
    """
    Permission for any authenticated office account.
    """
    message = "Only office staff can access this resource."

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role in OFFICE_ROLES
        )


class IsSystemAdmin(permissions.BasePermission):
    """
    Permission for administrator-only endpoints (audit trail, user list).
    """
    message = "Only administrators can access this resource."

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == 'ADMIN'
        )


class IsFieldStaffOrReadOnly(permissions.BasePermission):
    """
    Read access for all office staff; writes for JO staff and technicians.
    """
    message = "Only JO staff and technicians can modify these records."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return request.user.role in OFFICE_ROLES
        return request.user.role in FIELD_ROLES
