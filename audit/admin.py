from django.contrib import admin

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only admin for the audit trail"""
    list_display = ['timestamp', 'user_name', 'user_role', 'action', 'module', 'record_type', 'description']
    list_filter = ['action', 'module', 'user_role']
    search_fields = ['description', 'user_name', 'record_id']
    date_hierarchy = 'timestamp'
    list_per_page = 50
    ordering = ['-timestamp']

    readonly_fields = [
        'user', 'user_name', 'user_role', 'action', 'module', 'record_id', 'record_type',
        'description', 'old_values', 'new_values', 'metadata', 'ip_address', 'timestamp',
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
