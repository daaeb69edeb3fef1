from rest_framework import serializers

from .models import AuditLog


class AuditLogListSerializer(serializers.ModelSerializer):
    action_display = serializers.CharField(source='get_action_display', read_only=True)
    module_display = serializers.CharField(source='get_module_display', read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'timestamp', 'user_name', 'user_role',
            'action', 'action_display', 'module', 'module_display',
            'record_id', 'record_type', 'description', 'ip_address',
        ]
        read_only_fields = fields


class AuditLogDetailSerializer(AuditLogListSerializer):
    """Full entry including value snapshots."""

    class Meta(AuditLogListSerializer.Meta):
        fields = AuditLogListSerializer.Meta.fields + [
            'user', 'old_values', 'new_values', 'metadata',
        ]
        read_only_fields = fields
