from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from .models import IncentiveLog


class IncentiveLogSerializer(serializers.ModelSerializer):
    farmer_id = serializers.UUIDField(source='farmer.id', read_only=True)
    farmer_name = serializers.CharField(source='farmer.full_name', read_only=True)
    encoder_name = serializers.CharField(source='encoder.get_full_name', read_only=True, default=None)
    shortage = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = IncentiveLog
        fields = [
            'id', 'farmer_id', 'farmer_name', 'event_date', 'incentive_type',
            'qty_requested', 'qty_received', 'shortage', 'is_signed', 'note',
            'encoder_name', 'created_at',
        ]
        read_only_fields = fields


class IncentiveLogCreateSerializer(serializers.Serializer):
    """Field checks for a new log; signature and quantity rules live in the service."""
    farmer_id = serializers.UUIDField()
    event_date = serializers.DateField()
    incentive_type = serializers.CharField(max_length=100)
    qty_requested = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    qty_received = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    is_signed = serializers.BooleanField()
    note = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')

    def validate_event_date(self, value):
        if value > timezone.localdate():
            raise serializers.ValidationError('Event date cannot be in the future.')
        return value
