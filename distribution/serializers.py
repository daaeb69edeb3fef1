from decimal import Decimal

from rest_framework import serializers

from rsbsa.models import RSBSASubmission
from .catalog import (
    ALLOCATION_QUANTITY_FIELDS,
    FERTILIZER_TYPES,
    REQUEST_QUANTITY_FIELDS,
    SEED_TYPES,
    SUBSTITUTION_ORIGINAL_FIELDS,
    SUBSTITUTION_SUBSTITUTE_FIELDS,
)
from .models import RegionalAllocation, FarmerRequest, DistributionRecord
from .seasons import parse_season, season_label
from .services.shortage import SeasonStockLedger


# =============================================================================
# ALLOCATIONS
# =============================================================================

class RegionalAllocationSerializer(serializers.ModelSerializer):
    """Allocation with derived season and totals"""
    season_label = serializers.SerializerMethodField()
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    created_by_name = serializers.CharField(source='created_by.get_full_name', read_only=True, default=None)
    total_fertilizer_bags = serializers.SerializerMethodField()
    total_seed_kg = serializers.SerializerMethodField()

    class Meta:
        model = RegionalAllocation
        fields = [
            'id', 'season', 'season_label', 'allocation_date', 'season_start_date', 'season_end_date',
            *ALLOCATION_QUANTITY_FIELDS,
            'total_fertilizer_bags', 'total_seed_kg',
            'notes', 'status', 'status_display', 'created_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'season', 'created_at', 'updated_at']

    def get_season_label(self, obj):
        return season_label(obj.season)

    def get_total_fertilizer_bags(self, obj):
        return sum((obj.allocated_quantity(t['id']) for t in FERTILIZER_TYPES), Decimal('0'))

    def get_total_seed_kg(self, obj):
        return sum((obj.allocated_quantity(t['id']) for t in SEED_TYPES), Decimal('0'))

    def validate(self, attrs):
        start = attrs.get('season_start_date', getattr(self.instance, 'season_start_date', None))
        end = attrs.get('season_end_date', getattr(self.instance, 'season_end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'season_end_date': 'Season end date cannot be before its start date.'})
        return attrs


# =============================================================================
# FARMER REQUESTS
# =============================================================================

class FarmerRequestSerializer(serializers.ModelSerializer):
    """
    Request list/detail.

    When the view passes a `ledgers` dict in the context, each row carries
    its shortage flag; ledgers are built once per season.
    """
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    crop_type_display = serializers.CharField(source='get_crop_type_display', read_only=True)
    farmer_id = serializers.UUIDField(source='farmer.id', read_only=True, default=None)
    ffrs_code = serializers.CharField(source='farmer.ffrs_code', read_only=True, default=None)
    has_record = serializers.SerializerMethodField()
    has_shortage = serializers.SerializerMethodField()

    class Meta:
        model = FarmerRequest
        fields = [
            'id', 'season', 'request_date', 'farmer_id', 'ffrs_code', 'farmer_name', 'barangay',
            'farm_area_ha', 'crop_type', 'crop_type_display', 'ownership_type', 'num_parcels',
            'fertilizer_requested', 'seeds_requested',
            *REQUEST_QUANTITY_FIELDS,
            'assigned_fertilizer_type', 'assigned_fertilizer_bags',
            'assigned_seed_type', 'assigned_seed_kg',
            'fertilizer_accepted', 'seeds_accepted',
            'status', 'status_display', 'rejection_reason', 'request_notes',
            'has_record', 'has_shortage', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_has_record(self, obj):
        return hasattr(obj, 'distribution_record')

    def get_has_shortage(self, obj):
        ledgers = self.context.get('ledgers')
        if ledgers is None:
            return None
        if obj.season not in ledgers:
            ledgers[obj.season] = SeasonStockLedger.for_season(obj.season)
        return ledgers[obj.season].check(obj)['has_shortage']


class FarmerRequestCreateSerializer(serializers.ModelSerializer):
    """New request; the farmer may be picked from the RSBSA registry"""
    farmer = serializers.PrimaryKeyRelatedField(
        queryset=RSBSASubmission.objects.all(), required=False, allow_null=True
    )
    season = serializers.CharField(required=False, allow_blank=True)
    farmer_name = serializers.CharField(required=False, allow_blank=True)
    barangay = serializers.CharField(required=False, allow_blank=True)

    class Meta:
        model = FarmerRequest
        fields = [
            'season', 'request_date', 'farmer', 'farmer_name', 'barangay', 'farm_area_ha',
            'crop_type', 'ownership_type', 'num_parcels',
            'fertilizer_requested', 'seeds_requested',
            *REQUEST_QUANTITY_FIELDS,
            'request_notes',
        ]

    def validate_season(self, value):
        if value:
            try:
                parse_season(value)
            except ValueError:
                raise serializers.ValidationError("Season must look like wet_2025 or dry_2025.")
        return value

    def validate(self, attrs):
        if not attrs.get('farmer') and not (attrs.get('farmer_name') and attrs.get('barangay')):
            raise serializers.ValidationError(
                "Select a registered farmer or provide the farmer name and barangay."
            )
        for field in ('farmer_name', 'barangay'):
            if not attrs.get(field):
                attrs.pop(field, None)
        return attrs


class FarmerRequestUpdateSerializer(serializers.ModelSerializer):
    """Editable while pending"""

    class Meta:
        model = FarmerRequest
        fields = [
            'farm_area_ha', 'crop_type', 'ownership_type', 'num_parcels',
            'fertilizer_requested', 'seeds_requested',
            *REQUEST_QUANTITY_FIELDS,
            'assigned_fertilizer_type', 'assigned_fertilizer_bags',
            'assigned_seed_type', 'assigned_seed_kg',
            'fertilizer_accepted', 'seeds_accepted',
            'request_notes',
        ]


class RejectRequestSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class ApplySubstitutionSerializer(serializers.Serializer):
    original_type = serializers.ChoiceField(choices=sorted(SUBSTITUTION_ORIGINAL_FIELDS))
    substitute_type = serializers.ChoiceField(choices=sorted(SUBSTITUTION_SUBSTITUTE_FIELDS))
    shortage = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    needed = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    confidence = serializers.FloatField(min_value=0, max_value=1)
    remaining_shortage = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, default=Decimal('0')
    )


# =============================================================================
# DISTRIBUTION RECORDS
# =============================================================================

class DistributionRecordSerializer(serializers.ModelSerializer):
    """Record joined with its request's farmer"""
    request_id = serializers.UUIDField(source='request.id', read_only=True)
    season = serializers.CharField(source='request.season', read_only=True)
    farmer_name = serializers.CharField(source='request.farmer_name', read_only=True)
    barangay = serializers.CharField(source='request.barangay', read_only=True)
    farm_area_ha = serializers.DecimalField(
        source='request.farm_area_ha', max_digits=10, decimal_places=4, read_only=True
    )

    class Meta:
        model = DistributionRecord
        fields = [
            'id', 'request_id', 'season', 'farmer_name', 'barangay', 'farm_area_ha',
            'distribution_date', 'fertilizer_type', 'fertilizer_bags_given',
            'seed_type', 'seed_kg_given', 'voucher_code', 'farmer_signature',
            'verified_by', 'verification_notes', 'claimed', 'claim_date',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class DistributionRecordCreateSerializer(serializers.ModelSerializer):
    """Manual record; breakdown fields default to the request's quantities"""
    request = serializers.PrimaryKeyRelatedField(queryset=FarmerRequest.objects.all())

    class Meta:
        model = DistributionRecord
        fields = [
            'request', 'distribution_date', 'fertilizer_type', 'fertilizer_bags_given',
            'seed_type', 'seed_kg_given', 'voucher_code', 'farmer_signature', 'verified_by',
            'verification_notes',
        ]
        extra_kwargs = {
            'fertilizer_type': {'required': False},
            'fertilizer_bags_given': {'required': False},
            'seed_type': {'required': False},
            'seed_kg_given': {'required': False},
        }


class DistributionRecordUpdateSerializer(serializers.ModelSerializer):

    class Meta:
        model = DistributionRecord
        fields = [
            'distribution_date', 'fertilizer_type', 'fertilizer_bags_given',
            'seed_type', 'seed_kg_given', 'voucher_code', 'farmer_signature',
            'verified_by', 'verification_notes',
        ]
