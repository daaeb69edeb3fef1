from decimal import Decimal

from rest_framework import serializers

from .models import RSBSASubmission, FarmParcel


class FarmParcelSerializer(serializers.ModelSerializer):
    """Parcel detail / update"""
    ownership_type = serializers.CharField(read_only=True)
    submission_id = serializers.UUIDField(source='submission.id', read_only=True)
    farmer_name = serializers.CharField(source='submission.full_name', read_only=True)

    class Meta:
        model = FarmParcel
        fields = [
            'id', 'submission_id', 'farmer_name', 'parcel_number',
            'farm_location_barangay', 'farm_location_municipality', 'total_farm_area_ha',
            'within_ancestral_domain', 'ownership_document_no', 'agrarian_reform_beneficiary',
            'ownership_type', 'ownership_type_registered_owner', 'ownership_type_tenant',
            'ownership_type_lessee', 'ownership_type_others',
            'tenant_land_owner_name', 'lessee_land_owner_name', 'ownership_others_specify',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'submission_id', 'farmer_name', 'ownership_type', 'created_at', 'updated_at']

    def validate_total_farm_area_ha(self, value):
        if value is not None and value <= Decimal('0'):
            raise serializers.ValidationError("Parcel area must be a positive number.")
        return value


class FarmParcelCreateSerializer(serializers.ModelSerializer):
    """
    Parcel submitted together with a new registration.
    Barangay and area may be left empty; such parcels are skipped.
    """
    parcel_number = serializers.CharField(required=False, allow_blank=True)
    farm_location_barangay = serializers.CharField(required=False, allow_blank=True)
    total_farm_area_ha = serializers.DecimalField(
        max_digits=10, decimal_places=4, required=False, allow_null=True
    )

    class Meta:
        model = FarmParcel
        fields = [
            'parcel_number', 'farm_location_barangay', 'farm_location_municipality',
            'total_farm_area_ha', 'within_ancestral_domain', 'ownership_document_no',
            'agrarian_reform_beneficiary', 'ownership_type_registered_owner',
            'ownership_type_tenant', 'ownership_type_lessee', 'ownership_type_others',
            'tenant_land_owner_name', 'lessee_land_owner_name', 'ownership_others_specify',
        ]

    def validate_total_farm_area_ha(self, value):
        if value is not None and value <= Decimal('0'):
            raise serializers.ValidationError("Parcel area must be a positive number.")
        return value


class RSBSASubmissionListSerializer(serializers.ModelSerializer):
    """Masterlist row"""
    full_name = serializers.CharField(read_only=True)
    age = serializers.IntegerField(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    parcel_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = RSBSASubmission
        fields = [
            'id', 'ffrs_code', 'full_name', 'last_name', 'first_name', 'middle_name', 'ext_name',
            'gender', 'age', 'barangay', 'municipality', 'farm_location', 'total_farm_area',
            'ownership_type_registered_owner', 'ownership_type_tenant', 'ownership_type_lessee',
            'status', 'status_display', 'parcel_count', 'submitted_at',
        ]
        read_only_fields = fields


class RSBSASubmissionDetailSerializer(serializers.ModelSerializer):
    """Full registration with parcels"""
    full_name = serializers.CharField(read_only=True)
    age = serializers.IntegerField(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    parcels = FarmParcelSerializer(many=True, read_only=True)
    created_by_name = serializers.CharField(source='created_by.get_full_name', read_only=True, default=None)

    class Meta:
        model = RSBSASubmission
        fields = [
            'id', 'ffrs_code', 'full_name', 'last_name', 'first_name', 'middle_name', 'ext_name',
            'gender', 'birthdate', 'age', 'contact_number', 'barangay', 'municipality',
            'main_livelihood', 'farm_location', 'parcel_area', 'total_farm_area',
            'ownership_type_registered_owner', 'ownership_type_tenant', 'ownership_type_lessee',
            'farmer_rice', 'farmer_corn', 'farmer_other_crops', 'farmer_other_crops_text',
            'farmer_livestock', 'farmer_livestock_text', 'farmer_poultry', 'farmer_poultry_text',
            'status', 'status_display', 'parcels', 'created_by_name', 'submitted_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'ffrs_code', 'full_name', 'age', 'status_display', 'farm_location',
            'parcel_area', 'total_farm_area', 'parcels', 'created_by_name',
            'submitted_at', 'updated_at',
        ]


class RSBSASubmissionCreateSerializer(serializers.ModelSerializer):
    """New registration with nested parcels"""
    parcels = FarmParcelCreateSerializer(many=True)

    class Meta:
        model = RSBSASubmission
        fields = [
            'last_name', 'first_name', 'middle_name', 'ext_name',
            'gender', 'birthdate', 'contact_number', 'barangay', 'municipality',
            'main_livelihood',
            'farmer_rice', 'farmer_corn', 'farmer_other_crops', 'farmer_other_crops_text',
            'farmer_livestock', 'farmer_livestock_text', 'farmer_poultry', 'farmer_poultry_text',
            'parcels',
        ]

    def validate_parcels(self, value):
        if not value:
            raise serializers.ValidationError("At least one farmland parcel is required.")
        return value


class RSBSASubmissionUpdateSerializer(serializers.ModelSerializer):
    """Profile fields editable after registration"""

    class Meta:
        model = RSBSASubmission
        fields = [
            'last_name', 'first_name', 'middle_name', 'ext_name',
            'gender', 'birthdate', 'contact_number', 'barangay', 'municipality',
            'main_livelihood', 'status',
            'farmer_rice', 'farmer_corn', 'farmer_other_crops', 'farmer_other_crops_text',
            'farmer_livestock', 'farmer_livestock_text', 'farmer_poultry', 'farmer_poultry_text',
        ]


class FarmerSummarySerializer(serializers.ModelSerializer):
    submission_id = serializers.UUIDField(source='id', read_only=True)
    full_name = serializers.CharField(read_only=True)
    total_parcels = serializers.IntegerField(read_only=True)
    parcels_area = serializers.DecimalField(max_digits=12, decimal_places=4, read_only=True)

    class Meta:
        model = RSBSASubmission
        fields = [
            'submission_id', 'ffrs_code', 'full_name', 'last_name', 'first_name', 'middle_name',
            'barangay', 'municipality', 'total_parcels', 'parcels_area', 'submitted_at',
        ]
        read_only_fields = fields


class LandOwnerSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='full_name', read_only=True)

    class Meta:
        model = RSBSASubmission
        fields = ['id', 'name', 'barangay', 'municipality']
        read_only_fields = fields
