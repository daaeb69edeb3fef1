from django.contrib import admin

from .catalog import ALLOCATION_QUANTITY_FIELDS, REQUEST_QUANTITY_FIELDS
from .models import RegionalAllocation, FarmerRequest, DistributionRecord


@admin.register(RegionalAllocation)
class RegionalAllocationAdmin(admin.ModelAdmin):
    list_display = ['season', 'allocation_date', 'urea_46_0_0_bags', 'complete_14_14_14_bags', 'status', 'created_at']
    list_filter = ['status']
    readonly_fields = ['id', 'season', 'created_at', 'updated_at']

    fieldsets = (
        ('Season', {
            'fields': ('season', 'allocation_date', 'season_start_date', 'season_end_date', 'status')
        }),
        ('Stock', {
            'fields': tuple(ALLOCATION_QUANTITY_FIELDS)
        }),
        ('Notes', {
            'fields': ('notes', 'created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


class DistributionRecordInline(admin.StackedInline):
    model = DistributionRecord
    extra = 0
    can_delete = False


@admin.register(FarmerRequest)
class FarmerRequestAdmin(admin.ModelAdmin):
    list_display = ['farmer_name', 'barangay', 'season', 'status', 'request_date']
    list_filter = ['season', 'status', 'barangay', 'crop_type']
    search_fields = ['farmer_name', 'barangay']
    raw_id_fields = ['farmer']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [DistributionRecordInline]

    fieldsets = (
        ('Farmer', {
            'fields': ('season', 'request_date', 'farmer', 'farmer_name', 'barangay',
                       'farm_area_ha', 'crop_type', 'ownership_type', 'num_parcels')
        }),
        ('Requested', {
            'fields': ('fertilizer_requested', 'seeds_requested', *REQUEST_QUANTITY_FIELDS)
        }),
        ('Status', {
            'fields': ('status', 'rejection_reason', 'request_notes')
        }),
    )


@admin.register(DistributionRecord)
class DistributionRecordAdmin(admin.ModelAdmin):
    list_display = ['request', 'distribution_date', 'fertilizer_bags_given', 'seed_kg_given', 'claimed']
    list_filter = ['claimed', 'farmer_signature']
    search_fields = ['request__farmer_name', 'voucher_code']
    raw_id_fields = ['request']
