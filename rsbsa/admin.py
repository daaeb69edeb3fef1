from django.contrib import admin

from .models import RSBSASubmission, FarmParcel


class FarmParcelInline(admin.TabularInline):
    model = FarmParcel
    extra = 0
    fields = [
        'parcel_number', 'farm_location_barangay', 'total_farm_area_ha',
        'ownership_type_registered_owner', 'ownership_type_tenant',
        'ownership_type_lessee', 'tenant_land_owner_name', 'lessee_land_owner_name',
    ]


@admin.register(RSBSASubmission)
class RSBSASubmissionAdmin(admin.ModelAdmin):
    list_display = ['ffrs_code', 'last_name', 'first_name', 'barangay', 'total_farm_area', 'status', 'submitted_at']
    list_filter = ['status', 'barangay', 'gender']
    search_fields = ['last_name', 'first_name', 'ffrs_code']
    readonly_fields = ['id', 'ffrs_code', 'farm_location', 'parcel_area', 'total_farm_area', 'submitted_at', 'updated_at']
    inlines = [FarmParcelInline]

    fieldsets = (
        ('Farmer', {
            'fields': ('ffrs_code', 'last_name', 'first_name', 'middle_name', 'ext_name',
                       'gender', 'birthdate', 'contact_number')
        }),
        ('Residence', {
            'fields': ('barangay', 'municipality', 'main_livelihood')
        }),
        ('Farm', {
            'fields': ('farm_location', 'parcel_area', 'total_farm_area',
                       'ownership_type_registered_owner', 'ownership_type_tenant', 'ownership_type_lessee')
        }),
        ('Activities', {
            'fields': ('farmer_rice', 'farmer_corn', 'farmer_other_crops', 'farmer_other_crops_text',
                       'farmer_livestock', 'farmer_livestock_text', 'farmer_poultry', 'farmer_poultry_text'),
            'classes': ('collapse',)
        }),
        ('Status', {
            'fields': ('status', 'created_by', 'submitted_at', 'updated_at')
        }),
    )


@admin.register(FarmParcel)
class FarmParcelAdmin(admin.ModelAdmin):
    list_display = ['parcel_number', 'submission', 'farm_location_barangay', 'total_farm_area_ha', 'ownership_type']
    list_filter = ['farm_location_barangay', 'ownership_type_registered_owner', 'ownership_type_tenant']
    search_fields = ['submission__last_name', 'submission__first_name', 'tenant_land_owner_name', 'lessee_land_owner_name']
    raw_id_fields = ['submission']
