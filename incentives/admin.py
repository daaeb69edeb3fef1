from django.contrib import admin

from .models import IncentiveLog


@admin.register(IncentiveLog)
class IncentiveLogAdmin(admin.ModelAdmin):
    list_display = ['event_date', 'farmer', 'incentive_type', 'qty_requested', 'qty_received', 'is_signed']
    list_filter = ['incentive_type', 'is_signed']
    search_fields = ['incentive_type', 'farmer__last_name', 'farmer__first_name']
    raw_id_fields = ['farmer']
    date_hierarchy = 'event_date'
    readonly_fields = ['id', 'encoder', 'created_at', 'updated_at']
