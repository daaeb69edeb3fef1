import django_filters

from .models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    """Filters for the audit trail list: action, module, user and date range."""
    start_date = django_filters.DateFilter(field_name='timestamp', lookup_expr='date__gte')
    end_date = django_filters.DateFilter(field_name='timestamp', lookup_expr='date__lte')
    user_name = django_filters.CharFilter(field_name='user_name', lookup_expr='iexact')

    class Meta:
        model = AuditLog
        fields = ['action', 'module', 'user_role', 'user_name', 'start_date', 'end_date']
