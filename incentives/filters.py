import django_filters

from .models import IncentiveLog


class IncentiveLogFilter(django_filters.FilterSet):
    """Event date range and incentive type, shared by logs and the report."""
    start_date = django_filters.DateFilter(field_name='event_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='event_date', lookup_expr='lte')
    incentive_type = django_filters.CharFilter(field_name='incentive_type', lookup_expr='iexact')

    class Meta:
        model = IncentiveLog
        fields = ['incentive_type', 'start_date', 'end_date']
