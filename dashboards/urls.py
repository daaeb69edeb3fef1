"""
Dashboard URL Configuration
"""

from django.urls import path
from .views import (
    DashboardStatsView,
    MonthlyTrendsView,
    RecentActivityView,
    AvailableSeasonsView,
    CompletionReportView,
    RSBSADemographicsView,
)
from .exports import (
    RSBSAMasterlistExcelView,
    SeasonRecordsExcelView,
    SeasonRecordsPDFView,
)

app_name = 'dashboards'

urlpatterns = [
    # KPI & charts
    path('stats/', DashboardStatsView.as_view(), name='stats'),
    path('monthly-trends/', MonthlyTrendsView.as_view(), name='monthly-trends'),
    path('recent-activity/', RecentActivityView.as_view(), name='recent-activity'),
    path('seasons/', AvailableSeasonsView.as_view(), name='available-seasons'),

    # Reports
    path('completion/<str:season>/', CompletionReportView.as_view(), name='completion-report'),
    path('demographics/', RSBSADemographicsView.as_view(), name='demographics'),

    # Exports
    path('exports/masterlist/', RSBSAMasterlistExcelView.as_view(), name='export-masterlist'),
    path('exports/records/<str:season>/excel/', SeasonRecordsExcelView.as_view(), name='export-records-excel'),
    path('exports/records/<str:season>/pdf/', SeasonRecordsPDFView.as_view(), name='export-records-pdf'),
]
