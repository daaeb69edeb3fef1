from django.urls import path

from . import views

app_name = 'audit'

urlpatterns = [
    path('logs/', views.AuditLogListView.as_view(), name='log-list'),
    path('logs/<uuid:pk>/', views.AuditLogDetailView.as_view(), name='log-detail'),
    path('stats/', views.AuditStatsView.as_view(), name='stats'),
    path('export/', views.AuditExportView.as_view(), name='export'),
    path(
        'record/<str:record_type>/<str:record_id>/',
        views.RecordHistoryView.as_view(),
        name='record-history'
    ),
]
