from django.urls import path

from . import views

app_name = 'incentives'

urlpatterns = [
    path('logs/', views.IncentiveLogListCreateView.as_view(), name='log-list'),
    path('farmer/<uuid:farmer_id>/', views.FarmerIncentiveLogsView.as_view(), name='farmer-logs'),
    path('report/', views.IncentiveReportView.as_view(), name='report'),
]
