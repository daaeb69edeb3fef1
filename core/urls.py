"""
URL configuration for the Dumangas Agricultural Office backend.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

admin.site.site_header = 'Dumangas Agricultural Office'
admin.site.site_title = 'Agri Office Admin'

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/audit/', include('audit.urls')),  # Audit trail (admin only)
    path('api/rsbsa/', include('rsbsa.urls')),  # Farmer registry and parcels
    path('api/distribution/', include('distribution.urls')),  # Allocations, requests, records
    path('api/dashboards/', include('dashboards.urls')),  # KPIs, reports, exports
    path('api/incentives/', include('incentives.urls')),  # Incentive hand-out logs
]
