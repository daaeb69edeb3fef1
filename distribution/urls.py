from django.urls import path

from . import views

app_name = 'distribution'

urlpatterns = [
    # Allocations
    path('allocations/', views.AllocationListCreateView.as_view(), name='allocation-list'),
    path('allocations/season/<str:season>/', views.AllocationBySeasonView.as_view(), name='allocation-by-season'),
    path('allocations/<uuid:pk>/', views.AllocationDetailView.as_view(), name='allocation-detail'),

    # Farmer requests
    path('requests/', views.FarmerRequestListCreateView.as_view(), name='request-list'),
    path('requests/<uuid:pk>/', views.FarmerRequestDetailView.as_view(), name='request-detail'),
    path('requests/<uuid:pk>/approve/', views.ApproveRequestView.as_view(), name='request-approve'),
    path('requests/<uuid:pk>/reject/', views.RejectRequestView.as_view(), name='request-reject'),
    path('requests/<uuid:pk>/distribute/', views.DistributeRequestView.as_view(), name='request-distribute'),
    path('requests/<uuid:pk>/shortage/', views.RequestShortageView.as_view(), name='request-shortage'),
    path('requests/<uuid:pk>/alternatives/', views.RequestAlternativesView.as_view(), name='request-alternatives'),
    path(
        'requests/<uuid:pk>/apply-substitution/',
        views.ApplySubstitutionView.as_view(),
        name='request-apply-substitution'
    ),

    # Shortages & alternatives
    path('shortages/<str:season>/', views.SeasonShortageView.as_view(), name='season-shortages'),
    path(
        'alternatives/<str:season>/auto-fetch/',
        views.AutoFetchAlternativesView.as_view(),
        name='alternatives-auto-fetch'
    ),

    # Distribution records
    path('records/', views.DistributionRecordCreateView.as_view(), name='record-create'),
    path('records/season/<str:season>/', views.SeasonRecordListView.as_view(), name='record-season-list'),
    path('records/<uuid:pk>/', views.DistributionRecordDetailView.as_view(), name='record-detail'),

    # Analysis
    path('gap-analysis/<str:season>/', views.GapAnalysisView.as_view(), name='gap-analysis'),
    path('barangay-shortages/<str:season>/', views.BarangayShortagesView.as_view(), name='barangay-shortages'),
    path('historical-comparison/', views.HistoricalComparisonView.as_view(), name='historical-comparison'),
    path('recommendations/<str:season>/', views.RecommendationsView.as_view(), name='recommendations'),
]
