from django.urls import path

from . import views

app_name = 'rsbsa'

urlpatterns = [
    # Submissions
    path('submissions/', views.SubmissionListCreateView.as_view(), name='submission-list'),
    path('submissions/<uuid:pk>/', views.SubmissionDetailView.as_view(), name='submission-detail'),
    path('submissions/<uuid:pk>/parcels/', views.SubmissionParcelsView.as_view(), name='submission-parcels'),

    # Parcels
    path('parcels/by-farmer/', views.ParcelsByFarmerView.as_view(), name='parcels-by-farmer'),
    path('parcels/<uuid:pk>/', views.ParcelDetailView.as_view(), name='parcel-detail'),

    # Lookups
    path('farmers/summary/', views.FarmerSummaryView.as_view(), name='farmer-summary'),
    path('landowners/', views.LandOwnerListView.as_view(), name='landowners'),
    path('barangays/', views.BarangayListView.as_view(), name='barangays'),
    path('ffrs/<str:code>/', views.FFRSLookupView.as_view(), name='ffrs-lookup'),
]
