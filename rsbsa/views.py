"""
RSBSA Registry Views

API Endpoints:
- /api/rsbsa/submissions/ - List (search, filter) and register farmers
- /api/rsbsa/submissions/{id}/ - Detail, update, delete (?force=true)
- /api/rsbsa/submissions/{id}/parcels/ - Parcels of one submission
- /api/rsbsa/parcels/by-farmer/ - Parcels by farmer name
- /api/rsbsa/parcels/{id}/ - Parcel detail / update
- /api/rsbsa/farmers/summary/ - Parcel count and area per farmer
- /api/rsbsa/landowners/ - Registered land owners
- /api/rsbsa/barangays/ - Barangay code table
- /api/rsbsa/ffrs/{code}/ - Decode an FFRS code
"""

import logging

from django.db.models import Count
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, filters, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsFieldStaffOrReadOnly, IsOfficeStaff
from .ffrs import BARANGAY_CODES, get_barangay_from_ffrs_code, is_valid_ffrs_code
from .models import RSBSASubmission, FarmParcel
from .serializers import (
    FarmParcelSerializer,
    RSBSASubmissionListSerializer,
    RSBSASubmissionDetailSerializer,
    RSBSASubmissionCreateSerializer,
    RSBSASubmissionUpdateSerializer,
    FarmerSummarySerializer,
    LandOwnerSerializer,
)
from .services import RSBSARegistrationService, LandOwnerReferenced

logger = logging.getLogger(__name__)


# =============================================================================
# SUBMISSIONS
# =============================================================================

class SubmissionListCreateView(generics.ListCreateAPIView):
    """
    GET /api/rsbsa/submissions/
    POST /api/rsbsa/submissions/

    Query Parameters:
    - barangay, status: exact filters
    - search: last/first/middle name, barangay, FFRS code
    - ordering: last_name, submitted_at, total_farm_area
    """
    permission_classes = [IsFieldStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['barangay', 'status']
    search_fields = ['last_name', 'first_name', 'middle_name', 'barangay', 'ffrs_code']
    ordering_fields = ['last_name', 'submitted_at', 'total_farm_area']
    ordering = ['last_name', 'first_name']

    def get_queryset(self):
        return RSBSASubmission.objects.annotate(parcel_count=Count('parcels'))

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return RSBSASubmissionCreateSerializer
        return RSBSASubmissionListSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        parcels = [dict(p) for p in data.pop('parcels')]

        service = RSBSARegistrationService(user=request.user, request=request)
        try:
            submission = service.create_submission(parcels, **data)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            RSBSASubmissionDetailSerializer(submission).data,
            status=status.HTTP_201_CREATED
        )


class SubmissionDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PATCH/DELETE /api/rsbsa/submissions/{id}/

    DELETE answers 409 with the referencing parcels when other farmers name
    this farmer as their land owner, unless `?force=true` is given.
    """
    permission_classes = [IsFieldStaffOrReadOnly]
    queryset = RSBSASubmission.objects.prefetch_related('parcels').select_related('created_by')

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return RSBSASubmissionUpdateSerializer
        return RSBSASubmissionDetailSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        submission = self.get_object()
        serializer = self.get_serializer(submission, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        service = RSBSARegistrationService(user=request.user, request=request)
        submission = service.update_submission(submission, **serializer.validated_data)
        return Response(RSBSASubmissionDetailSerializer(submission).data)

    def destroy(self, request, *args, **kwargs):
        submission = self.get_object()
        force = request.query_params.get('force', '').lower() in ('1', 'true', 'yes')

        service = RSBSARegistrationService(user=request.user, request=request)
        try:
            parcels_deleted = service.delete_submission(submission, force=force)
        except LandOwnerReferenced as e:
            return Response(
                {
                    'warning': str(e),
                    'requires_confirmation': True,
                    'affected_parcels': FarmParcelSerializer(e.parcels, many=True).data,
                },
                status=status.HTTP_409_CONFLICT
            )

        return Response({
            'message': 'RSBSA record deleted successfully',
            'parcels_deleted': parcels_deleted,
        })


class SubmissionParcelsView(generics.ListAPIView):
    """GET /api/rsbsa/submissions/{id}/parcels/"""
    permission_classes = [IsOfficeStaff]
    serializer_class = FarmParcelSerializer
    pagination_class = None

    def get_queryset(self):
        submission = get_object_or_404(RSBSASubmission, pk=self.kwargs['pk'])
        return submission.parcels.select_related('submission').order_by('parcel_number')


# =============================================================================
# PARCELS
# =============================================================================

class ParcelsByFarmerView(APIView):
    """
    GET /api/rsbsa/parcels/by-farmer/?last_name=...&first_name=...
    """
    permission_classes = [IsOfficeStaff]

    def get(self, request):
        last_name = request.query_params.get('last_name', '')
        first_name = request.query_params.get('first_name', '')
        if not last_name.strip() or not first_name.strip():
            return Response(
                {'error': 'last_name and first_name are required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        parcels = RSBSARegistrationService.parcels_by_farmer(last_name, first_name)
        return Response(FarmParcelSerializer(parcels, many=True).data)


class ParcelDetailView(generics.RetrieveUpdateAPIView):
    """GET/PATCH /api/rsbsa/parcels/{id}/"""
    permission_classes = [IsFieldStaffOrReadOnly]
    serializer_class = FarmParcelSerializer
    queryset = FarmParcel.objects.select_related('submission')

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        parcel = self.get_object()
        serializer = self.get_serializer(parcel, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        service = RSBSARegistrationService(user=request.user, request=request)
        try:
            parcel = service.update_parcel(parcel, **serializer.validated_data)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(FarmParcelSerializer(parcel).data)


# =============================================================================
# LOOKUPS
# =============================================================================

class FarmerSummaryView(generics.ListAPIView):
    """GET /api/rsbsa/farmers/summary/"""
    permission_classes = [IsOfficeStaff]
    serializer_class = FarmerSummarySerializer

    def get_queryset(self):
        return RSBSARegistrationService.farmer_summary()


class LandOwnerListView(generics.ListAPIView):
    """GET /api/rsbsa/landowners/ - used to pick a land owner for tenant/lessee parcels"""
    permission_classes = [IsOfficeStaff]
    serializer_class = LandOwnerSerializer
    pagination_class = None

    def get_queryset(self):
        return RSBSARegistrationService.land_owners()


class BarangayListView(APIView):
    """GET /api/rsbsa/barangays/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request):
        return Response([
            {'name': name, 'code': code}
            for name, code in BARANGAY_CODES.items()
        ])


class FFRSLookupView(APIView):
    """GET /api/rsbsa/ffrs/{code}/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request, code):
        if not is_valid_ffrs_code(code):
            return Response({'error': 'Invalid FFRS code format'}, status=status.HTTP_400_BAD_REQUEST)

        submission = RSBSASubmission.objects.filter(ffrs_code=code).first()
        return Response({
            'ffrs_code': code,
            'barangay': get_barangay_from_ffrs_code(code),
            'submission_id': str(submission.id) if submission else None,
            'farmer_name': submission.full_name if submission else None,
        })
