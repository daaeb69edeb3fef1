"""
Input Distribution Views

API Endpoints:
- /api/distribution/allocations/ - List, create/update by season
- /api/distribution/allocations/season/{season}/ - Allocation of one season
- /api/distribution/allocations/{id}/ - Detail, update, delete (with the season's requests)
- /api/distribution/requests/ - List (?season=), create
- /api/distribution/requests/{id}/ - Detail, update (pending only), delete
- /api/distribution/requests/{id}/approve|reject|distribute/ - Status transitions
- /api/distribution/requests/{id}/shortage/ - Shortage check for one request
- /api/distribution/requests/{id}/alternatives/ - Substitution suggestions
- /api/distribution/requests/{id}/apply-substitution/ - Apply a substitution
- /api/distribution/shortages/{season}/ - Shortage check for the whole season
- /api/distribution/alternatives/{season}/auto-fetch/ - Queue suggestion pre-fetch
- /api/distribution/records/ - Manual create
- /api/distribution/records/season/{season}/ - Records of a season
- /api/distribution/records/{id}/ - Detail, update
- /api/distribution/gap-analysis/{season}/
- /api/distribution/barangay-shortages/{season}/
- /api/distribution/historical-comparison/
- /api/distribution/recommendations/{season}/ - Prioritized actions for the season
"""

import logging

from django.http import Http404
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, filters, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsFieldStaffOrReadOnly, IsOfficeStaff
from .models import RegionalAllocation, FarmerRequest, DistributionRecord
from .serializers import (
    RegionalAllocationSerializer,
    FarmerRequestSerializer,
    FarmerRequestCreateSerializer,
    FarmerRequestUpdateSerializer,
    RejectRequestSerializer,
    ApplySubstitutionSerializer,
    DistributionRecordSerializer,
    DistributionRecordCreateSerializer,
    DistributionRecordUpdateSerializer,
)
from .services import DistributionWorkflowService, DistributionAnalysisService, SeasonStockLedger
from .services.substitution import apply_substitution, suggest_for_request
from .tasks import auto_fetch_alternatives

logger = logging.getLogger(__name__)


def _workflow(request):
    return DistributionWorkflowService(user=request.user, request=request)


# =============================================================================
# ALLOCATIONS
# =============================================================================

class AllocationListCreateView(generics.ListCreateAPIView):
    """
    GET /api/distribution/allocations/ - newest first
    POST /api/distribution/allocations/ - creates the season's allocation,
    or updates it when one already exists for that season
    """
    permission_classes = [IsFieldStaffOrReadOnly]
    serializer_class = RegionalAllocationSerializer
    queryset = RegionalAllocation.objects.select_related('created_by')
    pagination_class = None

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        allocation, created = _workflow(request).upsert_allocation(**serializer.validated_data)
        return Response(
            {
                'message': 'Regional allocation saved successfully',
                'created': created,
                'allocation': RegionalAllocationSerializer(allocation).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class AllocationBySeasonView(generics.RetrieveAPIView):
    """GET /api/distribution/allocations/season/{season}/"""
    permission_classes = [IsOfficeStaff]
    serializer_class = RegionalAllocationSerializer
    queryset = RegionalAllocation.objects.all()
    lookup_field = 'season'


class AllocationDetailView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/DELETE /api/distribution/allocations/{id}/"""
    permission_classes = [IsFieldStaffOrReadOnly]
    serializer_class = RegionalAllocationSerializer
    queryset = RegionalAllocation.objects.all()

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        allocation = self.get_object()
        serializer = self.get_serializer(allocation, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            allocation = _workflow(request).update_allocation(allocation, **serializer.validated_data)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(RegionalAllocationSerializer(allocation).data)

    def destroy(self, request, *args, **kwargs):
        allocation = self.get_object()
        season = allocation.season
        requests_deleted = _workflow(request).delete_allocation(allocation)
        return Response({
            'message': 'Regional allocation and associated requests deleted successfully',
            'season': season,
            'requests_deleted': requests_deleted,
        })


# =============================================================================
# FARMER REQUESTS
# =============================================================================

class FarmerRequestListCreateView(generics.ListCreateAPIView):
    """
    GET /api/distribution/requests/
    POST /api/distribution/requests/

    Query Parameters:
    - season: season key (wet_2025)
    - status, barangay: exact filters
    - search: farmer name, barangay
    - with_shortage=true: include each request's shortage flag
    """
    permission_classes = [IsFieldStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['season', 'status', 'barangay', 'crop_type']
    search_fields = ['farmer_name', 'barangay']
    ordering_fields = ['request_date', 'farmer_name', 'barangay', 'status']
    ordering = ['request_date', 'created_at']

    def get_queryset(self):
        return FarmerRequest.objects.select_related('farmer', 'distribution_record')

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return FarmerRequestCreateSerializer
        return FarmerRequestSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.request.query_params.get('with_shortage', '').lower() in ('1', 'true', 'yes'):
            context['ledgers'] = {}
        return context

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        farmer_request = _workflow(request).create_request(**serializer.validated_data)
        return Response(
            {
                'message': 'Farmer request created successfully',
                'request': FarmerRequestSerializer(farmer_request).data,
            },
            status=status.HTTP_201_CREATED
        )


class FarmerRequestDetailView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/DELETE /api/distribution/requests/{id}/"""
    permission_classes = [IsFieldStaffOrReadOnly]
    queryset = FarmerRequest.objects.select_related('farmer')

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return FarmerRequestUpdateSerializer
        return FarmerRequestSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        farmer_request = self.get_object()
        serializer = self.get_serializer(farmer_request, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            farmer_request = _workflow(request).update_request(farmer_request, **serializer.validated_data)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Request updated successfully',
            'request': FarmerRequestSerializer(farmer_request).data,
        })

    def destroy(self, request, *args, **kwargs):
        _workflow(request).delete_request(self.get_object())
        return Response({'message': 'Request deleted successfully'})


class RequestTransitionView(APIView):
    """Base for status transitions on one request"""
    permission_classes = [IsFieldStaffOrReadOnly]

    def get_request_object(self, pk):
        return get_object_or_404(FarmerRequest, pk=pk)


class ApproveRequestView(RequestTransitionView):
    """POST /api/distribution/requests/{id}/approve/"""

    def post(self, request, pk):
        farmer_request = self.get_request_object(pk)
        try:
            record = _workflow(request).approve_request(farmer_request)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        farmer_request.refresh_from_db()
        return Response({
            'message': 'Request approved and distribution recorded',
            'request': FarmerRequestSerializer(farmer_request).data,
            'record': DistributionRecordSerializer(record).data,
        })


class RejectRequestView(RequestTransitionView):
    """POST /api/distribution/requests/{id}/reject/ {"reason": "..."}"""

    def post(self, request, pk):
        farmer_request = self.get_request_object(pk)
        serializer = RejectRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            farmer_request = _workflow(request).reject_request(
                farmer_request, reason=serializer.validated_data['reason']
            )
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Request rejected',
            'request': FarmerRequestSerializer(farmer_request).data,
        })


class DistributeRequestView(RequestTransitionView):
    """POST /api/distribution/requests/{id}/distribute/"""

    def post(self, request, pk):
        farmer_request = self.get_request_object(pk)
        try:
            farmer_request = _workflow(request).mark_distributed(farmer_request)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Request marked as distributed',
            'request': FarmerRequestSerializer(farmer_request).data,
        })


# =============================================================================
# SHORTAGES & SUBSTITUTION
# =============================================================================

class RequestShortageView(APIView):
    """GET /api/distribution/requests/{id}/shortage/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request, pk):
        farmer_request = get_object_or_404(FarmerRequest, pk=pk)
        ledger = SeasonStockLedger.for_season(farmer_request.season)
        return Response({
            'has_allocation': ledger.has_allocation,
            **ledger.check(farmer_request),
        })


class SeasonShortageView(APIView):
    """GET /api/distribution/shortages/{season}/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request, season):
        return Response(SeasonStockLedger.for_season(season).summary())


class RequestAlternativesView(APIView):
    """
    GET /api/distribution/requests/{id}/alternatives/

    Suggestions are cached per request; ?refresh=true recomputes them.
    """
    permission_classes = [IsOfficeStaff]

    def get(self, request, pk):
        farmer_request = get_object_or_404(FarmerRequest, pk=pk)
        refresh = request.query_params.get('refresh', '').lower() in ('1', 'true', 'yes')
        return Response(suggest_for_request(farmer_request, use_cache=not refresh))


class ApplySubstitutionView(RequestTransitionView):
    """POST /api/distribution/requests/{id}/apply-substitution/"""

    def post(self, request, pk):
        farmer_request = self.get_request_object(pk)
        serializer = ApplySubstitutionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            farmer_request = apply_substitution(
                farmer_request,
                user=request.user,
                request=request,
                **serializer.validated_data
            )
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': 'Substitution applied; request remains pending for review',
            'request': FarmerRequestSerializer(farmer_request).data,
        })


class AutoFetchAlternativesView(APIView):
    """POST /api/distribution/alternatives/{season}/auto-fetch/"""
    permission_classes = [IsFieldStaffOrReadOnly]

    def post(self, request, season):
        task = auto_fetch_alternatives.delay(season)
        logger.info(f"Queued alternative auto-fetch for {season}: {task.id}")
        return Response(
            {'message': f'Fetching alternatives for {season}', 'task_id': task.id},
            status=status.HTTP_202_ACCEPTED
        )


# =============================================================================
# DISTRIBUTION RECORDS
# =============================================================================

class DistributionRecordCreateView(generics.CreateAPIView):
    """POST /api/distribution/records/"""
    permission_classes = [IsFieldStaffOrReadOnly]
    serializer_class = DistributionRecordCreateSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        farmer_request = data.pop('request')
        try:
            record = _workflow(request).create_record(farmer_request, **data)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                'message': 'Distribution recorded successfully',
                'record': DistributionRecordSerializer(record).data,
            },
            status=status.HTTP_201_CREATED
        )


class SeasonRecordListView(generics.ListAPIView):
    """GET /api/distribution/records/season/{season}/ - newest first"""
    permission_classes = [IsOfficeStaff]
    serializer_class = DistributionRecordSerializer
    pagination_class = None

    def get_queryset(self):
        return (
            DistributionRecord.objects
            .filter(request__season=self.kwargs['season'])
            .select_related('request')
            .order_by('-distribution_date')
        )


class DistributionRecordDetailView(generics.RetrieveUpdateAPIView):
    """GET/PATCH /api/distribution/records/{id}/"""
    permission_classes = [IsFieldStaffOrReadOnly]
    queryset = DistributionRecord.objects.select_related('request')

    def get_serializer_class(self):
        if self.request.method in ('PUT', 'PATCH'):
            return DistributionRecordUpdateSerializer
        return DistributionRecordSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        record = self.get_object()
        serializer = self.get_serializer(record, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        record = _workflow(request).update_record(record, **serializer.validated_data)
        return Response({
            'message': 'Distribution record updated successfully',
            'record': DistributionRecordSerializer(record).data,
        })


# =============================================================================
# ANALYSIS
# =============================================================================

class GapAnalysisView(APIView):
    """GET /api/distribution/gap-analysis/{season}/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request, season):
        try:
            return Response(DistributionAnalysisService().gap_analysis(season))
        except RegionalAllocation.DoesNotExist:
            raise Http404('No allocation found for this season')


class BarangayShortagesView(APIView):
    """GET /api/distribution/barangay-shortages/{season}/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request, season):
        try:
            return Response(DistributionAnalysisService().barangay_shortages(season))
        except RegionalAllocation.DoesNotExist:
            raise Http404('No allocation found for this season')


class RecommendationsView(APIView):
    """GET /api/distribution/recommendations/{season}/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request, season):
        try:
            return Response(DistributionAnalysisService().recommendations(season))
        except RegionalAllocation.DoesNotExist:
            raise Http404('No allocation found for this season')


class HistoricalComparisonView(APIView):
    """GET /api/distribution/historical-comparison/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request):
        return Response(DistributionAnalysisService().historical_comparison())
