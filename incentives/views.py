"""
Incentive Log Views

API Endpoints:
- /api/incentives/logs/ - List (?incentive_type=&start_date=&end_date=), record a hand-out
- /api/incentives/farmer/{farmer_id}/ - Logs of one farmer
- /api/incentives/report/ - Fulfillment summary and breakdown per incentive type
"""

import logging

from django.http import Http404
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, filters, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsFieldStaffOrReadOnly, IsOfficeStaff
from rsbsa.models import RSBSASubmission
from .filters import IncentiveLogFilter
from .models import IncentiveLog
from .serializers import IncentiveLogSerializer, IncentiveLogCreateSerializer
from .services import IncentiveService

logger = logging.getLogger(__name__)


def _filtered_logs(request, queryset):
    filterset = IncentiveLogFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        raise ValidationError(filterset.errors)
    return filterset


class IncentiveLogListCreateView(generics.ListCreateAPIView):
    """
    GET /api/incentives/logs/
    POST /api/incentives/logs/
    """
    permission_classes = [IsFieldStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = IncentiveLogFilter
    search_fields = ['incentive_type', 'farmer__last_name', 'farmer__first_name']

    def get_queryset(self):
        return IncentiveLog.objects.select_related('farmer', 'encoder')

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return IncentiveLogCreateSerializer
        return IncentiveLogSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = IncentiveService(user=request.user, request=request)
        try:
            log = service.create_log(**serializer.validated_data)
        except RSBSASubmission.DoesNotExist:
            raise Http404(f"Farmer with ID {serializer.validated_data['farmer_id']} not found")
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        if log.shortage == 0:
            message = 'Distribution recorded successfully - fully fulfilled'
        else:
            message = f"Distribution recorded with shortage of {log.shortage:.2f} units"

        return Response(
            {
                'message': message,
                'shortage': log.shortage,
                'log': IncentiveLogSerializer(log).data,
            },
            status=status.HTTP_201_CREATED
        )


class FarmerIncentiveLogsView(APIView):
    """GET /api/incentives/farmer/{farmer_id}/"""
    permission_classes = [IsOfficeStaff]

    def get(self, request, farmer_id):
        farmer = get_object_or_404(RSBSASubmission, pk=farmer_id)
        filterset = _filtered_logs(request, farmer.incentive_logs.select_related('encoder'))
        logs = filterset.qs.order_by('-event_date', '-created_at')

        return Response({
            'farmer_id': farmer.pk,
            'farmer_name': farmer.full_name,
            'total_distributions': len(logs),
            'logs': IncentiveLogSerializer(logs, many=True).data,
        })


class IncentiveReportView(APIView):
    """
    GET /api/incentives/report/

    Query Parameters:
    - start_date, end_date: event date range (YYYY-MM-DD)
    - incentive_type: one incentive type
    """
    permission_classes = [IsOfficeStaff]

    def get(self, request):
        filterset = _filtered_logs(request, IncentiveLog.objects.all())
        data = filterset.form.cleaned_data

        report = IncentiveService(user=request.user, request=request).report(
            filterset.qs,
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
        )
        return Response(report)
