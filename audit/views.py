"""
Audit Trail Views

Administrator-only endpoints for reviewing the audit trail.

API Endpoints:
- /api/audit/logs/ - List audit entries (filterable, searchable)
- /api/audit/logs/{id}/ - Audit entry detail
- /api/audit/stats/ - Activity statistics for the last N days
- /api/audit/export/ - CSV export of filtered entries
- /api/audit/record/{record_type}/{record_id}/ - History of one record
"""

import csv
import logging
from datetime import timedelta

from django.db.models import Count, Q
from django.db.models.functions import TruncDate
from django.http import HttpResponse
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, filters
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsSystemAdmin
from .filters import AuditLogFilter
from .models import AuditLog, AuditAction, AuditModule, CRITICAL_ACTIONS
from .serializers import AuditLogListSerializer, AuditLogDetailSerializer
from .services import log_audit

logger = logging.getLogger(__name__)


class AuditLogListView(generics.ListAPIView):
    """
    GET /api/audit/logs/

    Query Parameters:
    - action, module, user_role, user_name: exact filters
    - start_date / end_date: YYYY-MM-DD range on the entry date
    - search: description, user name, record id
    """
    permission_classes = [IsSystemAdmin]
    serializer_class = AuditLogListSerializer
    queryset = AuditLog.objects.all()
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = AuditLogFilter
    search_fields = ['description', 'user_name', 'record_id']
    ordering_fields = ['timestamp', 'action', 'module']
    ordering = ['-timestamp']


class AuditLogDetailView(generics.RetrieveAPIView):
    """GET /api/audit/logs/{id}/"""
    permission_classes = [IsSystemAdmin]
    serializer_class = AuditLogDetailSerializer
    queryset = AuditLog.objects.all()


class AuditStatsView(APIView):
    """
    GET /api/audit/stats/?days=7

    Totals by action, module and user, a daily timeline, and the most
    recent critical actions (deletes, failed logins, admin activity).
    """
    permission_classes = [IsSystemAdmin]

    def get(self, request):
        try:
            days = max(int(request.query_params.get('days', 7)), 1)
        except (TypeError, ValueError):
            days = 7

        since = timezone.now() - timedelta(days=days)
        logs = AuditLog.objects.filter(timestamp__gte=since)

        by_action = list(
            logs.values('action').annotate(count=Count('id')).order_by('-count')
        )
        by_module = list(
            logs.values('module').annotate(count=Count('id')).order_by('-count')
        )
        by_user = list(
            logs.values('user_name', 'user_role')
            .annotate(count=Count('id'))
            .order_by('-count')[:10]
        )
        timeline = [
            {'date': row['date'].isoformat(), 'count': row['count']}
            for row in logs.annotate(date=TruncDate('timestamp'))
            .values('date')
            .annotate(count=Count('id'))
            .order_by('date')
        ]
        critical = logs.filter(
            Q(action__in=CRITICAL_ACTIONS) | Q(user_role='ADMIN')
        ).order_by('-timestamp')[:10]

        return Response({
            'period': f'{days} days',
            'total': logs.count(),
            'by_action': by_action,
            'by_module': by_module,
            'by_user': by_user,
            'timeline': timeline,
            'critical_actions': AuditLogListSerializer(critical, many=True).data,
        })


class AuditExportView(APIView):
    """
    GET /api/audit/export/

    CSV export of the audit trail. Accepts the same filters as the list.
    """
    permission_classes = [IsSystemAdmin]

    def get(self, request):
        queryset = AuditLogFilter(request.query_params, queryset=AuditLog.objects.all()).qs

        filename = f"audit_trail_{timezone.now().strftime('%Y%m%d_%H%M')}.csv"
        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        writer = csv.writer(response)
        writer.writerow([
            'Timestamp', 'User', 'Role', 'Action', 'Module',
            'Record Type', 'Record ID', 'Description', 'IP Address'
        ])
        count = 0
        for entry in queryset.order_by('-timestamp'):
            writer.writerow([
                timezone.localtime(entry.timestamp).strftime('%Y-%m-%d %H:%M:%S'),
                entry.user_name,
                entry.user_role,
                entry.action,
                entry.module,
                entry.record_type,
                entry.record_id,
                entry.description,
                entry.ip_address or '',
            ])
            count += 1

        log_audit(
            AuditAction.EXPORT, AuditModule.REPORTS,
            f"Exported {count} audit entries",
            request=request,
        )
        logger.info(f"Audit trail exported by {request.user.username}: {count} rows")
        return response


class RecordHistoryView(generics.ListAPIView):
    """
    GET /api/audit/record/{record_type}/{record_id}/

    Every audit entry that touched one record, newest first.
    """
    permission_classes = [IsSystemAdmin]
    serializer_class = AuditLogDetailSerializer
    pagination_class = None

    def get_queryset(self):
        return AuditLog.objects.filter(
            record_type=self.kwargs['record_type'],
            record_id=self.kwargs['record_id'],
        ).order_by('-timestamp')
