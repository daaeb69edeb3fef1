"""
Dashboard API Views

API Endpoints:
- /api/dashboards/stats/ - KPI cards (?season=, defaults to the current season)
- /api/dashboards/monthly-trends/ - Last 12 months of distribution and requests
- /api/dashboards/recent-activity/ - Latest distribution records (?limit=)
- /api/dashboards/seasons/ - Seasons with an allocation and the current season
- /api/dashboards/completion/{season}/ - Season completion report
- /api/dashboards/demographics/ - RSBSA population breakdowns
- /api/dashboards/exports/... - Excel/PDF downloads (see exports.py)
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsOfficeStaff
from distribution.seasons import parse_season
from .services import DashboardStatsService, CompletionReportService, RSBSADemographicsService

logger = logging.getLogger(__name__)

MAX_ACTIVITY_LIMIT = 100


class DashboardStatsView(APIView):
    """
    Dashboard KPI cards

    GET /api/dashboards/stats/?season=wet_2025
    """
    permission_classes = [IsAuthenticated, IsOfficeStaff]

    def get(self, request):
        season = request.query_params.get('season') or None
        if season:
            try:
                parse_season(season)
            except ValueError as e:
                return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        data = DashboardStatsService().get_dashboard_stats(season=season)
        return Response(data, status=status.HTTP_200_OK)


class MonthlyTrendsView(APIView):
    """GET /api/dashboards/monthly-trends/"""
    permission_classes = [IsAuthenticated, IsOfficeStaff]

    def get(self, request):
        return Response(DashboardStatsService().get_monthly_trends())


class RecentActivityView(APIView):
    """GET /api/dashboards/recent-activity/?limit=10"""
    permission_classes = [IsAuthenticated, IsOfficeStaff]

    def get(self, request):
        try:
            limit = int(request.query_params.get('limit', 10))
        except (TypeError, ValueError):
            limit = 10
        limit = min(max(limit, 1), MAX_ACTIVITY_LIMIT)
        return Response(DashboardStatsService().get_recent_activity(limit=limit))


class AvailableSeasonsView(APIView):
    """GET /api/dashboards/seasons/"""
    permission_classes = [IsAuthenticated, IsOfficeStaff]

    def get(self, request):
        return Response(DashboardStatsService().get_available_seasons())


class CompletionReportView(APIView):
    """
    Season completion report

    GET /api/dashboards/completion/{season}/

    Fertilizer, seed and farmer completion percentages plus top
    performing / needs attention barangays.
    """
    permission_classes = [IsAuthenticated, IsOfficeStaff]

    def get(self, request, season):
        try:
            parse_season(season)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CompletionReportService().get_report(season))


class RSBSADemographicsView(APIView):
    """GET /api/dashboards/demographics/"""
    permission_classes = [IsAuthenticated, IsOfficeStaff]

    def get(self, request):
        return Response(RSBSADemographicsService().get_demographics())
