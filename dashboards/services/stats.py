"""
Office Dashboard Service - KPI cards and trend charts

Provides the figures shown on the JO/admin/technician dashboards:
- Farmer, request and stock progress for a season
- Monthly distribution and request trends (last 12 months)
- Latest distribution activity
- Seasons that have an allocation
"""

import logging
from datetime import datetime
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from distribution.catalog import FERTILIZER_TYPES, SEED_TYPES
from distribution.models import RegionalAllocation, FarmerRequest, DistributionRecord, RequestStatus
from distribution.seasons import current_season, season_end_label, season_label
from rsbsa.models import RSBSASubmission, SubmissionStatus

logger = logging.getLogger(__name__)

MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def _percent(part, whole):
    if not whole:
        return 0
    return round(float(part) / float(whole) * 100)


def _status_counts(queryset):
    return queryset.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(status=RequestStatus.PENDING)),
        approved=Count('id', filter=Q(status=RequestStatus.APPROVED)),
        rejected=Count('id', filter=Q(status=RequestStatus.REJECTED)),
        distributed=Count('id', filter=Q(status=RequestStatus.DISTRIBUTED)),
    )


def last_twelve_months(today=None):
    """(year, month) pairs for the 12 months ending with `today`'s month, oldest first."""
    today = today or timezone.localdate()
    months = []
    year, month = today.year, today.month
    for _ in range(12):
        months.append((year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(months))


class DashboardStatsService:
    """Service for office dashboard data aggregation"""

    def get_dashboard_stats(self, season=None, today=None):
        """
        KPI figures for one season (defaults to the current season).

        Returns:
            dict: farmers, requests, distribution progress, coverage and
            average processing time
        """
        today = today or timezone.localdate()
        season = season or current_season(today)

        farmers = RSBSASubmission.objects.aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(status=SubmissionStatus.ACTIVE)),
        )

        season_requests = FarmerRequest.objects.filter(season=season)
        season_counts = _status_counts(season_requests)
        all_time = _status_counts(FarmerRequest.objects.all())
        all_time.pop('rejected')

        allocation = RegionalAllocation.objects.filter(season=season).first()
        if allocation is not None:
            fertilizer_allocated = sum(
                (allocation.allocated_quantity(t['id']) for t in FERTILIZER_TYPES), Decimal('0')
            )
            seeds_allocated = sum(
                (allocation.allocated_quantity(t['id']) for t in SEED_TYPES), Decimal('0')
            )
        else:
            fertilizer_allocated = seeds_allocated = Decimal('0')

        distributed = DistributionRecord.objects.filter(request__season=season).aggregate(
            fertilizer=Sum('fertilizer_bags_given'),
            seeds=Sum('seed_kg_given'),
        )
        fertilizer_distributed = Decimal(distributed['fertilizer'] or 0)
        seeds_distributed = distributed['seeds'] or Decimal('0')

        total_allocated = fertilizer_allocated + seeds_allocated
        total_distributed = fertilizer_distributed + seeds_distributed

        total_requests = season_counts['total']
        status_breakdown = {
            key: _percent(season_counts[key], total_requests)
            for key in ('approved', 'pending', 'rejected', 'distributed')
        }

        coverage = {
            'total_barangays': RSBSASubmission.objects.exclude(barangay='')
            .values('barangay').distinct().count(),
            'barangays_with_requests': season_requests.exclude(barangay='')
            .values('barangay').distinct().count(),
        }

        return {
            'current_season': season,
            'season_label': season_label(season),
            'season_end_date': season_end_label(today),
            'farmers': farmers,
            'requests': {
                'current_season': season_counts,
                'all_time': all_time,
                'status_breakdown': status_breakdown,
            },
            'distribution': {
                'fertilizer': {
                    'allocated': float(fertilizer_allocated),
                    'distributed': float(fertilizer_distributed),
                    'remaining': float(max(fertilizer_allocated - fertilizer_distributed, Decimal('0'))),
                    'progress': _percent(fertilizer_distributed, fertilizer_allocated),
                },
                'seeds': {
                    'allocated': float(seeds_allocated),
                    'distributed': float(seeds_distributed),
                    'remaining': float(max(seeds_allocated - seeds_distributed, Decimal('0'))),
                    'progress': _percent(seeds_distributed, seeds_allocated),
                },
                'overall': {
                    'progress': _percent(total_distributed, total_allocated),
                    'total_allocated': float(total_allocated),
                    'total_distributed': float(total_distributed),
                },
            },
            'coverage': coverage,
            'processing_time': {
                'average_days': self.get_average_processing_days(),
            },
        }

    def get_average_processing_days(self):
        """
        Average days from request to its last update, over approved and
        distributed requests. None when there are none.
        """
        durations = [
            (updated_at - request_date).total_seconds()
            for request_date, updated_at in FarmerRequest.objects.filter(
                status__in=[RequestStatus.APPROVED, RequestStatus.DISTRIBUTED]
            ).values_list('request_date', 'updated_at')
        ]
        if not durations:
            return None
        return round(sum(durations) / len(durations) / 86400, 1)

    def get_monthly_trends(self, today=None):
        """
        Distribution and request counts per month for the last 12 months.

        Months without activity are present with zeros so charts always
        have 12 points.
        """
        months = last_twelve_months(today)
        start = timezone.make_aware(datetime(months[0][0], months[0][1], 1))

        records = {
            (row['month'].year, row['month'].month): row
            for row in DistributionRecord.objects.filter(distribution_date__gte=start)
            .annotate(month=TruncMonth('distribution_date'))
            .values('month')
            .annotate(
                fertilizer=Sum('fertilizer_bags_given'),
                seeds=Sum('seed_kg_given'),
                count=Count('id'),
            )
        }
        requests = {
            (row['month'].year, row['month'].month): row
            for row in FarmerRequest.objects.filter(request_date__gte=start)
            .annotate(month=TruncMonth('request_date'))
            .values('month')
            .annotate(
                total=Count('id'),
                approved=Count('id', filter=Q(status=RequestStatus.APPROVED)),
                distributed=Count('id', filter=Q(status=RequestStatus.DISTRIBUTED)),
            )
        }

        distribution_trend = []
        request_trend = []
        for year, month in months:
            key = f"{year:04d}-{month:02d}"
            name = MONTH_NAMES[month - 1]

            found = records.get((year, month))
            distribution_trend.append({
                'month': key,
                'month_name': name,
                'fertilizer': float(found['fertilizer'] or 0) if found else 0,
                'seeds': float(found['seeds'] or 0) if found else 0,
                'count': found['count'] if found else 0,
            })

            found = requests.get((year, month))
            request_trend.append({
                'month': key,
                'month_name': name,
                'total': found['total'] if found else 0,
                'approved': found['approved'] if found else 0,
                'distributed': found['distributed'] if found else 0,
            })

        return {
            'distribution': distribution_trend,
            'requests': request_trend,
            'summary': {
                'total_fertilizer_last_12_months': sum(m['fertilizer'] for m in distribution_trend),
                'total_seeds_last_12_months': sum(m['seeds'] for m in distribution_trend),
                'total_distributions_last_12_months': sum(m['count'] for m in distribution_trend),
            },
        }

    def get_recent_activity(self, limit=10):
        """Latest distribution records joined with their farmer."""
        records = DistributionRecord.objects.select_related('request').order_by('-created_at')[:limit]
        return [
            {
                'id': str(record.id),
                'farmer_name': record.request.farmer_name,
                'barangay': record.request.barangay,
                'fertilizer_type': record.fertilizer_type,
                'fertilizer_bags_given': record.fertilizer_bags_given,
                'seed_type': record.seed_type,
                'seed_kg_given': float(record.seed_kg_given),
                'distribution_date': record.distribution_date.isoformat(),
                'verified_by': record.verified_by,
                'created_at': record.created_at.isoformat(),
            }
            for record in records
        ]

    def get_available_seasons(self, today=None):
        """Seasons that have an allocation (newest first) and the current season."""
        allocations = RegionalAllocation.objects.order_by('-created_at').values(
            'season', 'season_start_date', 'season_end_date', 'status', 'created_at'
        )
        seasons = []
        for row in allocations:
            row['season_label'] = season_label(row['season'])
            seasons.append(row)
        return {
            'current_season': current_season(today),
            'available_seasons': seasons,
        }
