"""
Distribution Analysis Service

Season-level comparisons of allocated stock against farmer requests:
- Gap analysis per fertilizer and per seed crop
- Barangay shortage heatmap (equal share of the allocation per barangay)
- Historical comparison across recent seasons
- Recommendations for shortages, surpluses and barangay equity
"""

from decimal import Decimal
import logging

from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from ..catalog import FERTILIZER_TYPES, RICE_SEED_TYPES, CORN_SEED_TYPES, SEED_TYPES
from ..models import RegionalAllocation, FarmerRequest
from ..seasons import current_season, season_label
from .recommendations import build_recommendations

logger = logging.getLogger(__name__)

ZERO = Decimal('0')

# Gap beyond which a barangay is critical rather than moderate
FERTILIZER_CRITICAL_THRESHOLD = 50
SEED_CRITICAL_THRESHOLD = 25

HISTORY_SEASONS = 8

SEVERITY_ORDER = {'CRITICAL': 0, 'MODERATE': 1, 'GOOD': 2}


def _sum(field):
    return Coalesce(
        Sum(field),
        Value(ZERO),
        output_field=DecimalField(max_digits=14, decimal_places=2)
    )


def _gap_entry(allocated, requested):
    percentage = None
    if requested > 0:
        percentage = round(float(allocated / requested * 100), 1)
    return {
        'requested': requested,
        'allocated': allocated,
        'gap': allocated - requested,
        'percentage': percentage,
    }


def gap_status(gap, threshold):
    if gap < -threshold:
        return 'critical'
    if gap < 0:
        return 'moderate'
    return 'good'


def overall_status(statuses):
    if 'critical' in statuses:
        return 'CRITICAL'
    if 'moderate' in statuses:
        return 'MODERATE'
    return 'GOOD'


class DistributionAnalysisService:
    """Allocation vs request comparisons"""

    def gap_analysis(self, season):
        """
        Allocated vs requested for every fertilizer and each seed crop.

        Raises:
            RegionalAllocation.DoesNotExist: no allocation for the season
        """
        allocation = RegionalAllocation.objects.get(season=season)

        aggregates = {
            t['request_field']: _sum(t['request_field'])
            for t in FERTILIZER_TYPES + SEED_TYPES
        }
        totals = FarmerRequest.objects.filter(season=season).aggregate(
            total_requests=Count('id'),
            total_farm_area=_sum('farm_area_ha'),
            **aggregates
        )

        fertilizers = {
            t['id']: _gap_entry(allocation.allocated_quantity(t['id']), totals[t['request_field']])
            for t in FERTILIZER_TYPES
        }

        def crop_gap(types):
            allocated = sum((allocation.allocated_quantity(t['id']) for t in types), ZERO)
            requested = sum((totals[t['request_field']] for t in types), ZERO)
            return _gap_entry(allocated, requested)

        seeds = {
            'rice_seeds': crop_gap(RICE_SEED_TYPES),
            'corn_seeds': crop_gap(CORN_SEED_TYPES),
        }

        entries = list(fertilizers.values()) + list(seeds.values())
        return {
            'season': season,
            'season_label': season_label(season),
            'allocation_date': allocation.allocation_date,
            'total_requests': totals['total_requests'],
            'total_farm_area_ha': totals['total_farm_area'],
            'fertilizers': fertilizers,
            'seeds': seeds,
            'summary': {
                'has_shortages': any(e['gap'] < 0 for e in entries),
                'prioritization_needed': any(
                    e['percentage'] is not None and e['percentage'] < 100 for e in entries
                ),
            },
        }

    def barangay_shortages(self, season):
        """
        Shortage status per barangay with requests, each barangay given an
        equal share of the allocation. Critical barangays come first.

        Raises:
            RegionalAllocation.DoesNotExist: no allocation for the season
        """
        allocation = RegionalAllocation.objects.get(season=season)

        seed_fields = [t['request_field'] for t in SEED_TYPES]
        rows = list(
            FarmerRequest.objects
            .filter(season=season)
            .values('barangay')
            .annotate(
                farmer_count=Count('id'),
                urea_requested=_sum('requested_urea_bags'),
                complete_requested=_sum('requested_complete_14_bags'),
                total_farm_area=_sum('farm_area_ha'),
                **{f"seed_{field}": _sum(field) for field in seed_fields}
            )
            .order_by('barangay')
        )

        barangay_count = len(rows) or 1
        total_seeds = sum((allocation.allocated_quantity(t['id']) for t in SEED_TYPES), ZERO)
        share_urea = int(allocation.urea_46_0_0_bags // barangay_count)
        share_complete = int(allocation.complete_14_14_14_bags // barangay_count)
        share_seeds = int(total_seeds // barangay_count)

        shortages = []
        for row in rows:
            seeds_requested = sum((row[f"seed_{field}"] for field in seed_fields), ZERO)
            urea_gap = share_urea - row['urea_requested']
            complete_gap = share_complete - row['complete_requested']
            seeds_gap = share_seeds - seeds_requested

            statuses = {
                'urea': gap_status(urea_gap, FERTILIZER_CRITICAL_THRESHOLD),
                'complete': gap_status(complete_gap, FERTILIZER_CRITICAL_THRESHOLD),
                'seeds': gap_status(seeds_gap, SEED_CRITICAL_THRESHOLD),
            }
            shortages.append({
                'barangay': row['barangay'],
                'farmer_count': row['farmer_count'],
                'total_farm_area': row['total_farm_area'],
                **statuses,
                'overall': overall_status(statuses.values()),
                'urea_gap': round(urea_gap),
                'complete_gap': round(complete_gap),
                'seeds_gap': round(seeds_gap),
            })

        shortages.sort(key=lambda s: SEVERITY_ORDER[s['overall']])
        logger.info(f"Barangay shortages for {season}: {len(shortages)} barangay(s)")
        return shortages

    def historical_comparison(self, today=None):
        """
        Urea + Complete 14-14-14 allocated vs requested for the last
        seasons with an allocation, oldest first.
        """
        allocations = list(
            RegionalAllocation.objects.order_by('-allocation_date', '-created_at')[:HISTORY_SEASONS]
        )
        seasons = [a.season for a in allocations]

        requested_by_season = {
            row['season']: row['requested']
            for row in (
                FarmerRequest.objects
                .filter(season__in=seasons)
                .values('season')
                .annotate(requested=_sum('requested_urea_bags') + _sum('requested_complete_14_bags'))
            )
        }

        current = current_season(today)
        history = []
        for allocation in reversed(allocations):
            allocated = allocation.urea_46_0_0_bags + allocation.complete_14_14_14_bags
            requested = requested_by_season.get(allocation.season, ZERO)
            if requested > 0:
                fulfilled = round(float(min(allocated, requested) / requested * 100))
            else:
                fulfilled = 100
            history.append({
                'season': allocation.season,
                'season_label': season_label(allocation.season),
                'allocated': allocated,
                'requested': requested,
                'gap': allocated - requested,
                'fulfilled': min(fulfilled, 100),
                'is_current': allocation.season == current,
            })
        return history

    def recommendations(self, season):
        """
        Prioritized actions for the season's shortages, surpluses and
        barangay equity.

        Raises:
            RegionalAllocation.DoesNotExist: no allocation for the season
        """
        gap_data = self.gap_analysis(season)
        fields = [t['request_field'] for t in FERTILIZER_TYPES + SEED_TYPES]
        requests = list(
            FarmerRequest.objects
            .filter(season=season)
            .values('barangay', 'status', *fields)
        )

        result = build_recommendations(gap_data, requests)
        summary = result['summary']
        logger.info(
            f"Recommendations for {season}: {summary['total_recommendations']} total, "
            f"{summary['critical_issues']} critical, {summary['high_priority_issues']} high priority"
        )
        return {'season': season, 'season_label': gap_data['season_label'], **result}
