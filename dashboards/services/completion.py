"""
Completion Report Service

Season completion figures for the donut charts on the reports screen:
fertilizer bags, seed kg and farmers served against what was allocated or
requested, plus barangay rankings.
"""

import logging
from decimal import Decimal

from django.db.models import Count, Q, Sum

from distribution.catalog import FERTILIZER_TYPES, SEED_TYPES
from distribution.models import RegionalAllocation, FarmerRequest, DistributionRecord
from distribution.seasons import season_label

logger = logging.getLogger(__name__)

RANKING_SIZE = 3


def _completion(done, target):
    done = float(done or 0)
    target = float(target or 0)
    return {
        'completed': done,
        'target': target,
        'percentage': round(done / target * 100, 1) if target > 0 else 0,
    }


class CompletionReportService:
    """Builds the per-season completion report from distribution records."""

    def get_report(self, season):
        """
        Completion report for `season`.

        Figures always come from stored records; a season with no records
        reports zeros with `has_distribution_data` False.
        """
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

        records = DistributionRecord.objects.filter(request__season=season)
        totals = records.aggregate(
            fertilizer=Sum('fertilizer_bags_given'),
            seeds=Sum('seed_kg_given'),
            served=Count('request', distinct=True),
        )
        total_requests = FarmerRequest.objects.filter(season=season).count()

        rankings = self.get_barangay_rankings(season)
        logger.info(f"Completion report for {season}: {totals['served']} of {total_requests} farmers served")

        return {
            'season': season,
            'season_label': season_label(season),
            'has_allocation': allocation is not None,
            'has_distribution_data': totals['served'] > 0,
            'fertilizer': _completion(totals['fertilizer'], fertilizer_allocated),
            'seeds': _completion(totals['seeds'], seeds_allocated),
            'farmers': _completion(totals['served'], total_requests),
            'top_performing': rankings[:RANKING_SIZE],
            'needs_attention': list(reversed(rankings[RANKING_SIZE:]))[:RANKING_SIZE],
        }

    def get_barangay_rankings(self, season):
        """
        Barangays ranked by served/requested, best first.

        Ties are broken by the number of farmers served, then by name, so
        the ordering is stable between calls.
        """
        rows = (
            FarmerRequest.objects.filter(season=season)
            .exclude(barangay='')
            .values('barangay')
            .annotate(
                requested=Count('id'),
                served=Count('id', filter=Q(distribution_record__isnull=False)),
            )
        )

        rankings = []
        for row in rows:
            rate = row['served'] / row['requested'] * 100 if row['requested'] else 0
            rankings.append({
                'barangay': row['barangay'],
                'requested': row['requested'],
                'served': row['served'],
                'completion_rate': round(rate, 1),
            })

        rankings.sort(key=lambda r: (-r['completion_rate'], -r['served'], r['barangay']))
        return rankings
