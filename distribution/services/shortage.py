"""
Stock Shortage Detection

A request is short on a type when it asks for more than what is left after
every OTHER pending or approved request of the season has taken its share:

    remaining = allocated - (reserved by all - reserved by this request)
    shortage  = requested > remaining

Pending and approved requests reserve stock alike. The ledger builds the
per-type totals once per season load, so checking every request of a season
does not rescan the request list per row.
"""

from decimal import Decimal
import logging

from ..catalog import ALL_STOCK_TYPES, STOCK_TYPES
from ..models import RegionalAllocation, FarmerRequest

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


class SeasonStockLedger:
    """Allocated and reserved quantities for one season."""

    def __init__(self, season, allocation=None, requests=()):
        self.season = season
        self.allocation = allocation
        self.requests = list(requests)

        self.allocated = {
            t['id']: allocation.allocated_quantity(t['id']) if allocation else ZERO
            for t in ALL_STOCK_TYPES
        }
        self.reserved = {t['id']: ZERO for t in ALL_STOCK_TYPES}
        self._contributions = {}

        for request in self.requests:
            if request.reserves_stock:
                self._reserve(request)

    @classmethod
    def for_season(cls, season):
        allocation = RegionalAllocation.objects.filter(season=season).first()
        requests = FarmerRequest.objects.filter(season=season).order_by('request_date', 'created_at')
        return cls(season, allocation, requests)

    @property
    def has_allocation(self):
        return self.allocation is not None

    def _reserve(self, request):
        contribution = {}
        for t in ALL_STOCK_TYPES:
            quantity = request.requested_quantity(t['id'])
            if quantity:
                contribution[t['id']] = quantity
                self.reserved[t['id']] += quantity
        self._contributions[request.pk] = contribution

    def _others(self, request, type_id):
        own = self._contributions.get(request.pk, {}).get(type_id, ZERO)
        return self.reserved[type_id] - own

    def available_for(self, request):
        """Stock per type (tracked and extra) left for `request` after everyone else."""
        return {
            t['id']: self.allocated[t['id']] - self._others(request, t['id'])
            for t in ALL_STOCK_TYPES
        }

    def check(self, request):
        """
        Shortage check of one request against the season's stock.

        Returns:
            dict with `has_shortage`, the ids of the short types and one
            item per tracked type.
        """
        items = []
        for t in STOCK_TYPES:
            requested = request.requested_quantity(t['id'])
            others = self._others(request, t['id'])
            remaining = self.allocated[t['id']] - others
            items.append({
                'type': t['id'],
                'category': t['category'],
                'label': t['label'],
                'requested': requested,
                'allocated': self.allocated[t['id']],
                'reserved_by_others': others,
                'remaining': remaining,
                'shortage': requested > remaining,
            })

        shortage_types = [item['type'] for item in items if item['shortage']]
        return {
            'request_id': str(request.pk),
            'farmer_name': request.farmer_name,
            'barangay': request.barangay,
            'status': request.status,
            'has_shortage': bool(shortage_types),
            'shortage_types': shortage_types,
            'items': items,
        }

    def check_all(self):
        return [self.check(request) for request in self.requests]

    def remaining_stock(self):
        """Allocated minus everything reserved, per type."""
        return {
            t['id']: self.allocated[t['id']] - self.reserved[t['id']]
            for t in ALL_STOCK_TYPES
        }

    def summary(self):
        results = self.check_all()
        flagged = [r for r in results if r['has_shortage']]
        logger.info(
            f"Shortage check for {self.season}: {len(flagged)} of {len(results)} request(s) short"
        )
        return {
            'season': self.season,
            'has_allocation': self.has_allocation,
            'total_requests': len(results),
            'requests_with_shortage': len(flagged),
            'remaining_stock': self.remaining_stock(),
            'requests': results,
        }
