"""
Incentive Log Service

- Recording a signed hand-out for a registered farmer
- Per-farmer history
- Fulfillment report with a breakdown per incentive type
"""

from decimal import Decimal
import logging

from django.db import transaction
from django.db.models import Count, F, Q, Sum

from audit.models import AuditAction, AuditModule
from audit.services import log_audit
from rsbsa.models import RSBSASubmission
from .models import IncentiveLog

logger = logging.getLogger(__name__)


def shortage_percentage(requested, received):
    """Share of the requested quantity not received, in percent."""
    if not requested:
        return None
    return round(float((1 - received / requested) * 100), 2)


class IncentiveService:
    """Service for incentive distribution logs"""

    def __init__(self, user=None, request=None):
        self.user = user
        self.request = request

    @transaction.atomic
    def create_log(self, farmer_id, event_date, incentive_type, qty_requested, qty_received,
                   is_signed, note=''):
        """
        Record one hand-out.

        Raises:
            ValueError: unsigned entry, or more received than requested
            RSBSASubmission.DoesNotExist: unknown farmer
        """
        if is_signed is not True:
            raise ValueError("Farmer signature is required before recording a distribution")
        if qty_received > qty_requested:
            raise ValueError("Quantity received cannot exceed quantity requested")

        farmer = RSBSASubmission.objects.get(pk=farmer_id)

        log = IncentiveLog.objects.create(
            farmer=farmer,
            event_date=event_date,
            incentive_type=incentive_type,
            qty_requested=qty_requested,
            qty_received=qty_received,
            is_signed=True,
            note=note or '',
            encoder=self.user,
        )

        log_audit(
            AuditAction.CREATE, AuditModule.INCENTIVES,
            f"Recorded {incentive_type} for {farmer.full_name}: "
            f"{qty_received} of {qty_requested} received",
            user=self.user, request=self.request, record=log,
            new_values={
                'farmer_id': str(farmer.pk),
                'event_date': event_date,
                'incentive_type': incentive_type,
                'qty_requested': qty_requested,
                'qty_received': qty_received,
            },
        )
        logger.info(f"Incentive log {log.pk} recorded for farmer {farmer.pk}, shortage {log.shortage}")
        return log

    def report(self, logs, start_date=None, end_date=None):
        """
        Fulfillment summary of `logs` (an already filtered queryset).

        Types are listed by shortage percentage, largest first.
        """
        logs = logs.order_by()
        totals = logs.aggregate(
            total=Count('id'),
            fully_fulfilled=Count('id', filter=Q(qty_received=F('qty_requested'))),
            partially=Count('id', filter=Q(qty_received__gt=0, qty_received__lt=F('qty_requested'))),
            unfulfilled=Count('id', filter=Q(qty_received=0)),
        )

        breakdown = []
        rows = logs.values('incentive_type').annotate(
            total_distributions=Count('id'),
            total_requested=Sum('qty_requested'),
            total_received=Sum('qty_received'),
        )
        for row in rows:
            requested = row['total_requested'] or Decimal('0')
            received = row['total_received'] or Decimal('0')
            breakdown.append({
                'incentive_type': row['incentive_type'],
                'total_distributions': row['total_distributions'],
                'total_requested': requested,
                'total_received': received,
                'shortage_amount': requested - received,
                'shortage_pct': shortage_percentage(requested, received),
            })

        breakdown.sort(key=lambda b: (b['shortage_pct'] is None, -(b['shortage_pct'] or 0), b['incentive_type']))
        for entry in breakdown:
            entry['shortage_pct'] = entry['shortage_pct'] or 0

        top_shortage = None
        if breakdown and breakdown[0]['shortage_pct'] > 0:
            top = breakdown[0]
            top_shortage = f"{top['incentive_type']} (-{top['shortage_pct']:g}%)"

        return {
            'period': {'start_date': start_date, 'end_date': end_date},
            'summary': {
                **totals,
                'top_shortage': top_shortage,
                'incentive_breakdown': breakdown,
            },
        }
