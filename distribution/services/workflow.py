"""
Distribution Workflow Service

Manages the season's input distribution:
- Regional allocations (one per season, upserted by season)
- Farmer request lifecycle: pending -> approved -> distributed, or rejected
- Distribution record creation on approval
"""

import logging

from django.db import transaction
from django.utils import timezone

from audit.models import AuditAction, AuditModule
from audit.services import log_audit
from ..catalog import REQUEST_QUANTITY_FIELDS
from ..models import RegionalAllocation, FarmerRequest, DistributionRecord, RequestStatus
from ..seasons import current_season, resolve_season
from .records import record_values_for
from .substitution import clear_season_suggestions

logger = logging.getLogger(__name__)


class DistributionWorkflowService:
    """Service for allocations, farmer requests and distribution records"""

    def __init__(self, user=None, request=None):
        self.user = user
        self.request = request

    def _audit(self, action, description, record=None, **kwargs):
        log_audit(
            action, AuditModule.DISTRIBUTION, description,
            user=self.user, request=self.request, record=record, **kwargs
        )

    def _lock(self, farmer_request):
        return FarmerRequest.objects.select_for_update().get(pk=farmer_request.pk)

    # =========================================================================
    # ALLOCATIONS
    # =========================================================================

    @transaction.atomic
    def upsert_allocation(self, **allocation_data):
        """
        Create the allocation for the season of `allocation_date`, or update
        the existing one for that season.

        Returns:
            (RegionalAllocation, created)
        """
        season = resolve_season(allocation_data['allocation_date'])
        allocation = (
            RegionalAllocation.objects
            .select_for_update()
            .filter(season=season)
            .first()
        )

        if allocation is None:
            allocation = RegionalAllocation.objects.create(created_by=self.user, **allocation_data)
            clear_season_suggestions(allocation.season)
            self._audit(
                AuditAction.CREATE, f"Created allocation for {allocation.season}",
                record=allocation, new_values=allocation_data,
            )
            logger.info(f"Allocation created: {allocation.season}")
            return allocation, True

        for field, value in allocation_data.items():
            setattr(allocation, field, value)
        allocation.save()
        clear_season_suggestions(allocation.season)

        self._audit(
            AuditAction.UPDATE, f"Updated allocation for {allocation.season}",
            record=allocation, new_values=allocation_data,
        )
        logger.info(f"Allocation updated: {allocation.season}")
        return allocation, False

    @transaction.atomic
    def update_allocation(self, allocation, **changes):
        if 'allocation_date' in changes:
            season = resolve_season(changes['allocation_date'])
            if RegionalAllocation.objects.filter(season=season).exclude(pk=allocation.pk).exists():
                raise ValueError(f"An allocation already exists for season: {season}")

        previous_season = allocation.season
        old_values = {field: getattr(allocation, field) for field in changes}
        for field, value in changes.items():
            setattr(allocation, field, value)
        allocation.save()
        clear_season_suggestions(previous_season, allocation.season)

        self._audit(
            AuditAction.UPDATE, f"Updated allocation for {allocation.season}",
            record=allocation, old_values=old_values, new_values=changes,
        )
        return allocation

    @transaction.atomic
    def delete_allocation(self, allocation):
        """
        Delete an allocation together with the season's farmer requests
        and their distribution records.

        Returns:
            Number of requests deleted.
        """
        season = allocation.season
        record_id = str(allocation.pk)
        requests = FarmerRequest.objects.filter(season=season)
        request_count = requests.count()

        requests.delete()
        allocation.delete()
        clear_season_suggestions(season)

        self._audit(
            AuditAction.DELETE,
            f"Deleted allocation for {season} and {request_count} farmer request(s)",
            record_id=record_id, record_type='regionalallocation',
            old_values={'season': season},
        )
        logger.info(f"Allocation {season} deleted with {request_count} request(s)")
        return request_count

    # =========================================================================
    # FARMER REQUESTS
    # =========================================================================

    @transaction.atomic
    def create_request(self, **request_data):
        """
        Create a farmer request. Requests always start pending; the season
        defaults to the current one.
        """
        request_data.pop('status', None)
        if not request_data.get('season'):
            request_data['season'] = current_season()

        farmer = request_data.get('farmer')
        if farmer is not None:
            request_data.setdefault('farmer_name', farmer.full_name)
            request_data.setdefault('barangay', farmer.barangay)
            if not request_data.get('farm_area_ha'):
                request_data['farm_area_ha'] = farmer.total_farm_area

        farmer_request = FarmerRequest.objects.create(
            created_by=self.user,
            status=RequestStatus.PENDING,
            **request_data
        )
        clear_season_suggestions(farmer_request.season)

        self._audit(
            AuditAction.CREATE,
            f"Created {farmer_request.season} request for {farmer_request.farmer_name}",
            record=farmer_request,
            new_values={field: getattr(farmer_request, field) for field in REQUEST_QUANTITY_FIELDS},
        )
        logger.info(f"Farmer request created: {farmer_request.pk} ({farmer_request.season})")
        return farmer_request

    @transaction.atomic
    def update_request(self, farmer_request, **changes):
        """Edit a request; only pending requests can be edited."""
        farmer_request = self._lock(farmer_request)
        if farmer_request.status != RequestStatus.PENDING:
            raise ValueError(f"Cannot update request with status: {farmer_request.status}")

        changes.pop('status', None)
        previous_season = farmer_request.season
        old_values = {field: getattr(farmer_request, field) for field in changes}
        for field, value in changes.items():
            setattr(farmer_request, field, value)
        farmer_request.save()

        clear_season_suggestions(previous_season, farmer_request.season)

        self._audit(
            AuditAction.UPDATE, f"Updated request of {farmer_request.farmer_name}",
            record=farmer_request, old_values=old_values, new_values=changes,
        )
        return farmer_request

    @transaction.atomic
    def approve_request(self, farmer_request):
        """
        Approve a pending request and record the distribution.

        Returns:
            The DistributionRecord created for the request.
        """
        farmer_request = self._lock(farmer_request)
        if farmer_request.status != RequestStatus.PENDING:
            raise ValueError(f"Cannot approve request with status: {farmer_request.status}")

        farmer_request.status = RequestStatus.APPROVED
        farmer_request.save(update_fields=['status', 'updated_at'])

        record = DistributionRecord.objects.create(
            request=farmer_request,
            claim_date=timezone.now(),
            **record_values_for(farmer_request)
        )

        clear_season_suggestions(farmer_request.season)

        self._audit(
            AuditAction.APPROVE, f"Approved request of {farmer_request.farmer_name}",
            record=farmer_request,
            new_values={
                'fertilizer_type': record.fertilizer_type,
                'fertilizer_bags_given': record.fertilizer_bags_given,
                'seed_type': record.seed_type,
                'seed_kg_given': record.seed_kg_given,
            },
        )
        logger.info(f"Request approved: {farmer_request.pk}, distribution record {record.pk}")
        return record

    @transaction.atomic
    def reject_request(self, farmer_request, reason=''):
        farmer_request = self._lock(farmer_request)
        if farmer_request.status != RequestStatus.PENDING:
            raise ValueError(f"Cannot reject request with status: {farmer_request.status}")

        farmer_request.status = RequestStatus.REJECTED
        farmer_request.rejection_reason = reason or ''
        farmer_request.save(update_fields=['status', 'rejection_reason', 'updated_at'])

        clear_season_suggestions(farmer_request.season)

        self._audit(
            AuditAction.REJECT, f"Rejected request of {farmer_request.farmer_name}",
            record=farmer_request, new_values={'rejection_reason': farmer_request.rejection_reason},
        )
        logger.info(f"Request rejected: {farmer_request.pk}")
        return farmer_request

    @transaction.atomic
    def mark_distributed(self, farmer_request):
        """Mark an approved request as handed out; its record becomes claimed."""
        farmer_request = self._lock(farmer_request)
        if farmer_request.status != RequestStatus.APPROVED:
            raise ValueError(f"Cannot distribute request with status: {farmer_request.status}")

        farmer_request.status = RequestStatus.DISTRIBUTED
        farmer_request.save(update_fields=['status', 'updated_at'])

        record = DistributionRecord.objects.filter(request=farmer_request).first()
        if record is None:
            record = DistributionRecord.objects.create(
                request=farmer_request,
                claim_date=timezone.now(),
                **record_values_for(farmer_request)
            )
        elif not record.claimed or record.claim_date is None:
            record.claimed = True
            record.claim_date = record.claim_date or timezone.now()
            record.save(update_fields=['claimed', 'claim_date', 'updated_at'])

        clear_season_suggestions(farmer_request.season)

        self._audit(
            AuditAction.DISTRIBUTE, f"Distributed inputs to {farmer_request.farmer_name}",
            record=farmer_request,
        )
        logger.info(f"Request distributed: {farmer_request.pk}")
        return farmer_request

    @transaction.atomic
    def delete_request(self, farmer_request):
        description = f"Deleted {farmer_request.season} request of {farmer_request.farmer_name}"
        record_id = str(farmer_request.pk)

        season = farmer_request.season
        farmer_request.delete()
        clear_season_suggestions(season)

        self._audit(
            AuditAction.DELETE, description,
            record_id=record_id, record_type='farmerrequest',
        )
        logger.info(description)

    # =========================================================================
    # DISTRIBUTION RECORDS
    # =========================================================================

    @transaction.atomic
    def create_record(self, farmer_request, **record_data):
        """Record a distribution manually; one record per request."""
        if farmer_request.status not in (RequestStatus.APPROVED, RequestStatus.DISTRIBUTED):
            raise ValueError(f"Cannot record distribution for request with status: {farmer_request.status}")
        if DistributionRecord.objects.filter(request=farmer_request).exists():
            raise ValueError("A distribution record already exists for this request")

        values = {**record_values_for(farmer_request), **record_data}
        values.setdefault('claim_date', timezone.now())
        record = DistributionRecord.objects.create(request=farmer_request, **values)

        self._audit(
            AuditAction.CREATE, f"Recorded distribution to {farmer_request.farmer_name}",
            record=record,
        )
        return record

    @transaction.atomic
    def update_record(self, record, **changes):
        old_values = {field: getattr(record, field) for field in changes}
        for field, value in changes.items():
            setattr(record, field, value)
        record.save()

        self._audit(
            AuditAction.UPDATE, f"Updated distribution record of {record.request.farmer_name}",
            record=record, old_values=old_values, new_values=changes,
        )
        return record
