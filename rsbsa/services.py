"""
RSBSA Registration Service

Handles farmer enrolment:
- Submission creation with nested parcels and derived totals
- FFRS code assignment
- Land-owner reference checks before deletion
- Farmer summaries and land owner listings
"""

from decimal import Decimal, InvalidOperation
import logging

from django.db import transaction, IntegrityError
from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from audit.models import AuditAction, AuditModule
from audit.services import log_audit
from .ffrs import generate_ffrs_code
from .models import RSBSASubmission, FarmParcel, SubmissionStatus

logger = logging.getLogger(__name__)

FFRS_GENERATION_ATTEMPTS = 10


class LandOwnerReferenced(Exception):
    """Raised when a farmer to be deleted is named as land owner on other parcels."""

    def __init__(self, submission, parcels):
        self.submission = submission
        self.parcels = list(parcels)
        super().__init__(
            f"{submission.full_name} is recorded as land owner on "
            f"{len(self.parcels)} parcel(s) of other farmers"
        )


def _to_area(value):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid parcel area: {value!r}")


class RSBSARegistrationService:
    """Service for the RSBSA farmer registry"""

    def __init__(self, user=None, request=None):
        self.user = user
        self.request = request

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def prepare_parcels(self, parcels):
        """
        Drop incomplete parcels and validate the rest.

        Parcels missing a barangay or area are skipped; a non-positive area
        is an error. At least one remaining parcel must be a registered
        owner, tenant or lessee parcel.
        """
        if not parcels:
            raise ValueError("At least one farmland parcel is required")

        prepared = []
        for parcel in parcels:
            if not parcel.get('farm_location_barangay') or parcel.get('total_farm_area_ha') in (None, ''):
                logger.warning(f"Skipping parcel with missing barangay or area: {parcel}")
                continue
            area = _to_area(parcel['total_farm_area_ha'])
            if area <= 0:
                raise ValueError("Parcel area must be a positive number")
            prepared.append({**parcel, 'total_farm_area_ha': area})

        if not prepared:
            raise ValueError("At least one farmland parcel is required")

        if not any(
            p.get('ownership_type_registered_owner') or
            p.get('ownership_type_tenant') or
            p.get('ownership_type_lessee')
            for p in prepared
        ):
            raise ValueError(
                "At least one parcel must have a valid ownership type "
                "(Registered Owner, Tenant, or Lessee)"
            )
        return prepared

    @staticmethod
    def derive_farm_fields(parcels):
        """Totals and summary fields copied onto the submission."""
        first = parcels[0]
        location = f"{first.get('farm_location_barangay', '')}, {first.get('farm_location_municipality', '')}"

        return {
            'total_farm_area': sum((p['total_farm_area_ha'] for p in parcels), Decimal('0')),
            'farm_location': location.strip(', '),
            'parcel_area': ', '.join(f"{p['total_farm_area_ha'].normalize():f}" for p in parcels),
            'ownership_type_registered_owner': bool(first.get('ownership_type_registered_owner')),
            'ownership_type_tenant': bool(first.get('ownership_type_tenant')),
            'ownership_type_lessee': bool(first.get('ownership_type_lessee')),
        }

    def assign_ffrs_code(self, submission):
        """Give the submission a unique FFRS code based on its barangay."""
        for _ in range(FFRS_GENERATION_ATTEMPTS):
            code = generate_ffrs_code(submission.barangay)
            if RSBSASubmission.objects.filter(ffrs_code=code).exists():
                continue
            try:
                with transaction.atomic():
                    submission.ffrs_code = code
                    submission.save(update_fields=['ffrs_code'])
                return code
            except IntegrityError:
                logger.warning(f"FFRS code collision on {code}, regenerating")
        raise ValueError("Could not generate a unique FFRS code")

    @transaction.atomic
    def create_submission(self, parcels, **submission_data):
        """
        Register a farmer with their parcels.

        Args:
            parcels: list of parcel field dicts
            **submission_data: RSBSASubmission fields

        Returns:
            RSBSASubmission instance
        """
        prepared = self.prepare_parcels(parcels)
        submission_data.pop('ffrs_code', None)

        submission = RSBSASubmission.objects.create(
            created_by=self.user,
            status=SubmissionStatus.ACTIVE,
            **submission_data,
            **self.derive_farm_fields(prepared),
        )

        for index, parcel in enumerate(prepared, start=1):
            parcel_number = parcel.pop('parcel_number', '') or f"Parcel-{index}"
            FarmParcel.objects.create(
                submission=submission,
                parcel_number=parcel_number,
                **parcel
            )

        self.assign_ffrs_code(submission)

        log_audit(
            AuditAction.CREATE, AuditModule.RSBSA,
            f"Registered farmer {submission.full_name} ({submission.barangay}) "
            f"with {len(prepared)} parcel(s)",
            user=self.user, request=self.request, record=submission,
            new_values={'ffrs_code': submission.ffrs_code, 'total_farm_area': submission.total_farm_area},
        )
        logger.info(f"RSBSA submission created: {submission.ffrs_code} {submission.full_name}")
        return submission

    @transaction.atomic
    def update_submission(self, submission, **changes):
        old_values = {field: getattr(submission, field) for field in changes}
        for field, value in changes.items():
            setattr(submission, field, value)
        submission.save()

        log_audit(
            AuditAction.UPDATE, AuditModule.RSBSA,
            f"Updated RSBSA record of {submission.full_name}",
            user=self.user, request=self.request, record=submission,
            old_values=old_values, new_values=changes,
        )
        return submission

    @transaction.atomic
    def update_parcel(self, parcel, **changes):
        if 'total_farm_area_ha' in changes:
            area = _to_area(changes['total_farm_area_ha'])
            if area <= 0:
                raise ValueError("Parcel area must be a positive number")
            changes['total_farm_area_ha'] = area

        for field, value in changes.items():
            setattr(parcel, field, value)
        parcel.save()

        # Keep the submission totals in step with its parcels
        submission = parcel.submission
        parcels = list(submission.parcels.order_by('parcel_number'))
        submission.total_farm_area = sum((p.total_farm_area_ha for p in parcels), Decimal('0'))
        submission.parcel_area = ', '.join(f"{p.total_farm_area_ha.normalize():f}" for p in parcels)
        submission.save(update_fields=['total_farm_area', 'parcel_area', 'updated_at'])

        log_audit(
            AuditAction.UPDATE, AuditModule.RSBSA,
            f"Updated parcel {parcel.parcel_number} of {submission.full_name}",
            user=self.user, request=self.request, record=parcel,
            new_values=changes,
        )
        return parcel

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def find_land_owner_references(self, submission):
        """Parcels of other farmers naming this farmer as their land owner."""
        name_filter = Q()
        for name in submission.land_owner_name_variants():
            name_filter |= Q(tenant_land_owner_name__iexact=name)
            name_filter |= Q(lessee_land_owner_name__iexact=name)

        return (
            FarmParcel.objects
            .filter(name_filter)
            .exclude(submission=submission)
            .select_related('submission')
        )

    @transaction.atomic
    def delete_submission(self, submission, force=False):
        """
        Delete a submission and its parcels.

        Raises:
            LandOwnerReferenced: other parcels name this farmer as land owner
                and `force` is not set.

        Returns:
            Number of parcels deleted.
        """
        references = self.find_land_owner_references(submission)
        if references.exists() and not force:
            raise LandOwnerReferenced(submission, references)

        parcels_deleted = submission.parcels.count()
        description = f"Deleted RSBSA record of {submission.full_name} and {parcels_deleted} parcel(s)"
        record_id = str(submission.pk)
        old_values = {'ffrs_code': submission.ffrs_code, 'barangay': submission.barangay}

        submission.delete()

        log_audit(
            AuditAction.DELETE, AuditModule.RSBSA, description,
            user=self.user, request=self.request,
            record_id=record_id, record_type='rsbsasubmission',
            old_values=old_values,
        )
        logger.info(description)
        return parcels_deleted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def parcels_by_farmer(last_name, first_name):
        return FarmParcel.objects.filter(
            submission__last_name__iexact=last_name.strip(),
            submission__first_name__iexact=first_name.strip(),
        ).select_related('submission')

    @staticmethod
    def farmer_summary():
        """Every farmer with parcel count and total declared area."""
        return (
            RSBSASubmission.objects
            .annotate(
                total_parcels=Count('parcels'),
                parcels_area=Coalesce(
                    Sum('parcels__total_farm_area_ha'),
                    Value(Decimal('0')),
                    output_field=DecimalField(max_digits=12, decimal_places=4),
                ),
            )
            .order_by('-total_parcels', 'last_name', 'first_name')
        )

    @staticmethod
    def land_owners():
        """Farmers registered as owner, either on the submission or on a parcel."""
        return (
            RSBSASubmission.objects
            .filter(
                Q(ownership_type_registered_owner=True) |
                Q(parcels__ownership_type_registered_owner=True)
            )
            .exclude(last_name='', first_name='')
            .distinct()
            .order_by('last_name', 'first_name')
        )
