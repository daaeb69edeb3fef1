"""
Input Distribution Models

Season-based distribution of fertilizer and seeds to registered farmers.

- RegionalAllocation: stock received for one season (one per season)
- FarmerRequest: a farmer's request against the season's allocation
- DistributionRecord: what was actually handed out for an approved request

Requests are linked to allocations by season key, not by foreign key.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from .catalog import STOCK_TYPES_BY_ID
from .seasons import resolve_season


def quantity_field(help_text=''):
    return models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
        help_text=help_text
    )


class AllocationStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class RequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'
    DISTRIBUTED = 'distributed', 'Distributed'


# Requests holding stock against the allocation
RESERVING_STATUSES = [RequestStatus.PENDING, RequestStatus.APPROVED]


class CropType(models.TextChoices):
    RICE = 'rice', 'Rice'
    CORN = 'corn', 'Corn'
    VEGETABLES = 'vegetables', 'Vegetables'
    OTHERS = 'others', 'Others'


class RegionalAllocation(models.Model):
    """
    Fertilizer and seed stock allocated to the municipality for one season.

    The season key is derived from the allocation date on every save.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    season = models.CharField(
        max_length=20,
        unique=True,
        help_text="wet_YYYY or dry_YYYY, derived from allocation date"
    )
    allocation_date = models.DateField()
    season_start_date = models.DateField(null=True, blank=True)
    season_end_date = models.DateField(null=True, blank=True)

    # Fertilizers (bags)
    urea_46_0_0_bags = quantity_field("Urea 46-0-0 (bags)")
    complete_14_14_14_bags = quantity_field("Complete 14-14-14 (bags)")
    complete_16_16_16_bags = quantity_field("Complete 16-16-16 (bags)")
    ammonium_sulfate_21_0_0_bags = quantity_field("Ammonium Sulfate 21-0-0 (bags)")
    ammonium_phosphate_16_20_0_bags = quantity_field("Ammonium Phosphate 16-20-0 (bags)")
    muriate_potash_0_0_60_bags = quantity_field("Muriate of Potash 0-0-60 (bags)")

    # Seeds (kg)
    jackpot_kg = quantity_field("Jackpot rice seeds (kg)")
    us88_kg = quantity_field("US88 rice seeds (kg)")
    th82_kg = quantity_field("TH82 rice seeds (kg)")
    rh9000_kg = quantity_field("RH9000 corn seeds (kg)")
    lumping143_kg = quantity_field("Lumping 143 corn seeds (kg)")
    lp296_kg = quantity_field("LP296 corn seeds (kg)")

    notes = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=AllocationStatus.choices,
        default=AllocationStatus.ACTIVE
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='allocations_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'regional_allocations'
        ordering = ['-allocation_date', '-created_at']
        verbose_name = 'Regional Allocation'
        verbose_name_plural = 'Regional Allocations'

    def __str__(self):
        return f"Allocation {self.season}"

    def save(self, *args, **kwargs):
        """Derive the season key from the allocation date."""
        if self.allocation_date:
            self.season = resolve_season(self.allocation_date)
        super().save(*args, **kwargs)

    def allocated_quantity(self, type_id):
        return getattr(self, STOCK_TYPES_BY_ID[type_id]['allocation_field']) or Decimal('0')


class FarmerRequest(models.Model):
    """
    A farmer's request for inputs in a season.

    Lifecycle: pending -> approved -> distributed, or pending -> rejected.
    Quantities may only be edited while the request is pending.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    season = models.CharField(max_length=20, db_index=True)
    request_date = models.DateTimeField(default=timezone.now, db_index=True)

    farmer = models.ForeignKey(
        'rsbsa.RSBSASubmission',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='distribution_requests'
    )
    farmer_name = models.CharField(max_length=255)
    barangay = models.CharField(max_length=100, db_index=True)
    farm_area_ha = models.DecimalField(max_digits=10, decimal_places=4, default=Decimal('0'))
    crop_type = models.CharField(max_length=20, choices=CropType.choices, default=CropType.RICE)
    ownership_type = models.CharField(max_length=50, blank=True)
    num_parcels = models.PositiveIntegerField(default=1)

    fertilizer_requested = models.BooleanField(default=False)
    seeds_requested = models.BooleanField(default=False)

    # Requested fertilizers (bags)
    requested_urea_bags = quantity_field()
    requested_complete_14_bags = quantity_field()
    requested_complete_16_bags = quantity_field()
    requested_ammonium_sulfate_bags = quantity_field()
    requested_ammonium_phosphate_bags = quantity_field()
    requested_muriate_potash_bags = quantity_field()

    # Requested seeds (kg)
    requested_jackpot_kg = quantity_field()
    requested_us88_kg = quantity_field()
    requested_th82_kg = quantity_field()
    requested_rh9000_kg = quantity_field()
    requested_lumping143_kg = quantity_field()
    requested_lp296_kg = quantity_field()

    # Assignment
    assigned_fertilizer_type = models.CharField(max_length=100, blank=True)
    assigned_fertilizer_bags = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    assigned_seed_type = models.CharField(max_length=100, blank=True)
    assigned_seed_kg = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    fertilizer_accepted = models.BooleanField(null=True, blank=True)
    seeds_accepted = models.BooleanField(null=True, blank=True)

    status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING,
        db_index=True
    )
    rejection_reason = models.TextField(blank=True)
    request_notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='farmer_requests_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'farmer_requests'
        ordering = ['request_date', 'created_at']
        verbose_name = 'Farmer Request'
        verbose_name_plural = 'Farmer Requests'
        indexes = [
            models.Index(fields=['season', 'status'], name='freq_season_status_idx'),
            models.Index(fields=['season', 'barangay'], name='freq_season_brgy_idx'),
        ]

    def __str__(self):
        return f"{self.farmer_name} - {self.season} ({self.status})"

    def requested_quantity(self, type_id):
        return getattr(self, STOCK_TYPES_BY_ID[type_id]['request_field']) or Decimal('0')

    @property
    def reserves_stock(self):
        return self.status in RESERVING_STATUSES


class DistributionRecord(models.Model):
    """
    What was handed out for one approved request.

    Breakdown strings list non-zero amounts, e.g. "Urea:2, Complete:1".
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    request = models.OneToOneField(
        FarmerRequest,
        on_delete=models.CASCADE,
        related_name='distribution_record'
    )
    distribution_date = models.DateTimeField(default=timezone.now, db_index=True)

    fertilizer_type = models.CharField(max_length=255, blank=True)
    fertilizer_bags_given = models.IntegerField(default=0)
    seed_type = models.CharField(max_length=255, blank=True)
    seed_kg_given = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))

    voucher_code = models.CharField(max_length=50, blank=True)
    farmer_signature = models.BooleanField(default=False)
    verified_by = models.CharField(max_length=150, blank=True)
    verification_notes = models.TextField(blank=True)

    claimed = models.BooleanField(default=False)
    claim_date = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'distribution_records'
        ordering = ['-distribution_date']
        verbose_name = 'Distribution Record'
        verbose_name_plural = 'Distribution Records'

    def __str__(self):
        return f"Distribution to {self.request.farmer_name} on {self.distribution_date:%Y-%m-%d}"
