"""
RSBSA Registry Models

Registry System for Basic Sectors in Agriculture (RSBSA) enrolment records
kept by the municipal agriculture office.

- RSBSASubmission: one farmer's registration profile
- FarmParcel: a land parcel declared on a submission, with its ownership type

Tenants and lessees reference their land owner by name. Deleting a farmer
who is named as land owner on other farmers' parcels needs confirmation.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from phonenumber_field.modelfields import PhoneNumberField


class Gender(models.TextChoices):
    MALE = 'Male', 'Male'
    FEMALE = 'Female', 'Female'


class SubmissionStatus(models.TextChoices):
    SUBMITTED = 'Submitted', 'Submitted'
    ACTIVE = 'Active Farmer', 'Active Farmer'
    NOT_ACTIVE = 'Not Active', 'Not Active'


class YesNo(models.TextChoices):
    YES = 'Yes', 'Yes'
    NO = 'No', 'No'


class RSBSASubmission(models.Model):
    """
    A farmer's RSBSA registration.

    Farm location, parcel area and total farm area are derived from the
    parcels when the submission is created.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Name
    last_name = models.CharField(max_length=100, db_index=True)
    first_name = models.CharField(max_length=100, db_index=True)
    middle_name = models.CharField(max_length=100, blank=True)
    ext_name = models.CharField(max_length=20, blank=True, help_text="Jr., Sr., III ...")

    # Personal
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True)
    birthdate = models.DateField(null=True, blank=True)
    contact_number = PhoneNumberField(region='PH', blank=True, null=True)

    # Residence
    barangay = models.CharField(max_length=100, db_index=True)
    municipality = models.CharField(max_length=100, default='Dumangas')

    main_livelihood = models.CharField(
        max_length=100,
        blank=True,
        help_text="e.g. Farmer, Farmworker/Laborer, Fisherfolk"
    )

    # Derived from parcels
    farm_location = models.CharField(max_length=255, blank=True)
    parcel_area = models.CharField(
        max_length=255,
        blank=True,
        help_text="Comma-separated list of parcel areas in hectares"
    )
    total_farm_area = models.DecimalField(
        max_digits=10,
        decimal_places=4,
        default=Decimal('0'),
        help_text="Sum of all parcel areas (ha)"
    )

    # Ownership (taken from the first parcel)
    ownership_type_registered_owner = models.BooleanField(default=False)
    ownership_type_tenant = models.BooleanField(default=False)
    ownership_type_lessee = models.BooleanField(default=False)

    # Farming activities
    farmer_rice = models.BooleanField(default=False)
    farmer_corn = models.BooleanField(default=False)
    farmer_other_crops = models.BooleanField(default=False)
    farmer_other_crops_text = models.CharField(max_length=255, blank=True)
    farmer_livestock = models.BooleanField(default=False)
    farmer_livestock_text = models.CharField(max_length=255, blank=True)
    farmer_poultry = models.BooleanField(default=False)
    farmer_poultry_text = models.CharField(max_length=255, blank=True)

    status = models.CharField(
        max_length=20,
        choices=SubmissionStatus.choices,
        default=SubmissionStatus.SUBMITTED,
        db_index=True
    )
    ffrs_code = models.CharField(
        max_length=30,
        unique=True,
        null=True,
        blank=True,
        help_text="FFRS identifier, assigned on registration"
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rsbsa_submissions'
    )
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rsbsa_submission'
        ordering = ['last_name', 'first_name']
        verbose_name = 'RSBSA Submission'
        verbose_name_plural = 'RSBSA Submissions'
        indexes = [
            models.Index(fields=['barangay', 'status'], name='rsbsa_brgy_status_idx'),
            models.Index(fields=['last_name', 'first_name'], name='rsbsa_name_idx'),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.barangay})"

    @property
    def full_name(self):
        """'LAST, FIRST MIDDLE EXT' as printed on the masterlist."""
        name = f"{self.last_name}, {self.first_name}"
        if self.middle_name:
            name += f" {self.middle_name}"
        if self.ext_name:
            name += f" {self.ext_name}"
        return name.strip(', ')

    @property
    def age(self):
        if not self.birthdate:
            return None
        today = timezone.localdate()
        years = today.year - self.birthdate.year
        if (today.month, today.day) < (self.birthdate.month, self.birthdate.day):
            years -= 1
        return years if years >= 0 else None

    def land_owner_name_variants(self):
        """Names under which tenants/lessees may have recorded this farmer."""
        variants = {
            self.full_name,
            f"{self.last_name}, {self.first_name}",
            f"{self.first_name} {self.last_name}",
        }
        if self.middle_name:
            variants.add(f"{self.first_name} {self.middle_name} {self.last_name}")
        return [v for v in variants if v.strip(', ')]


class FarmParcel(models.Model):
    """A parcel of farmland declared on an RSBSA submission."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    submission = models.ForeignKey(
        RSBSASubmission,
        on_delete=models.CASCADE,
        related_name='parcels'
    )
    parcel_number = models.CharField(max_length=50)

    farm_location_barangay = models.CharField(max_length=100, db_index=True)
    farm_location_municipality = models.CharField(max_length=100, blank=True)

    total_farm_area_ha = models.DecimalField(
        max_digits=10,
        decimal_places=4,
        validators=[MinValueValidator(Decimal('0.0001'))],
        help_text="Parcel area in hectares (must be positive)"
    )

    within_ancestral_domain = models.CharField(
        max_length=3, choices=YesNo.choices, default=YesNo.NO
    )
    ownership_document_no = models.CharField(max_length=100, blank=True)
    agrarian_reform_beneficiary = models.CharField(
        max_length=3, choices=YesNo.choices, default=YesNo.NO
    )

    ownership_type_registered_owner = models.BooleanField(default=False)
    ownership_type_tenant = models.BooleanField(default=False)
    ownership_type_lessee = models.BooleanField(default=False)
    ownership_type_others = models.BooleanField(default=False)

    tenant_land_owner_name = models.CharField(max_length=255, blank=True, db_index=True)
    lessee_land_owner_name = models.CharField(max_length=255, blank=True, db_index=True)
    ownership_others_specify = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rsbsa_farm_parcels'
        ordering = ['submission', 'parcel_number']
        verbose_name = 'Farm Parcel'
        verbose_name_plural = 'Farm Parcels'

    def __str__(self):
        return f"{self.parcel_number} - {self.farm_location_barangay} ({self.total_farm_area_ha} ha)"

    @property
    def ownership_type(self):
        if self.ownership_type_registered_owner:
            return 'Registered Owner'
        if self.ownership_type_tenant:
            return 'Tenant'
        if self.ownership_type_lessee:
            return 'Lessee'
        if self.ownership_type_others:
            return 'Others'
        return ''

    @property
    def has_primary_ownership_type(self):
        return (
            self.ownership_type_registered_owner or
            self.ownership_type_tenant or
            self.ownership_type_lessee
        )
