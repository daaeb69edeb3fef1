"""
Shared pytest fixtures.
"""
from datetime import date
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from distribution.models import RegionalAllocation, FarmerRequest
from rsbsa.models import RSBSASubmission, FarmParcel, SubmissionStatus

PASSWORD = 'Palay-Harvest-2025!'


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test to prevent pollution."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


# =============================================================================
# USERS
# =============================================================================

@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_user(
        username='rosa.dev',
        email='rosa@dumangas.gov.ph',
        password=PASSWORD,
        first_name='Rosa',
        last_name='Villanueva',
        role='ADMIN',
    )


@pytest.fixture
def jo_user(django_user_model):
    return django_user_model.objects.create_user(
        username='maria.jo',
        email='maria@dumangas.gov.ph',
        password=PASSWORD,
        first_name='Maria',
        last_name='Santos',
        role='JO',
    )


@pytest.fixture
def technician_user(django_user_model):
    return django_user_model.objects.create_user(
        username='jose.tech',
        email='jose@dumangas.gov.ph',
        password=PASSWORD,
        first_name='Jose',
        last_name='Dela Cruz',
        role='TECHNICIAN',
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def jo_client(api_client, jo_user):
    api_client.force_authenticate(user=jo_user)
    return api_client


@pytest.fixture
def technician_client(api_client, technician_user):
    api_client.force_authenticate(user=technician_user)
    return api_client


# =============================================================================
# RECORDS
# =============================================================================

@pytest.fixture
def make_farmer(db):
    """Create a registered farmer with one owned parcel."""
    def _make(last_name='Garcia', first_name='Juan', barangay='Bacay', area='1.5', **extra):
        extra.setdefault('status', SubmissionStatus.ACTIVE)
        extra.setdefault('ownership_type_registered_owner', True)
        submission = RSBSASubmission.objects.create(
            last_name=last_name,
            first_name=first_name,
            barangay=barangay,
            total_farm_area=Decimal(area),
            parcel_area=area,
            farm_location=f"{barangay}, Dumangas",
            **extra
        )
        FarmParcel.objects.create(
            submission=submission,
            parcel_number='Parcel-1',
            farm_location_barangay=barangay,
            farm_location_municipality='Dumangas',
            total_farm_area_ha=Decimal(area),
            ownership_type_registered_owner=True,
        )
        return submission
    return _make


@pytest.fixture
def allocation(db):
    """Wet 2025 allocation."""
    return RegionalAllocation.objects.create(
        allocation_date=date(2025, 6, 1),
        urea_46_0_0_bags=Decimal('100'),
        complete_14_14_14_bags=Decimal('80'),
        ammonium_sulfate_21_0_0_bags=Decimal('40'),
        muriate_potash_0_0_60_bags=Decimal('20'),
        jackpot_kg=Decimal('200'),
        rh9000_kg=Decimal('100'),
    )


@pytest.fixture
def make_request(db):
    """Create a farmer request in wet_2025 unless told otherwise."""
    def _make(farmer_name='Garcia, Juan', barangay='Bacay', **extra):
        extra.setdefault('season', 'wet_2025')
        return FarmerRequest.objects.create(
            farmer_name=farmer_name,
            barangay=barangay,
            **extra
        )
    return _make
