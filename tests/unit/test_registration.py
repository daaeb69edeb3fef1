"""
Tests for the RSBSA registration service.
"""
from decimal import Decimal

import pytest

from audit.models import AuditLog, AuditAction, AuditModule
from rsbsa.ffrs import get_barangay_from_ffrs_code
from rsbsa.models import RSBSASubmission, FarmParcel, SubmissionStatus
from rsbsa.services import RSBSARegistrationService, LandOwnerReferenced

pytestmark = pytest.mark.django_db


def owned_parcel(barangay='Bacay', area='1.25', **extra):
    return {
        'farm_location_barangay': barangay,
        'farm_location_municipality': 'Dumangas',
        'total_farm_area_ha': area,
        'ownership_type_registered_owner': True,
        **extra
    }


@pytest.fixture
def service(technician_user):
    return RSBSARegistrationService(user=technician_user)


class TestPrepareParcels:

    def test_incomplete_parcels_are_skipped(self, service):
        prepared = service.prepare_parcels([
            owned_parcel(),
            {'farm_location_barangay': '', 'total_farm_area_ha': '2'},
            {'farm_location_barangay': 'Paco', 'total_farm_area_ha': None},
        ])

        assert len(prepared) == 1
        assert prepared[0]['total_farm_area_ha'] == Decimal('1.25')

    @pytest.mark.parametrize('parcels', [[], None, [{'farm_location_barangay': '', 'total_farm_area_ha': ''}]])
    def test_at_least_one_parcel(self, service, parcels):
        with pytest.raises(ValueError, match='At least one farmland parcel is required'):
            service.prepare_parcels(parcels)

    @pytest.mark.parametrize('area', ['0', '-1.5'])
    def test_area_must_be_positive(self, service, area):
        with pytest.raises(ValueError, match='Parcel area must be a positive number'):
            service.prepare_parcels([owned_parcel(area=area)])

    def test_needs_primary_ownership_type(self, service):
        parcel = owned_parcel(ownership_type_registered_owner=False, ownership_type_others=True)

        with pytest.raises(ValueError, match='valid ownership type'):
            service.prepare_parcels([parcel])


class TestCreateSubmission:

    def test_register_farmer(self, service):
        submission = service.create_submission(
            [
                owned_parcel(area='1.25'),
                owned_parcel(barangay='Paco', area='0.75', ownership_type_registered_owner=False,
                             ownership_type_tenant=True, tenant_land_owner_name='Lim, Pedro'),
            ],
            last_name='Garcia',
            first_name='Juan',
            barangay='Bacay',
            farmer_rice=True,
        )

        submission.refresh_from_db()
        assert submission.status == SubmissionStatus.ACTIVE
        assert submission.total_farm_area == Decimal('2')
        assert submission.parcel_area == '1.25, 0.75'
        assert submission.farm_location == 'Bacay, Dumangas'
        assert submission.ownership_type_registered_owner is True
        assert submission.created_by.username == 'jose.tech'

        assert get_barangay_from_ffrs_code(submission.ffrs_code) == 'Bacay'
        assert list(submission.parcels.values_list('parcel_number', flat=True)) == ['Parcel-1', 'Parcel-2']

        entry = AuditLog.objects.get(module=AuditModule.RSBSA, action=AuditAction.CREATE)
        assert entry.record_id == str(submission.pk)
        assert entry.new_values['ffrs_code'] == submission.ffrs_code

    def test_invalid_parcels_create_nothing(self, service):
        with pytest.raises(ValueError):
            service.create_submission([owned_parcel(area='0')], last_name='Garcia', first_name='Juan', barangay='Bacay')

        assert not RSBSASubmission.objects.exists()

    def test_ffrs_codes_are_unique(self, service):
        codes = {
            service.create_submission([owned_parcel()], last_name=f"Farmer{i}", first_name='X', barangay='Bacay').ffrs_code
            for i in range(5)
        }
        assert len(codes) == 5


class TestUpdateParcel:

    def test_submission_totals_follow_parcels(self, service, make_farmer):
        farmer = make_farmer(area='1.5')
        parcel = farmer.parcels.get()

        service.update_parcel(parcel, total_farm_area_ha='2.5')

        farmer.refresh_from_db()
        assert farmer.total_farm_area == Decimal('2.5')
        assert farmer.parcel_area == '2.5'

    def test_rejects_non_positive_area(self, service, make_farmer):
        parcel = make_farmer().parcels.get()

        with pytest.raises(ValueError, match='Parcel area must be a positive number'):
            service.update_parcel(parcel, total_farm_area_ha='0')


class TestDeleteSubmission:

    @pytest.fixture
    def land_owner(self, make_farmer):
        return make_farmer(last_name='Lim', first_name='Pedro', barangay='Paco')

    @pytest.fixture
    def tenant(self, make_farmer):
        tenant = make_farmer(last_name='Garcia', first_name='Juan')
        FarmParcel.objects.create(
            submission=tenant,
            parcel_number='Parcel-2',
            farm_location_barangay='Paco',
            total_farm_area_ha=Decimal('0.5'),
            ownership_type_tenant=True,
            tenant_land_owner_name='pedro lim',
        )
        return tenant

    def test_referenced_land_owner_needs_confirmation(self, service, land_owner, tenant):
        with pytest.raises(LandOwnerReferenced) as exc_info:
            service.delete_submission(land_owner)

        assert [p.submission_id for p in exc_info.value.parcels] == [tenant.pk]
        assert RSBSASubmission.objects.filter(pk=land_owner.pk).exists()

    def test_force_delete(self, service, land_owner, tenant):
        parcels_deleted = service.delete_submission(land_owner, force=True)

        assert parcels_deleted == 1
        assert not RSBSASubmission.objects.filter(pk=land_owner.pk).exists()
        assert FarmParcel.objects.filter(submission=tenant).count() == 2
        assert AuditLog.objects.filter(
            action=AuditAction.DELETE, record_id=str(land_owner.pk), record_type='rsbsasubmission'
        ).exists()

    def test_unreferenced_farmer_deletes_directly(self, service, tenant):
        assert service.delete_submission(tenant) == 2

    def test_name_variants(self, make_farmer):
        farmer = make_farmer(last_name='Lim', first_name='Pedro', middle_name='Santos')

        assert set(farmer.land_owner_name_variants()) == {
            'Lim, Pedro Santos',
            'Lim, Pedro',
            'Pedro Lim',
            'Pedro Santos Lim',
        }


class TestQueries:

    def test_farmer_summary(self, make_farmer):
        make_farmer(last_name='Garcia', first_name='Juan', area='1')
        two_parcels = make_farmer(last_name='Reyes', first_name='Ana', area='2')
        FarmParcel.objects.create(
            submission=two_parcels, parcel_number='Parcel-2', farm_location_barangay='Bacay',
            total_farm_area_ha=Decimal('0.5'), ownership_type_lessee=True,
        )

        summary = list(RSBSARegistrationService.farmer_summary())

        assert summary[0].pk == two_parcels.pk
        assert summary[0].total_parcels == 2
        assert summary[0].parcels_area == Decimal('2.5')

    def test_parcels_by_farmer_ignores_case(self, make_farmer):
        make_farmer(last_name='Garcia', first_name='Juan')

        assert RSBSARegistrationService.parcels_by_farmer(' garcia', 'JUAN ').count() == 1

    def test_land_owners(self, make_farmer):
        owner = make_farmer(last_name='Lim', first_name='Pedro')
        tenant_only = make_farmer(last_name='Cruz', first_name='Carlo', ownership_type_registered_owner=False)
        tenant_only.parcels.update(ownership_type_registered_owner=False, ownership_type_tenant=True)

        assert list(RSBSARegistrationService.land_owners()) == [owner]
