"""
API tests for the RSBSA registry.
"""
from decimal import Decimal

import pytest
from rest_framework import status

from rsbsa.models import RSBSASubmission, FarmParcel

pytestmark = pytest.mark.django_db

SUBMISSIONS_URL = '/api/rsbsa/submissions/'


def registration_payload(**overrides):
    payload = {
        'last_name': 'Garcia',
        'first_name': 'Juan',
        'middle_name': 'Reyes',
        'gender': 'Male',
        'birthdate': '1980-03-14',
        'barangay': 'Bacay',
        'main_livelihood': 'Farmer',
        'farmer_rice': True,
        'parcels': [
            {
                'farm_location_barangay': 'Bacay',
                'farm_location_municipality': 'Dumangas',
                'total_farm_area_ha': '1.5000',
                'ownership_type_registered_owner': True,
            },
            {
                'farm_location_barangay': '',
                'total_farm_area_ha': None,
            },
        ],
    }
    payload.update(overrides)
    return payload


class TestRegisterFarmer:

    def test_technician_registers_farmer(self, technician_client):
        response = technician_client.post(SUBMISSIONS_URL, registration_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'Active Farmer'
        assert response.data['ffrs_code'].startswith('06-30-18-002-')
        assert response.data['total_farm_area'] == '1.5000'
        assert len(response.data['parcels']) == 1
        assert response.data['parcels'][0]['ownership_type'] == 'Registered Owner'

    def test_parcel_without_ownership_type(self, jo_client):
        payload = registration_payload(parcels=[
            {'farm_location_barangay': 'Bacay', 'total_farm_area_ha': '1', 'ownership_type_others': True},
        ])

        response = jo_client.post(SUBMISSIONS_URL, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'ownership type' in response.data['error']
        assert not RSBSASubmission.objects.exists()

    def test_non_positive_area_rejected(self, jo_client):
        payload = registration_payload(parcels=[
            {'farm_location_barangay': 'Bacay', 'total_farm_area_ha': '0', 'ownership_type_tenant': True},
        ])

        response = jo_client.post(SUBMISSIONS_URL, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_no_parcels(self, jo_client):
        response = jo_client.post(SUBMISSIONS_URL, registration_payload(parcels=[]), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'parcels' in response.data

    def test_admin_cannot_register(self, admin_client):
        response = admin_client.post(SUBMISSIONS_URL, registration_payload(), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestMasterlist:

    def test_list_search_and_filter(self, admin_client, make_farmer):
        make_farmer(last_name='Garcia', first_name='Juan', barangay='Bacay')
        make_farmer(last_name='Reyes', first_name='Ana', barangay='Tiring')

        response = admin_client.get(SUBMISSIONS_URL)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert response.data['results'][0]['parcel_count'] == 1

        response = admin_client.get(SUBMISSIONS_URL, {'barangay': 'Tiring'})
        assert [r['last_name'] for r in response.data['results']] == ['Reyes']

        response = admin_client.get(SUBMISSIONS_URL, {'search': 'garc'})
        assert [r['last_name'] for r in response.data['results']] == ['Garcia']

    def test_anonymous_rejected(self, api_client):
        response = api_client.get(SUBMISSIONS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_profile(self, jo_client, make_farmer):
        farmer = make_farmer()

        response = jo_client.patch(f"{SUBMISSIONS_URL}{farmer.pk}/", {'status': 'Not Active'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'Not Active'


class TestDeleteFarmer:

    @pytest.fixture
    def land_owner(self, make_farmer):
        owner = make_farmer(last_name='Lim', first_name='Pedro')
        tenant = make_farmer(last_name='Garcia', first_name='Juan')
        FarmParcel.objects.create(
            submission=tenant,
            parcel_number='Parcel-2',
            farm_location_barangay='Bacay',
            total_farm_area_ha=Decimal('0.8'),
            ownership_type_lessee=True,
            lessee_land_owner_name='Lim, Pedro',
        )
        return owner

    def test_conflict_lists_affected_parcels(self, jo_client, land_owner):
        response = jo_client.delete(f"{SUBMISSIONS_URL}{land_owner.pk}/")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['requires_confirmation'] is True
        assert [p['farmer_name'] for p in response.data['affected_parcels']] == ['Garcia, Juan']
        assert RSBSASubmission.objects.filter(pk=land_owner.pk).exists()

    def test_force_delete(self, jo_client, land_owner):
        response = jo_client.delete(f"{SUBMISSIONS_URL}{land_owner.pk}/?force=true")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['parcels_deleted'] == 1
        assert not RSBSASubmission.objects.filter(pk=land_owner.pk).exists()

    def test_admin_cannot_delete(self, admin_client, make_farmer):
        farmer = make_farmer()

        response = admin_client.delete(f"{SUBMISSIONS_URL}{farmer.pk}/")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestParcelsAndLookups:

    def test_parcel_update_keeps_totals(self, technician_client, make_farmer):
        farmer = make_farmer(area='1')
        parcel = farmer.parcels.get()

        response = technician_client.patch(
            f"/api/rsbsa/parcels/{parcel.pk}/", {'total_farm_area_ha': '1.75'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        farmer.refresh_from_db()
        assert farmer.total_farm_area == Decimal('1.75')

    def test_parcel_area_must_be_positive(self, technician_client, make_farmer):
        parcel = make_farmer().parcels.get()

        response = technician_client.patch(
            f"/api/rsbsa/parcels/{parcel.pk}/", {'total_farm_area_ha': '0'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_parcels_of_submission(self, admin_client, make_farmer):
        farmer = make_farmer()

        response = admin_client.get(f"{SUBMISSIONS_URL}{farmer.pk}/parcels/")

        assert response.status_code == status.HTTP_200_OK
        assert [p['parcel_number'] for p in response.data] == ['Parcel-1']

    def test_parcels_by_farmer_requires_names(self, admin_client):
        response = admin_client.get('/api/rsbsa/parcels/by-farmer/', {'last_name': 'Garcia'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_barangays(self, jo_client):
        response = jo_client.get('/api/rsbsa/barangays/')

        assert len(response.data) == 26
        assert {'name': 'Bacay', 'code': '002'} in response.data

    def test_ffrs_lookup(self, jo_client, make_farmer):
        farmer = make_farmer(ffrs_code='06-30-18-024-000123', barangay='Tiring')

        response = jo_client.get('/api/rsbsa/ffrs/06-30-18-024-000123/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['barangay'] == 'Tiring'
        assert response.data['submission_id'] == str(farmer.pk)

    def test_ffrs_lookup_rejects_bad_code(self, jo_client):
        response = jo_client.get('/api/rsbsa/ffrs/not-a-code/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_farmer_summary_and_landowners(self, admin_client, make_farmer):
        make_farmer()

        summary = admin_client.get('/api/rsbsa/farmers/summary/')
        owners = admin_client.get('/api/rsbsa/landowners/')

        assert summary.data['results'][0]['total_parcels'] == 1
        assert [o['name'] for o in owners.data] == ['Garcia, Juan']
