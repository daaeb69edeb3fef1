"""
API tests for allocations, farmer requests, shortages and records.
"""
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from rest_framework import status

from distribution.models import RegionalAllocation, FarmerRequest, DistributionRecord, RequestStatus

pytestmark = pytest.mark.django_db

BASE_URL = '/api/distribution'


class TestAllocations:

    def test_create_then_update_same_season(self, jo_client):
        response = jo_client.post(f"{BASE_URL}/allocations/", {
            'allocation_date': '2025-06-01',
            'urea_46_0_0_bags': '100',
            'jackpot_kg': '250.5',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['created'] is True
        assert response.data['allocation']['season'] == 'wet_2025'
        assert response.data['allocation']['season_label'] == 'Wet 2025'

        response = jo_client.post(f"{BASE_URL}/allocations/", {
            'allocation_date': '2025-09-10',
            'urea_46_0_0_bags': '120',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['created'] is False
        assert RegionalAllocation.objects.count() == 1
        assert RegionalAllocation.objects.get().urea_46_0_0_bags == Decimal('120')

    def test_season_in_payload_is_ignored(self, technician_client):
        response = technician_client.post(f"{BASE_URL}/allocations/", {
            'allocation_date': '2025-12-01',
            'season': 'wet_2099',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['allocation']['season'] == 'dry_2025'

    def test_end_before_start_rejected(self, jo_client):
        response = jo_client.post(f"{BASE_URL}/allocations/", {
            'allocation_date': '2025-06-01',
            'season_start_date': '2025-06-01',
            'season_end_date': '2025-05-01',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admin_is_read_only(self, admin_client, allocation):
        response = admin_client.post(f"{BASE_URL}/allocations/", {'allocation_date': '2025-06-01'}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

        response = admin_client.get(f"{BASE_URL}/allocations/")
        assert response.status_code == status.HTTP_200_OK
        assert [a['season'] for a in response.data] == ['wet_2025']

    def test_by_season(self, admin_client, allocation):
        response = admin_client.get(f"{BASE_URL}/allocations/season/wet_2025/")
        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_fertilizer_bags'] == Decimal('240')

        response = admin_client.get(f"{BASE_URL}/allocations/season/dry_2025/")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_cascades_to_requests(self, jo_client, allocation, make_request):
        make_request()
        make_request(farmer_name='Lopez, Ben')

        response = jo_client.delete(f"{BASE_URL}/allocations/{allocation.pk}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['requests_deleted'] == 2
        assert not FarmerRequest.objects.exists()


class TestRequests:

    def test_create_for_registered_farmer(self, technician_client, make_farmer):
        farmer = make_farmer(area='2')

        response = technician_client.post(f"{BASE_URL}/requests/", {
            'farmer': str(farmer.pk),
            'season': 'wet_2025',
            'requested_urea_bags': '2',
            'requested_jackpot_kg': '20',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        created = response.data['request']
        assert created['status'] == 'pending'
        assert created['farmer_name'] == 'Garcia, Juan'
        assert created['barangay'] == 'Bacay'
        assert created['ffrs_code'] == farmer.ffrs_code

    def test_create_requires_farmer_or_name(self, jo_client):
        response = jo_client.post(f"{BASE_URL}/requests/", {'season': 'wet_2025'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_rejects_malformed_season(self, jo_client):
        response = jo_client.post(f"{BASE_URL}/requests/", {
            'season': 'rainy_2025', 'farmer_name': 'Reyes, Ana', 'barangay': 'Tiring',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'season' in response.data

    def test_list_by_season_with_shortage_flag(self, admin_client, allocation, make_request):
        make_request(requested_urea_bags=Decimal('60'))
        make_request(farmer_name='Lopez, Ben', requested_urea_bags=Decimal('50'))
        make_request(farmer_name='Dry Season', season='dry_2025')

        response = admin_client.get(f"{BASE_URL}/requests/", {'season': 'wet_2025', 'with_shortage': 'true'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [r['has_shortage'] for r in response.data['results']] == [True, True]

    def test_edit_only_while_pending(self, jo_client, make_request):
        farmer_request = make_request(status=RequestStatus.APPROVED)

        response = jo_client.patch(
            f"{BASE_URL}/requests/{farmer_request.pk}/", {'requested_urea_bags': '9'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Cannot update request with status: approved'

    def test_approve_creates_record(self, jo_client, make_request):
        farmer_request = make_request(requested_urea_bags=Decimal('2'), requested_complete_14_bags=Decimal('1'))

        response = jo_client.post(f"{BASE_URL}/requests/{farmer_request.pk}/approve/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['request']['status'] == 'approved'
        assert response.data['request']['has_record'] is True
        assert response.data['record']['fertilizer_type'] == 'Urea:2, Complete:1'
        assert response.data['record']['fertilizer_bags_given'] == 3
        assert response.data['record']['claimed'] is True

        response = jo_client.post(f"{BASE_URL}/requests/{farmer_request.pk}/approve/")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert DistributionRecord.objects.count() == 1

    def test_reject_and_distribute(self, jo_client, make_request):
        rejected = make_request()
        approved = make_request(farmer_name='Lopez, Ben', status=RequestStatus.APPROVED)

        response = jo_client.post(
            f"{BASE_URL}/requests/{rejected.pk}/reject/", {'reason': 'Duplicate'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['request']['rejection_reason'] == 'Duplicate'

        response = jo_client.post(f"{BASE_URL}/requests/{rejected.pk}/distribute/")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = jo_client.post(f"{BASE_URL}/requests/{approved.pk}/distribute/")
        assert response.status_code == status.HTTP_200_OK
        assert response.data['request']['status'] == 'distributed'

    def test_admin_cannot_approve(self, admin_client, make_request):
        farmer_request = make_request()

        response = admin_client.post(f"{BASE_URL}/requests/{farmer_request.pk}/approve/")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        farmer_request.refresh_from_db()
        assert farmer_request.status == RequestStatus.PENDING

    def test_delete(self, technician_client, make_request):
        farmer_request = make_request()

        response = technician_client.delete(f"{BASE_URL}/requests/{farmer_request.pk}/")

        assert response.status_code == status.HTTP_200_OK
        assert not FarmerRequest.objects.exists()


class TestShortagesAndSubstitution:

    def test_request_shortage(self, admin_client, allocation, make_request):
        make_request(requested_urea_bags=Decimal('60'))
        second = make_request(farmer_name='Lopez, Ben', requested_urea_bags=Decimal('50'))

        response = admin_client.get(f"{BASE_URL}/requests/{second.pk}/shortage/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['has_allocation'] is True
        assert response.data['has_shortage'] is True
        assert response.data['shortage_types'] == ['urea_46_0_0']

    def test_season_shortages(self, admin_client, allocation, make_request):
        make_request(requested_urea_bags=Decimal('60'))
        make_request(farmer_name='Lopez, Ben', requested_urea_bags=Decimal('10'))

        response = admin_client.get(f"{BASE_URL}/shortages/wet_2025/")

        assert response.data['total_requests'] == 2
        assert response.data['requests_with_shortage'] == 0

    def test_alternatives(self, admin_client, allocation, make_request):
        farmer_request = make_request(requested_urea_bags=Decimal('130'))

        response = admin_client.get(f"{BASE_URL}/requests/{farmer_request.pk}/alternatives/")

        assert response.status_code == status.HTTP_200_OK
        suggestions = response.data['suggestions']
        assert suggestions['has_shortages'] is True
        assert suggestions['suggestions'][0]['original_fertilizer'] == 'urea_46_0_0'
        assert suggestions['suggestions'][0]['shortage_bags'] == Decimal('30')

    def test_apply_substitution(self, jo_client, make_request):
        farmer_request = make_request(requested_urea_bags=Decimal('10'))

        response = jo_client.post(f"{BASE_URL}/requests/{farmer_request.pk}/apply-substitution/", {
            'original_type': 'urea_46_0_0',
            'substitute_type': 'ammonium_sulfate_21_0_0',
            'shortage': '4',
            'needed': '8',
            'confidence': 0.75,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['request']['status'] == 'pending'
        assert response.data['request']['requested_urea_bags'] == '6.00'
        assert response.data['request']['requested_ammonium_sulfate_bags'] == '8.00'
        assert '(75% confidence). Full substitution.' in response.data['request']['request_notes']

    def test_apply_substitution_on_approved_request(self, jo_client, make_request):
        farmer_request = make_request(status=RequestStatus.APPROVED, requested_urea_bags=Decimal('10'))

        response = jo_client.post(f"{BASE_URL}/requests/{farmer_request.pk}/apply-substitution/", {
            'original_type': 'urea_46_0_0',
            'substitute_type': 'ammonium_sulfate_21_0_0',
            'shortage': '4',
            'needed': '8',
            'confidence': 0.75,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Cannot apply substitution to request with status: approved'

    def test_auto_fetch_is_queued(self, jo_client):
        with patch('distribution.views.auto_fetch_alternatives.delay') as delay:
            delay.return_value = MagicMock(id='task-123')

            response = jo_client.post(f"{BASE_URL}/alternatives/wet_2025/auto-fetch/")

        assert response.status_code == status.HTTP_202_ACCEPTED
        assert response.data['task_id'] == 'task-123'
        delay.assert_called_once_with('wet_2025')


class TestRecords:

    def test_manual_record_for_approved_request(self, technician_client, make_request):
        farmer_request = make_request(status=RequestStatus.APPROVED, requested_lp296_kg=Decimal('15'))

        response = technician_client.post(f"{BASE_URL}/records/", {
            'request': str(farmer_request.pk),
            'verified_by': 'Jose Dela Cruz',
            'farmer_signature': True,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['record']['seed_type'] == 'LP296:15'
        assert response.data['record']['seed_kg_given'] == '15.00'
        assert response.data['record']['farmer_signature'] is True

    def test_manual_record_for_pending_request(self, technician_client, make_request):
        farmer_request = make_request()

        response = technician_client.post(f"{BASE_URL}/records/", {'request': str(farmer_request.pk)}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_season_records(self, admin_client, jo_client, make_request):
        farmer_request = make_request()
        jo_client.post(f"{BASE_URL}/requests/{farmer_request.pk}/approve/")
        make_request(farmer_name='Dry Season', season='dry_2025', status=RequestStatus.APPROVED)

        response = admin_client.get(f"{BASE_URL}/records/season/wet_2025/")

        assert response.status_code == status.HTTP_200_OK
        assert [r['farmer_name'] for r in response.data] == ['Garcia, Juan']

    def test_update_record(self, jo_client, make_request):
        farmer_request = make_request()
        record_id = jo_client.post(f"{BASE_URL}/requests/{farmer_request.pk}/approve/").data['record']['id']

        response = jo_client.patch(f"{BASE_URL}/records/{record_id}/", {'voucher_code': 'V-77'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['record']['voucher_code'] == 'V-77'


class TestAnalysisEndpoints:

    def test_gap_analysis(self, admin_client, allocation, make_request):
        make_request(requested_urea_bags=Decimal('150'))

        response = admin_client.get(f"{BASE_URL}/gap-analysis/wet_2025/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['summary']['has_shortages'] is True

    def test_gap_analysis_without_allocation(self, admin_client):
        response = admin_client.get(f"{BASE_URL}/gap-analysis/dry_2030/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_barangay_shortages(self, admin_client, allocation, make_request):
        make_request(barangay='Paco', requested_urea_bags=Decimal('200'))

        response = admin_client.get(f"{BASE_URL}/barangay-shortages/wet_2025/")

        assert response.data[0]['barangay'] == 'Paco'
        assert response.data[0]['overall'] == 'CRITICAL'

    def test_historical_comparison(self, admin_client, allocation):
        response = admin_client.get(f"{BASE_URL}/historical-comparison/")

        assert response.status_code == status.HTTP_200_OK
        assert [h['season'] for h in response.data] == ['wet_2025']

    def test_recommendations(self, jo_client, allocation, make_request):
        make_request(requested_urea_bags=Decimal('150'))

        response = jo_client.get(f"{BASE_URL}/recommendations/wet_2025/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['summary']['overall_status'] == 'CRITICAL'
        assert response.data['recommendations'][0]['id'] == 'FERT_SHORTAGE_urea_46_0_0'
        assert 'generated_at' in response.data

    def test_recommendations_without_allocation(self, admin_client):
        response = admin_client.get(f"{BASE_URL}/recommendations/dry_2030/")

        assert response.status_code == status.HTTP_404_NOT_FOUND
