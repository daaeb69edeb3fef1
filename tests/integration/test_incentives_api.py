"""
API tests for incentive hand-out logs.
"""
from datetime import date, timedelta
from decimal import Decimal
import uuid

import pytest
from rest_framework import status

from incentives.models import IncentiveLog
from incentives.services import IncentiveService

pytestmark = pytest.mark.django_db

BASE_URL = '/api/incentives'


@pytest.fixture
def farmer(make_farmer):
    return make_farmer()


def log_payload(farmer, **overrides):
    payload = {
        'farmer_id': str(farmer.pk),
        'event_date': '2025-06-10',
        'incentive_type': 'Rice Seeds',
        'qty_requested': '10',
        'qty_received': '8',
        'is_signed': True,
        'note': 'Bacay covered court',
    }
    payload.update(overrides)
    return payload


class TestCreateLog:

    def test_field_staff_records_log(self, technician_client, farmer):
        response = technician_client.post(f"{BASE_URL}/logs/", log_payload(farmer), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Distribution recorded with shortage of 2.00 units'
        assert response.data['log']['shortage'] == '2.00'
        assert response.data['log']['farmer_name'] == 'Garcia, Juan'
        assert response.data['log']['encoder_name'] == 'Jose Dela Cruz'

    def test_fully_fulfilled_message(self, jo_client, farmer):
        response = jo_client.post(f"{BASE_URL}/logs/", log_payload(farmer, qty_received='10'), format='json')

        assert response.data['message'] == 'Distribution recorded successfully - fully fulfilled'

    def test_admin_is_read_only(self, admin_client, farmer):
        response = admin_client.post(f"{BASE_URL}/logs/", log_payload(farmer), format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unsigned_rejected(self, jo_client, farmer):
        response = jo_client.post(f"{BASE_URL}/logs/", log_payload(farmer, is_signed=False), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'signature' in response.data['error']
        assert not IncentiveLog.objects.exists()

    def test_unknown_farmer(self, jo_client, farmer):
        payload = log_payload(farmer, farmer_id=str(uuid.uuid4()))

        response = jo_client.post(f"{BASE_URL}/logs/", payload, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize('field,value', [
        ('event_date', (date.today() + timedelta(days=2)).isoformat()),
        ('qty_requested', '0'),
        ('qty_received', '-1'),
        ('incentive_type', 'x' * 101),
        ('note', 'x' * 1001),
    ])
    def test_field_validation(self, jo_client, farmer, field, value):
        response = jo_client.post(f"{BASE_URL}/logs/", log_payload(farmer, **{field: value}), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data

    def test_received_over_requested(self, jo_client, farmer):
        response = jo_client.post(f"{BASE_URL}/logs/", log_payload(farmer, qty_received='11'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Quantity received cannot exceed quantity requested'


class TestLogQueries:

    @pytest.fixture
    def logs(self, jo_user, farmer, make_farmer):
        other = make_farmer(last_name='Reyes', first_name='Ana', barangay='Tiring')
        service = IncentiveService(user=jo_user)
        for logged_farmer, event_date, incentive_type, requested, received in (
            (farmer, date(2025, 6, 10), 'Rice Seeds', '10', '8'),
            (farmer, date(2025, 8, 1), 'Fertilizer', '10', '0'),
            (other, date(2025, 6, 10), 'Rice Seeds', '5', '5'),
        ):
            service.create_log(
                farmer_id=logged_farmer.pk, event_date=event_date, incentive_type=incentive_type,
                qty_requested=Decimal(requested), qty_received=Decimal(received), is_signed=True,
            )
        return farmer

    def test_farmer_logs_newest_first(self, jo_client, logs):
        response = jo_client.get(f"{BASE_URL}/farmer/{logs.pk}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data['farmer_name'] == 'Garcia, Juan'
        assert response.data['total_distributions'] == 2
        assert [entry['incentive_type'] for entry in response.data['logs']] == ['Fertilizer', 'Rice Seeds']

    def test_farmer_logs_filtered(self, jo_client, logs):
        response = jo_client.get(f"{BASE_URL}/farmer/{logs.pk}/", {'incentive_type': 'rice seeds'})

        assert response.data['total_distributions'] == 1

        response = jo_client.get(f"{BASE_URL}/farmer/{logs.pk}/", {'start_date': '2025-07-01'})
        assert [entry['incentive_type'] for entry in response.data['logs']] == ['Fertilizer']

    def test_farmer_logs_bad_date(self, jo_client, logs):
        response = jo_client.get(f"{BASE_URL}/farmer/{logs.pk}/", {'start_date': 'last-july'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_farmer_logs(self, jo_client):
        response = jo_client.get(f"{BASE_URL}/farmer/{uuid.uuid4()}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list(self, admin_client, logs):
        response = admin_client.get(f"{BASE_URL}/logs/", {'search': 'Reyes'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_report(self, admin_client, logs):
        response = admin_client.get(f"{BASE_URL}/report/", {'end_date': '2025-07-31'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['period'] == {'start_date': None, 'end_date': date(2025, 7, 31)}
        summary = response.data['summary']
        assert summary['total'] == 2
        assert summary['fully_fulfilled'] == 1
        assert summary['partially'] == 1
        assert summary['top_shortage'] == 'Rice Seeds (-13.33%)'
        assert summary['incentive_breakdown'][0]['total_requested'] == Decimal('15')

    def test_anonymous_rejected(self, api_client):
        response = api_client.get(f"{BASE_URL}/report/")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
