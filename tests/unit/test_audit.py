"""
Tests for audit trail helpers.
"""
from decimal import Decimal

import pytest
from django.db import DatabaseError
from rest_framework.test import APIRequestFactory

from audit.models import AuditLog, AuditAction, AuditModule
from audit.services import get_client_ip, log_audit, log_login


class TestClientIp:

    def test_forwarded_for_wins(self):
        request = APIRequestFactory().get('/', HTTP_X_FORWARDED_FOR='203.0.113.5, 10.0.0.1')
        assert get_client_ip(request) == '203.0.113.5'

    def test_remote_addr(self):
        request = APIRequestFactory().get('/', REMOTE_ADDR='192.0.2.10')
        assert get_client_ip(request) == '192.0.2.10'

    def test_no_request(self):
        assert get_client_ip(None) is None


@pytest.mark.django_db
class TestLogAudit:

    def test_system_entry(self):
        entry = log_audit(AuditAction.UPDATE, AuditModule.SYSTEM, 'Nightly cleanup')

        assert entry.user is None
        assert entry.user_name == 'SYSTEM'
        assert entry.user_role == 'system'

    def test_user_and_record(self, jo_user, make_request):
        farmer_request = make_request()

        entry = log_audit(
            AuditAction.APPROVE, AuditModule.DISTRIBUTION, 'Approved',
            user=jo_user, record=farmer_request,
            new_values={'seed_kg_given': Decimal('12.50')},
        )

        assert entry.user_name == 'maria.jo'
        assert entry.user_role == 'JO'
        assert entry.record_id == str(farmer_request.pk)
        assert entry.record_type == 'farmerrequest'
        assert entry.new_values == {'seed_kg_given': '12.50'}

    def test_failed_login_keeps_attempted_username(self):
        entry = log_login(None, 'ghost.jo', success=False)

        assert entry.action == AuditAction.LOGIN_FAILED
        assert entry.user_name == 'ghost.jo'
        assert entry.user_role == 'unknown'

    def test_database_error_is_not_raised(self, monkeypatch):
        def broken_create(**kwargs):
            raise DatabaseError('disk full')

        monkeypatch.setattr(AuditLog.objects, 'create', broken_create)

        assert log_audit(AuditAction.CREATE, AuditModule.SYSTEM, 'Lost entry') is None
