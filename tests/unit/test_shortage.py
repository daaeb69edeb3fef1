"""
Tests for season stock shortage detection.

Built on unsaved model instances; the ledger only reads quantities.
"""
from datetime import date
from decimal import Decimal

import pytest

from distribution.models import RegionalAllocation, FarmerRequest, RequestStatus
from distribution.services.shortage import SeasonStockLedger


def season_stock(**quantities):
    return RegionalAllocation(
        allocation_date=date(2025, 6, 1),
        season='wet_2025',
        **{k: Decimal(v) for k, v in quantities.items()}
    )


def farmer_request(name, status=RequestStatus.PENDING, **quantities):
    return FarmerRequest(
        season='wet_2025',
        farmer_name=name,
        barangay='Bacay',
        status=status,
        **{k: Decimal(v) for k, v in quantities.items()}
    )


def item(result, type_id):
    return next(i for i in result['items'] if i['type'] == type_id)


class TestShortageCheck:

    def test_both_requests_short_when_combined_demand_exceeds_stock(self):
        first = farmer_request('Reyes, Ana', requested_urea_bags='60')
        second = farmer_request('Lopez, Ben', requested_urea_bags='50')
        ledger = SeasonStockLedger('wet_2025', season_stock(urea_46_0_0_bags='100'), [first, second])

        first_check = ledger.check(first)
        second_check = ledger.check(second)

        assert first_check['has_shortage'] is True
        assert first_check['shortage_types'] == ['urea_46_0_0']
        assert item(first_check, 'urea_46_0_0')['remaining'] == Decimal('50')

        assert second_check['has_shortage'] is True
        assert item(second_check, 'urea_46_0_0')['remaining'] == Decimal('40')
        assert item(second_check, 'urea_46_0_0')['reserved_by_others'] == Decimal('60')

    def test_request_equal_to_remaining_is_not_short(self):
        first = farmer_request('Reyes, Ana', requested_urea_bags='60')
        second = farmer_request('Lopez, Ben', requested_urea_bags='40')
        ledger = SeasonStockLedger('wet_2025', season_stock(urea_46_0_0_bags='100'), [first, second])

        assert ledger.check(first)['has_shortage'] is False
        assert ledger.check(second)['has_shortage'] is False

    def test_adding_a_request_never_clears_a_shortage(self):
        first = farmer_request('Reyes, Ana', requested_jackpot_kg='30')
        second = farmer_request('Lopez, Ben', requested_jackpot_kg='25')
        stock = season_stock(jackpot_kg='50')

        before = SeasonStockLedger('wet_2025', stock, [first, second])
        assert before.check(first)['has_shortage'] is True

        third = farmer_request('Cruz, Carlo', requested_jackpot_kg='5')
        after = SeasonStockLedger('wet_2025', stock, [first, second, third])
        assert after.check(first)['has_shortage'] is True
        assert after.check(second)['has_shortage'] is True

    def test_approved_requests_reserve_stock(self):
        approved = farmer_request('Reyes, Ana', status=RequestStatus.APPROVED, requested_urea_bags='80')
        pending = farmer_request('Lopez, Ben', requested_urea_bags='30')
        ledger = SeasonStockLedger('wet_2025', season_stock(urea_46_0_0_bags='100'), [approved, pending])

        assert ledger.check(pending)['has_shortage'] is True

    @pytest.mark.parametrize('status', [RequestStatus.REJECTED, RequestStatus.DISTRIBUTED])
    def test_closed_requests_do_not_reserve_stock(self, status):
        closed = farmer_request('Reyes, Ana', status=status, requested_urea_bags='80')
        pending = farmer_request('Lopez, Ben', requested_urea_bags='30')
        ledger = SeasonStockLedger('wet_2025', season_stock(urea_46_0_0_bags='100'), [closed, pending])

        assert ledger.check(pending)['has_shortage'] is False
        assert ledger.reserved['urea_46_0_0'] == Decimal('30')

    def test_without_allocation_any_request_is_short(self):
        asking = farmer_request('Reyes, Ana', requested_complete_14_bags='1')
        empty = farmer_request('Lopez, Ben')
        ledger = SeasonStockLedger('wet_2025', None, [asking, empty])

        assert ledger.has_allocation is False
        assert ledger.check(asking)['shortage_types'] == ['complete_14_14_14']
        assert ledger.check(empty)['has_shortage'] is False

    def test_untracked_types_are_not_checked(self):
        request = farmer_request('Reyes, Ana', requested_complete_16_bags='10')
        ledger = SeasonStockLedger('wet_2025', season_stock(), [request])

        result = ledger.check(request)
        assert result['has_shortage'] is False
        assert len(result['items']) == 10
        assert 'complete_16_16_16' not in [i['type'] for i in result['items']]

    def test_shortage_on_several_types(self):
        request = farmer_request(
            'Reyes, Ana', requested_urea_bags='5', requested_rh9000_kg='20', requested_us88_kg='1'
        )
        ledger = SeasonStockLedger(
            'wet_2025', season_stock(urea_46_0_0_bags='4', rh9000_kg='10', us88_kg='1'), [request]
        )

        assert ledger.check(request)['shortage_types'] == ['urea_46_0_0', 'rh9000']


class TestLedgerTotals:

    def test_remaining_stock_subtracts_reservations(self):
        requests = [
            farmer_request('Reyes, Ana', requested_urea_bags='60', requested_complete_16_bags='3'),
            farmer_request('Lopez, Ben', requested_urea_bags='50'),
            farmer_request('Cruz, Carlo', status=RequestStatus.REJECTED, requested_urea_bags='10'),
        ]
        ledger = SeasonStockLedger(
            'wet_2025', season_stock(urea_46_0_0_bags='100', complete_16_16_16_bags='5'), requests
        )

        remaining = ledger.remaining_stock()
        assert remaining['urea_46_0_0'] == Decimal('-10')
        assert remaining['complete_16_16_16'] == Decimal('2')

    def test_available_for_excludes_own_request(self):
        first = farmer_request('Reyes, Ana', requested_urea_bags='60')
        second = farmer_request('Lopez, Ben', requested_urea_bags='50')
        ledger = SeasonStockLedger('wet_2025', season_stock(urea_46_0_0_bags='100'), [first, second])

        assert ledger.available_for(first)['urea_46_0_0'] == Decimal('50')
        assert ledger.available_for(second)['urea_46_0_0'] == Decimal('40')

    def test_summary(self):
        first = farmer_request('Reyes, Ana', requested_urea_bags='60')
        second = farmer_request('Lopez, Ben', requested_urea_bags='10')
        ledger = SeasonStockLedger('wet_2025', season_stock(urea_46_0_0_bags='100'), [first, second])

        summary = ledger.summary()
        assert summary['season'] == 'wet_2025'
        assert summary['has_allocation'] is True
        assert summary['total_requests'] == 2
        assert summary['requests_with_shortage'] == 0
        assert summary['remaining_stock']['urea_46_0_0'] == Decimal('30')


@pytest.mark.django_db
class TestLedgerFromDatabase:

    def test_for_season_loads_only_that_season(self, allocation, make_request):
        make_request(requested_urea_bags=Decimal('90'))
        make_request(farmer_name='Lopez, Ben', requested_urea_bags=Decimal('20'))
        make_request(farmer_name='Other Season', season='dry_2025', requested_urea_bags=Decimal('500'))

        ledger = SeasonStockLedger.for_season('wet_2025')

        assert ledger.has_allocation is True
        assert len(ledger.requests) == 2
        assert ledger.reserved['urea_46_0_0'] == Decimal('110')
        assert ledger.summary()['requests_with_shortage'] == 2
