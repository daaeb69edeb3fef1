"""
Tests for allocation vs request analysis.
"""
from datetime import date
from decimal import Decimal

import pytest

from distribution.models import RegionalAllocation, RequestStatus
from distribution.services import DistributionAnalysisService
from distribution.services.analysis import gap_status, overall_status

pytestmark = pytest.mark.django_db


@pytest.fixture
def season_requests(allocation, make_request):
    make_request(
        farmer_name='Reyes, Ana', barangay='Bacay', farm_area_ha=Decimal('1.5'),
        requested_urea_bags=Decimal('60'), requested_jackpot_kg=Decimal('50'),
    )
    make_request(
        farmer_name='Lopez, Ben', barangay='Tiring', farm_area_ha=Decimal('2'),
        requested_urea_bags=Decimal('120'), requested_complete_14_bags=Decimal('10'),
        requested_rh9000_kg=Decimal('120'),
    )
    make_request(
        farmer_name='Cruz, Carlo', barangay='Bacay', status=RequestStatus.REJECTED,
        requested_urea_bags=Decimal('10'),
    )


class TestGapStatus:

    @pytest.mark.parametrize('gap,expected', [
        (10, 'good'),
        (0, 'good'),
        (-1, 'moderate'),
        (-50, 'moderate'),
        (-51, 'critical'),
    ])
    def test_fertilizer_threshold(self, gap, expected):
        assert gap_status(gap, 50) == expected

    def test_overall(self):
        assert overall_status(['good', 'critical', 'moderate']) == 'CRITICAL'
        assert overall_status(['good', 'moderate']) == 'MODERATE'
        assert overall_status(['good', 'good']) == 'GOOD'


class TestGapAnalysis:

    def test_per_fertilizer_and_crop(self, season_requests):
        result = DistributionAnalysisService().gap_analysis('wet_2025')

        assert result['season_label'] == 'Wet 2025'
        assert result['total_requests'] == 3

        urea = result['fertilizers']['urea_46_0_0']
        assert urea['requested'] == Decimal('190')
        assert urea['allocated'] == Decimal('100')
        assert urea['gap'] == Decimal('-90')
        assert urea['percentage'] == 52.6

        sulfate = result['fertilizers']['ammonium_sulfate_21_0_0']
        assert sulfate['requested'] == Decimal('0')
        assert sulfate['percentage'] is None

        assert result['seeds']['rice_seeds']['gap'] == Decimal('150')
        assert result['seeds']['corn_seeds']['gap'] == Decimal('-20')
        assert result['seeds']['corn_seeds']['percentage'] == 83.3

        assert result['summary'] == {'has_shortages': True, 'prioritization_needed': True}

    def test_no_shortage(self, allocation, make_request):
        make_request(requested_urea_bags=Decimal('10'))

        result = DistributionAnalysisService().gap_analysis('wet_2025')

        assert result['summary'] == {'has_shortages': False, 'prioritization_needed': False}

    def test_missing_allocation(self):
        with pytest.raises(RegionalAllocation.DoesNotExist):
            DistributionAnalysisService().gap_analysis('dry_2030')


class TestBarangayShortages:

    def test_equal_share_per_barangay(self, season_requests):
        rows = DistributionAnalysisService().barangay_shortages('wet_2025')

        assert [r['barangay'] for r in rows] == ['Tiring', 'Bacay']

        tiring, bacay = rows
        assert tiring['urea'] == 'critical'
        assert tiring['urea_gap'] == -70
        assert tiring['seeds'] == 'good'
        assert tiring['overall'] == 'CRITICAL'

        assert bacay['farmer_count'] == 2
        assert bacay['urea'] == 'moderate'
        assert bacay['urea_gap'] == -20
        assert bacay['complete'] == 'good'
        assert bacay['overall'] == 'MODERATE'


class TestHistoricalComparison:

    def test_oldest_first_with_current_flag(self, season_requests):
        RegionalAllocation.objects.create(allocation_date=date(2025, 12, 1), urea_46_0_0_bags=Decimal('10'))

        history = DistributionAnalysisService().historical_comparison(today=date(2025, 12, 5))

        assert [h['season'] for h in history] == ['wet_2025', 'dry_2025']

        wet, dry = history
        assert wet['allocated'] == Decimal('180')
        assert wet['requested'] == Decimal('200')
        assert wet['gap'] == Decimal('-20')
        assert wet['fulfilled'] == 90
        assert wet['is_current'] is False

        assert dry['requested'] == Decimal('0')
        assert dry['fulfilled'] == 100
        assert dry['is_current'] is True

    def test_limited_to_recent_seasons(self):
        for year in range(2016, 2026):
            RegionalAllocation.objects.create(allocation_date=date(year, 6, 1))

        history = DistributionAnalysisService().historical_comparison(today=date(2025, 6, 2))

        assert len(history) == 8
        assert history[0]['season'] == 'wet_2018'
        assert history[-1]['season'] == 'wet_2025'


class TestRecommendations:

    def test_shortages_and_surplus_by_priority(self, season_requests):
        result = DistributionAnalysisService().recommendations('wet_2025')

        assert result['season_label'] == 'Wet 2025'
        assert [r['id'] for r in result['recommendations']] == [
            'FERT_SHORTAGE_urea_46_0_0',
            'SEED_SHORTAGE_corn_seeds',
            'SURPLUS_complete_14_14_14',
        ]

        urea, corn, complete = result['recommendations']
        assert urea['priority'] == 'CRITICAL'
        assert urea['shortage_amount'] == Decimal('90')
        assert urea['shortage_percent'] == 47.4
        assert urea['affected_farmers'] == 2
        assert urea['description'] == 'Current stock is 90 bags short (47.4% shortage)'
        emergency = urea['actions'][2]
        assert emergency['needed_amount'] == Decimal('90')
        assert emergency['urgency'] == 'STANDARD'
        assert urea['actions'][1]['expected_coverage'] == '53%'

        assert corn['priority'] == 'HIGH'
        assert corn['item'] == 'Corn Seeds'
        assert corn['affected_farmers'] == 1
        assert corn['actions'][2]['implementation'] == 'Reduce each allocation by 16.7%'

        assert complete['type'] == 'OPPORTUNITY'
        assert complete['priority'] == 'LOW'
        assert complete['surplus_percent'] == 87.5
        assert complete['actions'][1]['estimated_value'] == '₱126,000'

        assert result['summary'] == {
            'total_recommendations': 3,
            'critical_issues': 1,
            'high_priority_issues': 1,
            'shortages': 2,
            'opportunities': 1,
            'equity_issues': 0,
            'overall_status': 'CRITICAL',
        }

    def test_large_shortfall_is_urgent(self, allocation, make_request):
        make_request(requested_urea_bags=Decimal('230'))

        urea = DistributionAnalysisService().recommendations('wet_2025')['recommendations'][0]

        assert urea['actions'][2]['urgency'] == 'URGENT'

    def test_small_surplus_ignored(self, allocation, make_request):
        make_request(requested_complete_14_bags=Decimal('70'))

        result = DistributionAnalysisService().recommendations('wet_2025')

        assert result['recommendations'] == []
        assert result['summary']['overall_status'] == 'STABLE'

    def test_equity_alert_for_underserved_barangay(self, allocation, make_request):
        for barangay in ('Bacay', 'Tiring'):
            make_request(barangay=barangay, status=RequestStatus.APPROVED)
            make_request(farmer_name='Lopez, Ben', barangay=barangay, status=RequestStatus.DISTRIBUTED)
        make_request(barangay='San Jose')
        make_request(farmer_name='Lopez, Ben', barangay='San Jose', status=RequestStatus.REJECTED)

        result = DistributionAnalysisService().recommendations('wet_2025')

        [alert] = result['recommendations']
        assert alert['id'] == 'EQUITY_San_Jose'
        assert alert['priority'] == 'HIGH'
        assert alert['description'].startswith('Only 0.0% approved (avg: 66.7%)')
        assert alert['stats'] == {'total': 2, 'approved': 0, 'pending': 1, 'rejected': 1}
        assert alert['actions'][1]['affected_count'] == 2
        assert result['summary']['overall_status'] == 'ATTENTION_NEEDED'

    def test_missing_allocation(self):
        with pytest.raises(RegionalAllocation.DoesNotExist):
            DistributionAnalysisService().recommendations('dry_2030')
