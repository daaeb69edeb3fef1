"""
Season Recommendations

Turns a season's gap analysis and its farmer requests into prioritized,
actionable recommendations:
- SHORTAGE for every fertilizer or seed crop requested beyond its allocation
- OPPORTUNITY for fertilizers left largely unused
- EQUITY_ALERT for barangays served well below the municipal average

Recommendations are ordered CRITICAL, HIGH, MEDIUM, LOW; ties keep the
order above.
"""

from decimal import Decimal

from django.utils import timezone

from ..catalog import FERTILIZER_TYPES, RICE_SEED_TYPES, CORN_SEED_TYPES
from ..models import RequestStatus
from .records import format_quantity

PRIORITY_SCORES = {'CRITICAL': 4, 'HIGH': 3, 'MEDIUM': 2, 'LOW': 1}

# Shortage percentage above which a shortage is CRITICAL / HIGH
FERTILIZER_PRIORITY_LIMITS = (30, 15)
SEED_PRIORITY_LIMITS = (25, 10)

# Surplus share of the allocation worth acting on
SURPLUS_PERCENT_THRESHOLD = 20

# Barangays this many points below the average approval rate are flagged
EQUITY_GAP_POINTS = 20

# Shortfall in bags that makes an emergency allocation urgent
URGENT_SHORTFALL_BAGS = 100

# Indicative price per bag in pesos, for surplus valuation
PRICE_PER_BAG = {
    'urea_46_0_0': 1200,
    'complete_14_14_14': 1800,
    'ammonium_sulfate_21_0_0': 900,
    'muriate_potash_0_0_60': 2000,
}
DEFAULT_PRICE_PER_BAG = 1000

SEED_CROPS = {
    'rice_seeds': ('Rice', RICE_SEED_TYPES),
    'corn_seeds': ('Corn', CORN_SEED_TYPES),
}

SERVED_STATUSES = (RequestStatus.APPROVED, RequestStatus.DISTRIBUTED)


def _percent(part, whole):
    return float(part / whole * 100)


def _priority(percent, limits):
    critical, high = limits
    if percent > critical:
        return 'CRITICAL'
    if percent > high:
        return 'HIGH'
    return 'MEDIUM'


def affected_farmers(requests, fields):
    """Pending requests asking for any of `fields`."""
    return sum(
        1 for r in requests
        if r['status'] == RequestStatus.PENDING and any(r[field] > 0 for field in fields)
    )


def estimate_surplus_value(type_id, bags):
    value = Decimal(bags) * PRICE_PER_BAG.get(type_id, DEFAULT_PRICE_PER_BAG)
    return f"₱{value:,.0f}"


def fertilizer_shortage_actions(data, affected):
    shortfall = abs(data['gap'])
    coverage = min(100, float(data['allocated'] / data['requested'] * 100))
    return [
        {
            'action': 'Use alternative fertilizers',
            'rationale': 'Agronomically equivalent substitutes can fulfill remaining demand',
            'implementation': 'Fetch alternatives for each affected request and apply a substitution',
            'expected_outcome': 'Satisfy most affected farmers with suitable alternatives',
            'confidence': 'high',
        },
        {
            'action': 'Prioritize small farmers',
            'rationale': 'Ensure equity by serving the smallest farms first',
            'implementation': 'Review pending requests by farm area, smallest first',
            'affected_farmers': affected,
            'expected_coverage': f"{coverage:.0f}%",
        },
        {
            'action': 'Request emergency allocation from the Regional Office',
            'rationale': 'The shortage requires additional supply',
            'needed_amount': shortfall,
            'estimated_delivery': '2-3 weeks',
            'contact': 'Regional Agricultural Office',
            'urgency': 'URGENT' if shortfall > URGENT_SHORTFALL_BAGS else 'STANDARD',
        },
        {
            'action': 'Inform farmers who cannot be served this season',
            'rationale': 'Transparent process for requests beyond the allocation',
            'implementation': 'Reject remaining requests with a reason once stock runs out',
            'communication_required': True,
        },
    ]


def seed_shortage_actions(data):
    shortfall = abs(data['gap'])
    return [
        {
            'action': 'Coordinate with PhilRice and accredited seed growers',
            'rationale': 'Emergency procurement from certified sources',
            'needed_amount': f"{format_quantity(shortfall)} kg",
            'estimated_timeline': '3-4 weeks',
        },
        {
            'action': 'Allow farmer-saved seeds as a temporary measure',
            'rationale': 'Bridge the gap until certified seeds arrive',
            'quality_check': 'Verify seed quality and germination rate',
            'limitation': 'Only for immediate planting needs',
        },
        {
            'action': 'Reduce allocation per farmer proportionally',
            'rationale': 'Every farmer gets some seeds rather than some getting none',
            'implementation': f"Reduce each allocation by {_percent(shortfall, data['requested']):.1f}%",
        },
    ]


def fertilizer_shortages(gap_data, requests):
    recommendations = []
    for stock_type in FERTILIZER_TYPES:
        data = gap_data['fertilizers'][stock_type['id']]
        if data['gap'] >= 0:
            continue

        percent = _percent(abs(data['gap']), data['requested'])
        affected = affected_farmers(requests, [stock_type['request_field']])
        recommendations.append({
            'id': f"FERT_SHORTAGE_{stock_type['id']}",
            'type': 'SHORTAGE',
            'category': 'fertilizer',
            'priority': _priority(percent, FERTILIZER_PRIORITY_LIMITS),
            'item': stock_type['label'],
            'item_code': stock_type['id'],
            'shortage_amount': abs(data['gap']),
            'shortage_percent': round(percent, 1),
            'affected_farmers': affected,
            'title': f"{stock_type['label']} Shortage",
            'description': f"Current stock is {format_quantity(abs(data['gap']))} bags short ({percent:.1f}% shortage)",
            'actions': fertilizer_shortage_actions(data, affected),
        })
    return recommendations


def seed_shortages(gap_data, requests):
    recommendations = []
    for code, (crop, types) in SEED_CROPS.items():
        data = gap_data['seeds'][code]
        if data['gap'] >= 0:
            continue

        percent = _percent(abs(data['gap']), data['requested'])
        recommendations.append({
            'id': f"SEED_SHORTAGE_{code}",
            'type': 'SHORTAGE',
            'category': 'seed',
            'priority': _priority(percent, SEED_PRIORITY_LIMITS),
            'item': f"{crop} Seeds",
            'item_code': code,
            'shortage_amount': abs(data['gap']),
            'shortage_percent': round(percent, 1),
            'affected_farmers': affected_farmers(requests, [t['request_field'] for t in types]),
            'title': f"{crop} Seed Shortage",
            'description': f"Current stock is {format_quantity(abs(data['gap']))} kg short ({percent:.1f}% shortage)",
            'actions': seed_shortage_actions(data),
        })
    return recommendations


def fertilizer_surpluses(gap_data):
    recommendations = []
    for stock_type in FERTILIZER_TYPES:
        data = gap_data['fertilizers'][stock_type['id']]
        if data['gap'] <= 0 or data['requested'] <= 0:
            continue

        percent = _percent(data['gap'], data['allocated'])
        if percent <= SURPLUS_PERCENT_THRESHOLD:
            continue

        recommendations.append({
            'id': f"SURPLUS_{stock_type['id']}",
            'type': 'OPPORTUNITY',
            'category': 'fertilizer',
            'priority': 'LOW',
            'item': stock_type['label'],
            'item_code': stock_type['id'],
            'surplus_amount': data['gap'],
            'surplus_percent': round(percent, 1),
            'title': f"{stock_type['label']} Surplus Available",
            'description': f"{format_quantity(data['gap'])} bags remain unused ({percent:.1f}% surplus)",
            'actions': [
                {
                    'action': 'Promote to farmers who may benefit',
                    'rationale': "Offer to farmers who didn't initially request",
                    'steps': [
                        'Identify farmers growing compatible crops',
                        'Send notification about availability',
                    ],
                },
                {
                    'action': 'Coordinate with neighboring municipalities',
                    'rationale': 'Surplus can be transferred to other LGUs',
                    'estimated_value': estimate_surplus_value(stock_type['id'], data['gap']),
                },
                {
                    'action': 'Reserve for next season',
                    'rationale': 'Store properly for future use',
                    'storage_requirements': 'Cool, dry place; shelf life: 12 months',
                },
            ],
        })
    return recommendations


def equity_alerts(requests):
    """Barangays whose approval rate trails the average by EQUITY_GAP_POINTS."""
    barangays = {}
    for r in requests:
        stats = barangays.setdefault(r['barangay'], {'total': 0, 'approved': 0, 'pending': 0, 'rejected': 0})
        stats['total'] += 1
        if r['status'] in SERVED_STATUSES:
            stats['approved'] += 1
        elif r['status'] == RequestStatus.PENDING:
            stats['pending'] += 1
        elif r['status'] == RequestStatus.REJECTED:
            stats['rejected'] += 1

    if not barangays:
        return []

    rates = {name: stats['approved'] / stats['total'] * 100 for name, stats in barangays.items()}
    average = sum(rates.values()) / len(rates)

    recommendations = []
    for name, stats in barangays.items():
        rate = rates[name]
        if rate >= average - EQUITY_GAP_POINTS:
            continue

        recommendations.append({
            'id': f"EQUITY_{'_'.join(name.split())}",
            'type': 'EQUITY_ALERT',
            'category': 'equity',
            'priority': 'HIGH',
            'item': name,
            'title': f"Low Approval Rate in {name}",
            'description': (
                f"Only {rate:.1f}% approved (avg: {average:.1f}%). "
                f"This may indicate inequitable distribution."
            ),
            'stats': stats,
            'actions': [
                {
                    'action': 'Review how requests from this barangay are assessed',
                    'rationale': 'Ensure criteria are being applied fairly',
                },
                {
                    'action': 'Prioritize pending requests from this area',
                    'rationale': 'Balance distribution across all barangays',
                    'affected_count': stats['total'] - stats['approved'],
                },
                {
                    'action': 'Request additional allocation for underserved areas',
                    'rationale': 'Address geographic equity concerns',
                },
            ],
        })
    return recommendations


def summarize(recommendations):
    def count(key, value):
        return sum(1 for r in recommendations if r[key] == value)

    critical = count('priority', 'CRITICAL')
    high = count('priority', 'HIGH')
    if critical:
        status = 'CRITICAL'
    elif high:
        status = 'ATTENTION_NEEDED'
    else:
        status = 'STABLE'

    return {
        'total_recommendations': len(recommendations),
        'critical_issues': critical,
        'high_priority_issues': high,
        'shortages': count('type', 'SHORTAGE'),
        'opportunities': count('type', 'OPPORTUNITY'),
        'equity_issues': count('type', 'EQUITY_ALERT'),
        'overall_status': status,
    }


def build_recommendations(gap_data, requests):
    """
    Args:
        gap_data: result of DistributionAnalysisService.gap_analysis
        requests: the season's requests as dicts with barangay, status and
            the requested quantity fields

    Returns:
        dict with summary, recommendations and generated_at
    """
    recommendations = (
        fertilizer_shortages(gap_data, requests)
        + seed_shortages(gap_data, requests)
        + fertilizer_surpluses(gap_data)
        + equity_alerts(requests)
    )
    recommendations.sort(key=lambda r: PRIORITY_SCORES[r['priority']], reverse=True)

    return {
        'summary': summarize(recommendations),
        'recommendations': recommendations,
        'generated_at': timezone.now(),
    }
