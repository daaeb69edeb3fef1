"""
Distribution record values derived from a request.
"""

from decimal import Decimal, ROUND_HALF_UP

from ..catalog import FERTILIZER_TYPES, SEED_TYPES


def format_quantity(value):
    """2 -> '2', 2.50 -> '2.5'"""
    value = Decimal(value)
    if value == value.to_integral_value():
        return str(int(value))
    return f"{value.normalize():f}"


def _breakdown(request, stock_types):
    parts = []
    for t in stock_types:
        quantity = request.requested_quantity(t['id'])
        if quantity:
            parts.append(f"{t['short_label']}:{format_quantity(quantity)}")
    return ', '.join(parts)


def fertilizer_breakdown(request):
    """e.g. 'Urea:2, Complete:1'"""
    return _breakdown(request, FERTILIZER_TYPES)


def seed_breakdown(request):
    """e.g. 'Jackpot:20, Lumping143:5.5'"""
    return _breakdown(request, SEED_TYPES)


def fertilizer_bags_total(request):
    total = sum((request.requested_quantity(t['id']) for t in FERTILIZER_TYPES), Decimal('0'))
    return int(total.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def seed_kg_total(request):
    total = sum((request.requested_quantity(t['id']) for t in SEED_TYPES), Decimal('0'))
    return total.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def record_values_for(request):
    """Field values for the record created when `request` is approved."""
    return {
        'fertilizer_type': fertilizer_breakdown(request),
        'fertilizer_bags_given': fertilizer_bags_total(request),
        'seed_type': seed_breakdown(request),
        'seed_kg_given': seed_kg_total(request),
        'farmer_signature': False,
        'claimed': True,
    }
