"""
Substitution Suggestions

When a request is short on a fertilizer or seed, a suggestion provider may
propose other stock to cover the shortage. The matching and scoring rules
belong to the provider; the office ships with `NullSuggestionProvider`,
which proposes nothing. Set SUBSTITUTION_PROVIDER to the dotted path of
another provider class to plug one in.

Provider contract:
    suggest(original_type, shortage_amount, category, remaining_stock)
    -> list of {
        substitute_id, substitute_name, needed_bags, available_bags,
        confidence_score (0-1), can_fulfill, partial_coverage, remaining_shortage
    }

Applying a substitution rewrites the request's quantities and appends a
timestamped note; the request stays pending for review.
"""

from decimal import Decimal
import logging
import uuid

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone
from django.utils.module_loading import import_string

from audit.models import AuditAction, AuditModule
from audit.services import log_audit
from ..catalog import (
    STOCK_TYPES_BY_ID,
    SUBSTITUTION_ORIGINAL_FIELDS,
    SUBSTITUTION_SUBSTITUTE_FIELDS,
)
from ..models import FarmerRequest, RequestStatus
from .records import format_quantity
from .shortage import SeasonStockLedger

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = 'distribution:suggestions'


class SuggestionProvider:
    """Base class for substitution suggestion providers."""

    def suggest(self, original_type, shortage_amount, category, remaining_stock):
        raise NotImplementedError


class NullSuggestionProvider(SuggestionProvider):
    """Proposes no alternatives."""

    def suggest(self, original_type, shortage_amount, category, remaining_stock):
        return []


_providers = {}


def get_provider():
    """Provider instance configured by SUBSTITUTION_PROVIDER."""
    path = settings.SUBSTITUTION_PROVIDER
    if path not in _providers:
        _providers[path] = import_string(path)()
    return _providers[path]


# =============================================================================
# CACHE
# =============================================================================

# Suggestions depend on every reserving request of the season, so each
# entry is keyed on a per-season stamp. Replacing the stamp drops the
# whole season at once.

def season_stamp_key(season):
    return f"{CACHE_KEY_PREFIX}:stamp:{season}"


def season_stamp(season):
    key = season_stamp_key(season)
    stamp = cache.get(key)
    if stamp is None:
        cache.add(key, uuid.uuid4().hex, timeout=None)
        stamp = cache.get(key)
    return stamp


def suggestion_cache_key(farmer_request):
    season = farmer_request.season
    return f"{CACHE_KEY_PREFIX}:{season}:{season_stamp(season)}:{farmer_request.pk}"


def get_cached_suggestions(farmer_request):
    return cache.get(suggestion_cache_key(farmer_request))


def clear_season_suggestions(*seasons):
    """Invalidate cached suggestions of every request in the given seasons."""
    for season in set(filter(None, seasons)):
        cache.set(season_stamp_key(season), uuid.uuid4().hex, timeout=None)
        logger.debug(f"Cleared cached suggestions for {season}")


# =============================================================================
# SUGGESTIONS
# =============================================================================

def suggest_for_request(farmer_request, ledger=None, use_cache=True):
    """
    Shortages of one request with the provider's alternatives for each.

    Args:
        farmer_request: FarmerRequest instance
        ledger: SeasonStockLedger already built for the request's season
        use_cache: Return a cached result when one exists

    Returns:
        dict with request_id, farmer_name, season, remaining_stock and
        suggestions {has_shortages, suggestions: [...]}
    """
    if use_cache:
        cached = get_cached_suggestions(farmer_request)
        if cached is not None:
            return cached

    if ledger is None:
        ledger = SeasonStockLedger.for_season(farmer_request.season)

    check = ledger.check(farmer_request)
    available = ledger.available_for(farmer_request)
    provider = get_provider()

    suggestions = []
    for item in check['items']:
        if not item['shortage']:
            continue

        available_amount = max(item['remaining'], Decimal('0'))
        shortage_amount = item['requested'] - available_amount
        alternatives = list(provider.suggest(
            item['type'], shortage_amount, item['category'], available
        ))

        suggestions.append({
            'category': item['category'],
            'original_fertilizer': item['type'],
            'original_fertilizer_name': item['label'],
            'requested_bags': item['requested'],
            'available_bags': available_amount,
            'shortage_bags': shortage_amount,
            'alternatives': alternatives,
        })

    result = {
        'request_id': str(farmer_request.pk),
        'farmer_name': farmer_request.farmer_name,
        'season': farmer_request.season,
        'remaining_stock': available,
        'suggestions': {
            'has_shortages': check['has_shortage'],
            'suggestions': suggestions,
        },
    }

    cache.set(
        suggestion_cache_key(farmer_request),
        result,
        timeout=settings.SUBSTITUTION_CACHE_TIMEOUT
    )
    logger.info(
        f"Generated {len(suggestions)} substitution suggestion(s) for request {farmer_request.pk}"
    )
    return result


# =============================================================================
# APPLY
# =============================================================================

def _substitute_label(type_id):
    stock_type = STOCK_TYPES_BY_ID.get(type_id)
    return stock_type['label'] if stock_type else type_id


def substitution_note(original_type, substitute_type, shortage, needed, confidence,
                      remaining_shortage, timestamp=None):
    """Audit line appended to the request notes."""
    if timestamp is None:
        timestamp = timezone.localtime()

    if remaining_shortage and remaining_shortage > 0:
        outcome = f"Partial: {format_quantity(remaining_shortage)} bags shortage remains."
    else:
        outcome = "Full substitution."

    return (
        f"[{timestamp:%m/%d/%Y, %I:%M:%S %p}] SUBSTITUTION APPLIED: "
        f"Replaced {format_quantity(shortage)} bags {_substitute_label(original_type)} with "
        f"{format_quantity(needed)} bags {_substitute_label(substitute_type)} "
        f"({float(confidence) * 100:.0f}% confidence). {outcome}"
    )


@transaction.atomic
def apply_substitution(farmer_request, original_type, substitute_type, shortage, needed,
                       confidence, remaining_shortage=0, user=None, request=None):
    """
    Move a shortage from one type to a substitute on a pending request.

    The original quantity is reduced by the shortage (never below zero) and
    the substitute quantity is increased by the amount needed.

    Raises:
        ValueError: request not pending, or a type with no request field
    """
    farmer_request = FarmerRequest.objects.select_for_update().get(pk=farmer_request.pk)

    if farmer_request.status != RequestStatus.PENDING:
        raise ValueError(f"Cannot apply substitution to request with status: {farmer_request.status}")

    original_field = SUBSTITUTION_ORIGINAL_FIELDS.get(original_type)
    substitute_field = SUBSTITUTION_SUBSTITUTE_FIELDS.get(substitute_type)
    if not original_field or not substitute_field:
        raise ValueError(f"Invalid substitution mapping: {original_type} -> {substitute_type}")

    shortage = Decimal(str(shortage))
    needed = Decimal(str(needed))
    remaining_shortage = Decimal(str(remaining_shortage or 0))

    old_values = {
        original_field: getattr(farmer_request, original_field),
        substitute_field: getattr(farmer_request, substitute_field),
    }

    reduced = getattr(farmer_request, original_field) - shortage
    setattr(farmer_request, original_field, max(Decimal('0'), reduced))
    setattr(farmer_request, substitute_field, getattr(farmer_request, substitute_field) + needed)

    note = substitution_note(
        original_type, substitute_type, shortage, needed, confidence, remaining_shortage
    )
    if farmer_request.request_notes:
        farmer_request.request_notes = f"{farmer_request.request_notes}\n\n{note}"
    else:
        farmer_request.request_notes = note

    farmer_request.save()
    clear_season_suggestions(farmer_request.season)

    log_audit(
        AuditAction.UPDATE, AuditModule.DISTRIBUTION,
        f"Applied substitution on request of {farmer_request.farmer_name}: "
        f"{original_type} -> {substitute_type}",
        user=user, request=request, record=farmer_request,
        old_values=old_values,
        new_values={
            original_field: getattr(farmer_request, original_field),
            substitute_field: getattr(farmer_request, substitute_field),
        },
        metadata={'confidence': float(confidence), 'remaining_shortage': remaining_shortage},
    )
    logger.info(f"Substitution applied on request {farmer_request.pk}: {original_type} -> {substitute_type}")
    return farmer_request
