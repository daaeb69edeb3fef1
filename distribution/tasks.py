"""
Distribution Celery Tasks

- Auto-fetch substitution suggestions for pending requests with a shortage
"""

import logging
import time

from celery import shared_task
from django.conf import settings

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def auto_fetch_alternatives(self, season):
    """
    Pre-compute substitution suggestions for every pending request of
    `season` that is short on stock.

    Requests are processed one at a time with SUBSTITUTION_FETCH_DELAY
    seconds between them. A failing request is logged and skipped.
    """
    from distribution.models import RequestStatus
    from distribution.services.shortage import SeasonStockLedger
    from distribution.services.substitution import get_cached_suggestions, suggest_for_request

    logger.info(f"Auto-fetching alternatives for season {season}...")

    try:
        ledger = SeasonStockLedger.for_season(season)
    except Exception as exc:
        logger.error(f"Could not load stock ledger for {season}: {exc}")
        raise self.retry(exc=exc, countdown=60)

    delay = settings.SUBSTITUTION_FETCH_DELAY
    with_shortage = 0
    fetched = 0
    errors = 0

    for farmer_request in ledger.requests:
        if farmer_request.status != RequestStatus.PENDING:
            continue
        if not ledger.check(farmer_request)['has_shortage']:
            continue

        with_shortage += 1
        if get_cached_suggestions(farmer_request) is not None:
            continue

        try:
            suggest_for_request(farmer_request, ledger=ledger, use_cache=False)
            fetched += 1
        except Exception as e:
            errors += 1
            logger.error(f"Failed to fetch alternatives for request {farmer_request.pk}: {e}")

        if delay:
            time.sleep(delay)

    logger.info(
        f"Auto-fetch for {season} complete: {with_shortage} request(s) with shortage, "
        f"{fetched} fetched, {errors} error(s)"
    )
    return {
        'season': season,
        'requests_with_shortage': with_shortage,
        'fetched': fetched,
        'errors': errors,
    }
