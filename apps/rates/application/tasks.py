"""
Celery tasks for background processing.
"""

import logging
from dataclasses import asdict
from typing import Dict

from celery import shared_task
from django.utils import timezone

from apps.rates.application.dto import CacheWarmResultDTO
from apps.rates.domain.errors import RateError
from apps.rates.domain.models import ANCHOR_CURRENCY, SECONDARY_CURRENCY
from apps.rates.infrastructure.providers.registry import get_rate_resolver
from core.settings import RATE_SOURCE

logger = logging.getLogger(__name__)


@shared_task(name="warm_rate_cache")
def warm_rate_cache() -> Dict:
    """
    Refetch the historical series and today's USD -> ARS rate into the cache.

    Meant to run on a beat schedule shorter than the cache TTL so that
    request-time lookups rarely reach the upstream APIs.

    Returns:
        Dict with operation results
    """
    resolver = get_rate_resolver()
    result = CacheWarmResultDTO(success=True)
    today = timezone.localdate()

    try:
        result.entries = len(resolver.refresh_historical_series())
    except RateError as e:
        logger.warning("Could not refresh historical series: %s", e.message)
        result.errors.append(f"historical series: {e.message}")

    for source_currency, exchanged_currency in (
        (SECONDARY_CURRENCY, ANCHOR_CURRENCY),
        (ANCHOR_CURRENCY, SECONDARY_CURRENCY),
    ):
        resolver.cache.delete(resolver.rate_cache_key(source_currency, exchanged_currency, today))
    response = resolver.fetch_exchange_rate(SECONDARY_CURRENCY, ANCHOR_CURRENCY, today)
    if response.success:
        result.rate = response.data.rate_value
    else:
        result.errors.append(f"current rate: {response.error.message}")

    result.success = not result.errors
    logger.info(
        "Cache warm finished: %d entries, rate=%s, errors=%d",
        result.entries, result.rate, len(result.errors),
    )
    return asdict(result)


@shared_task(name="check_rate_source_health")
def check_rate_source_health() -> Dict:
    """Probe the configured rate source."""
    healthy = get_rate_resolver().healthy()
    if not healthy:
        logger.warning("Rate source '%s' is unhealthy", RATE_SOURCE)
    return {"source": RATE_SOURCE, "healthy": healthy}
