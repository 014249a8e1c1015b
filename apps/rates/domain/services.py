"""
Domain services - Core business logic.
Resolves ARS/USD rates from a rate source with read-through caching.
"""

import logging
from datetime import date, timedelta
from typing import Callable, List, Optional

from django.utils import timezone

from apps.rates.application.responses import with_provider_response
from apps.rates.domain.errors import NotFoundError, ValidationError
from apps.rates.domain.interfaces import BaseRateSource
from apps.rates.domain.models import (
    ANCHOR_CURRENCY,
    SUPPORTED_CURRENCIES,
    CurrencyPair,
    HistoricalEntry,
    Rate,
    invert,
)
from apps.rates.infrastructure.cache import RateCache

logger = logging.getLogger(__name__)

HISTORICAL_SERIES_KEY = "historical_series"


class RateResolver:
    """
    Domain service that turns upstream quotes into rates for a currency pair.

    Resolution strategy for a single date:
    1. Validate the pair (ARS must be on one side, the other must be USD)
    2. Same currency on both sides resolves to 1.0 without any lookup
    3. Check the cache
    4. Today uses the current snapshot, other dates the historical series
       (exact date, else the latest entry on or before it)
    5. Invert the ARS-per-USD value for ARS -> USD
    6. Cache and return the rate
    """

    def __init__(
        self,
        source: BaseRateSource,
        cache: Optional[RateCache] = None,
        today: Callable[[], date] = timezone.localdate,
    ):
        self.source = source
        self.cache = cache if cache is not None else RateCache()
        self.today = today

    def healthy(self) -> bool:
        try:
            return bool(self.source.healthy())
        except Exception as e:
            logger.warning("Health check raised %s: %s", e.__class__.__name__, e)
            return False

    @with_provider_response
    def usage(self):
        return self.source.usage()

    @with_provider_response
    def fetch_exchange_rate(
        self,
        source_currency: str,
        exchanged_currency: str,
        valuation_date: date,
    ) -> Rate:
        """
        Get the rate for a single date.

        Args:
            source_currency: Currency being converted from (e.g. "USD")
            exchanged_currency: Currency being converted to (e.g. "ARS")
            valuation_date: Date for the rate

        Returns:
            ProviderResponse wrapping a Rate, or a ValidationError,
            NotFoundError or UpstreamError

        Example:
            >>> response = resolver.fetch_exchange_rate("USD", "ARS", date(2024, 6, 15))
            >>> if response.success:
            ...     ars = 100 * response.data.rate_value
        """
        pair = self.validate_pair(source_currency, exchanged_currency)

        if pair.is_identity:
            return Rate(valuation_date, source_currency, exchanged_currency, 1.0)

        cache_key = self.rate_cache_key(source_currency, exchanged_currency, valuation_date)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        if valuation_date == self.today():
            rate_value = self.source.fetch_current_snapshot()
            resolved_date = valuation_date
        else:
            entry = self.find_historical_entry(valuation_date)
            rate_value = entry.midpoint_rate if entry else None
            resolved_date = entry.date if entry else None

        if rate_value is None:
            raise NotFoundError(f"No exchange rate found for {pair} on {valuation_date.isoformat()}")

        result = Rate(
            valuation_date=valuation_date,
            source_currency=source_currency,
            exchanged_currency=exchanged_currency,
            rate_value=self._orient(pair, rate_value),
            resolved_date=resolved_date,
        )
        self.cache.put(cache_key, result)
        return result

    @with_provider_response
    def fetch_exchange_rates(
        self,
        source_currency: str,
        exchanged_currency: str,
        start_date: date,
        end_date: date,
    ) -> List[Rate]:
        """
        Get one rate per upstream quote within [start_date, end_date], ascending.

        Days without an upstream quote (weekends, holidays) are simply absent.
        """
        pair = self.validate_pair(source_currency, exchanged_currency)
        self.validate_date_range(start_date, end_date)

        if pair.is_identity:
            days = (end_date - start_date).days + 1
            return [
                Rate(start_date + timedelta(days=offset), source_currency, exchanged_currency, 1.0)
                for offset in range(days)
            ]

        cache_key = (
            f"exchange_rates_{source_currency}_{exchanged_currency}"
            f"_{start_date.isoformat()}_{end_date.isoformat()}"
        )
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        rates = [
            Rate(
                valuation_date=entry.date,
                source_currency=source_currency,
                exchanged_currency=exchanged_currency,
                rate_value=self._orient(pair, entry.midpoint_rate),
                resolved_date=entry.date,
            )
            for entry in self.historical_series()
            if start_date <= entry.date <= end_date
        ]
        rates.sort(key=lambda rate: rate.valuation_date)

        self.cache.put(cache_key, rates)
        return rates

    def historical_series(self) -> List[HistoricalEntry]:
        """Full upstream series, cached as a unit."""
        cached = self.cache.get(HISTORICAL_SERIES_KEY)
        if cached is not None:
            return cached

        series = self.source.fetch_historical_series()
        self.cache.put(HISTORICAL_SERIES_KEY, series)
        return series

    def refresh_historical_series(self) -> List[HistoricalEntry]:
        self.cache.delete(HISTORICAL_SERIES_KEY)
        return self.historical_series()

    def find_historical_entry(self, valuation_date: date) -> Optional[HistoricalEntry]:
        """Exact date match, else the closest previous date. Never a later one."""
        series = self.historical_series()

        for entry in series:
            if entry.date == valuation_date:
                return entry

        previous = [entry for entry in series if entry.date <= valuation_date]
        if not previous:
            return None
        return max(previous, key=lambda entry: entry.date)

    @staticmethod
    def rate_cache_key(source_currency: str, exchanged_currency: str, valuation_date: date) -> str:
        return f"exchange_rate_{source_currency}_{exchanged_currency}_{valuation_date.isoformat()}"

    @staticmethod
    def validate_pair(source_currency: str, exchanged_currency: str) -> CurrencyPair:
        pair = CurrencyPair(source_currency, exchanged_currency)

        if ANCHOR_CURRENCY not in (source_currency, exchanged_currency):
            raise ValidationError(
                f"DolarAPI only supports currency pairs involving {ANCHOR_CURRENCY}. Got {pair}"
            )

        if not all(code in SUPPORTED_CURRENCIES for code in (source_currency, exchanged_currency)):
            raise ValidationError(f"DolarAPI only supports USD/ARS pairs. Got {pair}")

        return pair

    @staticmethod
    def validate_date_range(start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise ValidationError("Start date cannot be after end date")

    @staticmethod
    def _orient(pair: CurrencyPair, rate_value: float) -> float:
        # rate_value is the ARS price of 1 USD (e.g. 1050.5)
        if pair.is_direct:
            return rate_value
        return invert(rate_value)
