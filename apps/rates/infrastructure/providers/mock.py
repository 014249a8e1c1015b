"""
Mock rate source for testing and offline development.
Generates deterministic but realistic ARS per USD quotes.
"""

import random
from datetime import date, timedelta
from typing import Callable, List, Optional

from django.utils import timezone

from apps.rates.domain.interfaces import BaseRateSource
from apps.rates.domain.models import HistoricalEntry, UsageData, midpoint


class MockRateSource(BaseRateSource):
    """
    Mock source that generates official-style quotes.
    Useful for:
    - Testing without external API calls
    - Development without network access
    """

    # Approximate official ARS per 1 USD
    BASE_RATE = 1000.0
    # Sell price sits this far above buy price
    SPREAD = 0.04

    def __init__(self, days: int = 30, today: Callable[[], date] = timezone.localdate):
        self.days = days
        self.today = today

    def _quote(self, quote_date: date) -> float:
        # Use date as seed for reproducibility
        generator = random.Random(f"ARSUSD{quote_date.isoformat()}")
        buy = round(self.BASE_RATE * generator.uniform(0.98, 1.02), 2)
        sell = round(buy * (1 + self.SPREAD), 2)
        return midpoint(buy, sell)

    def fetch_current_snapshot(self) -> Optional[float]:
        return self._quote(self.today())

    def fetch_historical_series(self) -> List[HistoricalEntry]:
        end = self.today()
        return [
            HistoricalEntry(date=day, midpoint_rate=self._quote(day))
            for day in (end - timedelta(days=offset) for offset in range(self.days))
        ]

    def healthy(self) -> bool:
        return True

    def usage(self) -> UsageData:
        return UsageData(used=0, limit=0, utilization=0, plan="Offline")
