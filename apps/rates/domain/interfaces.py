from abc import ABC, abstractmethod
from typing import List, Optional

from apps.rates.domain.models import HistoricalEntry, UsageData


class BaseRateSource(ABC):
    @abstractmethod
    def fetch_current_snapshot(self) -> Optional[float]:
        pass

    @abstractmethod
    def fetch_historical_series(self) -> List[HistoricalEntry]:
        pass

    @abstractmethod
    def healthy(self) -> bool:
        pass

    def usage(self) -> UsageData:
        return UsageData(used=0, limit=0, utilization=0, plan="Free")
