"""
Pure domain entities (POPOs).
No dependency on Django or the ORM.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


ANCHOR_CURRENCY = "ARS"
SECONDARY_CURRENCY = "USD"
SUPPORTED_CURRENCIES = (ANCHOR_CURRENCY, SECONDARY_CURRENCY)


@dataclass(frozen=True)
class CurrencyPair:

    source_currency: str
    exchanged_currency: str

    def __str__(self):
        return f"{self.source_currency}/{self.exchanged_currency}"

    @property
    def is_identity(self) -> bool:
        return self.source_currency == self.exchanged_currency

    @property
    def is_direct(self) -> bool:
        """USD -> ARS, the way upstream quotes are expressed."""
        return (
            self.source_currency == SECONDARY_CURRENCY
            and self.exchanged_currency == ANCHOR_CURRENCY
        )


@dataclass(frozen=True)
class Rate:

    valuation_date: date
    source_currency: str
    exchanged_currency: str
    rate_value: float
    resolved_date: Optional[date] = None

    def __post_init__(self):
        if self.rate_value <= 0:
            raise ValueError(f"rate_value must be positive, got {self.rate_value}")

    def convert(self, amount: float) -> float:
        return amount * self.rate_value


@dataclass(frozen=True)
class HistoricalEntry:

    date: date
    midpoint_rate: float

    def __post_init__(self):
        if self.midpoint_rate <= 0:
            raise ValueError(f"midpoint_rate must be positive, got {self.midpoint_rate}")


@dataclass(frozen=True)
class UsageData:

    used: int
    limit: int
    utilization: float
    plan: str


def midpoint(buy: float, sell: float) -> float:
    return round((buy + sell) / 2.0, 4)


def invert(rate_value: float) -> float:
    return round(1.0 / rate_value, 8)
