"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class RateQueryDTO:
    """Request DTO for a single-date rate."""
    source_currency: str
    exchanged_currency: str
    valuation_date: date


@dataclass
class TimeSeriesRequestDTO:
    """Request DTO for a date range of rates."""
    source_currency: str
    exchanged_currency: str
    date_from: date
    date_to: date


@dataclass
class CacheWarmResultDTO:
    """Result DTO for the cache warming task."""
    success: bool
    entries: int = 0
    rate: Optional[float] = None
    errors: List[str] = field(default_factory=list)
