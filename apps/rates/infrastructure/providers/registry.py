"""
Source Registry - Maps RateSourceName to adapter classes.
This is the glue between the RATE_SOURCE setting and the actual implementation.
"""

import logging
from typing import Optional

from django.db import models

from core.settings import RATE_SOURCE
from apps.rates.domain.interfaces import BaseRateSource
from apps.rates.domain.services import RateResolver
from apps.rates.infrastructure.cache import RateCache
from apps.rates.infrastructure.providers.dolar_api import DolarApiProvider
from apps.rates.infrastructure.providers.mock import MockRateSource

logger = logging.getLogger(__name__)


class RateSourceName(models.TextChoices):
    """
    Enum with available rate sources.
    To add a new source:
    1. Add an entry here
    2. Implement the BaseRateSource interface
    3. Register in SOURCE_REGISTRY
    """

    DOLAR_API = "dolar_api", "DolarAPI"
    MOCK = "mock", "Mock"


# Registry: Maps RateSourceName to the corresponding adapter class
SOURCE_REGISTRY: dict[str, type[BaseRateSource]] = {
    RateSourceName.DOLAR_API: DolarApiProvider,
    RateSourceName.MOCK: MockRateSource,
}


def get_source_instance(source_name: str) -> Optional[BaseRateSource]:
    """
    Get an instance of a rate source by its name.

    Args:
        source_name: The source name from RateSourceName enum

    Returns:
        Instance of the source adapter, or None if not found
    """
    source_class = SOURCE_REGISTRY.get(source_name)

    if source_class is None:
        logger.error("Rate source '%s' not found in registry", source_name)
        return None

    return source_class()


def get_rate_resolver(source_name: str = RATE_SOURCE) -> RateResolver:
    """
    Build a resolver over the configured source and the shared rate cache.

    Raises:
        ValueError: if the configured source is not registered
    """
    source = get_source_instance(source_name)
    if source is None:
        raise ValueError(
            f"Unknown rate source '{source_name}'. Allowed: {sorted(SOURCE_REGISTRY)}"
        )
    return RateResolver(source=source, cache=RateCache())
