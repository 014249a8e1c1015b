"""
Key-prefixed cache adapter over a Django cache backend.
Values are pickled by the backend, so dates and floats round-trip unchanged.
"""

import logging
from typing import Any, Optional

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

CACHE_DURATION = 5 * 60


class RateCache:

    def __init__(
        self,
        prefix: Optional[str] = None,
        ttl: Optional[int] = None,
        backend=None,
    ):
        self.prefix = prefix or getattr(settings, "RATES_CACHE_PREFIX", "dolar_api")
        if ttl is None:
            ttl = getattr(settings, "RATES_CACHE_TTL", CACHE_DURATION)
        self.ttl = ttl
        if backend is None:
            backend = caches[getattr(settings, "RATES_CACHE_ALIAS", "default")]
        self._backend = backend

    def make_key(self, key: str) -> str:
        return f"{self.prefix}_{key}"

    def get(self, key: str) -> Optional[Any]:
        value = self._backend.get(self.make_key(key))
        logger.debug("Cache %s for %s", "miss" if value is None else "hit", self.make_key(key))
        return value

    def put(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._backend.set(self.make_key(key), value, timeout=self.ttl if ttl is None else ttl)

    def delete(self, key: str) -> None:
        self._backend.delete(self.make_key(key))
