"""
HTTP transport shared by the upstream rate sources.
Retries, backoff and timeouts live here, transparent to the resolver.
"""

from functools import lru_cache

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from core.settings import (
    RATES_HTTP_BACKOFF_FACTOR,
    RATES_HTTP_MAX_RETRIES,
    RATES_HTTP_OPEN_TIMEOUT,
    RATES_HTTP_TIMEOUT,
)

RETRY_STATUSES = (429,)

# (connect, read) as accepted by requests
DEFAULT_TIMEOUT = (RATES_HTTP_OPEN_TIMEOUT, RATES_HTTP_TIMEOUT)


def build_retry(
    max_retries: int = RATES_HTTP_MAX_RETRIES,
    backoff_factor: float = RATES_HTTP_BACKOFF_FACTOR,
) -> Retry:
    return Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        status=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )


def build_session(
    max_retries: int = RATES_HTTP_MAX_RETRIES,
    backoff_factor: float = RATES_HTTP_BACKOFF_FACTOR,
) -> requests.Session:
    """
    Build a JSON session that retries connection failures, timeouts and 429s.

    Non-2xx responses are not raised here; callers use ``raise_for_status``.
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=build_retry(max_retries, backoff_factor))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers["Accept"] = "application/json"
    return session


@lru_cache(maxsize=None)
def shared_session() -> requests.Session:
    """Process-wide session, so sources built per request reuse one connection pool."""
    return build_session()
