import json
from datetime import date
from unittest.mock import Mock

import pytest
import requests
from django.core.cache import caches

from apps.rates.domain.services import RateResolver
from apps.rates.infrastructure.cache import RateCache
from apps.rates.infrastructure.providers.dolar_api import DolarApiProvider
from core.settings import ARGENTINA_DATOS_BASE_URL, DOLAR_API_BASE_URL

TODAY = date(2024, 6, 20)
CURRENT_URL = f"{DOLAR_API_BASE_URL}/dolares/oficial"
HISTORICAL_URL = f"{ARGENTINA_DATOS_BASE_URL}/cotizaciones/dolares/oficial"


@pytest.fixture(autouse=True)
def clear_cache():
    """Every test starts with an empty rate cache."""
    caches["default"].clear()
    yield
    caches["default"].clear()


@pytest.fixture
def json_response():
    """Factory for requests.Response stand-ins carrying a JSON body."""

    def make(payload, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = payload
        response.text = json.dumps(payload)
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error", response=response
            )
        else:
            response.raise_for_status.return_value = None
        return response

    return make


@pytest.fixture
def upstream():
    """
    Session stub answering GETs by URL.

    Register responses with ``upstream.routes[url] = response``; unknown URLs
    fail like an unreachable host.
    """
    routes = {}
    session = Mock()

    def get(url, timeout=None):
        if url not in routes:
            raise requests.exceptions.ConnectionError(f"Connection refused: {url}")
        return routes[url]

    session.get.side_effect = get
    session.routes = routes
    return session


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def provider(upstream):
    return DolarApiProvider(session=upstream)


@pytest.fixture
def resolver(provider):
    return RateResolver(source=provider, cache=RateCache(), today=lambda: TODAY)
