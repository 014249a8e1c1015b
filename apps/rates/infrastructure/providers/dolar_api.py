import logging
import math
from datetime import date
from typing import Any, List, Optional

import requests

from core.settings import ARGENTINA_DATOS_BASE_URL, DOLAR_API_BASE_URL
from apps.rates.domain.errors import UpstreamError
from apps.rates.domain.interfaces import BaseRateSource
from apps.rates.domain.models import HistoricalEntry, midpoint
from apps.rates.infrastructure.providers.http import DEFAULT_TIMEOUT, shared_session

logger = logging.getLogger(__name__)


def parse_price(value: Any) -> float:
    """Coerce a numeric-or-string price; anything unusable becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if math.isfinite(price) else 0.0


def is_present(value: Any) -> bool:
    """False for None, False and blank strings; numbers (0 included) count."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class DolarApiProvider(BaseRateSource):
    """
    Official ARS/USD quotes.

    Current rate comes from DolarAPI (/dolares/oficial), the historical series
    from ArgentinaDatos (/cotizaciones/dolares/oficial). Both quote buy
    ("compra") and sell ("venta") prices in ARS per 1 USD.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        dolar_api_url: str = DOLAR_API_BASE_URL,
        argentina_datos_url: str = ARGENTINA_DATOS_BASE_URL,
        timeout=DEFAULT_TIMEOUT,
    ):
        self._session = session
        self.current_url = f"{dolar_api_url}/dolares/oficial"
        self.historical_url = f"{argentina_datos_url}/cotizaciones/dolares/oficial"
        self.timeout = timeout

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = shared_session()
        return self._session

    def healthy(self) -> bool:
        try:
            data = self._get_json(self.current_url)
            return all(is_present(data.get(field)) for field in ("compra", "venta"))
        except Exception as e:
            logger.warning("DolarAPI health check failed: %s", e)
            return False

    def fetch_current_snapshot(self) -> Optional[float]:
        """
        Fetch the current official rate from DolarAPI.

        Returns:
            Midpoint of compra/venta rounded to 4 decimals, or None when either
            price is missing or non-positive.
        """
        data = self._get_json(self.current_url)
        if not isinstance(data, dict):
            raise UpstreamError(
                f"Failed to fetch current rate from DolarAPI: unexpected payload {type(data).__name__}"
            )

        compra = parse_price(data.get("compra"))
        venta = parse_price(data.get("venta"))

        if compra <= 0 or venta <= 0:
            logger.info("DolarAPI returned no usable prices (compra=%s, venta=%s)", compra, venta)
            return None

        rate = midpoint(compra, venta)
        return rate if rate > 0 else None

    def fetch_historical_series(self) -> List[HistoricalEntry]:
        """
        Fetch the full historical series from ArgentinaDatos.

        Entries with an unparseable date or non-positive prices are skipped.
        The series is returned in upstream order, which is not guaranteed sorted.
        """
        data = self._get_json(self.historical_url)
        if not isinstance(data, list):
            raise UpstreamError(
                f"Failed to fetch historical rates from ArgentinaDatos: unexpected payload {type(data).__name__}"
            )

        series = []
        for item in data:
            entry = self._parse_entry(item)
            if entry is not None:
                series.append(entry)

        logger.debug("ArgentinaDatos returned %d entries, kept %d", len(data), len(series))
        return series

    @staticmethod
    def _parse_entry(item: Any) -> Optional[HistoricalEntry]:
        if not isinstance(item, dict):
            return None

        try:
            entry_date = date.fromisoformat(str(item.get("fecha")))
        except ValueError:
            logger.debug("Skipping entry with invalid date: %r", item.get("fecha"))
            return None

        compra = parse_price(item.get("compra"))
        venta = parse_price(item.get("venta"))
        if compra <= 0 or venta <= 0:
            return None

        rate = midpoint(compra, venta)
        # prices below 0.0001 round to 0.0
        if rate <= 0:
            return None
        return HistoricalEntry(date=entry_date, midpoint_rate=rate)

    def _get_json(self, url: str) -> Any:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            logger.warning("Timeout calling %s", url)
            raise UpstreamError(f"Timeout calling {url}: {e}") from e
        except requests.exceptions.HTTPError as e:
            logger.warning("HTTP error from %s: %s", url, e)
            body = e.response.text if e.response is not None else None
            raise UpstreamError(f"HTTP error from {url}: {e}", details=body) from e
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Invalid response from %s: %s", url, e)
            raise UpstreamError(f"Failed to fetch {url}: {e}") from e
