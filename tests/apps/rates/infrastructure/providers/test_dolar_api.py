import pytest
import requests
from datetime import date

from apps.rates.domain.errors import UpstreamError
from apps.rates.domain.models import HistoricalEntry
from apps.rates.infrastructure.providers.dolar_api import DolarApiProvider, parse_price
from core.settings import ARGENTINA_DATOS_BASE_URL, DOLAR_API_BASE_URL

CURRENT_URL = f"{DOLAR_API_BASE_URL}/dolares/oficial"
HISTORICAL_URL = f"{ARGENTINA_DATOS_BASE_URL}/cotizaciones/dolares/oficial"


def test_urls_point_at_official_endpoints(provider):
    assert provider.current_url == "https://dolarapi.com/v1/dolares/oficial"
    assert provider.historical_url == "https://api.argentinadatos.com/v1/cotizaciones/dolares/oficial"


def test_urls_follow_configured_base_urls(upstream):
    """
    Test that endpoint URLs are built from the given base URLs.
    """
    provider = DolarApiProvider(
        session=upstream,
        dolar_api_url="http://dolar.test/v1",
        argentina_datos_url="http://datos.test/v1",
    )

    assert provider.current_url == "http://dolar.test/v1/dolares/oficial"
    assert provider.historical_url == "http://datos.test/v1/cotizaciones/dolares/oficial"


@pytest.mark.parametrize(
    "value, expected",
    [
        (1050, 1050.0),
        ("1070.5", 1070.5),
        (None, 0.0),
        ("", 0.0),
        ("n/a", 0.0),
        (True, 0.0),
        ("nan", 0.0),
        ([1], 0.0),
    ],
)
def test_parse_price(value, expected):
    """
    Test that unusable prices are coerced to 0.0.
    """
    assert parse_price(value) == expected


class TestCurrentSnapshot:

    def test_midpoint_of_buy_and_sell(self, provider, upstream, json_response):
        """
        Test that the current rate is the compra/venta midpoint.
        """
        upstream.routes[CURRENT_URL] = json_response({
            "moneda": "USD",
            "casa": "oficial",
            "compra": 1050.0,
            "venta": 1070.0,
            "fechaActualizacion": "2024-06-20T15:00:00.000Z",
        })

        assert provider.fetch_current_snapshot() == 1060.0
        upstream.get.assert_called_once()
        assert upstream.get.call_args[0][0] == CURRENT_URL
        assert upstream.get.call_args[1]["timeout"] == provider.timeout

    def test_midpoint_rounds_to_four_decimals(self, provider, upstream, json_response):
        """
        Test that the midpoint is rounded to 4 decimals.
        """
        upstream.routes[CURRENT_URL] = json_response({"compra": "1000.00001", "venta": "1000.00002"})

        assert provider.fetch_current_snapshot() == 1000.0

    def test_string_prices_are_accepted(self, provider, upstream, json_response):
        upstream.routes[CURRENT_URL] = json_response({"compra": "900", "venta": "940"})

        assert provider.fetch_current_snapshot() == 920.0

    @pytest.mark.parametrize(
        "payload",
        [{}, {"compra": 1050.0}, {"compra": 0, "venta": 1070.0}, {"compra": -1, "venta": 1070.0}],
    )
    def test_missing_or_non_positive_prices_return_none(self, provider, upstream, json_response, payload):
        """
        Test that missing or non-positive prices yield no rate.
        """
        upstream.routes[CURRENT_URL] = json_response(payload)

        assert provider.fetch_current_snapshot() is None

    def test_non_object_payload_is_upstream_error(self, provider, upstream, json_response):
        """
        Test that a non-object payload raises UpstreamError.
        """
        upstream.routes[CURRENT_URL] = json_response([{"compra": 1050.0, "venta": 1070.0}])

        with pytest.raises(UpstreamError):
            provider.fetch_current_snapshot()


class TestHistoricalSeries:

    def test_parses_entries(self, provider, upstream, json_response):
        """
        Test that historical entries are parsed into HistoricalEntry objects.
        """
        upstream.routes[HISTORICAL_URL] = json_response([
            {"casa": "oficial", "compra": 900.0, "venta": 940.0, "fecha": "2024-06-15"},
            {"casa": "oficial", "compra": 895.0, "venta": 935.0, "fecha": "2024-06-14"},
        ])

        series = provider.fetch_historical_series()

        assert series == [
            HistoricalEntry(date(2024, 6, 15), 920.0),
            HistoricalEntry(date(2024, 6, 14), 915.0),
        ]
        assert upstream.get.call_args[0][0] == HISTORICAL_URL

    def test_skips_invalid_entries(self, provider, upstream, json_response):
        """
        Test that malformed entries are skipped without failing the series.
        """
        upstream.routes[HISTORICAL_URL] = json_response([
            {"fecha": "2024-06-14", "compra": 895.0, "venta": 935.0},
            {"fecha": "not-a-date", "compra": 900.0, "venta": 940.0},
            {"compra": 900.0, "venta": 940.0},
            {"fecha": "2024-06-16", "compra": 0, "venta": 940.0},
            {"fecha": "2024-06-17", "compra": 905.0, "venta": -1},
            {"fecha": "2024-06-18", "compra": 905.0},
            "garbage",
            None,
            {"fecha": "2024-06-19", "compra": "910", "venta": "950"},
        ])

        series = provider.fetch_historical_series()

        assert [entry.date for entry in series] == [date(2024, 6, 14), date(2024, 6, 19)]
        assert series[1].midpoint_rate == 930.0

    def test_empty_series(self, provider, upstream, json_response):
        upstream.routes[HISTORICAL_URL] = json_response([])

        assert provider.fetch_historical_series() == []

    def test_non_list_payload_is_upstream_error(self, provider, upstream, json_response):
        """
        Test that a non-list payload raises UpstreamError.
        """
        upstream.routes[HISTORICAL_URL] = json_response({"error": "rate limited"})

        with pytest.raises(UpstreamError):
            provider.fetch_historical_series()


class TestTransportErrors:

    def test_connection_error_is_wrapped(self, provider):
        """
        Test that connection failures raise UpstreamError.
        """
        with pytest.raises(UpstreamError) as exc_info:
            provider.fetch_current_snapshot()

        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_timeout_is_wrapped(self, provider, upstream):
        """
        Test that timeouts raise UpstreamError.
        """
        upstream.get.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(UpstreamError) as exc_info:
            provider.fetch_historical_series()

        assert "Timeout" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, requests.exceptions.Timeout)

    def test_http_error_keeps_body_as_details(self, provider, upstream, json_response):
        """
        Test that HTTP errors keep the response body as details.
        """
        upstream.routes[CURRENT_URL] = json_response({"message": "Service Unavailable"}, status_code=503)

        with pytest.raises(UpstreamError) as exc_info:
            provider.fetch_current_snapshot()

        assert "Service Unavailable" in exc_info.value.details
        assert isinstance(exc_info.value.__cause__, requests.exceptions.HTTPError)

    def test_invalid_json_is_wrapped(self, provider, upstream, json_response):
        """
        Test that an invalid JSON body raises UpstreamError.
        """
        response = json_response(None)
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        upstream.routes[HISTORICAL_URL] = response

        with pytest.raises(UpstreamError):
            provider.fetch_historical_series()


class TestHealthCheck:

    def test_healthy_when_api_answers_with_prices(self, provider, upstream, json_response):
        """
        Test that a response with both prices is healthy.
        """
        upstream.routes[CURRENT_URL] = json_response({"compra": 1050.0, "venta": 1070.0})

        assert provider.healthy() is True

    def test_unhealthy_when_api_fails(self, provider):
        """
        Test that a transport failure is reported as unhealthy.
        """
        assert provider.healthy() is False

    def test_unhealthy_when_response_is_missing_data(self, provider, upstream, json_response):
        """
        Test that a response without prices is unhealthy.
        """
        upstream.routes[CURRENT_URL] = json_response({})

        assert provider.healthy() is False

    @pytest.mark.parametrize("payload", [
        {"compra": "   ", "venta": 1070.0},
        {"compra": 1050.0, "venta": ""},
        {"compra": None, "venta": 1070.0},
    ])
    def test_unhealthy_when_a_price_is_blank(self, provider, upstream, json_response, payload):
        """Blank strings count as missing prices."""
        upstream.routes[CURRENT_URL] = json_response(payload)

        assert provider.healthy() is False

    def test_zero_price_still_counts_as_present(self, provider, upstream, json_response):
        """The check is about presence, not value."""
        upstream.routes[CURRENT_URL] = json_response({"compra": 0, "venta": "1070.0"})

        assert provider.healthy() is True

    def test_unhealthy_when_payload_is_not_an_object(self, provider, upstream, json_response):
        upstream.routes[CURRENT_URL] = json_response([])

        assert provider.healthy() is False


def test_default_session_is_resolved_lazily(mocker):
    """The shared session is only looked up on first use."""
    shared_session = mocker.patch("apps.rates.infrastructure.providers.dolar_api.shared_session")

    provider = DolarApiProvider()
    shared_session.assert_not_called()

    assert provider.session is shared_session.return_value
    assert provider.session is shared_session.return_value
    shared_session.assert_called_once()


def test_providers_share_one_session():
    """Separate provider instances reuse the same connection pool."""
    assert DolarApiProvider().session is DolarApiProvider().session
