"""
Tests for the Open-Meteo air quality data source.

Tests payload validation, per-field value extraction, request parameters,
and error handling with mocked HTTP responses.
"""

from datetime import date

import pytest
import requests
import responses

from airback import config
from airback.exceptions import InvalidResponseError, NoDataError, TransportError
from airback.provenance import EUROPE_LABEL, GLOBAL_LABEL
from airback.sources.open_meteo import (
    build_params,
    extract_value,
    fetch_current,
    fetch_historical,
    fetch_reading,
    has_usable_data,
    historical_date,
    parse_payload,
    series_index,
)

LONDON = (51.5074, -0.1278)
SYDNEY = (-33.8688, 151.2093)


# ============================================================================
# Tests for parse_payload()
# ============================================================================


class TestParsePayload:
    """Tests for response validation at the fetch boundary."""

    def test_valid_payload_passes(self, current_payload):
        payload = parse_payload(current_payload)

        assert payload["current"]["pm2_5"] == 11.4
        assert payload["hourly"]["us_aqi"] == [44.0, 45.0, 46.0]

    def test_integers_coerced_to_float(self, current_payload):
        payload = parse_payload(current_payload)

        assert isinstance(payload["current"]["us_aqi"], float)

    def test_rejects_non_object(self):
        with pytest.raises(InvalidResponseError, match="JSON object"):
            parse_payload(["not", "a", "dict"])

    def test_rejects_non_numeric_value(self, current_payload):
        current_payload["current"]["pm2_5"] = "high"

        with pytest.raises(InvalidResponseError, match="current.pm2_5"):
            parse_payload(current_payload)

    def test_rejects_boolean_value(self, historical_payload):
        historical_payload["hourly"]["ozone"] = [True, 1.0]

        with pytest.raises(InvalidResponseError):
            parse_payload(historical_payload)

    def test_rejects_series_that_is_not_a_list(self, historical_payload):
        historical_payload["hourly"]["pm10"] = 22.0

        with pytest.raises(InvalidResponseError, match="hourly.pm10"):
            parse_payload(historical_payload)

    def test_nulls_preserved(self, historical_payload):
        historical_payload["hourly"]["pm10"] = [None, 23.0]

        payload = parse_payload(historical_payload)

        assert payload["hourly"]["pm10"] == [None, 23.0]

    def test_keeps_station_annotation(self, historical_payload):
        historical_payload["metadata"] = {"station": "Marylebone Road"}

        payload = parse_payload(historical_payload)

        assert payload["metadata"]["station"] == "Marylebone Road"


# ============================================================================
# Tests for value extraction
# ============================================================================


class TestExtractValue:
    """Tests for current-over-hourly preference and index selection."""

    def test_prefers_current_value(self, current_payload):
        payload = parse_payload(current_payload)

        assert extract_value(payload, "pm2_5", 2) == 11.4

    def test_falls_back_to_hourly_per_field(self, current_payload):
        del current_payload["current"]["ozone"]
        payload = parse_payload(current_payload)

        # Ozone comes from the hourly series, PM2.5 still from current
        assert extract_value(payload, "ozone", 2) == 23.0
        assert extract_value(payload, "pm2_5", 2) == 11.4

    def test_null_current_falls_back_to_hourly(self, current_payload):
        current_payload["current"]["pm10"] = None
        payload = parse_payload(current_payload)

        assert extract_value(payload, "pm10", 2) == 17.0

    def test_missing_everywhere_is_none(self, historical_payload):
        del historical_payload["hourly"]["sulphur_dioxide"]
        payload = parse_payload(historical_payload)

        assert extract_value(payload, "sulphur_dioxide", 0) is None

    def test_index_out_of_range_is_none(self, historical_payload):
        historical_payload["hourly"]["ozone"] = []
        payload = parse_payload(historical_payload)

        assert extract_value(payload, "ozone", 0) is None

    def test_series_index_historical_is_first(self, historical_payload):
        assert series_index(parse_payload(historical_payload), "historical") == 0

    def test_series_index_current_is_last(self, current_payload):
        assert series_index(parse_payload(current_payload), "current") == 2

    def test_series_index_without_time_axis(self):
        assert series_index({}, "current") == 0


class TestHasUsableData:
    """Tests for the "no usable data" condition."""

    def test_current_block_counts(self, current_payload):
        del current_payload["hourly"]
        assert has_usable_data(parse_payload(current_payload))

    def test_hourly_time_counts(self, historical_payload):
        assert has_usable_data(parse_payload(historical_payload))

    def test_empty_time_axis(self, empty_payload):
        assert not has_usable_data(parse_payload(empty_payload))

    def test_empty_current_block(self):
        assert not has_usable_data(parse_payload({"current": {}}))

    def test_no_blocks(self):
        assert not has_usable_data(parse_payload({"latitude": 1.0}))


# ============================================================================
# Tests for request parameters
# ============================================================================


class TestBuildParams:
    """Tests for query construction."""

    def test_current_requests_current_and_hourly(self):
        params = build_params(*LONDON, "current")

        assert "pm2_5" in params["current"]
        assert params["current"] == params["hourly"]
        assert params["timezone"] == "auto"
        assert "start_date" not in params

    def test_historical_single_day(self):
        params = build_params(*LONDON, "historical", 2023, date(2025, 1, 16))

        assert params["start_date"] == "2023-01-16"
        assert params["end_date"] == "2023-01-16"
        assert "current" not in params

    def test_requests_all_eight_variables(self):
        params = build_params(*LONDON, "current")

        assert set(params["hourly"].split(",")) == {
            "pm10",
            "pm2_5",
            "carbon_monoxide",
            "nitrogen_dioxide",
            "ozone",
            "sulphur_dioxide",
            "european_aqi",
            "us_aqi",
        }


class TestHistoricalDate:
    def test_same_month_and_day(self):
        assert historical_date(2013, date(2025, 10, 19)) == date(2013, 10, 19)

    def test_leap_day_clamps(self):
        assert historical_date(2023, date(2024, 2, 29)) == date(2023, 2, 28)

    def test_leap_day_kept_in_leap_year(self):
        assert historical_date(2020, date(2024, 2, 29)) == date(2020, 2, 29)


# ============================================================================
# Tests for fetch_reading()
# ============================================================================


class TestFetchReading:
    """Tests for the reading fetcher with mocked HTTP."""

    @responses.activate
    def test_current_reading(self, current_payload):
        responses.add(responses.GET, config.OPEN_METEO_URL, json=current_payload)

        reading = fetch_reading(*LONDON, "current")

        assert reading.pm25 == 11.4
        assert reading.us_aqi == 47.0
        assert reading.european_aqi == 28.0
        assert reading.data_source == EUROPE_LABEL

    @responses.activate
    def test_current_uses_latest_hour_without_current_block(self, current_payload):
        del current_payload["current"]
        responses.add(responses.GET, config.OPEN_METEO_URL, json=current_payload)

        reading = fetch_current(*LONDON)

        assert reading.pm25 == 11.0
        assert reading.us_aqi == 46.0

    @responses.activate
    def test_historical_uses_first_hour(self, historical_payload):
        responses.add(responses.GET, config.OPEN_METEO_URL, json=historical_payload)

        reading = fetch_historical(*LONDON, 2023, today=date(2025, 1, 16))

        assert reading.pm25 == 14.0
        assert reading.us_aqi == 56.0
        assert "start_date=2023-01-16" in responses.calls[0].request.url

    @responses.activate
    def test_historical_no_data_returns_empty_reading(self, empty_payload):
        responses.add(responses.GET, config.OPEN_METEO_URL, json=empty_payload)

        reading = fetch_reading(*SYDNEY, "historical", year=2013)

        assert reading.is_empty()
        assert reading.data_source == GLOBAL_LABEL

    @responses.activate
    def test_current_no_data_raises(self, empty_payload):
        responses.add(responses.GET, config.OPEN_METEO_URL, json=empty_payload)

        with pytest.raises(NoDataError, match="No air quality data available"):
            fetch_reading(*LONDON, "current")

    @responses.activate
    def test_station_annotation_used_verbatim(self, historical_payload):
        historical_payload["metadata"] = {"station": "Marylebone Road"}
        responses.add(responses.GET, config.OPEN_METEO_URL, json=historical_payload)

        reading = fetch_reading(*LONDON, "historical", year=2023)

        assert reading.data_source == "Marylebone Road"

    @responses.activate
    def test_client_error_raises_transport_error(self):
        responses.add(responses.GET, config.OPEN_METEO_URL, status=400)

        with pytest.raises(TransportError) as exc_info:
            fetch_reading(*LONDON, "current")

        assert exc_info.value.status_code == 400
        # 4xx is not retried
        assert len(responses.calls) == 1

    @responses.activate
    def test_server_error_retried_then_raised(self):
        responses.add(responses.GET, config.OPEN_METEO_URL, status=503)

        with pytest.raises(TransportError) as exc_info:
            fetch_reading(*LONDON, "current")

        assert exc_info.value.status_code == 503
        assert len(responses.calls) == 3

    @responses.activate
    def test_server_error_recovers(self, current_payload):
        responses.add(responses.GET, config.OPEN_METEO_URL, status=502)
        responses.add(responses.GET, config.OPEN_METEO_URL, json=current_payload)

        reading = fetch_reading(*LONDON, "current")

        assert reading.pm25 == 11.4
        assert len(responses.calls) == 2

    @responses.activate
    def test_connection_error_raises_transport_error(self):
        responses.add(
            responses.GET,
            config.OPEN_METEO_URL,
            body=requests.exceptions.ConnectionError("Connection refused"),
        )

        with pytest.raises(TransportError, match="Connection refused"):
            fetch_reading(*LONDON, "historical", year=2023)

    @responses.activate
    def test_invalid_json_raises_invalid_response(self):
        responses.add(responses.GET, config.OPEN_METEO_URL, body="<html>oops</html>")

        with pytest.raises(InvalidResponseError):
            fetch_reading(*LONDON, "current")

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown mode"):
            fetch_reading(*LONDON, "forecast")

    def test_historical_requires_year(self):
        with pytest.raises(ValueError, match="year is required"):
            fetch_reading(*LONDON, "historical")
