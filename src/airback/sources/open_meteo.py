# Airback: compare today's air quality with the same day in past years
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Open-Meteo Air Quality Data Source.

This module fetches pollutant concentrations and AQI values for a single
point from the Open-Meteo air quality API, either for the current hour or
for the same calendar day in a past year.

Open-Meteo serves CAMS model output (European reanalysis over Europe,
global reanalysis elsewhere). No API key is required.

API Documentation: https://open-meteo.com/en/docs/air-quality-api
"""

import math
from datetime import date
from logging import getLogger
from typing import Any

import requests

from .. import config
from ..decorators import retry_on_network_error
from ..exceptions import InvalidResponseError, NoDataError, TransportError
from ..provenance import infer_data_source
from ..types import (
    API_VARIABLES,
    POLLUTANT_FIELDS,
    AirQualityPayload,
    Mode,
    Reading,
)

logger = getLogger(__name__)

# ============================================================================
# LOW-LEVEL API FUNCTIONS
# ============================================================================


@retry_on_network_error
def _call_open_meteo_api(params: dict, timeout: float | None = None) -> Any:
    """
    Make a request to the Open-Meteo air quality API.

    Args:
        params: Query parameters
        timeout: Request timeout in seconds (defaults to config.REQUEST_TIMEOUT)

    Returns:
        Decoded JSON body

    Raises:
        requests.RequestException: If the request fails after retries
    """
    response = requests.get(
        config.OPEN_METEO_URL,
        params=params,
        timeout=timeout or config.REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def _request_payload(params: dict) -> AirQualityPayload:
    """Call the API and translate transport failures into TransportError."""
    try:
        raw = _call_open_meteo_api(params)
    except requests.exceptions.JSONDecodeError as e:
        raise InvalidResponseError(
            f"Open-Meteo returned a body that is not JSON: {e}",
            url=config.OPEN_METEO_URL,
        ) from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise TransportError(
            f"API request failed: {status}",
            status_code=status,
            url=config.OPEN_METEO_URL,
        ) from e
    except requests.exceptions.RequestException as e:
        raise TransportError(
            f"API request failed: {e}", url=config.OPEN_METEO_URL
        ) from e

    return parse_payload(raw)


# ============================================================================
# RESPONSE VALIDATION
# ============================================================================


def _coerce_number(value: Any, where: str) -> float | None:
    if value is None:
        return None
    # bool is an int subclass but never a valid concentration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidResponseError(f"Non-numeric value {value!r} in {where}")
    value = float(value)
    return None if math.isnan(value) else value


def parse_payload(raw: Any) -> AirQualityPayload:
    """
    Validate a decoded Open-Meteo response against the expected schema.

    Only the blocks Airback reads are kept. Pollutant values are coerced to
    float (or None); anything else in a pollutant slot is rejected.

    Args:
        raw: Decoded JSON body

    Returns:
        AirQualityPayload: Cleaned payload

    Raises:
        InvalidResponseError: If the body is not shaped like an air quality response
    """
    if not isinstance(raw, dict):
        raise InvalidResponseError(
            f"Expected a JSON object, got {type(raw).__name__}"
        )

    payload: AirQualityPayload = {}

    for key in ("latitude", "longitude", "timezone"):
        if key in raw:
            payload[key] = raw[key]

    metadata = raw.get("metadata")
    if isinstance(metadata, dict) and isinstance(metadata.get("station"), str):
        payload["metadata"] = {"station": metadata["station"]}

    current = raw.get("current")
    if current is not None:
        if not isinstance(current, dict):
            raise InvalidResponseError("'current' block must be an object")
        block = {}
        for key, value in current.items():
            if key in POLLUTANT_FIELDS:
                block[key] = _coerce_number(value, f"current.{key}")
            else:
                block[key] = value
        payload["current"] = block

    hourly = raw.get("hourly")
    if hourly is not None:
        if not isinstance(hourly, dict):
            raise InvalidResponseError("'hourly' block must be an object")
        block = {}
        for key, series in hourly.items():
            if key == "time" or key in POLLUTANT_FIELDS:
                if not isinstance(series, list):
                    raise InvalidResponseError(f"'hourly.{key}' must be a list")
            if key in POLLUTANT_FIELDS:
                block[key] = [
                    _coerce_number(v, f"hourly.{key}[{i}]") for i, v in enumerate(series)
                ]
            else:
                block[key] = series
        payload["hourly"] = block

    return payload


def has_usable_data(payload: AirQualityPayload) -> bool:
    """True when the payload has a non-empty current block or hourly time axis."""
    if payload.get("current"):
        return True
    hourly = payload.get("hourly") or {}
    return bool(hourly.get("time"))


def extract_value(
    payload: AirQualityPayload, variable: str, index: int
) -> float | None:
    """
    Pick one value for a variable.

    The instantaneous value wins when present; otherwise the hourly series
    is read at ``index``. Missing data at either level gives None.
    """
    current_value = (payload.get("current") or {}).get(variable)
    if current_value is not None:
        return current_value

    series = (payload.get("hourly") or {}).get(variable)
    if not series or not 0 <= index < len(series):
        return None
    return series[index]


def series_index(payload: AirQualityPayload, mode: Mode) -> int:
    """First hour for historical queries, latest hour for current ones."""
    times = (payload.get("hourly") or {}).get("time") or []
    if not times or mode == "historical":
        return 0
    return len(times) - 1


# ============================================================================
# DATA FETCHERS
# ============================================================================


def historical_date(year: int, today: date) -> date:
    """
    Same month and day as ``today`` in ``year``.

    29 February maps to 28 February when ``year`` is not a leap year.
    """
    try:
        return today.replace(year=year)
    except ValueError:
        return date(year, today.month, 28)


def build_params(
    latitude: float,
    longitude: float,
    mode: Mode,
    year: int | None = None,
    today: date | None = None,
) -> dict:
    """Query parameters for a current or single-day historical request."""
    variables = ",".join(API_VARIABLES)
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": variables,
        "timezone": "auto",
    }

    if mode == "historical":
        day = historical_date(year, today or date.today()).isoformat()
        params["start_date"] = day
        params["end_date"] = day
    else:
        params["current"] = variables

    return params


def fetch_reading(
    latitude: float,
    longitude: float,
    mode: Mode = "current",
    year: int | None = None,
    today: date | None = None,
) -> Reading:
    """
    Fetch one air quality reading for a point.

    Args:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        mode: "current" for the latest hour, "historical" for a past day
        year: Year to query (required for historical mode)
        today: Reference date whose month and day are used for historical
            queries (defaults to today's date)

    Returns:
        Reading: Values for the eight pollutant/AQI fields plus a provenance
            label. For historical queries with no data at all, every numeric
            field is None.

    Raises:
        ValueError: If mode is unknown or year is missing for historical mode
        TransportError: If the request fails or returns a non-success status
        NoDataError: If a current query returns no usable data

    Example:
        >>> from datetime import date
        >>> reading = fetch_reading(51.5074, -0.1278, "historical",
        ...                         year=2023, today=date(2025, 1, 16))
        >>> reading.data_source
        'CAMS European Air Quality Reanalysis'
    """
    if mode not in ("current", "historical"):
        raise ValueError(f"Unknown mode: {mode!r}. Use 'current' or 'historical'.")
    if mode == "historical" and year is None:
        raise ValueError("A year is required for historical readings")

    logger.info(
        f"Fetching {mode} air quality for {latitude:.4f}, {longitude:.4f}"
        + (f" ({year})" if mode == "historical" else "")
    )

    payload = _request_payload(build_params(latitude, longitude, mode, year, today))
    data_source = infer_data_source(latitude, longitude, payload)

    if not has_usable_data(payload):
        if mode == "historical":
            logger.warning(f"No historical data available for {year}")
            return Reading.empty(data_source)
        raise NoDataError("No air quality data available")

    index = series_index(payload, mode)
    values = {
        field: extract_value(payload, variable, index)
        for variable, field in POLLUTANT_FIELDS.items()
    }
    reading = Reading(**values, data_source=data_source)

    logger.debug(f"Parsed air quality data ({mode}): {reading}")
    return reading


def fetch_current(latitude: float, longitude: float) -> Reading:
    """Latest available reading for a point."""
    return fetch_reading(latitude, longitude, "current")


def fetch_historical(
    latitude: float, longitude: float, year: int, today: date | None = None
) -> Reading:
    """Reading for the same calendar day as ``today`` in ``year``."""
    return fetch_reading(latitude, longitude, "historical", year=year, today=today)
