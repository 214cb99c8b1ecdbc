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
OpenStreetMap Nominatim geocoding.

Thin clients for free-text search and reverse geocoding. They turn a place
name into coordinates and coordinates into a country identity for the
national comparison. There is no decision logic here.

API Documentation: https://nominatim.org/release-docs/latest/api/Overview/
Usage Policy: https://operations.osmfoundation.org/policies/nominatim/
"""

from dataclasses import dataclass
from logging import getLogger
from typing import Any

import requests

from .. import config
from ..decorators import retry_gentle
from ..exceptions import LocationNotFoundError, TransportError
from ..types import CountryIdentity

logger = getLogger(__name__)


@dataclass(frozen=True)
class GeocodeMatch:
    """Result of a free-text location search."""

    latitude: float
    longitude: float
    name: str


@dataclass(frozen=True)
class ReverseGeocode:
    """Address details for a pair of coordinates."""

    city: str
    country: str
    country_code: str
    display_name: str

    @property
    def country_identity(self) -> CountryIdentity:
        return CountryIdentity(name=self.country, iso_code=self.country_code)


# ============================================================================
# LOW-LEVEL API FUNCTIONS
# ============================================================================


@retry_gentle
def _call_nominatim_api(endpoint: str, params: dict) -> Any:
    """
    Make a request to Nominatim.

    Args:
        endpoint: "search" or "reverse"
        params: Query parameters (format=json is added automatically)

    Returns:
        Decoded JSON body

    Raises:
        requests.RequestException: If the request fails after retries
    """
    params = {**params, "format": "json", "addressdetails": 1}
    headers = {"User-Agent": config.USER_AGENT, "Accept": "application/json"}

    response = requests.get(
        f"{config.NOMINATIM_URL}/{endpoint}",
        params=params,
        headers=headers,
        timeout=config.REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


# ============================================================================
# PUBLIC FUNCTIONS
# ============================================================================


def search(query: str) -> GeocodeMatch:
    """
    Find coordinates for a place name.

    Args:
        query: Free-text location, e.g. "Manchester, UK"

    Returns:
        GeocodeMatch: Best match with latitude, longitude and display name

    Raises:
        LocationNotFoundError: If nothing matches the query
        TransportError: If the search service cannot be reached
    """
    query = query.strip()
    if not query:
        raise LocationNotFoundError("Location not found")

    logger.info(f"Searching for location: {query}")

    try:
        data = _call_nominatim_api("search", {"q": query, "limit": 1})
    except requests.exceptions.RequestException as e:
        raise TransportError("Failed to search location") from e

    if not isinstance(data, list) or not data:
        raise LocationNotFoundError("Location not found")

    result = data[0]
    try:
        return GeocodeMatch(
            latitude=float(result["lat"]),
            longitude=float(result["lon"]),
            name=result.get("display_name") or query,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise LocationNotFoundError("Location not found") from e


def reverse_geocode(latitude: float, longitude: float) -> ReverseGeocode | None:
    """
    Look up the city and country for a pair of coordinates.

    Failures are not fatal: callers treat a missing result as "country
    unknown" and skip the national comparison.

    Returns:
        ReverseGeocode | None: Address details, or None if no country could
            be determined
    """
    try:
        data = _call_nominatim_api(
            "reverse", {"lat": latitude, "lon": longitude, "zoom": 10}
        )
    except requests.exceptions.RequestException as e:
        logger.warning(f"Reverse geocoding failed: {e}")
        return None

    address = data.get("address") if isinstance(data, dict) else None
    if not address:
        return None

    city = address.get("city") or address.get("town") or address.get("village") or ""
    country = address.get("country") or ""
    country_code = (address.get("country_code") or "").upper()

    if not country:
        return None

    return ReverseGeocode(
        city=city,
        country=country,
        country_code=country_code,
        display_name=f"{city}, {country}" if city else country,
    )
