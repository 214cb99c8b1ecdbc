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
Historical reading resolution with a fallback year.

CAMS European reanalysis reaches back further than the global product, so
a location with no data for the primary year may still have data for an
older fallback year. The primary year is always tried first.
"""

from dataclasses import dataclass
from datetime import date
from logging import getLogger
from typing import Callable

from .sources.open_meteo import fetch_reading
from .types import Reading

logger = getLogger(__name__)

ReadingFetcher = Callable[..., Reading]


@dataclass(frozen=True)
class HistoricalResolution:
    """A historical reading and the year it is reported against."""

    reading: Reading
    year_used: int


def resolve_historical(
    latitude: float,
    longitude: float,
    primary_year: int,
    fallback_year: int,
    today: date | None = None,
    fetcher: ReadingFetcher = fetch_reading,
) -> HistoricalResolution:
    """
    Fetch a historical reading, falling back to another year if it is empty.

    The fallback year is reported only when its reading has at least one
    value. If both years are empty, the primary year's (empty) reading is
    returned against the primary year. A fallback equal to the primary year
    is not fetched again.

    Args:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        primary_year: Year to try first
        fallback_year: Year to try when the primary year has no data
        today: Reference date for month and day
        fetcher: Reading fetcher, ``fetch_reading`` by default

    Returns:
        HistoricalResolution: Reading plus the year it belongs to

    Raises:
        TransportError: If either request fails
    """
    primary = fetcher(latitude, longitude, "historical", year=primary_year, today=today)
    if not primary.is_empty() or fallback_year == primary_year:
        return HistoricalResolution(primary, primary_year)

    logger.info(f"No data for {primary_year}, trying {fallback_year}...")
    fallback = fetcher(
        latitude, longitude, "historical", year=fallback_year, today=today
    )
    if fallback.is_empty():
        return HistoricalResolution(primary, primary_year)

    logger.info(f"Using fallback year {fallback_year}")
    return HistoricalResolution(fallback, fallback_year)
