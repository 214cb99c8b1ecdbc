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
National average approximation.

Open-Meteo has no country-level figures, so a national average is
approximated by fetching readings for a few representative cities and
taking the mean of each pollutant. Failures at individual cities are
logged and skipped; the average is built from whatever succeeded.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from logging import getLogger

import pandas as pd

from . import config
from .historical import ReadingFetcher, resolve_historical
from .samples import lookup_identity
from .sources.open_meteo import fetch_reading
from .types import AggregateReading, CountryIdentity, Reading, SampleLocation

logger = getLogger(__name__)


@dataclass(frozen=True)
class NationalAverage:
    """
    Current and historical aggregates for a country.

    Either aggregate is None when no sample produced a usable reading.
    """

    country: CountryIdentity
    current: AggregateReading | None
    historical: AggregateReading | None
    samples_attempted: int


@dataclass(frozen=True)
class _SampleResult:
    location: SampleLocation
    current: Reading | None
    historical: Reading | None


def aggregate_readings(readings: list[Reading]) -> AggregateReading | None:
    """
    Reduce readings into per-field means.

    Each field is averaged over the readings that have a value for it,
    independently of the other fields. The provenance label is taken from
    the first reading.

    Args:
        readings: Readings to combine

    Returns:
        AggregateReading | None: Means per field, or None for an empty list

    Example:
        >>> aggregate_readings([Reading(pm25=10), Reading(pm25=30, pm10=8)]).pm25
        20.0
    """
    if not readings:
        return None

    fields = Reading.numeric_fields()
    frame = pd.DataFrame([r.values() for r in readings], columns=fields, dtype=float)
    means = frame.mean(skipna=True)

    values = {
        field: None if pd.isna(means[field]) else float(means[field])
        for field in fields
    }
    return AggregateReading(
        **values,
        data_source=readings[0].data_source or "Unknown",
        sample_count=len(readings),
    )


def _fetch_sample(
    location: SampleLocation,
    historical_year: int,
    fallback_year: int,
    today: date | None,
    fetcher: ReadingFetcher,
) -> _SampleResult:
    """Fetch both readings for one city; a failed fetch leaves its slot empty."""
    lat, lon = location.latitude, location.longitude

    try:
        current = fetcher(lat, lon, "current")
    except Exception as e:
        logger.warning(
            f"Failed to fetch current data for sample location {location.label} "
            f"({lat}, {lon}): {e}"
        )
        current = None

    try:
        historical = resolve_historical(
            lat, lon, historical_year, fallback_year, today=today, fetcher=fetcher
        ).reading
    except Exception as e:
        logger.warning(
            f"Failed to fetch historical data for sample location {location.label} "
            f"({lat}, {lon}): {e}"
        )
        historical = None

    return _SampleResult(location, current, historical)


def national_average(
    country: CountryIdentity | None,
    historical_year: int,
    fallback_year: int = config.FALLBACK_YEAR,
    today: date | None = None,
    max_samples: int = config.MAX_SAMPLES,
    max_workers: int = 5,
    fetcher: ReadingFetcher = fetch_reading,
) -> NationalAverage | None:
    """
    Approximate a country's current and historical air quality.

    Args:
        country: Country to average; None gives None
        historical_year: Primary year for historical readings
        fallback_year: Year to try when a sample has no data for the primary year
        today: Reference date for month and day of historical readings
        max_samples: Upper bound on the number of cities fetched
        max_workers: Threads used to fetch cities in parallel
        fetcher: Reading fetcher, ``fetch_reading`` by default

    Returns:
        NationalAverage | None: Aggregates, or None if the country has no
            sample locations. Never raises for failures at individual cities.

    Example:
        >>> avg = national_average(CountryIdentity("UK", "GB"), 2023)
        >>> avg.current.pm25  # doctest: +SKIP
        9.4
    """
    locations = lookup_identity(country)
    if not locations:
        logger.info(f"No sample locations for {country}")
        return None

    locations = locations[:max_samples]
    logger.info(
        f"Averaging {len(locations)} sample locations for {country.name or country.iso_code}"
    )

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(locations)))) as executor:
        results = list(
            executor.map(
                lambda loc: _fetch_sample(
                    loc, historical_year, fallback_year, today, fetcher
                ),
                locations,
            )
        )

    current_samples = [r.current for r in results if r.current and r.current.has_signal()]
    historical_samples = [
        r.historical for r in results if r.historical and r.historical.has_signal()
    ]

    logger.info(
        f"National average for {country.name}: "
        f"{len(current_samples)}/{len(locations)} current, "
        f"{len(historical_samples)}/{len(locations)} historical samples usable"
    )

    return NationalAverage(
        country=country,
        current=aggregate_readings(current_samples),
        historical=aggregate_readings(historical_samples),
        samples_attempted=len(locations),
    )
