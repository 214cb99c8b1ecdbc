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
Comparison of today's air quality with the same day in a past year.

``Comparator.compare`` is the main entry point. The current and historical
readings are fetched before it returns; the national average is computed in
the background and delivered through a future (and an optional callback),
so a slow or failing national average never holds up or breaks the main
comparison.
"""

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from logging import getLogger
from typing import Callable

import pandas as pd

from . import config
from .change import (
    classify,
    classify_against_aggregate,
    compute_change,
    compute_delta,
    format_change,
    format_date,
    format_delta,
)
from .decorators import with_logging
from .historical import ReadingFetcher, resolve_historical
from .national import NationalAverage, national_average
from .sources.nominatim import GeocodeMatch, ReverseGeocode, reverse_geocode, search
from .sources.open_meteo import fetch_reading, historical_date
from .types import (
    METRICS,
    AggregateClassification,
    AggregateReading,
    ChangeResult,
    Classification,
    CountryIdentity,
    Reading,
    ZeroBaseline,
)

logger = getLogger(__name__)

NationalCallback = Callable[["NationalComparison | None"], None]


# ============================================================================
# RESULT TYPES
# ============================================================================


@dataclass(frozen=True)
class MetricComparison:
    """One metric today against the same day in the historical year."""

    metric: str
    label: str
    unit: str
    lower_is_better: bool
    current: float | None
    historical: float | None
    change: ChangeResult
    classification: Classification

    @property
    def change_text(self) -> str:
        return format_change(self.change, self.lower_is_better)[0]


@dataclass(frozen=True)
class MetricDelta:
    """One metric at the location against the national average."""

    metric: str
    label: str
    location: float | None
    national: float | None
    delta: float | None
    classification: AggregateClassification

    @property
    def delta_text(self) -> str:
        return format_delta(self.delta)


@dataclass(frozen=True)
class NationalComparison:
    """National aggregates and the location's deltas against them."""

    average: NationalAverage
    current: list[MetricDelta]
    historical: list[MetricDelta]

    @property
    def country(self) -> CountryIdentity:
        return self.average.country


@dataclass
class ComparisonResult:
    """
    Everything a presentation layer needs to show a comparison.

    Attributes:
        latitude: Latitude of the location
        longitude: Longitude of the location
        location_name: Display name, or formatted coordinates
        country: Resolved country, if any
        today: Reference date of the comparison
        current: Latest reading at the location
        historical: Historical reading at the location (may be all None)
        historical_year: Year the historical reading belongs to
        metrics: Per-metric comparisons in display order
        national: Future resolving to a NationalComparison, or None when no
            national comparison is available
    """

    latitude: float
    longitude: float
    location_name: str
    country: CountryIdentity | None
    today: date
    current: Reading
    historical: Reading
    historical_year: int
    metrics: list[MetricComparison]
    national: Future = field(repr=False, default_factory=Future)

    @property
    def data_source(self) -> str:
        return self.current.data_source

    @property
    def historical_date(self) -> date:
        return historical_date(self.historical_year, self.today)

    @property
    def today_label(self) -> str:
        return format_date(self.today)

    @property
    def historical_label(self) -> str:
        return format_date(self.historical_date)

    def metric(self, name: str) -> MetricComparison:
        """Comparison for one metric key, e.g. "aqi" or "pm25"."""
        for comparison in self.metrics:
            if comparison.metric == name:
                return comparison
        raise KeyError(f"Unknown metric: {name}")

    def wait_national(self, timeout: float | None = None) -> NationalComparison | None:
        """Block until the national comparison is ready."""
        return self.national.result(timeout=timeout)

    def to_frame(self) -> pd.DataFrame:
        """
        Metric comparisons as a DataFrame.

        Columns: metric, label, unit, current, historical, change,
        change_text, classification. ``change`` is NaN when there is no
        percentage (no baseline or a zero baseline).
        """
        rows = []
        for m in self.metrics:
            numeric = (
                m.change
                if m.change is not None and not isinstance(m.change, ZeroBaseline)
                else float("nan")
            )
            rows.append(
                {
                    "metric": m.metric,
                    "label": m.label,
                    "unit": m.unit,
                    "current": m.current,
                    "historical": m.historical,
                    "change": numeric,
                    "change_text": m.change_text,
                    "classification": m.classification,
                }
            )
        df = pd.DataFrame(rows)
        df.attrs["today"] = self.today.isoformat()
        df.attrs["historical_year"] = self.historical_year
        df.attrs["data_source"] = self.data_source
        return df


# ============================================================================
# PURE HELPERS
# ============================================================================


def compare_metrics(current: Reading, historical: Reading) -> list[MetricComparison]:
    """Change and classification for every metric in ``METRICS``."""
    comparisons = []
    for metric, info in METRICS.items():
        now = current.get(metric)
        then = historical.get(metric)
        change = compute_change(now, then)
        comparisons.append(
            MetricComparison(
                metric=metric,
                label=info["label"],
                unit=info["unit"],
                lower_is_better=info["lower_is_better"],
                current=now,
                historical=then,
                change=change,
                classification=classify(change, info["lower_is_better"]),
            )
        )
    return comparisons


def national_deltas(
    location: Reading | None, aggregate: AggregateReading | None
) -> list[MetricDelta]:
    """Deltas of a location against an aggregate; empty if either is missing."""
    if location is None or aggregate is None:
        return []

    deltas = []
    for metric, info in METRICS.items():
        here = location.get(metric)
        national = aggregate.get(metric)
        deltas.append(
            MetricDelta(
                metric=metric,
                label=info["label"],
                location=here,
                national=national,
                delta=compute_delta(here, national),
                classification=classify_against_aggregate(here, national),
            )
        )
    return deltas


# ============================================================================
# ORCHESTRATOR
# ============================================================================


def _notify(callback: NationalCallback | None, result: NationalComparison | None) -> None:
    if callback is None:
        return
    try:
        callback(result)
    except Exception as e:
        logger.warning(f"National average callback failed: {e}")


class Comparator:
    """
    Builds comparisons for a fixed reference date.

    Args:
        today: Reference date; historical readings use its month and day
        historical_year: Primary historical year
        fallback_year: Year used when the primary year has no data
        fetcher: Reading fetcher
        geocoder: Reverse geocoder used when no country is supplied
        searcher: Free-text location search used by ``compare_query``
        averager: National average function
        executor: Executor for national averages. If None, the comparator
            owns a single-thread executor, released by ``close``.

    Example:
        >>> from datetime import date
        >>> with Comparator(today=date(2025, 1, 16)) as comparator:
        ...     result = comparator.compare(51.5074, -0.1278)
        ...     print(result.metric("aqi").change_text)
        ...     national = result.wait_national(timeout=60)
    """

    def __init__(
        self,
        today: date,
        historical_year: int = config.HISTORICAL_YEAR,
        fallback_year: int = config.FALLBACK_YEAR,
        fetcher: ReadingFetcher = fetch_reading,
        geocoder: Callable[[float, float], ReverseGeocode | None] = reverse_geocode,
        searcher: Callable[[str], GeocodeMatch] = search,
        averager: Callable[..., NationalAverage | None] = national_average,
        executor: Executor | None = None,
    ):
        self.today = today
        self.historical_year = historical_year
        self.fallback_year = fallback_year
        self.fetcher = fetcher
        self.geocoder = geocoder
        self.searcher = searcher
        self.averager = averager
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="airback-national"
        )

    def __enter__(self) -> "Comparator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self, wait: bool = True) -> None:
        """Shut down the owned executor, if any."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _reverse_geocode(self, latitude: float, longitude: float) -> ReverseGeocode | None:
        try:
            return self.geocoder(latitude, longitude)
        except Exception as e:
            logger.warning(f"Reverse geocoding failed: {e}")
            return None

    def _national_task(
        self,
        country: CountryIdentity,
        year: int,
        current: Reading,
        historical: Reading,
        on_national: NationalCallback | None,
    ) -> NationalComparison | None:
        try:
            average = self.averager(
                country,
                year,
                fallback_year=self.fallback_year,
                today=self.today,
                fetcher=self.fetcher,
            )
        except Exception as e:
            logger.warning(f"Failed to get national average: {e}")
            average = None

        result = None
        if average is not None:
            result = NationalComparison(
                average=average,
                current=national_deltas(current, average.current),
                historical=national_deltas(historical, average.historical),
            )

        _notify(on_national, result)
        return result

    @with_logging("airback.comparison")
    def compare(
        self,
        latitude: float,
        longitude: float,
        country: CountryIdentity | None = None,
        location_name: str | None = None,
        on_national: NationalCallback | None = None,
    ) -> ComparisonResult:
        """
        Compare today's air quality at a point with the historical year.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
            country: Country for the national average; reverse geocoded when
                not given
            location_name: Display name; reverse geocoded when not given
            on_national: Called with the national comparison (or None) once
                it is ready, from a background thread

        Returns:
            ComparisonResult: Readings and per-metric comparisons, with the
                national comparison pending in ``result.national``

        Raises:
            NoDataError: If there is no current data for the point
            TransportError: If the current or historical request fails
        """
        if country is None or location_name is None:
            geocoded = self._reverse_geocode(latitude, longitude)
            if geocoded is not None:
                country = country or geocoded.country_identity
                location_name = location_name or geocoded.display_name

        location_name = location_name or f"{latitude:.4f}, {longitude:.4f}"

        current = self.fetcher(latitude, longitude, "current")
        resolution = resolve_historical(
            latitude,
            longitude,
            self.historical_year,
            self.fallback_year,
            today=self.today,
            fetcher=self.fetcher,
        )

        national = None
        if country is not None:
            try:
                national = self._executor.submit(
                    self._national_task,
                    country,
                    resolution.year_used,
                    current,
                    resolution.reading,
                    on_national,
                )
            except Exception as e:
                logger.warning(f"Failed to get national average: {e}")

        if national is None:
            national = Future()
            national.set_result(None)
            _notify(on_national, None)

        return ComparisonResult(
            latitude=latitude,
            longitude=longitude,
            location_name=location_name,
            country=country,
            today=self.today,
            current=current,
            historical=resolution.reading,
            historical_year=resolution.year_used,
            metrics=compare_metrics(current, resolution.reading),
            national=national,
        )

    def compare_query(
        self, query: str, on_national: NationalCallback | None = None
    ) -> ComparisonResult:
        """
        Search for a place by name, then compare it.

        Raises:
            LocationNotFoundError: If the search finds nothing
        """
        match = self.searcher(query)
        return self.compare(
            match.latitude,
            match.longitude,
            location_name=match.name,
            on_national=on_national,
        )
