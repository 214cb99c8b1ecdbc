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
Core type definitions for Airback.

This module defines the readings, reference data and result types shared
by the fetchers, the national averager and the change calculator, along
with the schema of the upstream Open-Meteo air quality response.
"""

import math
from dataclasses import dataclass, fields
from typing import Literal, TypeAlias, TypedDict

Mode: TypeAlias = Literal["current", "historical"]

Classification: TypeAlias = Literal["positive", "negative", "neutral"]
"""Direction of a change: an improvement, a regression, or neither."""

AggregateClassification: TypeAlias = Literal["better", "worse", "neutral"]
"""Position of an aggregate relative to a single location."""


# ============================================================================
# UPSTREAM RESPONSE SCHEMA
# ============================================================================

# Open-Meteo variable name -> Reading field name
POLLUTANT_FIELDS = {
    "pm2_5": "pm25",
    "pm10": "pm10",
    "carbon_monoxide": "carbon_monoxide",
    "nitrogen_dioxide": "nitrogen_dioxide",
    "ozone": "ozone",
    "sulphur_dioxide": "sulphur_dioxide",
    "us_aqi": "us_aqi",
    "european_aqi": "european_aqi",
}

# Order in which variables are requested from the API
API_VARIABLES = [
    "pm10",
    "pm2_5",
    "carbon_monoxide",
    "nitrogen_dioxide",
    "ozone",
    "sulphur_dioxide",
    "european_aqi",
    "us_aqi",
]


class CurrentBlock(TypedDict, total=False):
    """Instantaneous values, present only for ``current`` requests."""

    time: str
    interval: int
    pm10: float | None
    pm2_5: float | None
    carbon_monoxide: float | None
    nitrogen_dioxide: float | None
    ozone: float | None
    sulphur_dioxide: float | None
    european_aqi: float | None
    us_aqi: float | None


class HourlyBlock(TypedDict, total=False):
    """Time-indexed series; every list is aligned with ``time``."""

    time: list[str]
    pm10: list[float | None]
    pm2_5: list[float | None]
    carbon_monoxide: list[float | None]
    nitrogen_dioxide: list[float | None]
    ozone: list[float | None]
    sulphur_dioxide: list[float | None]
    european_aqi: list[float | None]
    us_aqi: list[float | None]


class PayloadMetadata(TypedDict, total=False):
    station: str


class AirQualityPayload(TypedDict, total=False):
    """Subset of the Open-Meteo air quality response that Airback reads."""

    latitude: float
    longitude: float
    timezone: str
    current: CurrentBlock
    hourly: HourlyBlock
    metadata: PayloadMetadata


# ============================================================================
# READINGS
# ============================================================================


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


@dataclass(frozen=True)
class Reading:
    """
    One point-in-time pollutant/AQI snapshot.

    Every numeric field is optional. A reading with no numeric values is a
    valid "no data available" result, not an error. ``data_source`` is
    always populated with a provenance label.
    """

    pm25: float | None = None
    pm10: float | None = None
    carbon_monoxide: float | None = None
    nitrogen_dioxide: float | None = None
    ozone: float | None = None
    sulphur_dioxide: float | None = None
    us_aqi: float | None = None
    european_aqi: float | None = None
    data_source: str = "Unknown"

    @classmethod
    def empty(cls, data_source: str) -> "Reading":
        """Return a reading with every numeric field set to None."""
        return cls(data_source=data_source)

    @classmethod
    def numeric_fields(cls) -> list[str]:
        return [f.name for f in fields(cls) if f.name in POLLUTANT_FIELDS.values()]

    def values(self) -> dict[str, float | None]:
        """Map of numeric field name to value."""
        return {name: getattr(self, name) for name in self.numeric_fields()}

    def is_empty(self) -> bool:
        """True when every numeric field is missing."""
        return all(_is_missing(v) for v in self.values().values())

    def has_signal(self) -> bool:
        """True when an AQI (US or European) or a PM2.5 value is present."""
        return not (
            _is_missing(self.us_aqi)
            and _is_missing(self.european_aqi)
            and _is_missing(self.pm25)
        )

    @property
    def aqi(self) -> float | None:
        """US AQI when available, otherwise European AQI."""
        if not _is_missing(self.us_aqi):
            return self.us_aqi
        if not _is_missing(self.european_aqi):
            return self.european_aqi
        return None

    def get(self, metric: str) -> float | None:
        """Look up a metric key from ``METRICS`` (including the derived ``aqi``)."""
        if metric == "aqi":
            return self.aqi
        return getattr(self, metric)


@dataclass(frozen=True)
class AggregateReading(Reading):
    """
    A reading whose fields are means across several sample readings.

    Attributes:
        sample_count: Number of samples that contributed to the aggregate
    """

    sample_count: int = 0


# ============================================================================
# REFERENCE DATA
# ============================================================================


@dataclass(frozen=True)
class SampleLocation:
    """A representative point used to approximate a national average."""

    latitude: float
    longitude: float
    label: str


@dataclass(frozen=True)
class CountryIdentity:
    """Country as reported by a geocoder; ``iso_code`` may be empty."""

    name: str
    iso_code: str = ""


# ============================================================================
# CHANGE RESULTS
# ============================================================================


@dataclass(frozen=True)
class ZeroBaseline:
    """
    Marker for a change against a baseline of exactly zero.

    The percentage is undefined, so the current value is carried instead.
    """

    current: float | None


ChangeResult: TypeAlias = ZeroBaseline | float | None
"""None (no baseline), a ZeroBaseline marker, or a signed percentage."""


class MetricInfo(TypedDict):
    """Display metadata and polarity for a compared metric."""

    label: str
    unit: str
    lower_is_better: bool


# Metrics shown in a comparison, in display order. "aqi" is derived from
# us_aqi with european_aqi as fallback.
METRICS: dict[str, MetricInfo] = {
    "aqi": {"label": "AQI", "unit": "", "lower_is_better": True},
    "pm25": {"label": "PM2.5", "unit": "µg/m³", "lower_is_better": True},
    "pm10": {"label": "PM10", "unit": "µg/m³", "lower_is_better": True},
    "carbon_monoxide": {"label": "CO", "unit": "µg/m³", "lower_is_better": True},
    "nitrogen_dioxide": {"label": "NO2", "unit": "µg/m³", "lower_is_better": True},
    "ozone": {"label": "O3", "unit": "µg/m³", "lower_is_better": True},
    "sulphur_dioxide": {"label": "SO2", "unit": "µg/m³", "lower_is_better": True},
}
