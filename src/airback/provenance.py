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
Data provenance labels for air quality readings.

Open-Meteo does not say which model or station produced a value, so the
label is inferred from the coordinates. The boxes below are rough and
overlap in places (southern Europe and the Mediterranean coast of Africa,
for instance); Europe is checked first and wins any overlap.
"""

from typing import Mapping

EUROPE_LABEL = "CAMS European Air Quality Reanalysis"
NORTH_AMERICA_LABEL = "CAMS Global (may include NOAA/Environment Canada ground stations)"
GLOBAL_LABEL = "CAMS Global Reanalysis"

# (min_lat, max_lat, min_lon, max_lon), bounds inclusive
EUROPE_BOX = (35.0, 71.0, -10.0, 40.0)

NORTH_AMERICA_BOXES = {
    # Contiguous US and Alaska
    "united_states": (18.0, 72.0, -180.0, -66.0),
    "hawaii": (18.0, 22.0, -161.0, -154.0),
    "canada": (41.0, 84.0, -141.0, -52.0),
    "mexico": (14.0, 33.0, -118.0, -86.0),
}


def _in_box(latitude: float, longitude: float, box: tuple[float, float, float, float]) -> bool:
    min_lat, max_lat, min_lon, max_lon = box
    return min_lat <= latitude <= max_lat and min_lon <= longitude <= max_lon


def _station_annotation(payload: Mapping | None) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    metadata = payload.get("metadata")
    if not isinstance(metadata, Mapping):
        return None
    station = metadata.get("station")
    if isinstance(station, str) and station:
        return station
    return None


def infer_data_source(
    latitude: float, longitude: float, payload: Mapping | None = None
) -> str:
    """
    Label the likely origin of a reading.

    Args:
        latitude: Latitude of the reading
        longitude: Longitude of the reading
        payload: Raw upstream response; an explicit ``metadata.station``
            annotation takes precedence over the geographic guess

    Returns:
        str: Human-readable provenance label. Best effort, not a guarantee.

    Example:
        >>> infer_data_source(51.5074, -0.1278)
        'CAMS European Air Quality Reanalysis'
        >>> infer_data_source(-33.8688, 151.2093)
        'CAMS Global Reanalysis'
    """
    station = _station_annotation(payload)
    if station is not None:
        return station

    if _in_box(latitude, longitude, EUROPE_BOX):
        return EUROPE_LABEL

    if any(_in_box(latitude, longitude, box) for box in NORTH_AMERICA_BOXES.values()):
        return NORTH_AMERICA_LABEL

    return GLOBAL_LABEL
