"""
Pytest configuration and shared fixtures.

This module provides canned Open-Meteo payloads and a fake reading fetcher
used across the test modules.
"""

import time

import pytest

from airback.types import Reading

# ============================================================================
# Retry Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    """Skip tenacity's backoff waits so retry tests run instantly."""
    monkeypatch.setattr(time, "sleep", lambda seconds: None)


# ============================================================================
# Payload Fixtures
# ============================================================================


@pytest.fixture
def current_payload():
    """Response to a current request: instantaneous values plus hourly series."""
    return {
        "latitude": 51.5,
        "longitude": -0.125,
        "timezone": "Europe/London",
        "current": {
            "time": "2025-01-16T12:00",
            "interval": 3600,
            "pm10": 18.2,
            "pm2_5": 11.4,
            "carbon_monoxide": 210.0,
            "nitrogen_dioxide": 32.1,
            "ozone": 24.0,
            "sulphur_dioxide": 3.3,
            "european_aqi": 28,
            "us_aqi": 47,
        },
        "hourly": {
            "time": ["2025-01-16T10:00", "2025-01-16T11:00", "2025-01-16T12:00"],
            "pm10": [15.0, 16.0, 17.0],
            "pm2_5": [9.0, 10.0, 11.0],
            "carbon_monoxide": [200.0, 205.0, 208.0],
            "nitrogen_dioxide": [30.0, 31.0, 32.0],
            "ozone": [20.0, 22.0, 23.0],
            "sulphur_dioxide": [3.0, 3.1, 3.2],
            "european_aqi": [25, 26, 27],
            "us_aqi": [44, 45, 46],
        },
    }


@pytest.fixture
def historical_payload():
    """Response to a single-day historical request: hourly series only."""
    return {
        "latitude": 51.5,
        "longitude": -0.125,
        "timezone": "Europe/London",
        "hourly": {
            "time": ["2023-01-16T00:00", "2023-01-16T01:00"],
            "pm10": [22.0, 23.0],
            "pm2_5": [14.0, 15.0],
            "carbon_monoxide": [250.0, 251.0],
            "nitrogen_dioxide": [40.0, 41.0],
            "ozone": [12.0, 13.0],
            "sulphur_dioxide": [4.0, 4.1],
            "european_aqi": [35, 36],
            "us_aqi": [56, 57],
        },
    }


@pytest.fixture
def empty_payload():
    """Response with neither current values nor an hourly time axis."""
    return {
        "latitude": 51.5,
        "longitude": -0.125,
        "hourly": {"time": []},
    }


# ============================================================================
# Fake Fetcher
# ============================================================================


class FakeFetcher:
    """
    Stand-in for ``fetch_reading``.

    Readings (or exceptions to raise) are registered by mode and year, and
    optionally by coordinates. Unregistered requests return an empty reading.
    """

    def __init__(self):
        self._responses = {}
        self.calls = []

    def add(self, value, mode, year=None, latitude=None, longitude=None):
        self._responses[(latitude, longitude, mode, year)] = value
        return self

    def __call__(self, latitude, longitude, mode="current", year=None, today=None):
        self.calls.append((latitude, longitude, mode, year))

        value = self._responses.get((latitude, longitude, mode, year))
        if value is None:
            value = self._responses.get((None, None, mode, year))
        if value is None:
            return Reading.empty("Test Source")
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()
