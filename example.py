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
Example usage of Airback.

This script demonstrates how to:
1. Fetch current and historical readings for a point
2. Resolve a historical reading with a fallback year
3. Run a full comparison, including the national average
4. Work with the comparison as a DataFrame
"""

import logging
from datetime import date

from airback import Comparator, CountryIdentity, fetch_reading, resolve_historical
from airback.change import format_value


def example_1_readings():
    """Example 1: Current and historical readings for London."""
    print("=" * 60)
    print("Example 1: Readings")
    print("=" * 60)

    today = date.today()
    current = fetch_reading(51.5074, -0.1278, "current")
    historical = fetch_reading(51.5074, -0.1278, "historical", year=2023, today=today)

    print(f"Data source: {current.data_source}")
    print(f"PM2.5 today: {format_value(current.pm25)}")
    print(f"PM2.5 in 2023: {format_value(historical.pm25)}")
    print()


def example_2_fallback():
    """Example 2: Historical reading with a fallback year."""
    print("=" * 60)
    print("Example 2: Historical Fallback")
    print("=" * 60)

    resolution = resolve_historical(40.7128, -74.0060, 2023, 2013, today=date.today())
    print(f"Year used: {resolution.year_used}")
    print(f"AQI: {format_value(resolution.reading.aqi)}")
    print()


def example_3_comparison():
    """Example 3: Full comparison with national average."""
    print("=" * 60)
    print("Example 3: Comparison")
    print("=" * 60)

    with Comparator(today=date.today()) as comparator:
        result = comparator.compare(
            53.4808,
            -2.2426,
            country=CountryIdentity("United Kingdom", "GB"),
            location_name="Manchester, United Kingdom",
        )

        print(f"Location: {result.location_name}")
        print(f"Comparing {result.today_label} with {result.historical_label}")
        print(f"Data source: {result.data_source}\n")

        for m in result.metrics:
            print(
                f"  {m.label:6s} {format_value(m.current):>6} "
                f"{format_value(m.historical):>6}  {m.change_text:>8} ({m.classification})"
            )

        national = result.wait_national(timeout=120)
        if national is None:
            print("\nNo national comparison available")
        else:
            print(f"\n{national.country.name} Avg (today):")
            for d in national.current:
                print(
                    f"  {d.label:6s} {format_value(d.national, '—'):>6} "
                    f"{d.delta_text} [{d.classification}]"
                )
    print()
    return result


def example_4_dataframe(result):
    """Example 4: Comparison as a DataFrame."""
    print("=" * 60)
    print("Example 4: DataFrame")
    print("=" * 60)

    df = result.to_frame()
    print(df[["label", "current", "historical", "change_text", "classification"]])
    print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    example_1_readings()
    example_2_fallback()
    result = example_3_comparison()
    example_4_dataframe(result)
