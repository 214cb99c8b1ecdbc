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
Relative change and delta calculations.

Pure functions comparing a reading with a baseline (the same day in a past
year) or with an aggregate (the national average), and classifying the
result taking the polarity of the metric into account.

Two zero cases are deliberately handled differently:

- ``compute_change`` returns a ``ZeroBaseline`` marker when the historical
  value is exactly zero, so "was zero" stays distinct from "no data".
- ``compute_delta`` returns None when the aggregate is zero. A delta against
  the national average is only a hint alongside the main comparison.
"""

import math
from datetime import date

from .types import AggregateClassification, ChangeResult, Classification, ZeroBaseline

_MONTHS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return True


# =============================================================================
# Change against a historical baseline
# =============================================================================


def compute_change(current: float | None, historical: float | None) -> ChangeResult:
    """
    Percentage change from ``historical`` to ``current``.

    Args:
        current: Today's value
        historical: Baseline value

    Returns:
        ChangeResult:
            - None if there is no baseline or no current value
            - ZeroBaseline(current) if the baseline is exactly zero
            - ((current - historical) / historical) * 100 otherwise, unrounded

    Example:
        >>> compute_change(80, 60)
        33.33333333333333
        >>> compute_change(5, 0)
        ZeroBaseline(current=5)
    """
    if historical is None:
        return None
    if historical == 0:
        return ZeroBaseline(current=current)
    if _is_missing(current):
        return None
    return ((current - historical) / historical) * 100


def classify(change: ChangeResult, lower_is_better: bool = False) -> Classification:
    """
    Classify a change as an improvement, a regression, or neither.

    For lower-is-better metrics (every pollutant and AQI) an increase is a
    regression. A rise from a zero baseline counts as an increase.

    Args:
        change: Result of ``compute_change``
        lower_is_better: Polarity of the metric

    Returns:
        "positive", "negative" or "neutral"
    """
    if change is None:
        return "neutral"

    if isinstance(change, ZeroBaseline):
        if _is_missing(change.current) or change.current == 0:
            return "neutral"
        return "negative" if lower_is_better else "positive"

    if _is_missing(change) or change == 0:
        return "neutral"

    increased = change > 0
    if lower_is_better:
        return "negative" if increased else "positive"
    return "positive" if increased else "negative"


# =============================================================================
# Delta against an aggregate
# =============================================================================


def compute_delta(
    location_value: float | None, aggregate_value: float | None
) -> float | None:
    """
    Percentage difference of a location from an aggregate.

    Returns None if either value is missing or the aggregate is zero.
    """
    if _is_missing(location_value) or _is_missing(aggregate_value):
        return None
    if aggregate_value == 0:
        return None
    return ((location_value - aggregate_value) / aggregate_value) * 100


def classify_against_aggregate(
    location_value: float | None, aggregate_value: float | None
) -> AggregateClassification:
    """
    Label the aggregate's position relative to the location (lower is better).

    "worse" means the aggregate is higher than the location, i.e. the
    location is comparatively clean; "better" means the aggregate is lower.
    """
    if _is_missing(location_value) or _is_missing(aggregate_value):
        return "neutral"
    if aggregate_value > location_value:
        return "worse"
    if aggregate_value < location_value:
        return "better"
    return "neutral"


# =============================================================================
# Formatting
# =============================================================================


def format_change(
    change: ChangeResult, lower_is_better: bool = False
) -> tuple[str, Classification]:
    """
    Text and classification for a change.

    Returns:
        tuple: ("N/A", "neutral") for no baseline, ("New", ...) for a rise
            from zero, ("0%", "neutral") for zero to zero, otherwise a signed
            percentage to one decimal place such as "+33.3%"
    """
    label = classify(change, lower_is_better)

    if change is None:
        return "N/A", label

    if isinstance(change, ZeroBaseline):
        if _is_missing(change.current):
            return "N/A", label
        if change.current == 0:
            return "0%", label
        return "New", label

    sign = "+" if change > 0 else ""
    return f"{sign}{change:.1f}%", label


def format_delta(delta: float | None, label: str = "national") -> str:
    """Delta as "(+20% vs national)", or an empty string when missing."""
    if delta is None:
        return ""
    sign = "+" if delta > 0 else ""
    return f"({sign}{delta:.0f}% vs {label})"


def format_value(value: float | None, missing: str = "N/A") -> int | str:
    """Value rounded to an integer, or ``missing`` when there is none."""
    if _is_missing(value):
        return missing
    # halves round up, unlike round()
    return math.floor(value + 0.5)


def format_date(day: date) -> str:
    """Date as "Jan 16, 2023"."""
    return f"{_MONTHS[day.month - 1]} {day.day}, {day.year}"
