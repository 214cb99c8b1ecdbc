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
Exception hierarchy for Airback.

Transport and data problems are raised as distinct types so callers can
decide which failures are fatal to a comparison and which can be degraded.
"""


class AirbackError(Exception):
    """Base class for all Airback errors."""


class TransportError(AirbackError):
    """
    The upstream request could not be completed or returned a non-success status.

    Attributes:
        status_code: HTTP status code, when a response was received
        url: URL that was requested, when known
    """

    def __init__(
        self, message: str, status_code: int | None = None, url: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class InvalidResponseError(TransportError):
    """The upstream response did not match the expected schema."""


class NoDataError(AirbackError):
    """A current-conditions request returned no usable data."""


class LocationNotFoundError(AirbackError):
    """A free-text location search returned no match."""
