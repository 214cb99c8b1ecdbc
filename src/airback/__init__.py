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

"""Compare today's air quality with the same day in a past year"""

from .change import (
    classify,
    classify_against_aggregate,
    compute_change,
    compute_delta,
)
from .comparison import ComparisonResult, Comparator
from .exceptions import (
    AirbackError,
    InvalidResponseError,
    LocationNotFoundError,
    NoDataError,
    TransportError,
)
from .historical import resolve_historical
from .national import national_average
from .samples import lookup
from .sources.open_meteo import fetch_reading
from .types import (
    AggregateReading,
    CountryIdentity,
    Reading,
    SampleLocation,
    ZeroBaseline,
)

__version__ = "0.1.0"
