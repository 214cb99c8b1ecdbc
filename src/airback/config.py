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
Runtime configuration.

Values are module constants that can be overridden through environment
variables, e.g. ``AIRBACK_TIMEOUT=10``.
"""

import os

# ============================================================================
# UPSTREAM SERVICES
# ============================================================================

OPEN_METEO_URL = os.getenv(
    "AIRBACK_OPEN_METEO_URL",
    "https://air-quality-api.open-meteo.com/v1/air-quality",
)

NOMINATIM_URL = os.getenv(
    "AIRBACK_NOMINATIM_URL", "https://nominatim.openstreetmap.org"
)

# Nominatim's usage policy requires an identifying User-Agent
USER_AGENT = os.getenv(
    "AIRBACK_USER_AGENT", "airback/0.1 (+https://southlondonscientific.com)"
)

# Request timeout in seconds
REQUEST_TIMEOUT = float(os.getenv("AIRBACK_TIMEOUT", "30"))

# ============================================================================
# COMPARISON DEFAULTS
# ============================================================================

# 2023 has full global coverage in CAMS; 2013 only covers Europe reliably
HISTORICAL_YEAR = int(os.getenv("AIRBACK_HISTORICAL_YEAR", "2023"))
FALLBACK_YEAR = int(os.getenv("AIRBACK_FALLBACK_YEAR", "2013"))

# Upper bound on sample locations used for a national average
MAX_SAMPLES = int(os.getenv("AIRBACK_MAX_SAMPLES", "5"))
