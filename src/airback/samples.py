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
Representative sample locations per country.

A national average is approximated by sampling a handful of major cities.
Each country in the table has exactly five. Countries that are not listed
simply have no national comparison.
"""

from .types import CountryIdentity, SampleLocation


def _cities(*rows: tuple[float, float, str]) -> tuple[SampleLocation, ...]:
    return tuple(SampleLocation(lat, lon, label) for lat, lon, label in rows)


COUNTRY_SAMPLES: dict[str, tuple[SampleLocation, ...]] = {
    "United States": _cities(
        (40.7128, -74.0060, "New York"),
        (34.0522, -118.2437, "Los Angeles"),
        (41.8781, -87.6298, "Chicago"),
        (29.7604, -95.3698, "Houston"),
        (38.9072, -77.0369, "Washington DC"),
    ),
    "Canada": _cities(
        (43.6532, -79.3832, "Toronto"),
        (45.5017, -73.5673, "Montreal"),
        (49.2827, -123.1207, "Vancouver"),
        (51.0447, -114.0719, "Calgary"),
        (45.4247, -75.6950, "Ottawa"),
    ),
    "Mexico": _cities(
        (19.4326, -99.1332, "Mexico City"),
        (20.6597, -103.3496, "Guadalajara"),
        (25.6866, -100.3161, "Monterrey"),
        (19.0414, -98.2063, "Puebla"),
        (32.5149, -117.0382, "Tijuana"),
    ),
    "Brazil": _cities(
        (-23.5505, -46.6333, "São Paulo"),
        (-22.9068, -43.1729, "Rio de Janeiro"),
        (-15.7942, -47.8822, "Brasília"),
        (-12.9714, -38.5014, "Salvador"),
        (-19.9167, -43.9345, "Belo Horizonte"),
    ),
    "Argentina": _cities(
        (-34.6037, -58.3816, "Buenos Aires"),
        (-31.4201, -64.1888, "Córdoba"),
        (-32.9442, -60.6505, "Rosario"),
        (-32.8895, -68.8458, "Mendoza"),
        (-34.9214, -57.9545, "La Plata"),
    ),
    "United Kingdom": _cities(
        (51.5074, -0.1278, "London"),
        (53.4808, -2.2426, "Manchester"),
        (55.9533, -3.1883, "Edinburgh"),
        (52.4862, -1.8904, "Birmingham"),
        (53.8008, -1.5491, "Leeds"),
    ),
    "Germany": _cities(
        (52.5200, 13.4050, "Berlin"),
        (48.1351, 11.5820, "Munich"),
        (50.9375, 6.9603, "Cologne"),
        (53.5511, 9.9937, "Hamburg"),
        (51.2277, 6.7735, "Düsseldorf"),
    ),
    "France": _cities(
        (48.8566, 2.3522, "Paris"),
        (45.7640, 4.8357, "Lyon"),
        (43.2965, 5.3698, "Marseille"),
        (44.8378, -0.5792, "Bordeaux"),
        (43.7102, 7.2620, "Nice"),
    ),
    "Italy": _cities(
        (41.9028, 12.4964, "Rome"),
        (45.4642, 9.1900, "Milan"),
        (40.8518, 14.2681, "Naples"),
        (45.0703, 7.6869, "Turin"),
        (43.7696, 11.2558, "Florence"),
    ),
    "Spain": _cities(
        (40.4168, -3.7038, "Madrid"),
        (41.3874, 2.1686, "Barcelona"),
        (39.4699, -0.3763, "Valencia"),
        (37.3891, -5.9845, "Seville"),
        (43.2630, -2.9350, "Bilbao"),
    ),
    "Netherlands": _cities(
        (52.3676, 4.9041, "Amsterdam"),
        (51.9244, 4.4777, "Rotterdam"),
        (52.0705, 4.3007, "The Hague"),
        (52.0907, 5.1214, "Utrecht"),
        (51.4416, 5.4697, "Eindhoven"),
    ),
    "Poland": _cities(
        (52.2297, 21.0122, "Warsaw"),
        (50.0647, 19.9450, "Kraków"),
        (51.7592, 19.4560, "Łódź"),
        (51.1079, 17.0385, "Wrocław"),
        (54.3520, 18.6466, "Gdańsk"),
    ),
    "Czech Republic": _cities(
        (50.0755, 14.4378, "Prague"),
        (49.1951, 16.6068, "Brno"),
        (49.8209, 18.2625, "Ostrava"),
        (49.7384, 13.3736, "Plzeň"),
        (50.7663, 15.0543, "Liberec"),
    ),
    "Russia": _cities(
        (55.7558, 37.6173, "Moscow"),
        (59.9311, 30.3609, "Saint Petersburg"),
        (55.0084, 82.9357, "Novosibirsk"),
        (56.8389, 60.6057, "Yekaterinburg"),
        (55.8304, 49.0661, "Kazan"),
    ),
    "Turkey": _cities(
        (41.0082, 28.9784, "Istanbul"),
        (39.9334, 32.8597, "Ankara"),
        (38.4237, 27.1428, "Izmir"),
        (40.1885, 29.0610, "Bursa"),
        (36.8969, 30.7133, "Antalya"),
    ),
    "Egypt": _cities(
        (30.0444, 31.2357, "Cairo"),
        (31.2001, 29.9187, "Alexandria"),
        (30.0131, 31.2089, "Giza"),
        (25.6872, 32.6396, "Luxor"),
        (24.0889, 32.8998, "Aswan"),
    ),
    "Nigeria": _cities(
        (6.5244, 3.3792, "Lagos"),
        (9.0765, 7.3986, "Abuja"),
        (12.0022, 8.5920, "Kano"),
        (7.3775, 3.9470, "Ibadan"),
        (4.8156, 7.0498, "Port Harcourt"),
    ),
    "South Africa": _cities(
        (-26.2041, 28.0473, "Johannesburg"),
        (-33.9249, 18.4241, "Cape Town"),
        (-29.8587, 31.0218, "Durban"),
        (-25.7479, 28.2293, "Pretoria"),
        (-33.9608, 25.6022, "Gqeberha"),
    ),
    "China": _cities(
        (39.9042, 116.4074, "Beijing"),
        (31.2304, 121.4737, "Shanghai"),
        (23.1291, 113.2644, "Guangzhou"),
        (30.5728, 104.0668, "Chengdu"),
        (34.3416, 108.9398, "Xi'an"),
    ),
    "India": _cities(
        (28.6139, 77.2090, "New Delhi"),
        (19.0760, 72.8777, "Mumbai"),
        (13.0827, 80.2707, "Chennai"),
        (12.9716, 77.5946, "Bangalore"),
        (22.5726, 88.3639, "Kolkata"),
    ),
    "Pakistan": _cities(
        (24.8607, 67.0011, "Karachi"),
        (31.5204, 74.3587, "Lahore"),
        (33.6844, 73.0479, "Islamabad"),
        (31.4180, 73.0791, "Faisalabad"),
        (34.0151, 71.5249, "Peshawar"),
    ),
    "Japan": _cities(
        (35.6762, 139.6503, "Tokyo"),
        (34.6937, 135.5023, "Osaka"),
        (35.0116, 135.7681, "Kyoto"),
        (35.1815, 136.9066, "Nagoya"),
        (43.0642, 141.3469, "Sapporo"),
    ),
    "South Korea": _cities(
        (37.5665, 126.9780, "Seoul"),
        (35.1796, 129.0756, "Busan"),
        (37.4563, 126.7052, "Incheon"),
        (35.8714, 128.6014, "Daegu"),
        (36.3504, 127.3845, "Daejeon"),
    ),
    "Vietnam": _cities(
        (21.0278, 105.8342, "Hanoi"),
        (10.8231, 106.6297, "Ho Chi Minh City"),
        (16.0544, 108.2022, "Da Nang"),
        (20.8449, 106.6881, "Haiphong"),
        (10.0452, 105.7469, "Can Tho"),
    ),
    "Indonesia": _cities(
        (-6.2088, 106.8456, "Jakarta"),
        (-7.2575, 112.7521, "Surabaya"),
        (-6.9175, 107.6191, "Bandung"),
        (3.5952, 98.6722, "Medan"),
        (-5.1477, 119.4327, "Makassar"),
    ),
    "Australia": _cities(
        (-33.8688, 151.2093, "Sydney"),
        (-37.8136, 144.9631, "Melbourne"),
        (-27.4698, 153.0251, "Brisbane"),
        (-31.9505, 115.8605, "Perth"),
        (-34.9285, 138.6007, "Adelaide"),
    ),
}

# ISO 3166-1 alpha-2 codes (plus the common "UK") for every table entry
COUNTRY_CODES = {
    "US": "United States",
    "CA": "Canada",
    "MX": "Mexico",
    "BR": "Brazil",
    "AR": "Argentina",
    "GB": "United Kingdom",
    "UK": "United Kingdom",
    "DE": "Germany",
    "FR": "France",
    "IT": "Italy",
    "ES": "Spain",
    "NL": "Netherlands",
    "PL": "Poland",
    "CZ": "Czech Republic",
    "RU": "Russia",
    "TR": "Turkey",
    "EG": "Egypt",
    "NG": "Nigeria",
    "ZA": "South Africa",
    "CN": "China",
    "IN": "India",
    "PK": "Pakistan",
    "JP": "Japan",
    "KR": "South Korea",
    "VN": "Vietnam",
    "ID": "Indonesia",
    "AU": "Australia",
}

# Lower-cased, whitespace-collapsed alias -> table key
_ALIASES = {
    "usa": "United States",
    "us": "United States",
    "u.s.": "United States",
    "u.s.a.": "United States",
    "united states of america": "United States",
    "america": "United States",
    "uk": "United Kingdom",
    "u.k.": "United Kingdom",
    "great britain": "United Kingdom",
    "britain": "United Kingdom",
    "england": "United Kingdom",
    "scotland": "United Kingdom",
    "wales": "United Kingdom",
    "northern ireland": "United Kingdom",
    "united kingdom of great britain and northern ireland": "United Kingdom",
    "czechia": "Czech Republic",
    "česko": "Czech Republic",
    "deutschland": "Germany",
    "españa": "Spain",
    "italia": "Italy",
    "brasil": "Brazil",
    "méxico": "Mexico",
    "the netherlands": "Netherlands",
    "holland": "Netherlands",
    "nederland": "Netherlands",
    "polska": "Poland",
    "russian federation": "Russia",
    "türkiye": "Turkey",
    "turkiye": "Turkey",
    "people's republic of china": "China",
    "prc": "China",
    "republic of korea": "South Korea",
    "korea, republic of": "South Korea",
    "korea": "South Korea",
    "viet nam": "Vietnam",
    "nippon": "Japan",
    "bharat": "India",
}


def normalize_country_name(name: str) -> str:
    """Map a known alias to its table key; other names pass through stripped."""
    key = " ".join(name.strip().lower().split())
    if key in _ALIASES:
        return _ALIASES[key]
    # Case-insensitive match on the table keys themselves
    for country in COUNTRY_SAMPLES:
        if country.lower() == key:
            return country
    return name.strip()


def lookup(country_name: str | None, country_code: str | None = "") -> list[SampleLocation] | None:
    """
    Find sample locations for a country.

    Tried in order: the alias-normalised name, the raw name, then the
    country code.

    Args:
        country_name: Country name as reported by a geocoder
        country_code: ISO alpha-2 code, may be empty

    Returns:
        list[SampleLocation] | None: The country's sample locations, or None
            if the country is not in the table

    Example:
        >>> lookup("USA", "") == lookup("United States", "")
        True
        >>> lookup("Atlantis", "XX") is None
        True
    """
    if country_name:
        normalized = normalize_country_name(country_name)
        if normalized in COUNTRY_SAMPLES:
            return list(COUNTRY_SAMPLES[normalized])

        if country_name in COUNTRY_SAMPLES:
            return list(COUNTRY_SAMPLES[country_name])

    if country_code:
        code = country_code.strip().upper()
        if code in COUNTRY_CODES:
            return list(COUNTRY_SAMPLES[COUNTRY_CODES[code]])

    return None


def lookup_identity(country: CountryIdentity | None) -> list[SampleLocation] | None:
    """``lookup`` for a CountryIdentity."""
    if country is None:
        return None
    return lookup(country.name, country.iso_code)


def list_countries() -> list[str]:
    """Names of all countries with sample locations."""
    return sorted(COUNTRY_SAMPLES)
