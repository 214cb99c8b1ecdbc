"""
Tests for the sample location table.
"""

import pytest

from airback.samples import (
    COUNTRY_CODES,
    COUNTRY_SAMPLES,
    list_countries,
    lookup,
    lookup_identity,
    normalize_country_name,
)
from airback.types import CountryIdentity, SampleLocation


class TestTable:
    """Tests for the reference data itself."""

    @pytest.mark.parametrize("country", sorted(COUNTRY_SAMPLES))
    def test_five_samples_per_country(self, country):
        assert len(COUNTRY_SAMPLES[country]) == 5

    @pytest.mark.parametrize("country", sorted(COUNTRY_SAMPLES))
    def test_coordinates_in_range(self, country):
        for loc in COUNTRY_SAMPLES[country]:
            assert -90 <= loc.latitude <= 90
            assert -180 <= loc.longitude <= 180
            assert loc.label

    def test_every_code_points_at_a_country(self):
        assert set(COUNTRY_CODES.values()) <= set(COUNTRY_SAMPLES)

    def test_list_countries_sorted(self):
        countries = list_countries()
        assert countries == sorted(countries)
        assert "United Kingdom" in countries


class TestNormalizeCountryName:
    @pytest.mark.parametrize(
        "alias,expected",
        [
            ("USA", "United States"),
            ("US", "United States"),
            ("United States of America", "United States"),
            ("UK", "United Kingdom"),
            ("  great   britain ", "United Kingdom"),
            ("Czechia", "Czech Republic"),
            ("Türkiye", "Turkey"),
            ("germany", "Germany"),
        ],
    )
    def test_aliases(self, alias, expected):
        assert normalize_country_name(alias) == expected

    def test_unknown_passes_through(self):
        assert normalize_country_name(" Atlantis ") == "Atlantis"


class TestLookup:
    """Tests for lookup order and alias resolution."""

    def test_alias_matches_canonical(self):
        assert lookup("USA", "") == lookup("United States", "")

    def test_returns_sample_locations(self):
        locations = lookup("United Kingdom", "GB")

        assert all(isinstance(loc, SampleLocation) for loc in locations)
        assert locations[0].label == "London"

    def test_czechia(self):
        assert lookup("Czechia", "")[0].label == "Prague"

    def test_falls_back_to_code(self):
        # Name in a language the alias table does not know
        assert lookup("Royaume-Uni", "GB") == lookup("United Kingdom", "")

    def test_code_case_insensitive(self):
        assert lookup("", "fr") == lookup("France", "")

    def test_name_wins_over_code(self):
        assert lookup("France", "DE")[0].label == "Paris"

    def test_unknown_country(self):
        assert lookup("Atlantis", "XX") is None

    def test_empty_inputs(self):
        assert lookup("", "") is None
        assert lookup(None, None) is None

    def test_returns_copy(self):
        locations = lookup("Japan", "JP")
        locations.clear()

        assert len(lookup("Japan", "JP")) == 5

    def test_lookup_identity(self):
        assert lookup_identity(CountryIdentity("UK", "")) == lookup("United Kingdom", "")
        assert lookup_identity(None) is None
