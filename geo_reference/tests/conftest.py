"""
Shared fixtures: a small hand-built dataset with the awkward cases the
engine has to handle (shared phone codes, a currency listed with
inconsistent names, a timezone shared by two countries, a state code reused
across countries, a state pointing at a missing country, null timezones and
null city lists).
"""

from __future__ import annotations

import logging

import pytest

from geo_reference.config import get_settings
from geo_reference.dataset import Dataset
from geo_reference.engine import CountryStateData


def _tz(zone: str, offset: int, abbr: str, name: str) -> dict:
    sign = "+" if offset >= 0 else "-"
    hours, minutes = divmod(abs(offset) // 60, 60)
    return {
        "zoneName": zone,
        "gmtOffset": offset,
        "gmtOffsetName": f"UTC{sign}{hours:02d}:{minutes:02d}",
        "abbreviation": abbr,
        "tzName": name,
    }


def make_raw_data() -> dict:
    countries = [
        {
            "id": 233, "name": "United States", "iso3": "USA", "iso2": "US",
            "numeric_code": "840", "phone_code": "1", "capital": "Washington",
            "currency": "USD", "currency_name": "United States dollar", "currency_symbol": "$",
            "tld": ".us", "native": "United States", "region": "Americas", "region_id": "2",
            "subregion": "Northern America", "subregion_id": "6", "nationality": "American",
            "timezones": [
                _tz("America/New_York", -18000, "EST", "Eastern Standard Time (North America)"),
                _tz("America/Chicago", -21600, "CST", "Central Standard Time (North America)"),
            ],
            "translations": {"de": "Vereinigte Staaten von Amerika", "fr": "États-Unis"},
            "latitude": "38.00000000", "longitude": "-97.00000000",
            "emoji": "🇺🇸", "emojiU": "U+1F1FA U+1F1F8",
        },
        {
            "id": 39, "name": "Canada", "iso3": "CAN", "iso2": "CA",
            "numeric_code": "124", "phone_code": "1", "capital": "Ottawa",
            "currency": "CAD", "currency_name": "Canadian dollar", "currency_symbol": "$",
            "tld": ".ca", "native": "Canada", "region": "Americas", "region_id": "2",
            "subregion": "Northern America", "subregion_id": "6", "nationality": "Canadian",
            "timezones": [
                _tz("America/Toronto", -18000, "EST", "Eastern Standard Time (North America)"),
                _tz("America/New_York", -18000, "ET", "Eastern Time (duplicate entry)"),
            ],
            "translations": {"de": "Kanada", "fr": "Canada"},
            "latitude": "60.00000000", "longitude": "-95.00000000",
            "emoji": "🇨🇦", "emojiU": "U+1F1E8 U+1F1E6",
        },
        {
            "id": 207, "name": "Spain", "iso3": "ESP", "iso2": "ES",
            "numeric_code": "724", "phone_code": "34", "capital": "Madrid",
            "currency": "EUR", "currency_name": "Euro", "currency_symbol": "€",
            "tld": ".es", "native": "España", "region": "Europe", "region_id": "4",
            "subregion": "Southern Europe", "subregion_id": "16", "nationality": "Spanish",
            "timezones": [_tz("Europe/Madrid", 3600, "CET", "Central European Time")],
            "translations": {"de": "Spanien", "fr": "Espagne"},
            "latitude": "40.00000000", "longitude": "-4.00000000",
            "emoji": "🇪🇸", "emojiU": "U+1F1EA U+1F1F8",
        },
        {
            "id": 75, "name": "France", "iso3": "FRA", "iso2": "FR",
            "numeric_code": "250", "phone_code": "33", "capital": "Paris",
            "currency": "EUR", "currency_name": "Euro (alternate)", "currency_symbol": "EUR",
            "tld": ".fr", "native": "France", "region": "Europe", "region_id": "4",
            "subregion": "Western Europe", "subregion_id": "17", "nationality": "French, French",
            "timezones": [_tz("Europe/Paris", 3600, "CET", "Central European Time")],
            "translations": {"de": "Frankreich", "fr": "France"},
            "latitude": "46.00000000", "longitude": "2.00000000",
            "emoji": "🇫🇷", "emojiU": "U+1F1EB U+1F1F7",
        },
        {
            "id": 9, "name": "Antarctica", "iso3": "ATA", "iso2": "AQ",
            "numeric_code": "010", "phone_code": "672", "capital": None,
            "currency": "AAD", "currency_name": "Australian dollar", "currency_symbol": "$",
            "tld": ".aq", "native": "Antarctica", "region": "Polar", "region_id": "6",
            "subregion": "", "subregion_id": None, "nationality": "Antarctic",
            "timezones": None,
            "translations": {"de": "Antarktika"},
            "latitude": "-74.65000000", "longitude": "4.48000000",
            "emoji": "🇦🇶", "emojiU": "U+1F1E6 U+1F1F6",
        },
    ]

    def state(sid, name, country_id, cc, cname, code, stype="state"):
        return {
            "id": sid, "name": name, "country_id": country_id, "country_code": cc,
            "country_name": cname, "state_code": code, "type": stype,
            "latitude": None, "longitude": None,
        }

    # Interleaved on purpose: per-country results must keep this order.
    states = [
        state(1416, "California", 233, "US", "United States", "CA"),
        state(875, "British Columbia", 39, "CA", "Canada", "BC", "province"),
        state(1452, "New York", 233, "US", "United States", "NY"),
        state(1193, "Cádiz", 207, "ES", "Spain", "CA", "province"),
        state(866, "Ontario", 39, "CA", "Canada", "ON", "province"),
        state(1407, "Texas", 233, "US", "United States", "TX"),
        state(1200, "Madrid", 207, "ES", "Spain", "M", "province"),
        state(9999, "Atlantis", 999, "XX", "Nowhere", "AT", None),
        state(4796, "Île-de-France", 75, "FR", "France", "IDF", "metropolitan region"),
    ]

    def city(cid, name):
        return {"id": cid, "name": name, "latitude": "0.0", "longitude": "0.0"}

    cities = [
        {"id": 233, "states": [
            {"id": 1416, "cities": [
                city(113553, "Los Angeles"), city(114165, "San Francisco"), city(114151, "San Diego"),
            ]},
            {"id": 1452, "cities": [city(122795, "New York City"), city(122978, "Rochester")]},
            {"id": 1407, "cities": [city(111073, "Austin"), city(112048, "San Antonio")]},
        ]},
        {"id": 39, "states": [
            {"id": 875, "cities": [city(16152, "Vancouver"), city(16166, "Victoria")]},
            {"id": 866, "cities": [city(16640, "Toronto"), city(16541, "Ottawa"), city(16500, "London")]},
        ]},
        {"id": 207, "states": [
            {"id": 1193, "cities": [city(31055, "Cádiz"), city(31300, "Jerez de la Frontera")]},
            {"id": 1200, "cities": [city(31835, "Madrid"), city(32094, "San Sebastián de los Reyes")]},
        ]},
        {"id": 75, "states": [{"id": 4796, "cities": None}]},
        {"id": 9, "states": []},
    ]

    regions = [
        {"id": "1", "name": "Africa", "hasCountries": False},
        {"id": "2", "name": "Americas", "hasCountries": True},
        {"id": "4", "name": "Europe", "hasCountries": True},
        {"id": "6", "name": "Polar", "hasCountries": True},
    ]

    languages = [
        {"code": "en", "name": "English", "native": "English"},
        {"code": "es", "name": "Spanish", "native": "Español"},
        {"code": "fr", "name": "French", "native": "Français"},
    ]

    return {
        "countries": countries,
        "states": states,
        "cities": cities,
        "regions": regions,
        "languages": languages,
    }


@pytest.fixture
def raw_data() -> dict:
    return make_raw_data()


@pytest.fixture(scope="session")
def dataset() -> Dataset:
    return Dataset.from_raw(**make_raw_data())


@pytest.fixture(scope="session")
def engine(dataset) -> CountryStateData:
    return CountryStateData(dataset)


@pytest.fixture
def fresh_settings():
    """Settings rebuilt from the environment for the test, and again after it."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def root_logger():
    """Root logger with no handlers; its handlers and level are restored afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)
