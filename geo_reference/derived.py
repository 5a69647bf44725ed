"""
Catalogs derived from denormalized per-country fields.

Currencies and timezones are not stored on their own; they are collected by
scanning countries in dataset order. The first country seen for a key wins,
later duplicates never override it.
"""

from __future__ import annotations

from typing import Iterable

from geo_reference.models import Country, Currency, Timezone


def build_currency_catalog(countries: Iterable[Country]) -> dict[str, Currency]:
    catalog: dict[str, Currency] = {}
    for country in countries:
        if country.currency not in catalog:
            catalog[country.currency] = Currency.from_country(country)
    return catalog


def build_timezone_catalog(countries: Iterable[Country]) -> dict[str, Timezone]:
    catalog: dict[str, Timezone] = {}
    for country in countries:
        for tz in country.timezones:
            if tz.zone_name not in catalog:
                catalog[tz.zone_name] = tz
    return catalog


def unique_values(countries: Iterable[Country], field: str) -> list[str]:
    """Distinct values of ``field`` across countries, in first-occurrence order."""
    return list(dict.fromkeys(getattr(c, field) for c in countries))
