"""
Query engine over the geographic reference data.

``CountryStateData`` answers lookup, filter, search and validation queries
against indexes built once in its constructor. Every query is total:
a missing single entity is ``None`` and a filter with no matches is ``[]``.
Nothing here raises for "not found".

Code lookups are case-insensitive (country codes upper-cased, language codes
lower-cased). Searches are case-insensitive substring matches.

Usage:
    from geo_reference.engine import get_engine

    engine = get_engine()
    engine.get_country_by_code("us")
    engine.search_states("cali", "US")
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Union

from geo_reference.dataset import Dataset, load_dataset
from geo_reference.derived import build_currency_catalog, build_timezone_catalog, unique_values
from geo_reference.indexes import build_indexes
from geo_reference.models import (
    City,
    Country,
    CountryInfo,
    Currency,
    Language,
    Region,
    State,
    Statistics,
    Timezone,
)

logger = logging.getLogger(__name__)


class CountryStateData:
    def __init__(self, dataset: Dataset):
        self._data = dataset
        self._idx = build_indexes(dataset)
        self._currencies = build_currency_catalog(dataset.countries)
        self._timezones = build_timezone_catalog(dataset.countries)
        self._unique_regions = unique_values(dataset.countries, "region")
        self._unique_subregions = unique_values(dataset.countries, "subregion")

    @property
    def raw_data(self) -> Dataset:
        """The five input collections, unmodified."""
        return self._data

    # ── Countries ─────────────────────────────────────────────────────

    def get_all_countries(self) -> list[Country]:
        return list(self._data.countries)

    def get_country_by_code(self, code: str) -> Optional[Country]:
        """Look up a country by iso2 or iso3 code, any case."""
        return self._idx.code_index.get(code.upper())

    def get_country_by_id(self, country_id: int) -> Optional[Country]:
        return self._idx.country_id_index.get(country_id)

    def get_countries_by_region(self, region_name: str) -> list[Country]:
        return [c for c in self._data.countries if c.region == region_name]

    def get_countries_by_subregion(self, subregion_name: str) -> list[Country]:
        return [c for c in self._data.countries if c.subregion == subregion_name]

    def search_countries(self, query: str) -> list[Country]:
        """
        Case-insensitive substring match on name, native name, capital or
        nationality. An empty query matches every country.
        """
        q = query.lower()
        return [
            c for c in self._data.countries
            if q in c.name.lower()
            or q in c.native.lower()
            or q in c.capital.lower()
            or q in c.nationality.lower()
        ]

    def get_countries_by_currency(self, currency_code: str) -> list[Country]:
        return [c for c in self._data.countries if c.currency == currency_code]

    def get_countries_by_phone_code(self, phone_code: Union[str, int]) -> list[Country]:
        """``"+1"``, ``"1"`` and ``1`` are equivalent."""
        code = str(phone_code).replace("+", "", 1)
        return [c for c in self._data.countries if c.phone_code == code]

    # ── States ────────────────────────────────────────────────────────

    def get_all_states(self) -> list[State]:
        return list(self._data.states)

    def get_states_by_country(self, country_code: str) -> list[State]:
        country = self.get_country_by_code(country_code)
        if country is None:
            return []
        return list(self._idx.states_for_country(country.id))

    def get_states_by_country_id(self, country_id: int) -> list[State]:
        return list(self._idx.states_for_country(country_id))

    def get_state_by_id(self, state_id: int) -> Optional[State]:
        return self._idx.state_id_index.get(state_id)

    def get_state_by_code(self, state_code: str, country_code: str) -> Optional[State]:
        """State codes are only unique within a country, so both are required."""
        country = self.get_country_by_code(country_code)
        if country is None:
            return None
        for state in self._idx.states_for_country(country.id):
            if state.state_code == state_code:
                return state
        return None

    def search_states(self, query: str, country_code: Optional[str] = None) -> list[State]:
        """
        Substring search on state names.

        When ``country_code`` resolves, only that country's states are searched.
        When it is given but does not resolve, every state is searched.
        """
        q = query.lower()
        pool = self._data.states
        if country_code:
            country = self.get_country_by_code(country_code)
            if country is not None:
                pool = self._idx.states_for_country(country.id)
        return [s for s in pool if q in s.name.lower()]

    # ── Cities ────────────────────────────────────────────────────────

    def get_cities_by_state(self, state_id: int) -> list[City]:
        return list(self._idx.cities_for_state(state_id))

    def get_cities_by_country(self, country_code: str) -> list[City]:
        country = self.get_country_by_code(country_code)
        if country is None:
            return []
        return list(self._idx.cities_for_country(country.id))

    def search_cities(
        self,
        query: str,
        country_code: Optional[str] = None,
        state_id: Optional[int] = None,
    ) -> list[City]:
        """
        Substring search on city names, in hierarchy order.

        Unlike ``search_states``, a ``country_code`` that does not resolve
        yields no cities at all.
        """
        q = query.lower()
        nodes = self._data.cities
        if country_code:
            country = self.get_country_by_code(country_code)
            if country is None:
                return []
            nodes = self._idx.hierarchy_for_country(country.id)

        results: list[City] = []
        for node in nodes:
            for state_node in node.states:
                if state_id and state_node.id != state_id:
                    continue
                results.extend(city for city in state_node.cities if q in city.name.lower())
        return results

    # ── Regions ───────────────────────────────────────────────────────

    def get_all_regions(self) -> list[Region]:
        return list(self._data.regions)

    def get_region_by_id(self, region_id: Union[str, int]) -> Optional[Region]:
        """Region ids are stored as strings; an int id such as ``2`` matches ``"2"``."""
        return self._idx.region_id_index.get(str(region_id))

    def get_unique_regions(self) -> list[str]:
        """Distinct country region names, in first-occurrence order."""
        return list(self._unique_regions)

    def get_unique_subregions(self) -> list[str]:
        return list(self._unique_subregions)

    # ── Languages ─────────────────────────────────────────────────────

    def get_all_languages(self) -> list[Language]:
        return list(self._data.languages)

    def get_language_by_code(self, code: str) -> Optional[Language]:
        return self._idx.language_code_index.get(code.lower())

    def search_languages(self, query: str) -> list[Language]:
        q = query.lower()
        return [
            lang for lang in self._data.languages
            if q in lang.name.lower()
            or q in lang.native.lower()
            or q in lang.code.lower()
        ]

    # ── Currencies ────────────────────────────────────────────────────

    def get_all_currencies(self) -> list[Currency]:
        return list(self._currencies.values())

    def get_currency_by_code(self, currency_code: str) -> Optional[Currency]:
        """
        Currency fields of the first country using ``currency_code``.
        Reads the countries directly rather than the deduplicated catalog.
        """
        for country in self._data.countries:
            if country.currency == currency_code:
                return Currency.from_country(country)
        return None

    # ── Timezones ─────────────────────────────────────────────────────

    def get_all_timezones(self) -> list[Timezone]:
        return list(self._timezones.values())

    def get_countries_by_timezone(self, zone_name: str) -> list[Country]:
        return [
            c for c in self._data.countries
            if any(tz.zone_name == zone_name for tz in c.timezones)
        ]

    # ── Validation ────────────────────────────────────────────────────

    def is_valid_country_code(self, code: str) -> bool:
        return self.get_country_by_code(code) is not None

    def is_valid_state_code(self, state_code: str, country_code: str) -> bool:
        return self.get_state_by_code(state_code, country_code) is not None

    def is_valid_language_code(self, code: str) -> bool:
        return self.get_language_by_code(code) is not None

    def is_valid_currency_code(self, code: str) -> bool:
        return self.get_currency_by_code(code) is not None

    # ── Utilities ─────────────────────────────────────────────────────

    def get_country_flag(self, country_code: str) -> Optional[str]:
        country = self.get_country_by_code(country_code)
        return country.emoji if country else None

    def get_country_phone_format(self, country_code: str) -> Optional[str]:
        country = self.get_country_by_code(country_code)
        return f"+{country.phone_code}" if country else None

    def get_country_info(self, country_code: str) -> Optional[CountryInfo]:
        """The country's fields plus its state count and city count."""
        country = self.get_country_by_code(country_code)
        if country is None:
            return None

        state_count = len(self._idx.states_for_country(country.id))
        city_count = 0
        nodes = self._idx.hierarchy_for_country(country.id)
        if nodes:
            city_count = sum(len(state_node.cities) for state_node in nodes[0].states)

        return CountryInfo(
            **country.model_dump(),
            state_count=state_count,
            city_count=city_count,
        )

    def get_statistics(self) -> Statistics:
        return Statistics(
            total_countries=len(self._data.countries),
            total_states=len(self._data.states),
            total_languages=len(self._data.languages),
            total_regions=len(self._data.regions),
            total_currencies=len(self._currencies),
            total_timezones=len(self._timezones),
        )


# Singleton engine instance
_engine: Optional[CountryStateData] = None
_engine_lock = threading.Lock()


def get_engine() -> CountryStateData:
    """
    Process-wide engine over the configured dataset.
    Built on first call; concurrent first callers wait for one construction.
    """
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = CountryStateData(load_dataset())
                logger.info("Reference data engine ready")
    return _engine


def get_raw_data() -> Dataset:
    return get_engine().raw_data
