"""
Lookup structures over the reference collections.

Built once from a ``Dataset``; read-only afterwards. Every grouped index keeps
dataset order so "all matches" queries return the same sequence a linear scan
would.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from geo_reference.dataset import Dataset
from geo_reference.exceptions import DatasetError
from geo_reference.models import City, Country, CountryCities, Language, Region, State

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceIndexes:
    code_index: Mapping[str, Country]
    country_id_index: Mapping[int, Country]
    state_id_index: Mapping[int, State]
    states_by_country_id: Mapping[int, tuple[State, ...]]
    hierarchy_by_country_id: Mapping[int, tuple[CountryCities, ...]]
    cities_by_state_id: Mapping[int, tuple[City, ...]]
    cities_by_country_id: Mapping[int, tuple[City, ...]]
    region_id_index: Mapping[str, Region]
    language_code_index: Mapping[str, Language]

    def states_for_country(self, country_id: int) -> tuple[State, ...]:
        return self.states_by_country_id.get(country_id, ())

    def hierarchy_for_country(self, country_id: int) -> tuple[CountryCities, ...]:
        return self.hierarchy_by_country_id.get(country_id, ())

    def cities_for_state(self, state_id: int) -> tuple[City, ...]:
        return self.cities_by_state_id.get(state_id, ())

    def cities_for_country(self, country_id: int) -> tuple[City, ...]:
        return self.cities_by_country_id.get(country_id, ())


def build_indexes(dataset: Dataset) -> ReferenceIndexes:
    try:
        return _build(dataset)
    except (TypeError, AttributeError) as e:
        raise DatasetError(f"Cannot index dataset: {e}") from e


def _build(dataset: Dataset) -> ReferenceIndexes:
    code_index: dict[str, Country] = {}
    country_id_index: dict[int, Country] = {}
    for country in dataset.countries:
        for code in (country.iso2, country.iso3):
            key = code.upper()
            if not key:
                continue
            existing = code_index.get(key)
            if existing is None:
                code_index[key] = country
            elif existing.id != country.id:
                logger.warning(
                    "Country code %s of %s already indexed for %s; keeping the first",
                    key, country.name, existing.name,
                )
        country_id_index.setdefault(country.id, country)

    state_id_index: dict[int, State] = {}
    states_by_country_id: dict[int, list[State]] = {}
    for state in dataset.states:
        state_id_index.setdefault(state.id, state)
        states_by_country_id.setdefault(state.country_id, []).append(state)

    # A state id seen twice in the hierarchy resolves to its first occurrence.
    hierarchy_by_country_id: dict[int, list[CountryCities]] = {}
    cities_by_state_id: dict[int, tuple[City, ...]] = {}
    for node in dataset.cities:
        hierarchy_by_country_id.setdefault(node.id, []).append(node)
        for state_node in node.states:
            cities_by_state_id.setdefault(state_node.id, tuple(state_node.cities))

    # Per-country city lists come from the first hierarchy entry of that country.
    cities_by_country_id: dict[int, tuple[City, ...]] = {}
    for country_id, nodes in hierarchy_by_country_id.items():
        cities_by_country_id[country_id] = tuple(
            city for state_node in nodes[0].states for city in state_node.cities
        )

    region_id_index: dict[str, Region] = {}
    for region in dataset.regions:
        region_id_index.setdefault(region.id, region)

    language_code_index: dict[str, Language] = {}
    for language in dataset.languages:
        language_code_index.setdefault(language.code, language)

    logger.debug(
        "Built indexes: %d country codes, %d states, %d states with cities",
        len(code_index), len(state_id_index), len(cities_by_state_id),
    )

    return ReferenceIndexes(
        code_index=MappingProxyType(code_index),
        country_id_index=MappingProxyType(country_id_index),
        state_id_index=MappingProxyType(state_id_index),
        states_by_country_id=MappingProxyType(
            {k: tuple(v) for k, v in states_by_country_id.items()}
        ),
        hierarchy_by_country_id=MappingProxyType(
            {k: tuple(v) for k, v in hierarchy_by_country_id.items()}
        ),
        cities_by_state_id=MappingProxyType(cities_by_state_id),
        cities_by_country_id=MappingProxyType(cities_by_country_id),
        region_id_index=MappingProxyType(region_id_index),
        language_code_index=MappingProxyType(language_code_index),
    )
