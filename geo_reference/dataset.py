"""
Dataset loader for the reference collections.

Reads the five JSON datasets (countries, states, the country -> state -> city
hierarchy, regions, languages) and validates every record into its pydantic
model. The result is an immutable ``Dataset`` shared by the query engine.

Every failure here is a construction-time ``DatasetError``: a missing file,
malformed JSON, a collection that is not a list, or a record that does not
match its entity shape.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ValidationError

from geo_reference.exceptions import DatasetError
from geo_reference.models import Country, CountryCities, Language, Region, State

logger = logging.getLogger(__name__)

DATASET_FILES = {
    "countries": "countries.json",
    "states": "states.json",
    "cities": "cities.json",
    "regions": "regions.json",
    "languages": "languages.json",
}


@dataclass(frozen=True)
class Dataset:
    countries: tuple[Country, ...]
    states: tuple[State, ...]
    cities: tuple[CountryCities, ...]
    regions: tuple[Region, ...]
    languages: tuple[Language, ...]

    @classmethod
    def from_raw(
        cls,
        countries: Iterable[Any],
        states: Iterable[Any],
        cities: Iterable[Any],
        regions: Iterable[Any] = (),
        languages: Iterable[Any] = (),
    ) -> "Dataset":
        """Build a dataset from already-deserialized structures (dicts or models)."""
        return cls(
            countries=_validate_collection("countries", countries, Country),
            states=_validate_collection("states", states, State),
            cities=_validate_collection("cities", cities, CountryCities),
            regions=_validate_collection("regions", regions, Region),
            languages=_validate_collection("languages", languages, Language),
        )

    def as_dict(self) -> dict[str, tuple]:
        return {
            "countries": self.countries,
            "states": self.states,
            "cities": self.cities,
            "regions": self.regions,
            "languages": self.languages,
        }


def _validate_collection(name: str, rows: Iterable[Any], model: type[BaseModel]) -> tuple:
    if rows is None or isinstance(rows, (str, bytes, dict)):
        raise DatasetError(f"{name} must be a list of records", collection=name)
    try:
        iterator = iter(rows)
    except TypeError as e:
        raise DatasetError(f"{name} is not iterable: {e}", collection=name) from e

    out = []
    for position, row in enumerate(iterator):
        if isinstance(row, model):
            out.append(row)
            continue
        try:
            out.append(model.model_validate(row))
        except ValidationError as e:
            raise DatasetError(
                f"Invalid record #{position} in {name}",
                collection=name,
                details={"position": position, "errors": e.errors(include_url=False)},
            ) from e
    return tuple(out)


def _read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise DatasetError(f"Missing dataset file: {path}", details={"path": str(path)}) from e
    except (OSError, json.JSONDecodeError) as e:
        raise DatasetError(f"Cannot read dataset file {path}: {e}", details={"path": str(path)}) from e


def load_dataset(data_dir: Optional[Path] = None) -> Dataset:
    """Load and validate all five collections from ``data_dir``."""
    if data_dir is None:
        from geo_reference.config import get_settings

        data_dir = get_settings().data.data_dir
    data_dir = Path(data_dir)

    raw = {name: _read_json(data_dir / filename) for name, filename in DATASET_FILES.items()}
    dataset = Dataset.from_raw(**raw)

    logger.info(
        "Loaded dataset from %s: %d countries, %d states, %d hierarchy entries, "
        "%d regions, %d languages",
        data_dir,
        len(dataset.countries),
        len(dataset.states),
        len(dataset.cities),
        len(dataset.regions),
        len(dataset.languages),
    )
    return dataset
