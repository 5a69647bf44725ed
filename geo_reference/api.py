"""
FastAPI service exposing the reference-data query engine (read-only).

Endpoints:
  GET /countries                     - All countries, optionally by region/subregion/currency/phone code
  GET /countries/search              - Substring search on country names, capitals, nationalities
  GET /countries/{code}              - Single country by iso2/iso3
  GET /countries/{code}/info         - Country plus state and city counts
  GET /countries/{code}/states       - States of a country
  GET /countries/{code}/cities       - Cities of a country
  GET /states/search                 - State search, optionally narrowed by country
  GET /states/{state_id}/cities      - Cities of a state
  GET /cities/search                 - City search, optionally narrowed by country/state
  GET /regions                       - Regions, plus unique region/subregion names
  GET /languages/{code}              - Single language
  GET /currencies, /currencies/{code}
  GET /timezones, /timezones/{zone}/countries
  GET /statistics                    - Aggregate counts
  GET /health
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from geo_reference.config import get_settings
from geo_reference.engine import CountryStateData, get_engine
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


# ── Lifespan ──────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build the engine before the first request is served."""
    logger.info("Starting up API server...")
    get_engine()
    yield
    logger.info("API server shut down.")


# ── App ───────────────────────────────────────────────────────────────

app = FastAPI(
    title="Geo Reference API",
    description="Look up countries, states, cities, languages, currencies and timezones",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ── Helpers ───────────────────────────────────────────────────────────

def _limit(items: list) -> list:
    return items[: get_settings().api.max_results]


def _found(item, what: str):
    if item is None:
        raise HTTPException(404, f"{what} not found")
    return item


# ══════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ══════════════════════════════════════════════════════════════════════

@app.get("/countries", response_model=list[Country])
def list_countries(
    region: Optional[str] = Query(None, description="Exact region name"),
    subregion: Optional[str] = Query(None, description="Exact subregion name"),
    currency: Optional[str] = Query(None, description="Currency code, e.g. EUR"),
    phone_code: Optional[str] = Query(None, description="Dialing code, with or without '+'"),
    engine: CountryStateData = Depends(get_engine),
):
    """
    All countries in dataset order. Filters are applied in turn and
    combine with AND.
    """
    countries = engine.get_all_countries()
    if region is not None:
        keep = {c.id for c in engine.get_countries_by_region(region)}
        countries = [c for c in countries if c.id in keep]
    if subregion is not None:
        keep = {c.id for c in engine.get_countries_by_subregion(subregion)}
        countries = [c for c in countries if c.id in keep]
    if currency is not None:
        keep = {c.id for c in engine.get_countries_by_currency(currency)}
        countries = [c for c in countries if c.id in keep]
    if phone_code is not None:
        keep = {c.id for c in engine.get_countries_by_phone_code(phone_code)}
        countries = [c for c in countries if c.id in keep]
    return countries


@app.get("/countries/search", response_model=list[Country])
def search_countries(
    q: str = Query("", max_length=200, description="Name, native name, capital or nationality"),
    engine: CountryStateData = Depends(get_engine),
):
    return _limit(engine.search_countries(q))


@app.get("/countries/{code}", response_model=Country)
def get_country(code: str, engine: CountryStateData = Depends(get_engine)):
    return _found(engine.get_country_by_code(code), "Country")


@app.get("/countries/{code}/info", response_model=CountryInfo)
def get_country_info(code: str, engine: CountryStateData = Depends(get_engine)):
    return _found(engine.get_country_info(code), "Country")


@app.get("/countries/{code}/states", response_model=list[State])
def get_country_states(code: str, engine: CountryStateData = Depends(get_engine)):
    return engine.get_states_by_country(code)


@app.get("/countries/{code}/cities", response_model=list[City])
def get_country_cities(code: str, engine: CountryStateData = Depends(get_engine)):
    return engine.get_cities_by_country(code)


@app.get("/states/search", response_model=list[State])
def search_states(
    q: str = Query("", max_length=200),
    country: Optional[str] = Query(None, description="Narrow to this country code when it resolves"),
    engine: CountryStateData = Depends(get_engine),
):
    return _limit(engine.search_states(q, country))


@app.get("/states/{state_id}/cities", response_model=list[City])
def get_state_cities(state_id: int, engine: CountryStateData = Depends(get_engine)):
    return engine.get_cities_by_state(state_id)


@app.get("/cities/search", response_model=list[City])
def search_cities(
    q: str = Query("", max_length=200),
    country: Optional[str] = Query(None, description="Country code; unknown codes match nothing"),
    state_id: Optional[int] = Query(None),
    engine: CountryStateData = Depends(get_engine),
):
    return _limit(engine.search_cities(q, country, state_id))


@app.get("/regions")
def list_regions(engine: CountryStateData = Depends(get_engine)):
    return {
        "regions": [r.model_dump(by_alias=True) for r in engine.get_all_regions()],
        "unique_regions": engine.get_unique_regions(),
        "unique_subregions": engine.get_unique_subregions(),
    }


@app.get("/regions/{region_id}", response_model=Region)
def get_region(region_id: str, engine: CountryStateData = Depends(get_engine)):
    return _found(engine.get_region_by_id(region_id), "Region")


@app.get("/languages", response_model=list[Language])
def list_languages(
    q: Optional[str] = Query(None, max_length=200),
    engine: CountryStateData = Depends(get_engine),
):
    if q is None:
        return engine.get_all_languages()
    return _limit(engine.search_languages(q))


@app.get("/languages/{code}", response_model=Language)
def get_language(code: str, engine: CountryStateData = Depends(get_engine)):
    return _found(engine.get_language_by_code(code), "Language")


@app.get("/currencies", response_model=list[Currency])
def list_currencies(engine: CountryStateData = Depends(get_engine)):
    return engine.get_all_currencies()


@app.get("/currencies/{code}", response_model=Currency)
def get_currency(code: str, engine: CountryStateData = Depends(get_engine)):
    return _found(engine.get_currency_by_code(code), "Currency")


@app.get("/timezones", response_model=list[Timezone])
def list_timezones(engine: CountryStateData = Depends(get_engine)):
    return engine.get_all_timezones()


@app.get("/timezones/{zone_name:path}/countries", response_model=list[Country])
def get_timezone_countries(zone_name: str, engine: CountryStateData = Depends(get_engine)):
    """Zone names contain a slash (Europe/Paris), hence the path converter."""
    return engine.get_countries_by_timezone(zone_name)


@app.get("/statistics", response_model=Statistics)
def statistics(engine: CountryStateData = Depends(get_engine)):
    return engine.get_statistics()


@app.get("/health")
def health_check(engine: CountryStateData = Depends(get_engine)):
    stats = engine.get_statistics()
    return {"status": "ok", "countries": stats.total_countries, "states": stats.total_states}
